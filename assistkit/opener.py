"""A tool that opens a file, directory or web address with the system's default application."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Any

from .toolinfo import ParameterInfo, ParameterType, ToolInfo

_TOOL_NAME = "open"
_TOOL_DESC = "open a file/dir/web url in the system by default application"


@dataclass
class OpenResponse:
    """The outcome of an open request."""

    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON form of the response."""
        return {"message": self.message}


def is_file_path(path: str) -> bool:
    """Whether the URI names a local file whose existence should be checked."""
    return path.startswith("file://") and "://" not in path


class OpenFileTool:
    """Opens URIs with the system 'open' command."""

    def info(self) -> ToolInfo:
        """The description of the tool offered to a model."""
        return ToolInfo(
            name=_TOOL_NAME,
            desc=_TOOL_DESC,
            params={
                "uri": ParameterInfo(
                    ParameterType.STRING,
                    "The uri of the file/dir/web url to open",
                    required=True,
                )
            },
        )

    def invoke(self, uri: str) -> OpenResponse:
        """Open the URI; failures are reported in the response."""
        if not uri:
            return OpenResponse(message="uri is required")
        if is_file_path(uri) and not os.path.exists(uri):
            return OpenResponse(message=f"file not exists: {uri}")
        try:
            result = subprocess.run(["open", uri], check=False)
        except OSError as exc:
            return OpenResponse(message=f"failed to open {uri}: {exc}")
        if result.returncode != 0:
            return OpenResponse(message=f"failed to open {uri}: exit status {result.returncode}")
        return OpenResponse(message=f"success, open {uri}")