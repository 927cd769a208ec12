"""A tool that clones or pulls git repositories into a base directory."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

from .toolinfo import ParameterInfo, ParameterType, ToolInfo

_TOOL_NAME = "gitclone"
_TOOL_DESC = "git clone or pull a repository"


class GitCloneAction(str, Enum):
    """What a git request asks for."""

    CLONE = "clone"
    PULL = "pull"


@dataclass
class GitCloneRequest:
    """A request to clone or pull a repository."""

    url: str = ""
    action: Union[GitCloneAction, str] = GitCloneAction.CLONE


@dataclass
class GitCloneResponse:
    """The outcome of a git request."""

    message: str = ""
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON form of the response."""
        return {"message": self.message, "error": self.error}


def with_git(url: str) -> str:
    """The URL with a ".git" suffix."""
    return url if url.endswith(".git") else url + ".git"


def is_valid_git_url(url: str) -> tuple[bool, str]:
    """Check a repository URL and return it in a form git can clone."""
    clean = url.removesuffix(".git")
    if len(clean.split("/")) < 2:
        return False, ""
    if url.startswith("git@"):
        if ":" in url:
            return True, with_git(url)
        return False, ""
    if url.startswith(("http://", "https://")):
        return True, with_git(url)
    return True, "https://" + with_git(url)


def extract_repo_dir(url: str) -> tuple[str, str]:
    """The group and repository name at the end of a URL."""
    parts = url.split("/")
    return parts[-2], parts[-1].removesuffix(".git")


def _request_from_dict(data: dict[str, Any]) -> GitCloneRequest:
    if not isinstance(data, dict):
        raise ValueError(f"request must be an object, got {type(data).__name__}")
    raw_action = str(data.get("action") or "")
    try:
        action: Union[GitCloneAction, str] = GitCloneAction(raw_action)
    except ValueError:
        action = raw_action
    return GitCloneRequest(url=str(data.get("url") or ""), action=action)


def _run_git(args: list[str]) -> tuple[bool, str, str]:
    """Run git; return success, a reason on failure and the combined output."""
    try:
        result = subprocess.run(
            ["git", *args], stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=False
        )
    except OSError as exc:
        return False, str(exc), ""
    output = (result.stdout or b"").decode("utf-8", errors="replace")
    if result.returncode != 0:
        return False, f"exit status {result.returncode}", output
    return True, "", output


class GitCloneTool:
    """Clones repositories into base_dir/<group>/<repo>, or pulls them."""

    def __init__(self, base_dir: Union[os.PathLike, str] = "./data/repos"):
        if not str(base_dir):
            raise ValueError("base dir cannot be empty")
        self.base_dir = Path(base_dir)

    def info(self) -> ToolInfo:
        """The description of the tool offered to a model."""
        return ToolInfo(
            name=_TOOL_NAME,
            desc=_TOOL_DESC,
            params={
                "url": ParameterInfo(
                    ParameterType.STRING, "The URL of the repository to clone", required=True
                ),
                "action": ParameterInfo(
                    ParameterType.STRING,
                    "The action to perform, 'clone' or 'pull'",
                    required=True,
                    enum=[action.value for action in GitCloneAction],
                ),
            },
        )

    def invoke(self, request: Union[GitCloneRequest, dict[str, Any]]) -> GitCloneResponse:
        """Run one request; failures are reported in the response."""
        if isinstance(request, dict):
            request = _request_from_dict(request)
        if not request.url:
            return GitCloneResponse(error="URL cannot be empty")

        valid, clone_url = is_valid_git_url(request.url)
        if not valid:
            return GitCloneResponse(error=f"Invalid Git URL format: {request.url}")

        group, name = extract_repo_dir(clone_url)
        repo_path = self.base_dir / group / name

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return GitCloneResponse(error=f"Failed to create directory: {exc}")

        if request.action == GitCloneAction.CLONE:
            if repo_path.exists():
                return GitCloneResponse(error="Repository already exists")
            ok, reason, output = _run_git(["clone", clone_url, str(repo_path)])
            if not ok:
                return GitCloneResponse(error=f"Clone failed: {reason}, output: {output}")
        elif request.action == GitCloneAction.PULL:
            if not repo_path.exists():
                return GitCloneResponse(error=f"repo does not exist: {repo_path}")
            ok, reason, output = _run_git(["-C", str(repo_path), "pull"])
            if not ok:
                return GitCloneResponse(error=f"Pull failed: {reason}, output: {output}")

        return GitCloneResponse(message=f"success, repo path: {os.path.abspath(repo_path)}")