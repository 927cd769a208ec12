"""A tool that answers questions about the Eino project and copies project templates."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from .toolinfo import ParameterInfo, ParameterType, ToolInfo

_TOOL_NAME = "eino_tool"

DESC = """eino tool can get eino project info, 
action:
- get_example_project: get the example project url, path of eino-examples
- get_github_repo: get the github repo url, e.g. eino, eino-ext, eino-examples
- get_doc_url: get the doc url of eino website
- init_template: init the eino project template, to create files from template
"""

REPO_BASE = "https://git.example.com/eino"
DOC_BASE = "https://docs.example.com/eino/"

EINO_REPO: dict[str, str] = {
    "eino": f"{REPO_BASE}/eino",
    "eino-ext": f"{REPO_BASE}/eino-ext",
    "eino-examples": f"{REPO_BASE}/eino-examples",
}

EINO_DOC: dict[str, str] = {
    "eino_index": DOC_BASE,
    "quickstart": f"{DOC_BASE}quick_start/",
    "graph": f"{DOC_BASE}core_modules/chain_and_graph_orchestration/",
    "agent": f"{DOC_BASE}core_modules/flow_integration_components/",
    "components": f"{DOC_BASE}core_modules/components/",
    "integrate": f"{DOC_BASE}ecosystem_integration/",
}

_EXAMPLES_TREE = f"{EINO_REPO['eino-examples']}/tree/main"

EINO_EXAMPLE: dict[str, list[str]] = {
    "agent": [f"{_EXAMPLES_TREE}/flow/agent/react"],
    "components": [f"{_EXAMPLES_TREE}/components"],
    "graph": [f"{_EXAMPLES_TREE}/compose/graph/tool_call_agent.go"],
    "quickstart": [f"{_EXAMPLES_TREE}/quickstart"],
}

TEMPLATE: dict[str, list[str]] = {
    "react_agent": ["react_agent/main.go"],
    "simple_llm": ["simple_llm/main.go"],
    "http_agent": ["http_agent/main.go", "http_agent/README.md", "http_agent/client/main.go"],
}

_DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class EinoToolAction(str, Enum):
    """What an Eino tool request asks for."""

    GET_EXAMPLE_PROJECT = "get_example_project"
    GET_GITHUB_REPO = "get_github_repo"
    GET_DOC_URL = "get_doc_url"
    INIT_TEMPLATE = "init_template"


@dataclass
class EinoToolRequest:
    """A request to the Eino tool."""

    action: Union[EinoToolAction, str]
    example_type: str = ""
    repo_type: str = ""
    doc_type: str = ""
    template_type: str = ""


@dataclass
class EinoToolResponse:
    """The outcome of an Eino tool request."""

    message: str = ""
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON form of the response."""
        return {"message": self.message, "error": self.error}


def _request_from_dict(data: dict[str, Any]) -> EinoToolRequest:
    if not isinstance(data, dict):
        raise ValueError(f"request must be an object, got {type(data).__name__}")
    raw_action = str(data.get("action") or "")
    try:
        action: Union[EinoToolAction, str] = EinoToolAction(raw_action)
    except ValueError:
        action = raw_action
    return EinoToolRequest(
        action=action,
        example_type=str(data.get("example_type") or ""),
        repo_type=str(data.get("repo_type") or ""),
        doc_type=str(data.get("doc_type") or ""),
        template_type=str(data.get("template_type") or ""),
    )


class EinoAssistantTool:
    """Looks up Eino links and writes project templates into base_dir."""

    def __init__(
        self,
        base_dir: Union[os.PathLike, str] = "./data/eino",
        templates_dir: Optional[Union[os.PathLike, str]] = None,
    ):
        self.base_dir = Path(base_dir)
        self.templates_dir = Path(templates_dir) if templates_dir else _DEFAULT_TEMPLATES_DIR

    def info(self) -> ToolInfo:
        """The description of the tool offered to a model."""
        return ToolInfo(
            name=_TOOL_NAME,
            desc=DESC,
            params={
                "action": ParameterInfo(
                    ParameterType.STRING,
                    "The action of the request",
                    required=True,
                    enum=[action.value for action in EinoToolAction],
                ),
                "example_type": ParameterInfo(
                    ParameterType.STRING,
                    "The type of the example project, only for action: get_example_project",
                    enum=list(EINO_EXAMPLE),
                ),
                "repo_type": ParameterInfo(
                    ParameterType.STRING,
                    "The type of the repo, only for action: get_github_repo",
                    enum=list(EINO_REPO),
                ),
                "doc_type": ParameterInfo(
                    ParameterType.STRING,
                    "The type of the doc, only for action: get_doc_url",
                    enum=list(EINO_DOC),
                ),
                "template_type": ParameterInfo(
                    ParameterType.STRING,
                    "The template of the project, only for action: init_template",
                    enum=list(TEMPLATE),
                ),
            },
        )

    def invoke(self, request: Union[EinoToolRequest, dict[str, Any]]) -> EinoToolResponse:
        """Run one request; failures are reported in the response."""
        if isinstance(request, dict):
            request = _request_from_dict(request)
        action = request.action

        if action == EinoToolAction.GET_EXAMPLE_PROJECT:
            urls = EINO_EXAMPLE.get(request.example_type)
            if not urls:
                return EinoToolResponse(
                    error="invalid example type, can be one of: agent, components, graph, "
                    "quickstart. example repo is " + EINO_REPO["eino-examples"]
                )
            return EinoToolResponse(message=urls[0])
        if action == EinoToolAction.GET_GITHUB_REPO:
            url = EINO_REPO.get(request.repo_type)
            if not url:
                return EinoToolResponse(
                    error="invalid repo type, can be one of: eino, eino-ext, eino-examples. "
                    "eino repo url is " + EINO_REPO["eino"]
                )
            return EinoToolResponse(message=url)
        if action == EinoToolAction.GET_DOC_URL:
            url = EINO_DOC.get(request.doc_type)
            if not url:
                return EinoToolResponse(
                    error="invalid doc type, can be one of: eino_index, quickstart, graph, "
                    "agent, components, integrate. eino doc url is " + EINO_DOC["eino_index"]
                )
            return EinoToolResponse(message=url)
        if action == EinoToolAction.INIT_TEMPLATE:
            return self._init_template(request.template_type)
        return EinoToolResponse(
            error="invalid action, can be one of: get_example_project, get_github_repo, get_doc_url"
        )

    def _init_template(self, template_type: str) -> EinoToolResponse:
        files = TEMPLATE.get(template_type)
        if not files:
            return EinoToolResponse(
                error="invalid template type, can be one of: react_agent, simple_llm, http_agent"
            )
        for name in files:
            try:
                content = (self.templates_dir / name).read_bytes()
            except OSError as exc:
                return EinoToolResponse(error=f"failed to read template file: {exc}")
            target = self.base_dir / name
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                return EinoToolResponse(error=f"failed to create directory: {exc}")
            try:
                target.write_bytes(content)
            except OSError as exc:
                return EinoToolResponse(error=f"failed to write file: {exc}")
        abs_path = os.path.abspath(self.base_dir / template_type)
        return EinoToolResponse(message="success, init template, path is: " + abs_path)