"""Todo tools offered to a chat model: add, update and list todo items."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from .toolinfo import ParameterInfo, ParameterType, ToolInfo

logger = logging.getLogger(__name__)

ADD_TODO_RESULT = '{"msg": "add todo success"}'
UPDATE_TODO_RESULT = '{"msg": "update todo success"}'
LIST_TODO_RESULT = (
    '{"todos": [{"id": "1", "content": "在2024年12月10日之前完成Eino项目演示文稿的准备工作", '
    '"started_at": 1717401600, "deadline": 1717488000, "done": false}]}'
)


@dataclass
class TodoAddParams:
    """Arguments of the add_todo tool."""

    content: str = ""
    started_at: Optional[int] = None
    deadline: Optional[int] = None


@dataclass
class TodoUpdateParams:
    """Arguments of the update_todo tool."""

    id: str = ""
    content: Optional[str] = None
    started_at: Optional[int] = None
    deadline: Optional[int] = None
    done: Optional[bool] = None


def add_todo_tool_info() -> ToolInfo:
    """Description of the add_todo tool."""
    return ToolInfo(
        name="add_todo",
        desc="Add a todo item",
        params={
            "content": ParameterInfo(
                ParameterType.STRING, "The content of the todo item", required=True
            ),
            "started_at": ParameterInfo(
                ParameterType.INTEGER, "The started time of the todo item, in unix timestamp"
            ),
            "deadline": ParameterInfo(
                ParameterType.INTEGER, "The deadline of the todo item, in unix timestamp"
            ),
        },
    )


def update_todo_tool_info() -> ToolInfo:
    """Description of the update_todo tool."""
    return ToolInfo(
        name="update_todo",
        desc="Update a todo item, eg: content,deadline...",
        params={
            "id": ParameterInfo(ParameterType.STRING, "id of the todo", required=True),
            "content": ParameterInfo(ParameterType.STRING, "content of the todo"),
            "started_at": ParameterInfo(ParameterType.INTEGER, "start time in unix timestamp"),
            "deadline": ParameterInfo(
                ParameterType.INTEGER, "deadline of the todo in unix timestamp"
            ),
            "done": ParameterInfo(ParameterType.BOOLEAN, "done status"),
        },
    )


def list_todo_tool_info() -> ToolInfo:
    """Description of the list_todo tool."""
    return ToolInfo(
        name="list_todo",
        desc="List all todo items",
        params={
            "finished": ParameterInfo(
                ParameterType.BOOLEAN, "filter todo items if finished", required=False
            )
        },
    )


def _as_params(params: Any, cls: type) -> Any:
    if isinstance(params, cls):
        return params
    if isinstance(params, dict):
        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{key: value for key, value in params.items() if key in known})
    raise TypeError(f"expected {cls.__name__} or dict, got {type(params).__name__}")


def add_todo(params: Union[TodoAddParams, dict[str, Any]]) -> str:
    """Handle an add_todo call and return its JSON result."""
    logger.info("invoke tool add_todo: %s", _as_params(params, TodoAddParams))
    return ADD_TODO_RESULT


def update_todo(params: Union[TodoUpdateParams, dict[str, Any]]) -> str:
    """Handle an update_todo call and return its JSON result."""
    logger.info("invoke tool update_todo: %s", _as_params(params, TodoUpdateParams))
    return UPDATE_TODO_RESULT


def list_todo(arguments_json: str) -> str:
    """Handle a list_todo call and return its JSON result."""
    logger.info("invoke tool list_todo: %s", arguments_json)
    return LIST_TODO_RESULT