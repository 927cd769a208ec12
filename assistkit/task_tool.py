"""A task-manager tool that adds, updates, deletes and lists tasks."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .task_storage import ListParams, Task, TaskNotFoundError, TaskStorage, task_from_dict
from .toolinfo import ParameterInfo, ParameterType, ToolInfo

_TOOL_NAME = "task_manager"
_TOOL_DESC = "task manager tool, you can add, get, update, delete, list tasks"


class Action(str, Enum):
    """What a task request asks for."""

    ADD = "add"
    GET = "get"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"


@dataclass
class TaskRequest:
    """A request to the task tool."""

    action: Union[Action, str]
    task: Optional[Task] = None
    list: Optional[ListParams] = None


@dataclass
class TaskResponse:
    """The outcome of a task request."""

    status: str = ""
    task_list: Optional[list[Task]] = None
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON form of the response."""
        return {
            "status": self.status,
            "task_list": None
            if self.task_list is None
            else [task.to_dict() for task in self.task_list],
            "error": self.error,
        }


def _list_params_from_dict(data: Any) -> Optional[ListParams]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"list must be an object, got {type(data).__name__}")
    is_done = data.get("is_done")
    if is_done is not None and not isinstance(is_done, bool):
        raise ValueError("is_done must be a boolean")
    limit = data.get("limit")
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int)):
        raise ValueError("limit must be an integer")
    return ListParams(query=str(data.get("query") or ""), is_done=is_done, limit=limit)


def request_from_dict(data: dict[str, Any]) -> TaskRequest:
    """Build a request from its JSON form."""
    if not isinstance(data, dict):
        raise ValueError(f"request must be an object, got {type(data).__name__}")
    raw_action = str(data.get("action") or "")
    try:
        action: Union[Action, str] = Action(raw_action)
    except ValueError:
        action = raw_action
    raw_task = data.get("task")
    return TaskRequest(
        action=action,
        task=None if raw_task is None else task_from_dict(raw_task),
        list=_list_params_from_dict(data.get("list")),
    )


def _action_value(action: Union[Action, str]) -> str:
    return action.value if isinstance(action, Action) else str(action)


def _error(message: str) -> TaskResponse:
    return TaskResponse(status="error", error=message)


class TaskTool:
    """Runs task requests against a task storage."""

    def __init__(self, storage: Optional[TaskStorage]):
        if storage is None:
            raise ValueError("storage cannot be empty")
        self.storage = storage

    def info(self) -> ToolInfo:
        """The description of the tool offered to a model."""
        task_params = {
            "id": ParameterInfo(ParameterType.STRING, "id of the task"),
            "title": ParameterInfo(ParameterType.STRING, "title of the task"),
            "content": ParameterInfo(ParameterType.STRING, "content of the task"),
            "completed": ParameterInfo(ParameterType.BOOLEAN, "completed status of the task"),
            "deadline": ParameterInfo(ParameterType.STRING, "deadline of the task"),
            "created_at": ParameterInfo(ParameterType.STRING, "created time of the task"),
        }
        list_params = {
            "query": ParameterInfo(ParameterType.STRING, "query to search"),
            "is_done": ParameterInfo(ParameterType.BOOLEAN, "filter by completed status"),
            "limit": ParameterInfo(ParameterType.INTEGER, "limit the number of results"),
        }
        return ToolInfo(
            name=_TOOL_NAME,
            desc=_TOOL_DESC,
            params={
                "action": ParameterInfo(
                    ParameterType.STRING,
                    "action to perform",
                    required=True,
                    enum=[
                        Action.ADD.value,
                        Action.UPDATE.value,
                        Action.DELETE.value,
                        Action.LIST.value,
                    ],
                ),
                "task": ParameterInfo(
                    ParameterType.OBJECT,
                    "task to add, update, or delete",
                    sub_params=task_params,
                ),
                "list": ParameterInfo(
                    ParameterType.OBJECT, "list parameters", sub_params=list_params
                ),
            },
        )

    def invoke(self, request: Union[TaskRequest, dict[str, Any]]) -> TaskResponse:
        """Run one request; failures are reported in the response."""
        if isinstance(request, dict):
            request = request_from_dict(request)
        response = TaskResponse()
        action = request.action

        if action == Action.ADD:
            if request.task is None:
                return _error("task is required for add action")
            if not request.task.title:
                return _error("title is required")
            request.task.id = str(uuid.uuid4())
            try:
                self.storage.add(request.task)
            except (OSError, ValueError) as exc:
                return _error(f"failed to add task: {exc}")
            response.task_list = [request.task]
        elif action == Action.UPDATE:
            if request.task is None:
                return _error("task is required for update action")
            if not request.task.id:
                return _error("id is required")
            try:
                self.storage.update(request.task)
            except (TaskNotFoundError, OSError) as exc:
                return _error(f"failed to update task: {exc}")
            response.task_list = [request.task]
        elif action == Action.DELETE:
            if request.task is None or not request.task.id:
                return _error("task id is required for delete action")
            try:
                self.storage.delete(request.task.id)
            except (TaskNotFoundError, OSError) as exc:
                return _error(f"failed to delete task: {exc}")
        elif action == Action.LIST:
            if request.list is None:
                request.list = ListParams()
            response.task_list = self.storage.list(request.list)
        else:
            response.error = f"unknown action: {_action_value(action)}"

        response.status = "success"
        return response