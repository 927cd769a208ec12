import pytest

from assistkit.task_storage import ListParams, Task, TaskStorage
from assistkit.task_tool import (
    Action,
    TaskRequest,
    TaskResponse,
    TaskTool,
    request_from_dict,
)


@pytest.fixture
def storage(tmp_path):
    return TaskStorage(tmp_path / "tasks")


@pytest.fixture
def tool(storage):
    return TaskTool(storage)


def test_storage_is_required():
    with pytest.raises(ValueError, match="storage cannot be empty"):
        TaskTool(None)


def test_add_assigns_id_and_stores(tool, storage):
    resp = tool.invoke(TaskRequest(action=Action.ADD, task=Task(title="write docs")))
    assert resp.status == "success"
    assert resp.error == ""
    assert len(resp.task_list) == 1
    added = resp.task_list[0]
    assert added.id
    assert [task.id for task in storage.list(ListParams())] == [added.id]


def test_add_without_task(tool):
    resp = tool.invoke(TaskRequest(action=Action.ADD))
    assert resp.status == "error"
    assert resp.error == "task is required for add action"


def test_add_without_title(tool):
    resp = tool.invoke(TaskRequest(action=Action.ADD, task=Task(content="body")))
    assert resp.status == "error"
    assert resp.error == "title is required"


def test_update_requires_task_and_id(tool):
    assert tool.invoke(TaskRequest(action=Action.UPDATE)).error == "task is required for update action"
    assert tool.invoke(TaskRequest(action=Action.UPDATE, task=Task(title="x"))).error == "id is required"


def test_update_unknown_task(tool):
    resp = tool.invoke(TaskRequest(action=Action.UPDATE, task=Task(id="missing", title="x")))
    assert resp.status == "error"
    assert resp.error == "failed to update task: task not found: missing"


def test_update_changes_stored_task(tool, storage):
    added = tool.invoke(TaskRequest(action=Action.ADD, task=Task(title="old"))).task_list[0]
    resp = tool.invoke(
        TaskRequest(action=Action.UPDATE, task=Task(id=added.id, title="new", completed=True))
    )
    assert resp.status == "success"
    stored = storage.list(ListParams())
    assert stored[0].title == "new"
    assert stored[0].completed is True


def test_delete_then_list_is_empty(tool):
    added = tool.invoke(TaskRequest(action=Action.ADD, task=Task(title="gone"))).task_list[0]
    resp = tool.invoke(TaskRequest(action=Action.DELETE, task=Task(id=added.id)))
    assert resp.status == "success"
    listed = tool.invoke(TaskRequest(action=Action.LIST))
    assert listed.task_list == []


def test_delete_requires_id(tool):
    resp = tool.invoke(TaskRequest(action=Action.DELETE, task=Task()))
    assert resp.error == "task id is required for delete action"


def test_delete_unknown(tool):
    resp = tool.invoke(TaskRequest(action=Action.DELETE, task=Task(id="nope")))
    assert resp.status == "error"
    assert resp.error.startswith("failed to delete task:")


def test_list_with_limit(tool):
    for title in ("a", "b", "c"):
        tool.invoke(TaskRequest(action=Action.ADD, task=Task(title=title)))
    resp = tool.invoke(TaskRequest(action=Action.LIST, list=ListParams(limit=2)))
    assert resp.status == "success"
    assert len(resp.task_list) == 2


def test_unhandled_action_reports_error_with_success_status(tool):
    resp = tool.invoke(TaskRequest(action=Action.GET))
    assert resp.status == "success"
    assert resp.error == "unknown action: get"


def test_invoke_accepts_dict(tool):
    resp = tool.invoke({"action": "add", "task": {"title": "from dict"}})
    assert resp.status == "success"
    assert resp.task_list[0].title == "from dict"


def test_request_from_dict_parses_fields():
    req = request_from_dict(
        {"action": "list", "list": {"query": "q", "is_done": True, "limit": 3}}
    )
    assert req.action is Action.LIST
    assert req.task is None
    assert req.list == ListParams(query="q", is_done=True, limit=3)


def test_request_from_dict_keeps_unknown_action():
    req = request_from_dict({"action": "rename"})
    assert req.action == "rename"


def test_request_from_dict_rejects_bad_limit():
    with pytest.raises(ValueError):
        request_from_dict({"action": "list", "list": {"limit": "ten"}})


def test_response_to_dict():
    task = Task(id="1", title="t")
    data = TaskResponse(status="success", task_list=[task]).to_dict()
    assert data == {"status": "success", "task_list": [task.to_dict()], "error": ""}
    assert TaskResponse(status="error", error="e").to_dict()["task_list"] is None


def test_info(tool):
    info = tool.info()
    assert info.name == "task_manager"
    schema = info.to_json_schema()
    assert schema["properties"]["action"]["enum"] == ["add", "update", "delete", "list"]
    assert "limit" in schema["properties"]["list"]["properties"]
    assert schema["required"] == ["action"]