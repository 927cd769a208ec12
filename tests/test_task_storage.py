import json

import pytest

from assistkit.task_storage import (
    ListParams,
    Task,
    TaskNotFoundError,
    TaskStorage,
    get_default_storage,
    init_default_storage,
    task_from_dict,
)


def _write_tasks(directory, tasks):
    directory.mkdir(parents=True, exist_ok=True)
    lines = [json.dumps(task.to_dict()) for task in tasks]
    (directory / "tasks.jsonl").write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_task_round_trip():
    task = Task(id="1", title="t", content="c", completed=True, deadline="d", created_at="x")
    assert task_from_dict(task.to_dict()) == task


def test_task_json_keys():
    assert set(Task().to_dict()) == {
        "id", "title", "content", "completed", "deadline", "is_deleted", "created_at"
    }


def test_add_sets_created_at_and_persists(tmp_path):
    storage = TaskStorage(tmp_path)
    storage.add(Task(id="1", title="write docs", is_deleted=True))
    listed = storage.list(ListParams())
    assert [t.id for t in listed] == ["1"]
    assert "T" in listed[0].created_at
    assert listed[0].is_deleted is False

    reopened = TaskStorage(tmp_path).list()
    assert [t.to_dict() for t in reopened] == [t.to_dict() for t in listed]


def test_list_orders_open_before_done_and_newest_first(tmp_path):
    _write_tasks(
        tmp_path,
        [
            Task(id="a", title="a", created_at="2024-01-01T00:00:00Z"),
            Task(id="b", title="b", created_at="2024-02-01T00:00:00Z"),
            Task(id="c", title="c", completed=True, created_at="2024-03-01T00:00:00Z"),
        ],
    )
    assert [t.id for t in TaskStorage(tmp_path).list()] == ["b", "a", "c"]


def test_list_query_is_case_insensitive(tmp_path):
    storage = TaskStorage(tmp_path)
    storage.add(Task(id="1", title="Learn Eino"))
    storage.add(Task(id="2", title="other", content="LEARN more"))
    storage.add(Task(id="3", title="unrelated"))
    ids = {t.id for t in storage.list(ListParams(query="learn"))}
    assert ids == {"1", "2"}


def test_list_filters_by_done(tmp_path):
    storage = TaskStorage(tmp_path)
    storage.add(Task(id="1", title="open"))
    storage.add(Task(id="2", title="done", completed=True))
    assert [t.id for t in storage.list(ListParams(is_done=True))] == ["2"]
    assert [t.id for t in storage.list(ListParams(is_done=False))] == ["1"]


def test_list_limit(tmp_path):
    storage = TaskStorage(tmp_path)
    for i in range(5):
        storage.add(Task(id=str(i), title="t"))
    assert len(storage.list(ListParams(limit=2))) == 2
    assert len(storage.list(ListParams(limit=10))) == 5


def test_update_changes_only_given_fields(tmp_path):
    storage = TaskStorage(tmp_path)
    storage.add(Task(id="1", title="t", content="c", deadline="d"))
    created = storage.list()[0].created_at
    storage.update(Task(id="1", content="new", completed=True))

    (task,) = TaskStorage(tmp_path).list()
    assert task.title == "t"
    assert task.content == "new"
    assert task.deadline == "d"
    assert task.completed is True
    assert task.created_at == created


def test_update_leaves_no_temporary_files(tmp_path):
    storage = TaskStorage(tmp_path)
    storage.add(Task(id="1", title="t"))
    storage.update(Task(id="1", title="u"))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["tasks.jsonl"]


def test_update_missing_raises(tmp_path):
    with pytest.raises(TaskNotFoundError):
        TaskStorage(tmp_path).update(Task(id="nope", title="x"))


def test_delete_hides_task_and_cannot_repeat(tmp_path):
    storage = TaskStorage(tmp_path)
    storage.add(Task(id="1", title="t"))
    storage.delete("1")
    assert storage.list() == []
    assert TaskStorage(tmp_path).list() == []
    with pytest.raises(TaskNotFoundError):
        storage.delete("1")
    with pytest.raises(TaskNotFoundError):
        storage.update(Task(id="1", title="again"))


def test_corrupt_file_raises(tmp_path):
    (tmp_path / "tasks.jsonl").write_text("{broken\n", encoding="utf-8")
    with pytest.raises(ValueError):
        TaskStorage(tmp_path)


def test_default_storage(tmp_path):
    storage = init_default_storage(tmp_path / "tasks")
    assert get_default_storage() is storage
    assert storage.file_path == tmp_path / "tasks" / "tasks.jsonl"