"""Task records kept in a JSON-lines file with an in-memory cache."""

from __future__ import annotations

import dataclasses
import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

_FILE_NAME = "tasks.jsonl"


@dataclass
class Task:
    """A task in the task manager."""

    id: str = ""
    title: str = ""
    content: str = ""
    completed: bool = False
    deadline: str = ""
    is_deleted: bool = False
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON form of the task."""
        return dataclasses.asdict(self)


def task_from_dict(data: dict[str, Any]) -> Task:
    """Build a task from its JSON form; absent fields take their defaults."""
    if not isinstance(data, dict):
        raise ValueError(f"task must be an object, got {type(data).__name__}")
    return Task(
        id=str(data.get("id") or ""),
        title=str(data.get("title") or ""),
        content=str(data.get("content") or ""),
        completed=bool(data.get("completed", False)),
        deadline=str(data.get("deadline") or ""),
        is_deleted=bool(data.get("is_deleted", False)),
        created_at=str(data.get("created_at") or ""),
    )


@dataclass
class ListParams:
    """Filters for listing tasks."""

    query: str = ""
    is_done: Optional[bool] = None
    limit: Optional[int] = None


class TaskNotFoundError(LookupError):
    """No live task has the given id."""

    def __init__(self, task_id: str):
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


def _now_rfc3339() -> str:
    stamp = datetime.now().astimezone().isoformat(timespec="seconds")
    return stamp[:-6] + "Z" if stamp.endswith("+00:00") else stamp


def _contains(text: str, part: str) -> bool:
    return part.lower() in text.lower()


class TaskStorage:
    """Stores tasks in data_dir/tasks.jsonl."""

    def __init__(self, data_dir: os.PathLike | str):
        directory = Path(data_dir)
        directory.mkdir(parents=True, exist_ok=True)
        self.file_path = directory / _FILE_NAME
        self._cache: dict[str, Task] = {}
        self._lock = threading.RLock()
        self._load()

    def _load(self) -> None:
        self.file_path.touch(exist_ok=True)
        with self.file_path.open(encoding="utf-8") as handle:
            for line in handle:
                try:
                    task = task_from_dict(json.loads(line))
                except ValueError as exc:
                    raise ValueError(f"failed to unmarshal task: {exc}") from exc
                self._cache[task.id] = task

    def add(self, task: Task) -> None:
        """Stamp the task's creation time, keep it and append it to the file."""
        with self._lock:
            task.created_at = _now_rfc3339()
            task.is_deleted = False
            self._cache[task.id] = task
            with self.file_path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(task.to_dict(), ensure_ascii=False) + "\n")
                handle.flush()
                os.fsync(handle.fileno())

    def list(self, params: Optional[ListParams] = None) -> list[Task]:
        """Live tasks matching the filters: open ones first, newest first."""
        params = params or ListParams()
        with self._lock:
            matching = [
                task
                for task in self._cache.values()
                if not task.is_deleted
                and (
                    not params.query
                    or _contains(task.title, params.query)
                    or _contains(task.content, params.query)
                )
                and (params.is_done is None or task.completed == params.is_done)
            ]
        newest_first = sorted(matching, key=lambda task: task.created_at, reverse=True)
        tasks = [task for task in newest_first if not task.completed]
        tasks += [task for task in newest_first if task.completed]
        if params.limit is not None and len(tasks) > params.limit:
            tasks = tasks[: params.limit]
        return tasks

    def update(self, task: Task) -> None:
        """Change the non-empty fields of a stored task and its completion."""
        with self._lock:
            existing = self._cache.get(task.id)
            if existing is None or existing.is_deleted:
                raise TaskNotFoundError(task.id)
            changes: dict[str, Any] = {
                name: getattr(task, name)
                for name in ("title", "content", "deadline")
                if getattr(task, name)
            }
            changes["completed"] = task.completed
            self._cache[task.id] = dataclasses.replace(existing, **changes)
            self._sync_to_disk()

    def delete(self, task_id: str) -> None:
        """Mark a task as deleted."""
        with self._lock:
            task = self._cache.get(task_id)
            if task is None or task.is_deleted:
                raise TaskNotFoundError(task_id)
            task.is_deleted = True
            self._sync_to_disk()

    def _sync_to_disk(self) -> None:
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        backup_path = self.file_path.with_name(self.file_path.name + ".bak")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                for task in self._cache.values():
                    handle.write(json.dumps(task.to_dict(), ensure_ascii=False) + "\n")
                handle.flush()
                os.fsync(handle.fileno())
            if self.file_path.exists():
                os.replace(self.file_path, backup_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        try:
            os.replace(tmp_path, self.file_path)
        except OSError as exc:
            try:
                os.replace(backup_path, self.file_path)
            except OSError as backup_exc:
                raise OSError(
                    f"failed to rename temp file and restore backup: {exc}, backup error: {backup_exc}"
                ) from exc
            raise
        backup_path.unlink(missing_ok=True)


_default_storage: Optional[TaskStorage] = None


def init_default_storage(data_dir: os.PathLike | str) -> TaskStorage:
    """Open the storage in data_dir and make it the default one."""
    global _default_storage
    _default_storage = TaskStorage(data_dir)
    return _default_storage


def get_default_storage() -> TaskStorage:
    """The default storage, opened in ./data/task on first use."""
    if _default_storage is None:
        return init_default_storage("./data/task")
    return _default_storage