"""Conversation history kept in memory and appended to JSON-lines files."""

from __future__ import annotations

import json
import os
import threading
from contextlib import suppress
from pathlib import Path
from typing import Any, Optional

from .messages import Message, message_from_dict

_SUFFIX = ".jsonl"


class Conversation:
    """Messages of one conversation, persisted one JSON object per line."""

    def __init__(self, conversation_id: str, file_path: os.PathLike | str, max_window_size: int):
        self.id = conversation_id
        self.file_path = Path(file_path)
        self.max_window_size = max_window_size
        self.messages: list[Message] = []
        self._lock = threading.Lock()

    def append(self, message: Message) -> None:
        """Add a message and append it to the file."""
        with self._lock:
            self.messages.append(message)
            self._save(message)

    def all_messages(self) -> list[Message]:
        """Every message of the conversation."""
        with self._lock:
            return list(self.messages)

    def recent_messages(self) -> list[Message]:
        """The last messages, at most the window size of them."""
        with self._lock:
            if len(self.messages) > self.max_window_size:
                return self.messages[len(self.messages) - self.max_window_size:]
            return list(self.messages)

    def load(self) -> None:
        """Read messages from the file, adding them to those held."""
        with self.file_path.open(encoding="utf-8") as handle:
            for line in handle:
                text = line.rstrip("\r\n")
                try:
                    message = message_from_dict(json.loads(text))
                except (ValueError, TypeError) as exc:
                    raise ValueError(f"failed to unmarshal message: {exc}") from exc
                self.messages.append(message)

    def to_dict(self) -> dict[str, Any]:
        """The JSON form of the conversation."""
        with self._lock:
            return {"id": self.id, "messages": [msg.to_dict() for msg in self.messages]}

    def _save(self, message: Message) -> None:
        line = json.dumps(message.to_dict(), ensure_ascii=False)
        with suppress(OSError):
            with self.file_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")


class SimpleMemory:
    """Keeps the conversations found in one directory."""

    def __init__(self, directory: os.PathLike | str = "", max_window_size: int = 0):
        self.directory = Path(directory or "/tmp/eino/memory")
        self.directory.mkdir(parents=True, exist_ok=True)
        self.max_window_size = max_window_size
        self._conversations: dict[str, Conversation] = {}
        self._lock = threading.Lock()

    def _path(self, conversation_id: str) -> Path:
        return self.directory / f"{conversation_id}{_SUFFIX}"

    def get_conversation(
        self, conversation_id: str, create_if_not_exist: bool = False
    ) -> Optional[Conversation]:
        """Return the conversation, loading it from its file on first use.

        Returns None only when its file had to be created and could not be.
        """
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                path = self._path(conversation_id)
                if create_if_not_exist and not path.exists():
                    try:
                        path.write_text("", encoding="utf-8")
                    except OSError:
                        return None
                conversation = Conversation(conversation_id, path, self.max_window_size)
                with suppress(OSError, ValueError):
                    conversation.load()
                self._conversations[conversation_id] = conversation
            return conversation

    def list_conversations(self) -> list[str]:
        """Ids of the conversations stored in the directory."""
        with self._lock:
            try:
                entries = sorted(os.scandir(self.directory), key=lambda entry: entry.name)
            except OSError:
                return []
            return [entry.name.removesuffix(_SUFFIX) for entry in entries if not entry.is_dir()]

    def delete_conversation(self, conversation_id: str) -> None:
        """Remove the conversation's file and forget it."""
        with self._lock:
            self._path(conversation_id).unlink()
            self._conversations.pop(conversation_id, None)


def get_default_memory() -> SimpleMemory:
    """Memory in data/memory with a window of six messages."""
    return SimpleMemory(directory="data/memory", max_window_size=6)