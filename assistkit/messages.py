"""Chat messages exchanged with a model and stored in conversation history."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class Role(str, Enum):
    """Who a message comes from."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


@dataclass
class Message:
    """One chat message, or one streamed chunk of a message."""

    role: Role
    content: str = ""
    name: str = ""
    tool_call_id: str = ""
    tool_calls: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; optional fields are left out when empty."""
        data: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.name:
            data["name"] = self.name
        if self.tool_calls:
            data["tool_calls"] = [dict(call) for call in self.tool_calls]
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data


def message_from_dict(data: dict[str, Any]) -> Message:
    """Build a message from its JSON form."""
    if not isinstance(data, dict):
        raise ValueError(f"message must be an object, got {type(data).__name__}")
    raw_role = data.get("role", "")
    try:
        role = Role(raw_role)
    except ValueError:
        raise ValueError(f"unknown message role: {raw_role!r}") from None
    tool_calls = data.get("tool_calls") or []
    if not isinstance(tool_calls, list):
        raise ValueError("tool_calls must be a list")
    return Message(
        role=role,
        content=str(data.get("content") or ""),
        name=str(data.get("name") or ""),
        tool_call_id=str(data.get("tool_call_id") or ""),
        tool_calls=[dict(call) for call in tool_calls],
    )


def user_message(content: str) -> Message:
    """A message from the user."""
    return Message(role=Role.USER, content=content)


def system_message(content: str) -> Message:
    """A system prompt message."""
    return Message(role=Role.SYSTEM, content=content)


def _single_value(values: Iterable[str], what: str) -> str:
    distinct = {value for value in values if value}
    if len(distinct) > 1:
        raise ValueError(f"cannot concat messages with different {what}: {sorted(distinct)}")
    return distinct.pop() if distinct else ""


def concat_messages(messages: Iterable[Message]) -> Message:
    """Join streamed chunks of one message into the whole message."""
    chunks = list(messages)
    if not chunks:
        raise ValueError("no messages to concatenate")
    if any(chunk is None for chunk in chunks):
        raise ValueError("unexpected empty chunk in message stream")
    roles = {chunk.role for chunk in chunks}
    if len(roles) > 1:
        raise ValueError(
            f"cannot concat messages with different roles: {sorted(role.value for role in roles)}"
        )
    return Message(
        role=chunks[0].role,
        content="".join(chunk.content for chunk in chunks),
        name=_single_value((chunk.name for chunk in chunks), "names"),
        tool_call_id=_single_value((chunk.tool_call_id for chunk in chunks), "tool call ids"),
        tool_calls=[dict(call) for chunk in chunks for call in chunk.tool_calls],
    )