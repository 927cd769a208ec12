"""The assistant's prompt and the variables it is filled from."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from .messages import Message, message_from_dict, system_message, user_message
from .redis_index import Document

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_ROLE = "Eino Expert Assistant"

_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "What you know and do",
        (
            "- The Eino framework and the projects around it",
            "- Setting up new projects and advising on good practice",
            "- Finding the right documentation and guiding implementation",
            "- Web search, cloning repositories, opening files and links, managing tasks",
        ),
    ),
    (
        "How to help",
        (
            "- First make sure the request is understood; ask when something is unclear,",
            "  and pick the approach that fits best.",
            "- Answer clearly and briefly, give examples where they help,",
            "  point to documentation, and suggest next steps when useful.",
            "- When a request is beyond you, say so and offer other routes if there are any.",
            "- Work through compound or hard questions step by step rather than answering hastily.",
        ),
    ),
    (
        "Context",
        (
            "- Date now: {date}",
            "- Documents that may help: |-",
            "==== doc start ====",
            "  {documents}",
            "==== doc end ====",
        ),
    ),
)


def _compose_system_prompt() -> str:
    parts = [f"# Role: {_ROLE}"]
    for title, lines in _SECTIONS:
        parts.append("")
        parts.append(f"## {title}")
        parts.extend(lines)
    return "\n" + "\n".join(parts) + "\n"


SYSTEM_PROMPT = _compose_system_prompt()

USER_TEMPLATE = "{content}"
HISTORY_KEY = "history"


@dataclass
class UserMessage:
    """A user's query together with the recent history of its conversation."""

    id: str
    query: str
    history: list[Message] = field(default_factory=list)


def input_to_query(user_message: UserMessage) -> str:
    """The text to search related documents with."""
    return user_message.query


def input_to_variables(user_message: UserMessage, now: Optional[datetime] = None) -> dict[str, Any]:
    """The template variables taken from the user's message."""
    moment = now if now is not None else datetime.now()
    return {
        "content": user_message.query,
        "history": user_message.history,
        "date": moment.strftime(DATE_FORMAT),
    }


def format_documents(documents: Iterable[Union[Document, str]]) -> str:
    """The documents' text, one after another."""
    return "\n".join(doc.content if isinstance(doc, Document) else str(doc) for doc in documents)


def _render(template: str, variables: dict[str, Any]) -> str:
    try:
        return template.format(**variables)
    except KeyError as exc:
        raise ValueError(f"missing template variable: {exc.args[0]}") from None


def _as_message(value: Union[Message, dict[str, Any]]) -> Message:
    return value if isinstance(value, Message) else message_from_dict(value)


def build_chat_messages(variables: dict[str, Any]) -> list[Message]:
    """The system prompt, the optional history and the user's message, filled in."""
    values = dict(variables)
    documents = values.get("documents")
    if documents is not None and not isinstance(documents, str):
        values["documents"] = format_documents(documents)

    messages = [system_message(_render(SYSTEM_PROMPT, values))]
    history = values.get(HISTORY_KEY)
    if history is not None:
        if not isinstance(history, (list, tuple)):
            raise ValueError("history must be a list of messages")
        messages.extend(_as_message(item) for item in history)
    messages.append(user_message(_render(USER_TEMPLATE, values)))
    return messages