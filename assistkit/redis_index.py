"""The Redis vector index that holds document chunks, and conversion of documents to and from it."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

REDIS_PREFIX = "eino:doc:"
INDEX_NAME = "vector_index"

CONTENT_FIELD = "content"
METADATA_FIELD = "metadata"
VECTOR_FIELD = "content_vector"
DISTANCE_FIELD = "distance"

DEFAULT_REDIS_ADDR = "localhost:6379"
DEFAULT_DIMENSION = 4096

RETURN_FIELDS = (CONTENT_FIELD, METADATA_FIELD, DISTANCE_FIELD)
TOP_K = 8


@dataclass
class Document:
    """A chunk of text with its metadata and, once retrieved, its score."""

    id: str = ""
    content: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    score: Optional[float] = None


def create_index_args(index_name: str, prefix: str, dimension: int) -> list[Any]:
    """The FT.CREATE command for a hash index with a cosine vector field."""
    return [
        "FT.CREATE", index_name,
        "ON", "HASH",
        "PREFIX", "1", prefix,
        "SCHEMA",
        CONTENT_FIELD, "TEXT",
        METADATA_FIELD, "TEXT",
        VECTOR_FIELD, "VECTOR", "FLAT",
        "6",
        "TYPE", "FLOAT32",
        "DIM", dimension,
        "DISTANCE_METRIC", "COSINE",
    ]


def init_redis_index(client: Any, dimension: int = DEFAULT_DIMENSION) -> None:
    """Create the vector index on the client's server unless it already exists."""
    if dimension <= 0:
        raise ValueError("dimension must be positive")
    try:
        client.ping()
    except Exception as exc:
        raise RuntimeError(f"failed to connect to Redis: {exc}") from exc

    index_name = f"{REDIS_PREFIX}{INDEX_NAME}"
    try:
        existing = client.execute_command("FT.INFO", index_name)
    except Exception as exc:
        if "Unknown index name" not in str(exc):
            raise RuntimeError(f"failed to check if index exists: {exc}") from exc
    else:
        if existing is not None:
            return

    try:
        client.execute_command(*create_index_args(index_name, REDIS_PREFIX, dimension))
    except Exception as exc:
        raise RuntimeError(f"failed to create index: {exc}") from exc
    try:
        client.execute_command("FT.INFO", index_name)
    except Exception as exc:
        raise RuntimeError(f"failed to verify index creation: {exc}") from exc


def document_from_fields(doc_id: str, fields: dict[str, str]) -> Document:
    """Build a document from the fields of a search hit; distance becomes score."""
    document = Document(id=doc_id)
    for name, value in fields.items():
        if name == CONTENT_FIELD:
            document.content = value
        elif name == METADATA_FIELD:
            document.metadata[name] = value
        elif name == DISTANCE_FIELD:
            try:
                distance = float(value)
            except (TypeError, ValueError):
                continue
            document.score = 1 - distance
    return document


def document_to_hashes(document: Document) -> tuple[str, dict[str, dict[str, Any]]]:
    """The hash key and fields to store a document under; gives it an id if it has none."""
    if not document.id:
        document.id = str(uuid.uuid4())
    try:
        metadata = json.dumps(
            document.metadata, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise ValueError(f"failed to marshal metadata: {exc}") from exc
    return document.id, {
        CONTENT_FIELD: {"value": document.content, "embed_key": VECTOR_FIELD},
        METADATA_FIELD: {"value": metadata},
    }