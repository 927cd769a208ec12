"""Descriptions of tools offered to a chat model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ParameterType(str, Enum):
    """JSON schema types a tool parameter may take."""

    OBJECT = "object"
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    ARRAY = "array"
    NULL = "null"
    BOOLEAN = "boolean"


@dataclass
class ParameterInfo:
    """One parameter of a tool."""

    type: ParameterType
    desc: str = ""
    required: bool = False
    enum: list[str] = field(default_factory=list)
    elem_info: Optional["ParameterInfo"] = None
    sub_params: dict[str, "ParameterInfo"] = field(default_factory=dict)

    def _schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type.value}
        if self.desc:
            schema["description"] = self.desc
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.elem_info is not None:
            schema["items"] = self.elem_info._schema()
        if self.sub_params:
            schema.update(_object_schema(self.sub_params))
        return schema


def _object_schema(params: dict[str, ParameterInfo]) -> dict[str, Any]:
    return {
        "type": ParameterType.OBJECT.value,
        "properties": {name: info._schema() for name, info in params.items()},
        "required": sorted(name for name, info in params.items() if info.required),
    }


@dataclass
class ToolInfo:
    """Name, description and parameters of a tool."""

    name: str
    desc: str
    params: dict[str, ParameterInfo] = field(default_factory=dict)

    def to_json_schema(self) -> dict[str, Any]:
        """Return the parameters as a JSON schema object."""
        return _object_schema(self.params)