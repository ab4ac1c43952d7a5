"""Type definitions for the tool layer.

This module contains the provider-neutral tool schema, the result of a tool
execution, and the interface operation providers implement to contribute tools.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

PARAMETER_TYPES = frozenset(
    {"string", "integer", "number", "boolean", "array", "object"}
)

TOOL_NOT_FOUND = "tool_not_found"
INVALID_ARGUMENT = "invalid_argument"
TOOL_EXECUTION_FAILED = "tool_execution_failed"


@dataclass(frozen=True)
class ToolParameter:
    """A single named parameter of a tool.

    Attributes:
        name: Parameter name exactly as the model must send it
        type: JSON schema type (string, integer, number, boolean, array, object)
        description: Human-readable description shown to the model
        required: Whether the parameter must be present and non-empty
        items: JSON schema of array elements (array parameters only)
    """

    name: str
    type: str = "string"
    description: str = ""
    required: bool = False
    items: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.type not in PARAMETER_TYPES:
            raise ValueError(
                f"Unsupported type '{self.type}' for parameter '{self.name}'"
            )

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.type == "array":
            schema["items"] = dict(self.items or {"type": "string"})
        return schema


@dataclass(frozen=True)
class ToolDefinition:
    """Schema definition of a tool exposed to the model.

    Attributes:
        name: Unique tool name within a registry
        description: What the tool does; part of the model prompt
        parameters: Parameters in declaration order
    """

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tool name must not be empty")
        names = [p.name for p in self.parameters]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate parameter names in tool '{self.name}'")

    @property
    def required_parameters(self) -> list[str]:
        return [p.name for p in self.parameters if p.required]

    def to_json_schema(self) -> dict[str, Any]:
        """Build the JSON-schema parameters object for this tool.

        Always well-formed: a tool without parameters yields an empty
        properties object rather than omitting it.
        """
        return {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
            "required": self.required_parameters,
        }


@dataclass(frozen=True)
class FunctionResult:
    """Outcome of a tool execution, always serializable.

    Attributes:
        content: JSON string handed back to the model
        is_error: True when the tool was not run or failed
    """

    content: str
    is_error: bool = False

    @classmethod
    def error(cls, code: str, message: str) -> "FunctionResult":
        payload = {"error": {"code": code, "message": message}}
        return cls(content=json.dumps(payload, ensure_ascii=False), is_error=True)


@dataclass(frozen=True)
class ToolSpec:
    """A tool definition paired with the callable that implements it.

    The handler is called with the declared parameters as keyword arguments and
    may be a plain function or a coroutine function.
    """

    definition: ToolDefinition
    handler: Callable[..., Any] = field(compare=False)


class ToolProvider(ABC):
    """Interface for contributing tools to the registry.

    Implement this in any component that exposes operations to the model and
    pass an instance to create_app(tool_providers=[...]). The specs are read
    once at startup and must not change afterwards.
    """

    @property
    def provider_name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def tool_specs(self) -> Iterable[ToolSpec]:
        """Return every tool this provider contributes."""
