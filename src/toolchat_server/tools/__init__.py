"""Tool registration, schema generation and execution layer.

This package holds the provider-neutral tool schema, the ToolRegistry that
executes tools with validated and coerced arguments, the ToolProvider
interface for contributing tools, and the JSON-RPC shaped ToolCatalog.
"""

from toolchat_server.tools.builtin import ServerToolProvider
from toolchat_server.tools.catalog import ToolCatalog
from toolchat_server.tools.registry import (
    InvalidArgumentError,
    ToolRegistrationError,
    ToolRegistry,
    parse_arguments,
)
from toolchat_server.tools.types import (
    INVALID_ARGUMENT,
    TOOL_EXECUTION_FAILED,
    TOOL_NOT_FOUND,
    FunctionResult,
    ToolDefinition,
    ToolParameter,
    ToolProvider,
    ToolSpec,
)

__all__ = [
    "ToolRegistry",
    "ToolCatalog",
    "ToolProvider",
    "ServerToolProvider",
    "ToolSpec",
    "ToolDefinition",
    "ToolParameter",
    "FunctionResult",
    "ToolRegistrationError",
    "InvalidArgumentError",
    "parse_arguments",
    "TOOL_NOT_FOUND",
    "INVALID_ARGUMENT",
    "TOOL_EXECUTION_FAILED",
]
