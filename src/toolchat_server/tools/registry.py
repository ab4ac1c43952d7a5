"""Tool registry: registration, argument coercion and execution.

The registry is built once at startup from an explicit list of ToolProviders
and then frozen. Execution never raises: unknown tools, invalid arguments and
failing handlers all come back as error FunctionResults that are fed to the
model like any other result.
"""

import asyncio
import dataclasses
import inspect
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Iterable, Literal, Mapping

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

logger = logging.getLogger(__name__)

CollisionPolicy = Literal["reject", "override"]

_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})


class ToolRegistrationError(ValueError):
    """Raised at startup when tools cannot be registered."""


class InvalidArgumentError(ValueError):
    """Raised when a tool argument is missing or cannot be coerced."""


@dataclass(frozen=True)
class _CallableBinding:
    definition: ToolDefinition
    handler: Callable[..., Any]
    source: str
    is_coroutine: bool


def error_message(exc: BaseException) -> str:
    """Extract a readable message from an exception.

    Falls back to the exception's type name when it carries no message and
    appends the message of a chained cause when there is one.
    """
    message = str(exc) or type(exc).__name__
    cause = exc.__cause__
    if cause is not None and str(cause):
        message = f"{message}: {cause}"
    return message


def parse_arguments(arguments_json: str | None) -> dict[str, Any]:
    """Parse the JSON arguments string produced by a model.

    Args:
        arguments_json: JSON object string; None or blank means no arguments

    Returns:
        The decoded arguments mapping

    Raises:
        InvalidArgumentError: If the string is not a JSON object
    """
    if arguments_json is None or not arguments_json.strip():
        return {}
    try:
        arguments = json.loads(arguments_json)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"Arguments are not valid JSON: {e}") from None
    if arguments is None:
        return {}
    if not isinstance(arguments, dict):
        raise InvalidArgumentError("Arguments must be a JSON object")
    return arguments


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce_integer(param: ToolParameter, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid integer value for parameter {param.name}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidArgumentError(
        f"Invalid integer value for parameter {param.name}: {value!r}"
    )


def _coerce_number(param: ToolParameter, value: Any) -> int | float:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid number value for parameter {param.name}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            pass
        else:
            return int(number) if number.is_integer() and "." not in value else number
    raise InvalidArgumentError(
        f"Invalid number value for parameter {param.name}: {value!r}"
    )


def _coerce_boolean(param: ToolParameter, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidArgumentError(
        f"Invalid boolean value for parameter {param.name}: {value!r}"
    )


def _split_bracketed_list(text: str) -> list[str]:
    inner = text[1:-1].strip()
    if not inner:
        return []
    return [item.strip().strip('"').strip("'") for item in inner.split(",")]


def _coerce_array(param: ToolParameter, value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("[") and text.endswith("]"):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                return _split_bracketed_list(text)
            if isinstance(decoded, list):
                return decoded
    raise InvalidArgumentError(
        f"Invalid array value for parameter {param.name}: {value!r}"
    )


def _coerce_object(param: ToolParameter, value: Any) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, dict):
            return decoded
    raise InvalidArgumentError(
        f"Invalid object value for parameter {param.name}: {value!r}"
    )


_COERCERS: dict[str, Callable[[ToolParameter, Any], Any]] = {
    "integer": _coerce_integer,
    "number": _coerce_number,
    "boolean": _coerce_boolean,
    "array": _coerce_array,
    "object": _coerce_object,
}


def coerce_value(param: ToolParameter, value: Any) -> Any:
    """Coerce a model-supplied value to the parameter's declared type.

    Strings are passed through untouched for string parameters; anything else
    is converted with str().

    Raises:
        InvalidArgumentError: If the value cannot be represented as the type
    """
    if value is None:
        return None
    coercer = _COERCERS.get(param.type)
    if coercer is None:
        return value if isinstance(value, str) else str(value)
    return coercer(param, value)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_result(value: Any) -> str:
    """Serialize a tool's return value to a JSON string."""
    return json.dumps(value, default=_json_default, ensure_ascii=False)


class ToolRegistry:
    """Canonical set of callable tools and their schemas.

    Lookups go through a name -> binding map captured at registration time.
    Once frozen, the registry is read-only and needs no synchronization.
    """

    def __init__(self, collision_policy: CollisionPolicy = "reject"):
        """Initialize an empty, unfrozen ToolRegistry.

        Args:
            collision_policy: What to do when two providers register the same
                tool name: "reject" raises, "override" keeps the last one
        """
        if collision_policy not in ("reject", "override"):
            raise ValueError(f"Unknown collision policy: {collision_policy}")
        self.collision_policy = collision_policy
        self._bindings: dict[str, _CallableBinding] = {}
        self._frozen = False

    @classmethod
    def from_providers(
        cls,
        providers: Iterable[ToolProvider],
        collision_policy: CollisionPolicy = "reject",
    ) -> "ToolRegistry":
        """Build and freeze a registry from operation providers.

        Args:
            providers: Providers to collect tools from, in registration order
            collision_policy: Tool name collision policy

        Returns:
            A frozen ToolRegistry

        Raises:
            ToolRegistrationError: If a name collides under the "reject" policy
        """
        registry = cls(collision_policy=collision_policy)
        for provider in providers:
            for spec in provider.tool_specs():
                registry.register(spec, source=provider.provider_name)
        registry.freeze()
        logger.info(f"Tool registry ready with {len(registry)} tools")
        return registry

    def register(self, spec: ToolSpec, source: str = "") -> None:
        """Register a single tool.

        Raises:
            RuntimeError: If the registry is already frozen
            ToolRegistrationError: On a name collision under the "reject" policy
        """
        if self._frozen:
            raise RuntimeError("Tool registry is frozen; register tools at startup")

        name = spec.definition.name
        existing = self._bindings.get(name)
        if existing is not None:
            if self.collision_policy == "reject":
                raise ToolRegistrationError(
                    f"Tool '{name}' from {source or 'unknown provider'} collides "
                    f"with the tool registered by {existing.source or 'unknown provider'}"
                )
            logger.warning(
                f"Tool '{name}' from {existing.source} overridden by {source}"
            )

        self._bindings[name] = _CallableBinding(
            definition=spec.definition,
            handler=spec.handler,
            source=source,
            is_coroutine=inspect.iscoroutinefunction(spec.handler),
        )
        logger.debug(f"Registered tool '{name}' from {source}")

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def definitions(self) -> tuple[ToolDefinition, ...]:
        """Return all tool definitions in registration order."""
        return tuple(binding.definition for binding in self._bindings.values())

    def get_definition(self, name: str) -> ToolDefinition | None:
        binding = self._bindings.get(name)
        return binding.definition if binding else None

    def _bind_arguments(
        self, definition: ToolDefinition, arguments: Mapping[str, Any]
    ) -> dict[str, Any]:
        declared = {p.name for p in definition.parameters}
        ignored = [key for key in arguments if key not in declared]
        if ignored:
            logger.debug(f"Ignoring undeclared arguments for '{definition.name}': {ignored}")

        kwargs: dict[str, Any] = {}
        for param in definition.parameters:
            value = arguments.get(param.name)
            if param.required and _is_missing(value):
                raise InvalidArgumentError(
                    f"{param.name} is required for {definition.name} function"
                )
            if value is None:
                continue
            kwargs[param.name] = coerce_value(param, value)
        return kwargs

    async def execute(
        self, name: str, arguments: Mapping[str, Any] | None = None
    ) -> FunctionResult:
        """Execute a tool by name.

        Args:
            name: Tool name
            arguments: Raw arguments as sent by the model

        Returns:
            FunctionResult with the serialized return value, or an error result
            when the tool is unknown, an argument is invalid, or the handler raises
        """
        binding = self._bindings.get(name)
        if binding is None:
            logger.warning(f"Unknown tool requested: {name}")
            return FunctionResult.error(TOOL_NOT_FOUND, f"Unknown function: {name}")

        try:
            kwargs = self._bind_arguments(binding.definition, arguments or {})
        except InvalidArgumentError as e:
            logger.warning(f"Invalid arguments for tool '{name}': {e}")
            return FunctionResult.error(INVALID_ARGUMENT, str(e))

        try:
            if binding.is_coroutine:
                value = await binding.handler(**kwargs)
            else:
                value = await asyncio.to_thread(binding.handler, **kwargs)
                # async callables that are not plain coroutine functions
                if inspect.isawaitable(value):
                    value = await value
            return FunctionResult(content=serialize_result(value))
        except Exception as e:
            logger.warning(f"Tool '{name}' failed: {e}", exc_info=True)
            return FunctionResult.error(TOOL_EXECUTION_FAILED, error_message(e))
