"""Tool protocol, method definitions and result types shared by the core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, create_model

Handler = Callable[[dict[str, Any]], Awaitable[Any]]

# Parameter name -> pydantic field definition: a bare type for a required
# parameter, or a (type, default | Field(...)) tuple.
InputSchema = dict[str, Any]


@dataclass(frozen=True, eq=False)
class MethodDefinition:
    """One named entry point of a tool.

    Compared and hashed by identity, so a definition can key a cache.

    Attributes:
        name: Unique within its tool (e.g. "evaluate").
        description: Human-readable summary shown to callers.
        handler: Coroutine function receiving the validated parameters.
        input_schema: Parameter shape, see ``InputSchema``.
    """

    name: str
    description: str
    handler: Handler
    input_schema: InputSchema = field(default_factory=dict)


@runtime_checkable
class Tool(Protocol):
    """Protocol that every pluggable tool must satisfy.

    Tools may additionally define ``async initialize()`` (run once at
    registration, a failure aborts it) and ``async health_check() -> bool``
    (used by registry sweeps). Both are optional and looked up with getattr.
    """

    name: str
    description: str
    version: str

    def get_methods(self) -> list[MethodDefinition]: ...


class ErrorKind(str, Enum):
    """Classification of execution failures."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    HANDLER = "handler"
    CRITICAL = "critical"  # Connectivity failure, flips the health flag


class ExecutionResult(BaseModel):
    """Uniform outcome of a tool call. Returned, never raised."""

    success: bool
    data: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: Any) -> ExecutionResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, kind: ErrorKind) -> ExecutionResult:
        return cls(success=False, error=error, error_kind=kind)


class ToolStatus(BaseModel):
    """Read-only status view of a registered tool."""

    name: str
    version: str
    healthy: bool
    methods: list[str]


@lru_cache(maxsize=1024)
def build_params_model(
    tool_name: str,
    method: MethodDefinition,
) -> type[BaseModel]:
    """Build the pydantic model that validates a method's parameters.

    Types are checked strictly (no "5" -> 5 coercion), defaults are filled in
    and unknown keys are ignored. Models are cached per method definition.
    """
    fields: dict[str, Any] = {}
    for param, definition in method.input_schema.items():
        if isinstance(definition, tuple):
            fields[param] = definition
        else:
            fields[param] = (definition, ...)

    model_name = f"{tool_name}_{method.name}_params".replace(".", "_")
    return create_model(
        model_name,
        __config__=ConfigDict(strict=True, extra="ignore"),
        **fields,
    )
