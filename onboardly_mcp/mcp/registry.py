"""Tool registry for the MCP transport.

The registry is a process-wide table of named capabilities, each a public
descriptor plus a bound async handler. It is assembled once at startup
(see ``engine.tools.build_registry``). Re-registering a name replaces the
previous entry (last write wins).

Only descriptors ever leave the registry; handlers stay private.
"""

import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolDescriptor(BaseModel):
    """Public metadata for a tool, as returned by tools/list."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1, description="Unique tool name")
    description: str = Field(default="", description="What the tool does")
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
        description="Advisory JSON schema for the tool arguments",
    )

    def public(self) -> dict[str, Any]:
        """Return the wire shape: name, description and inputSchema only."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ToolEntry:
    """A descriptor bound to its handler."""

    descriptor: ToolDescriptor
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.descriptor.name


@runtime_checkable
class Capability(Protocol):
    """A single invokable capability backed by some collaborator."""

    def descriptor(self) -> ToolDescriptor: ...

    async def invoke(self, args: dict[str, Any]) -> Any: ...


class ToolError(Exception):
    """Raised by handlers for an expected failure with an optional diagnostic payload."""

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.data = data


class ToolNotFoundError(LookupError):
    """Raised when no tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Tool not found: {name}")
        self.name = name


class ToolExecutionError(RuntimeError):
    """Raised when a tool handler fails.

    Carries the handler's message and an optional diagnostic payload that
    callers may forward as JSON-RPC error data.
    """

    def __init__(self, name: str, message: str, data: Any = None):
        super().__init__(message)
        self.name = name
        self.data = data


class ToolRegistry:
    """In-memory registry of MCP tools.

    The lock guards only table access; handlers always run outside it.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolEntry] = {}
        self._lock = threading.Lock()

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        """Register a tool, replacing any existing entry with the same name."""
        entry = ToolEntry(descriptor=descriptor, handler=handler)
        with self._lock:
            replaced = descriptor.name in self._tools
            self._tools[descriptor.name] = entry
        if replaced:
            logger.debug(f"Replaced MCP tool registration: {descriptor.name}")
        else:
            logger.debug(f"Registered MCP tool: {descriptor.name}")

    def register_capability(self, capability: Capability) -> None:
        """Register an object exposing descriptor() and invoke(args)."""
        self.register(capability.descriptor(), capability.invoke)

    def list_tools(self) -> list[ToolDescriptor]:
        """Return descriptors in registration order."""
        with self._lock:
            return [entry.descriptor for entry in self._tools.values()]

    def get(self, name: str) -> ToolEntry | None:
        with self._lock:
            return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._tools

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

    async def invoke(self, name: str, args: dict[str, Any]) -> Any:
        """Invoke a tool by name.

        Arguments are passed through untouched; inputSchema is not enforced.

        Raises:
            ToolNotFoundError: No tool registered under ``name``
            ToolExecutionError: The handler raised
        """
        entry = self.get(name)
        if entry is None:
            raise ToolNotFoundError(name)

        try:
            return await entry.handler(args)
        except ToolError as e:
            logger.warning(f"Tool {name} failed: {e}")
            raise ToolExecutionError(name, str(e), e.data) from e
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}", exc_info=True)
            raise ToolExecutionError(name, str(e) or type(e).__name__) from e
