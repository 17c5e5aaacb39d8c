"""JSON-RPC dispatch for the MCP transport.

The dispatcher turns one inbound envelope into one outbound envelope. When
the caller names a client id with an open SSE stream, the same response is
also pushed onto that stream. The push is a side effect only: its outcome
never changes what the caller gets back.
"""

import json
import logging
from enum import StrEnum
from typing import Any

from .. import __version__
from ..config import settings
from .connections import ConnectionManager
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    FALLBACK_ID,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    jsonrpc_error,
    jsonrpc_response,
    parse,
    validate,
)
from .registry import ToolExecutionError, ToolNotFoundError, ToolRegistry

logger = logging.getLogger(__name__)


class McpMethod(StrEnum):
    """JSON-RPC methods served by this server."""

    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"


def resolve_method(method: str) -> McpMethod | None:
    """Map a method name onto McpMethod, or None when it is unknown."""
    try:
        return McpMethod(method)
    except ValueError:
        return None


class InvalidParamsError(ValueError):
    """Raised when a request's params do not fit the method."""


def format_tool_result(result: Any) -> dict:
    """Wrap a raw tool result in the MCP text content envelope."""
    return {
        "content": [
            {"type": "text", "text": json.dumps(result, indent=2, default=str)}
        ]
    }


class Dispatcher:
    """Routes JSON-RPC requests to MCP method handlers."""

    def __init__(
        self,
        registry: ToolRegistry,
        connections: ConnectionManager,
        server_name: str | None = None,
        server_version: str = __version__,
        protocol_version: str | None = None,
    ):
        self.registry = registry
        self.connections = connections
        self.server_name = server_name or settings.server_name
        self.server_version = server_version
        self.protocol_version = protocol_version or settings.protocol_version

    async def dispatch(self, message: Any, client_id: str | None = None) -> dict:
        """Handle one decoded JSON-RPC message.

        Args:
            message: Decoded request body
            client_id: Optional SSE client to republish the response to

        Returns:
            JSON-RPC response dict (never raises)
        """
        validation = validate(message)
        if not validation.valid:
            request_id = message.get("id") if isinstance(message, dict) else None
            logger.warning(f"[MCP] Invalid request from {client_id}: {validation.error}")
            return jsonrpc_error(
                request_id, INVALID_REQUEST, validation.error or "Invalid request"
            )

        response = await self._handle(message)
        self._publish(client_id, response)
        return response

    async def dispatch_text(self, raw_text: str | bytes, client_id: str | None = None) -> dict:
        """Handle an undecoded message, answering PARSE_ERROR when it cannot be read.

        Entry point for transports that hand over raw text (stdio, sockets).
        Envelopes that decode but fail validation also yield PARSE_ERROR here.
        The HTTP message endpoint decodes the body itself and calls
        ``dispatch`` so such envelopes get INVALID_REQUEST with their id.
        """
        request = parse(raw_text)
        if request is None:
            return jsonrpc_error(None, PARSE_ERROR, "Parse error")
        return await self.dispatch(request.model_dump(exclude_unset=True), client_id)

    async def _handle(self, message: dict) -> dict:
        request_id = message.get("id")
        method_name = message["method"]
        params = message.get("params")

        method = resolve_method(method_name)
        if method is None:
            logger.info(f"[MCP] Method not found: {method_name}")
            return jsonrpc_error(
                request_id, METHOD_NOT_FOUND, f"Method not found: {method_name}"
            )

        try:
            if method is McpMethod.INITIALIZE:
                result = self.handle_initialize(params)
            elif method is McpMethod.TOOLS_LIST:
                result = self.handle_tools_list()
            elif method is McpMethod.TOOLS_CALL:
                result = await self.handle_tools_call(params)
            else:
                raise AssertionError(f"Unhandled MCP method: {method}")
        except InvalidParamsError as e:
            return jsonrpc_error(request_id, INVALID_PARAMS, str(e))
        except ToolNotFoundError as e:
            logger.warning(f"[MCP] {e}")
            return jsonrpc_error(request_id, INTERNAL_ERROR, f"Tool execution failed: {e}")
        except ToolExecutionError as e:
            return jsonrpc_error(
                request_id, INTERNAL_ERROR, f"Tool execution failed: {e}", e.data
            )
        except Exception as e:
            logger.error(f"[MCP] Error handling {method_name}: {e}", exc_info=True)
            return jsonrpc_error(request_id, INTERNAL_ERROR, str(e) or "Internal error")

        return jsonrpc_response(FALLBACK_ID if request_id is None else request_id, result)

    def _publish(self, client_id: str | None, response: dict) -> None:
        if not client_id or not self.connections.is_connected(client_id):
            return
        if not self.connections.send(client_id, response):
            logger.debug(f"[MCP] Response for {client_id} was not pushed to its stream")

    def handle_initialize(self, params: Any) -> dict:
        """Return the server's capabilities descriptor."""
        logger.info(f"[MCP] Initialize request: {params}")
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self.server_name, "version": self.server_version},
        }

    def handle_tools_list(self) -> dict:
        return {"tools": [tool.public() for tool in self.registry.list_tools()]}

    async def handle_tools_call(self, params: Any) -> dict:
        if not isinstance(params, dict):
            raise InvalidParamsError("Tool name is required")

        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Tool name is required")

        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Tool arguments must be an object")

        logger.info(f"[MCP] Tool call: {name}")
        result = await self.registry.invoke(name, arguments)
        return format_tool_result(result)
