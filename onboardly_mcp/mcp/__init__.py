"""MCP (Model Context Protocol) transport module.

This module contains the components behind the HTTP+SSE transport:
- JSON-RPC 2.0 helpers and validation
- Tool registry and tool definitions for tools/list
- SSE connection manager
- Dispatcher routing requests to method handlers

The HTTP routes themselves live in mcp_transport.py.
"""

from .connections import ChannelClosedError, Connection, ConnectionManager, SSEChannel
from .dispatcher import Dispatcher, McpMethod
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .registry import (
    ToolDescriptor,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistry,
)
from .tool_defs import TOOL_DEFINITIONS

__all__ = [
    # Tool definitions
    "TOOL_DEFINITIONS",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    # Registry
    "ToolDescriptor",
    "ToolError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolRegistry",
    # Connections
    "ChannelClosedError",
    "Connection",
    "ConnectionManager",
    "SSEChannel",
    # Dispatch
    "Dispatcher",
    "McpMethod",
]
