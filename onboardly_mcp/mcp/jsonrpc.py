"""JSON-RPC 2.0 helpers for MCP transport.

This module provides utility functions for validating inbound JSON-RPC 2.0
envelopes, creating responses and errors, and framing payloads for the SSE
stream. Nothing here holds state.

See: https://www.jsonrpc.org/specification
"""

import json
from enum import IntEnum
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ValidationError

JSONRPC_VERSION = "2.0"

# Substituted for the id when it cannot be read from the request
FALLBACK_ID = 0


class JsonRpcErrorCode(IntEnum):
    """Standard JSON-RPC error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


# Standard JSON-RPC error codes
PARSE_ERROR = JsonRpcErrorCode.PARSE_ERROR
INVALID_REQUEST = JsonRpcErrorCode.INVALID_REQUEST
METHOD_NOT_FOUND = JsonRpcErrorCode.METHOD_NOT_FOUND
INVALID_PARAMS = JsonRpcErrorCode.INVALID_PARAMS
INTERNAL_ERROR = JsonRpcErrorCode.INTERNAL_ERROR


class JsonRpcRequest(BaseModel):
    """A decoded JSON-RPC 2.0 request. A missing id marks a notification."""

    jsonrpc: Literal["2.0"]
    id: str | int | None = None
    method: str
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class ValidationResult(NamedTuple):
    valid: bool
    error: str | None = None


def validate(message: Any) -> ValidationResult:
    """Check the shape of a JSON-RPC envelope.

    The id is not required, so notifications pass.

    Args:
        message: Decoded JSON value

    Returns:
        ValidationResult with a human-readable error when invalid
    """
    if not isinstance(message, dict):
        return ValidationResult(False, "Invalid JSON")

    if message.get("jsonrpc") != JSONRPC_VERSION:
        return ValidationResult(False, "Invalid JSON-RPC version")

    method = message.get("method")
    if not isinstance(method, str) or not method:
        return ValidationResult(False, "Missing or invalid method")

    return ValidationResult(True)


def parse(raw_text: str | bytes) -> JsonRpcRequest | None:
    """Decode and validate a JSON-RPC request.

    Returns None when the text is not JSON or the envelope is invalid. Callers
    must treat None as a parse error.
    """
    try:
        message = json.loads(raw_text)
    except (TypeError, ValueError):
        return None

    if not validate(message).valid:
        return None

    try:
        return JsonRpcRequest.model_validate(message)
    except ValidationError:
        return None


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response.

    Args:
        id: Request ID (must match the request)
        result: The result payload

    Returns:
        JSON-RPC 2.0 response dict
    """
    return {"jsonrpc": JSONRPC_VERSION, "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str, data: Any = None) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Args:
        id: Request ID, or None when it could not be determined; None is
            replaced by FALLBACK_ID so the field is never omitted
        code: Error code (negative integer)
        message: Human-readable error message
        data: Optional diagnostic payload, omitted when None

    Returns:
        JSON-RPC 2.0 error response dict
    """
    error: dict[str, Any] = {"code": int(code), "message": message}
    if data is not None:
        error["data"] = data
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": FALLBACK_ID if id is None else id,
        "error": error,
    }


def frame(payload: Any) -> str:
    """Format a payload as a single SSE data frame."""
    return f"data: {json.dumps(payload, default=str)}\n\n"


def frame_event(event: str, data: str) -> str:
    """Format a typed SSE event carrying a plain-text data line."""
    return f"event: {event}\ndata: {data}\n\n"
