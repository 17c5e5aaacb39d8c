"""MCP SSE transport.

Implements the HTTP+SSE transport used by MCP clients:

- GET  /sse      opens a stream; the first event (``endpoint``) carries the
                 absolute URL to POST JSON-RPC messages to
- POST /message  handles one JSON-RPC message and returns its response; the
                 same response is pushed on the caller's stream when open

Config example (MCP client):
```json
{"mcpServers": {"onboardly": {"url": "http://localhost:3000/sse"}}}
```
"""

import asyncio
import json
import logging
import secrets
import string
import time
from collections.abc import AsyncGenerator
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse

from .api.deps import get_connection_manager, get_dispatcher
from .config import settings
from .mcp.connections import ConnectionManager, SSEChannel
from .mcp.dispatcher import Dispatcher
from .mcp.jsonrpc import PARSE_ERROR, frame, frame_event, jsonrpc_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["MCP Transport"])

_CLIENT_ID_ALPHABET = string.ascii_lowercase + string.digits

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def generate_client_id() -> str:
    """Return an id of the form client-<epoch millis>-<9 alphanumerics>."""
    suffix = "".join(secrets.choice(_CLIENT_ID_ALPHABET) for _ in range(9))
    return f"client-{int(time.time() * 1000)}-{suffix}"


def build_message_url(request: Request, client_id: str) -> str:
    """Absolute URL the client should POST its JSON-RPC messages to."""
    base_url = settings.public_base_url or str(request.base_url)
    return f"{base_url.rstrip('/')}{settings.api_prefix}/message?clientId={quote(client_id)}"


async def sse_event_stream(
    client_id: str,
    channel: SSEChannel,
    connections: ConnectionManager,
    endpoint_url: str,
    delay: float,
) -> AsyncGenerator[str, None]:
    """Generate the SSE stream for one client.

    Yields:
        The ``endpoint`` event once, after ``delay`` seconds, then one data
        frame per message pushed onto the channel until it is completed.
    """
    try:
        # Gives the client time to install its stream handler
        if delay:
            await asyncio.sleep(delay)
        logger.info(f"[MCP SSE] Sending endpoint event: {endpoint_url}")
        yield frame_event("endpoint", endpoint_url)

        async for message in channel.messages():
            yield frame(message)
    finally:
        logger.info(f"[MCP SSE] Stream closed: {client_id}")
        connections.remove(client_id, channel)


@router.get("/sse")
async def sse_endpoint(
    request: Request,
    connections: Annotated[ConnectionManager, Depends(get_connection_manager)],
    client_id: Annotated[str | None, Query(alias="clientId")] = None,
) -> StreamingResponse:
    """Open an MCP SSE stream.

    The connection is registered before the response starts, so a POST that
    races the stream setup still finds it.
    """
    client_id = client_id or generate_client_id()
    logger.info(f"[MCP SSE] New connection request from {client_id}")

    channel = SSEChannel()
    connections.add(client_id, channel)

    return StreamingResponse(
        sse_event_stream(
            client_id,
            channel,
            connections,
            build_message_url(request, client_id),
            settings.endpoint_event_delay_seconds,
        ),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/message")
async def message_endpoint(
    request: Request,
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    client_id: Annotated[str | None, Query(alias="clientId")] = None,
) -> JSONResponse:
    """Handle one JSON-RPC message.

    Always answers 200 with a JSON-RPC envelope, whether it carries a result
    or an error.
    """
    try:
        body = json.loads(await request.body())
    except ValueError:
        logger.warning(f"[MCP] Parse error in message from {client_id}")
        return JSONResponse(jsonrpc_error(None, PARSE_ERROR, "Parse error"))

    logger.debug(f"[MCP] Received message from {client_id}: {body}")
    response = await dispatcher.dispatch(body, client_id)
    return JSONResponse(response)


@router.get("/connections", tags=["Diagnostics"])
async def list_connections(
    connections: Annotated[ConnectionManager, Depends(get_connection_manager)],
) -> dict:
    """List live SSE connections (metadata only)."""
    items = connections.list_connections()
    return {"count": len(items), "connections": items}
