"""SSE connection management for the MCP transport.

Each live stream owns one ``SSEChannel``: an unbounded asyncio queue whose
only consumer is the stream generator task for that client. Request handlers
push onto the channel through the ``ConnectionManager``; they never hold the
queue themselves.

Lifecycle per connection: Open (entry created) -> Active (zero or more
sends) -> Closed (channel completed, entry removed). There is no backlog:
messages sent while a client is disconnected are lost, and a reconnecting
client starts over with a fresh id.
"""

import asyncio
import logging
import threading
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class ChannelClosedError(RuntimeError):
    """Raised when pushing onto a completed channel."""


class SSEChannel:
    """Outbound message channel for one SSE stream."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, message: Any) -> None:
        if self._closed:
            raise ChannelClosedError("Channel is closed")
        self._queue.put_nowait(message)

    def close(self) -> None:
        """Complete the channel. Messages already queued are still delivered."""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_END_OF_STREAM)

    async def messages(self) -> AsyncIterator[Any]:
        """Yield queued messages until the channel is completed."""
        while True:
            item = await self._queue.get()
            if item is _END_OF_STREAM:
                return
            yield item


@dataclass
class Connection:
    """A live SSE stream."""

    client_id: str
    channel: SSEChannel
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def info(self) -> dict[str, str]:
        return {"clientId": self.client_id, "connectedAt": self.connected_at.isoformat()}


class ConnectionManager:
    """Tracks live SSE streams keyed by client id.

    The lock is held only for table lookups and mutations; pushes happen on
    the channel after the lookup.
    """

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._lock = threading.Lock()

    def add(self, client_id: str, channel: SSEChannel) -> Connection:
        """Register a stream. An existing entry for the same id is replaced.

        The replaced channel is abandoned, not closed; its stream stays open
        until the client goes away.
        """
        connection = Connection(client_id=client_id, channel=channel)
        with self._lock:
            previous = self._connections.get(client_id)
            self._connections[client_id] = connection
            total = len(self._connections)
        if previous is not None:
            logger.warning(f"[SSE] Client {client_id} reconnected; previous stream abandoned")
        logger.info(f"[SSE] Client connected: {client_id} (total connections: {total})")
        return connection

    def send(self, client_id: str, message: Any) -> bool:
        """Push a message to one client. Never raises."""
        with self._lock:
            connection = self._connections.get(client_id)
        if connection is None:
            logger.warning(f"[SSE] Client not found: {client_id}")
            return False

        try:
            connection.channel.push(message)
            return True
        except Exception as e:
            logger.error(f"[SSE] Error sending message to {client_id}: {e}")
            return False

    def remove(self, client_id: str, channel: SSEChannel | None = None) -> None:
        """Complete a client's channel and drop the entry.

        When ``channel`` is given, the entry is removed only if it still
        belongs to that channel. Removing an unknown id is a no-op.
        """
        with self._lock:
            connection = self._connections.get(client_id)
            if connection is None:
                return
            if channel is not None and connection.channel is not channel:
                return
            del self._connections[client_id]
            total = len(self._connections)

        connection.channel.close()
        logger.info(f"[SSE] Client disconnected: {client_id} (total connections: {total})")

    def broadcast(self, message: Any) -> int:
        """Send to every live connection and return how many accepted it."""
        with self._lock:
            client_ids = list(self._connections)

        delivered = 0
        for client_id in client_ids:
            if self.send(client_id, message):
                delivered += 1
        return delivered

    def get(self, client_id: str) -> Connection | None:
        with self._lock:
            return self._connections.get(client_id)

    def is_connected(self, client_id: str) -> bool:
        with self._lock:
            return client_id in self._connections

    def list_connections(self) -> list[dict[str, str]]:
        """Connection metadata for diagnostics; channels are not exposed."""
        with self._lock:
            connections = list(self._connections.values())
        return [connection.info() for connection in connections]

    def close_all(self) -> None:
        """Complete every channel, used on shutdown."""
        with self._lock:
            client_ids = list(self._connections)
        for client_id in client_ids:
            self.remove(client_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)
