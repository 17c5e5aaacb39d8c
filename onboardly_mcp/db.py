"""Prisma client lifecycle.

One client is shared by the whole process. ``get_db`` connects lazily,
probes the connection before handing it out and reconnects when PostgreSQL
has dropped it.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from .config import settings

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

_client: "Prisma | None" = None
_lock = asyncio.Lock()


def _new_client() -> "Prisma":
    # prisma.Prisma is generated by `prisma generate`
    from prisma import Prisma

    if settings.database_url:
        return Prisma(datasource={"url": settings.database_url})
    return Prisma()


async def _connect() -> "Prisma":
    """Connect a fresh client, backing off exponentially between attempts."""
    attempts = settings.database_connect_attempts
    for attempt in range(1, attempts + 1):
        client = _new_client()
        try:
            await client.connect()
        except Exception as e:
            if attempt == attempts:
                logger.error(f"Database unreachable after {attempts} attempts: {e}")
                raise
            delay = settings.database_retry_delay_seconds * 2 ** (attempt - 1)
            logger.warning(f"Database connect attempt {attempt}/{attempts} failed ({e}), retry in {delay}s")
            await asyncio.sleep(delay)
        else:
            logger.info("Connected to database")
            return client
    raise RuntimeError("database_connect_attempts must be at least 1")


async def _alive(client: "Prisma") -> bool:
    if not client.is_connected():
        return False
    try:
        await client.query_raw("SELECT 1")
    except Exception as e:
        logger.debug(f"Database probe failed: {e}")
        return False
    return True


async def _disconnect(client: "Prisma") -> None:
    try:
        await client.disconnect()
    except Exception as e:
        logger.warning(f"Error while disconnecting from database: {e}")


async def get_db() -> "Prisma":
    """Return the shared client, (re)connecting when needed."""
    global _client

    async with _lock:
        if _client is not None and await _alive(_client):
            return _client

        if _client is not None:
            logger.warning("Database connection lost, reconnecting")
            await _disconnect(_client)
            _client = None

        _client = await _connect()
        return _client


async def close_db() -> None:
    global _client
    async with _lock:
        if _client is None:
            return
        await _disconnect(_client)
        _client = None
        logger.info("Database connection closed")
