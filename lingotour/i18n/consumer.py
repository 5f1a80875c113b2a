"""
Stream consumer.

Reads a translation stream, decodes it and applies each event to a
TranslationSession. Whatever was merged before the stream stopped stays
merged: an interrupted session still yields its partial translations.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterable, Callable

import httpx

from lingotour.core.events import ErrorEvent
from lingotour.core.models import TranslationBundle
from lingotour.i18n.framing import EventStreamDecoder
from lingotour.i18n.merge import TranslationSession

logger = logging.getLogger(__name__)


STREAM_PATH = "/admin/translate/stream"


async def consume_stream(
    chunks: AsyncIterable[bytes | str],
    session: TranslationSession,
    timeout: float | None = None,
) -> TranslationSession:
    """
    Apply a chunked event stream to a session.

    Stops at end of input, on a transport error, after a top-level error
    event, or when ``timeout`` seconds have passed. None of these raise;
    locales that never finished are left ``pending``.
    """
    try:
        if timeout is None:
            await _read(chunks, session)
        else:
            await asyncio.wait_for(_read(chunks, session), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Translation stream timed out after {timeout}s")
        session.timed_out = True
    except httpx.TransportError as e:
        logger.warning(f"Translation stream interrupted: {e}")
    return session


async def _read(chunks: AsyncIterable[bytes | str], session: TranslationSession) -> None:
    decoder = EventStreamDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            session.apply(event)
            if isinstance(event, ErrorEvent) and event.is_terminal:
                return
    decoder.close()


class TranslationStreamClient:
    """
    HTTP client for streaming translation sessions.

    Usage:
        async with httpx.AsyncClient(base_url="http://localhost:8000") as http:
            client = TranslationStreamClient(http)
            session = await client.translate("tour", tour_id)
            print(session.statuses, session.bundle)
    """

    def __init__(self, http: httpx.AsyncClient, path: str = STREAM_PATH):
        self.http = http
        self.path = path

    async def translate(
        self,
        entity_type: str,
        entity_id: str,
        existing: TranslationBundle | None = None,
        on_update: Callable[[TranslationBundle], None] | None = None,
        timeout: float | None = None,
    ) -> TranslationSession:
        """Open a session and consume it to the end."""
        session = TranslationSession(bundle=existing or {}, on_update=on_update)
        body = {"entity_type": entity_type, "id": entity_id}

        try:
            async with self.http.stream("POST", self.path, json=body) as response:
                if response.status_code != 200:
                    await response.aread()
                    session.fail(_error_message(response))
                    return session
                await consume_stream(response.aiter_bytes(), session, timeout=timeout)
        except httpx.TransportError as e:
            logger.warning(f"Could not open translation stream: {e}")
            session.fail(f"Connection failed: {e}")
        return session


def _error_message(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("detail")
        if isinstance(message, str) and message:
            return message
    return f"Translation request failed ({response.status_code})"
