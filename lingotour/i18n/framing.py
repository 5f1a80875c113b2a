"""
Event-stream framing for the translation stream.

Wire format, one record per event:

    event: <kind>
    data: <json payload>
    <blank line>

The decoder is incremental: chunks may split a record, a line, or a
multi-byte UTF-8 character anywhere, and the decoder keeps whatever it
can't use yet until the next chunk arrives.
"""

from __future__ import annotations

import codecs
import json
import logging
from typing import AsyncIterable, AsyncIterator

from lingotour.core.events import StreamEvent, event_from_payload

logger = logging.getLogger(__name__)


def encode_event(event: StreamEvent) -> bytes:
    """Encode one event as a complete wire record."""
    data = json.dumps(event.to_payload(), ensure_ascii=False)
    return f"event: {event.kind}\ndata: {data}\n\n".encode("utf-8")


class EventStreamDecoder:
    """
    Incremental decoder for the event-stream wire format.

    Usage:
        decoder = EventStreamDecoder()
        async for chunk in response.aiter_bytes():
            for event in decoder.feed(chunk):
                handle(event)
        decoder.close()
    """

    def __init__(self):
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._event: str | None = None
        self._data: list[str] = []

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        """Consume a chunk and return every event it completed."""
        if isinstance(chunk, bytes):
            text = self._utf8.decode(chunk)
        else:
            text = chunk
        self._buffer += text

        events: list[StreamEvent] = []
        lines = self._buffer.split("\n")
        # Last piece has no newline yet
        self._buffer = lines.pop()
        for line in lines:
            if line.endswith("\r"):
                line = line[:-1]

            event = self._process_line(line)
            if event is not None:
                events.append(event)
        return events

    def close(self) -> None:
        """
        End of input.

        A record without its closing blank line never produces an event.
        """
        pending = self._utf8.decode(b"", final=True)
        if self._buffer or pending or self._event is not None or self._data:
            logger.debug("Discarding unterminated stream record")
        self._buffer = ""
        self._reset_record()

    def _process_line(self, line: str) -> StreamEvent | None:
        if line == "":
            return self._dispatch()

        if line.startswith(":"):
            return None

        name, sep, value = line.partition(":")
        if not sep:
            value = ""
        elif value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        return None

    def _dispatch(self) -> StreamEvent | None:
        kind, data = self._event, self._data
        self._reset_record()

        if kind is None or not data:
            return None

        try:
            payload = json.loads("\n".join(data))
        except ValueError:
            logger.debug(f"Dropping {kind} record with malformed JSON")
            return None

        event = event_from_payload(kind, payload)
        if event is None:
            logger.debug(f"Dropping unrecognized {kind} record")
        return event

    def _reset_record(self) -> None:
        self._event = None
        self._data = []


async def iter_events(chunks: AsyncIterable[bytes | str]) -> AsyncIterator[StreamEvent]:
    """Decode an async byte stream into events as they complete."""
    decoder = EventStreamDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    decoder.close()
