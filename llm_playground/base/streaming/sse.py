"""Server-Sent-Events stream decoder.

Turns an arbitrarily chunked byte stream into discrete
:class:`ServerSentEvent` records. The decoder is incremental: ``feed``
accepts whatever a single network read returned and yields the records that
became complete, buffering a partial trailing line and the record under
construction until later reads finish them. Splitting the same bytes across
any number of reads yields the same records.

Framing rules
-------------
- Lines end with ``\\r\\n``, ``\\n`` or ``\\r``. A ``\\r`` at the end of a read
  terminates the line and a ``\\n`` opening the next read is then skipped.
- Lines starting with ``:`` are comments.
- ``field: value`` with one optional leading space stripped from the value; a
  line without a colon is a field with an empty value.
- ``data`` lines are joined with ``\\n``; ``event``, ``id`` and ``retry``
  (digits only) are honoured; other fields are ignored.
- A blank line dispatches the record when it carries data.
- :meth:`SSEDecoder.flush` dispatches a final record that the server did not
  terminate with a blank line.

Failure modes
-------------
``FramingError`` when the undispatched bytes (partial line plus the record
under construction) exceed ``max_event_bytes``. Records completed earlier in
the same read travel on the exception; ``iter_sse_events`` yields them before
re-raising.
"""
from __future__ import annotations

import re
from typing import AsyncIterable, AsyncIterator, List, Optional

from ...config.defaults import SSE_MAX_EVENT_BYTES
from ..errors import FramingError
from ..models import ServerSentEvent

_EOL = re.compile(rb"\r\n|\r|\n")
_BOM = b"\xef\xbb\xbf"


class SSEDecoder:
    """Incremental decoder for one connection's event stream.

    Not restartable: create a new decoder per response.
    """

    def __init__(self, max_event_bytes: int = SSE_MAX_EVENT_BYTES) -> None:
        if max_event_bytes <= 0:
            raise ValueError("max_event_bytes must be positive")
        self.max_event_bytes = max_event_bytes
        self._buffer = bytearray()
        self._skip_lf = False
        self._started = False
        self._data: List[str] = []
        self._event: Optional[str] = None
        self._last_id: Optional[str] = None
        self._retry: Optional[int] = None
        self._record_bytes = 0

    @property
    def buffered_bytes(self) -> int:
        """Bytes held back waiting for a line or record terminator."""
        return len(self._buffer) + self._record_bytes

    def feed(self, chunk: bytes) -> List[ServerSentEvent]:
        """Consume one read and return the records it completed."""
        if not chunk:
            return []
        if not self._started:
            self._started = True
            if chunk.startswith(_BOM):
                chunk = chunk[len(_BOM):]
        if self._skip_lf:
            self._skip_lf = False
            if chunk.startswith(b"\n"):
                chunk = chunk[1:]
        self._buffer.extend(chunk)

        events: List[ServerSentEvent] = []
        buf = bytes(self._buffer)
        pos = 0
        for match in _EOL.finditer(buf):
            line = buf[pos:match.start()]
            pos = match.end()
            if match.group() == b"\r" and pos == len(buf):
                self._skip_lf = True
            event = self._process_line(line)
            if event is not None:
                events.append(event)
        del self._buffer[:pos]

        if self.buffered_bytes > self.max_event_bytes:
            raise FramingError(
                f"no event separator within {self.max_event_bytes} bytes "
                f"({self.buffered_bytes} buffered)",
                events=events,
            )
        return events

    def flush(self) -> List[ServerSentEvent]:
        """Dispatch whatever remains at end of stream."""
        events: List[ServerSentEvent] = []
        if self._buffer:
            line = bytes(self._buffer)
            self._buffer.clear()
            self._process_line(line)
        self._skip_lf = False
        event = self._dispatch()
        if event is not None:
            events.append(event)
        return events

    def _process_line(self, line: bytes) -> Optional[ServerSentEvent]:
        if not line:
            return self._dispatch()
        if line.startswith(b":"):
            return None
        self._record_bytes += len(line) + 1
        text = line.decode("utf-8", errors="replace")
        name, sep, value = text.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]
        if name == "data":
            self._data.append(value)
        elif name == "event":
            self._event = value
        elif name == "id":
            if "\0" not in value:
                self._last_id = value
        elif name == "retry":
            if value.isdigit():
                self._retry = int(value)
        return None

    def _dispatch(self) -> Optional[ServerSentEvent]:
        data, event, retry = self._data, self._event, self._retry
        self._data = []
        self._event = None
        self._retry = None
        self._record_bytes = 0
        if not data:
            return None
        return ServerSentEvent(
            data="\n".join(data),
            event=event or "message",
            id=self._last_id,
            retry=retry,
        )


async def iter_sse_events(
    chunks: AsyncIterable[bytes],
    decoder: Optional[SSEDecoder] = None,
) -> AsyncIterator[ServerSentEvent]:
    """Lazily decode an async byte stream into records.

    The sequence is finite (ends when ``chunks`` ends) and not restartable.
    """
    decoder = decoder or SSEDecoder()
    async for chunk in chunks:
        try:
            events = decoder.feed(chunk)
        except FramingError as exc:
            for event in exc.events:
                yield event
            raise exc
        for event in events:
            yield event
    for event in decoder.flush():
        yield event


__all__ = ["SSEDecoder", "iter_sse_events"]
