"""Incremental decoding of Server-Sent-Events style model streams.

Providers emit ``data: {...}`` records, possibly several per network chunk
and possibly split across chunks, terminated by ``data: [DONE]``. The
decoder buffers text until a record's braces balance, then hands the
parsed record to a provider-specific delta extractor.

Usage:
    decoder = SSEStreamDecoder()
    for record in decoder.feed(chunk_text):
        ...
    if decoder.done:
        ...
"""

from __future__ import annotations

import asyncio
import codecs
import json
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union

from llm2ui.logging import get_component_logger
from llm2ui.protocols import LoggerProtocol, StreamChunk
from llm2ui.utils.json_scan import find_balanced_end

DATA_MARKER = "data:"
DONE_SENTINEL = "[DONE]"

DeltaExtractor = Callable[[Dict[str, Any]], Optional[str]]
ErrorExtractor = Callable[[Dict[str, Any]], Optional[str]]


class SSEStreamDecoder:
    """Buffers stream text and yields complete ``data:`` JSON records.

    Once the ``[DONE]`` sentinel is seen the decoder is finished and
    ignores any further input.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    @property
    def pending(self) -> str:
        """Buffered text not yet forming a complete record."""
        return self._buffer

    def feed(self, text: str) -> List[str]:
        """Append ``text`` and return the records completed by it."""
        if self._done:
            return []
        self._buffer += text
        return self._drain()

    def close(self) -> List[str]:
        """Signal end of stream. Incomplete records are dropped."""
        records = [] if self._done else self._drain()
        self._buffer = ""
        return records

    def _drain(self) -> List[str]:
        buf = self._buffer
        records: List[str] = []

        # A sentinel left over from the previous chunk, e.g. "...}[DO" + "NE]"
        if buf.lstrip().startswith(DONE_SENTINEL):
            return self._finish(records)

        pos = 0
        keep = len(buf)
        while True:
            marker = buf.find(DATA_MARKER, pos)
            if marker == -1:
                keep = _partial_marker_start(buf, pos)
                break

            i = _skip_blanks(buf, marker + len(DATA_MARKER))
            if i >= len(buf):
                keep = marker
                break

            payload = buf[i:]
            if payload.startswith(DONE_SENTINEL):
                return self._finish(records)
            if DONE_SENTINEL.startswith(payload):
                keep = marker
                break

            if buf[i] != "{":
                # Empty data line or non-JSON payload
                pos = i
                continue

            end = find_balanced_end(buf, i)
            if end is None:
                keep = marker
                break

            records.append(buf[i:end])
            pos = end

            trailer = _skip_blanks(buf, end, newlines=True)
            if buf.startswith(DONE_SENTINEL, trailer):
                return self._finish(records)
            if trailer < len(buf) and DONE_SENTINEL.startswith(buf[trailer:]):
                keep = trailer
                break

        self._buffer = buf[keep:]
        return records

    def _finish(self, records: List[str]) -> List[str]:
        self._done = True
        self._buffer = ""
        return records


def _skip_blanks(text: str, i: int, newlines: bool = False) -> int:
    blanks = " \t\r\n" if newlines else " \t"
    while i < len(text) and text[i] in blanks:
        i += 1
    return i


def _partial_marker_start(text: str, pos: int) -> int:
    """Index where a possibly truncated ``data:`` marker begins, else len(text)."""
    for size in range(min(len(DATA_MARKER) - 1, len(text) - pos), 0, -1):
        if text.endswith(DATA_MARKER[:size]):
            return len(text) - size
    return len(text)


async def decode_stream(
    chunks: AsyncIterator[Union[str, bytes]],
    extract_delta: DeltaExtractor,
    extract_error: Optional[ErrorExtractor] = None,
    logger: Optional[LoggerProtocol] = None,
) -> AsyncIterator[StreamChunk]:
    """Turn raw stream chunks into text deltas.

    Always ends with exactly one terminal chunk (done=True). A provider
    error record ends the stream with that chunk's ``error`` set.

    Args:
        chunks: Raw response body chunks
        extract_delta: Maps a parsed record to its text increment
        extract_error: Maps a parsed record to an error message, if any
        logger: Optional logger
    """
    log = get_component_logger("StreamDecoder", logger)
    decoder = SSEStreamDecoder()
    utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
    record_count = 0

    def to_chunks(records: List[str]) -> List[StreamChunk]:
        nonlocal record_count
        out: List[StreamChunk] = []
        for record in records:
            record_count += 1
            try:
                data = json.loads(record)
            except json.JSONDecodeError:
                log.debug("stream_record_unparseable", length=len(record))
                continue
            if not isinstance(data, dict):
                continue
            if extract_error is not None:
                error = extract_error(data)
                if error:
                    out.append(StreamChunk(done=True, error=error))
                    return out
            delta = extract_delta(data)
            if delta:
                out.append(StreamChunk(content=delta))
        return out

    async for raw in chunks:
        text = utf8.decode(raw) if isinstance(raw, bytes) else raw
        for chunk in to_chunks(decoder.feed(text)):
            yield chunk
            if chunk.done:
                return
        if decoder.done:
            log.debug("stream_done_sentinel", records=record_count)
            yield StreamChunk(done=True)
            return

    for chunk in to_chunks(decoder.close()):
        yield chunk
        if chunk.done:
            return

    log.debug("stream_ended", records=record_count)
    yield StreamChunk(done=True)


class ChunkChannel:
    """Bounded queue between a stream-decoding task and its consumer.

    The producer task drains ``source`` into the queue; iteration yields
    chunks in order and stops after the terminal chunk. Closing the
    channel cancels the producer, which releases the network handle.

    Usage:
        async with ChunkChannel(client.stream_chat(messages)) as channel:
            async for chunk in channel:
                ...
    """

    def __init__(self, source: AsyncIterator[StreamChunk], maxsize: int = 64):
        self._source = source
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._task: Optional[asyncio.Task] = None
        self._finished = False

    def start(self) -> "ChunkChannel":
        if self._task is None:
            self._task = asyncio.create_task(self._pump())
        return self

    async def _pump(self) -> None:
        try:
            async for chunk in self._source:
                await self._queue.put(chunk)
                if chunk.done:
                    return
            await self._queue.put(StreamChunk(done=True))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            await self._queue.put(StreamChunk(done=True, error=str(e)))

    def __aiter__(self) -> "ChunkChannel":
        self.start()
        return self

    async def __anext__(self) -> StreamChunk:
        if self._finished:
            raise StopAsyncIteration
        chunk = await self._queue.get()
        if chunk.done:
            self._finished = True
        return chunk

    async def aclose(self) -> None:
        """Cancel the producer and wait for it to unwind."""
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "ChunkChannel":
        return self.start()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
