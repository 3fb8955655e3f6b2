"""Reassembler: splits an arbitrarily chunked byte stream into records."""

import logging

logger = logging.getLogger(__name__)


class Reassembler:
    """Turns ingested bytes into separator-delimited records.

    Bytes are appended to a pending buffer by ``ingest`` and scanned by
    ``process`` at most ``chunk_size`` bytes per pass. Bytes after the last
    separator stay in the partial record until their separator arrives, so
    a record may span any number of ingest calls.

    Only one pass runs at a time. When a pass leaves bytes pending, a single
    continuation is scheduled on the next loop tick instead of recursing, so
    a large backlog never starves ingestion or deferred emission.
    """

    def __init__(
        self,
        separator: int,
        chunk_size: int,
        sink,
        tracker,
        loop,
        encoding: str = "utf-8",
        stats=None,
    ):
        self._separator = separator
        self._chunk_size = chunk_size
        self._sink = sink
        self._tracker = tracker
        self._loop = loop
        self._encoding = encoding
        self._stats = stats

        self._pending = bytearray()
        self._partial = bytearray()
        self._processing = False
        self._continuation_scheduled = False

    @property
    def backlog(self) -> int:
        """Bytes ingested but not yet scanned."""
        return len(self._pending)

    @property
    def partial(self) -> bytes:
        return bytes(self._partial)

    @property
    def processing(self) -> bool:
        return self._processing

    def ingest(self, data: bytes):
        if not data:
            return
        self._pending += data
        self.process()

    def process(self):
        """Run one bounded pass over the pending buffer."""
        if self._processing:
            return
        self._processing = True
        try:
            take = min(len(self._pending), self._chunk_size)
            if take:
                chunk = bytes(self._pending[:take])
                del self._pending[:take]
                self._scan(chunk)
        finally:
            self._processing = False

        if self._pending and not self._continuation_scheduled:
            self._continuation_scheduled = True
            self._loop.call_soon(self._continue)

    def discard_buffered(self) -> int:
        """Drop unscanned bytes and the unterminated record.

        Used when the content they came from has been truncated away, so
        none of it leaks into the first record of the new content.
        """
        dropped = len(self._pending) + len(self._partial)
        if dropped:
            self._pending.clear()
            self._partial = bytearray()
            logger.warning("Discarded %d buffered bytes of replaced content", dropped)
            if self._stats:
                self._stats.increment("backlog_discarded", dropped)
        return dropped

    def _continue(self):
        self._continuation_scheduled = False
        self.process()

    def _scan(self, chunk: bytes):
        start = 0
        end = len(chunk)
        while start < end:
            idx = chunk.find(self._separator, start)
            if idx < 0:
                self._partial += chunk[start:]
                self._consumed(end - start)
                return

            self._partial += chunk[start:idx]
            record = self._partial.decode(self._encoding, errors="replace")
            self._partial = bytearray()
            self._consumed(idx - start + 1)
            self._sink.emit(record)
            start = idx + 1

    def _consumed(self, n: int):
        self._tracker.advance(n)
        if self._stats:
            self._stats.increment("bytes_consumed", n)
