"""IngestionScheduler: decides which byte range to read on each change."""

import logging
import os

from filetail.reader import RangeReader

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """Feeds new bytes of the followed file to the reassembler.

    At most one ``RangeReader`` is open at a time. It is pumped one block
    per loop tick so change notifications, deferred emissions and
    continuation passes interleave with a long read. Notifications that
    arrive while a read is open are coalesced; once the read finishes the
    file is stat'ed again so growth seen during the read is never lost.
    """

    def __init__(
        self,
        path: str,
        tracker,
        reassembler,
        loop,
        block_size: int = 65536,
        initial_size: int = 0,
        stats=None,
    ):
        self._path = path
        self._tracker = tracker
        self._reassembler = reassembler
        self._loop = loop
        self._block_size = block_size
        self._observed_size = initial_size
        self._stats = stats
        self._reader: RangeReader | None = None
        self._coalesced = 0

    @property
    def reading(self) -> bool:
        return self._reader is not None

    @property
    def next_offset(self) -> int:
        """First byte not yet read: consumed bytes plus unscanned backlog."""
        return self._tracker.offset + self._reassembler.backlog

    def start(self):
        """Open the initial read, running to the current end of file."""
        if self._reader is None:
            self._open(None)

    def close(self):
        """Close the open read, if any. Pumps still queued for it become no-ops."""
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def on_change(self, previous_size: int, current_size: int):
        # A shrink already handled by the post-read re-check is not a new truncation
        if current_size < previous_size and current_size < self._observed_size:
            self._truncated(previous_size, current_size)
        self._observed_size = current_size

        if self._reader is not None:
            self._coalesced += 1
            if self._stats:
                self._stats.increment("coalesced_events")
            logger.debug("Read in progress on %s, coalescing change to %d bytes",
                         self._path, current_size)
            return

        self._open(current_size)

    def _truncated(self, previous_size: int, current_size: int):
        logger.info("File truncated: %s (%d -> %d bytes), restarting from 0",
                    self._path, previous_size, current_size)
        if self._stats:
            self._stats.increment("truncations")
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        self._reassembler.discard_buffered()
        self._tracker.reset_to_zero()

    def _open(self, end: int | None):
        start = self.next_offset
        if end is not None and end <= start:
            return

        reader = RangeReader(self._path, start, end, self._block_size)
        reader.open()
        self._reader = reader
        self._coalesced = 0
        if self._stats:
            self._stats.increment("reads_opened")
        self._loop.call_soon(self._pump, reader)

    def _pump(self, reader: RangeReader):
        # Stale pump for a read abandoned on truncation
        if reader is not self._reader:
            return

        try:
            data = reader.read_block()
        except OSError:
            reader.close()
            self._reader = None
            raise

        if data:
            self._reassembler.ingest(data)
            self._loop.call_soon(self._pump, reader)
            return

        reader.close()
        self._reader = None
        logger.debug("Finished range [%d, %d) of %s", reader.start, reader.position, self._path)
        self._reassembler.process()
        self._recheck()

    def _recheck(self):
        if self._coalesced:
            logger.debug("Re-checking %s after %d coalesced change(s)", self._path, self._coalesced)
            self._coalesced = 0
        try:
            size = os.stat(self._path).st_size
        except FileNotFoundError:
            logger.debug("File %s missing on re-check, waiting for next change", self._path)
            return

        if size < self._observed_size or size > self.next_offset:
            self.on_change(self._observed_size, size)
        else:
            self._observed_size = size
