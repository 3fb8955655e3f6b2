"""Tailer: follows one file and emits its records to a subscriber."""

import os
import logging

from filetail.config import TailConfig
from filetail.ingest import IngestionScheduler
from filetail.loop import TickLoop
from filetail.position import PositionTracker
from filetail.reassembler import Reassembler
from filetail.sink import EmissionSink
from filetail.stats import TailStats
from filetail.watcher import SizeWatcher, build_observer

logger = logging.getLogger(__name__)


class Tailer:
    """Wires the engine together for a single file.

    Construction stats the file (raising ``FileNotFoundError`` if it is
    missing), positions the cursor and schedules the initial read. Nothing
    runs until ``start()`` launches the loop thread and the watchdog
    observer, or until a test drives ``loop`` by hand.
    """

    def __init__(self, path: str, config: TailConfig | None = None, loop: TickLoop | None = None):
        self._config = config or TailConfig()
        self._path = os.path.abspath(path)
        initial_size = os.stat(self._path).st_size

        self.stats = TailStats()
        self._error_callback = None
        self._loop = loop or TickLoop(on_error=self._handle_error, name="tailer-loop")

        self._tracker = PositionTracker()
        self._tracker.set_initial(0 if self._config.read_old else initial_size)

        self._sink = EmissionSink(self._loop, deferred=self._config.emit_async, stats=self.stats)
        self._reassembler = Reassembler(
            separator=self._config.separator_byte,
            chunk_size=self._config.chunk_size,
            sink=self._sink,
            tracker=self._tracker,
            loop=self._loop,
            encoding=self._config.encoding,
            stats=self.stats,
        )
        self._ingest = IngestionScheduler(
            self._path,
            self._tracker,
            self._reassembler,
            self._loop,
            block_size=self._config.read_block_size,
            initial_size=initial_size,
            stats=self.stats,
        )
        self._watcher = SizeWatcher(self._path, self.notify, initial_size)
        self._observer = None

        self._loop.call_soon(self._ingest.start)

    @property
    def path(self) -> str:
        return self._path

    @property
    def config(self) -> TailConfig:
        return self._config

    @property
    def loop(self) -> TickLoop:
        return self._loop

    @property
    def position(self) -> int:
        return self._tracker.offset

    @property
    def partial(self) -> bytes:
        return self._reassembler.partial

    @property
    def running(self) -> bool:
        return self._observer is not None

    def on_record(self, callback):
        """Register the subscriber receiving each record as ``str``."""
        self._sink.subscribe(callback)
        return callback

    def on_error(self, callback):
        """Register a callback receiving exceptions raised on the loop thread."""
        self._error_callback = callback
        return callback

    def notify(self, previous_size: int, current_size: int):
        """Report a size change. Safe to call from any thread."""
        self._loop.call_soon(self._ingest.on_change, previous_size, current_size)

    def start(self):
        if self._observer is not None:
            return
        self._loop.start()
        observer = build_observer(self._config.use_polling, self._config.poll_interval)
        observer.schedule(self._watcher, self._watcher.watched_dir, recursive=False)
        observer.start()
        self._observer = observer
        logger.info("Tailing %s from offset %d", self._path, self._tracker.offset)

    def stop(self):
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None
        self._loop.stop()
        self._ingest.close()
        if self._reassembler.partial:
            logger.debug("Holding %d bytes of unterminated record", len(self._reassembler.partial))
        logger.info("Stopped tailing %s at offset %d", self._path, self._tracker.offset)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def _handle_error(self, exc: Exception):
        logger.error("Tailing %s failed: %s", self._path, exc)
        if self._error_callback is not None:
            self._error_callback(exc)
