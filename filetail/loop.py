"""TickLoop: single consumer of scheduled callbacks.

Every piece of engine state is touched only from callbacks run by this
loop, so the reassembler and ingestion scheduler never need locks. Other
threads (the watchdog observer) only enqueue work with ``call_soon``.

A "tick" is the batch of callbacks that were queued when the tick began.
Anything scheduled while a tick runs lands in the next one, which is what
deferred emission and continuation passes rely on.
"""

import logging
import queue
import threading

logger = logging.getLogger(__name__)

_STOP = object()


class TickLoop:
    def __init__(self, on_error=None, name: str = "tick-loop"):
        self._queue: queue.Queue = queue.Queue()
        self._on_error = on_error
        self._name = name
        self._thread: threading.Thread | None = None
        self._running = False

    def call_soon(self, fn, *args):
        """Schedule ``fn(*args)`` on the next tick. Safe from any thread."""
        self._queue.put((fn, args))

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._running

    # Synchronous driving, used when the worker thread is not started

    def run_once(self) -> int:
        """Run the callbacks queued before this call. Returns how many ran.

        Exceptions propagate to the caller.
        """
        ran = 0
        for _ in range(self._queue.qsize()):
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break
            if item is _STOP:
                continue
            fn, args = item
            fn(*args)
            ran += 1
        return ran

    def drain(self, max_ticks: int = 100_000) -> int:
        """Run ticks until nothing is queued. Returns the number of ticks."""
        ticks = 0
        while self._queue.qsize() and ticks < max_ticks:
            self.run_once()
            ticks += 1
        return ticks

    # Worker thread

    def start(self):
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.debug("%s started", self._name)

    def stop(self, timeout: float = 5.0):
        """Stop the worker. Callbacks still queued are dropped."""
        if not self._running:
            return
        self._running = False
        self._queue.put(_STOP)
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.debug("%s stopped", self._name)

    def _run(self):
        while self._running:
            try:
                item = self._queue.get(timeout=0.5)
            except queue.Empty:
                continue
            if item is _STOP:
                break
            fn, args = item
            try:
                fn(*args)
            except Exception as exc:
                self._handle_error(exc)

    def _handle_error(self, exc: Exception):
        if self._on_error is None:
            logger.exception("Callback failed on %s", self._name)
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("Error handler failed on %s", self._name)
