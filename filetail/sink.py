"""EmissionSink: hands completed records to the registered subscriber."""

import logging

logger = logging.getLogger(__name__)


class EmissionSink:
    """Delivers each record either inline or on the next loop tick.

    Subscriber failures are logged and counted so a broken consumer never
    leaves the reassembler halfway through a pass.
    """

    def __init__(self, loop, deferred: bool = False, stats=None):
        self._loop = loop
        self._deferred = deferred
        self._stats = stats
        self._subscriber = None

    @property
    def deferred(self) -> bool:
        return self._deferred

    def subscribe(self, callback):
        """Register the single subscriber, replacing any previous one."""
        self._subscriber = callback

    def emit(self, record: str):
        if self._deferred:
            self._loop.call_soon(self._deliver, record)
        else:
            self._deliver(record)

    def _deliver(self, record: str):
        if self._subscriber is None:
            return
        if self._stats:
            self._stats.increment("records_emitted")
        try:
            self._subscriber(record)
        except Exception:
            if self._stats:
                self._stats.increment("subscriber_errors")
            logger.exception("Subscriber failed on record of %d chars", len(record))
