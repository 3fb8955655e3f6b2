"""Thread-safe operational counters for a tailer."""

import threading


class TailStats:
    """Counters updated from the tick loop and read from any thread."""

    _FIELDS = (
        "records_emitted",
        "bytes_consumed",
        "reads_opened",
        "truncations",
        "coalesced_events",
        "subscriber_errors",
        "backlog_discarded",
    )

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: dict[str, int] = {name: 0 for name in self._FIELDS}

    def increment(self, name: str, amount: int = 1):
        if name not in self._counters:
            raise KeyError(f"Unknown counter: {name}")
        with self._lock:
            self._counters[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._counters[name]

    def snapshot(self) -> dict:
        with self._lock:
            return dict(self._counters)
