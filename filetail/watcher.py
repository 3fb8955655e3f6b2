"""SizeWatcher: watchdog event handler that reports size changes of one file."""

import os
import logging

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

logger = logging.getLogger(__name__)


class SizeWatcher(FileSystemEventHandler):
    """Turns filesystem events on the followed file into
    ``notify(previous_size, current_size)`` calls.

    Runs on the observer thread: it only stats the file and forwards the
    size pair, leaving all reading to the tick loop.
    """

    def __init__(self, path: str, notify, initial_size: int = 0):
        super().__init__()
        self._path = os.path.abspath(path)
        self._notify = notify
        self._last_size = initial_size

    @property
    def path(self) -> str:
        return self._path

    @property
    def watched_dir(self) -> str:
        return os.path.dirname(self._path)

    @property
    def last_size(self) -> int:
        return self._last_size

    def _is_target(self, path) -> bool:
        return os.path.abspath(os.fsdecode(path)) == self._path

    def check(self):
        """Stat the file and report the size pair."""
        try:
            size = os.stat(self._path).st_size
        except FileNotFoundError:
            logger.debug("File not found: %s", self._path)
            return
        previous, self._last_size = self._last_size, size
        self._notify(previous, size)

    def on_modified(self, event):
        if not event.is_directory and self._is_target(event.src_path):
            self.check()

    def on_created(self, event):
        if not event.is_directory and self._is_target(event.src_path):
            logger.info("Watched file created: %s", self._path)
            self.check()

    def on_moved(self, event):
        if not event.is_directory and self._is_target(event.dest_path):
            logger.info("Watched file replaced by move: %s", self._path)
            self.check()

    def on_deleted(self, event):
        if not event.is_directory and self._is_target(event.src_path):
            logger.info("Watched file removed: %s, waiting for it to reappear", self._path)


def build_observer(use_polling: bool = False, poll_interval: float = 1.0):
    """Native observer by default, stat polling when asked for."""
    if use_polling:
        return PollingObserver(timeout=poll_interval)
    return Observer()
