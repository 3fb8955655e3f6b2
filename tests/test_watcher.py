"""Tests for filetail/watcher.py."""

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)
from watchdog.observers.polling import PollingObserver

from filetail.watcher import SizeWatcher, build_observer


def _make(path, initial_size: int = 0):
    calls: list[tuple[int, int]] = []
    watcher = SizeWatcher(str(path), lambda prev, curr: calls.append((prev, curr)), initial_size)
    return watcher, calls


class TestSizeWatcher:
    def test_modified_reports_size_pair(self, log_file):
        watcher, calls = _make(log_file)
        log_file.write_bytes(b"hello\n")
        watcher.on_modified(FileModifiedEvent(str(log_file)))
        assert calls == [(0, 6)]
        assert watcher.last_size == 6

    def test_consecutive_changes_chain_sizes(self, log_file):
        watcher, calls = _make(log_file)
        log_file.write_bytes(b"abc")
        watcher.on_modified(FileModifiedEvent(str(log_file)))
        log_file.write_bytes(b"a")
        watcher.on_modified(FileModifiedEvent(str(log_file)))
        assert calls == [(0, 3), (3, 1)]

    def test_other_files_ignored(self, tmp_path, log_file):
        watcher, calls = _make(log_file)
        other = tmp_path / "other.log"
        other.write_bytes(b"x")
        watcher.on_modified(FileModifiedEvent(str(other)))
        assert calls == []

    def test_directory_events_ignored(self, tmp_path, log_file):
        watcher, calls = _make(log_file)
        watcher.on_modified(DirModifiedEvent(str(tmp_path)))
        assert calls == []

    def test_created(self, log_file):
        watcher, calls = _make(log_file, initial_size=10)
        log_file.write_bytes(b"new\n")
        watcher.on_created(FileCreatedEvent(str(log_file)))
        assert calls == [(10, 4)]

    def test_moved_into_place(self, tmp_path, log_file):
        watcher, calls = _make(log_file, initial_size=50)
        staged = tmp_path / "staged.log"
        staged.write_bytes(b"rotated\n")
        staged.replace(log_file)
        watcher.on_moved(FileMovedEvent(str(staged), str(log_file)))
        assert calls == [(50, 8)]

    def test_missing_file_not_reported(self, log_file):
        watcher, calls = _make(log_file)
        log_file.unlink()
        watcher.on_modified(FileModifiedEvent(str(log_file)))
        watcher.on_deleted(FileDeletedEvent(str(log_file)))
        assert calls == []

    def test_watched_dir(self, tmp_path, log_file):
        watcher, _ = _make(log_file)
        assert watcher.watched_dir == str(tmp_path)


class TestBuildObserver:
    def test_polling(self):
        assert isinstance(build_observer(use_polling=True, poll_interval=0.1), PollingObserver)
