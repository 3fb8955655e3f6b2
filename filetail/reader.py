"""Bounded byte-range reader over the followed file."""

import logging

logger = logging.getLogger(__name__)


class RangeReader:
    """Streams bytes ``[start, end)`` of a file in blocks.

    With ``end=None`` the range runs to whatever the end of file is while
    reading. ``read_block`` returns ``b""`` once the range is exhausted,
    which is the end-of-range signal.
    """

    def __init__(self, path: str, start: int, end: int | None = None, block_size: int = 65536):
        if start < 0:
            raise ValueError(f"Range start must be >= 0, got {start}")
        if end is not None and end < start:
            raise ValueError(f"Range end {end} is before start {start}")
        if block_size <= 0:
            raise ValueError(f"block_size must be positive, got {block_size}")
        self._path = path
        self._start = start
        self._end = end
        self._block_size = block_size
        self._position = start
        self._file = None
        self._done = False

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int | None:
        return self._end

    @property
    def position(self) -> int:
        return self._position

    @property
    def done(self) -> bool:
        return self._done

    def open(self):
        self._file = open(self._path, "rb")
        self._file.seek(self._start)
        logger.debug("Opened %s for range [%d, %s)", self._path, self._start,
                     "EOF" if self._end is None else self._end)

    def read_block(self) -> bytes:
        if self._done:
            return b""
        if self._file is None:
            raise ValueError("Reader is not open")

        size = self._block_size
        if self._end is not None:
            size = min(size, self._end - self._position)
        data = self._file.read(size) if size > 0 else b""
        if not data:
            self._done = True
            return b""
        self._position += len(data)
        return data

    def close(self):
        if self._file:
            self._file.close()
            self._file = None
        self._done = True

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
