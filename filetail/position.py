"""Tracks the byte offset consumed from the followed file.

The offset only moves forward, except for a reset to zero when the file
shrinks. Nothing is persisted: the cursor lives as long as the tailer.
"""

import logging

logger = logging.getLogger(__name__)


class PositionTracker:
    def __init__(self, offset: int = 0):
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    def set_initial(self, offset: int) -> None:
        if offset < 0:
            raise ValueError(f"Initial offset must be >= 0, got {offset}")
        self._offset = offset
        logger.debug("Cursor initialised at %d", offset)

    def advance(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"Cannot advance cursor by {n}")
        self._offset += n

    def reset_to_zero(self) -> None:
        """Rewind after truncation or replacement of the file."""
        logger.debug("Cursor reset from %d to 0", self._offset)
        self._offset = 0
