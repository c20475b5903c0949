from __future__ import annotations

"""
File Install Sequencer.

Issues the strictly increasing integers used as the File table's Sequence
column. One instance is handed down through every scan of an assembly run
so numbering stays global across all declared locations.
"""

from whimsi.domain.constants import DEFAULT_SEQUENCE_START


class Sequencer:
    """
    Monotonic counter starting from a configurable base.

    No upper bound is enforced; callers that map the value into a bounded
    column are responsible for overflow checks.
    """

    def __init__(self, start: int = DEFAULT_SEQUENCE_START) -> None:
        self._start = start
        self._current = start

    def next(self) -> int:
        """Return the current value and advance the counter."""
        value = self._current
        self._current += 1
        return value

    @property
    def issued(self) -> int:
        """Number of values handed out so far."""
        return self._current - self._start

    def __repr__(self) -> str:
        return f"Sequencer(start={self._start}, next={self._current})"
