"""
errors.py — Fault taxonomy
===========================
Only caller mistakes are exceptions: a bad grid query or a bad step
index.  Algorithmic outcomes (stuck, exhausted, out of step budget) live
on the Trace as an Outcome value.
"""


class SearchError(Exception):
    """Base class for every error raised by the engine."""


class InvalidPosition(SearchError, ValueError):
    """A grid query named a position outside the grid or on an obstacle."""

    def __init__(self, position, reason: str = "invalid position"):
        self.position = position
        self.reason   = reason
        super().__init__(f"{reason}: {position!r}")


class OutOfBounds(InvalidPosition):
    def __init__(self, position, width: int, height: int):
        self.width  = width
        self.height = height
        super().__init__(position, f"outside {width}x{height} grid")


class IndexOutOfRange(SearchError, IndexError):
    """A step index outside a recorded trace."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"step {index} out of range for a trace of {count} step(s)")
