"""Errors raised by the breakdown engine.

Only these propagate out of a session; every other unrecognized shape is
degraded to an ``Unclassified`` record.
"""

from __future__ import annotations


class BreakdownError(Exception):
    """Base class for failures of one file's analysis."""


class ParseInputError(BreakdownError):
    """The supplied tree lacks a child the expected declaration kind requires."""


class DepthExceeded(BreakdownError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Expression nesting exceeds the depth ceiling of {limit}")
        self.limit = limit


class UnsupportedDialect(BreakdownError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot derive an import path for {path!r}: unrecognized file type")
        self.path = path
