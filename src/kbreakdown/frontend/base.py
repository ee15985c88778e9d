"""Front-end protocol: every parser adapter conforms to this interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from kbreakdown.nodes import SourceFile


class Frontend(Protocol):
    """Protocol for parsers that produce the breakdown node model."""

    def can_handle(self, path: Path) -> bool:
        """Return True if this front-end parses files like *path*."""
        ...

    def parse(self, source: bytes | str, path: str | None = None) -> SourceFile:
        """Convert *source* into a :class:`SourceFile` tree."""
        ...
