"""Per-session state threaded through the recursive breakdown helpers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from kbreakdown.config import DEFAULT_VOCABULARY, Vocabulary
from kbreakdown.exceptions import DepthExceeded

logger = logging.getLogger(__name__)


@dataclass
class BreakdownContext:
    """Owned by one session; never shared between files."""

    vocabulary: Vocabulary = DEFAULT_VOCABULARY
    depth: int = 0
    degradations: list[str] = field(default_factory=list)

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Enter one level of expression nesting."""
        if self.depth >= self.vocabulary.max_depth:
            raise DepthExceeded(self.vocabulary.max_depth)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def degrade(self, where: str, detail: str) -> None:
        note = f"{where}: {detail}"
        logger.debug("Degraded %s", note)
        self.degradations.append(note)
