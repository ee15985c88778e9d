"""Parser front-ends producing the breakdown node model."""

from __future__ import annotations

import logging

from kbreakdown.frontend.base import Frontend

logger = logging.getLogger(__name__)

__all__ = ["Frontend", "load_frontends"]


def load_frontends() -> list[Frontend]:
    """Return the front-ends whose parser packages are installed."""
    frontends: list[Frontend] = []
    try:
        from kbreakdown.frontend.kotlin import KotlinFrontend

        frontends.append(KotlinFrontend())
    except ImportError:
        logger.warning(
            "tree-sitter / tree-sitter-kotlin not installed; "
            "skipping Kotlin sources. "
            "Install with: pip install kbreakdown[kotlin]"
        )
    return frontends
