"""Break Kotlin view classes down into an IR for generative UI testing."""

from kbreakdown.breakdown import BreakdownSession, breakdown_file
from kbreakdown.config import DEFAULT_VOCABULARY, Vocabulary, load_vocabulary
from kbreakdown.model import BreakdownResult, ClassBreakdown, UINode, UINodeDigraph

__all__ = [
    "DEFAULT_VOCABULARY",
    "BreakdownResult",
    "BreakdownSession",
    "ClassBreakdown",
    "UINode",
    "UINodeDigraph",
    "Vocabulary",
    "breakdown_file",
    "load_vocabulary",
]
