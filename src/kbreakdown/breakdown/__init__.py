"""Breakdown engine: classes, properties, method bodies and UI graphs."""

from kbreakdown.breakdown.classes import breakdown_class, breakdown_method
from kbreakdown.breakdown.context import BreakdownContext
from kbreakdown.breakdown.imports import detect_dialect, resolve_import
from kbreakdown.breakdown.properties import classify_property
from kbreakdown.breakdown.session import BreakdownSession, breakdown_file
from kbreakdown.breakdown.statements import analyze_method_body, breakdown_declaration
from kbreakdown.breakdown.ui_graph import build_ui_graph

__all__ = [
    "BreakdownContext",
    "BreakdownSession",
    "analyze_method_body",
    "breakdown_class",
    "breakdown_declaration",
    "breakdown_file",
    "breakdown_method",
    "build_ui_graph",
    "classify_property",
    "detect_dialect",
    "resolve_import",
]
