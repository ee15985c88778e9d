"""One file's breakdown pass: top-level dispatch and result accumulation."""

from __future__ import annotations

import logging

from kbreakdown.breakdown.classes import breakdown_class
from kbreakdown.breakdown.context import BreakdownContext
from kbreakdown.breakdown.imports import resolve_import
from kbreakdown.breakdown.ui_graph import build_ui_graph
from kbreakdown.config import DEFAULT_VOCABULARY, Vocabulary
from kbreakdown.exceptions import DepthExceeded, ParseInputError, UnsupportedDialect
from kbreakdown.model import BreakdownResult
from kbreakdown.nodes import FuncDecl, Node, SourceFile, StructuredDecl

logger = logging.getLogger(__name__)


class BreakdownSession:
    """Analyze the top-level declarations of a single source file.

    A session is used for exactly one file; create a new one per file.  The
    only state shared between sessions is the read-only :class:`Vocabulary`.
    """

    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> None:
        self.vocabulary = vocabulary
        self.context = BreakdownContext(vocabulary=vocabulary)
        self.result = BreakdownResult()
        self._done = False

    def run(self, tree: Node, path: str | None = None) -> BreakdownResult:
        """Break down *tree* and return the complete result bundle.

        *path* overrides ``tree.path`` for import resolution.  Raises
        :class:`ParseInputError` or :class:`DepthExceeded` if the file cannot
        be analyzed; no partial result is returned in that case.
        """
        if self._done:
            raise RuntimeError("BreakdownSession objects analyze a single file")
        self._done = True

        if not isinstance(tree, SourceFile):
            raise ParseInputError(
                f"Expected a SourceFile node, got {type(tree).__name__}"
            )
        path = path or tree.path

        result = BreakdownResult()
        try:
            for decl in tree.decls:
                if isinstance(decl, StructuredDecl):
                    self._add_class(result, decl, tree.package, path)
                elif isinstance(decl, FuncDecl):
                    result.independent_functions.append(_function_text(decl))
                else:
                    logger.debug("Skipping top-level %s", type(decl).__name__)
        except RecursionError:
            # The interpreter stack ran out before the configured ceiling.
            raise DepthExceeded(self.vocabulary.max_depth) from None

        result.degradations = list(self.context.degradations)
        self.result = result
        logger.debug(
            "Session %s: %d classes, %d independent functions",
            path or "<memory>",
            len(self.result.class_breakdowns),
            len(self.result.independent_functions),
        )
        return self.result

    def _add_class(
        self,
        result: BreakdownResult,
        decl: StructuredDecl,
        package: str | None,
        path: str | None,
    ) -> None:
        if not decl.name:
            raise ParseInputError("Top-level structured declaration has no name")
        name = decl.name
        if name in result.class_breakdowns:
            raise ParseInputError(f"Class {name!r} is declared more than once")

        breakdown = breakdown_class(decl, self.context, name)
        controls, graph = build_ui_graph(decl.members, self.context)

        view_import = None
        if path is not None:
            try:
                view_import = resolve_import(path, name, package)
            except UnsupportedDialect as e:
                logger.warning("%s", e)

        # Commit only once every piece of this class is complete.
        result.class_breakdowns[name] = breakdown
        if controls:
            result.detected_ui_controls[name] = controls
            result.view_node_graphs[name] = graph
        if view_import is not None:
            result.view_imports[name] = view_import


def breakdown_file(
    tree: Node, vocabulary: Vocabulary = DEFAULT_VOCABULARY, path: str | None = None
) -> BreakdownResult:
    """Run a fresh :class:`BreakdownSession` over one file's tree."""
    return BreakdownSession(vocabulary).run(tree, path)


def _function_text(decl: FuncDecl) -> str:
    if decl.text:
        return decl.text
    params = ", ".join(f"{p.name}: {p.type}" if p.type else p.name for p in decl.params)
    signature = f"fun {decl.name}({params})"
    if decl.return_type:
        signature += f": {decl.return_type}"
    return signature
