"""Detect widget-construction calls and build the containment digraph."""

from __future__ import annotations

import logging
from collections import defaultdict

from kbreakdown.breakdown.context import BreakdownContext
from kbreakdown.model import UINode, UINodeDigraph
from kbreakdown.nodes import (
    BinaryOp,
    Block,
    Call,
    FuncDecl,
    InitBlock,
    Lambda,
    Literal,
    Node,
    PropertyDecl,
)

logger = logging.getLogger(__name__)


def build_ui_graph(
    members: tuple[Node, ...], ctx: BreakdownContext
) -> tuple[list[UINode], UINodeDigraph]:
    """Return (controls in discovery order, containment graph) for a class body.

    Only calls named in the widget vocabulary become nodes.  A widget call
    written inside another widget call's trailing lambda is contained by it,
    even when unrecognized calls (``action { }``, ``forEach { }``) sit in
    between.  Nested structural declarations are not scanned.
    """
    builder = _GraphBuilder(ctx)
    for member in members:
        if isinstance(member, PropertyDecl):
            builder.visit(member.initializer)
            builder.visit(member.delegate)
        elif isinstance(member, FuncDecl):
            builder.visit(member.body)
        elif isinstance(member, InitBlock):
            builder.visit(member.block)

    logger.debug(
        "UI graph: %d controls, %d roots", len(builder.controls), len(builder.graph.roots)
    )
    return builder.controls, builder.graph


class _GraphBuilder:
    def __init__(self, ctx: BreakdownContext) -> None:
        self.ctx = ctx
        self.graph = UINodeDigraph()
        self.controls: list[UINode] = []
        self._ordinals: dict[str, int] = defaultdict(int)

    def visit(self, node: Node | None, parent: str | None = None) -> None:
        if node is None:
            return
        with self.ctx.nested():
            if isinstance(node, Call):
                self._visit_call(node, parent)
            elif isinstance(node, BinaryOp):
                self.visit(node.lhs, parent)
                self.visit(node.rhs, parent)
            elif isinstance(node, Lambda):
                self.visit(node.body, parent)
            elif isinstance(node, Block):
                for stmt in node.statements:
                    self.visit(stmt, parent)
            elif isinstance(node, PropertyDecl):
                self.visit(node.initializer, parent)
                self.visit(node.delegate, parent)

    def _visit_call(self, call: Call, parent: str | None) -> None:
        container = parent
        if self.ctx.vocabulary.is_widget(call.name):
            node = self._new_node(call)
            self.graph.add_node(node, parent)
            self.controls.append(node)
            container = node.uid

        # Only the trailing lambda establishes containment.
        for arg in call.args:
            self.visit(arg.value, parent)
        if call.lambda_arg is not None:
            self.visit(call.lambda_arg, container)

    def _new_node(self, call: Call) -> UINode:
        self._ordinals[call.name] += 1
        uid = f"{call.name}#{self._ordinals[call.name]}"
        return UINode(uid=uid, kind=call.name, label=_label(call))


def _label(call: Call) -> str:
    for arg in call.args:
        value = arg.value
        if arg.name is None and isinstance(value, Literal) and value.kind == "string":
            return value.value.strip('"')
    return call.name
