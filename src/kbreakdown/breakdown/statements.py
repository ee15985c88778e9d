"""Reconstruct method bodies as ordered statement records."""

from __future__ import annotations

from kbreakdown.breakdown.context import BreakdownContext
from kbreakdown.model import MethodShape, StatementKind, StatementRecord
from kbreakdown.nodes import (
    Argument,
    BinaryOp,
    Block,
    Call,
    CallableRef,
    FuncDecl,
    InitBlock,
    Lambda,
    Literal,
    NameRef,
    Node,
    PropertyDecl,
    StructuredDecl,
    Unknown,
)

UNKNOWN_PLACEHOLDER = "<unknown>"

# Operators rendered without surrounding spaces.
_ACCESS_OPERATORS = {".", "?.", "::"}


def method_shape(body: Node | None) -> MethodShape:
    """Classify a function body as block, expression, or reference."""
    if body is None or isinstance(body, CallableRef):
        return MethodShape.REFERENCE
    if isinstance(body, Block):
        return MethodShape.BLOCK
    return MethodShape.EXPRESSION


def analyze_method_body(
    body: Node | None, ctx: BreakdownContext
) -> tuple[StatementRecord, ...]:
    """Return the statement records of *body* in source order."""
    shape = method_shape(body)
    if shape is MethodShape.REFERENCE:
        return ()
    if shape is MethodShape.BLOCK:
        return analyze_block(body, ctx)  # type: ignore[arg-type]
    return (statement_record(body, ctx),)  # type: ignore[arg-type]


def analyze_block(block: Block, ctx: BreakdownContext) -> tuple[StatementRecord, ...]:
    records: list[StatementRecord] = []
    with ctx.nested():
        for stmt in block.statements:
            records.append(statement_record(stmt, ctx))
    return tuple(records)


def statement_record(stmt: Node, ctx: BreakdownContext) -> StatementRecord:
    """Normalize a single statement, recursing into its sub-expressions.

    Every node entered costs one level of ``ctx`` depth, the same accounting
    the UI graph builder uses.
    """
    with ctx.nested():
        if isinstance(stmt, PropertyDecl):
            text, nested = _declaration(stmt, ctx)
            return StatementRecord(StatementKind.DECLARATION, text, nested)
        if isinstance(stmt, BinaryOp):
            text, nested = _binary(stmt, ctx)
            return StatementRecord(StatementKind.BINARY_OPERATION, text, nested)
        if isinstance(stmt, Call):
            text, nested = _call(stmt, ctx)
            return StatementRecord(StatementKind.CALL, text, nested)
        if isinstance(stmt, (Literal, NameRef, CallableRef)):
            return StatementRecord(StatementKind.LITERAL, _leaf_text(stmt))
        if isinstance(stmt, Lambda):
            text, nested = _lambda(stmt, ctx)
            return StatementRecord(StatementKind.UNCLASSIFIED, text, nested)

        text = _fallback_text(stmt)
        ctx.degrade("statement", text)
        return StatementRecord(StatementKind.UNCLASSIFIED, text)


def breakdown_declaration(decl: PropertyDecl, ctx: BreakdownContext) -> str:
    """Render a local declaration as ``name = value``."""
    with ctx.nested():
        return _declaration(decl, ctx)[0]


def render_expression(node: Node | None, ctx: BreakdownContext) -> str:
    """Best-effort one-line summary of an expression."""
    if node is None:
        return ""
    return _resolve(node, ctx)[0]


# Each helper returns the rendered text plus the records of any lambda bodies
# folded into it, so a statement's nested records are computed only once.
_Rendered = tuple[str, tuple[StatementRecord, ...]]


def _resolve(node: Node, ctx: BreakdownContext) -> _Rendered:
    if isinstance(node, Block):
        records = analyze_block(node, ctx)
        return _braced((), records), records
    with ctx.nested():
        if isinstance(node, (Literal, NameRef, CallableRef)):
            return _leaf_text(node), ()
        if isinstance(node, BinaryOp):
            return _binary(node, ctx)
        if isinstance(node, Call):
            return _call(node, ctx)
        if isinstance(node, Lambda):
            return _lambda(node, ctx)
        if isinstance(node, PropertyDecl):
            return _declaration(node, ctx)
        return _fallback_text(node), ()


def _declaration(decl: PropertyDecl, ctx: BreakdownContext) -> _Rendered:
    if decl.initializer is not None:
        value, nested = _resolve(decl.initializer, ctx)
        return f"{decl.name} = {value}", nested
    if decl.delegate is not None:
        value, nested = _resolve(decl.delegate, ctx)
        return f"{decl.name} by {value}", nested
    if decl.type:
        return f"{decl.name}: {decl.type}", ()
    return decl.name, ()


def _binary(op: BinaryOp, ctx: BreakdownContext) -> _Rendered:
    lhs, lhs_nested = _resolve(op.lhs, ctx)
    rhs, rhs_nested = _resolve(op.rhs, ctx)
    if op.op in _ACCESS_OPERATORS:
        text = f"{lhs}{op.op}{rhs}"
    else:
        text = f"{lhs} {op.op} {rhs}"
    return text, lhs_nested + rhs_nested


def _call(call: Call, ctx: BreakdownContext) -> _Rendered:
    text = call.name + (call.type_args or "")
    args, nested = _arguments(call.args, ctx)
    if call.args or call.lambda_arg is None:
        text += f"({args})"
    if call.lambda_arg is not None:
        lambda_text, lambda_nested = _resolve(call.lambda_arg, ctx)
        text += f" {lambda_text}"
        nested += lambda_nested
    return text, nested


def _arguments(args: tuple[Argument, ...], ctx: BreakdownContext) -> _Rendered:
    """Render positional and named arguments in source order."""
    parts: list[str] = []
    nested: tuple[StatementRecord, ...] = ()
    for arg in args:
        value, value_nested = _resolve(arg.value, ctx)
        if arg.spread:
            value = f"*{value}"
        if arg.name:
            value = f"{arg.name} = {value}"
        parts.append(value)
        nested += value_nested
    return ", ".join(parts), nested


def _lambda(lam: Lambda, ctx: BreakdownContext) -> _Rendered:
    records = analyze_block(lam.body, ctx)
    return _braced(lam.params, records), records


def _braced(params: tuple[str, ...], records: tuple[StatementRecord, ...]) -> str:
    head = f"{', '.join(params)} ->" if params else ""
    body = "; ".join(r.text for r in records)
    inner = " ".join(part for part in (head, body) if part)
    return f"{{ {inner} }}" if inner else "{ }"


def _fallback_text(node: Node) -> str:
    if isinstance(node, Unknown):
        return node.text or UNKNOWN_PLACEHOLDER
    if isinstance(node, FuncDecl):
        return node.text or f"fun {node.name}()"
    if isinstance(node, StructuredDecl):
        return node.text or f"{node.form} {node.name}"
    if isinstance(node, InitBlock):
        return "init"
    return getattr(node, "text", None) or UNKNOWN_PLACEHOLDER


def _leaf_text(node: Literal | NameRef | CallableRef) -> str:
    if isinstance(node, NameRef):
        return node.name
    if isinstance(node, Literal):
        return node.value
    return f"{node.receiver or ''}::{node.name}"
