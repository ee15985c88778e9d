"""Classify class member properties by the shape of their initializer."""

from __future__ import annotations

import re

from kbreakdown.breakdown.context import BreakdownContext
from kbreakdown.breakdown.statements import render_expression
from kbreakdown.exceptions import ParseInputError
from kbreakdown.model import Property, PropertyKind
from kbreakdown.nodes import BinaryOp, Call, CallableRef, Literal, NameRef, Node, PropertyDecl

_LITERAL_TYPES = {
    "int": "Int",
    "double": "Double",
    "string": "String",
    "boolean": "Boolean",
    "char": "Char",
    "null": "Nothing?",
    "collection": "Array",
}

# Declared types that make an uninitialized property a collection.
_COLLECTION_TYPES = {
    "Array",
    "ArrayList",
    "Collection",
    "HashMap",
    "HashSet",
    "Iterable",
    "List",
    "Map",
    "MutableCollection",
    "MutableList",
    "MutableMap",
    "MutableSet",
    "Set",
}

_ACCESS_OPERATORS = {".", "?."}


def classify_property(decl: PropertyDecl, ctx: BreakdownContext) -> Property:
    """Return a :class:`Property` with a definitive classification."""
    if not decl.name:
        raise ParseInputError("Property declaration has no name")

    vocab = ctx.vocabulary
    init = decl.initializer

    if init is not None:
        summary = render_expression(init, ctx)
        tail = _tail_call(init)

        if tail is not None and tail.name in vocab.reactive_wrappers:
            inferred = tail.name if tail.name[:1].isupper() else "Observable"
            return _property(decl, PropertyKind.OBSERVABLE, inferred, summary)

        if isinstance(init, Literal) and init.kind == "collection":
            return _property(decl, PropertyKind.COLLECTION, "Array", summary)
        if tail is not None and tail.name in vocab.collection_builders:
            return _property(decl, PropertyKind.COLLECTION, _collection_family(tail.name), summary)

        if isinstance(init, (Literal, NameRef, Call, BinaryOp, CallableRef)):
            return _property(decl, PropertyKind.VALUE, _value_type(init), summary)

        ctx.degrade(f"property {decl.name}", summary)
        return _property(decl, PropertyKind.UNCLASSIFIED, None, summary)

    if decl.delegate is not None:
        summary = f"by {render_expression(decl.delegate, ctx)}"
        tail = _tail_call(decl.delegate)
        if tail is not None and tail.name in vocab.injection_delegates:
            inferred = tail.type_args.strip("<>") if tail.type_args else None
            return _property(decl, PropertyKind.INJECTED, inferred, summary)
        ctx.degrade(f"property {decl.name}", summary)
        return _property(decl, PropertyKind.UNCLASSIFIED, None, summary)

    if decl.type:
        if _base_type(decl.type) in _COLLECTION_TYPES:
            return _property(decl, PropertyKind.COLLECTION, None, None)
        return _property(decl, PropertyKind.VALUE, None, None)

    ctx.degrade(f"property {decl.name}", "no type, initializer, or delegate")
    return _property(decl, PropertyKind.UNCLASSIFIED, None, None)


def _property(
    decl: PropertyDecl, kind: PropertyKind, inferred: str | None, summary: str | None
) -> Property:
    return Property(
        name=decl.name,
        kind=kind,
        type=decl.type or inferred,
        summary=summary,
    )


def _tail_call(node: Node) -> Call | None:
    """Return the call a member-access chain ends in, e.g. ``observable()`` in
    ``listOf(1).observable()``."""
    while isinstance(node, BinaryOp) and node.op in _ACCESS_OPERATORS:
        node = node.rhs
    return node if isinstance(node, Call) else None


def _value_type(node: Node) -> str | None:
    if isinstance(node, Literal):
        return _LITERAL_TYPES.get(node.kind)
    tail = _tail_call(node)
    if tail is not None and tail.name[:1].isupper():
        return tail.name
    return None


def _collection_family(builder: str) -> str:
    if builder[:1].isupper():
        return builder
    lowered = builder.lower()
    for family in ("Map", "Set", "List", "Array"):
        if family.lower() in lowered:
            return family
    return "Collection"


def _base_type(type_text: str) -> str:
    base = re.sub(r"<.*>", "", type_text).rstrip("?").strip()
    return base.rsplit(".", 1)[-1]
