"""Break a structured declaration down into a :class:`ClassBreakdown`."""

from __future__ import annotations

import logging
import re

from kbreakdown.breakdown.context import BreakdownContext
from kbreakdown.breakdown.properties import classify_property
from kbreakdown.breakdown.statements import (
    UNKNOWN_PLACEHOLDER,
    analyze_block,
    analyze_method_body,
    method_shape,
    render_expression,
)
from kbreakdown.exceptions import ParseInputError
from kbreakdown.model import (
    ClassBreakdown,
    Method,
    MethodParam,
    MethodShape,
    Property,
    PropertyKind,
)
from kbreakdown.nodes import (
    CallableRef,
    FuncDecl,
    InitBlock,
    PropertyDecl,
    StructuredDecl,
    Unknown,
)

logger = logging.getLogger(__name__)

INIT_METHOD = "<init>"


def breakdown_class(
    decl: StructuredDecl, ctx: BreakdownContext, class_name: str | None = None
) -> ClassBreakdown:
    """Return the complete breakdown of *decl*.

    A malformed member is recorded as an ``Unclassified`` property or a
    zero-statement method; it never aborts the rest of the class.
    """
    name = class_name or decl.name
    if not name:
        raise ParseInputError("Structured declaration has no name")

    properties: list[Property] = []
    methods: list[Method] = []
    structures: list[str] = []

    for member in decl.members:
        if isinstance(member, PropertyDecl):
            try:
                properties.append(classify_property(member, ctx))
            except ParseInputError as e:
                ctx.degrade(f"{name} property", str(e))
                properties.append(
                    Property(
                        name=member.name or UNKNOWN_PLACEHOLDER,
                        kind=PropertyKind.UNCLASSIFIED,
                        type=member.type,
                        summary=member.text,
                    )
                )
        elif isinstance(member, FuncDecl):
            try:
                methods.append(breakdown_method(member, ctx))
            except ParseInputError as e:
                ctx.degrade(f"{name} method", str(e))
                methods.append(
                    Method(
                        name=member.name or UNKNOWN_PLACEHOLDER,
                        shape=method_shape(member.body),
                    )
                )
        elif isinstance(member, InitBlock):
            methods.append(
                Method(
                    name=INIT_METHOD,
                    shape=MethodShape.BLOCK,
                    statements=analyze_block(member.block, ctx),
                )
            )
        elif isinstance(member, StructuredDecl):
            structures.append(structure_marker(member))
        else:
            text = member.text if isinstance(member, Unknown) else None
            ctx.degrade(f"{name} member", text or type(member).__name__)
            properties.append(
                Property(
                    name=UNKNOWN_PLACEHOLDER,
                    kind=PropertyKind.UNCLASSIFIED,
                    summary=text,
                )
            )

    logger.debug(
        "Class %s: %d supertypes, %d properties, %d methods",
        name,
        len(decl.supertypes),
        len(properties),
        len(methods),
    )

    return ClassBreakdown(
        name=name,
        superclasses=tuple(_simplify_supertype(s) for s in decl.supertypes),
        properties=tuple(properties),
        methods=tuple(methods),
        structures=tuple(structures),
        form=decl.form,
    )


def breakdown_method(func: FuncDecl, ctx: BreakdownContext) -> Method:
    """Record a member function: parameters, return type and statements."""
    if not func.name:
        raise ParseInputError("Function declaration has no name")

    shape = method_shape(func.body)
    if func.return_type:
        return_type = func.return_type
    elif shape is MethodShape.BLOCK or func.body is None:
        return_type = "Unit"
    else:
        return_type = "expression"

    reference = None
    if isinstance(func.body, CallableRef):
        reference = render_expression(func.body, ctx)

    return Method(
        name=func.name,
        shape=shape,
        params=tuple(MethodParam(p.name, p.type) for p in func.params),
        return_type=return_type,
        statements=analyze_method_body(func.body, ctx),
        reference=reference,
    )


def structure_marker(decl: StructuredDecl) -> str:
    """Opaque marker for a nested structure, e.g. ``"companion object"``."""
    if decl.form == "companion object" and decl.name in ("", "Companion"):
        return decl.form
    return f"{decl.form} {decl.name}".strip()


def _simplify_supertype(type_text: str) -> str:
    """``Fragment()`` -> ``Fragment``, ``Comparable<Foo>`` -> ``Comparable``."""
    result = re.sub(r"<.*>", "", type_text)
    result = re.sub(r"\(.*\)", "", result)
    return result.strip()
