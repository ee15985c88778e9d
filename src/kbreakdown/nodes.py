"""Language-agnostic syntax-tree node model consumed by the breakdown engine.

A front-end converts its own parse tree into these nodes.  The set of node
classes is closed: every consumer dispatches on exactly these types, and
anything a front-end cannot express lands in :class:`Unknown`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Param:
    """A declared parameter of a function or constructor."""

    name: str
    type: str | None = None
    default: Node | None = None


@dataclass(frozen=True)
class Argument:
    """A value passed at a call site, optionally named."""

    value: Node
    name: str | None = None
    spread: bool = False


@dataclass(frozen=True)
class SourceFile:
    """Root of one file's tree."""

    decls: tuple[Node, ...] = ()
    package: str | None = None
    imports: tuple[str, ...] = ()
    path: str | None = None


@dataclass(frozen=True)
class StructuredDecl:
    """A class-like declaration with members."""

    name: str
    form: str = "class"  # "class", "interface", "enum", "object", "companion object"
    supertypes: tuple[str, ...] = ()
    members: tuple[Node, ...] = ()
    text: str | None = None


@dataclass(frozen=True)
class PropertyDecl:
    name: str
    type: str | None = None
    initializer: Node | None = None
    delegate: Node | None = None
    mutable: bool = False
    text: str | None = None


@dataclass(frozen=True)
class FuncDecl:
    """A function declaration.

    *body* is a :class:`Block` for block-bodied functions, any other
    expression node for expression-bodied functions, and ``None`` for
    functions without a body.
    """

    name: str
    params: tuple[Param, ...] = ()
    return_type: str | None = None
    body: Node | None = None
    text: str | None = None


@dataclass(frozen=True)
class InitBlock:
    block: Block


@dataclass(frozen=True)
class Block:
    statements: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Lambda:
    body: Block = field(default_factory=Block)
    params: tuple[str, ...] = ()


@dataclass(frozen=True)
class Call:
    """A call of a simple name; receivers are expressed via :class:`BinaryOp`."""

    name: str
    args: tuple[Argument, ...] = ()
    lambda_arg: Lambda | None = None
    type_args: str | None = None


@dataclass(frozen=True)
class BinaryOp:
    """``lhs op rhs``, including member access (``.``, ``?.``) and assignment."""

    lhs: Node
    op: str
    rhs: Node


@dataclass(frozen=True)
class NameRef:
    name: str


@dataclass(frozen=True)
class Literal:
    value: str  # source token, string literals keep their quotes
    kind: str = "string"  # "int", "double", "string", "boolean", "char", "null", "collection"


@dataclass(frozen=True)
class CallableRef:
    name: str
    receiver: str | None = None


@dataclass(frozen=True)
class Unknown:
    """Any shape the front-end could not map; carries source text if known."""

    text: str | None = None
    kind: str | None = None


Node = Union[
    SourceFile,
    StructuredDecl,
    PropertyDecl,
    FuncDecl,
    InitBlock,
    Block,
    Lambda,
    Call,
    BinaryOp,
    NameRef,
    Literal,
    CallableRef,
    Unknown,
]