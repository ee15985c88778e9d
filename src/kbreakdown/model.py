"""Intermediate representation produced by the breakdown engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PropertyKind(str, Enum):
    VALUE = "Value"
    OBSERVABLE = "Observable"
    COLLECTION = "Collection"
    INJECTED = "Injected"
    UNCLASSIFIED = "Unclassified"


class MethodShape(str, Enum):
    BLOCK = "block"
    EXPRESSION = "expression"
    REFERENCE = "reference"


class StatementKind(str, Enum):
    DECLARATION = "declaration"
    BINARY_OPERATION = "binary_operation"
    CALL = "call"
    LITERAL = "literal"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class StatementRecord:
    """One normalized statement of a method body.

    *nested* holds the records of trailing-lambda bodies that were folded
    into *text*, in source order.
    """

    kind: StatementKind
    text: str
    nested: tuple[StatementRecord, ...] = ()

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Property:
    """A class member property."""

    name: str
    kind: PropertyKind
    type: str | None = None
    summary: str | None = None  # rendered initializer or delegate


@dataclass(frozen=True)
class MethodParam:
    name: str
    type: str | None = None


@dataclass(frozen=True)
class Method:
    name: str
    shape: MethodShape
    params: tuple[MethodParam, ...] = ()
    return_type: str = "Unit"
    statements: tuple[StatementRecord, ...] = ()
    reference: str | None = None  # target of a reference-shaped method


@dataclass(frozen=True)
class ClassBreakdown:
    """Complete breakdown of one structured declaration."""

    name: str
    superclasses: tuple[str, ...] = ()
    properties: tuple[Property, ...] = ()
    methods: tuple[Method, ...] = ()
    structures: tuple[str, ...] = ()  # opaque markers, e.g. "companion object"
    form: str = "class"

    def get_property(self, name: str) -> Property | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_method(self, name: str) -> Method | None:
        for method in self.methods:
            if method.name == name:
                return method
        return None


@dataclass(frozen=True)
class UINode:
    """A widget occurrence inside a class.

    *uid* is unique within the class (``"<kind>#<ordinal>"``); *label* is the
    first string argument of the widget call when present, else the kind.
    """

    uid: str
    kind: str
    label: str


@dataclass
class UINodeDigraph:
    """Widget containment graph for one class.

    Edges point from a container to the widgets added inside it, stored in
    the order the inner calls are written.
    """

    nodes: dict[str, UINode] = field(default_factory=dict)
    edges: dict[str, list[str]] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)
    _parents: dict[str, str] = field(default_factory=dict, repr=False)

    def add_node(self, node: UINode, parent: str | None = None) -> None:
        if node.uid in self.nodes:
            raise ValueError(f"Duplicate UI node {node.uid!r}")
        if parent is not None and parent not in self.nodes:
            raise KeyError(parent)
        self.nodes[node.uid] = node
        self.edges[node.uid] = []
        if parent is None:
            self.roots.append(node.uid)
        else:
            self.edges[parent].append(node.uid)
            self._parents[node.uid] = parent

    def parent_of(self, uid: str) -> str | None:
        return self._parents.get(uid)

    def children_of(self, uid: str) -> list[str]:
        return list(self.edges.get(uid, ()))

    def in_degree(self, uid: str) -> int:
        return sum(1 for targets in self.edges.values() for t in targets if t == uid)

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass
class BreakdownResult:
    """Everything one file's session produces."""

    class_breakdowns: dict[str, ClassBreakdown] = field(default_factory=dict)
    detected_ui_controls: dict[str, list[UINode]] = field(default_factory=dict)
    view_node_graphs: dict[str, UINodeDigraph] = field(default_factory=dict)
    view_imports: dict[str, str] = field(default_factory=dict)
    independent_functions: list[str] = field(default_factory=list)
    degradations: list[str] = field(default_factory=list)


@dataclass
class ProjectReport:
    """Merged results of analyzing every source file of a project."""

    project_name: str
    merged: BreakdownResult = field(default_factory=BreakdownResult)
    files: list[str] = field(default_factory=list)
    failed_files: dict[str, str] = field(default_factory=dict)
