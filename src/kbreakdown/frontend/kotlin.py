"""Convert a tree-sitter Kotlin parse tree into the breakdown node model.

Targets the grammar published as ``tree-sitter-kotlin`` on PyPI, where calls
carry their arguments and trailing lambda as direct children and blocks hold
their statements without a wrapper node.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

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
    Param,
    PropertyDecl,
    SourceFile,
    StructuredDecl,
    Unknown,
)

logger = logging.getLogger(__name__)

_COMMENT_TYPES = {"line_comment", "block_comment"}

# Supertype wrappers that only forward to their single child.
_WRAPPER_TYPES = {
    "statement",
    "declaration",
    "expression",
    "primary_expression",
    "class_member_declaration",
}

_LITERAL_KINDS = {
    "float_literal": "double",
    "character_literal": "char",
    "string_literal": "string",
    "multiline_string_literal": "string",
    "collection_literal": "collection",
}

# The grammar has no boolean or null literal nodes; these arrive as identifiers.
_KEYWORD_LITERALS = {"true": "boolean", "false": "boolean", "null": "null"}

_BINARY_TYPES = {
    "binary_expression",
    "as_expression",
    "is_expression",
    "in_expression",
    "infix_expression",
    "range_expression",
}

_TYPE_NODE_TYPES = {
    "type",
    "user_type",
    "nullable_type",
    "non_nullable_type",
    "function_type",
    "parenthesized_type",
}

_DECLARATION_TYPES = {
    "class_declaration",
    "object_declaration",
    "function_declaration",
    "property_declaration",
}


class KotlinFrontend:
    """Parse Kotlin source with tree-sitter-kotlin."""

    suffixes = (".kt", ".kts")

    def __init__(self) -> None:
        import tree_sitter_kotlin as tskotlin
        from tree_sitter import Language, Parser

        self._parser = Parser(Language(tskotlin.language()))

    def can_handle(self, path: Path) -> bool:
        return path.suffix in self.suffixes

    def parse(self, source: bytes | str, path: str | None = None) -> SourceFile:
        if isinstance(source, str):
            source = source.encode("utf-8")
        tree = self._parser.parse(source)
        if tree.root_node.has_error:
            logger.debug("Syntax errors in %s; converting what parsed", path or "<memory>")
        return convert_source_file(tree.root_node, path)


def convert_source_file(root, path: str | None = None) -> SourceFile:
    """Convert a tree-sitter ``source_file`` node."""
    package = None
    imports: list[str] = []
    decls: list[Node] = []

    for child in _named(root):
        if child.type == "package_header":
            package = _strip_keyword(_text(child), "package")
        elif child.type == "import":
            imports.append(_strip_keyword(_text(child), "import"))
        elif child.type in ("shebang", "file_annotation"):
            continue
        else:
            decls.append(_declaration(child))

    return SourceFile(
        decls=tuple(decls),
        package=package,
        imports=tuple(imports),
        path=path,
    )


# --- declarations -----------------------------------------------------------


def _declaration(node) -> Node:
    node = _unwrap(node)
    t = node.type
    if t == "class_declaration":
        return _structured(node, _class_form(node))
    if t == "object_declaration":
        return _structured(node, "object")
    if t == "companion_object":
        return _structured(node, "companion object")
    if t == "function_declaration":
        return _function(node)
    if t == "property_declaration":
        return _property(node)
    if t == "anonymous_initializer":
        return InitBlock(_block_of(node))
    if t == "secondary_constructor":
        params = _child(node, "function_value_parameters")
        return FuncDecl(
            name="<init>",
            params=_params(params) if params is not None else (),
            body=_block_of(node),
            text=_text(node),
        )
    return _statement(node)


def _class_form(node) -> str:
    if any(c.type == "interface" for c in node.children):
        return "interface"
    modifiers = _child(node, "modifiers")
    if modifiers is not None and re.search(r"\benum\b", _text(modifiers)):
        return "enum"
    return "class"


def _structured(node, form: str) -> StructuredDecl:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        name_node = _child(node, "identifier")
    name = _text(name_node) if name_node is not None else ""

    supertypes: list[str] = []
    specs = _child(node, "delegation_specifiers")
    if specs is not None:
        for spec in _named(specs):
            user_type = _find(spec, "user_type")
            supertypes.append(_text(user_type if user_type is not None else spec))

    members: list[Node] = []
    constructor = _child(node, "primary_constructor")
    if constructor is not None:
        members.extend(_constructor_properties(constructor))

    body = _child(node, "class_body")
    if body is None:
        body = _child(node, "enum_class_body")
    if body is not None:
        for member in _named(body):
            if member.type in ("enum_entry", "modifiers", "annotation"):
                continue
            members.append(_declaration(member))

    return StructuredDecl(
        name=name,
        form=form,
        supertypes=tuple(supertypes),
        members=tuple(members),
    )


def _constructor_properties(constructor) -> list[PropertyDecl]:
    """``val``/``var`` primary-constructor parameters are member properties."""
    props: list[PropertyDecl] = []
    for param in _descendants(constructor, "class_parameter"):
        binding = _binding_kind(param)
        if binding is None:
            continue
        name_node = _child(param, "identifier")
        if name_node is None:
            continue
        type_node = _first(param, _TYPE_NODE_TYPES)
        default = _after_token(param, "=")
        props.append(
            PropertyDecl(
                name=_text(name_node),
                type=_text(type_node) if type_node is not None else None,
                initializer=_expr(default) if default is not None else None,
                mutable=binding == "var",
                text=_text(param),
            )
        )
    return props


def _function(node) -> FuncDecl:
    params_node = _child(node, "function_value_parameters")

    name_node = node.child_by_field_name("name")
    name = _text(name_node) if name_node is not None else ""
    return_type = None
    seen_params = False
    for child in node.children:
        if child.type == "function_value_parameters":
            seen_params = True
        elif not seen_params and name_node is None and child.type == "identifier":
            name = _text(child)
        elif seen_params and child.type in _TYPE_NODE_TYPES and return_type is None:
            return_type = _text(child)

    body = None
    body_node = _child(node, "function_body")
    if body_node is not None:
        if any(c.type == "=" for c in body_node.children):
            expr = _named(body_node)
            body = _expr(expr[0]) if expr else Unknown(_text(body_node))
        else:
            body = _block_of(body_node)

    return FuncDecl(
        name=name,
        params=_params(params_node) if params_node is not None else (),
        return_type=return_type,
        body=body,
        text=_text(node),
    )


def _params(params_node) -> tuple[Param, ...]:
    params: list[Param] = []
    children = _named(params_node)
    for i, child in enumerate(children):
        if child.type != "parameter":
            continue
        name_node = _child(child, "identifier")
        type_node = _first(child, _TYPE_NODE_TYPES)
        default = None
        if i + 1 < len(children) and children[i + 1].type not in (
            "parameter",
            "parameter_modifiers",
        ):
            default = _expr(children[i + 1])
        params.append(
            Param(
                name=_text(name_node) if name_node is not None else "",
                type=_text(type_node) if type_node is not None else None,
                default=default,
            )
        )
    return tuple(params)


def _property(node) -> PropertyDecl:
    name = ""
    type_text = None
    var_decl = _child(node, "variable_declaration")
    if var_decl is not None:
        name_node = _child(var_decl, "identifier")
        name = _text(name_node) if name_node is not None else ""
        type_node = _first(var_decl, _TYPE_NODE_TYPES)
        type_text = _text(type_node) if type_node is not None else None
    else:
        multi = _child(node, "multi_variable_declaration")
        if multi is not None:
            name = _text(multi)

    initializer = _after_token(node, "=")
    delegate_node = _child(node, "property_delegate")
    delegate = None
    if delegate_node is not None:
        inner = _named(delegate_node)
        delegate = _expr(inner[0]) if inner else None

    return PropertyDecl(
        name=name,
        type=type_text,
        initializer=_expr(initializer) if initializer is not None else None,
        delegate=delegate,
        mutable=_binding_kind(node) == "var",
        text=_text(node),
    )


def _binding_kind(node) -> str | None:
    for child in node.children:
        if child.type in ("val", "var"):
            return child.type
    return None


# --- statements and expressions ---------------------------------------------


def _block_of(node) -> Block:
    """Statements of *node* if it is a block, else of its first block child."""
    if node.type != "block":
        block = _child(node, "block")
        if block is None:
            return Block()
        node = block
    return Block(tuple(_statement(s) for s in _named(node)))


def _statement(node) -> Node:
    node = _unwrap(node)
    if node.type in _DECLARATION_TYPES:
        return _declaration(node)
    if node.type == "assignment":
        return _binary(node)
    return _expr(node)


def _expr(node) -> Node:
    node = _unwrap(node)
    t = node.type
    if t == "identifier":
        text = _text(node)
        if text in _KEYWORD_LITERALS:
            return Literal(text, _KEYWORD_LITERALS[text])
        return NameRef(text)
    if t in ("this_expression", "super_expression"):
        return NameRef(_text(node))
    if t == "number_literal":
        return Literal(_text(node), _number_kind(_text(node)))
    if t in _LITERAL_KINDS:
        return Literal(_text(node), _LITERAL_KINDS[t])
    if t == "parenthesized_expression":
        inner = _named(node)
        return _expr(inner[0]) if len(inner) == 1 else Unknown(_text(node), t)
    if t == "call_expression":
        return _call(node)
    if t == "navigation_expression":
        return _navigation(node)
    if t == "callable_reference":
        return _callable_reference(node)
    if t == "lambda_literal":
        return _lambda(node)
    if t == "annotated_lambda":
        lam = _child(node, "lambda_literal")
        return _lambda(lam) if lam is not None else Unknown(_text(node), t)
    if t in _BINARY_TYPES or t == "assignment":
        return _binary(node)
    if t in _TYPE_NODE_TYPES:
        return NameRef(_text(node))
    return Unknown(_text(node), t)


def _number_kind(text: str) -> str:
    lowered = text.lower()
    if lowered.startswith(("0x", "0b")):
        return "int"
    if "." in lowered or "e" in lowered or lowered.endswith("f"):
        return "double"
    return "int"


def _binary(node) -> Node:
    """``left <op> right``; the operator is whatever source text separates them."""
    named = _named(node)
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if left is None or right is None:
        if len(named) < 2:
            return Unknown(_text(node), node.type)
        left, right = named[0], named[-1]
    op = _between(node, left, right)
    if not op:
        return Unknown(_text(node), node.type)
    return BinaryOp(_expr(left), op, _expr(right))


def _call(node) -> Node:
    named = _named(node)
    if not named:
        return Unknown(_text(node), node.type)

    args: tuple[Argument, ...] = ()
    lambda_arg = None
    type_args = None
    for child in named[1:]:
        if child.type == "value_arguments":
            args = _arguments(child)
        elif child.type == "annotated_lambda":
            lam = _child(child, "lambda_literal")
            lambda_arg = _lambda(lam) if lam is not None else None
        elif child.type == "type_arguments":
            type_args = _text(child)

    callee = _unwrap(named[0])
    if callee.type == "identifier":
        return Call(_text(callee), args, lambda_arg, type_args)
    if callee.type == "navigation_expression":
        parts = _navigation_parts(callee)
        if parts is not None:
            receiver, op, member = parts
            return BinaryOp(_expr(receiver), op, Call(member, args, lambda_arg, type_args))
    logger.debug("Unsupported callee %s: %s", callee.type, _text(callee))
    return Call(_text(callee), args, lambda_arg, type_args)


def _navigation(node) -> Node:
    parts = _navigation_parts(node)
    if parts is None:
        return Unknown(_text(node), node.type)
    receiver, op, member = parts
    return BinaryOp(_expr(receiver), op, NameRef(member))


def _navigation_parts(node) -> tuple[object, str, str] | None:
    """Split ``receiver.member`` / ``receiver?.member`` into its three parts."""
    named = _named(node)
    if len(named) < 2 or named[-1].type != "identifier":
        return None
    receiver, member = named[0], named[-1]
    return receiver, _between(node, receiver, member) or ".", _text(member)


def _callable_reference(node) -> CallableRef:
    text = _text(node)
    receiver, _, name = text.rpartition("::")
    return CallableRef(name=name.strip(), receiver=receiver.strip() or None)


def _arguments(node) -> tuple[Argument, ...]:
    args: list[Argument] = []
    for arg in _named(node):
        if arg.type != "value_argument":
            continue
        named = [c for c in _named(arg) if c.type != "annotation"]
        if not named:
            continue
        tokens = {c.type for c in arg.children if not c.is_named}
        name = _text(named[0]) if "=" in tokens and len(named) >= 2 else None
        value = named[-1]
        spread = "*" in tokens
        if value.type == "spread_expression":
            spread = True
            inner = _named(value)
            value = inner[-1] if inner else value
        args.append(Argument(value=_expr(value), name=name, spread=spread))
    return tuple(args)


def _lambda(node) -> Lambda:
    params: tuple[str, ...] = ()
    statements = []
    for child in _named(node):
        if child.type == "lambda_parameters":
            params = tuple(_text(p) for p in _named(child))
        else:
            statements.append(_statement(child))
    return Lambda(body=Block(tuple(statements)), params=params)


# --- tree helpers -----------------------------------------------------------


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _between(parent, left, right) -> str:
    """Source text strictly between two children of *parent*."""
    start = left.end_byte - parent.start_byte
    end = right.start_byte - parent.start_byte
    return parent.text[start:end].decode("utf-8", errors="replace").strip()


def _unwrap(node):
    while node.type in _WRAPPER_TYPES:
        named = _named(node)
        if len(named) != 1:
            break
        node = named[0]
    return node


def _named(node) -> list:
    return [c for c in node.children if c.is_named and c.type not in _COMMENT_TYPES]


def _child(node, node_type: str):
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _first(node, node_types: set[str]):
    for child in node.children:
        if child.type in node_types:
            return child
    return None


def _find(node, node_type: str):
    """Depth-first search for the first descendant of *node_type*."""
    for child in node.children:
        if child.type == node_type:
            return child
        found = _find(child, node_type)
        if found is not None:
            return found
    return None


def _descendants(node, node_type: str) -> list:
    found = []
    for child in node.children:
        if child.type == node_type:
            found.append(child)
        else:
            found.extend(_descendants(child, node_type))
    return found


def _after_token(node, token: str):
    """Return the first named child following the anonymous *token* child."""
    seen = False
    for child in node.children:
        if seen and child.is_named and child.type not in _COMMENT_TYPES:
            return child
        if not child.is_named and child.type == token:
            seen = True
    return None


def _strip_keyword(text: str, keyword: str) -> str:
    return re.sub(rf"^\s*{keyword}\s+", "", text).strip().rstrip(";").strip()
