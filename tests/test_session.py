"""Tests for one-file breakdown sessions."""

import pytest

from kbreakdown.breakdown.session import BreakdownSession, breakdown_file
from kbreakdown.config import Vocabulary
from kbreakdown.exceptions import DepthExceeded, ParseInputError
from kbreakdown.model import PropertyKind
from kbreakdown.nodes import (
    Argument,
    BinaryOp,
    Block,
    Call,
    FuncDecl,
    Lambda,
    Literal,
    NameRef,
    Param,
    PropertyDecl,
    SourceFile,
    StructuredDecl,
)

PATH = "src/main/kotlin/com/example/view/MainView.kt"


def _view() -> StructuredDecl:
    return StructuredDecl(
        name="MainView",
        supertypes=("View()",),
        members=(
            PropertyDecl("controller", type="MainController", delegate=Call("inject")),
            PropertyDecl(
                "root",
                initializer=Call(
                    "vbox",
                    lambda_arg=Lambda(
                        Block(
                            (
                                Call("label", (Argument(Literal('"Hello"')),)),
                                Call("button", (Argument(Literal('"Go"')),)),
                            )
                        )
                    ),
                ),
            ),
        ),
    )


def _model() -> StructuredDecl:
    return StructuredDecl(
        name="Settings",
        members=(PropertyDecl("names", initializer=Call("mutableListOf")),),
    )


def test_function_and_class_are_kept_apart() -> None:
    tree = SourceFile(
        decls=(FuncDecl("helper", body=Literal("1", "int"), text="fun helper() = 1"), _view()),
        package="com.example.view",
        path=PATH,
    )

    result = breakdown_file(tree)

    assert result.independent_functions == ["fun helper() = 1"]
    assert list(result.class_breakdowns) == ["MainView"]
    assert list(result.detected_ui_controls) == ["MainView"]
    assert list(result.view_node_graphs) == ["MainView"]
    assert result.view_imports == {"MainView": "com.example.view.MainView"}

    view = result.class_breakdowns["MainView"]
    assert view.superclasses == ("View",)
    assert view.get_property("controller").kind is PropertyKind.INJECTED
    assert [n.label for n in result.detected_ui_controls["MainView"]] == ["vbox", "Hello", "Go"]
    graph = result.view_node_graphs["MainView"]
    assert graph.roots == ["vbox#1"]
    assert graph.children_of("vbox#1") == ["label#1", "button#1"]


def test_classes_without_controls_are_absent_from_ui_maps() -> None:
    result = breakdown_file(SourceFile(decls=(_view(), _model()), path=PATH))
    assert set(result.class_breakdowns) == {"MainView", "Settings"}
    assert set(result.detected_ui_controls) == {"MainView"}
    assert set(result.view_node_graphs) == {"MainView"}
    assert set(result.view_imports) == {"MainView", "Settings"}


def test_function_text_falls_back_to_signature() -> None:
    func = FuncDecl("sum", params=(Param("a", "Int"), Param("b")), return_type="Int", body=Block())
    result = breakdown_file(SourceFile(decls=(func,)))
    assert result.independent_functions == ["fun sum(a: Int, b): Int"]


def test_other_top_level_declarations_are_skipped() -> None:
    result = breakdown_file(SourceFile(decls=(PropertyDecl("VERSION", initializer=Literal('"1"')),)))
    assert result.class_breakdowns == {}
    assert result.independent_functions == []


def test_unsupported_dialect_only_drops_the_import() -> None:
    result = breakdown_file(SourceFile(decls=(_view(),)), path="views/MainView.scala")
    assert "MainView" in result.class_breakdowns
    assert "MainView" in result.view_node_graphs
    assert result.view_imports == {}


def test_no_path_means_no_imports() -> None:
    result = breakdown_file(SourceFile(decls=(_view(),)))
    assert result.view_imports == {}


def test_non_file_input_is_rejected() -> None:
    with pytest.raises(ParseInputError):
        breakdown_file(_view())


def test_nameless_top_level_class_is_fatal() -> None:
    with pytest.raises(ParseInputError):
        breakdown_file(SourceFile(decls=(StructuredDecl(name=""),)))


def test_duplicate_class_names_are_fatal() -> None:
    with pytest.raises(ParseInputError):
        breakdown_file(SourceFile(decls=(_model(), _model())))


def test_depth_failure_is_per_file() -> None:
    expr = NameRef("a")
    for _ in range(30):
        expr = BinaryOp(expr, "+", Literal("1", "int"))
    deep = StructuredDecl("Deep", members=(FuncDecl("f", body=Block((expr,))),))
    vocabulary = Vocabulary(max_depth=10)

    with pytest.raises(DepthExceeded):
        breakdown_file(SourceFile(decls=(deep,)), vocabulary)

    healthy = breakdown_file(SourceFile(decls=(_model(),)), vocabulary)
    assert list(healthy.class_breakdowns) == ["Settings"]


def test_sessions_are_single_use() -> None:
    session = BreakdownSession()
    session.run(SourceFile(decls=(_model(),)))
    with pytest.raises(RuntimeError):
        session.run(SourceFile(decls=(_model(),)))


def test_explicit_path_overrides_tree_path() -> None:
    tree = SourceFile(decls=(_model(),), path="elsewhere/Settings.kt")
    result = breakdown_file(tree, path="src/main/kotlin/com/acme/Settings.kt")
    assert result.view_imports == {"Settings": "com.acme.Settings"}


def _nested_runs(levels: int) -> StructuredDecl:
    body = Block((BinaryOp(NameRef("x"), "+", Literal("1", "int")),))
    for _ in range(levels):
        body = Block((Call("run", lambda_arg=Lambda(body)),))
    return StructuredDecl("Deep", members=(FuncDecl("f", body=body),))


def test_nested_trailing_lambdas_hit_the_ceiling() -> None:
    with pytest.raises(DepthExceeded):
        breakdown_file(SourceFile(decls=(_nested_runs(300),)))


def test_interpreter_limit_is_reported_as_depth_failure() -> None:
    vocabulary = Vocabulary(max_depth=1_000_000)
    with pytest.raises(DepthExceeded) as excinfo:
        breakdown_file(SourceFile(decls=(_nested_runs(3000),)), vocabulary)
    assert excinfo.value.limit == 1_000_000


def test_failed_session_keeps_no_partial_result() -> None:
    session = BreakdownSession()
    tree = SourceFile(decls=(_view(), _model(), StructuredDecl(name="")))

    with pytest.raises(ParseInputError):
        session.run(tree)

    assert session.result.class_breakdowns == {}
    assert session.result.detected_ui_controls == {}
