"""End-to-end tests through the tree-sitter Kotlin front-end."""

import pytest

pytest.importorskip("tree_sitter")
pytest.importorskip("tree_sitter_kotlin")

from kbreakdown.breakdown.session import breakdown_file  # noqa: E402
from kbreakdown.frontend.kotlin import KotlinFrontend  # noqa: E402
from kbreakdown.model import MethodShape, PropertyKind  # noqa: E402

SOURCE = """\
package com.example.view

import tornadofx.*

class Dialog : Fragment() {
    val controller: DialogController by inject()
    val names = observableListOf<String>()

    override val root = vbox {
        label("Hello")
        button("Close")
    }

    fun compute(x: Int): Int {
        val y = x + 1
        return y
    }
}

fun helper() = 42
"""

PATH = "src/main/kotlin/com/example/view/Dialog.kt"


@pytest.fixture(scope="module")
def frontend() -> KotlinFrontend:
    return KotlinFrontend()


def test_header(frontend) -> None:
    tree = frontend.parse(SOURCE, PATH)
    assert tree.package == "com.example.view"
    assert tree.imports == ("tornadofx.*",)
    assert tree.path == PATH


def test_dialog_breakdown(frontend) -> None:
    result = breakdown_file(frontend.parse(SOURCE, PATH))

    dialog = result.class_breakdowns["Dialog"]
    assert dialog.superclasses == ("Fragment",)
    assert dialog.get_property("controller").kind is PropertyKind.INJECTED
    assert dialog.get_property("names").kind is PropertyKind.OBSERVABLE

    compute = dialog.get_method("compute")
    assert compute.shape is MethodShape.BLOCK
    assert compute.return_type == "Int"
    assert compute.statements[0].text == "y = x + 1"

    assert result.view_imports["Dialog"] == "com.example.view.Dialog"
    assert len(result.independent_functions) == 1
    assert result.independent_functions[0].startswith("fun helper()")


def test_dialog_ui_graph(frontend) -> None:
    result = breakdown_file(frontend.parse(SOURCE, PATH))

    graph = result.view_node_graphs["Dialog"]
    assert [graph.nodes[uid].kind for uid in graph.roots] == ["vbox"]
    children = graph.children_of(graph.roots[0])
    assert [graph.nodes[uid].label for uid in children] == ["Hello", "Close"]


def test_can_handle(frontend, tmp_path) -> None:
    assert frontend.can_handle(tmp_path / "A.kt")
    assert frontend.can_handle(tmp_path / "build.gradle.kts")
    assert not frontend.can_handle(tmp_path / "A.java")


def test_single_line_view(frontend) -> None:
    source = (
        "class V : View() { val c: C by inject(); "
        'override val root = vbox { label("a"); button("b") } }'
    )
    result = breakdown_file(frontend.parse(source, "V.kt"))

    view = result.class_breakdowns["V"]
    assert view.get_property("c").kind is PropertyKind.INJECTED
    assert view.get_property("root").kind is PropertyKind.VALUE
    assert [n.uid for n in result.detected_ui_controls["V"]] == ["vbox#1", "label#1", "button#1"]
    assert result.view_node_graphs["V"].children_of("vbox#1") == ["label#1", "button#1"]


def test_receivers_and_keyword_literals(frontend) -> None:
    source = """\
class Form : View() {
    var enabled = true
    val owner = null

    fun submit() {
        model?.commit()
        status.text = "done"
        items.forEach { println(it) }
    }
}
"""
    result = breakdown_file(frontend.parse(source, "Form.kt"))
    form = result.class_breakdowns["Form"]

    assert form.get_property("enabled").type == "Boolean"
    assert [s.text for s in form.get_method("submit").statements] == [
        "model?.commit()",
        'status.text = "done"',
        "items.forEach { println(it) }",
    ]


def test_latin1_bytes_are_replaced_not_fatal(frontend) -> None:
    source = 'class Cafe : View() {\n    val title = "caf\xe9"\n}\n'.encode("latin-1")
    result = breakdown_file(frontend.parse(source, "Cafe.kt"))
    assert result.class_breakdowns["Cafe"].get_property("title").kind is PropertyKind.VALUE


def test_pipeline_with_kotlin_sources(tmp_path) -> None:
    from kbreakdown.pipeline import analyze_project

    src = tmp_path / "src" / "main" / "kotlin" / "com" / "example" / "view"
    src.mkdir(parents=True)
    (src / "Dialog.kt").write_text(SOURCE)

    report = analyze_project(tmp_path)

    assert report.failed_files == {}
    assert report.merged.view_imports == {"Dialog": "com.example.view.Dialog"}
    assert "Dialog" in report.merged.view_node_graphs
