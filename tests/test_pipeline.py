"""Tests for project discovery, merging and JSON rendering."""

import json
from pathlib import Path

import pytest

from kbreakdown import pipeline
from kbreakdown.config import DEFAULT_VOCABULARY
from kbreakdown.nodes import Argument, Block, Call, Lambda, Literal, PropertyDecl, SourceFile, StructuredDecl


class StubFrontend:
    """Reads one class name per line; an empty file yields a nameless class."""

    def can_handle(self, path: Path) -> bool:
        return path.suffix == ".kt"

    def parse(self, source, path=None) -> SourceFile:
        text = source.decode() if isinstance(source, bytes) else source
        names = text.split() or [""]
        decls = tuple(
            StructuredDecl(
                name=name,
                members=(
                    PropertyDecl(
                        "root",
                        initializer=Call(
                            "vbox",
                            lambda_arg=Lambda(Block((Call("label", (Argument(Literal(f'"{name}"')),)),))),
                        ),
                    ),
                ),
            )
            for name in names
        )
        return SourceFile(decls=decls, path=path)


@pytest.fixture
def project(tmp_path) -> Path:
    src = tmp_path / "src" / "main" / "kotlin" / "com" / "example"
    src.mkdir(parents=True)
    (src / "A.kt").write_text("MainView\n")
    (src / "B.kt").write_text("")
    (src / "C.kt").write_text("MainView Other\n")
    (src / "notes.txt").write_text("ignored")
    build = tmp_path / "build" / "generated"
    build.mkdir(parents=True)
    (build / "Gen.kt").write_text("Generated")
    return tmp_path


def test_source_roots(project) -> None:
    assert pipeline.find_source_roots(project) == [project / "src" / "main" / "kotlin"]
    assert pipeline.find_source_roots(project / "build") == [project / "build"]


def test_source_files(project) -> None:
    files = pipeline.find_source_files(project, [StubFrontend()])
    assert [f.name for f in files] == ["A.kt", "B.kt", "C.kt"]


@pytest.mark.parametrize("jobs", [1, 2])
def test_analyze_project(project, jobs) -> None:
    report = pipeline.analyze_project(
        project, jobs=jobs, vocabulary=DEFAULT_VOCABULARY, frontends=[StubFrontend()]
    )

    assert report.project_name == project.name
    assert report.files == ["src/main/kotlin/com/example/A.kt", "src/main/kotlin/com/example/C.kt"]
    assert list(report.failed_files) == ["src/main/kotlin/com/example/B.kt"]

    merged = report.merged
    assert set(merged.class_breakdowns) == {"MainView", "Other"}
    assert merged.view_imports == {
        "MainView": "com.example.MainView",
        "Other": "com.example.Other",
    }
    # A.kt is analyzed first, so its MainView wins.
    assert merged.detected_ui_controls["MainView"][1].label == "MainView"
    assert merged.view_node_graphs["Other"].roots == ["vbox#1"]


def test_run_writes_json(project, monkeypatch) -> None:
    monkeypatch.setattr(pipeline, "load_frontends", lambda: [StubFrontend()])

    out = pipeline.run(project, jobs=2)

    assert out == project / "kbreakdown.json"
    data = json.loads(out.read_text())
    assert set(data) >= {
        "project_name",
        "files",
        "failed_files",
        "classBreakdowns",
        "detectedUIControls",
        "viewNodeGraphs",
        "viewImports",
        "independentFunctions",
        "degradations",
    }
    graph = data["viewNodeGraphs"]["MainView"]
    assert graph["roots"] == ["vbox#1"]
    assert graph["edges"] == {"vbox#1": ["label#1"]}
    assert graph["order"] == [{"uid": "vbox#1", "depth": 0}, {"uid": "label#1", "depth": 1}]
    assert data["classBreakdowns"]["Other"]["properties"][0]["kind"] == "Value"


def test_run_with_explicit_output(project, monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(pipeline, "load_frontends", lambda: [StubFrontend()])
    target = tmp_path / "out" / "report.json"
    assert pipeline.run(project, output=target) == target
    assert target.exists()


def test_unreadable_source_does_not_stop_the_run(tmp_path) -> None:
    src = tmp_path / "src" / "main" / "kotlin" / "com" / "example"
    src.mkdir(parents=True)
    (src / "A.kt").write_bytes(b"caf\xe9\n")
    (src / "B.kt").write_text("Settings\n")

    report = pipeline.analyze_project(
        tmp_path, vocabulary=DEFAULT_VOCABULARY, frontends=[StubFrontend()]
    )

    failure = report.failed_files["src/main/kotlin/com/example/A.kt"]
    assert failure.startswith("UnicodeDecodeError")
    assert report.files == ["src/main/kotlin/com/example/B.kt"]
    assert list(report.merged.class_breakdowns) == ["Settings"]
