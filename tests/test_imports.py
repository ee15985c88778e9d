"""Tests for import path resolution."""

import pytest

from kbreakdown.breakdown.imports import JAVA, KOTLIN, detect_dialect, resolve_import
from kbreakdown.exceptions import UnsupportedDialect


@pytest.mark.parametrize(
    "path, class_name, expected",
    [
        ("src/main/kotlin/com/github/app/view/Dialog.kt", "Dialog", "com.github.app.view.Dialog"),
        ("src/main/kotlin/com/github/app/view/Views.kt", "MainView", "com.github.app.view.MainView"),
        ("src/main/java/com/github/app/Helper.java", "Ignored", "com.github.app.Helper"),
        ("src\\test\\kotlin\\org\\demo\\Thing.kt", "Thing", "org.demo.Thing"),
        ("Standalone.kt", "Standalone", "Standalone"),
    ],
)
def test_import_from_source_root(path, class_name, expected) -> None:
    assert resolve_import(path, class_name) == expected


def test_package_header_wins_over_directories() -> None:
    path = "app/src/main/kotlin/misplaced/Dialog.kt"
    assert resolve_import(path, "Dialog", package="com.example.view") == "com.example.view.Dialog"


def test_dialects() -> None:
    assert detect_dialect("a/B.kt") == KOTLIN
    assert detect_dialect("build.gradle.kts") == KOTLIN
    assert detect_dialect("a/B.JAVA") == JAVA


def test_unsupported_dialect() -> None:
    with pytest.raises(UnsupportedDialect) as excinfo:
        resolve_import("src/main/scala/App.scala", "App")
    assert excinfo.value.path == "src/main/scala/App.scala"
