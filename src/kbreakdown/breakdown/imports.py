"""Derive the import path a generated test needs for a class."""

from __future__ import annotations

from pathlib import PurePath

from kbreakdown.exceptions import UnsupportedDialect

KOTLIN = "kotlin"
JAVA = "java"

_DIALECTS = {
    ".kt": KOTLIN,
    ".kts": KOTLIN,
    ".java": JAVA,
}

# Directory names that start a package path.
_SOURCE_ROOT_DIRS = {"kotlin", "java"}


def detect_dialect(path: str) -> str:
    dialect = _DIALECTS.get(PurePath(path).suffix.lower())
    if dialect is None:
        raise UnsupportedDialect(path)
    return dialect


def resolve_import(path: str, class_name: str, package: str | None = None) -> str:
    """Return ``<package>.<ClassName>`` for Kotlin or ``<package>.<FileStem>`` for Java.

    The package comes from the file's ``package`` header when known, else from
    the directories below the last ``kotlin``/``java`` source root.
    """
    dialect = detect_dialect(path)

    parts = path.replace("\\", "/").split("/")
    if package:
        package_parts = package.split(".")
    else:
        package_parts = []
        for i in range(len(parts) - 2, -1, -1):
            if parts[i] in _SOURCE_ROOT_DIRS:
                package_parts = parts[i + 1 : -1]
                break

    if dialect == KOTLIN:
        leaf = class_name
    else:
        leaf = PurePath(parts[-1]).stem
    return ".".join([*package_parts, leaf])
