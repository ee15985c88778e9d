"""Orchestrator: discover → parse → break down → merge → render."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from kbreakdown.analysis import containment_violations
from kbreakdown.breakdown.session import breakdown_file
from kbreakdown.config import Vocabulary, load_vocabulary
from kbreakdown.exceptions import BreakdownError
from kbreakdown.frontend import Frontend, load_frontends
from kbreakdown.model import BreakdownResult, ProjectReport
from kbreakdown.nodes import SourceFile
from kbreakdown.renderer.json import render_json

logger = logging.getLogger(__name__)

_SKIP_DIRS = {".git", ".gradle", ".idea", "build", "out", "target", "node_modules"}


def find_source_roots(project_dir: Path) -> list[Path]:
    """Return the Gradle/Maven source sets present, else the project itself."""
    roots = []
    for source_set in ("main", "test"):
        for language in ("kotlin", "java"):
            candidate = project_dir / "src" / source_set / language
            if candidate.is_dir():
                roots.append(candidate)
    return roots or [project_dir]


def find_source_files(project_dir: Path, frontends: list[Frontend]) -> list[Path]:
    files: list[Path] = []
    for root in find_source_roots(project_dir):
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            if _SKIP_DIRS.intersection(path.relative_to(project_dir).parts):
                continue
            if any(fe.can_handle(path) for fe in frontends):
                files.append(path)
    return files


def merge_results(report: ProjectReport, rel_path: str, result: BreakdownResult) -> None:
    """Fold one file's result into *report*; the first file to define a class wins."""
    merged = report.merged
    for name, breakdown in result.class_breakdowns.items():
        if name in merged.class_breakdowns:
            logger.warning("Class %s in %s shadows an earlier definition; ignored", name, rel_path)
            continue
        merged.class_breakdowns[name] = breakdown
        if name in result.detected_ui_controls:
            merged.detected_ui_controls[name] = result.detected_ui_controls[name]
            merged.view_node_graphs[name] = result.view_node_graphs[name]
        if name in result.view_imports:
            merged.view_imports[name] = result.view_imports[name]
    merged.independent_functions.extend(result.independent_functions)
    merged.degradations.extend(f"{rel_path}: {d}" for d in result.degradations)
    report.files.append(rel_path)


def analyze_project(
    project_dir: Path,
    *,
    jobs: int = 1,
    vocabulary: Vocabulary | None = None,
    frontends: list[Frontend] | None = None,
) -> ProjectReport:
    """Break down every recognized source file under *project_dir*.

    Files are parsed on the calling thread; sessions run on up to *jobs*
    worker threads.  A file that fails is reported in ``failed_files`` and
    does not affect the others.
    """
    project_dir = project_dir.resolve()
    vocabulary = vocabulary or load_vocabulary(project_dir)
    frontends = load_frontends() if frontends is None else frontends
    report = ProjectReport(project_name=project_dir.name)

    trees: list[tuple[str, SourceFile]] = []
    for path in find_source_files(project_dir, frontends):
        rel_path = path.relative_to(project_dir).as_posix()
        frontend = next(fe for fe in frontends if fe.can_handle(path))
        try:
            source = path.read_bytes()
        except OSError as e:
            logger.warning("Could not read %s: %s", path, e)
            report.failed_files[rel_path] = str(e)
            continue
        try:
            trees.append((rel_path, frontend.parse(source, rel_path)))
        except Exception as e:
            logger.warning("Could not parse %s: %s", rel_path, e)
            report.failed_files[rel_path] = f"{type(e).__name__}: {e}"

    logger.debug("Parsed %d files with %d jobs", len(trees), jobs)

    def _run(item: tuple[str, SourceFile]) -> tuple[str, BreakdownResult | BreakdownError]:
        rel_path, tree = item
        try:
            return rel_path, breakdown_file(tree, vocabulary, rel_path)
        except BreakdownError as e:
            return rel_path, e

    if jobs > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            outcomes = list(pool.map(_run, trees))
    else:
        outcomes = [_run(item) for item in trees]

    for rel_path, outcome in outcomes:
        if isinstance(outcome, BreakdownError):
            logger.warning("Skipping %s: %s", rel_path, outcome)
            report.failed_files[rel_path] = str(outcome)
            continue
        merge_results(report, rel_path, outcome)

    for name, graph in report.merged.view_node_graphs.items():
        for problem in containment_violations(graph):
            logger.warning("UI graph of %s: %s", name, problem)

    logger.debug(
        "Project %s: %d files, %d classes, %d failures",
        report.project_name,
        len(report.files),
        len(report.merged.class_breakdowns),
        len(report.failed_files),
    )
    return report


def run(
    project_dir: Path,
    *,
    output: Path | None = None,
    jobs: int = 1,
) -> Path:
    """Run the full pipeline and return the output path."""
    report = analyze_project(project_dir, jobs=jobs)
    out_path = output or (project_dir / "kbreakdown.json")
    render_json(report, out_path)
    logger.info("Generated %s", out_path)
    return out_path
