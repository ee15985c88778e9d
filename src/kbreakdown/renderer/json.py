"""Render a ProjectReport to a JSON document for downstream generators."""

from __future__ import annotations

import json
from pathlib import Path

from kbreakdown.analysis import walk_preorder
from kbreakdown.model import (
    BreakdownResult,
    ClassBreakdown,
    Method,
    ProjectReport,
    StatementRecord,
    UINodeDigraph,
)


def _statement_to_dict(record: StatementRecord) -> dict:
    d: dict = {"kind": record.kind.value, "text": record.text}
    if record.nested:
        d["nested"] = [_statement_to_dict(r) for r in record.nested]
    return d


def _method_to_dict(method: Method) -> dict:
    d: dict = {
        "name": method.name,
        "shape": method.shape.value,
        "params": [{"name": p.name, "type": p.type} for p in method.params],
        "returnType": method.return_type,
        "statements": [_statement_to_dict(r) for r in method.statements],
    }
    if method.reference is not None:
        d["reference"] = method.reference
    return d


def _class_to_dict(breakdown: ClassBreakdown) -> dict:
    d: dict = {
        "name": breakdown.name,
        "form": breakdown.form,
        "superclasses": list(breakdown.superclasses),
        "properties": [
            {
                "name": p.name,
                "kind": p.kind.value,
                "type": p.type,
                "summary": p.summary,
            }
            for p in breakdown.properties
        ],
        "methods": [_method_to_dict(m) for m in breakdown.methods],
    }
    if breakdown.structures:
        d["structures"] = list(breakdown.structures)
    return d


def _graph_to_dict(graph: UINodeDigraph) -> dict:
    return {
        "roots": list(graph.roots),
        "nodes": {
            uid: {"kind": node.kind, "label": node.label}
            for uid, node in graph.nodes.items()
        },
        "edges": {uid: list(children) for uid, children in graph.edges.items() if children},
        "order": [{"uid": uid, "depth": depth} for uid, depth in walk_preorder(graph)],
    }


def result_to_dict(result: BreakdownResult) -> dict:
    """Serialize one breakdown result using the downstream field names."""
    return {
        "classBreakdowns": {
            name: _class_to_dict(b) for name, b in result.class_breakdowns.items()
        },
        "detectedUIControls": {
            name: [{"uid": n.uid, "kind": n.kind, "label": n.label} for n in controls]
            for name, controls in result.detected_ui_controls.items()
        },
        "viewNodeGraphs": {
            name: _graph_to_dict(g) for name, g in result.view_node_graphs.items()
        },
        "viewImports": dict(result.view_imports),
        "independentFunctions": list(result.independent_functions),
    }


def _report_to_json(report: ProjectReport) -> str:
    data = {
        "project_name": report.project_name,
        "files": report.files,
        "failed_files": report.failed_files,
        **result_to_dict(report.merged),
        "degradations": report.merged.degradations,
    }
    return json.dumps(data, indent=2)


def render_json(report: ProjectReport, output_path: Path) -> None:
    """Write the merged breakdown of *report* to *output_path*."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(_report_to_json(report))
