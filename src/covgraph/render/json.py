from __future__ import annotations

import json
from typing import TYPE_CHECKING

from covgraph import __version__

if TYPE_CHECKING:
    from decimal import Decimal

    from covgraph.model.analysis import Class, CodeFile, MethodMetric, ParserResult


def _number(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


def _prune_none(obj: object) -> object:
    """Recursively drop dict keys with None values."""
    if isinstance(obj, dict):
        return {k: _prune_none(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list | tuple):
        return [_prune_none(v) for v in obj]
    return obj


def _method(m: MethodMetric) -> dict[str, object]:
    return {
        "name": m.full_name,
        "short_name": m.short_name,
        "line": m.line,
        "metrics": [
            {
                "name": metric.name,
                "type": str(metric.metric_type),
                "value": _number(metric.value),
                "merge_order": str(metric.merge_order),
            }
            for metric in m.metrics
        ],
    }


def _file(f: CodeFile) -> dict[str, object]:
    return {
        "path": f.path,
        "coverage": f.line_coverage,
        "status": [str(s) for s in f.line_visit_status],
        "branches": {
            str(line): [{"id": b.identifier, "visits": b.branch_visits} for b in branches]
            for line, branches in sorted(f.branches_by_line.items())
        },
        "methods": [_method(m) for m in f.method_metrics],
        "code_elements": [
            {
                "name": e.name,
                "type": str(e.code_element_type),
                "first_line": e.first_line,
                "last_line": e.last_line,
                "coverage_quota": _number(e.coverage_quota),
            }
            for e in f.code_elements
        ],
    }


def _class(c: Class) -> dict[str, object]:
    return {
        "name": c.name,
        "covered_lines": c.covered_lines,
        "coverable_lines": c.coverable_lines,
        "covered_branches": c.covered_branches,
        "total_branches": c.total_branches,
        "files": [_file(f) for f in c.files],
    }


def to_dict(result: ParserResult) -> dict[str, object]:
    """Project the coverage graph onto plain JSON containers."""
    data = {
        "meta": {
            "tool": "covgraph",
            "version": __version__,
            "parser": result.parser_name,
            "supports_branch_coverage": result.supports_branch_coverage,
            "line_coverage_available": result.line_coverage_available,
            "timestamp": result.minimum_timestamp.isoformat() if result.minimum_timestamp else None,
        },
        "sources": list(result.source_directories),
        "assemblies": [
            {"name": a.name, "classes": [_class(c) for c in a.classes]} for a in result.assemblies
        ],
    }
    return _prune_none(data)  # type: ignore[return-value]


def format_json(result: ParserResult) -> str:
    return json.dumps(to_dict(result), indent=2, sort_keys=False)


__all__ = ["format_json", "to_dict"]
