from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from covgraph.api import parse_report
from covgraph.config import ParserSettings
from covgraph.parser.cobertura import CoberturaParser
from covgraph.render import format_json, render_summary, to_dict

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from covgraph.model.analysis import ParserResult


@pytest.fixture
def result(coverage_root: Callable[..., Any], class_element: Callable[..., str]) -> ParserResult:
    main = class_element(
        "App.Main",
        "main.cs",
        [(1, 1), (2, 0), {"number": 3, "hits": 1, "branch": "true", "condition_coverage": "50% (1/2)"}],
        methods=[
            {
                "name": "Run",
                "signature": "()",
                "line_rate": "0.5",
                "complexity": "NaN",
                "lines": [(1, 1), (2, 0)],
            }
        ],
    )
    empty = class_element("App.Empty", "empty.cs")
    return CoberturaParser().parse(coverage_root({"App": [main, empty]}, sources=["/src"]))


def test_to_dict_projects_graph(result: ParserResult) -> None:
    data: Any = to_dict(result)
    assert data["meta"]["tool"] == "covgraph"
    assert data["meta"]["parser"] == "CoberturaParser"
    assert "timestamp" not in data["meta"]
    assert data["sources"] == ["/src"]

    (assembly,) = data["assemblies"]
    assert [c["name"] for c in assembly["classes"]] == ["App.Empty", "App.Main"]
    main = assembly["classes"][1]
    assert main["covered_lines"] == 2
    assert main["coverable_lines"] == 3
    assert main["covered_branches"] == 1
    assert main["total_branches"] == 2

    (code_file,) = main["files"]
    assert code_file["path"] == "main.cs"
    assert code_file["coverage"] == [-1, 1, 0, 1]
    assert code_file["status"] == ["not-coverable", "covered", "not-covered", "partially-covered"]
    assert code_file["branches"] == {"3": [{"id": "3_0", "visits": 1}, {"id": "3_1", "visits": 0}]}


def test_to_dict_prunes_absent_metric_values(result: ParserResult) -> None:
    data: Any = to_dict(result)
    (method,) = data["assemblies"][0]["classes"][1]["files"][0]["methods"]
    assert method["name"] == "Run()"
    assert method["line"] == 1
    complexity, coverage = method["metrics"]
    assert complexity["name"] == "CyclomaticComplexity"
    assert "value" not in complexity
    assert coverage["value"] == 50.0
    (element,) = data["assemblies"][0]["classes"][1]["files"][0]["code_elements"]
    assert element == {
        "name": "Run()",
        "type": "method",
        "first_line": 1,
        "last_line": 2,
        "coverage_quota": 50.0,
    }


def test_format_json_is_valid_json(result: ParserResult) -> None:
    assert json.loads(format_json(result)) == to_dict(result)


def test_summary_without_color(result: ParserResult) -> None:
    text = render_summary(result, color=False, width=160)
    assert "Coverage Summary" in text
    assert "App.Main" in text
    assert "66.6%" in text
    assert "n/a" in text  # App.Empty has no coverable lines
    assert "Total" in text
    assert "\x1b[" not in text


def test_summary_with_color(result: ParserResult) -> None:
    assert "\x1b[" in render_summary(result, color=True, width=160)


def test_parse_report_uses_settings(
    coverage_xml_file: Callable[..., Path],
    class_element: Callable[..., str],
) -> None:
    report = coverage_xml_file(
        {"App": [class_element("App.Main", "main.cs", [(1, 1)]), class_element("App.Gen", "gen.g.cs", [(1, 1)])]}
    )
    result = parse_report(report, settings=ParserSettings(file_filters=("-*.g.cs",), max_workers=1))
    assert [c.name for c in result.iter_classes()] == ["App.Main"]
