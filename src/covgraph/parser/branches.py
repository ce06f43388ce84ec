"""Synthetic branch records from Cobertura ``condition-coverage`` strings.

Cobertura only says how many of a line's branches were taken, e.g.
``condition-coverage="50% (1/2)"``, never which ones. Each line therefore gets
``total`` branches named ``"{line}_{index}"`` where the first ``covered`` indices
count as visited.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from covgraph.model.analysis import Branch
from covgraph.parser._numbers import int_attr

if TYPE_CHECKING:
    from collections.abc import Iterable
    from xml.etree.ElementTree import Element  # noqa: S405

_BRANCH_COVERAGE_RE = re.compile(r"\((?P<covered>\d+)/(?P<total>\d+)\)$")

# reported covered count and the branches synthesized for one line
_LineBranches = tuple[int, tuple[Branch, ...]]


def parse_condition_coverage(text: str) -> tuple[int, int] | None:
    """Parse ``'50% (1/2)'`` into ``(covered, total)``; ``None`` when it does not match."""
    m = _BRANCH_COVERAGE_RE.search(text)
    if not m:
        return None
    return int(m.group("covered")), int(m.group("total"))


def synthesize_branches(line: int, covered: int, total: int) -> tuple[Branch, ...]:
    return tuple(Branch(identifier=f"{line}_{i}", branch_visits=1 if i < covered else 0) for i in range(total))


def merge_branches(existing: _LineBranches | None, candidate: _LineBranches) -> _LineBranches:
    """Keep the ``(covered, branches)`` pair with the strictly higher reported covered count.

    Merged reports repeat the same line once per run, so the best run wins; ties
    keep *existing*. The count is the one from the report, which may exceed the
    number of synthesized branches.
    """
    if existing is None or candidate[0] > existing[0]:
        return candidate
    return existing


def _is_branch_line(line_elem: Element) -> bool:
    if line_elem.get("condition-coverage") is None:
        return False
    return (line_elem.get("branch") or "").lower() == "true"


def get_branches(lines: Iterable[Element]) -> dict[int, tuple[Branch, ...]]:
    """Map line number -> branches for every ``<line>`` carrying branch data."""
    best: dict[int, _LineBranches] = {}
    for line_elem in lines:
        if not _is_branch_line(line_elem):
            continue
        counts = parse_condition_coverage(line_elem.get("condition-coverage", ""))
        if counts is None:
            continue
        number = int_attr(line_elem, "number")
        covered, total = counts
        best[number] = merge_branches(best.get(number), (covered, synthesize_branches(number, covered, total)))
    return {number: branches for number, (_, branches) in best.items()}


__all__ = [
    "get_branches",
    "merge_branches",
    "parse_condition_coverage",
    "synthesize_branches",
]
