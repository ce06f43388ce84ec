"""Coverage object graph consumed by renderers.

The graph is built once by a parser, leaf first (branches, files, classes,
assemblies, result), and is read-only afterwards. The ``add_*`` methods exist for
construction only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from typing import TYPE_CHECKING

from covgraph.model.types import (
    NO_DATA,
    CodeElementType,
    LineVisitStatus,
    MetricMergeOrder,
    MetricType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from datetime import datetime

_COVERED_STATES = frozenset({LineVisitStatus.COVERED, LineVisitStatus.PARTIALLY_COVERED})
_QUOTA_STEP = Decimal("0.1")


def calculate_quota(covered: int, total: int) -> Decimal | None:
    """Return ``covered / total`` as a percentage truncated to one decimal place."""
    if total <= 0:
        return None
    return (Decimal(100 * covered) / Decimal(total)).quantize(_QUOTA_STEP, rounding=ROUND_DOWN)


@dataclass(frozen=True, slots=True)
class Branch:
    """A synthetic branch; ``branch_visits`` is 0 or 1."""

    identifier: str
    branch_visits: int


@dataclass(frozen=True, slots=True)
class Metric:
    name: str
    explanation_url: str
    metric_type: MetricType
    value: Decimal | None  # None when the report says NaN
    merge_order: MetricMergeOrder = MetricMergeOrder.HIGHER_IS_BETTER


@dataclass(frozen=True, slots=True)
class MethodMetric:
    """Metrics of one method; a complexity metric, when present, comes first."""

    full_name: str
    short_name: str
    metrics: tuple[Metric, ...]
    line: int | None = None


@dataclass(frozen=True, slots=True)
class CodeElement:
    """Inclusive ``[first_line, last_line]`` span of a method."""

    name: str
    code_element_type: CodeElementType
    first_line: int
    last_line: int
    coverage_quota: Decimal | None = None


class _CoverageTotals:
    """Line/branch totals derived from child nodes."""

    __slots__ = ()

    def _parts(self) -> Iterable[_CoverageTotals]:
        raise NotImplementedError

    @property
    def covered_lines(self) -> int:
        return sum(p.covered_lines for p in self._parts())

    @property
    def coverable_lines(self) -> int:
        return sum(p.coverable_lines for p in self._parts())

    @property
    def covered_branches(self) -> int:
        return sum(p.covered_branches for p in self._parts())

    @property
    def total_branches(self) -> int:
        return sum(p.total_branches for p in self._parts())

    @property
    def coverage_quota(self) -> Decimal | None:
        return calculate_quota(self.covered_lines, self.coverable_lines)

    @property
    def branch_coverage_quota(self) -> Decimal | None:
        return calculate_quota(self.covered_branches, self.total_branches)


@dataclass(slots=True)
class CodeFile(_CoverageTotals):
    """Coverage of one source file as seen from one class.

    ``line_coverage`` and ``line_visit_status`` are indexed by line number; index 0
    is unused. Lines without data hold ``NO_DATA`` / ``NOT_COVERABLE``.
    """

    path: str
    line_coverage: list[int] = field(default_factory=list)
    line_visit_status: list[LineVisitStatus] = field(default_factory=list)
    branches_by_line: Mapping[int, tuple[Branch, ...]] = field(default_factory=dict)
    method_metrics: list[MethodMetric] = field(default_factory=list)
    code_elements: list[CodeElement] = field(default_factory=list)

    def _parts(self) -> Iterable[_CoverageTotals]:
        return ()

    def add_method_metric(self, metric: MethodMetric) -> None:
        self.method_metrics.append(metric)

    def add_code_element(self, element: CodeElement) -> None:
        self.code_elements.append(element)

    @property
    def max_line(self) -> int:
        return len(self.line_coverage) - 1

    def hits(self, line: int) -> int:
        """Hit count of *line*, or ``NO_DATA`` when the report says nothing about it."""
        if 0 < line < len(self.line_coverage):
            return self.line_coverage[line]
        return NO_DATA

    def status(self, line: int) -> LineVisitStatus:
        if 0 < line < len(self.line_visit_status):
            return self.line_visit_status[line]
        return LineVisitStatus.NOT_COVERABLE

    @property
    def covered_lines(self) -> int:
        return sum(1 for s in self.line_visit_status if s in _COVERED_STATES)

    @property
    def coverable_lines(self) -> int:
        return sum(1 for s in self.line_visit_status if s is not LineVisitStatus.NOT_COVERABLE)

    @property
    def covered_branches(self) -> int:
        return sum(1 for branches in self.branches_by_line.values() for b in branches if b.branch_visits > 0)

    @property
    def total_branches(self) -> int:
        return sum(len(branches) for branches in self.branches_by_line.values())

    def coverage_quota_between(self, first_line: int, last_line: int) -> Decimal | None:
        """Percentage of covered lines among coverable lines in ``[first_line, last_line]``."""
        if first_line < 0 or last_line < first_line or last_line >= len(self.line_visit_status):
            return None
        window = self.line_visit_status[first_line : last_line + 1]
        coverable = [s for s in window if s is not LineVisitStatus.NOT_COVERABLE]
        covered = sum(1 for s in coverable if s in _COVERED_STATES)
        return calculate_quota(covered, len(coverable))


@dataclass(slots=True, eq=False)
class Class(_CoverageTotals):
    """A logical class, possibly assembled from several XML fragments."""

    name: str
    assembly: Assembly = field(repr=False, compare=False)
    files: list[CodeFile] = field(default_factory=list)

    def _parts(self) -> Iterable[_CoverageTotals]:
        return self.files

    def add_file(self, code_file: CodeFile) -> None:
        self.files.append(code_file)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Class):
            return NotImplemented
        return (self.name, self.assembly.name, self.files) == (other.name, other.assembly.name, other.files)


@dataclass(slots=True)
class Assembly(_CoverageTotals):
    name: str
    classes: list[Class] = field(default_factory=list)

    def _parts(self) -> Iterable[_CoverageTotals]:
        return self.classes

    def add_class(self, cls: Class) -> None:
        self.classes.append(cls)

    def sort_classes(self) -> None:
        self.classes.sort(key=lambda c: c.name)


@dataclass(slots=True)
class ParserResult(_CoverageTotals):
    """Root of the coverage graph."""

    assemblies: list[Assembly]
    parser_name: str
    supports_branch_coverage: bool = True
    line_coverage_available: bool = True
    source_directories: list[str] = field(default_factory=list)
    minimum_timestamp: datetime | None = None
    maximum_timestamp: datetime | None = None

    def __post_init__(self) -> None:
        self.assemblies = sorted(self.assemblies, key=lambda a: a.name)

    def _parts(self) -> Iterable[_CoverageTotals]:
        return self.assemblies

    def add_source_directory(self, directory: str) -> None:
        self.source_directories.append(directory)

    def iter_classes(self) -> Iterator[Class]:
        for assembly in self.assemblies:
            yield from assembly.classes

    def __str__(self) -> str:
        return self.parser_name


__all__ = [
    "Assembly",
    "Branch",
    "Class",
    "CodeElement",
    "CodeFile",
    "MethodMetric",
    "Metric",
    "ParserResult",
    "calculate_quota",
]
