"""Parser turning a Cobertura XML document into a :class:`ParserResult`.

Cobertura may spread one logical class over several ``<class>`` elements (merged
reports, nested classes ``Outer/Inner``, inner classes ``Outer$Inner``, partial
classes ``Outer.Part``). Every level therefore re-scans the package elements by
name instead of walking the tree once.
"""

from __future__ import annotations

import datetime
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, TypeVar

from covgraph import logger
from covgraph.config import PARSER_NAME
from covgraph.errors import InvalidArgumentError, MalformedAttributeError
from covgraph.model.analysis import Assembly, Class, CodeElement, CodeFile, ParserResult
from covgraph.model.filter import DefaultFilter
from covgraph.model.types import NO_DATA, CodeElementType, LineVisitStatus
from covgraph.parser._numbers import int_attr, large_int_attr, require_attr
from covgraph.parser.branches import get_branches
from covgraph.parser.methods import build_method_metric
from covgraph.parser.xml_reader import read_root

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from pathlib import Path
    from xml.etree.ElementTree import Element, ElementTree  # noqa: S405

    from covgraph.config import ParserSettings
    from covgraph.model.analysis import Branch
    from covgraph.model.filter import Filter

T = TypeVar("T")
R = TypeVar("R")

# Markers of compiler-synthesized container types (closures, state machines).
_GENERATED_CLASS_MARKERS = ("$", "<>", ">d", ">g")


def _logical_class_name(full_name: str) -> str:
    return full_name.split("/", 1)[0]


def _is_generated_class(name: str) -> bool:
    return any(marker in name for marker in _GENERATED_CLASS_MARKERS)


def _is_fragment_of(fragment_name: str, class_name: str, separators: str) -> bool:
    if fragment_name == class_name:
        return True
    return any(fragment_name.startswith(class_name + sep) for sep in separators)


def _dedupe(items: Iterator[str]) -> list[str]:
    # dict keeps first-seen order
    return list(dict.fromkeys(items))


def _class_elements(packages: Sequence[Element], assembly_name: str) -> Iterator[Element]:
    for package in packages:
        if require_attr(package, "name") == assembly_name:
            yield from package.findall("classes/class")


def _read_timestamp(root: Element) -> datetime.datetime | None:
    if root.find("sources") is None:
        return None
    raw = root.get("timestamp")
    if raw is None:
        return None
    try:
        return datetime.datetime.fromtimestamp(float(raw), tz=datetime.UTC).astimezone()
    except (ValueError, OverflowError, OSError) as exc:
        # the timestamp is informational only
        logger.debug("ignoring coverage timestamp %r: %s", raw, exc)
        return None


def _line_status(hits: int, branches: tuple[Branch, ...] | None) -> LineVisitStatus:
    if hits <= 0:
        return LineVisitStatus.NOT_COVERED
    if branches and any(b.branch_visits == 0 for b in branches):
        return LineVisitStatus.PARTIALLY_COVERED
    return LineVisitStatus.COVERED


class CoberturaParser:
    """Parser for XML reports generated by Cobertura and compatible tools."""

    def __init__(
        self,
        assembly_filter: Filter | None = None,
        class_filter: Filter | None = None,
        file_filter: Filter | None = None,
        *,
        max_workers: int | None = None,
    ) -> None:
        self.assembly_filter = assembly_filter or DefaultFilter()
        self.class_filter = class_filter or DefaultFilter()
        self.file_filter = file_filter or DefaultFilter()
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: ParserSettings) -> CoberturaParser:
        return cls(
            DefaultFilter(settings.assembly_filters),
            DefaultFilter(settings.class_filters),
            DefaultFilter(settings.file_filters),
            max_workers=settings.max_workers,
        )

    def __str__(self) -> str:
        return PARSER_NAME

    # ------------------------------------------------------------------ #
    # Report                                                             #
    # ------------------------------------------------------------------ #
    def parse_file(self, path: Path) -> ParserResult:
        """Read the report at *path* and parse it."""
        logger.debug("Parsing coverage report %s", path)
        return self.parse(read_root(path))

    def parse(self, report: Element | ElementTree | None) -> ParserResult:
        """Build the coverage graph for a parsed Cobertura document."""
        if report is None:
            msg = "report must not be None"
            raise InvalidArgumentError(msg)
        root = report.getroot() if hasattr(report, "getroot") else report

        packages = list(root.iter("package"))
        assembly_names = sorted(
            name
            for name in _dedupe(require_attr(p, "name") for p in packages)
            if self.assembly_filter.is_included(name)
        )
        assemblies = [self._process_assembly(packages, name) for name in assembly_names]

        result = ParserResult(assemblies, str(self))
        for source in root.findall("sources/source"):
            result.add_source_directory(source.text or "")

        timestamp = _read_timestamp(root)
        if timestamp is not None:
            result.minimum_timestamp = timestamp
            result.maximum_timestamp = timestamp
        return result

    # ------------------------------------------------------------------ #
    # Assembly                                                           #
    # ------------------------------------------------------------------ #
    def _process_assembly(self, packages: Sequence[Element], assembly_name: str) -> Assembly:
        logger.debug("Current assembly: %s", assembly_name)
        candidates = (
            _logical_class_name(require_attr(c, "name")) for c in _class_elements(packages, assembly_name)
        )
        class_names = sorted(
            name
            for name in _dedupe(n for n in candidates if not _is_generated_class(n))
            if self.class_filter.is_included(name)
        )

        assembly = Assembly(assembly_name)
        results = self._map(lambda name: self._process_class(packages, assembly, name), class_names)
        for cls in results:
            if cls is not None:
                assembly.add_class(cls)
        assembly.sort_classes()
        return assembly

    def _map(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        """Apply *fn* to *items*, in a thread pool unless limited to one worker."""
        if self.max_workers == 1 or len(items) <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(fn, items))

    # ------------------------------------------------------------------ #
    # Class                                                              #
    # ------------------------------------------------------------------ #
    def _process_class(self, packages: Sequence[Element], assembly: Assembly, class_name: str) -> Class | None:
        files = _dedupe(
            require_attr(c, "filename")
            for c in _class_elements(packages, assembly.name)
            if _is_fragment_of(require_attr(c, "name"), class_name, "$/")
        )
        filtered_files = [f for f in files if self.file_filter.is_included(f)]

        # a class whose files were all filtered out is omitted
        if not ((not files and not self.file_filter.has_custom_filters()) or filtered_files):
            logger.debug("Skipping class %s: all files filtered", class_name)
            return None

        cls = Class(class_name, assembly)
        for file_path in filtered_files:
            cls.add_file(self._process_file(packages, cls, file_path))
        return cls

    # ------------------------------------------------------------------ #
    # File                                                               #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _process_file(packages: Sequence[Element], cls: Class, file_path: str) -> CodeFile:
        fragments = [
            c
            for c in _class_elements(packages, cls.assembly.name)
            if _is_fragment_of(require_attr(c, "name"), cls.name, "$/.")
            and require_attr(c, "filename") == file_path
        ]

        line_elems = [line for fragment in fragments for line in fragment.findall("lines/line")]
        lines_of_file = sorted(
            ((int_attr(line, "number"), large_int_attr(line, "hits")) for line in line_elems),
            key=lambda item: item[0],
        )
        if lines_of_file and lines_of_file[0][0] < 0:
            raise MalformedAttributeError("line", "number", str(lines_of_file[0][0]))
        branches = get_branches(line_elems)

        coverage: list[int] = []
        status: list[LineVisitStatus] = []
        if lines_of_file:
            size = lines_of_file[-1][0] + 1
            coverage = [NO_DATA] * size
            status = [LineVisitStatus.NOT_COVERABLE] * size
            for number, hits in lines_of_file:
                coverage[number] = hits
                status[number] = _line_status(hits, branches.get(number))

        code_file = CodeFile(file_path, coverage, status, branches)

        for fragment in fragments:
            fragment_name = require_attr(fragment, "name")
            for method in fragment.findall("methods/method"):
                metric = build_method_metric(method, fragment_name)
                if metric is None:
                    continue
                code_file.add_method_metric(metric)

                method_lines = method.findall("lines/line")
                if method_lines:
                    first_line = int_attr(method_lines[0], "number")
                    last_line = int_attr(method_lines[-1], "number")
                    code_file.add_code_element(
                        CodeElement(
                            metric.full_name,
                            CodeElementType.METHOD,
                            first_line,
                            last_line,
                            code_file.coverage_quota_between(first_line, last_line),
                        )
                    )

        logger.debug("Processed file %s of class %s (%d lines)", file_path, cls.name, len(lines_of_file))
        return code_file


__all__ = ["CoberturaParser"]
