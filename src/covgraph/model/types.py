"""Enumerations used across the coverage model."""

from __future__ import annotations

from enum import StrEnum

# Sentinel stored in ``CodeFile.line_coverage`` for lines without data.
NO_DATA = -1


class LineVisitStatus(StrEnum):
    """Coverage state of a single source line."""

    NOT_COVERABLE = "not-coverable"
    NOT_COVERED = "not-covered"
    PARTIALLY_COVERED = "partially-covered"
    COVERED = "covered"


class MetricType(StrEnum):
    """Category of a method metric."""

    COVERAGE_PERCENTUAL = "coverage-percentual"
    CODE_QUALITY = "code-quality"


class MetricMergeOrder(StrEnum):
    """Which value wins when two metrics of the same kind are compared."""

    HIGHER_IS_BETTER = "higher-is-better"
    LOWER_IS_BETTER = "lower-is-better"


class CodeElementType(StrEnum):
    """Kinds of code elements with a source span."""

    METHOD = "method"


__all__ = [
    "NO_DATA",
    "CodeElementType",
    "LineVisitStatus",
    "MetricMergeOrder",
    "MetricType",
]
