from covgraph.model.analysis import (
    Assembly,
    Branch,
    Class,
    CodeElement,
    CodeFile,
    MethodMetric,
    Metric,
    ParserResult,
)
from covgraph.model.filter import DefaultFilter, Filter
from covgraph.model.types import (
    NO_DATA,
    CodeElementType,
    LineVisitStatus,
    MetricMergeOrder,
    MetricType,
)

__all__ = [
    "NO_DATA",
    "Assembly",
    "Branch",
    "Class",
    "CodeElement",
    "CodeElementType",
    "CodeFile",
    "DefaultFilter",
    "Filter",
    "LineVisitStatus",
    "MethodMetric",
    "Metric",
    "MetricMergeOrder",
    "MetricType",
    "ParserResult",
]
