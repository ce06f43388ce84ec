"""Method names and metrics from ``<method>`` elements.

Compilers wrap async methods and iterators in hidden state-machine classes whose
driver method is ``MoveNext()``; the developer's method name only survives inside
the generated class name, e.g. ``Shop/<CheckoutAsync>d__4`` + ``MoveNext()``.
Lambda bodies get names like ``<Main>b__0_0`` and are not reported at all.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from covgraph.config import CODE_COVERAGE_URL, CYCLOMATIC_COMPLEXITY_URL
from covgraph.model.analysis import MethodMetric, Metric
from covgraph.model.types import MetricMergeOrder, MetricType
from covgraph.parser._numbers import int_attr, parse_decimal, require_attr

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element  # noqa: S405

_STATE_MACHINE_RE = re.compile(r"(?P<class_name>.+)/<(?P<method_name>.+)>.+__.+MoveNext\(\)$")
_LAMBDA_RE = re.compile(r"<.+>.+__")
_TWO_PLACES = Decimal("0.01")

METRIC_COVERAGE = "Coverage"
METRIC_BRANCH_COVERAGE = "BranchCoverage"
METRIC_CYCLOMATIC_COMPLEXITY = "CyclomaticComplexity"


def extract_method_name(method_name: str, class_name: str) -> str:
    """Return the developer-authored name for async/iterator ``MoveNext()`` drivers."""
    if not method_name.endswith("MoveNext()"):
        return method_name
    m = _STATE_MACHINE_RE.search(class_name + method_name)
    if m:
        return m.group("method_name") + "()"
    return method_name


def is_lambda_method(method_name: str) -> bool:
    return "__" in method_name and _LAMBDA_RE.search(method_name) is not None


def get_short_method_name(full_name: str) -> str:
    """``Foo(int, string)`` -> ``Foo(...)``; ``Foo()`` stays as is."""
    index_open = full_name.find("(")
    if index_open <= 0:
        return full_name
    index_close = full_name.find(")")
    signature = "(...)" if index_close - index_open > 1 else "()"
    return full_name[:index_open] + signature


def resolve_method_name(method: Element, class_name: str) -> str | None:
    """Full identity (name + signature) of *method*, or ``None`` for lambda bodies."""
    full_name = require_attr(method, "name") + require_attr(method, "signature")
    full_name = extract_method_name(full_name, class_name)
    if is_lambda_method(full_name):
        return None
    return full_name


def _round(value: Decimal) -> Decimal:
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def _percentage(method: Element, attribute: str) -> Decimal | None:
    value = parse_decimal(method, attribute)
    return None if value is None else _round(100 * value)


def build_metrics(method: Element) -> tuple[Metric, ...]:
    metrics: list[Metric] = []
    if method.get("line-rate") is not None:
        metrics.append(
            Metric(
                METRIC_COVERAGE,
                CODE_COVERAGE_URL,
                MetricType.COVERAGE_PERCENTUAL,
                _percentage(method, "line-rate"),
            )
        )
    if method.get("branch-rate") is not None:
        metrics.append(
            Metric(
                METRIC_BRANCH_COVERAGE,
                CODE_COVERAGE_URL,
                MetricType.COVERAGE_PERCENTUAL,
                _percentage(method, "branch-rate"),
            )
        )
    if method.get("complexity") is not None:
        complexity = parse_decimal(method, "complexity")
        metrics.insert(
            0,
            Metric(
                METRIC_CYCLOMATIC_COMPLEXITY,
                CYCLOMATIC_COMPLEXITY_URL,
                MetricType.CODE_QUALITY,
                None if complexity is None else _round(complexity),
                MetricMergeOrder.LOWER_IS_BETTER,
            ),
        )
    return tuple(metrics)


def build_method_metric(method: Element, class_name: str) -> MethodMetric | None:
    full_name = resolve_method_name(method, class_name)
    if full_name is None:
        return None
    first_line = method.find("lines/line")
    return MethodMetric(
        full_name=full_name,
        short_name=get_short_method_name(full_name),
        metrics=build_metrics(method),
        line=int_attr(first_line, "number") if first_line is not None else None,
    )


__all__ = [
    "build_method_metric",
    "build_metrics",
    "extract_method_name",
    "get_short_method_name",
    "is_lambda_method",
    "resolve_method_name",
]
