from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any
from xml.sax.saxutils import quoteattr  # noqa: S406 - builds test input only

import pytest
from click.testing import CliRunner
from defusedxml import ElementTree

LineSpec = tuple[int, int] | Mapping[str, Any]


def _attrs(spec: Mapping[str, Any]) -> str:
    return " ".join(f'{k.replace("_", "-")}={quoteattr(str(v))}' for k, v in spec.items())


def _line_xml(spec: LineSpec) -> str:
    if isinstance(spec, tuple):
        number, hits = spec
        return f'<line number="{number}" hits="{hits}"/>'
    return f"<line {_attrs(spec)}/>"


def _lines_xml(lines: Iterable[LineSpec]) -> str:
    return "<lines>" + "".join(_line_xml(ln) for ln in lines) + "</lines>"


def class_xml(
    name: str,
    filename: str,
    lines: Iterable[LineSpec] = (),
    methods: Sequence[Mapping[str, Any]] = (),
) -> str:
    """Render one ``<class>`` element.

    Method specs take ``name``, ``signature``, optional ``line_rate``,
    ``branch_rate``, ``complexity`` and ``lines``.
    """
    methods_xml = ""
    for m in methods:
        spec = dict(m)
        method_lines = spec.pop("lines", ())
        methods_xml += f"<method {_attrs(spec)}>{_lines_xml(method_lines)}</method>"
    return (
        f"<class {_attrs({'name': name, 'filename': filename})}>"
        f"<methods>{methods_xml}</methods>"
        f"{_lines_xml(lines)}"
        "</class>"
    )


def coverage_xml(
    packages: Mapping[str, Sequence[str]] | Sequence[tuple[str, Sequence[str]]],
    *,
    sources: Sequence[str] = (),
    timestamp: str | None = None,
) -> str:
    """Render a Cobertura document; *packages* maps package name -> class XML snippets."""
    items = packages.items() if isinstance(packages, Mapping) else packages
    packages_xml = "".join(
        f'<package name="{name}"><classes>{"".join(classes)}</classes></package>' for name, classes in items
    )
    sources_xml = "<sources>" + "".join(f"<source>{s}</source>" for s in sources) + "</sources>"
    ts = f' timestamp="{timestamp}"' if timestamp is not None else ""
    return f"<coverage{ts}>{sources_xml}<packages>{packages_xml}</packages></coverage>"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def class_element() -> Callable[..., str]:
    return class_xml


@pytest.fixture
def coverage_root() -> Callable[..., Any]:
    def build(packages: Any, **kwargs: Any) -> Any:
        return ElementTree.fromstring(coverage_xml(packages, **kwargs))

    return build


@pytest.fixture
def coverage_xml_file(tmp_path: Path) -> Callable[..., Path]:
    def write(packages: Any, *, filename: str = "coverage.xml", **kwargs: Any) -> Path:
        xml_file = tmp_path / filename
        xml_file.write_text(coverage_xml(packages, **kwargs), encoding="utf-8")
        return xml_file

    return write
