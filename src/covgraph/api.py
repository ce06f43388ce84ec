from __future__ import annotations

from typing import TYPE_CHECKING

from covgraph.config import ParserSettings
from covgraph.parser.cobertura import CoberturaParser

if TYPE_CHECKING:
    from pathlib import Path

    from covgraph.model.analysis import ParserResult


def parse_report(path: Path, *, settings: ParserSettings | None = None) -> ParserResult:
    """Parse the Cobertura report at *path* with filters and pool size from *settings*."""
    parser = CoberturaParser.from_settings(settings or ParserSettings())
    return parser.parse_file(path)


__all__ = ["parse_report"]
