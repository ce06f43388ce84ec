"""Central configuration and constants for ``covgraph``."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from covgraph import logger

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

# Hit counts beyond a signed 32-bit integer are clamped to this value.
MAX_VISITS = 2**31 - 1

CODE_COVERAGE_URL = "https://en.wikipedia.org/wiki/Code_coverage"
CYCLOMATIC_COMPLEXITY_URL = "https://www.ndepend.com/docs/code-metrics#CC"

PARSER_NAME = "CoberturaParser"


@dataclass(frozen=True, slots=True)
class ParserSettings:
    """Settings read from ``[tool.covgraph]``.

    ``max_workers`` bounds the pool used to process the classes of one assembly;
    ``None`` lets the executor choose and ``1`` processes classes inline.
    """

    max_workers: int | None = None
    assembly_filters: tuple[str, ...] = field(default_factory=tuple)
    class_filters: tuple[str, ...] = field(default_factory=tuple)
    file_filters: tuple[str, ...] = field(default_factory=tuple)


def _as_patterns(value: object, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    msg = f"[tool.covgraph] {key} must be a string or a list of strings"
    raise ValueError(msg)


def settings_from_mapping(data: dict[str, object]) -> ParserSettings:
    """Build :class:`ParserSettings` from a ``[tool.covgraph]`` table."""
    raw_workers = data.get("max-workers")
    if raw_workers is not None and (not isinstance(raw_workers, int) or raw_workers < 1):
        msg = "[tool.covgraph] max-workers must be a positive integer"
        raise ValueError(msg)
    return ParserSettings(
        max_workers=raw_workers,
        assembly_filters=_as_patterns(data.get("assembly-filters"), "assembly-filters"),
        class_filters=_as_patterns(data.get("class-filters"), "class-filters"),
        file_filters=_as_patterns(data.get("file-filters"), "file-filters"),
    )


def load_settings(pyproject: Path | None = None) -> ParserSettings:
    """Read settings from *pyproject* (default ``./pyproject.toml``).

    A missing file yields the defaults; an unreadable or invalid one is logged and
    ignored.
    """
    path = pyproject or Path("./pyproject.toml").resolve()
    if not path.is_file():
        return ParserSettings()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to parse %s: %s", path, e)
        return ParserSettings()

    table = data.get("tool", {}).get("covgraph", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring non-table [tool.covgraph] in %s", path)
        return ParserSettings()
    try:
        return settings_from_mapping(table)
    except ValueError as e:
        logger.warning("Invalid configuration in %s: %s", path, e)
        return ParserSettings()


__all__ = [
    "CODE_COVERAGE_URL",
    "CYCLOMATIC_COMPLEXITY_URL",
    "LOG_FORMAT",
    "MAX_VISITS",
    "PARSER_NAME",
    "ParserSettings",
    "load_settings",
    "settings_from_mapping",
]
