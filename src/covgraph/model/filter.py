from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

from covgraph import logger

if TYPE_CHECKING:
    from collections.abc import Iterable


class Filter(Protocol):
    """Decides whether an assembly, class or file name ends up in the result."""

    def is_included(self, name: str) -> bool: ...

    def has_custom_filters(self) -> bool: ...


def _compile(pattern: str) -> re.Pattern[str]:
    escaped = re.escape(pattern).replace(r"\*", ".*")
    return re.compile(f"^{escaped}$", re.IGNORECASE)


class DefaultFilter:
    """Include/exclude filter built from ``+Pattern`` / ``-Pattern`` entries.

    ``*`` matches any run of characters and matching ignores case. An entry
    without a sign is treated as an include. Without include entries every name
    is included; exclusions always win.
    """

    def __init__(self, filters: Iterable[str] = ()) -> None:
        entries = [f.strip() for f in filters if f and f.strip()]
        self._custom = bool(entries)
        includes: list[re.Pattern[str]] = []
        excludes: list[re.Pattern[str]] = []
        for entry in entries:
            if entry.startswith("-"):
                excludes.append(_compile(entry[1:]))
            else:
                includes.append(_compile(entry.removeprefix("+")))
        self._includes = tuple(includes) or (_compile("*"),)
        self._excludes = tuple(excludes)

    def is_included(self, name: str) -> bool:
        if any(p.match(name) for p in self._excludes):
            logger.debug("filter excluded %s", name)
            return False
        return any(p.match(name) for p in self._includes)

    def has_custom_filters(self) -> bool:
        return self._custom


__all__ = ["DefaultFilter", "Filter"]
