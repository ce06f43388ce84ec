"""Attribute access and number parsing shared by the parser components."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from covgraph.config import MAX_VISITS
from covgraph.errors import MalformedAttributeError

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element  # noqa: S405


def require_attr(elem: Element, name: str) -> str:
    value = elem.get(name)
    if value is None:
        raise MalformedAttributeError(elem.tag, name)
    return value


def int_attr(elem: Element, name: str) -> int:
    raw = require_attr(elem, name)
    try:
        return int(raw)
    except ValueError as exc:
        raise MalformedAttributeError(elem.tag, name, raw) from exc


def large_int_attr(elem: Element, name: str) -> int:
    """Parse a hit count, accepting notations like ``1.2E+10``, clamped to ``[0, MAX_VISITS]``.

    Negative counts become 0 so they never collide with the ``NO_DATA`` sentinel.
    """
    raw = require_attr(elem, name)
    try:
        value = int(raw)
    except ValueError:
        try:
            number = Decimal(raw.strip())
        except InvalidOperation as exc:
            raise MalformedAttributeError(elem.tag, name, raw) from exc
        if not number.is_finite():
            raise MalformedAttributeError(elem.tag, name, raw) from None
        value = int(number)
    return max(0, min(value, MAX_VISITS))


def parse_decimal(elem: Element, name: str) -> Decimal | None:
    """Parse a decimal attribute; ``NaN`` (any case) yields ``None``.

    Both ``.`` and ``,`` are accepted as the fractional separator, as is scientific
    notation.
    """
    raw = require_attr(elem, name)
    text = raw.strip()
    if text.lower() == "nan":
        return None
    try:
        number = Decimal(text.replace(",", "."))
    except InvalidOperation as exc:
        raise MalformedAttributeError(elem.tag, name, raw) from exc
    if not number.is_finite():
        raise MalformedAttributeError(elem.tag, name, raw)
    return number


__all__ = ["int_attr", "large_int_attr", "parse_decimal", "require_attr"]
