from __future__ import annotations

from typing import TYPE_CHECKING

from defusedxml import DefusedXmlException, ElementTree

from covgraph.errors import CoverageXMLNotFoundError, InvalidCoverageXMLError

if TYPE_CHECKING:
    from pathlib import Path
    from xml.etree.ElementTree import Element  # noqa: S405


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _strip_namespaces(root: Element) -> None:
    # the parser looks elements up by their plain Cobertura names
    for elem in root.iter():
        if isinstance(elem.tag, str) and elem.tag.startswith("{"):
            elem.tag = _local_name(elem.tag)


def read_root(path: Path) -> Element:
    """Parse a Cobertura report and return its ``<coverage>`` root element.

    Namespaced reports are accepted; namespaces are dropped from every tag.
    """
    if not path.is_file():
        msg = f"Coverage XML file not found: {path}"
        raise CoverageXMLNotFoundError(msg)
    try:
        root = ElementTree.parse(path).getroot()
    except ElementTree.ParseError as exc:
        msg = f"{path}: failed to parse coverage XML: {exc}"
        raise InvalidCoverageXMLError(msg) from exc
    except DefusedXmlException as exc:
        msg = f"{path}: forbidden XML construct in coverage report: {exc}"
        raise InvalidCoverageXMLError(msg) from exc
    if _local_name(root.tag or "").lower() != "coverage":
        msg = f"unexpected root tag {root.tag!r} in {path}"
        raise InvalidCoverageXMLError(msg)
    _strip_namespaces(root)
    return root


__all__ = ["read_root"]
