"""Centralised exception hierarchy for covgraph."""

from __future__ import annotations


class CovgraphError(Exception):
    """Base class for all custom covgraph exceptions."""


class InvalidArgumentError(CovgraphError, ValueError):
    """A required argument was missing (e.g. no report document was supplied)."""


class CoverageXMLError(CovgraphError):
    """Base class for errors related to coverage XML handling."""


class CoverageXMLNotFoundError(CoverageXMLError):
    """Coverage XML file could not be located on disk."""


class InvalidCoverageXMLError(CoverageXMLError):
    """Coverage XML file was found but does not contain a valid report."""


class MalformedAttributeError(CoverageXMLError):
    """A required attribute is missing or cannot be parsed.

    The report is assumed to be well formed by contract of the tool that wrote it,
    so this error is never recovered from per element; it aborts the whole parse.
    """

    def __init__(self, tag: str, attribute: str, value: str | None = None) -> None:
        self.tag = tag
        self.attribute = attribute
        self.value = value
        if value is None:
            msg = f"<{tag}> is missing required attribute {attribute!r}"
        else:
            msg = f"<{tag}> has malformed attribute {attribute}={value!r}"
        super().__init__(msg)


__all__ = [
    "CoverageXMLError",
    "CoverageXMLNotFoundError",
    "CovgraphError",
    "InvalidArgumentError",
    "InvalidCoverageXMLError",
    "MalformedAttributeError",
]
