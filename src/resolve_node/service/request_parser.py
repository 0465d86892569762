"""Request parser turning lookup URLs into resolution requests."""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..constants import OutputFormat
from ..errors import UnrecognizedFormatError
from ..versioning.models import ResolutionRequest
from ..versioning.parser import build_request, parse_bool


@dataclass
class ParsedLookup:
    """Result of parsing a lookup request."""

    request: ResolutionRequest
    # Query parameters echoed back in the 404 body
    query: Dict[str, Any] = field(default_factory=dict)
    raw_path: str = ""
    requested_format: Optional[str] = None
    accept: Optional[str] = None

    @property
    def format(self) -> OutputFormat:
        """Body format for a matched release.

        Only read once a release matched, so an unknown ``?format=`` on a
        lookup with no match still answers 404.

        Raises:
            UnrecognizedFormatError: ``?format=`` is neither json nor text.
        """
        return output_format(self.requested_format, self.accept)


def tag_from_request(raw_path: str, query: Mapping[str, str]) -> str:
    """Pick the tag: ``?tag=`` wins over the URL-decoded path, default ``*``."""
    tag = query.get("tag")
    if tag:
        return tag
    path_tag = urllib.parse.unquote(raw_path[1:] if raw_path.startswith("/") else raw_path)
    return path_tag or "*"


def output_format(requested: Optional[str], accept: Optional[str]) -> OutputFormat:
    """Resolve the body format from ``?format=`` or the Accept header.

    Raises:
        UnrecognizedFormatError: ``requested`` is neither json nor text.
    """
    if requested:
        try:
            return OutputFormat(requested.strip().lower())
        except ValueError as exc:
            raise UnrecognizedFormatError(requested) from exc
    if accept and "json" in accept:
        return OutputFormat.JSON
    return OutputFormat.TEXT


def parse_lookup(raw_path: str, query: Mapping[str, str], accept: Optional[str] = None) -> ParsedLookup:
    """Parse the path, query string and Accept header of a lookup.

    Args:
        raw_path: Percent-encoded request path.
        query: Query parameters (first value per key).
        accept: Value of the Accept header, if any.

    Returns:
        ParsedLookup with the normalized request and output format.
    """
    echo: Dict[str, Any] = {key: query[key] for key in query.keys()}
    security = parse_bool(query.get("security"))
    if security is None:
        echo.pop("security", None)
    else:
        echo["security"] = security

    request = build_request(
        tag_from_request(raw_path, query),
        security=security,
        platform=query.get("platform"),
        arch=query.get("arch"),
    )
    return ParsedLookup(
        request=request,
        query=echo,
        raw_path=raw_path,
        requested_format=query.get("format"),
        accept=accept,
    )
