"""Exceptions raised while looking up a Node.js release.

A lookup that simply finds nothing is not an error: the resolver returns
``None`` and the HTTP layer answers 404. Everything here is a server-side
failure and carries the HTTP status it is reported with.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ResolveNodeError(Exception):
    """Base class for lookup failures."""

    code = "internal_error"
    http_status = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as a JSON-serializable body."""
        return {
            "error": self.message,
            "code": self.code,
            "context": self.context,
        }


class CatalogFetchError(ResolveNodeError):
    """A release index could not be fetched or parsed."""

    code = "catalog_fetch_failed"
    http_status = 502

    def __init__(self, url: str, status: Optional[int], body: str):
        if status is None:
            message = f"Failed to fetch {url}: {body}"
        else:
            message = f"Received {status} from {url}: {body}"
        super().__init__(message, {"url": url, "status": status})
        self.url = url
        self.status = status
        self.body = body


class UnrecognizedFormatError(ResolveNodeError):
    """The caller asked for an output format other than json or text."""

    code = "unknown_format"

    def __init__(self, fmt: str):
        super().__init__(f'Unknown "format": {fmt}', {"format": fmt})
        self.format = fmt
