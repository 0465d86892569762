"""resolve-node HTTP service package.

Serves a single catch-all route: the path (or ``?tag=``) names the version
tag, query parameters narrow the match, and the response carries the chosen
release as plain text or JSON.
"""

from .request_parser import ParsedLookup, parse_lookup
from .server import ResolveServer, ServiceConfig, run_server_sync

__all__ = [
    "ParsedLookup",
    "parse_lookup",
    "ResolveServer",
    "ServiceConfig",
    "run_server_sync",
]
