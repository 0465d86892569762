"""Version tag parsing and release resolution."""

from .models import ReleaseRecord, ResolutionRequest, ResolutionResult, TagKind, VersionTag
from .parser import build_request, parse_tag
from .resolver import resolve_version

__all__ = [
    "ReleaseRecord",
    "ResolutionRequest",
    "ResolutionResult",
    "TagKind",
    "VersionTag",
    "build_request",
    "parse_tag",
    "resolve_version",
]
