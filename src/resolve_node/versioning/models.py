"""Data models for release catalogs and version resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

import semantic_version

# Index fields passed through to JSON output when the catalog carries them.
PASSTHROUGH_FIELDS = ("date", "npm", "v8", "uv", "zlib", "openssl", "modules")


def parse_release_version(version: str) -> semantic_version.Version:
    """Parse a catalog version string such as ``v14.13.0``."""
    text = version.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    return semantic_version.Version(text)


@dataclass(frozen=True)
class ReleaseRecord:
    """One published release from either the official or unofficial index."""

    version: str
    lts: Optional[str]
    security: bool
    files: Tuple[str, ...]
    unofficial: bool
    semver: semantic_version.Version
    date: Optional[str] = None
    npm: Optional[str] = None
    v8: Optional[str] = None
    uv: Optional[str] = None
    zlib: Optional[str] = None
    openssl: Optional[str] = None
    modules: Optional[str] = None

    @classmethod
    def from_index_entry(cls, entry: Mapping[str, Any], unofficial: bool) -> "ReleaseRecord":
        """Build a record from one element of an ``index.json`` array.

        Raises:
            ValueError: the entry is not an object or its version is not semver.
        """
        if not isinstance(entry, Mapping):
            raise ValueError(f"release entry must be an object, got {type(entry).__name__}")
        version = entry.get("version")
        if not isinstance(version, str):
            raise ValueError("release entry has no version")

        # The index uses `false` for non-LTS lines and the codename otherwise
        lts = entry.get("lts")
        files = entry.get("files") or ()
        extras = {
            name: str(entry[name])
            for name in PASSTHROUGH_FIELDS
            if entry.get(name) is not None
        }
        return cls(
            version=version,
            lts=lts if isinstance(lts, str) and lts else None,
            security=bool(entry.get("security")),
            files=tuple(str(f) for f in files),
            unofficial=unofficial,
            semver=parse_release_version(version),
            **extras,
        )

    def has_file(self, file_id: str) -> bool:
        """Return True if a build artifact with this identifier was published."""
        return file_id in self.files

    def to_dict(self) -> Dict[str, Any]:
        """Render the record in the shape of the upstream index entry."""
        data: Dict[str, Any] = {"version": self.version}
        for name in PASSTHROUGH_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        data["files"] = list(self.files)
        data["lts"] = self.lts if self.lts else False
        data["security"] = self.security
        data["unofficial"] = self.unofficial
        return data


class TagKind(Enum):
    """How a version tag is matched against the catalog."""
    WILDCARD = "wildcard"
    RANGE = "range"
    LTS = "lts"


@dataclass(frozen=True)
class VersionTag:
    """Parsed form of the caller's tag.

    ``expression`` is always the npm range handed to the matcher: ``*`` for
    wildcard and LTS tags. ``codename`` is only meaningful for LTS tags;
    None means any LTS line, an empty string matches nothing.
    """
    raw: str
    kind: TagKind
    expression: str = "*"
    codename: Optional[str] = None


@dataclass(frozen=True)
class ResolutionRequest:
    """Lookup input after normalization at the boundary."""
    tag: str
    security: bool = False
    platform: Optional[str] = None
    arch: Optional[str] = None
    # Platform as spelled in download file names ("darwin", not "osx")
    download_platform: Optional[str] = None


@dataclass(frozen=True)
class ResolutionResult:
    """Lookup outcome: the caller's tag, the chosen release and its URL."""
    tag: str
    release: ReleaseRecord
    url: Optional[str] = None

    @property
    def version(self) -> str:
        return self.release.version

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tag": self.tag}
        if self.url:
            data["url"] = self.url
        data.update(self.release.to_dict())
        return data
