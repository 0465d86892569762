"""Tag and parameter parsing for version lookups."""

import re
from typing import Optional

import semantic_version

from ..constants import Constants
from .models import ResolutionRequest, TagKind, VersionTag

_LTS_PATTERN = re.compile(r"^lts(?:/(?P<codename>[^/]*))?$")
_COERCE_PATTERN = re.compile(r"\d+(?:\.\d+(?:\.\d+)?)?")
# node-semver accepts "< 9", "~ 8.11" and ">=v8"
_OPERATOR_GAP = re.compile(r"(<=|>=|<|>|=|~|\^)\s*v?")

_TRUTHY = {"y", "yes", "true", "1", "on"}
_FALSY = {"n", "no", "false", "0", "off"}


def parse_tag(raw: str) -> VersionTag:
    """Classify a caller-supplied tag.

    ``lts`` and ``lts/<codename>`` are LTS queries; ``*``, ``latest`` and the
    empty string match anything; every other value is an npm range.
    Matching is case-insensitive, ``raw`` is kept verbatim.
    """
    text = (raw or "").strip().lower()

    lts = _LTS_PATTERN.match(text)
    if lts:
        # "lts/" yields an empty codename which no release carries
        return VersionTag(raw=raw, kind=TagKind.LTS, codename=lts.group("codename"))

    if text in ("", "*", "latest"):
        return VersionTag(raw=raw, kind=TagKind.WILDCARD)

    return VersionTag(raw=raw, kind=TagKind.RANGE, expression=normalize_range(text))


def normalize_range(expression: str) -> str:
    """Collapse whitespace and join each operator to its version.

    Also drops a ``v`` directly after an operator, so ``>= v8  <9`` becomes
    ``>=8 <9``.
    """
    return _OPERATOR_GAP.sub(r"\1", " ".join(expression.split()))


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Interpret a yes/no-ish query value; None when it is neither."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    return None


def normalize_platform(platform: Optional[str]) -> Optional[str]:
    """Map a caller platform onto the spelling used in ``files`` entries."""
    p = (platform or "").strip().lower()
    if not p:
        return None
    return Constants.PLATFORM_ALIASES.get(p, p)


def normalize_arch(arch: Optional[str]) -> Optional[str]:
    """Map a caller architecture onto the spelling used in ``files`` entries."""
    a = (arch or "").strip().lower()
    if not a:
        return None
    return Constants.ARCH_ALIASES.get(a, a)


def coerce_version(expression: str) -> semantic_version.Version:
    """Loosely turn a range such as ``14.x`` or ``>=12`` into a version.

    The first ``N[.N[.N]]`` run in the expression is taken and padded with
    zeros.

    Raises:
        ValueError: the expression contains no version number.
    """
    match = _COERCE_PATTERN.search(expression or "")
    if not match:
        raise ValueError(f"Cannot coerce {expression!r} to a version")
    return semantic_version.Version.coerce(match.group(0))


def build_request(
    tag: str,
    security: Optional[bool] = None,
    platform: Optional[str] = None,
    arch: Optional[str] = None,
) -> ResolutionRequest:
    """Construct a normalized ResolutionRequest from raw caller values."""
    download_platform = (platform or "").strip().lower() or None
    return ResolutionRequest(
        tag=tag,
        security=bool(security),
        platform=normalize_platform(platform),
        arch=normalize_arch(arch),
        download_platform=download_platform,
    )
