"""Node.js version resolver.

Merges the official and unofficial release indexes, narrows them by LTS
line, security flag and published build artifacts, then picks the highest
release satisfying the caller's npm range. Pure: the catalogs are handed in
by the loader and nothing here performs I/O.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import semantic_version

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import Constants
from .models import ReleaseRecord, ResolutionRequest, ResolutionResult, TagKind
from .parser import coerce_version, parse_tag

logger = logging.getLogger(__name__)

_APPLE_SILICON_MIN = semantic_version.Version(Constants.APPLE_SILICON_MIN_VERSION)


def sort_releases(records: Iterable[ReleaseRecord]) -> List[ReleaseRecord]:
    """Order releases newest first.

    When both catalogs publish the same version the unofficial record comes
    first, so it is the one returned for that version.
    """
    return sorted(records, key=lambda r: (r.semver, r.unofficial), reverse=True)


def release_file_id(platform: str, arch: str) -> str:
    """Identifier of the tarball/zip entry in a release's ``files`` list."""
    suffix = Constants.FILE_SUFFIXES.get(platform, "")
    return f"{platform}-{arch}{suffix}"


def effective_arch(platform: str, arch: str, expression: str) -> str:
    """Substitute x64 for arm64 on macOS when the range predates native builds.

    Ranges that cannot be coerced to a version leave the arch untouched.
    """
    if platform != "osx" or arch != "arm64":
        return arch
    try:
        wanted = coerce_version(expression)
    except ValueError:
        return arch
    if wanted < _APPLE_SILICON_MIN:
        logger.debug("No native darwin-arm64 builds for %s, using x64", expression)
        return "x64"
    return arch


def _build_spec(expression: str) -> Optional[semantic_version.NpmSpec]:
    try:
        return semantic_version.NpmSpec(expression)
    except ValueError:
        logger.debug("Unparseable version range: %r", expression)
        return None


def select_release(records: Sequence[ReleaseRecord], expression: str) -> Optional[ReleaseRecord]:
    """Return the record of the highest distinct version satisfying ``expression``.

    ``records`` must already be sorted by :func:`sort_releases`; the first
    record carrying the chosen version wins. Invalid ranges match nothing.
    """
    spec = _build_spec(expression)
    if spec is None:
        return None

    versions = {r.semver for r in records}
    best = spec.select(versions)
    if best is None:
        return None
    for record in records:
        if record.semver == best:
            return record
    return None


def download_url(release: ReleaseRecord, platform: str, arch: str) -> str:
    """Tarball URL for ``release`` on the given platform/arch."""
    base = (
        Constants.DOWNLOAD_BASE_UNOFFICIAL
        if release.unofficial
        else Constants.DOWNLOAD_BASE_OFFICIAL
    )
    version = release.version
    return f"{base}/{version}/node-{version}-{platform}-{arch}.tar.gz"


def resolve_version(
    official: Iterable[ReleaseRecord],
    unofficial: Iterable[ReleaseRecord],
    request: ResolutionRequest,
) -> Optional[ResolutionResult]:
    """Pick the release matching ``request`` from both catalogs.

    Args:
        official: Records from the official index.
        unofficial: Records from the unofficial-builds index.
        request: Normalized lookup parameters.

    Returns:
        The resolution result, or None when nothing matches.
    """
    records = sort_releases([*official, *unofficial])
    tag = parse_tag(request.tag)

    if tag.kind == TagKind.LTS:
        records = [
            r for r in records
            if r.lts and (tag.codename is None or r.lts.lower() == tag.codename)
        ]

    if request.security:
        records = [r for r in records if r.security]

    platform = request.platform
    arch = request.arch
    if platform and arch:
        arch = effective_arch(platform, arch, tag.expression)
        file_id = release_file_id(platform, arch)
        records = [r for r in records if r.has_file(file_id)]

    match = select_release(records, tag.expression)
    if match is None:
        if is_debug_enabled(logger):
            logger.debug(
                "No release matched",
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    outcome="no_match",
                    tag=request.tag,
                    candidates=len(records),
                ),
            )
        return None

    url = None
    if platform and arch:
        url = download_url(match, request.download_platform or platform, arch)

    return ResolutionResult(tag=request.tag, release=match, url=url)
