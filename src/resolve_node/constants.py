"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONFIG_ERROR = 2


class OutputFormat(Enum):
    """Response body formats understood by the lookup endpoint."""

    JSON = "json"
    TEXT = "text"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Release indexes
    INDEX_URL_OFFICIAL = "https://nodejs.org/dist/index.json"
    INDEX_URL_UNOFFICIAL = "https://unofficial-builds.nodejs.org/download/release/index.json"

    # Download bases the tarball URL is built on
    DOWNLOAD_BASE_OFFICIAL = "https://nodejs.org/dist"
    DOWNLOAD_BASE_UNOFFICIAL = "https://unofficial-builds.nodejs.org/download/release"

    # Caller spellings mapped onto the identifiers used in the "files" list
    PLATFORM_ALIASES = {"darwin": "osx"}
    ARCH_ALIASES = {"x86_64": "x64"}
    FILE_SUFFIXES = {"osx": "-tar", "win": "-zip"}

    # No native darwin-arm64 builds exist below this release
    APPLE_SILICON_MIN_VERSION = "16.0.0"

    HEADER_NODE_VERSION = "X-Node-Version"
    HEADER_DOWNLOAD_URL = "X-Download-URL"
    TEXT_CONTENT_TYPE = "text/plain; charset=utf8"
    NO_MATCH_ERROR = "No match found"

    DEFAULT_HOST = "127.0.0.1"
    DEFAULT_PORT = 3000
    REQUEST_TIMEOUT = 30  # Timeout in seconds for catalog fetches
    USER_AGENT = "resolve-node/0.3"

    ENV_LOG_LEVEL = "RESOLVE_NODE_LOG_LEVEL"
    LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
