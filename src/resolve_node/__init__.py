"""resolve-node: look up Node.js releases by version tag over HTTP."""

__version__ = "0.3.0"
