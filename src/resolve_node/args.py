"""Argument parsing functionality for resolve-node."""

import argparse

from .constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="resolve-node",
        description=(
            "resolve-node - HTTP lookup of Node.js releases by version tag"
        ),
        add_help=True,
    )

    parser.add_argument("-H", "--host",
                        dest="HOST",
                        help=f"Address to bind (default: {Constants.DEFAULT_HOST})",
                        action="store",
                        type=str)
    parser.add_argument("-p", "--port",
                        dest="PORT",
                        help=f"Port to listen on (default: {Constants.DEFAULT_PORT})",
                        action="store",
                        type=int)
    parser.add_argument("--allow-external",
                        dest="ALLOW_EXTERNAL",
                        help="Allow binding to a non-loopback address.",
                        action="store_true")

    parser.add_argument("--official-index",
                        dest="OFFICIAL_INDEX",
                        help="URL of the official release index.json",
                        action="store",
                        type=str)
    parser.add_argument("--unofficial-index",
                        dest="UNOFFICIAL_INDEX",
                        help="URL of the unofficial-builds release index.json",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"Catalog fetch timeout in seconds (default: {Constants.REQUEST_TIMEOUT})",
                        action="store",
                        type=int)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    # Config file (general)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
