"""CLI entry point for the resolve-node lookup service.

This module provides the command-line interface for starting the HTTP
service that resolves Node.js version tags against the release indexes.
"""

from __future__ import annotations

import ipaddress
import logging
import os
import sys
from typing import Any, Dict, Optional

import yaml

from .args import parse_args
from .common.logging_utils import configure_logging
from .constants import Constants, ExitCodes
from .service.server import ServiceConfig, run_server_sync

logger = logging.getLogger(__name__)


def _is_local_bind_host(host: str) -> bool:
    """Return True if host is a loopback/local bind target."""
    if not host:
        return False
    host_lower = host.strip().lower()
    if host_lower in ("localhost",):
        return True
    try:
        return ipaddress.ip_address(host_lower).is_loopback
    except ValueError:
        # Non-IP hostnames are treated as non-local unless explicitly allowed.
        return False


def _enforce_local_binding(host: str, allow_external: bool) -> None:
    """Enforce local-only binding unless explicitly allowed."""
    if _is_local_bind_host(host):
        return
    if not allow_external:
        sys.stderr.write(
            "ERROR: Non-local bindings require --allow-external.\n"
        )
        sys.exit(ExitCodes.CONFIG_ERROR.value)
    logger.warning(
        "Binding service to non-local address (%s). Ensure network controls are in place.",
        host,
    )


def _load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load service configuration from file.

    JSON is valid YAML, so both are read with the YAML loader. A top-level
    ``service`` section is used when present.

    Args:
        config_path: Path to YAML/JSON config file.

    Returns:
        Configuration dict, empty when no usable file was given.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}

    if not isinstance(data, dict):
        return {}
    section = data.get("service", data)
    return section if isinstance(section, dict) else {}


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments.

    Args:
        args: Parsed CLI arguments.
    """
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()

    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def run_service(args: Any) -> None:
    """Start the lookup service from parsed CLI arguments.

    Args:
        args: Parsed CLI arguments namespace.
    """
    _setup_logging(args)

    config_path = getattr(args, "CONFIG", None)
    file_config = _load_config_file(config_path)
    if file_config:
        logger.info("Loaded service config from: %s", config_path)

    config = ServiceConfig.from_args(args, file_config)
    _enforce_local_binding(config.host, config.allow_external)

    print(
        f"\n"
        f"  resolve-node\n"
        f"  ============\n"
        f"  Listening: http://{config.host}:{config.port}\n"
        f"\n"
        f"  Try:\n"
        f"    curl http://{config.host}:{config.port}/lts\n"
        f"    curl 'http://{config.host}:{config.port}/14.x?platform=linux&arch=x64'\n"
        f"\n"
        f"  Press Ctrl+C to stop\n"
    )

    run_server_sync(config)


def main(argv=None) -> None:
    """Console script entry point."""
    run_service(parse_args(argv))
