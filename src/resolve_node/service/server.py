"""Version lookup HTTP service using aiohttp."""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from aiohttp import web

from ..catalog.loader import CatalogLoader
from ..common.logging_utils import Timer, extra_context
from ..constants import Constants, OutputFormat
from ..errors import ResolveNodeError
from ..versioning.resolver import resolve_version
from .request_parser import ParsedLookup, parse_lookup

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@dataclass
class ServiceConfig:
    """Configuration for the lookup service."""

    host: str = Constants.DEFAULT_HOST
    port: int = Constants.DEFAULT_PORT
    official_index: str = Constants.INDEX_URL_OFFICIAL
    unofficial_index: str = Constants.INDEX_URL_UNOFFICIAL
    timeout: int = Constants.REQUEST_TIMEOUT
    allow_external: bool = False

    @classmethod
    def from_args(cls, args: Any, file_config: Optional[Dict[str, Any]] = None) -> "ServiceConfig":
        """Create config from CLI arguments layered over a config file.

        Args:
            args: Parsed CLI arguments namespace; unset options are None.
            file_config: Mapping loaded from the YAML config file.

        Returns:
            ServiceConfig instance.
        """
        config = cls()
        for key, value in (file_config or {}).items():
            if hasattr(config, key) and value is not None:
                setattr(config, key, value)

        overrides = {
            "host": getattr(args, "HOST", None),
            "port": getattr(args, "PORT", None),
            "official_index": getattr(args, "OFFICIAL_INDEX", None),
            "unofficial_index": getattr(args, "UNOFFICIAL_INDEX", None),
            "timeout": getattr(args, "TIMEOUT", None),
        }
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        if getattr(args, "ALLOW_EXTERNAL", False):
            config.allow_external = True

        config.port = int(config.port)
        config.timeout = int(config.timeout)
        return config


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Render lookup failures as JSON server errors."""
    try:
        return await handler(request)
    except ResolveNodeError as exc:
        logger.error(
            "Lookup failed: %s",
            exc.message,
            extra=extra_context(event="lookup", component="server", outcome="error", code=exc.code),
        )
        return web.json_response(exc.to_dict(), status=exc.http_status)


class ResolveServer:
    """HTTP service answering "which Node.js release does this tag mean"."""

    def __init__(self, config: ServiceConfig, loader: Optional[CatalogLoader] = None):
        """Initialize the service.

        Args:
            config: Service configuration.
            loader: Optional pre-built catalog loader.
        """
        self._config = config
        self._app: Optional[web.Application] = None
        self._runner: Optional[web.AppRunner] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._loader = loader or CatalogLoader(
            official_url=config.official_index,
            unofficial_url=config.unofficial_index,
            timeout=config.timeout,
        )

    def _create_app(self) -> web.Application:
        """Create the aiohttp application."""
        app = web.Application(middlewares=[error_middleware])
        app.router.add_get("/{path:.*}", self._handle_request)
        app.on_startup.append(self._on_startup)
        app.on_cleanup.append(self._on_cleanup)
        return app

    async def _on_startup(self, app: web.Application) -> None:
        """Called when the server starts."""
        await self._loader.start()
        logger.info("Lookup service starting on %s:%s", self._config.host, self._config.port)

    async def _on_cleanup(self, app: web.Application) -> None:
        """Called when the server stops."""
        await self._loader.stop()
        logger.info("Lookup service stopped")

    async def _handle_request(self, request: web.Request) -> web.StreamResponse:
        """Resolve the requested tag and render the answer.

        Args:
            request: Incoming HTTP request.

        Returns:
            200 with the release, or 404 when nothing matches.
        """
        parsed = parse_lookup(
            request.rel_url.raw_path,
            request.query,
            request.headers.get("Accept"),
        )

        with Timer() as t:
            official, unofficial = await self._loader.load_all_catalogs()
            result = resolve_version(official, unofficial, parsed.request)

        if result is None:
            logger.info(
                "No match: tag=%s query=%s",
                parsed.request.tag, parsed.query,
                extra=extra_context(event="lookup", component="server", outcome="no_match",
                                    duration_ms=t.duration_ms()),
            )
            return self._no_match_response(parsed)

        logger.info(
            "Resolved %s -> %s%s",
            parsed.request.tag, result.version,
            " (unofficial)" if result.release.unofficial else "",
            extra=extra_context(event="lookup", component="server", outcome="match",
                                duration_ms=t.duration_ms()),
        )

        headers = {Constants.HEADER_NODE_VERSION: result.version}
        if result.url:
            headers[Constants.HEADER_DOWNLOAD_URL] = result.url

        if parsed.format == OutputFormat.JSON:
            return web.json_response(result.to_dict(), headers=headers)

        headers["Content-Type"] = Constants.TEXT_CONTENT_TYPE
        return web.Response(body=result.version.encode("utf-8"), headers=headers)

    def _no_match_response(self, parsed: ParsedLookup) -> web.Response:
        """Create the 404 body echoing what was asked for."""
        return web.json_response(
            {
                "tag": parsed.request.tag,
                "query": parsed.query,
                "error": Constants.NO_MATCH_ERROR,
            },
            status=404,
        )

    async def start(self) -> None:
        """Start the service."""
        self._app = self._create_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(
            self._runner,
            self._config.host,
            self._config.port,
        )
        await site.start()

        logger.info(
            "resolve-node listening on http://%s:%s",
            self._config.host, self._config.port,
        )
        logger.info("Official index: %s", self._config.official_index)
        logger.info("Unofficial index: %s", self._config.unofficial_index)

    async def run_forever(self) -> None:
        """Start the service and run until stopped."""
        await self.start()
        self._stop_event = asyncio.Event()
        try:
            await self._stop_event.wait()
        except asyncio.CancelledError:
            pass
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop the service."""
        if self._stop_event is not None:
            self._stop_event.set()
        runner, self._runner = self._runner, None
        self._app = None
        if runner:
            await runner.cleanup()


def run_server_sync(config: ServiceConfig) -> None:
    """Run the service until SIGINT/SIGTERM.

    Args:
        config: Service configuration.
    """
    server = ResolveServer(config)
    loop = asyncio.new_event_loop()

    async def run():
        await server.start()
        stop_event = asyncio.Event()
        running_loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            running_loop.add_signal_handler(sig, stop_event.set)
        await stop_event.wait()
        logger.info("Shutdown signal received, stopping...")
        await server.stop()

    try:
        loop.run_until_complete(run())
    except KeyboardInterrupt:
        # Windows has no loop signal handlers
        loop.run_until_complete(server.stop())
    finally:
        loop.close()
        logger.info("Lookup service shutdown complete")
