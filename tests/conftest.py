"""Shared fixtures: release catalogs and a fake index server."""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
from aiohttp import web

from resolve_node.versioning.models import ReleaseRecord

FIXTURES = Path(__file__).parent / "fixtures"

OFFICIAL_PATH = "/dist/index.json"
UNOFFICIAL_PATH = "/download/release/index.json"


def read_fixture(name: str) -> List[Dict[str, Any]]:
    """Load a JSON fixture from tests/fixtures."""
    with open(FIXTURES / name, "r", encoding="utf-8") as f:
        return json.load(f)


def make_release(version: str, lts=False, security=False, files=(), unofficial=False) -> ReleaseRecord:
    """Build a record the way the loader does."""
    entry = {"version": version, "lts": lts, "security": security, "files": list(files)}
    return ReleaseRecord.from_index_entry(entry, unofficial)


def make_index_app(official=None, unofficial=None, official_status=200, unofficial_status=200) -> web.Application:
    """Fake nodejs.org serving both index documents.

    Bodies default to the JSON fixtures; a non-200 status serves a plain
    text error body instead.
    """
    official = read_fixture("index.json") if official is None else official
    unofficial = read_fixture("unofficial.json") if unofficial is None else unofficial

    def _serve(payload, status):
        async def handler(request: web.Request) -> web.Response:
            if status != 200:
                return web.Response(status=status, text="upstream unavailable")
            if isinstance(payload, str):
                return web.Response(text=payload, content_type="application/json")
            return web.json_response(payload)
        return handler

    app = web.Application()
    app.router.add_get(OFFICIAL_PATH, _serve(official, official_status))
    app.router.add_get(UNOFFICIAL_PATH, _serve(unofficial, unofficial_status))
    return app


@pytest.fixture
def official_records() -> List[ReleaseRecord]:
    """Records from the official index fixture."""
    return [ReleaseRecord.from_index_entry(e, False) for e in read_fixture("index.json")]


@pytest.fixture
def unofficial_records() -> List[ReleaseRecord]:
    """Records from the unofficial index fixture."""
    return [ReleaseRecord.from_index_entry(e, True) for e in read_fixture("unofficial.json")]
