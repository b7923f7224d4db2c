"""Shared test fixtures for prowl."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def routes_dir(tmp_path: Path) -> Path:
    """Create an empty routes/ directory."""
    d = tmp_path / "routes"
    d.mkdir()
    return d.resolve()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project root with a small routes/ tree."""
    routes = tmp_path / "routes"
    write_route(routes, "index.py", HELLO_ROUTE.format(message="home"))
    write_route(routes, "users/index.py", HELLO_ROUTE.format(message="users"))
    write_route(
        routes,
        "users/[id].py",
        "async def handler(request):\n"
        "    return {'id': request.path_params['id']}\n",
    )
    write_route(routes, "_helpers.py", "VALUE = 1\n")
    return tmp_path


HELLO_ROUTE = (
    "async def handler(request):\n"
    "    return {{'message': '{message}'}}\n"
)


def write_route(routes_dir: Path, name: str, content: str) -> Path:
    """Write a route module and return its resolved path."""
    p = routes_dir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p.resolve()


def response_json(resp: Any) -> Any:
    """Decode a chirp test response body as JSON."""
    body = resp.body.decode() if isinstance(resp.body, bytes) else resp.body
    return json.loads(body)


class RecordingHost:
    """Host double that records every route() call."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.schemas: dict[tuple[str, str], object | None] = {}

    def route(self, method: str, url_path: str, schema: object | None, handler: Any) -> None:
        self.routes[(method, url_path)] = handler
        self.schemas[(method, url_path)] = schema

    def not_found(self, url_path: str) -> Any:
        return {"error": "Route not found"}, 404
