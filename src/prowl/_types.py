"""Shared type definitions for prowl."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from pathlib import Path

# Mode of operation
type ProwlMode = Literal["dev", "serve"]

# Absolute path to a route source file (the registry key)
type RouteSource = Path

# Route URL path in colon-parameter form (e.g., "/users/:id")
type RoutePath = str

# Upper-case HTTP method token (e.g., "GET")
type HttpMethod = str

# Handler exported by a route module; receives the request
type HandlerFunc = Callable[..., Any]

# Kind of filesystem change reported by the watcher
type ChangeKind = Literal["added", "changed", "removed"]
