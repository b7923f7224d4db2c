"""Startup banner — route table and status output.

Prints the bound route table with timing and watch status.  Detects
``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from prowl.config import ProwlConfig
    from prowl.routes.registrar import Binding


# ---------------------------------------------------------------------------
# ANSI helpers: respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""


_MODE_STYLES: dict[str, tuple[str, str]] = {
    "dev": (_GREEN, "dev"),
    "serve": (_CYAN, "serve"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def format_route_table(bindings: Sequence[Binding], root: Path | None = None) -> list[str]:
    """Render bindings as aligned ``METHOD  URL  FILE`` rows."""
    if not bindings:
        return []
    method_width = max(len(b.method) for b in bindings)
    url_width = max(len(b.url_path) for b in bindings)
    rows: list[str] = []
    for b in sorted(bindings, key=lambda b: (b.url_path, b.method)):
        source = b.file_path
        if root is not None and source.is_relative_to(root):
            source = source.relative_to(root)
        rows.append(
            f"{b.method:<{method_width}}  {b.url_path:<{url_width}}  {_DIM}{source}{_RESET}"
        )
    return rows


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: ProwlConfig,
    mode: str,
    *,
    loaded: int = 0,
    bindings: Sequence[Binding] = (),
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the Prowl startup banner to stderr.

    Args:
        config: Resolved ProwlConfig.
        mode: ``"dev"`` or ``"serve"``.
        loaded: Number of route files that loaded.
        bindings: Bindings made into the host.
        load_ms: Time spent loading and binding in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from prowl import __version__

    header = f"  {_ORANGE}{_BOLD}Prowl{_RESET} {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}"
    lines: list[str] = ["", header, f"  {_DIM}{'─' * 43}{_RESET}"]

    files_label = "file" if loaded == 1 else "files"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {loaded} route {files_label} loaded{timing}")
    lines.append(f"  {_DIM}├─{_RESET} routes: {_DIM}{config.routes_path}{_RESET}")

    if config.hot_reload:
        lines.append(f"  {_DIM}├─{_RESET} {_GREEN}hot reload{_RESET}")
    elif mode == "serve":
        workers_label = str(config.workers) if config.workers > 0 else "auto"
        lines.append(f"  {_DIM}├─{_RESET} workers: {workers_label}")

    table = format_route_table(bindings, config.routes_path)
    if table:
        lines.append("")
        lines.extend(f"  {row}" for row in table)

    url = f"http://{config.host}:{config.port}"
    lines.append("")
    lines.append(f"  {_BOLD}{_CYAN}{url}{_RESET}" if _COLOR else f"  {url}")

    if config.hot_reload:
        lines.append("")
        lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")
    print("\n".join(lines), file=sys.stderr)
