"""Prowl CLI — prowl dev / prowl serve / prowl routes.

Entry point for the ``prowl`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prowl.routes.registrar import Binding


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the prowl CLI."""
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="Convention-based route loader with hot reload for chirp.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prowl dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Serve routes/ with hot reload",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    dev_parser.add_argument("--host", default=None, help="Bind address")
    dev_parser.add_argument("--port", type=int, default=None, help="Bind port")

    # prowl serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve routes/ in production (no reload)",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.add_argument("--workers", type=int, default=None, help="Worker count (0=auto)")

    # prowl routes
    routes_parser = subparsers.add_parser(
        "routes",
        help="Load routes/ and print the route table",
    )
    routes_parser.add_argument("root", nargs="?", default=".", help="Project root directory")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from prowl import __version__

    return __version__


def _overrides(args: argparse.Namespace, *names: str) -> dict[str, object]:
    """CLI flags that were given; unset flags defer to prowl.yaml."""
    return {n: getattr(args, n) for n in names if getattr(args, n, None) is not None}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from prowl._errors import ProwlError
    from prowl.app import dev, inspect_routes, load_warnings, serve

    try:
        if args.command == "dev":
            dev(root=args.root, **_overrides(args, "host", "port"))
        elif args.command == "serve":
            serve(root=args.root, **_overrides(args, "host", "port", "workers"))
        elif args.command == "routes":
            loader = inspect_routes(root=args.root)
            _print_routes(loader.bindings, load_warnings(loader.collector))
    except ProwlError as exc:
        print(f"prowl: {exc}", file=sys.stderr)
        sys.exit(1)


def _print_routes(bindings: tuple[Binding, ...], failures: list[str]) -> None:
    from prowl.banner import format_route_table

    rows = format_route_table(bindings)
    print("\n".join(rows) if rows else "No routes found.")
    for failure in failures:
        print(f"failed: {failure}", file=sys.stderr)


if __name__ == "__main__":
    main()
