"""Route file discovery.

Walks the routes directory recursively and returns every file that
qualifies as a route source.  Unreadable entries are skipped with a debug
log line; a missing root yields an empty set.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath

logger = logging.getLogger("prowl.routes")

DEFAULT_EXTENSIONS: tuple[str, ...] = (".py",)
DEFAULT_EXCLUDE_PREFIX = "_"

# Directory names never descended into
_SKIP_DIRS = frozenset({"__pycache__"})


def is_route_file(
    path: PurePath | str,
    *,
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    exclude_prefix: str = DEFAULT_EXCLUDE_PREFIX,
) -> bool:
    """Return True if *path* names a route source file.

    Only the file name is inspected: its suffix must be one of *extensions*
    and it must not start with *exclude_prefix*.

    """
    name = PurePath(path).name
    if not name or (exclude_prefix and name.startswith(exclude_prefix)):
        return False
    # Editor and OS droppings such as ._search.py
    if name.startswith("._"):
        return False
    return PurePath(name).suffix in extensions


def scan(
    root: Path,
    *,
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    exclude_prefix: str = DEFAULT_EXCLUDE_PREFIX,
) -> frozenset[Path]:
    """Return the absolute paths of every route file under *root*."""
    root = root.resolve()
    if not root.is_dir():
        logger.debug("Routes directory %s does not exist; no routes", root)
        return frozenset()

    found: set[Path] = set()
    _walk(root, found, extensions=extensions, exclude_prefix=exclude_prefix)
    return frozenset(found)


def _walk(
    directory: Path,
    found: set[Path],
    *,
    extensions: tuple[str, ...],
    exclude_prefix: str,
) -> None:
    try:
        with os.scandir(directory) as entries:
            children = list(entries)
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return

    for entry in children:
        try:
            if entry.is_dir():
                if entry.name in _SKIP_DIRS or entry.name.startswith("."):
                    continue
                _walk(
                    Path(entry.path),
                    found,
                    extensions=extensions,
                    exclude_prefix=exclude_prefix,
                )
            elif entry.is_file() and is_route_file(
                entry.name, extensions=extensions, exclude_prefix=exclude_prefix,
            ):
                found.add(Path(entry.path))
        except OSError as exc:
            logger.debug("Skipping unreadable entry %s: %s", entry.path, exc)
