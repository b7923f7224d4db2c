"""Path translation between route files and URL paths.

File-path convention::

    routes/index.py            -> /
    routes/test2.py            -> /test2
    routes/users/index.py      -> /users
    routes/users/[id].py       -> /users/:id
    routes/cache/del/[key].py  -> /cache/del/:key

A segment written ``[name]`` becomes the parameter segment ``:name``.
Anything else, including malformed brackets such as ``[id`` or ``a[b]``,
is kept verbatim.  All functions here are pure.
"""

import re
from pathlib import PurePath, PurePosixPath

# Stem that maps to its directory's URL
INDEX_STEM = "index"

_BRACKET_SEGMENT_RE = re.compile(r"^\[([^\[\]/]+)\]$")
_PARAM_SEGMENT_RE = re.compile(r"^:([^/]+)$")


def translate(relative_path: str | PurePath) -> str:
    """Translate a path relative to the routes directory into a URL path.

    Accepts either separator convention; ``users\\[id].py`` and
    ``users/[id].py`` produce the same result.

    """
    normalized = str(relative_path).replace("\\", "/")
    parts = [p for p in normalized.split("/") if p and p != "."]
    if not parts:
        return "/"

    *dirs, filename = parts
    stem = PurePosixPath(filename).stem

    segments = [_param_segment(d) for d in dirs]
    if stem != INDEX_STEM:
        segments.append(_param_segment(stem))

    return "/" + "/".join(segments)


def to_relative_path(url_path: str, suffix: str = ".py") -> PurePosixPath:
    """Reverse :func:`translate`: build a route file path for *url_path*.

    ``/`` becomes ``index<suffix>`` and ``:name`` becomes ``[name]``.  The
    result is equivalent rather than identical to the original file:
    ``users/index.py`` and ``users.py`` both serve ``/users``.

    """
    segments = [_bracket_segment(s) for s in url_path.split("/") if s]
    if not segments:
        return PurePosixPath(INDEX_STEM + suffix)
    *dirs, last = segments
    return PurePosixPath(*dirs, last + suffix)


def to_chirp_path(url_path: str) -> str:
    """Rewrite ``:name`` segments into chirp's ``{name}`` parameter syntax."""
    segments = url_path.split("/")
    return "/".join(
        "{" + m.group(1) + "}" if (m := _PARAM_SEGMENT_RE.match(s)) else s
        for s in segments
    )


def _param_segment(segment: str) -> str:
    match = _BRACKET_SEGMENT_RE.match(segment)
    if match is None:
        return segment
    return ":" + match.group(1)


def _bracket_segment(segment: str) -> str:
    match = _PARAM_SEGMENT_RE.match(segment)
    if match is None:
        return segment
    return "[" + match.group(1) + "]"
