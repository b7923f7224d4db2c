"""Route loader — import one route module into a RouteDescriptor.

A route module exports::

    method = "GET"                # optional; a str or a list of str
    schema = {"value": [required]}  # optional; forwarded to the host verbatim

    async def handler(request):  # required; sync functions work too
        ...

The file is compiled from its current bytes on every call, under a fresh
module name, so a reload after an edit always sees the new code.
"""

import hashlib
import importlib.machinery
import importlib.util
import itertools
import re
import sys
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from prowl._errors import MissingHandlerError, RouteLoadError
from prowl._types import HandlerFunc
from prowl.routes.paths import translate

DEFAULT_METHOD = "GET"

# Package prefix for synthetic route module names
_MODULE_PREFIX = "prowl_routes"

_HTTP_TOKEN_RE = re.compile(r"^[A-Z]+$")

# Monotonic load token shared by every load in the process
_load_tokens = itertools.count(1)

# Last synthetic module name per source file, so reloads can drop it
_loaded_names: dict[Path, str] = {}

# Guards parent package registration when files load in parallel
_packages_lock = threading.Lock()


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """The current routing state for one route source file.

    Attributes:
        file_path: Absolute path to the originating file (registry key).
        url_path: URL path derived from the file location (``/users/:id``).
        methods: Upper-case HTTP methods, deduplicated, in declared order.
        handler: Callable accepting the request.
        schema: Opaque validation object forwarded to the host, or *None*.

    """

    file_path: Path
    url_path: str
    methods: tuple[str, ...]
    handler: HandlerFunc
    schema: object | None = None


def load_route(file_path: Path, routes_dir: Path) -> RouteDescriptor:
    """Load *file_path* and return its descriptor.

    Raises:
        MissingHandlerError: The module has no callable ``handler``.
        RouteLoadError: The module could not be read, compiled, or executed,
            or its ``method`` export is invalid.

    """
    url_path = translate(file_path.relative_to(routes_dir))
    module = _exec_module(file_path, routes_dir)

    handler = getattr(module, "handler", None)
    if handler is None or not callable(handler):
        msg = f"Route file missing handler: {file_path}"
        raise MissingHandlerError(file_path, msg)

    methods = _normalize_methods(getattr(module, "method", None), file_path)

    return RouteDescriptor(
        file_path=file_path,
        url_path=url_path,
        methods=methods,
        handler=handler,
        schema=getattr(module, "schema", None),
    )


def _module_name(file_path: Path, routes_dir: Path) -> str:
    """Build a unique dotted name: users/[id].py -> prowl_routes.r1a2b3c4d.users._id___7

    The ``r<digest>`` level keeps two routes directories in one process
    from sharing helper modules.
    """
    relative = file_path.relative_to(routes_dir).with_suffix("")
    parts = [re.sub(r"\W", "_", part) for part in relative.parts]
    root = "r" + hashlib.sha1(str(routes_dir).encode(), usedforsecurity=False).hexdigest()[:8]
    return f"{_MODULE_PREFIX}.{root}.{'.'.join(parts)}__{next(_load_tokens)}"


def _ensure_parent_packages(module_name: str, directory: Path) -> None:
    """Register namespace packages for each level above *module_name*.

    Lets route modules import private siblings relatively
    (``from ._db import USERS``): ``prowl_routes.r<digest>.users`` searches
    ``routes/users`` and ``prowl_routes.r<digest>`` searches ``routes``.
    Helpers are imported once per process; editing one does not reload
    the routes that use it.
    """
    *parents, _leaf = module_name.split(".")
    with _packages_lock:
        for depth in range(len(parents), 0, -1):
            name = ".".join(parents[:depth])
            if name not in sys.modules:
                spec = importlib.machinery.ModuleSpec(name, None, is_package=True)
                spec.submodule_search_locations = [str(directory)]
                sys.modules[name] = importlib.util.module_from_spec(spec)
            directory = directory.parent


def _exec_module(file_path: Path, routes_dir: Path) -> ModuleType:
    module_name = _module_name(file_path, routes_dir)
    try:
        source = file_path.read_bytes()
        code = compile(source, str(file_path), "exec", dont_inherit=True)
    except (OSError, SyntaxError, ValueError) as exc:
        msg = f"Failed to load {file_path}: {exc}"
        raise RouteLoadError(file_path, msg) from exc

    _ensure_parent_packages(module_name, file_path.parent)
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None:
        msg = f"Failed to load {file_path}: no import spec"
        raise RouteLoadError(file_path, msg)
    module = importlib.util.module_from_spec(spec)

    # Registered while executing so dataclasses and pickling can resolve
    # the module by name.
    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)  # noqa: S102
    except (Exception, SystemExit) as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to load {file_path}: {exc}"
        raise RouteLoadError(file_path, msg) from exc

    previous = _loaded_names.get(file_path)
    if previous is not None:
        sys.modules.pop(previous, None)
    _loaded_names[file_path] = module_name
    return module


def _normalize_methods(value: object, file_path: Path) -> tuple[str, ...]:
    if value is None:
        return (DEFAULT_METHOD,)

    if isinstance(value, str):
        candidates: Iterable[object] = (value,)
    elif isinstance(value, Iterable):
        candidates = value
    else:
        msg = (
            f"Route module {file_path}: 'method' must be a str or a list of str, "
            f"got {type(value).__name__}"
        )
        raise RouteLoadError(file_path, msg)

    methods: list[str] = []
    for candidate in candidates:
        if not isinstance(candidate, str) or not _HTTP_TOKEN_RE.match(candidate.upper()):
            msg = f"Route module {file_path}: invalid HTTP method {candidate!r}"
            raise RouteLoadError(file_path, msg)
        token = candidate.upper()
        if token not in methods:
            methods.append(token)

    if not methods:
        msg = f"Route module {file_path}: 'method' is empty"
        raise RouteLoadError(file_path, msg)
    return tuple(methods)
