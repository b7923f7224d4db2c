"""Prowl — convention-based route loading with hot reload for chirp.

Drop handler modules into ``routes/`` and prowl binds them by file
location.  Edit a handler and the next request runs the new code.

Quick start::

    import prowl

    prowl.dev("my-api/")

File-path convention::

    routes/index.py            GET /
    routes/users/index.py      GET /users
    routes/users/[id].py       GET /users/:id
    routes/_helpers.py         (private, ignored)

A route module exports ``handler(request)`` plus optional ``method`` and
``schema``.  Two modes::

    prowl.dev("my-api/")       # hot reload, single worker
    prowl.serve("my-api/")     # fixed route set, multi-worker

"""

__version__ = "0.1.0"
__all__ = [
    "ProwlConfig",
    "RouteLoader",
    "__version__",
    "dev",
    "get_state",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import prowl`` fast; chirp and watchfiles load on first use.
    """
    if name == "ProwlConfig":
        from prowl.config import ProwlConfig

        return ProwlConfig

    if name == "RouteLoader":
        from prowl.app import RouteLoader

        return RouteLoader

    if name == "get_state":
        from prowl.context import get_state

        return get_state

    if name == "dev":
        from prowl.app import dev

        return dev

    if name == "serve":
        from prowl.app import serve

        return serve

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
