"""Prowl application — the route loader and its chirp integration.

RouteLoader owns the scan → load → bind → watch pipeline for one routes
directory.  The public functions (dev, serve, inspect_routes) wire a
loader into a chirp App and run it on Pounce.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from prowl._errors import MissingHandlerError, RouteLoadError
from prowl.config import ProwlConfig
from prowl.config_loader import load_config
from prowl.observability.collector import RouteCollector
from prowl.observability.events import RouteLoadFailed
from prowl.routes.loader import RouteDescriptor, load_route
from prowl.routes.paths import translate
from prowl.routes.registrar import Binding, Registrar
from prowl.routes.registry import RouteRegistry
from prowl.routes.scanner import (
    DEFAULT_EXCLUDE_PREFIX,
    DEFAULT_EXTENSIONS,
    is_route_file,
    scan,
)
from prowl.watcher import ChangeEvent, RouteWatcher

if TYPE_CHECKING:
    from chirp import App

    from prowl.routes.host import Host

logger = logging.getLogger("prowl.routes")


class RouteLoader:
    """Discovers, binds, and hot-reloads the routes under one directory.

    Lifecycle::

        loader = RouteLoader(ChirpHost(app), Path("routes"), hot_reload=True)
        await loader.start()   # scan + load + bind (+ watch)
        ...
        await loader.stop()    # close the change subscription

    When the host compiles its routes before its event loop runs (chirp
    freezes on ``app.run()``), call ``load_all()`` and ``bind()`` during
    setup and ``watch()`` from a startup hook instead of ``start()``.

    Args:
        host: Server the routes are bound into.
        routes_dir: Directory scanned for route modules.
        hot_reload: Watch *routes_dir* and swap handlers on change.
        extensions: File suffixes that qualify as route sources.
        exclude_prefix: File-name prefix marking private helper modules.
        state: Application-owned object handlers read via
            ``prowl.context.get_state()``.
        collector: Diagnostics sink; a fresh one is created if omitted.
        debounce_ms: Watcher debounce window.

    """

    def __init__(
        self,
        host: Host,
        routes_dir: Path,
        *,
        hot_reload: bool = False,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        exclude_prefix: str = DEFAULT_EXCLUDE_PREFIX,
        state: object | None = None,
        collector: RouteCollector | None = None,
        debounce_ms: int = 300,
    ) -> None:
        self._routes_dir = Path(routes_dir).resolve()
        self._hot_reload = hot_reload
        self._extensions = extensions
        self._exclude_prefix = exclude_prefix
        self._debounce_ms = debounce_ms
        self.collector = collector if collector is not None else RouteCollector()
        self.registry = RouteRegistry()
        self._registrar = Registrar(
            host, self.registry, collector=self.collector, state=state,
        )
        self._watcher: RouteWatcher | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def routes_dir(self) -> Path:
        return self._routes_dir

    @property
    def hot_reload(self) -> bool:
        return self._hot_reload

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return self._registrar.bindings

    @property
    def is_watching(self) -> bool:
        return self._task is not None and not self._task.done()

    # -- Lifecycle --

    async def start(self) -> tuple[Binding, ...]:
        """Scan, load every route concurrently, bind, and start watching."""
        await self.load_all()
        bindings = self.bind()
        if self._hot_reload:
            self.watch()
        return bindings

    async def stop(self) -> None:
        """Close the change subscription and wait for the consumer to exit.

        In-flight requests are left alone.
        """
        if self._watcher is not None:
            self._watcher.stop()
        if self._task is not None:
            await self._task
            self._task = None
        self._watcher = None

    async def load_all(self) -> int:
        """Load every route file under the routes directory.

        Each file is compiled and executed in a worker thread; this returns
        once every attempt has finished, with the number of files that
        produced a descriptor.
        """
        files = scan(
            self._routes_dir,
            extensions=self._extensions,
            exclude_prefix=self._exclude_prefix,
        )
        results = await asyncio.gather(
            *(asyncio.to_thread(self._load, f, reload=False) for f in files)
        )
        return sum(1 for descriptor in results if descriptor is not None)

    def bind(self) -> tuple[Binding, ...]:
        """Bind the loaded routes into the host. Allowed once."""
        return self._registrar.bind_all()

    def watch(self) -> None:
        """Start consuming file changes on the running event loop."""
        if self.is_watching:
            return
        self._watcher = RouteWatcher(self._routes_dir, debounce_ms=self._debounce_ms)
        self._task = asyncio.get_running_loop().create_task(
            self._consume_changes(), name="prowl-watcher",
        )

    # -- Hot reload policy --

    async def apply_change(self, event: ChangeEvent) -> None:
        """Apply one filesystem change to the registry."""
        path = event.path
        if not self._qualifies(path):
            return

        if event.kind == "added":
            if self._registrar.has_bindings_for(path):
                # Delete-then-create saves re-add a file that is still bound
                self._reload(path)
                return
            self.collector.record_restart_required(path, self._url_for(path))
        elif event.kind == "changed":
            self._reload(path)
        elif event.kind == "removed":
            descriptor = self.registry.remove(path)
            if descriptor is not None:
                self.collector.record_removed(path, descriptor.url_path)

    async def _consume_changes(self) -> None:
        assert self._watcher is not None
        async for event in self._watcher.changes():
            try:
                await self.apply_change(event)
            except Exception:
                logger.exception("Failed to apply %s for %s", event.kind, event.path)

    def _reload(self, path: Path) -> None:
        descriptor = self._load(path, reload=True)
        if descriptor is None:
            return
        unbound = [
            m for m in descriptor.methods
            if not self._registrar.is_bound(m, descriptor.url_path)
        ]
        if unbound:
            self.collector.record_restart_required(
                path, descriptor.url_path, reason="unbound_method",
            )

    # -- Loading --

    def _load(self, path: Path, *, reload: bool) -> RouteDescriptor | None:
        """Load *path* into the registry; failures leave the registry untouched."""
        t0 = time.perf_counter()
        try:
            descriptor = load_route(path, self._routes_dir)
        except MissingHandlerError:
            self.collector.record_missing_handler(path, reload=reload)
            return None
        except RouteLoadError as exc:
            detail = str(exc.__cause__) if exc.__cause__ is not None else str(exc)
            self.collector.record_load_error(path, detail, reload=reload)
            return None
        load_ms = (time.perf_counter() - t0) * 1000

        self.registry.put(path, descriptor)
        record = self.collector.record_reloaded if reload else self.collector.record_loaded
        record(path, descriptor.url_path, descriptor.methods, load_ms=load_ms)
        return descriptor

    def _qualifies(self, path: Path) -> bool:
        if not path.is_relative_to(self._routes_dir):
            return False
        relative = path.relative_to(self._routes_dir)
        if any(part == "__pycache__" or part.startswith(".") for part in relative.parts[:-1]):
            return False
        return is_route_file(
            path, extensions=self._extensions, exclude_prefix=self._exclude_prefix,
        )

    def _url_for(self, path: Path) -> str:
        return translate(path.relative_to(self._routes_dir))


# ---------------------------------------------------------------------------
# Chirp integration
# ---------------------------------------------------------------------------


def create_app(
    config: ProwlConfig,
    *,
    state: object | None = None,
    collector: RouteCollector | None = None,
) -> tuple[App, RouteLoader]:
    """Create a chirp App and a RouteLoader bound to it (nothing loaded yet)."""
    from chirp import App, AppConfig

    from prowl.routes.host import ChirpHost

    # Pounce's own reloader restarts the process; prowl swaps handlers
    # in place instead, so chirp always runs without debug reload.
    app = App(
        config=AppConfig(
            template_dir=config.root,
            debug=False,
            host=config.host,
            port=config.port,
        )
    )
    loader = RouteLoader(
        ChirpHost(app),
        config.routes_path,
        hot_reload=config.hot_reload,
        extensions=config.extensions,
        exclude_prefix=config.exclude_prefix,
        state=state,
        collector=collector,
        debounce_ms=config.debounce_ms,
    )
    return app, loader


def _prepare(app: App, loader: RouteLoader) -> tuple[Binding, ...]:
    """Load and bind before chirp freezes; watch from the lifespan loop."""
    asyncio.run(loader.load_all())
    bindings = loader.bind()

    if loader.hot_reload:
        app.on_startup(loader.watch)
    app.on_shutdown(loader.stop)
    return bindings


def load_warnings(collector: RouteCollector) -> list[str]:
    """One ``path: detail`` line per failed load, oldest first."""
    failed = collector.log.stats()["by_type"].get(RouteLoadFailed.__name__, 0)
    if not failed:
        return []
    events = collector.log.query(event_type=RouteLoadFailed, limit=failed)
    return [f"{e.path}: {e.detail}" for e in reversed(events)]


def configure_logging(level: str) -> None:
    """Send ``prowl.*`` log records to stderr at *level*."""
    root = logging.getLogger("prowl")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("  %(levelname)-7s %(message)s"))
        root.addHandler(handler)


def _run(config: ProwlConfig, *, mode: str, state: object | None) -> None:
    from pounce.config import ServerConfig
    from pounce.server import Server

    from prowl.banner import print_banner

    configure_logging(config.log_level)
    t0 = time.perf_counter()

    app, loader = create_app(config, state=state)
    bindings = _prepare(app, loader)

    load_ms = (time.perf_counter() - t0) * 1000
    print_banner(
        config,
        mode=mode,
        loaded=len(loader.registry),
        bindings=bindings,
        load_ms=load_ms,
        warnings=load_warnings(loader.collector),
    )

    # A single worker keeps every request on the loop that applies reloads.
    workers = 1 if config.hot_reload else config.workers
    server_config = ServerConfig(host=config.host, port=config.port, workers=workers)
    Server(server_config, app).run()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", *, state: object | None = None, **kwargs: object) -> None:
    """Serve the routes directory with hot reload.

    Args:
        root: Project root containing ``routes/``.
        state: Object handlers read via ``prowl.context.get_state()``.
        **kwargs: Override ProwlConfig fields.

    """
    config = load_config(Path(root), **{"hot_reload": True, **kwargs})
    _run(config, mode="dev", state=state)


def serve(root: str | Path = ".", *, state: object | None = None, **kwargs: object) -> None:
    """Serve the routes directory in production; the route set is fixed.

    Args:
        root: Project root containing ``routes/``.
        state: Object handlers read via ``prowl.context.get_state()``.
        **kwargs: Override ProwlConfig fields.

    """
    config = load_config(Path(root), **{"hot_reload": False, **kwargs})
    _run(config, mode="serve", state=state)


def inspect_routes(root: str | Path = ".", **kwargs: object) -> RouteLoader:
    """Load and bind the routes under *root* without serving them.

    Returns the loader; its ``bindings`` and ``collector`` describe the result.
    """
    config = load_config(Path(root), **{**kwargs, "hot_reload": False})
    _app, loader = create_app(config)
    asyncio.run(loader.load_all())
    loader.bind()
    return loader
