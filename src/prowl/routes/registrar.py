"""Registrar — bind loaded routes into the host exactly once.

Each distinct ``(method, url_path)`` pair gets one dispatch stub.  The stub
holds only the source file path; at request time it looks the descriptor
up in the registry and calls whatever handler is stored there.  That
indirection is what makes hot reload visible without re-binding, and it
is also why a deleted file answers "not found" instead of disappearing
from the host.

Bindings are never removed.  When two files resolve to the same pair the
file that sorts first wins and the other is skipped without error.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from prowl._errors import RegistrationError
from prowl.context import state_var
from prowl.observability.collector import RouteCollector

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from prowl.routes.host import Host
    from prowl.routes.registry import RouteRegistry


@dataclass(frozen=True, slots=True)
class Binding:
    """One ``(method, url_path)`` pair bound into the host.

    Attributes:
        method: HTTP method.
        url_path: URL path in ``:name`` form.
        file_path: Route source file whose descriptor the stub dispatches to.

    """

    method: str
    url_path: str
    file_path: Path


class Registrar:
    """Binds registry entries into a host through dispatch stubs.

    Args:
        host: The server to bind into.
        registry: Registry the stubs read at request time.
        collector: Diagnostics sink.
        state: Application state exposed to handlers via
            ``prowl.context.get_state()``.

    """

    __slots__ = (
        "_bindings",
        "_bound",
        "_bound_files",
        "_collector",
        "_host",
        "_registry",
        "_state",
    )

    def __init__(
        self,
        host: Host,
        registry: RouteRegistry,
        *,
        collector: RouteCollector | None = None,
        state: object | None = None,
    ) -> None:
        self._host = host
        self._registry = registry
        self._collector = collector if collector is not None else RouteCollector()
        self._state = state
        self._bound: dict[tuple[str, str], Path] = {}
        self._bound_files: set[Path] = set()
        self._bindings: list[Binding] | None = None

    @property
    def bindings(self) -> tuple[Binding, ...]:
        """Every binding made, in registration order."""
        return tuple(self._bindings or ())

    def is_bound(self, method: str, url_path: str) -> bool:
        return (method, url_path) in self._bound

    def has_bindings_for(self, file_path: Path) -> bool:
        """True if any binding dispatches to *file_path*."""
        return file_path in self._bound_files

    def bind_all(self) -> tuple[Binding, ...]:
        """Bind every registry entry into the host.

        Raises:
            RegistrationError: If called more than once.

        """
        if self._bindings is not None:
            msg = "Routes are already bound; the host cannot re-bind at runtime."
            raise RegistrationError(msg)
        self._bindings = []

        for descriptor in sorted(self._registry, key=lambda d: str(d.file_path)):
            for method in descriptor.methods:
                key = (method, descriptor.url_path)
                owner = self._bound.get(key)
                if owner is not None:
                    self._collector.record_binding_skipped(
                        descriptor.file_path,
                        method,
                        descriptor.url_path,
                        bound_by=owner,
                    )
                    continue

                self._host.route(
                    method,
                    descriptor.url_path,
                    descriptor.schema,
                    self._make_stub(descriptor.file_path, descriptor.url_path),
                )
                self._bound[key] = descriptor.file_path
                self._bound_files.add(descriptor.file_path)
                self._bindings.append(
                    Binding(method=method, url_path=descriptor.url_path,
                            file_path=descriptor.file_path)
                )

        return tuple(self._bindings)

    def _make_stub(self, file_path: Path, url_path: str) -> Callable[..., Any]:
        registry = self._registry
        host = self._host
        state = self._state

        # No annotations: chirp resolves handler signatures to inject
        # arguments, and ``request`` is matched by name.
        async def dispatch(request):  # noqa: ANN001, ANN202
            descriptor = registry.get(file_path)
            if descriptor is None:
                return host.not_found(url_path)

            token = state_var.set(state)
            try:
                result = descriptor.handler(request)
                if inspect.isawaitable(result):
                    result = await result
            finally:
                state_var.reset(token)
            return result

        dispatch.__name__ = f"dispatch_{url_path.strip('/').replace('/', '_') or 'index'}"
        dispatch.__qualname__ = dispatch.__name__
        return dispatch
