"""Tests for prowl.routes.registrar — one-shot binding through dispatch stubs."""

from pathlib import Path

import pytest

from prowl._errors import RegistrationError
from prowl.context import get_state
from prowl.observability import BindingSkipped, RouteCollector
from prowl.routes.loader import RouteDescriptor
from prowl.routes.registrar import Binding, Registrar
from prowl.routes.registry import RouteRegistry

from .conftest import RecordingHost


def _put(
    registry: RouteRegistry,
    name: str,
    url_path: str,
    handler,
    methods: tuple[str, ...] = ("GET",),
    schema: object | None = None,
) -> RouteDescriptor:
    d = RouteDescriptor(
        file_path=Path(f"/routes/{name}"),
        url_path=url_path,
        methods=methods,
        handler=handler,
        schema=schema,
    )
    registry.put(d.file_path, d)
    return d


class TestBindAll:
    def test_binds_every_method(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        _put(registry, "items.py", "/items", lambda r: None, methods=("GET", "POST"))
        _put(registry, "users/[id].py", "/users/:id", lambda r: None)

        bindings = Registrar(host, registry).bind_all()

        assert set(host.routes) == {("GET", "/items"), ("POST", "/items"), ("GET", "/users/:id")}
        assert Binding("GET", "/users/:id", Path("/routes/users/[id].py")) in bindings
        assert len(bindings) == 3

    def test_schema_forwarded(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        schema = {"value": ["required"]}
        _put(registry, "set.py", "/set", lambda r: None, methods=("POST",), schema=schema)

        Registrar(host, registry).bind_all()
        assert host.schemas[("POST", "/set")] is schema

    def test_second_call_raises(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        registrar = Registrar(host, registry)
        registrar.bind_all()
        with pytest.raises(RegistrationError):
            registrar.bind_all()

    def test_empty_registry(self) -> None:
        host = RecordingHost()
        assert Registrar(host, RouteRegistry()).bind_all() == ()
        assert host.routes == {}

    def test_duplicate_pair_first_file_wins(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        collector = RouteCollector()
        _put(registry, "users/index.py", "/users", lambda r: "index")
        _put(registry, "users.py", "/users", lambda r: "flat")

        registrar = Registrar(host, registry, collector=collector)
        bindings = registrar.bind_all()

        # "users.py" sorts before "users/index.py"
        assert [b.file_path for b in bindings] == [Path("/routes/users.py")]
        (skipped,) = collector.log.query(event_type=BindingSkipped)
        assert skipped.path == str(Path("/routes/users/index.py"))
        assert skipped.bound_by == str(Path("/routes/users.py"))

    def test_is_bound_and_has_bindings_for(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        d = _put(registry, "a.py", "/a", lambda r: None)
        registrar = Registrar(host, registry)
        registrar.bind_all()

        assert registrar.is_bound("GET", "/a")
        assert not registrar.is_bound("POST", "/a")
        assert registrar.has_bindings_for(d.file_path)
        assert not registrar.has_bindings_for(Path("/routes/b.py"))


class TestDispatchStub:
    """The stub looks the handler up on every call."""

    @pytest.mark.asyncio
    async def test_calls_current_handler(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        _put(registry, "v.py", "/v", lambda r: 1)
        Registrar(host, registry).bind_all()
        stub = host.routes[("GET", "/v")]

        assert await stub(object()) == 1
        _put(registry, "v.py", "/v", lambda r: 2)
        assert await stub(object()) == 2

    @pytest.mark.asyncio
    async def test_awaits_async_handlers(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()

        async def handler(request):
            return {"ok": True}

        _put(registry, "a.py", "/a", handler)
        Registrar(host, registry).bind_all()
        assert await host.routes[("GET", "/a")](object()) == {"ok": True}

    @pytest.mark.asyncio
    async def test_removed_route_is_not_found(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        d = _put(registry, "gone.py", "/gone", lambda r: "here")
        Registrar(host, registry).bind_all()
        registry.remove(d.file_path)

        body, status = await host.routes[("GET", "/gone")](object())
        assert status == 404
        assert body == {"error": "Route not found"}

    @pytest.mark.asyncio
    async def test_passes_request_through(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        _put(registry, "echo.py", "/echo", lambda r: r)
        Registrar(host, registry).bind_all()
        request = object()
        assert await host.routes[("GET", "/echo")](request) is request

    @pytest.mark.asyncio
    async def test_state_visible_to_handler(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()
        state = {"users": ["alice"]}
        _put(registry, "s.py", "/s", lambda r: get_state())
        Registrar(host, registry, state=state).bind_all()

        assert await host.routes[("GET", "/s")](object()) is state
        with pytest.raises(LookupError):
            get_state()

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self) -> None:
        host, registry = RecordingHost(), RouteRegistry()

        def handler(request):
            raise ValueError("handler failed")

        _put(registry, "e.py", "/e", handler)
        Registrar(host, registry).bind_all()
        with pytest.raises(ValueError, match="handler failed"):
            await host.routes[("GET", "/e")](object())
