"""Tests for prowl.routes.loader — route module loading."""

import sys
from pathlib import Path

import pytest

from prowl._errors import MissingHandlerError, RouteError, RouteLoadError
from prowl.routes.loader import RouteDescriptor, load_route

from .conftest import write_route


class TestRouteDescriptor:
    def test_frozen(self) -> None:
        descriptor = RouteDescriptor(
            file_path=Path("/r/users.py"),
            url_path="/users",
            methods=("GET",),
            handler=lambda request: None,
        )
        with pytest.raises(AttributeError):
            descriptor.url_path = "/other"  # type: ignore[misc]

    def test_schema_defaults_to_none(self) -> None:
        descriptor = RouteDescriptor(
            file_path=Path("/r/users.py"),
            url_path="/users",
            methods=("GET",),
            handler=lambda request: None,
        )
        assert descriptor.schema is None


class TestLoadRoute:
    def test_defaults(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "users/[id].py", "def handler(request):\n    return 1\n")
        descriptor = load_route(path, routes_dir)

        assert descriptor.file_path == path
        assert descriptor.url_path == "/users/:id"
        assert descriptor.methods == ("GET",)
        assert descriptor.handler(None) == 1
        assert descriptor.schema is None

    def test_method_and_schema(self, routes_dir: Path) -> None:
        path = write_route(
            routes_dir,
            "cache/set/[key].py",
            "method = 'post'\n"
            "schema = {'value': ['required']}\n"
            "async def handler(request):\n"
            "    return {}\n",
        )
        descriptor = load_route(path, routes_dir)
        assert descriptor.methods == ("POST",)
        assert descriptor.schema == {"value": ["required"]}

    def test_method_list_deduplicated(self, routes_dir: Path) -> None:
        path = write_route(
            routes_dir,
            "items.py",
            "method = ['get', 'POST', 'GET']\n"
            "def handler(request):\n"
            "    return None\n",
        )
        assert load_route(path, routes_dir).methods == ("GET", "POST")

    @pytest.mark.parametrize("value", ["42", "['GET', 3]", "'GET /x'", "[]"])
    def test_invalid_method(self, routes_dir: Path, value: str) -> None:
        path = write_route(
            routes_dir, "bad.py", f"method = {value}\ndef handler(request):\n    return None\n",
        )
        with pytest.raises(RouteLoadError):
            load_route(path, routes_dir)

    def test_missing_handler(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "empty.py", "method = 'GET'\n")
        with pytest.raises(MissingHandlerError) as info:
            load_route(path, routes_dir)
        assert info.value.path == path
        assert "missing handler" in str(info.value)

    def test_handler_not_callable(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "value.py", "handler = 'nope'\n")
        with pytest.raises(MissingHandlerError):
            load_route(path, routes_dir)

    def test_syntax_error(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "broken.py", "def handler(request)\n")
        with pytest.raises(RouteLoadError) as info:
            load_route(path, routes_dir)
        assert isinstance(info.value.__cause__, SyntaxError)

    def test_module_raises(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "boom.py", "raise RuntimeError('boom')\n")
        with pytest.raises(RouteLoadError) as info:
            load_route(path, routes_dir)
        assert isinstance(info.value.__cause__, RuntimeError)

    def test_system_exit_is_a_load_error(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "quit.py", "raise SystemExit(0)\n")
        with pytest.raises(RouteLoadError) as info:
            load_route(path, routes_dir)
        assert isinstance(info.value.__cause__, SystemExit)

    def test_errors_share_base(self) -> None:
        assert issubclass(MissingHandlerError, RouteError)
        assert issubclass(RouteLoadError, RouteError)


class TestFreshLoad:
    """Every load sees the file's current contents."""

    def test_reload_sees_new_code(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "v.py", "def handler(request):\n    return 1\n")
        first = load_route(path, routes_dir)

        path.write_text("def handler(request):\n    return 2\n")
        second = load_route(path, routes_dir)

        assert first.handler(None) == 1
        assert second.handler(None) == 2

    def test_reload_sees_new_method(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "m.py", "def handler(request):\n    return 1\n")
        assert load_route(path, routes_dir).methods == ("GET",)

        path.write_text("method = 'PUT'\ndef handler(request):\n    return 1\n")
        assert load_route(path, routes_dir).methods == ("PUT",)

    def test_module_state_is_reset(self, routes_dir: Path) -> None:
        path = write_route(
            routes_dir,
            "counter.py",
            "hits = []\n"
            "def handler(request):\n"
            "    hits.append(1)\n"
            "    return len(hits)\n",
        )
        first = load_route(path, routes_dir)
        first.handler(None)
        first.handler(None)

        second = load_route(path, routes_dir)
        assert second.handler(None) == 1

    def test_previous_module_released(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "rel.py", "def handler(request):\n    return 1\n")
        first = load_route(path, routes_dir)
        first_name = first.handler.__module__
        assert first_name in sys.modules

        second = load_route(path, routes_dir)
        assert first_name not in sys.modules
        assert second.handler.__module__ in sys.modules

    def test_failed_load_keeps_previous_module(self, routes_dir: Path) -> None:
        path = write_route(routes_dir, "keep.py", "def handler(request):\n    return 1\n")
        first = load_route(path, routes_dir)

        path.write_text("raise ValueError('bad edit')\n")
        with pytest.raises(RouteLoadError):
            load_route(path, routes_dir)
        assert first.handler.__module__ in sys.modules


class TestPrivateHelpers:
    """Route modules can import the private modules beside them."""

    def test_relative_import_of_sibling(self, routes_dir: Path) -> None:
        write_route(routes_dir, "users/_db.py", "USERS = ['alice', 'bob']\n")
        path = write_route(
            routes_dir,
            "users/index.py",
            "from ._db import USERS\n"
            "def handler(request):\n"
            "    return USERS\n",
        )
        assert load_route(path, routes_dir).handler(None) == ["alice", "bob"]

    def test_relative_import_from_parent(self, routes_dir: Path) -> None:
        write_route(routes_dir, "_shared.py", "PREFIX = 'cache:'\n")
        path = write_route(
            routes_dir,
            "cache/[key].py",
            "from .._shared import PREFIX\n"
            "def handler(request):\n"
            "    return PREFIX\n",
        )
        assert load_route(path, routes_dir).handler(None) == "cache:"

    def test_helpers_scoped_per_routes_dir(self, tmp_path: Path) -> None:
        results = []
        for name in ("one", "two"):
            routes = tmp_path / name / "routes"
            write_route(routes, "_value.py", f"VALUE = {name!r}\n")
            path = write_route(
                routes,
                "index.py",
                "from ._value import VALUE\n"
                "def handler(request):\n"
                "    return VALUE\n",
            )
            results.append(load_route(path, routes.resolve()).handler(None))
        assert results == ["one", "two"]

    def test_reload_still_imports_helper(self, routes_dir: Path) -> None:
        write_route(routes_dir, "_db.py", "USERS = ['alice']\n")
        path = write_route(
            routes_dir,
            "users.py",
            "from ._db import USERS\n"
            "def handler(request):\n"
            "    return len(USERS)\n",
        )
        load_route(path, routes_dir)
        path.write_text(
            "from ._db import USERS\n"
            "def handler(request):\n"
            "    return len(USERS) + 1\n",
        )
        assert load_route(path, routes_dir).handler(None) == 2
