"""Tests for the top-level prowl package."""

import pytest

import prowl


class TestPublicApi:
    def test_version(self) -> None:
        assert prowl.__version__ == "0.1.0"

    def test_lazy_exports(self) -> None:
        from prowl.app import RouteLoader, dev, serve
        from prowl.config import ProwlConfig
        from prowl.context import get_state

        assert prowl.ProwlConfig is ProwlConfig
        assert prowl.RouteLoader is RouteLoader
        assert prowl.get_state is get_state
        assert prowl.dev is dev
        assert prowl.serve is serve

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError):
            prowl.nonexistent  # noqa: B018

    def test_all_resolves(self) -> None:
        for name in prowl.__all__:
            assert getattr(prowl, name) is not None
