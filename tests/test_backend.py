"""Tests for mailrepl.backend -- loading a backend from a module:factory target."""

from __future__ import annotations

import sys
import types

import pytest

from mailrepl.backend import BackendError, load_backend


class Backend:
    def list_folders(self) -> list[str]:
        return ["INBOX"]


@pytest.fixture
def backend_module(monkeypatch: pytest.MonkeyPatch) -> types.ModuleType:
    module = types.ModuleType("mailrepl_test_backend")
    module.build = Backend
    module.not_callable = "nope"
    monkeypatch.setitem(sys.modules, module.__name__, module)
    return module


class TestLoadBackend:
    """Targets are resolved with importlib and the factory is called."""

    def test_builds_backend(self, backend_module: types.ModuleType) -> None:
        backend = load_backend("mailrepl_test_backend:build")
        assert isinstance(backend, Backend)
        assert backend.list_folders() == ["INBOX"]

    @pytest.mark.parametrize("target", ["mailrepl_test_backend", ":build", "module:", ""])
    def test_malformed_target(self, target: str) -> None:
        with pytest.raises(BackendError, match="invalid backend target"):
            load_backend(target)

    def test_missing_module(self) -> None:
        with pytest.raises(BackendError, match="cannot import backend module"):
            load_backend("mailrepl_no_such_backend:build")

    def test_missing_factory(self, backend_module: types.ModuleType) -> None:
        with pytest.raises(BackendError, match="has no factory 'missing'"):
            load_backend("mailrepl_test_backend:missing")

    def test_factory_not_callable(self, backend_module: types.ModuleType) -> None:
        with pytest.raises(BackendError, match="has no factory"):
            load_backend("mailrepl_test_backend:not_callable")
