"""Unit tests for the load registry."""

import sys
import threading
import time
import types
from importlib.machinery import ModuleSpec

import pytest

from oncehook.core.exceptions import InvalidModuleNameError
from oncehook.core.loading import LoadRegistry


class TestIsLoaded:
    def test_unknown_module_is_not_loaded(self) -> None:
        assert LoadRegistry().is_loaded("oncehook_not_a_module") is False

    def test_sys_modules_count_as_loaded(self) -> None:
        """Test that imported modules are loaded when tracking sys.modules."""
        assert LoadRegistry().is_loaded("sys") is True
        assert LoadRegistry(track_sys_modules=False).is_loaded("sys") is False

    def test_provided_module_is_loaded_until_forgotten(self) -> None:
        loads = LoadRegistry(track_sys_modules=False)

        loads.provide("mymodule")
        assert loads.is_loaded("mymodule") is True

        loads.forget("mymodule")
        assert loads.is_loaded("mymodule") is False

    def test_initializing_module_is_not_loaded(self, monkeypatch) -> None:
        """Test that a module still executing its body is not loaded yet."""
        module = types.ModuleType("half_built")
        module.__spec__ = ModuleSpec("half_built", None)
        module.__spec__._initializing = True
        monkeypatch.setitem(sys.modules, "half_built", module)
        loads = LoadRegistry()

        assert loads.is_loaded("half_built") is False

        module.__spec__._initializing = False
        assert loads.is_loaded("half_built") is True

    @pytest.mark.parametrize("name", ["", None, 3.5])
    def test_invalid_module_name_raises(self, name) -> None:
        with pytest.raises(InvalidModuleNameError):
            LoadRegistry().is_loaded(name)


class TestRunAfterLoad:
    """Tests for run_after_load() and provide()."""

    def test_runs_immediately_when_loaded(self, recorder) -> None:
        loads = LoadRegistry()

        loads.run_after_load("sys", recorder)

        assert recorder.count == 1
        assert loads.pending("sys") == []

    def test_queued_until_provided(self, recorder) -> None:
        loads = LoadRegistry()

        loads.run_after_load("mymodule", recorder)
        assert recorder.count == 0
        assert loads.pending("mymodule") == [recorder]
        assert "mymodule" in loads.watched_modules()

        loads.provide("mymodule")
        assert recorder.count == 1
        assert loads.pending("mymodule") == []
        assert "mymodule" not in loads.watched_modules()

    def test_same_callable_is_queued_once(self, recorder) -> None:
        """Test that the same callable registered twice runs once."""
        loads = LoadRegistry()

        loads.run_after_load("mymodule", recorder)
        loads.run_after_load("mymodule", recorder)
        loads.provide("mymodule")

        assert recorder.count == 1

    def test_callbacks_run_in_registration_order(self) -> None:
        loads = LoadRegistry()
        order = []

        loads.run_after_load("mymodule", lambda: order.append(1))
        loads.run_after_load("mymodule", lambda: order.append(2))
        loads.provide("mymodule")

        assert order == [1, 2]

    def test_provide_twice_runs_callbacks_once(self, recorder) -> None:
        loads = LoadRegistry()

        loads.run_after_load("mymodule", recorder)
        loads.provide("mymodule")
        loads.provide("mymodule")

        assert recorder.count == 1

    def test_cancel_removes_queued_callback(self, recorder) -> None:
        loads = LoadRegistry()
        loads.run_after_load("mymodule", recorder)

        assert loads.cancel("mymodule", recorder) is True
        assert loads.cancel("mymodule", recorder) is False

        loads.provide("mymodule")
        assert recorder.count == 0

    def test_callback_error_propagates(self) -> None:
        loads = LoadRegistry()

        def failing():
            raise RuntimeError("setup failed")

        loads.run_after_load("mymodule", failing)

        with pytest.raises(RuntimeError, match="setup failed"):
            loads.provide("mymodule")

        assert loads.is_loaded("mymodule") is True

    def test_provide_during_registration_still_runs_callback(self, monkeypatch, recorder) -> None:
        """Test that provide() racing run_after_load() cannot lose the callback."""
        loads = LoadRegistry(track_sys_modules=False)
        checking = threading.Event()
        real_is_loaded = loads.is_loaded

        def slow_is_loaded(module_name):
            result = real_is_loaded(module_name)
            checking.set()
            time.sleep(0.05)
            return result

        monkeypatch.setattr(loads, "is_loaded", slow_is_loaded)

        registering = threading.Thread(target=loads.run_after_load, args=("mymodule", recorder))
        registering.start()
        checking.wait(timeout=1)
        loads.provide("mymodule")
        registering.join()

        assert recorder.count == 1
