"""Unit tests for one-shot after-load registration.

Registrations made before a module loads are deduplicated; calls made
after it loaded run the callback immediately, every time.
"""

import importlib
import sys
import uuid

import pytest

from oncehook import (
    add_hook_once_stacking,
    after_load_once,
    after_load_once_stacking,
    get_default_context,
)
from oncehook.core.config import get_settings
from oncehook.core.once import OnceContext


class TestAfterLoadOnce:
    """Tests for the deduplicating form."""

    def test_three_calls_before_load_fire_once(self, context, recorder) -> None:
        """Test that repeated pre-load calls share one wrapper."""
        ids = {after_load_once("mymodule", recorder, context=context) for _ in range(3)}

        assert len(ids) == 1
        assert len(context.loads.pending("mymodule")) == 1
        assert recorder.count == 0

        context.loads.provide("mymodule")

        assert recorder.count == 1
        assert recorder.calls == [((), {})]

    def test_already_loaded_runs_immediately_every_call(self, context, recorder) -> None:
        """Test that post-load calls are not deduplicated."""
        context.loads.provide("mymodule")

        results = [after_load_once("mymodule", recorder, context=context) for _ in range(3)]

        assert results == [None, None, None]
        assert recorder.count == 3
        assert context.loads.pending("mymodule") == []
        assert context.wrapper_ids == []

    def test_imported_module_counts_as_loaded(self, context, recorder) -> None:
        assert after_load_once("json", recorder, context=context) is None
        assert recorder.count == 1

    def test_wrapper_is_disabled_after_firing(self, context, recorder) -> None:
        wrapper_id = after_load_once("mymodule", recorder, context=context)
        wrapper = context.get_wrapper(wrapper_id)

        context.loads.provide("mymodule")
        wrapper()

        assert recorder.count == 1
        assert wrapper.fired
        assert wrapper_id in context.wrapper_ids

    def test_rearmed_after_module_is_forgotten(self, context, recorder) -> None:
        first = after_load_once("mymodule", recorder, context=context)
        context.loads.provide("mymodule")
        context.loads.forget("mymodule")

        second = after_load_once("mymodule", recorder, context=context)
        context.loads.provide("mymodule")

        assert first == second
        assert recorder.count == 2

    def test_different_callbacks_each_fire(self, context, make_recorder) -> None:
        a, b = make_recorder(), make_recorder()

        assert after_load_once("mymodule", a, context=context) != after_load_once(
            "mymodule", b, context=context
        )
        context.loads.provide("mymodule")

        assert (a.count, b.count) == (1, 1)

    def test_callback_exception_propagates_on_load(self, context) -> None:
        def failing():
            raise RuntimeError("setup failed")

        after_load_once("mymodule", failing, context=context)

        with pytest.raises(RuntimeError, match="setup failed"):
            context.loads.provide("mymodule")

    def test_callback_exception_propagates_when_loaded(self, context) -> None:
        def failing():
            raise RuntimeError("setup failed")

        with pytest.raises(RuntimeError, match="setup failed"):
            after_load_once("sys", failing, context=context)

    def test_fires_on_real_import(self, tmp_path, monkeypatch, recorder) -> None:
        """Test the whole path through the import watcher."""
        name = f"oncehook_sample_{uuid.uuid4().hex[:8]}"
        (tmp_path / f"{name}.py").write_text("VALUE = 1\n")
        monkeypatch.syspath_prepend(str(tmp_path))

        context = OnceContext(watch_imports=True)
        try:
            after_load_once(name, recorder, context=context)
            after_load_once(name, recorder, context=context)
            importlib.import_module(name)
        finally:
            context.close()
            sys.modules.pop(name, None)

        assert recorder.count == 1

    def test_module_registering_itself_runs_after_its_body(self, tmp_path, monkeypatch) -> None:
        """Test that a callback queued from a module's own body sees the finished module."""
        monkeypatch.setenv("ONCEHOOK_WATCH_IMPORTS", "true")
        get_settings.cache_clear()
        name = f"oncehook_sample_{uuid.uuid4().hex[:8]}"
        (tmp_path / f"{name}.py").write_text(
            "import sys\n"
            "from oncehook import after_load_once\n"
            "\n"
            "SEEN = []\n"
            "after_load_once(__name__, lambda: SEEN.append(hasattr(sys.modules[__name__], 'READY')))\n"
            "READY = True\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        get_default_context()
        try:
            module = importlib.import_module(name)
        finally:
            sys.modules.pop(name, None)

        assert module.SEEN == [True]


class TestAfterLoadOnceStacking:
    """Tests for the stacking form."""

    def test_each_call_fires_at_load(self, context, recorder) -> None:
        ids = [after_load_once_stacking("mymodule", recorder, context=context) for _ in range(3)]

        assert len(set(ids)) == 3
        assert len(context.loads.pending("mymodule")) == 3

        context.loads.provide("mymodule")

        assert recorder.count == 3
        assert context.wrapper_ids == []

    def test_already_loaded_runs_immediately(self, context, recorder) -> None:
        context.loads.provide("mymodule")

        assert after_load_once_stacking("mymodule", recorder, context=context) is None
        assert recorder.count == 1
        assert context.wrapper_ids == []

    def test_shares_counter_with_hook_stacking(self, context, recorder) -> None:
        hook_id = add_hook_once_stacking("myevent", recorder, context=context)
        load_id = after_load_once_stacking("mymodule", recorder, context=context)

        assert (hook_id, load_id) == ("once#1", "once#2")
