"""Pytest configuration for all tests."""

from typing import Generator

import pytest

from oncehook.core.config import get_settings
from oncehook.core.once import OnceContext, reset_default_context


@pytest.fixture(autouse=True)
def _isolated_default_context() -> Generator[None, None, None]:
    """Give every test a fresh default context and settings cache."""
    get_settings.cache_clear()
    reset_default_context()
    yield
    reset_default_context()
    get_settings.cache_clear()


@pytest.fixture
def context() -> Generator[OnceContext, None, None]:
    """Provide an isolated OnceContext without an import watcher."""
    ctx = OnceContext()
    yield ctx
    ctx.close()


class Recorder:
    """Callable that records the arguments of every call."""

    def __init__(self, result: object = None) -> None:
        self.calls: list[tuple[tuple, dict]] = []
        self.result = result

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.result

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_recorder() -> type[Recorder]:
    """Provide the Recorder class for tests needing several callbacks."""
    return Recorder
