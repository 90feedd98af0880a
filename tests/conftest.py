"""Pytest fixtures for syncemit tests."""

import pytest

from syncemit.lib.events import EventEmitter


class Counter:
    """Callable that records every call it receives."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))

    @property
    def count(self):
        return len(self.calls)


@pytest.fixture
def emitter():
    """Create a fresh EventEmitter with the default listener limit."""
    return EventEmitter()


@pytest.fixture
def counters():
    """Create three independent counting listeners."""
    return Counter(), Counter(), Counter()
