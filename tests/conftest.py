# tests/conftest.py
import pytest

from causelog.core.context import use_context
from causelog.output.destinations import use_destinations
from causelog.output.memory import MemoryLogger


@pytest.fixture(autouse=True)
def isolated_globals():
    """Give every test its own execution context and destination registry."""
    with use_context() as context, use_destinations() as destinations:
        yield context, destinations


@pytest.fixture
def memory_logger():
    return MemoryLogger()


@pytest.fixture
def destinations(isolated_globals):
    return isolated_globals[1]


@pytest.fixture
def sent(destinations):
    """Messages reaching the global destinations during the test."""
    messages = []
    destinations.add(messages.append)
    return messages


class BadDestination:
    """A destination that raises on its first call only."""

    def __init__(self):
        self.first = True
        self.received = []

    def __call__(self, message):
        if self.first:
            self.first = False
            raise RuntimeError("Nope")
        self.received.append(message)


@pytest.fixture
def bad_destination():
    return BadDestination()
