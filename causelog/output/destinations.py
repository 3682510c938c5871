# causelog/output/destinations.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

Destination = Callable[[Dict[str, Any]], Any]


class DestinationsSendError(RuntimeError):
    """
    One or more destinations raised while a message was being sent.

    Raised once per ``Destinations.send`` call, after every destination has
    been tried; ``errors`` holds the individual exceptions in order.
    """

    def __init__(self, errors: List[BaseException]):
        super().__init__(f"{len(errors)} destination(s) failed")
        self.errors = list(errors)

    def __str__(self) -> str:
        lines = [f"{type(e).__name__}: {e}" for e in self.errors]
        return f"{len(self.errors)} errors:\n" + "\n".join(lines)


class Destinations:
    """
    Manage a list of destinations for message dictionaries.

    The global instance is where ``Logger`` instances send written messages.
    A destination should never raise, and must not mutate the message it is
    given, but a raising destination never prevents delivery to the others.
    """

    def __init__(self) -> None:
        self._destinations: List[Destination] = []
        self._global_fields: Dict[str, Any] = {}

    def add_global_fields(self, fields: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
        """Fields merged into every message sent from now on."""
        self._global_fields.update(fields or {})
        self._global_fields.update(kwargs)

    @property
    def global_fields(self) -> Dict[str, Any]:
        return dict(self._global_fields)

    def send(self, message: Dict[str, Any]) -> None:
        message = {**message, **self._global_fields}
        errors: List[BaseException] = []
        for destination in list(self._destinations):
            try:
                destination(message)
            except Exception as exc:
                errors.append(exc)
        if errors:
            raise DestinationsSendError(errors)

    def add(self, destination: Destination) -> Callable[[], None]:
        """Add a destination; returns a function that removes it again."""
        self._destinations.append(destination)
        logger.debug("Added destination %r (%d total)", destination, len(self._destinations))
        return lambda: self.remove(destination)

    def remove(self, destination: Destination) -> None:
        try:
            self._destinations.remove(destination)
        except ValueError:
            raise ValueError("Unknown destination") from None
        logger.debug("Removed destination %r (%d left)", destination, len(self._destinations))

    def __len__(self) -> int:
        return len(self._destinations)


_destinations = Destinations()


def get_destinations() -> Destinations:
    return _destinations


def add_destination(destination: Destination) -> Callable[[], None]:
    """Add a destination to the global registry."""
    return _destinations.add(destination)


def add_global_fields(fields: Optional[Dict[str, Any]] = None, **kwargs: Any) -> None:
    _destinations.add_global_fields(fields, **kwargs)


@contextmanager
def use_destinations(destinations: Optional[Destinations] = None) -> Iterator[Destinations]:
    """Temporarily install ``destinations`` (fresh by default) as the global registry."""
    global _destinations
    previous = _destinations
    _destinations = destinations if destinations is not None else Destinations()
    try:
        yield _destinations
    finally:
        _destinations = previous
