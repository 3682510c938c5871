# causelog/output/logger.py
"""
The boundary through which frozen messages leave the core.

``Logger.write`` never raises into the caller because of logging problems:
serialization failures become a traceback plus a raw fallback message, and
destination failures are reported back through the same destinations.
"""
from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Protocol

from causelog.core.message import (
    EXCEPTION_FIELD,
    MESSAGE_TYPE_FIELD,
    REASON_FIELD,
    Message,
)
from causelog.output.destinations import Destinations, DestinationsSendError, get_destinations
from causelog.traceback import write_traceback

if TYPE_CHECKING:
    from causelog.validation.serializer import MessageSerializer

log = logging.getLogger(__name__)

SERIALIZATION_FAILURE = "causelog:serialization_failure"
DESTINATION_FAILURE = "causelog:destination_failure"


class MessageWriter(Protocol):
    """Anything messages and actions can be written to."""

    def write(self, dictionary: Dict[str, Any],
              serializer: Optional["MessageSerializer"] = None) -> None:
        ...


def to_json(dictionary: Dict[str, Any]) -> str:
    """
    Render ``dictionary`` as JSON for diagnostic messages.

    Values JSON cannot encode fall back to ``repr``; a dictionary that cannot
    be encoded at all (non-string keys, circular references) is rendered with
    ``repr`` as a whole.
    """
    try:
        return json.dumps(dictionary, default=repr)
    except (TypeError, ValueError):
        return repr(dictionary)


class Logger:
    """Write out messages to the globally configured destination(s)."""

    def __init__(self, destinations: Optional[Destinations] = None) -> None:
        self._destinations = destinations
        # Failures that happened while reporting a destination failure.
        self.dropped_failures = 0

    @property
    def destinations(self) -> Destinations:
        return self._destinations if self._destinations is not None else get_destinations()

    def write(self, dictionary: Dict[str, Any],
              serializer: Optional["MessageSerializer"] = None) -> None:
        dictionary = dict(dictionary)
        try:
            if serializer is not None:
                serializer.serialize(dictionary)
        except Exception as exc:
            log.warning("Serialization of %s failed: %s", dictionary.get(MESSAGE_TYPE_FIELD), exc)
            write_traceback(exc, self)
            Message({MESSAGE_TYPE_FIELD: SERIALIZATION_FAILURE,
                     "message": to_json(dictionary)}).write(self)
            return

        destinations = self.destinations
        try:
            destinations.send(dictionary)
        except DestinationsSendError as exc:
            for error in exc.errors:
                log.warning("Destination failed with %s: %s", type(error).__name__, error)
                try:
                    msg = Message({
                        MESSAGE_TYPE_FIELD: DESTINATION_FAILURE,
                        REASON_FIELD: str(error),
                        EXCEPTION_FIELD: type(error).__name__,
                        "message": to_json(dictionary),
                    })
                    destinations.send(msg._freeze())
                except Exception:
                    # Never propagate into the caller.
                    self.dropped_failures += 1
                    log.exception("Exception while reporting a destination failure")


_DEFAULT_LOGGER: MessageWriter = Logger()


def get_default_logger() -> MessageWriter:
    return _DEFAULT_LOGGER


@contextmanager
def use_logger(logger: MessageWriter) -> Iterator[MessageWriter]:
    """Temporarily replace the default logger, e.g. with a ``MemoryLogger``."""
    global _DEFAULT_LOGGER
    previous = _DEFAULT_LOGGER
    _DEFAULT_LOGGER = logger
    try:
        yield logger
    finally:
        _DEFAULT_LOGGER = previous
