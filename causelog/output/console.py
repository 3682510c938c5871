# causelog/output/console.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

CONSOLE_LOGGER_NAME = "causelog.messages"


def _noop(message: Dict[str, Any]) -> None:
    return None


def to_console(console: Optional[Any] = None) -> Callable[[Dict[str, Any]], None]:
    """
    A destination writing messages to something console-like.

    ``console`` is any object with an ``info`` or ``log`` method; the
    standard-library logger ``causelog.messages`` is used by default. If
    neither method exists the destination does nothing.
    """
    if console is None:
        console = logging.getLogger(CONSOLE_LOGGER_NAME)
    method = getattr(console, "info", None) or getattr(console, "log", None) or _noop

    def destination(message: Dict[str, Any]) -> None:
        method(message)

    return destination
