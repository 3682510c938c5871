# causelog/traceback.py
"""
Logging of unexpected exceptions.

Frame extraction is delegated to the standard-library ``traceback`` module.
"""
from __future__ import annotations

import sys
import traceback as _traceback
from typing import Any, Optional

from causelog.core.message import EXCEPTION_FIELD, REASON_FIELD, TRACEBACK_FIELD
from causelog.validation.fields import BoundField
from causelog.validation.types import MessageType

TRACEBACK_MESSAGE = MessageType(
    "causelog:traceback",
    [
        BoundField.create(REASON_FIELD, str, "The exception value."),
        BoundField.create(TRACEBACK_FIELD, lambda x: x, "The traceback."),
        BoundField.create(EXCEPTION_FIELD, lambda x: x, "The exception type name."),
    ],
    "An unexpected exception indicating a bug.",
)
# Exception extraction can add more fields than the schema lists.
TRACEBACK_MESSAGE._serializer.allow_additional_fields = True


def format_frames(error: BaseException) -> str:
    """The traceback of ``error`` as newline-joined frame descriptions."""
    frames = _traceback.format_exception(type(error), error, error.__traceback__)
    return "".join(frames).rstrip("\n")


def write_traceback(error: Optional[BaseException] = None, logger: Optional[Any] = None) -> None:
    """
    Write a traceback message for ``error`` to ``logger``.

    Without an explicit error the exception currently being handled is used.
    The raw exception is stored in the ``reason`` field until serialization.
    """
    if error is None:
        error = sys.exc_info()[1]
        if error is None:
            raise ValueError("write_traceback() called without an exception being handled")
    msg = TRACEBACK_MESSAGE(
        reason=error,
        traceback=format_frames(error),
        exception=type(error).__name__,
    )
    msg.write(logger)
