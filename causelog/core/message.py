# causelog/core/message.py
from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from causelog.core.context import current_action

if TYPE_CHECKING:
    from causelog.core.action import Action
    from causelog.validation.serializer import MessageSerializer

MESSAGE_TYPE_FIELD = "message_type"
TASK_UUID_FIELD = "task_uuid"
TASK_LEVEL_FIELD = "task_level"
TIMESTAMP_FIELD = "timestamp"
EXCEPTION_FIELD = "exception"
REASON_FIELD = "reason"
TRACEBACK_FIELD = "traceback"

MessageDict = Dict[str, Any]


class Message:
    """
    A log message.

    Messages are basically dictionaries mapping "fields" to "values". Field
    names should not start with ``_``, as those are reserved for system use.
    A message is never mutated once created: ``bind`` returns a new one and
    every write freezes a fresh dictionary.
    """

    _time: Callable[[], float] = staticmethod(time.time)

    def __init__(self, fields: Optional[MessageDict] = None,
                 serializer: Optional["MessageSerializer"] = None) -> None:
        self._fields: MessageDict = dict(fields or {})
        self._serializer = serializer

    @classmethod
    def create(cls, fields: Optional[MessageDict] = None,
               serializer: Optional["MessageSerializer"] = None, **kwargs: Any) -> "Message":
        return cls({**(fields or {}), **kwargs}, serializer)

    @classmethod
    def log(cls, fields: Optional[MessageDict] = None, **kwargs: Any) -> None:
        """Write a new message to the default logger."""
        cls.create(fields, **kwargs).write()

    def bind(self, fields: Optional[MessageDict] = None, **kwargs: Any) -> "Message":
        """Return a new message with this message's contents plus ``fields``."""
        return Message({**self._fields, **(fields or {}), **kwargs}, self._serializer)

    def contents(self) -> MessageDict:
        return dict(self._fields)

    def _timestamp(self) -> float:
        return self._time()

    def _freeze(self, action: Optional["Action"] = None) -> MessageDict:
        """
        Freeze this message for logging, registering it with ``action``.

        Without an explicit action the current one is used. With no action at
        all the message becomes the only message of a brand new task.
        """
        if action is None:
            action = current_action()
        if action is None:
            task_uuid, task_level = str(uuid.uuid4()), [1]
        else:
            task_uuid = action.task_uuid
            task_level = action._next_task_level().as_list()
        frozen = dict(self._fields)
        frozen[TIMESTAMP_FIELD] = self._timestamp()
        frozen[TASK_UUID_FIELD] = task_uuid
        frozen[TASK_LEVEL_FIELD] = task_level
        return frozen

    def write(self, logger: Optional[Any] = None, action: Optional["Action"] = None) -> None:
        """Write the message to ``logger``, or the default logger."""
        if logger is None:
            from causelog.output.logger import get_default_logger
            logger = get_default_logger()
        logger.write(self._freeze(action), self._serializer)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._fields!r})"
