# causelog/validation/types.py
"""
Schema factories for message and action kinds.

Example::

    KEY = BoundField.for_types("key", ["number"], "Lookup key for things")
    RESULT = BoundField.for_types("result", ["string"], "Result of lookups")
    LOG_DO_SOMETHING = ActionType(
        "myapp:mysys:dosomething", [KEY], [RESULT],
        "Do something with a key, resulting in a value.")

    def do_something(key):
        with LOG_DO_SOMETHING(key=key) as action:
            result = do_the_thing(key)
            action.add_success_fields(result=result)
            return result
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from causelog.core.action import (
    ACTION_STATUS_FIELD,
    ACTION_TYPE_FIELD,
    FAILED_STATUS,
    STARTED_STATUS,
    SUCCEEDED_STATUS,
    Action,
    start_action,
    start_task,
)
from causelog.core.message import (
    EXCEPTION_FIELD,
    MESSAGE_TYPE_FIELD,
    REASON_FIELD,
    Message,
    MessageDict,
)
from causelog.validation.fields import BoundField
from causelog.validation.serializer import MessageSerializer

REASON = BoundField.for_types(REASON_FIELD, ["string"], "The reason for an event.")
EXCEPTION = BoundField.for_types(EXCEPTION_FIELD, ["string"], "The name of an exception.")


@dataclass(frozen=True)
class ActionSerializers:
    """Serializers for the start, success and failure messages of an action."""
    start: MessageSerializer
    success: MessageSerializer
    failure: MessageSerializer


class MessageType:
    """
    A specific type of non-action message.

    Calling an instance returns a ``Message`` stamped with the type name and
    bound to this type's serializer.
    """

    def __init__(self, message_type: str, fields: Iterable[BoundField], description: str = "") -> None:
        self.message_type = message_type
        self.description = description
        self._serializer = MessageSerializer(
            list(fields) + [BoundField.for_value(MESSAGE_TYPE_FIELD, message_type, "The message type.")]
        )

    def __call__(self, fields: Optional[MessageDict] = None, **kwargs: Any) -> Message:
        contents = {**(fields or {}), **kwargs}
        contents[MESSAGE_TYPE_FIELD] = self.message_type
        return Message(contents, self._serializer)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message_type!r})"


class ActionType:
    """
    A specific type of action.

    Calling an instance starts an action of this type as a child of the
    current action (or as a new task if there is none); ``as_task`` always
    starts a new task.
    """

    def __init__(self, action_type: str, start_fields: Iterable[BoundField],
                 success_fields: Iterable[BoundField], description: str = "") -> None:
        self.action_type = action_type
        self.description = description
        type_field = BoundField.for_value(ACTION_TYPE_FIELD, action_type, "The action type")
        self._serializers = ActionSerializers(
            start=MessageSerializer(
                list(start_fields) + [type_field, _status_field(STARTED_STATUS)]
            ),
            success=MessageSerializer(
                list(success_fields) + [type_field, _status_field(SUCCEEDED_STATUS)]
            ),
            # Failures may carry extra diagnostic fields the schema author
            # could not anticipate.
            failure=MessageSerializer(
                [type_field, _status_field(FAILED_STATUS), REASON, EXCEPTION],
                allow_additional_fields=True,
            ),
        )

    def __call__(self, fields: Optional[MessageDict] = None, logger: Optional[Any] = None,
                 **kwargs: Any) -> Action:
        return start_action(logger, self.action_type, {**(fields or {}), **kwargs}, self._serializers)

    def as_task(self, fields: Optional[MessageDict] = None, logger: Optional[Any] = None,
                **kwargs: Any) -> Action:
        """Start a new top-level action of this type."""
        return start_task(logger, self.action_type, {**(fields or {}), **kwargs}, self._serializers)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.action_type!r})"


def _status_field(value: str) -> BoundField:
    return BoundField.for_value(ACTION_STATUS_FIELD, value, "The action status")


__all__: List[str] = ["ActionSerializers", "ActionType", "MessageType", "EXCEPTION", "REASON"]
