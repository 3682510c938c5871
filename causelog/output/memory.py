# causelog/output/memory.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Type, Union

from causelog.core.message import REASON_FIELD
from causelog.traceback import TRACEBACK_MESSAGE

if TYPE_CHECKING:
    from causelog.validation.serializer import MessageSerializer


class MemoryLogger:
    """
    Store written messages in memory.

    Messages are recorded verbatim together with their serializer, so that
    ``validate`` can check after the fact that everything logged during a
    unit of work would have passed its schema.
    """

    def __init__(self) -> None:
        self.reset()

    def write(self, dictionary: Dict[str, Any],
              serializer: Optional["MessageSerializer"] = None) -> None:
        self.messages.append(dictionary)
        self.serializers.append(serializer)
        if serializer is TRACEBACK_MESSAGE._serializer:
            self.traceback_messages.append(dictionary)

    def flush_tracebacks(self, error_type: Union[Type[BaseException], Tuple[Type[BaseException], ...]]
                         ) -> List[Dict[str, Any]]:
        """
        Remove and return the traceback messages for errors of ``error_type``.

        Tracebacks of other types are left in place.
        """
        result, remaining = [], []
        for message in self.traceback_messages:
            if isinstance(message[REASON_FIELD], error_type):
                result.append(message)
            else:
                remaining.append(message)
        self.traceback_messages = remaining
        return result

    def validate(self) -> None:
        """
        Validate and serialize a copy of every recorded message.

        Raises the first ``ValidationError`` (or serializer exception) found.
        """
        for dictionary, serializer in zip(self.messages, self.serializers):
            if serializer is not None:
                dictionary = dict(dictionary)
                serializer.validate(dictionary)
                serializer.serialize(dictionary)

    def serialize(self) -> List[Dict[str, Any]]:
        """Serialized copies of the recorded messages; the originals are untouched."""
        result = []
        for dictionary, serializer in zip(self.messages, self.serializers):
            dictionary = dict(dictionary)
            if serializer is not None:
                serializer.serialize(dictionary)
            result.append(dictionary)
        return result

    def reset(self) -> None:
        self.messages: List[Dict[str, Any]] = []
        self.serializers: List[Optional["MessageSerializer"]] = []
        self.traceback_messages: List[Dict[str, Any]] = []
