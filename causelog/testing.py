# causelog/testing.py
"""
Helpers for unit testing code that logs with causelog.

Example::

    @capture_logging(assert_do_something_logged)
    def test_do_something(logger):
        do_something(key=123)
"""
from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from causelog.core.action import (
    ACTION_STATUS_FIELD,
    ACTION_TYPE_FIELD,
    FAILED_STATUS,
    STARTED_STATUS,
    SUCCEEDED_STATUS,
)
from causelog.core.message import MESSAGE_TYPE_FIELD, TASK_LEVEL_FIELD, TASK_UUID_FIELD
from causelog.output.logger import use_logger
from causelog.output.memory import MemoryLogger
from causelog.validation.types import ActionType, MessageType

COMPLETED_STATUSES = (FAILED_STATUS, SUCCEEDED_STATUS)

MessageDict = Dict[str, Any]


def assert_contains_fields(message: MessageDict, fields: MessageDict) -> None:
    """Assert that ``message`` contains ``fields``, ignoring any other keys."""
    subset = {key: value for key, value in message.items() if key in fields}
    assert subset == fields, f"{subset!r} != {fields!r}"


@dataclass
class LoggedMessage:
    """A message that was logged."""
    message: MessageDict

    @classmethod
    def of_type(cls, messages: Sequence[MessageDict],
                message_type: Union[MessageType, str]) -> List["LoggedMessage"]:
        name = message_type if isinstance(message_type, str) else message_type.message_type
        return [cls(m) for m in messages if m.get(MESSAGE_TYPE_FIELD) == name]


@dataclass
class LoggedAction:
    """
    An action whose start and end messages were logged, together with the
    messages and actions logged within it.
    """
    start_message: MessageDict
    end_message: MessageDict
    children: List[Union["LoggedAction", LoggedMessage]] = field(default_factory=list)

    @classmethod
    def from_messages(cls, task_uuid: str, level: Sequence[int],
                      messages: Sequence[MessageDict]) -> "LoggedAction":
        """
        Reconstruct the action whose start message has ``level``.

        Raises ``ValueError`` if its start or end message is missing.
        """
        prefix = list(level)[:-1]
        start_message = end_message = None
        children: List[Union[LoggedAction, LoggedMessage]] = []

        def is_direct_child(lvl: List[int]) -> bool:
            return len(lvl) == len(prefix) + 2 and lvl[:-2] == prefix and lvl[-1] == 1

        for message in messages:
            if message.get(TASK_UUID_FIELD) != task_uuid:
                continue
            message_level = list(message[TASK_LEVEL_FIELD])
            if message_level[:-1] == prefix:
                status = message.get(ACTION_STATUS_FIELD)
                if status == STARTED_STATUS:
                    start_message = message
                elif status in COMPLETED_STATUSES:
                    end_message = message
                else:
                    children.append(LoggedMessage(message))
            elif is_direct_child(message_level):
                children.append(cls.from_messages(task_uuid, message_level, messages))

        if start_message is None or end_message is None:
            raise ValueError(f"Incomplete action {task_uuid}@{list(level)}")
        return cls(start_message, end_message, children)

    @classmethod
    def of_type(cls, messages: Sequence[MessageDict],
                action_type: Union[ActionType, str]) -> List["LoggedAction"]:
        name = action_type if isinstance(action_type, str) else action_type.action_type
        return [
            cls.from_messages(m[TASK_UUID_FIELD], m[TASK_LEVEL_FIELD], messages)
            for m in messages
            if m.get(ACTION_TYPE_FIELD) == name and m.get(ACTION_STATUS_FIELD) == STARTED_STATUS
        ]

    def descendants(self) -> List[Union["LoggedAction", LoggedMessage]]:
        """All children, depth first."""
        result: List[Union[LoggedAction, LoggedMessage]] = []
        for child in self.children:
            result.append(child)
            if isinstance(child, LoggedAction):
                result.extend(child.descendants())
        return result

    @property
    def succeeded(self) -> bool:
        return self.end_message.get(ACTION_STATUS_FIELD) == SUCCEEDED_STATUS


def capture_logging(assertion: Optional[Callable[..., Any]] = None, *assertion_args: Any):
    """
    Decorator for tests that adds logging capture and validation.

    The decorated test receives a ``MemoryLogger`` (installed as the default
    logger) right after any positional arguments it is called with. When the
    test returns, every logged message is validated, ``assertion`` is called
    with the logger and ``assertion_args``, and unflushed tracebacks fail
    the test.
    """

    def decorator(f: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = MemoryLogger()
            with use_logger(logger):
                result = f(*args, logger, **kwargs)
            logger.validate()
            if assertion is not None:
                assertion(logger, *assertion_args)
            if logger.traceback_messages:
                raise AssertionError(f"Unflushed tracebacks: {logger.traceback_messages!r}")
            return result

        # Hide the injected logger parameter from pytest's fixture lookup.
        signature = inspect.signature(f)
        params = list(signature.parameters.values())
        for index, param in enumerate(params):
            if param.name not in ("self", "cls"):
                del params[index]
                break
        wrapper.__signature__ = signature.replace(parameters=params)
        return wrapper

    return decorator


def assert_has_message(logger: MemoryLogger, message_type: Union[MessageType, str],
                       fields: Optional[MessageDict] = None) -> LoggedMessage:
    """Assert a message of ``message_type`` was logged and its first one has ``fields``."""
    messages = LoggedMessage.of_type(logger.messages, message_type)
    name = message_type if isinstance(message_type, str) else message_type.message_type
    assert messages, f"No messages of type {name}"
    logged = messages[0]
    assert_contains_fields(logged.message, fields or {})
    return logged


def assert_has_action(logger: MemoryLogger, action_type: Union[ActionType, str],
                      succeeded: bool = True, start_fields: Optional[MessageDict] = None,
                      end_fields: Optional[MessageDict] = None) -> LoggedAction:
    """Assert an action of ``action_type`` was logged and check its first instance."""
    actions = LoggedAction.of_type(logger.messages, action_type)
    name = action_type if isinstance(action_type, str) else action_type.action_type
    assert actions, f"No actions of type {name}"
    logged = actions[0]
    assert logged.succeeded == succeeded
    assert_contains_fields(logged.start_message, start_fields or {})
    assert_contains_fields(logged.end_message, end_fields or {})
    return logged
