# causelog/core/action.py
"""
Actions: logged units of work with a start and a terminal message.

Every message logged within an action, every child action and the action's
own start and end messages take their task level from a single counter owned
by the action, so sorting by task level reproduces the causal order.
"""
from __future__ import annotations

import uuid
from enum import Enum
from types import TracebackType
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Type, TypeVar

from causelog.core.context import ExecutionContext, current_action, get_context
from causelog.core.message import (
    EXCEPTION_FIELD,
    REASON_FIELD,
    TASK_UUID_FIELD,
    Message,
    MessageDict,
)
from causelog.core.task_level import TaskLevel

if TYPE_CHECKING:
    from causelog.validation.types import ActionSerializers


ACTION_STATUS_FIELD = "action_status"
ACTION_TYPE_FIELD = "action_type"

STARTED_STATUS = "started"
SUCCEEDED_STATUS = "succeeded"
FAILED_STATUS = "failed"

VALID_STATUSES = (STARTED_STATUS, SUCCEEDED_STATUS, FAILED_STATUS)

REMOTE_TASK_ACTION_TYPE = "causelog:remote_task"

T = TypeVar("T")


class ActionStatus(str, Enum):
    """Lifecycle of an action. ``SUCCEEDED`` and ``FAILED`` are terminal."""
    CREATED = "created"
    STARTED = STARTED_STATUS
    SUCCEEDED = SUCCEEDED_STATUS
    FAILED = FAILED_STATUS

    @property
    def is_terminal(self) -> bool:
        return self in (ActionStatus.SUCCEEDED, ActionStatus.FAILED)


class Action:
    """
    Part of a nested hierarchy of ongoing actions.

    An action has a start and an end; a message is logged for each.
    """

    def __init__(self, logger: Optional[Any], task_uuid: str, task_level: TaskLevel,
                 action_type: str, serializers: Optional["ActionSerializers"] = None) -> None:
        self._logger = logger
        self._task_level = task_level
        self._last_child: Optional[TaskLevel] = None
        self._identification: Dict[str, str] = {
            TASK_UUID_FIELD: task_uuid,
            ACTION_TYPE_FIELD: action_type,
        }
        self._serializers = serializers
        self._success_fields: MessageDict = {}
        self._status = ActionStatus.CREATED
        self._entered: List[ExecutionContext] = []

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #
    @property
    def task_uuid(self) -> str:
        return self._identification[TASK_UUID_FIELD]

    @property
    def action_type(self) -> str:
        return self._identification[ACTION_TYPE_FIELD]

    @property
    def task_level(self) -> TaskLevel:
        return self._task_level

    @property
    def status(self) -> ActionStatus:
        return self._status

    @property
    def finished(self) -> bool:
        return self._status.is_terminal

    # ------------------------------------------------------------------ #
    # Cross-process continuation
    # ------------------------------------------------------------------ #
    @classmethod
    def continue_task(cls, task_id: str, logger: Optional[Any] = None) -> "Action":
        """
        Start a new action which is part of a serialized task.

        ``task_id`` is the output of ``serialize_task_id``, typically produced
        in another process.
        """
        task_uuid, sep, level = task_id.partition("@")
        if not sep or not task_uuid:
            raise ValueError(f"Malformed task identifier: {task_id!r}")
        action = cls(logger, task_uuid, TaskLevel.from_string(level), REMOTE_TASK_ACTION_TYPE)
        action._start({})
        return action

    def serialize_task_id(self) -> str:
        """
        Identifier of the current location within the task.

        This consumes a task level, exactly like logging a message would, so
        the remote continuation cannot collide with local messages.
        """
        return f"{self.task_uuid}@{self._next_task_level()}"

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def _next_task_level(self) -> TaskLevel:
        if self._last_child is None:
            self._last_child = self._task_level.child()
        else:
            self._last_child = self._last_child.next_sibling()
        return self._last_child

    def _start(self, fields: Optional[MessageDict] = None) -> None:
        """Log the start message with the identification and ``fields``."""
        fields = dict(fields or {})
        fields[ACTION_STATUS_FIELD] = STARTED_STATUS
        fields.update(self._identification)
        serializer = None if self._serializers is None else self._serializers.start
        if self._status is ActionStatus.CREATED:
            self._status = ActionStatus.STARTED
        Message(fields, serializer).write(self._logger, self)

    def finish(self, error: Optional[BaseException] = None) -> None:
        """
        Log the finish message.

        Only the first call has any effect. On failure the exception class
        name and its string form are logged instead of the success fields.
        """
        if self.finished:
            return
        serializer = None
        if error is None:
            self._status = ActionStatus.SUCCEEDED
            fields = dict(self._success_fields)
            fields[ACTION_STATUS_FIELD] = SUCCEEDED_STATUS
            if self._serializers is not None:
                serializer = self._serializers.success
        else:
            self._status = ActionStatus.FAILED
            fields = {
                EXCEPTION_FIELD: type(error).__name__,
                REASON_FIELD: str(error),
                ACTION_STATUS_FIELD: FAILED_STATUS,
            }
            if self._serializers is not None:
                serializer = self._serializers.failure
        fields.update(self._identification)
        Message(fields, serializer).write(self._logger, self)

    def child(self, logger: Optional[Any], action_type: str,
              serializers: Optional["ActionSerializers"] = None) -> "Action":
        """Create a child action occupying this action's next task level."""
        return Action(logger, self.task_uuid, self._next_task_level(), action_type, serializers)

    def run(self, f: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``f`` with this action as the current action."""
        context = get_context()
        context.push(self)
        try:
            return f(*args, **kwargs)
        finally:
            context.pop()

    def add_success_fields(self, fields: Optional[MessageDict] = None, **kwargs: Any) -> None:
        """Add fields to the message logged when the action succeeds."""
        if self.finished:
            return
        self._success_fields.update(fields or {})
        self._success_fields.update(kwargs)

    # ------------------------------------------------------------------ #
    # Context manager protocol
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Action":
        context = get_context()
        context.push(self)
        self._entered.append(context)
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]],
                 exc: Optional[BaseException], tb: Optional[TracebackType]) -> bool:
        self._entered.pop().pop()
        self.finish(exc)
        return False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"(task_uuid={self.task_uuid!r}, "
            f"task_level={str(self._task_level)!r}, "
            f"action_type={self.action_type!r}, "
            f"status={self._status.value!r})"
        )


def start_task(logger: Optional[Any] = None, action_type: str = "",
               fields: Optional[MessageDict] = None,
               serializers: Optional["ActionSerializers"] = None) -> Action:
    """Create and start a new top-level action, ignoring any current action."""
    action = Action(logger, str(uuid.uuid4()), TaskLevel(()), action_type, serializers)
    action._start(fields)
    return action


def start_action(logger: Optional[Any] = None, action_type: str = "",
                 fields: Optional[MessageDict] = None,
                 serializers: Optional["ActionSerializers"] = None) -> Action:
    """
    Create and start a child of the current action.

    With no current action this behaves exactly like ``start_task``. For best
    results combine with ``with_action`` or use the action as a context
    manager.
    """
    parent = current_action()
    if parent is None:
        return start_task(logger, action_type, fields, serializers)
    action = parent.child(logger, action_type, serializers)
    action._start(fields)
    return action


def with_action(action: Action, f: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run ``f(action, *args, **kwargs)`` within the context of ``action``.

    The action is finished after ``f`` returns, or finished with the error if
    ``f`` raises, in which case the error propagates unchanged.
    """
    try:
        result = action.run(f, action, *args, **kwargs)
    except BaseException as exc:
        action.finish(exc)
        raise
    action.finish()
    return result
