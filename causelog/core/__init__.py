from causelog.core.action import (
    ACTION_STATUS_FIELD,
    ACTION_TYPE_FIELD,
    FAILED_STATUS,
    STARTED_STATUS,
    SUCCEEDED_STATUS,
    Action,
    ActionStatus,
    start_action,
    start_task,
    with_action,
)
from causelog.core.context import ExecutionContext, current_action, get_context, use_context
from causelog.core.message import Message
from causelog.core.task_level import TaskLevel

__all__ = [
    "ACTION_STATUS_FIELD",
    "ACTION_TYPE_FIELD",
    "Action",
    "ActionStatus",
    "ExecutionContext",
    "FAILED_STATUS",
    "Message",
    "STARTED_STATUS",
    "SUCCEEDED_STATUS",
    "TaskLevel",
    "current_action",
    "get_context",
    "start_action",
    "start_task",
    "use_context",
    "with_action",
]
