"""
causelog: causal, structured logging.

Application code records nested actions and standalone messages; every
message carries a task UUID and a task level locating it in the tree of its
task, so a trace can be reassembled from any mix of destinations.
"""
from causelog.core import (
    Action,
    ActionStatus,
    Message,
    TaskLevel,
    current_action,
    start_action,
    start_task,
    use_context,
    with_action,
)
from causelog.output import (
    Destinations,
    DestinationsSendError,
    Logger,
    MemoryLogger,
    add_destination,
    add_global_fields,
    to_console,
    use_destinations,
    use_logger,
)
from causelog.settings import CauselogSettings, configure
from causelog.traceback import write_traceback
from causelog.validation import (
    ActionType,
    BoundField,
    Field,
    MessageSerializer,
    MessageType,
    SchemaDefinitionError,
    ValidationError,
    fields,
)
from causelog import testing

__version__ = "0.4.0"

__all__ = [
    "Action",
    "ActionStatus",
    "ActionType",
    "BoundField",
    "CauselogSettings",
    "Destinations",
    "DestinationsSendError",
    "Field",
    "Logger",
    "MemoryLogger",
    "Message",
    "MessageSerializer",
    "MessageType",
    "SchemaDefinitionError",
    "TaskLevel",
    "ValidationError",
    "add_destination",
    "add_global_fields",
    "configure",
    "current_action",
    "fields",
    "start_action",
    "start_task",
    "testing",
    "to_console",
    "use_context",
    "use_destinations",
    "use_logger",
    "with_action",
    "write_traceback",
]
