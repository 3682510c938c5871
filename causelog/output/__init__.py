from causelog.output.console import to_console
from causelog.output.destinations import (
    Destinations,
    DestinationsSendError,
    add_destination,
    add_global_fields,
    get_destinations,
    use_destinations,
)
from causelog.output.logger import Logger, MessageWriter, get_default_logger, use_logger
from causelog.output.memory import MemoryLogger

__all__ = [
    "Destinations",
    "DestinationsSendError",
    "Logger",
    "MemoryLogger",
    "MessageWriter",
    "add_destination",
    "add_global_fields",
    "get_default_logger",
    "get_destinations",
    "to_console",
    "use_destinations",
    "use_logger",
]
