from causelog.validation.errors import SchemaDefinitionError, ValidationError
from causelog.validation.fields import BoundField, Field, fields
from causelog.validation.serializer import RESERVED_FIELDS, MessageSerializer
from causelog.validation.types import ActionSerializers, ActionType, MessageType

__all__ = [
    "ActionSerializers",
    "ActionType",
    "BoundField",
    "Field",
    "MessageSerializer",
    "MessageType",
    "RESERVED_FIELDS",
    "SchemaDefinitionError",
    "ValidationError",
    "fields",
]
