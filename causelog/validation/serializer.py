# causelog/validation/serializer.py
from __future__ import annotations

from typing import Dict, FrozenSet, Iterable

from causelog.core.action import ACTION_TYPE_FIELD
from causelog.core.message import (
    MESSAGE_TYPE_FIELD,
    TASK_LEVEL_FIELD,
    TASK_UUID_FIELD,
    TIMESTAMP_FIELD,
    MessageDict,
)
from causelog.validation.errors import SchemaDefinitionError, ValidationError
from causelog.validation.fields import BoundField

# Injected when a message is frozen, never supplied by a schema.
RESERVED_FIELDS = (TASK_LEVEL_FIELD, TASK_UUID_FIELD, TIMESTAMP_FIELD)


class MessageSerializer:
    """
    A serializer and validator for messages.

    ``serialize`` converts the known fields of a dictionary in place and
    ignores anything else. ``validate`` is strict: every schema field must be
    present and valid and, unless ``allow_additional_fields`` is set, no
    other field may appear apart from the reserved identity fields.
    """

    def __init__(self, fields: Iterable[BoundField], allow_additional_fields: bool = False) -> None:
        fields = list(fields)
        keys = []
        for field in fields:
            if not isinstance(field, BoundField):
                raise TypeError(f"Expected a BoundField instance but got {field!r}")
            if field.key.startswith("_"):
                raise SchemaDefinitionError(f'{field!r}: Field names must not start with "_"')
            keys.append(field.key)
        if len(set(keys)) != len(keys):
            duplicates = sorted({k for k in keys if keys.count(k) > 1})
            raise SchemaDefinitionError(f"Duplicate field name: {', '.join(duplicates)}")
        if ACTION_TYPE_FIELD in keys:
            if MESSAGE_TYPE_FIELD in keys:
                raise SchemaDefinitionError(
                    'Messages must have either "action_type" or "message_type" not both'
                )
        elif MESSAGE_TYPE_FIELD not in keys:
            raise SchemaDefinitionError('Messages must have either "action_type" or "message_type"')
        for reserved in RESERVED_FIELDS:
            if reserved in keys:
                raise SchemaDefinitionError(
                    f"The field name {reserved} is reserved for use by the logging framework"
                )
        self.fields: Dict[str, BoundField] = {field.key: field for field in fields}
        self.allow_additional_fields = allow_additional_fields

    @property
    def allowed_keys(self) -> FrozenSet[str]:
        return frozenset(self.fields).union(RESERVED_FIELDS)

    def serialize(self, message: MessageDict) -> None:
        """
        Serialize ``message`` in place, converting inputs to outputs.

        Schema fields absent from ``message`` stay absent.
        """
        for key, field in self.fields.items():
            if key in message:
                message[key] = field.serialize(message[key])

    def validate(self, message: MessageDict) -> None:
        """
        Validate a message dictionary.

        Raises ``ValidationError`` if a field is missing, fails its own
        validation, or is not part of the schema.
        """
        for key, field in self.fields.items():
            if key not in message:
                raise ValidationError(key, f"Field {key} is missing")
            field.validate(message[key])
        if not self.allow_additional_fields:
            allowed = self.allowed_keys
            for key in message:
                if key not in allowed:
                    raise ValidationError(key, f"Unexpected field: {key}")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(fields={sorted(self.fields)!r}, "
            f"allow_additional_fields={self.allow_additional_fields!r})"
        )
