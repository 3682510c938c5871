# causelog/validation/errors.py
"""
Exception classes for message schemas.

``ValidationError`` is raised when a value or a whole message dictionary
fails its schema and is meant to be caught. ``SchemaDefinitionError`` is
raised while building a malformed schema and indicates a programming error.
"""
from typing import Any


class ValidationError(ValueError):
    """A field value, or a message dictionary, failed validation."""

    def __init__(self, reason: Any, message: str = ""):
        super().__init__(message)
        self.reason = reason
        self.message = message

    def __str__(self) -> str:
        return self.message


class SchemaDefinitionError(ValueError):
    """
    A message or action schema was defined incorrectly.

    Duplicate field names, reserved field names and a missing or doubled
    type discriminator all end up here.
    """
    pass
