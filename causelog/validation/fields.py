# causelog/validation/fields.py
from __future__ import annotations

from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from causelog.validation.errors import ValidationError

Serializer = Callable[[Any], Any]
Validator = Callable[[Any], None]

# Python types accepted by ``Field.for_types`` and the JSON kind they map to.
_PYTHON_KINDS: Dict[Any, str] = {
    None: "null",
    type(None): "null",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    tuple: "array",
    dict: "object",
    bool: "boolean",
}

JSON_KINDS: FrozenSet[str] = frozenset(
    {"null", "number", "string", "array", "object", "boolean"}
)


def json_kind(value: Any) -> Optional[str]:
    """Name of the JSON kind ``value`` would be encoded as, or ``None``."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return None


def _kind_name(t: Any) -> str:
    if isinstance(t, str):
        name = t.lower()
        if name in JSON_KINDS:
            return name
    elif t in _PYTHON_KINDS:
        return _PYTHON_KINDS[t]
    raise TypeError(f"{t!r} is not JSON-encodable")


class Field:
    """
    An unnamed field that can accept rich types and serialize them to the
    logging system's basic types.

    The serializer may raise ``ValidationError`` to reject bad input, which is
    why validation runs the serializer too. An optional extra validator can
    check inputs further without altering them.
    """

    def __init__(self, serializer: Serializer, description: str = "",
                 extra_validator: Optional[Validator] = None) -> None:
        self.description = description
        self._serializer = serializer
        self._extra_validator = extra_validator

    @classmethod
    def for_value(cls, value: Any, description: str = "") -> "Field":
        """A field that only accepts ``value`` and always serializes to it."""

        def validate_value(input: Any) -> None:
            if input != value or type(input) is not type(value):
                raise ValidationError(input, f"Field must be {value}")

        return cls(lambda _input: value, description, validate_value)

    @classmethod
    def for_types(cls, types: Iterable[Any], description: str = "",
                  extra_validator: Optional[Validator] = None) -> "Field":
        """
        A field whose values must be of one of the given JSON kinds.

        ``types`` holds kind names (``"null"``, ``"number"``, ``"string"``,
        ``"array"``, ``"object"``, ``"boolean"``) or the matching Python types.
        """
        types = list(types)
        kinds = frozenset(_kind_name(t) for t in types)
        names = ", ".join(t if isinstance(t, str) else getattr(t, "__name__", repr(t))
                          for t in types)

        def validate_kind(input: Any) -> None:
            if json_kind(input) not in kinds:
                raise ValidationError(input, f"Field requires type to be one of: {names}")
            if extra_validator is not None:
                extra_validator(input)

        return cls(lambda input: input, description, validate_kind)

    def validate(self, input: Any) -> None:
        """Raise if ``input`` cannot be serialized or fails the extra validator."""
        self._serializer(input)
        if self._extra_validator is not None:
            self._extra_validator(input)

    def serialize(self, input: Any) -> Any:
        return self._serializer(input)


class BoundField:
    """A ``Field`` bound to the key that refers to it in a message."""

    def __init__(self, key: str, field: Field) -> None:
        self.key = key
        self.field = field

    @classmethod
    def create(cls, key: str, serializer: Serializer, description: str = "",
               extra_validator: Optional[Validator] = None) -> "BoundField":
        return cls(key, Field(serializer, description, extra_validator))

    @classmethod
    def for_value(cls, key: str, value: Any, description: str = "") -> "BoundField":
        return cls(key, Field.for_value(value, description))

    @classmethod
    def for_types(cls, key: str, types: Iterable[Any], description: str = "",
                  extra_validator: Optional[Validator] = None) -> "BoundField":
        return cls(key, Field.for_types(types, description, extra_validator))

    @property
    def description(self) -> str:
        return self.field.description

    def validate(self, input: Any) -> None:
        """Validate ``input``, prefixing validation failures with the key."""
        try:
            self.field.validate(input)
        except ValidationError as e:
            raise ValidationError(e.reason, f"{self.key}: {e.message}") from e

    def serialize(self, input: Any) -> Any:
        return self.field.serialize(input)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r}, description={self.description!r})"


FieldSpec = Union[BoundField, Field, str, type, None]


def fields(mapping: Optional[Mapping[str, FieldSpec]] = None, **kwargs: FieldSpec) -> List[BoundField]:
    """
    Build field definitions for ``MessageType`` and ``ActionType``.

    Values may be existing ``BoundField`` instances (re-keyed), ``Field``
    instances or JSON kind names / Python types. The result is sorted by key.
    """
    specs = {**(mapping or {}), **kwargs}
    result = []
    for key in sorted(specs):
        value = specs[key]
        if isinstance(value, BoundField):
            field = value.field
        elif isinstance(value, Field):
            field = value
        else:
            field = Field.for_types([value])
        result.append(BoundField(key, field))
    return result
