# erreur/fields.py
"""
Typed context fields

A Field is a key paired with a typed value. Every field knows how to write
itself into an ObjectEncoder, so nested objects (a structured cause, or a
structured error attached to a log line) recurse through the same encoder
without special-casing depth.

Field order is significant: fields are rendered in the order they are given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class FieldKind(str, Enum):
    """Field value kinds"""
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    OBJECT = "object"
    ERROR = "error"
    SKIP = "skip"


class ObjectEncoder(Protocol):
    """Visitor that fields write themselves into"""

    def add_string(self, key: str, value: str) -> None: ...

    def add_int(self, key: str, value: int) -> None: ...

    def add_float(self, key: str, value: float) -> None: ...

    def add_bool(self, key: str, value: bool) -> None: ...

    def add_object(self, key: str, marshaler: "ObjectMarshaler") -> None: ...


@runtime_checkable
class ObjectMarshaler(Protocol):
    """Anything that can render itself as a nested object"""

    def marshal_log_object(self, encoder: ObjectEncoder) -> None: ...


@dataclass(frozen=True)
class Field:
    """A single key/value context field"""
    key: str
    kind: FieldKind
    value: Any = None

    def add_to(self, encoder: ObjectEncoder) -> None:
        """Write this field into encoder"""
        kind = self.kind
        if kind is FieldKind.SKIP:
            return
        if kind is FieldKind.STRING:
            encoder.add_string(self.key, self.value)
        elif kind is FieldKind.INT:
            encoder.add_int(self.key, self.value)
        elif kind is FieldKind.FLOAT:
            encoder.add_float(self.key, self.value)
        elif kind is FieldKind.BOOL:
            encoder.add_bool(self.key, self.value)
        elif kind is FieldKind.OBJECT:
            encoder.add_object(self.key, self.value)
        elif kind is FieldKind.ERROR:
            encoder.add_string(self.key, str(self.value))

    def __repr__(self) -> str:
        if self.kind is FieldKind.SKIP:
            return "Field(skip)"
        return f"Field({self.key}={self.value!r})"


# -------- constructors --------

def string(key: str, value: str) -> Field:
    return Field(key, FieldKind.STRING, str(value))


def integer(key: str, value: int) -> Field:
    return Field(key, FieldKind.INT, int(value))


def floating(key: str, value: float) -> Field:
    return Field(key, FieldKind.FLOAT, float(value))


def boolean(key: str, value: bool) -> Field:
    return Field(key, FieldKind.BOOL, bool(value))


def obj(key: str, marshaler: ObjectMarshaler) -> Field:
    """Nested object field; marshaler renders its own keys"""
    return Field(key, FieldKind.OBJECT, marshaler)


def error(err: BaseException, key: str = "error") -> Field:
    """Plain error-text field: renders as str(err) under key"""
    return Field(key, FieldKind.ERROR, err)


_SKIP = Field("", FieldKind.SKIP)


def skip() -> Field:
    """No-op field, contributes nothing to the output"""
    return _SKIP


def infer(key: str, value: Any) -> Field:
    """
    Build a field, picking the kind from the value's Python type.

    bool is checked before int (bool is an int subclass). Values of any other
    type are rendered with str().
    """
    if isinstance(value, Field):
        return Field(key, value.kind, value.value)
    if isinstance(value, bool):
        return boolean(key, value)
    if isinstance(value, int):
        return integer(key, value)
    if isinstance(value, float):
        return floating(key, value)
    if isinstance(value, str):
        return string(key, value)
    if isinstance(value, BaseException) and not isinstance(value, ObjectMarshaler):
        return error(value, key)
    if isinstance(value, ObjectMarshaler):
        return obj(key, value)
    return string(key, str(value))


def collect(fields: tuple[Field, ...], context: dict[str, Any]) -> tuple[Field, ...]:
    """Positional fields first, then keyword context in keyword order"""
    for f in fields:
        if not isinstance(f, Field):
            raise TypeError(f"expected Field, got {type(f).__name__}: {f!r}")
    if not context:
        return tuple(fields)
    return tuple(fields) + tuple(infer(k, v) for k, v in context.items())
