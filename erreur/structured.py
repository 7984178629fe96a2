# erreur/structured.py
"""
Structured errors

A Structured error holds an optional message, an optional cause (any
exception, structured or not) and ordered context fields scoped to that one
node. Wrapping builds a singly linked chain through the cause.

Three renderings:
- str(err): colon-joined messages of the whole chain
- err.fields(): own fields plus a nested "cause" object when a structured
  error is reachable from the cause
- err.json(): {"msg":...,<fields>...,"cause":{...}}

Example:
    >>> conn_err = new("connection error", integer("code", 1234), string("addr", "example.com"))
    >>> conn_err.json()
    '{"msg":"connection error","code":1234,"addr":"example.com"}'
    >>> str(wrap(conn_err, "failed to load data"))
    'failed to load data: connection error'
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from .config import JSON_DOCUMENT_CONFIG
from .encoder import JSONEncoder, LogEntry, MapObjectEncoder
from .fields import Field, ObjectEncoder, collect, error, obj, skip


class StringError(Exception):
    """
    Lightweight string-only error: no fields, no cause.

        >>> PERMISSION = StringError("insufficient permissions")
    """

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"StringError({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StringError):
            return self.text == other.text
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)


def unwrap(e: Optional[BaseException]) -> Optional[BaseException]:
    """
    One step down an error chain.

    Uses e.unwrap() when e provides one, otherwise the explicit cause set by
    ``raise ... from ...``. The implicit __context__ is not followed.
    """
    if e is None:
        return None
    fn = getattr(e, "unwrap", None)
    if callable(fn):
        return fn()
    return e.__cause__


class Structured(Exception):
    """
    Immutable error carrying a message, a cause and context fields.

    Build with new(), wrap() or structure(); Structured() with no message
    and no cause is the empty sentinel and is falsy.
    """

    __slots__ = ("_message", "_cause", "_fields")

    def __init__(
        self,
        message: Optional[StringError] = None,
        cause: Optional[BaseException] = None,
        fields: Tuple[Field, ...] = (),
    ) -> None:
        super().__init__(*([str(message)] if message is not None else []))
        object.__setattr__(self, "_message", message)
        object.__setattr__(self, "_cause", cause)
        object.__setattr__(self, "_fields", tuple(fields))
        if cause is not None:
            # Tracebacks show the chain
            self.__cause__ = cause

    def __setattr__(self, name: str, value: Any) -> None:
        # Dunder attributes belong to the exception machinery
        if name.startswith("__") and name.endswith("__"):
            object.__setattr__(self, name, value)
            return
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (Structured, (self._message, self._cause, self._fields))

    def __bool__(self) -> bool:
        return self._message is not None or self._cause is not None

    # -------- chain --------

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    def unwrap(self) -> Optional[BaseException]:
        """The cause of this error, or None"""
        return self._cause

    @property
    def message(self) -> Optional[str]:
        """Own message, None for errors built with structure()"""
        return str(self._message) if self._message is not None else None

    @property
    def own_fields(self) -> Tuple[Field, ...]:
        """Fields attached to this node only"""
        return self._fields

    # -------- rendering --------

    def __str__(self) -> str:
        # Walks the chain iteratively; deep chains must not hit the recursion limit
        parts = []
        node: Optional[BaseException] = self
        while isinstance(node, Structured):
            if node._message is not None:
                parts.append(str(node._message))
            elif node._cause is None:
                # empty sentinel
                parts.append("")
            # built with structure(): no own text, pass the cause's through
            if node._cause is None:
                return ": ".join(parts)
            node = node._cause
        parts.append(str(node))
        return ": ".join(parts)

    def __repr__(self) -> str:
        parts = []
        if self._message is not None:
            parts.append(repr(str(self._message)))
        if self._cause is not None:
            parts.append(f"cause={self._cause!r}")
        parts.extend(repr(f) for f in self._fields)
        return f"Structured({', '.join(parts)})"

    def headline(self) -> str:
        """Single-level message used as this node's "msg" """
        if self._message is not None:
            return str(self._message)
        if self._cause is None:
            return ""
        return str(self._cause)

    def fields(self) -> Tuple[Field, ...]:
        """
        Own fields, then a "cause" object field if a structured error is
        reachable from the cause.

        Nesting is kept one level at a time: the cause's fields are not
        spliced in, so two levels may reuse a key without clobbering.
        """
        cause = self._cause
        if cause is None:
            return self._fields
        if isinstance(cause, Structured):
            return self._fields + (obj("cause", cause),)

        found, ok = as_structured(cause)
        if ok:
            return self._fields + (obj("cause", found),)
        return self._fields

    def marshal_log_object(self, encoder: ObjectEncoder) -> None:
        encoder.add_string("msg", self.headline())
        for f in self.fields():
            f.add_to(encoder)

    def json(self) -> str:
        """
        JSON document: "msg", then the fields in order, then "cause".

        No timestamp, level, caller or logger name keys.
        """
        entry = LogEntry(message=self.headline())
        return JSONEncoder().encode_entry(entry, self.fields(), JSON_DOCUMENT_CONFIG)

    def json_bytes(self) -> bytes:
        """UTF-8 encoded json(); a fresh copy per call"""
        return self.json().encode("utf-8")

    def to_dict(self) -> dict:
        enc = MapObjectEncoder()
        self.marshal_log_object(enc)
        return enc.fields


_EMPTY = Structured()


# -------- construction --------

def structure(cause: Optional[BaseException], *fields: Field, **context: Any) -> Optional[Structured]:
    """
    Add context fields to an existing error without a new message.

    Returns None if cause is None, so callers can write
    ``return structure(err, ...)`` unconditionally.
    """
    if cause is None:
        return None
    return Structured(cause=cause, fields=collect(fields, context))


def new(message: str, /, *fields: Field, **context: Any) -> Structured:
    """New structured error with message and fields"""
    return Structured(message=StringError(message), fields=collect(fields, context))


def wrap(cause: Optional[BaseException], message: str, /, *fields: Field, **context: Any) -> Optional[Structured]:
    """Wrap cause with a new message and context fields. Returns None if cause is None"""
    if cause is None:
        return None
    return Structured(message=StringError(message), cause=cause, fields=collect(fields, context))


# -------- chain inspection --------

def as_structured(e: Optional[BaseException]) -> Tuple[Structured, bool]:
    """
    First Structured in e's error chain.

    Returns (err, True) when found, (empty sentinel, False) otherwise. The
    chain must be acyclic.
    """
    while e is not None:
        if isinstance(e, Structured):
            return e, bool(e)
        e = unwrap(e)
    return _EMPTY, False


def is_structured(e: Optional[BaseException]) -> bool:
    """True if e or any error in its chain is Structured"""
    _, found = as_structured(e)
    return found


def log_field(e: Optional[BaseException]) -> Field:
    """
    Log field for e under the key "error".

    - None: no-op field
    - structured error anywhere in the chain: nested object
    - anything else: the error text
    """
    if e is None:
        return skip()
    found, ok = as_structured(e)
    if ok:
        return obj("error", found)
    return error(e)
