# erreur/encoder.py
"""
Object encoders

Two ObjectEncoder implementations:
- JSONEncoder: appends compact JSON text to a per-call buffer. Keys are
  written in the order they are added, duplicates included.
- MapObjectEncoder: builds plain dicts (later duplicates overwrite earlier
  ones at the same level).

Encoders are created per call and never shared, so no locking is needed.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .config import EncoderConfig
from .fields import Field, ObjectMarshaler


@dataclass(frozen=True)
class LogEntry:
    """Entry-level values; only keys named by the EncoderConfig are written"""
    message: str
    level: Optional[str] = None
    time: Optional[float] = None
    logger_name: Optional[str] = None
    caller: Optional[str] = None
    stack: Optional[str] = None


_SURROGATES = re.compile("[\ud800-\udfff]")


def _quote(s: str) -> str:
    # lone surrogates cannot be encoded as UTF-8
    s = _SURROGATES.sub("\ufffd", s)
    return json.dumps(s, ensure_ascii=False)


def _format_float(value: float) -> str:
    # JSON has no NaN/Inf literals
    if math.isnan(value):
        return '"NaN"'
    if math.isinf(value):
        return '"+Inf"' if value > 0 else '"-Inf"'
    return repr(value)


class JSONEncoder:
    """
    Buffer-backed JSON object encoder.

    Example:
        >>> enc = JSONEncoder()
        >>> enc.add_string("addr", "example.com")
        >>> enc.add_int("code", 1234)
        >>> enc.getvalue()
        '{"addr":"example.com","code":1234}'
    """

    def __init__(self) -> None:
        self._buf: List[str] = []
        self._needs_comma = False

    def _key(self, key: str) -> None:
        if self._needs_comma:
            self._buf.append(",")
        self._buf.append(_quote(key))
        self._buf.append(":")
        self._needs_comma = True

    def add_string(self, key: str, value: str) -> None:
        self._key(key)
        self._buf.append(_quote(value))

    def add_int(self, key: str, value: int) -> None:
        self._key(key)
        self._buf.append(str(int(value)))

    def add_float(self, key: str, value: float) -> None:
        self._key(key)
        self._buf.append(_format_float(value))

    def add_bool(self, key: str, value: bool) -> None:
        self._key(key)
        self._buf.append("true" if value else "false")

    def add_object(self, key: str, marshaler: ObjectMarshaler) -> None:
        self._key(key)
        self._buf.append("{")
        self._needs_comma = False
        marshaler.marshal_log_object(self)
        self._buf.append("}")
        self._needs_comma = True

    def getvalue(self) -> str:
        """The encoded object, braces included"""
        return "{" + "".join(self._buf) + "}"

    def encode_entry(
        self,
        entry: LogEntry,
        fields: Iterable[Field],
        config: EncoderConfig,
    ) -> str:
        """
        Encode entry and fields as one JSON object.

        Key order: level, time, logger name, caller, message, fields,
        stacktrace. Keys whose configured name is empty are omitted, as are
        entry values that are None.
        """
        if config.level_key and entry.level is not None:
            self.add_string(config.level_key, entry.level)
        if config.time_key and entry.time is not None:
            if config.time_format == "iso8601":
                ts = datetime.fromtimestamp(entry.time, timezone.utc).isoformat()
                self.add_string(config.time_key, ts)
            else:
                self.add_float(config.time_key, entry.time)
        if config.name_key and entry.logger_name:
            self.add_string(config.name_key, entry.logger_name)
        if config.caller_key and entry.caller:
            self.add_string(config.caller_key, entry.caller)
        if config.message_key:
            self.add_string(config.message_key, entry.message)

        for f in fields:
            f.add_to(self)

        if config.stacktrace_key and entry.stack:
            self.add_string(config.stacktrace_key, entry.stack)

        return self.getvalue() + config.line_ending


class MapObjectEncoder:
    """ObjectEncoder that collects fields into a dict"""

    def __init__(self) -> None:
        self.fields: Dict[str, Any] = {}

    def add_string(self, key: str, value: str) -> None:
        self.fields[key] = value

    def add_int(self, key: str, value: int) -> None:
        self.fields[key] = int(value)

    def add_float(self, key: str, value: float) -> None:
        self.fields[key] = float(value)

    def add_bool(self, key: str, value: bool) -> None:
        self.fields[key] = bool(value)

    def add_object(self, key: str, marshaler: ObjectMarshaler) -> None:
        nested = MapObjectEncoder()
        marshaler.marshal_log_object(nested)
        self.fields[key] = nested.fields
