# erreur/logfmt.py
"""
stdlib logging integration

JSONFormatter renders a LogRecord as one JSON line using an EncoderConfig;
fields travel on the record as ``extra={"fields": [...]}``. StructuredLogger
is a LoggerAdapter that takes fields positionally:

    >>> log = StructuredLogger(logging.getLogger("db"))
    >>> log.error("failed to flush db", log_field(err))

A skip field (log_field(None)) contributes nothing to the line.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from typing import Any, Optional, TextIO, Tuple

from .config import EncoderConfig, production_encoder_config
from .encoder import JSONEncoder, LogEntry
from .fields import Field

FIELDS_ATTR = "fields"

# logging level names -> encoded level names
_LEVEL_NAMES = {
    "WARNING": "warn",
    "CRITICAL": "fatal",
}


def level_name(levelname: str) -> str:
    return _LEVEL_NAMES.get(levelname, levelname.lower())


class JSONFormatter(logging.Formatter):
    """Formats records as JSON objects; the handler adds the terminator"""

    def __init__(self, config: Optional[EncoderConfig] = None) -> None:
        super().__init__()
        self.config = replace(config or production_encoder_config(), line_ending="")

    def format(self, record: logging.LogRecord) -> str:
        stack = None
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            stack = record.exc_text
        elif record.stack_info:
            stack = self.formatStack(record.stack_info)

        entry = LogEntry(
            message=record.getMessage(),
            level=level_name(record.levelname),
            time=record.created,
            logger_name=record.name,
            caller=f"{record.filename}:{record.lineno}",
            stack=stack,
        )
        fields = getattr(record, FIELDS_ATTR, None) or ()
        return JSONEncoder().encode_entry(entry, fields, self.config)


class StructuredLogger(logging.LoggerAdapter):
    """
    LoggerAdapter taking fields as positional arguments.

    Messages are not %-formatted with the fields; use f-strings for the
    message text. with_fields() returns a child logger whose fields are
    prepended to every line.
    """

    def __init__(self, logger: logging.Logger, fields: Tuple[Field, ...] = ()) -> None:
        super().__init__(logger, {})
        self._fields = tuple(fields)

    def with_fields(self, *fields: Field) -> "StructuredLogger":
        return StructuredLogger(self.logger, self._fields + fields)

    def _log_fields(self, level: int, msg: str, fields: Tuple[Field, ...], kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        extra = dict(kwargs.pop("extra", None) or {})
        extra[FIELDS_ATTR] = self._fields + tuple(fields)
        # report the caller of debug()/info()/..., not this module
        kwargs.setdefault("stacklevel", 3)
        self.logger.log(level, msg, extra=extra, **kwargs)

    def log(self, level: int, msg: str, *fields: Field, **kwargs: Any) -> None:
        self._log_fields(level, msg, fields, kwargs)

    def debug(self, msg: str, *fields: Field, **kwargs: Any) -> None:
        self._log_fields(logging.DEBUG, msg, fields, kwargs)

    def info(self, msg: str, *fields: Field, **kwargs: Any) -> None:
        self._log_fields(logging.INFO, msg, fields, kwargs)

    def warning(self, msg: str, *fields: Field, **kwargs: Any) -> None:
        self._log_fields(logging.WARNING, msg, fields, kwargs)

    def error(self, msg: str, *fields: Field, **kwargs: Any) -> None:
        self._log_fields(logging.ERROR, msg, fields, kwargs)

    def exception(self, msg: str, *fields: Field, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log_fields(logging.ERROR, msg, fields, kwargs)

    def critical(self, msg: str, *fields: Field, **kwargs: Any) -> None:
        self._log_fields(logging.CRITICAL, msg, fields, kwargs)


def json_handler(
    stream: Optional[TextIO] = None,
    config: Optional[EncoderConfig] = None,
) -> logging.StreamHandler:
    """StreamHandler (stderr by default) writing JSON lines"""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JSONFormatter(config))
    return handler


def get_logger(name: str, *fields: Field) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name), fields)
