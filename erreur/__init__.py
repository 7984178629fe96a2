# erreur/__init__.py
"""
erreur - structured errors with context fields and fast JSON serialization

Quick Start:
    >>> import erreur
    >>> conn_err = erreur.new("connection error", erreur.integer("code", 1234), addr="example.com")
    >>> conn_err.json()
    '{"msg":"connection error","code":1234,"addr":"example.com"}'

Logging:
    >>> import logging, sys
    >>> logging.getLogger().addHandler(erreur.json_handler(sys.stdout))
    >>> log = erreur.get_logger("app")
    >>> log.error("failed to load data", erreur.log_field(conn_err))
    # {"level":"error",...,"msg":"failed to load data","error":{"msg":"connection error","code":1234,"addr":"example.com"}}
"""

__version__ = "0.1.0"

from .structured import (
    Structured,
    StringError,
    structure,
    new,
    wrap,
    as_structured,
    is_structured,
    log_field,
    unwrap,
)
from .fields import (
    Field,
    FieldKind,
    ObjectEncoder,
    ObjectMarshaler,
    string,
    integer,
    floating,
    boolean,
    obj,
    error,
    skip,
    infer,
)
from .encoder import JSONEncoder, MapObjectEncoder, LogEntry
from .config import (
    EncoderConfig,
    JSON_DOCUMENT_CONFIG,
    production_encoder_config,
    example_encoder_config,
    load_encoder_config,
)
from .logfmt import JSONFormatter, StructuredLogger, json_handler, get_logger
from .exceptions import ErreurError, ConfigError

__all__ = [
    "__version__",

    # Errors
    "Structured",
    "StringError",
    "structure",
    "new",
    "wrap",
    "as_structured",
    "is_structured",
    "log_field",
    "unwrap",

    # Fields
    "Field",
    "FieldKind",
    "ObjectEncoder",
    "ObjectMarshaler",
    "string",
    "integer",
    "floating",
    "boolean",
    "obj",
    "error",
    "skip",
    "infer",

    # Encoding
    "JSONEncoder",
    "MapObjectEncoder",
    "LogEntry",
    "EncoderConfig",
    "JSON_DOCUMENT_CONFIG",
    "production_encoder_config",
    "example_encoder_config",
    "load_encoder_config",

    # Logging
    "JSONFormatter",
    "StructuredLogger",
    "json_handler",
    "get_logger",

    # Package errors
    "ErreurError",
    "ConfigError",
]
