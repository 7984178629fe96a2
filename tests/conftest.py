# tests/conftest.py
"""Shared fixtures for erreur tests."""

from __future__ import annotations

import io
import itertools
import logging
from typing import Generator

import pytest

from erreur import StringError, example_encoder_config, integer, json_handler, new, string, wrap

_logger_ids = itertools.count()


@pytest.fixture
def conn_err():
    return new("connection error", integer("code", 1234), string("addr", "example.com"))


@pytest.fixture
def file_err():
    """Two-level chain over a plain string error"""
    err = wrap(StringError("insufficient permissions"), "writing to file failed", string("fileName", "someFile"))
    return wrap(err, "failed to flush db", string("fieldThatGoes", "ping"))


@pytest.fixture
def log_capture() -> Generator[tuple[logging.Logger, io.StringIO], None, None]:
    """Isolated logger writing JSON lines (level + msg only) into a buffer"""
    stream = io.StringIO()
    logger = logging.getLogger(f"erreur.tests.{next(_logger_ids)}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = json_handler(stream, example_encoder_config())
    logger.addHandler(handler)
    try:
        yield logger, stream
    finally:
        logger.removeHandler(handler)
