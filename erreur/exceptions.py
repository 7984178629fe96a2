# erreur/exceptions.py
"""
Errors raised by erreur itself.

Serialization never fails for the supported field kinds, so the only
failures are configuration problems.
"""

from __future__ import annotations


class ErreurError(Exception):
    """Base class for errors raised by this package"""


class ConfigError(ErreurError, ValueError):
    """Encoder configuration could not be loaded or is malformed"""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
