"""
relatable.errors - Error taxonomy.

Builds either return a complete graph or raise one of these.
"""

from __future__ import annotations

from pathlib import Path


class RelatableError(Exception):
    """Generic descriptive failure."""


class TagFileError(RelatableError, OSError):
    """IO failure while scanning tag files.

    Raised for canonicalization, listing and read failures. The underlying
    exception is chained as ``__cause__``.

    Attributes:
        path: The path being processed when the failure occurred.
    """

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        message = self.args[0] if self.args else ""
        if self.path is not None:
            return f"{message}: {self.path}"
        return message


class ConfigError(RelatableError):
    """Malformed or invalid configuration."""
