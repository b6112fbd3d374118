"""Exception types raised by fenrir."""

from __future__ import annotations


class FenrirError(Exception):
    """Base class for every error fenrir raises on purpose."""


class ConfigurationError(FenrirError):
    """The run cannot start: bad roots, config file, or exclusion file."""


class RootWalkError(FenrirError):
    """A tree root could not be listed, so no inventory can be built."""

    def __init__(self, root: str, cause: Exception) -> None:
        self.root = root
        super().__init__(f"cannot walk tree root {root}: {cause}")
        self.__cause__ = cause


class FileReadError(FenrirError):
    """Wraps an OSError hit while reading a single file."""

    def __init__(self, path: str, operation: str, cause: Exception) -> None:
        self.path = path
        self.operation = operation
        super().__init__(f"{operation} failed for {path}: {cause}")
        self.__cause__ = cause
