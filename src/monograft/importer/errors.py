"""Errors raised and warnings collected by the import pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class MonograftError(Exception):
    """Base class for every error monograft raises on purpose."""


class ValidationFailure(enum.Enum):
    """Which precondition an import failed."""

    SOURCE_MISSING = "source-missing"
    SOURCE_NOT_DIRECTORY = "source-not-directory"
    NO_CONFIG = "no-recognized-config"
    MANIFEST_MISSING = "manifest-missing"
    MANIFEST_INVALID = "manifest-unparsable"
    MISSING_DEPENDENCY = "missing-expected-dependency"
    INVALID_NAME = "invalid-name-syntax"
    NAME_TAKEN = "name-already-registered"
    DESTINATION_OCCUPIED = "destination-already-occupied"
    INVALID_DESTINATION = "destination-outside-workspace"


class ValidationError(MonograftError, ValueError):
    """A precondition failed before anything was written."""

    def __init__(self, kind: ValidationFailure, value: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.value = value


class ExtractionError(MonograftError):
    """The source manifest could not be read for dependency extraction."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class CopyError(MonograftError, FileNotFoundError):
    """The copy root vanished between validation and copy."""


@dataclass(frozen=True)
class CopyWarning:
    """A single file that could not be copied."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"Could not copy file {self.path}: {self.reason}"
