"""Error definitions for the script translator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categorises recoverable errors for reporting."""

    FILE_IO = auto()
    TRANSLATION = auto()
    MEMORY = auto()
    OTHER = auto()


class VNTranslateError(Exception):
    """Base exception for all custom errors."""


class OutputDirectoryError(VNTranslateError):
    """Raised when the job's output directories cannot be created."""


class NoScriptFilesError(VNTranslateError):
    """Raised when the source folder holds no script files."""


class TranslationMemoryError(VNTranslateError):
    """Raised when the translation memory cannot be persisted."""


class TranslationProviderConfigurationError(VNTranslateError):
    """Raised when the translation provider is misconfigured."""


class TranslationProviderError(VNTranslateError):
    """Raised when a translation provider call fails."""


@dataclass
class ErrorRecord:
    """Stores context for a handled error."""

    category: ErrorCategory
    message: str
    details: Optional[str] = None
