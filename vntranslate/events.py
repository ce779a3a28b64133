"""Notifications pushed from a running job to the surrounding shell."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .translator import JobSummary


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class EventSink(ABC):
    """One-way receiver for log, progress and completion notifications."""

    @abstractmethod
    def log(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Receive a log message tagged with a severity."""

    @abstractmethod
    def progress(self, percent: float) -> None:
        """Receive overall progress as a percentage of processed files."""

    @abstractmethod
    def done(self, summary: "JobSummary") -> None:
        """Receive the run-complete signal."""


class NullEventSink(EventSink):
    """Discards every notification."""

    def log(self, message: str, severity: Severity = Severity.INFO) -> None:
        return None

    def progress(self, percent: float) -> None:
        return None

    def done(self, summary: "JobSummary") -> None:
        return None


class ConsoleEventSink(EventSink):
    """Prints notifications; errors go to stderr, progress only when verbose."""

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    def log(self, message: str, severity: Severity = Severity.INFO) -> None:
        stream = sys.stderr if severity is Severity.ERROR else sys.stdout
        print(f"[{severity.value}] {message}", file=stream)

    def progress(self, percent: float) -> None:
        if self.verbose:
            print(f"Progress: {percent:.1f}%")

    def done(self, summary: "JobSummary") -> None:
        if self.verbose:
            print(f"Job {summary.job_id} finished.")
