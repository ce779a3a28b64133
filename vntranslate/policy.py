"""Error handling policy implementation."""

from __future__ import annotations

from typing import List, Optional

from .errors import ErrorCategory, ErrorRecord
from .events import EventSink, Severity


class ErrorPolicy:
    """Records recoverable errors and reports them; the run always continues."""

    def __init__(self, sink: EventSink) -> None:
        self.sink = sink
        self.records: List[ErrorRecord] = []

    def handle_error(
        self,
        category: ErrorCategory,
        message: str,
        details: Optional[str] = None,
    ) -> None:
        self.records.append(ErrorRecord(category=category, message=message, details=details))
        self.sink.log(message, Severity.ERROR)

    def count(self, category: ErrorCategory | None = None) -> int:
        if category is None:
            return len(self.records)
        return sum(1 for record in self.records if record.category is category)
