"""Partitioning of pending strings into provider-sized batches."""

from __future__ import annotations

from typing import List, Sequence

from .structures import Batch


class BatchBuilder:
    """Splits an ordered string list into consecutive chunks of at most ``batch_size``."""

    def __init__(self, batch_size: int) -> None:
        self.batch_size = max(1, batch_size)

    def build(self, strings: Sequence[str]) -> List[Batch]:
        batches: List[Batch] = []
        for batch_id, start in enumerate(range(0, len(strings), self.batch_size), start=1):
            batches.append(
                Batch(
                    batch_id=batch_id,
                    strings=list(strings[start:start + self.batch_size]),
                )
            )
        return batches
