"""Masked batch translation into the translation memory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .batching import BatchBuilder
from .errors import ErrorCategory, TranslationProviderError
from .masking import mask, unmask
from .memory import TranslationMemory
from .policy import ErrorPolicy
from .providers import TranslationProvider, normalise_results
from .structures import Batch


@dataclass
class BatchOutcome:
    """Counts for one file's translation pass."""

    batches: int = 0
    failed_batches: int = 0
    translated: int = 0


class BatchTranslator:
    """Sends pending strings to the provider chunk by chunk and caches the results."""

    def __init__(
        self,
        *,
        provider: TranslationProvider,
        memory: TranslationMemory,
        target_language: str,
        batch_size: int,
        error_policy: ErrorPolicy,
    ) -> None:
        self.provider = provider
        self.memory = memory
        self.target_language = target_language
        self.batch_builder = BatchBuilder(batch_size)
        self.error_policy = error_policy

    def translate(self, strings: Sequence[str], *, file_label: str) -> BatchOutcome:
        outcome = BatchOutcome()
        for batch in self.batch_builder.build(strings):
            outcome.batches += 1
            try:
                outcome.translated += self._translate_batch(batch)
            except TranslationProviderError as exc:
                outcome.failed_batches += 1
                self.error_policy.handle_error(
                    ErrorCategory.TRANSLATION,
                    f"Translation failed in {file_label} (batch {batch.batch_id}): {exc}",
                    details=", ".join(batch.strings),
                )
        return outcome

    def _translate_batch(self, batch: Batch) -> int:
        masked = [mask(text) for text in batch.strings]
        try:
            raw = self.provider.translate(
                [item.masked_text for item in masked],
                target_language=self.target_language,
            )
        except TranslationProviderError:
            raise
        except Exception as exc:
            raise TranslationProviderError(str(exc) or exc.__class__.__name__) from exc

        results = normalise_results(raw)
        if len(results) != len(batch.strings):
            raise TranslationProviderError(
                f"expected {len(batch.strings)} results, received {len(results)}"
            )

        for original, item, translated in zip(batch.strings, masked, results):
            self.memory.set(original, unmask(translated, item.variables))
        return len(results)
