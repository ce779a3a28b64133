from __future__ import annotations

import pathlib
from typing import List, Sequence

import pytest

from vntranslate.errors import TranslationProviderError
from vntranslate.events import EventSink, Severity
from vntranslate.providers import TranslationProvider


class UppercaseProvider(TranslationProvider):
    """Deterministic stub that uppercases every text and records each call."""

    name = "uppercase"

    def __init__(self) -> None:
        self.calls: List[List[str]] = []

    def translate(self, texts: Sequence[str], *, target_language: str) -> List[str]:
        self.calls.append(list(texts))
        return [text.upper() for text in texts]

    @property
    def sent(self) -> List[str]:
        return [text for call in self.calls for text in call]


class FailingProvider(UppercaseProvider):
    """Fails on the call numbers listed in ``fail_on`` (1-based); all calls if empty."""

    def __init__(self, fail_on: Sequence[int] = ()) -> None:
        super().__init__()
        self.fail_on = set(fail_on)

    def translate(self, texts: Sequence[str], *, target_language: str) -> List[str]:
        self.calls.append(list(texts))
        if not self.fail_on or len(self.calls) in self.fail_on:
            raise TranslationProviderError("service unavailable")
        return [text.upper() for text in texts]


class RecordingSink(EventSink):
    def __init__(self) -> None:
        self.logs: list[tuple[str, Severity]] = []
        self.progress_values: list[float] = []
        self.summaries: list = []

    def log(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.logs.append((message, severity))

    def progress(self, percent: float) -> None:
        self.progress_values.append(percent)

    def done(self, summary) -> None:
        self.summaries.append(summary)

    def messages(self, severity: Severity) -> list[str]:
        return [message for message, level in self.logs if level is severity]


@pytest.fixture
def uppercase_provider() -> UppercaseProvider:
    return UppercaseProvider()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def game_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    folder = tmp_path / "game"
    folder.mkdir()
    return folder


def write_script(folder: pathlib.Path, relative: str, lines: Sequence[str], newline: str = "\n") -> pathlib.Path:
    path = folder / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(newline.join(lines).encode("utf-8"))
    return path
