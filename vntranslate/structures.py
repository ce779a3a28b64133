"""Core data structures for the script translator."""

from __future__ import annotations

import pathlib
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List

# Whitespace plus the UTF-8 byte order mark, which editors leave on line 0.
EDGE_SPACE_PATTERN = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def trim(text: str) -> str:
    """Strip whitespace and byte order marks from both ends."""

    return EDGE_SPACE_PATTERN.sub("", text)


class MatchKind(Enum):
    """Outcome of classifying a single script line."""

    NO_MATCH = "no_match"
    EXCLUDED = "excluded"
    TRANSLATABLE = "translatable"


@dataclass(frozen=True)
class ScriptLine:
    """A single line of a script file."""

    index: int
    text: str


@dataclass(frozen=True)
class ExtractedString:
    """A quoted string found on a line, with the prefix preceding its quote."""

    literal: str
    prefix: str
    line_index: int

    @property
    def is_blank(self) -> bool:
        return not trim(self.literal)


@dataclass(frozen=True)
class LineMatch:
    """Tagged classification result shared by extraction and rewriting."""

    kind: MatchKind
    extracted: ExtractedString | None = None

    @property
    def translatable(self) -> bool:
        return (
            self.kind is MatchKind.TRANSLATABLE
            and self.extracted is not None
            and not self.extracted.is_blank
        )


@dataclass(frozen=True)
class MaskedString:
    """Text with placeholders replaced by ``__<i>__`` tokens."""

    masked_text: str
    variables: List[str] = field(default_factory=list)


@dataclass
class Batch:
    """A chunk of pending strings sent to the provider in one call."""

    batch_id: int
    strings: List[str]


@dataclass(frozen=True)
class Job:
    """One run over a source folder."""

    job_id: str
    source_folder: pathlib.Path
    target_language: str
    batch_size: int
    output_root: pathlib.Path

    @property
    def original_dir(self) -> pathlib.Path:
        return self.output_root / "Original" / self.job_id

    @property
    def translated_dir(self) -> pathlib.Path:
        return self.output_root / "Translated" / self.job_id
