"""Line classification and extraction of translatable script strings."""

from __future__ import annotations

import pathlib
import re
from typing import List, Sequence

from .memory import TranslationMemory
from .structures import ExtractedString, LineMatch, MatchKind, ScriptLine, trim

# Greedy: the captured literal runs to the last quote on the line.
DIALOGUE_PATTERN = re.compile(r'^([\s\ufeff]*(?:new|[\w]+)?[\s\ufeff]*)"(.*)"')
COMMENT_PATTERN = re.compile(r'#[\s\ufeff]*"(.*)"')

EXCLUDED_PREFIXES = ("old", "#")

LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def split_script(content: str) -> List[ScriptLine]:
    """Split file content on ``\\r?\\n`` into indexed script lines."""

    return [
        ScriptLine(index=idx, text=text)
        for idx, text in enumerate(LINE_BREAK_PATTERN.split(content))
    ]


def read_script_lines(path: pathlib.Path) -> List[ScriptLine]:
    """Read a script file as UTF-8 without newline translation."""

    with path.open("r", encoding="utf-8", newline="") as handle:
        return split_script(handle.read())


def classify_line(line: ScriptLine, previous: ScriptLine | None = None) -> LineMatch:
    """Classify one line; both extraction and rewriting go through here.

    A blank quoted literal directly under a ``#`` line takes its text from
    the first quoted span of that comment.
    """

    match = DIALOGUE_PATTERN.match(line.text)
    if not match:
        return LineMatch(MatchKind.NO_MATCH)

    stripped = trim(line.text)
    if stripped.startswith(EXCLUDED_PREFIXES):
        return LineMatch(MatchKind.EXCLUDED)

    prefix, literal = match.group(1), match.group(2)
    if not trim(literal) and previous is not None:
        if trim(previous.text).startswith("#"):
            comment = COMMENT_PATTERN.search(previous.text)
            if comment:
                literal = comment.group(1)

    return LineMatch(
        MatchKind.TRANSLATABLE,
        ExtractedString(literal=literal, prefix=prefix, line_index=line.index),
    )


def iter_matches(lines: Sequence[ScriptLine]) -> List[LineMatch]:
    """Classify every line in order, each against its predecessor."""

    matches: List[LineMatch] = []
    for position, line in enumerate(lines):
        previous = lines[position - 1] if position > 0 else None
        matches.append(classify_line(line, previous))
    return matches


def extract_pending(
    lines: Sequence[ScriptLine],
    memory: TranslationMemory,
) -> List[str]:
    """Return distinct non-blank literals missing from memory, first-seen order."""

    pending: List[str] = []
    seen: set[str] = set()
    for result in iter_matches(lines):
        if not result.translatable:
            continue
        literal = result.extracted.literal  # type: ignore[union-attr]
        if literal in seen or memory.has(literal):
            continue
        seen.add(literal)
        pending.append(literal)
    return pending
