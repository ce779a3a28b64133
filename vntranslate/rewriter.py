"""Rewrite script lines using cached translations."""

from __future__ import annotations

from typing import List, Sequence

from .extractor import iter_matches
from .memory import TranslationMemory
from .structures import ScriptLine


def rewrite_lines(
    lines: Sequence[ScriptLine],
    memory: TranslationMemory,
) -> List[str]:
    """Replace each translatable line whose literal is cached; keep the rest verbatim."""

    output: List[str] = []
    for line, result in zip(lines, iter_matches(lines)):
        if not result.translatable:
            output.append(line.text)
            continue
        extracted = result.extracted
        translated = memory.lookup(extracted.literal)  # type: ignore[union-attr]
        if translated is None:
            output.append(line.text)
            continue
        output.append(f'{extracted.prefix}"{translated}"')  # type: ignore[union-attr]
    return output


def render_script(lines: Sequence[str]) -> str:
    """Join rewritten lines with ``\\n``."""

    return "\n".join(lines)
