"""Placeholder protection for text sent to translation providers."""

from __future__ import annotations

import re
from typing import Sequence

from .structures import MaskedString

PLACEHOLDER_PATTERN = re.compile(r"\[.*?\]|\{.*?\}")
TOKEN_PATTERN = re.compile(r"__\s*(\d+)\s*__")


def mask(text: str) -> MaskedString:
    """Replace bracketed and braced spans with positional ``__<i>__`` tokens."""

    variables: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        variables.append(match.group(0))
        return f"__{len(variables) - 1}__"

    masked_text = PLACEHOLDER_PATTERN.sub(_replace, text)
    return MaskedString(masked_text=masked_text, variables=variables)


def unmask(translated_text: str | None, variables: Sequence[str]) -> str:
    """Restore placeholders; tokens without a matching variable are kept as-is."""

    if not translated_text:
        return ""

    def _restore(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(variables) and variables[index]:
            return variables[index]
        return match.group(0)

    return TOKEN_PATTERN.sub(_restore, translated_text)
