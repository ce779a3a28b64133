"""Persistent translation memory."""

from __future__ import annotations

import json
import pathlib
from typing import Dict, Iterator, Mapping

from .errors import TranslationMemoryError


class TranslationMemory:
    """Maps an exact original string to its cached translation.

    Keys are stored untrimmed. An entry whose translation is empty counts as
    missing, so it is queued again and never used for rewriting.
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: Dict[str, str] = dict(entries or {})

    @classmethod
    def load(cls, path: pathlib.Path) -> "TranslationMemory":
        """Read a JSON object from ``path``; missing or corrupt files yield an empty memory."""

        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls(
            {
                key: value
                for key, value in data.items()
                if isinstance(key, str) and isinstance(value, str)
            }
        )

    def save(self, path: pathlib.Path) -> None:
        """Overwrite ``path`` with the memory as pretty-printed JSON."""

        try:
            if path.parent and not path.parent.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps(self._entries, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise TranslationMemoryError(
                f"Translation memory could not be saved to {path}: {exc}"
            ) from exc

    def has(self, key: str) -> bool:
        return bool(self._entries.get(key))

    def lookup(self, key: str) -> str | None:
        value = self._entries.get(key)
        return value or None

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
