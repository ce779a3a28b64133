"""Translation provider abstractions."""

from __future__ import annotations

import json
import os
import sys
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Sequence

from .errors import (
    TranslationProviderConfigurationError,
    TranslationProviderError,
)


def normalise_results(results: Any) -> List[str]:
    """Coerce provider output to a list of strings; a bare value becomes a one-item list."""

    if results is None:
        return []
    if isinstance(results, (str, bytes)) or not isinstance(results, (list, tuple)):
        results = [results]
    normalised: List[str] = []
    for item in results:
        text = getattr(item, "text", item)
        normalised.append("" if text is None else str(text))
    return normalised


class TranslationProvider(ABC):
    """Abstract adapter for batch translation services."""

    name = "provider"

    @abstractmethod
    def translate(
        self,
        texts: Sequence[str],
        *,
        target_language: str,
    ) -> List[str]:
        """Translate ``texts`` and return results in the same order."""


class EchoTranslationProvider(TranslationProvider):
    """A provider that returns the original text (useful for testing)."""

    name = "echo"

    def translate(
        self,
        texts: Sequence[str],
        *,
        target_language: str,
    ) -> List[str]:
        return list(texts)


class GoogleTranslationProvider(TranslationProvider):
    """Free Google Translate endpoint through deep-translator."""

    name = "google"

    def __init__(self, *, source_language: str = "auto", debug: bool = False) -> None:
        self.source_language = source_language
        self.debug = debug
        try:
            from deep_translator import GoogleTranslator  # type: ignore
        except ImportError as exc:  # pragma: no cover - import guard
            raise TranslationProviderConfigurationError(
                "deep-translator not installed. Install with `pip install deep-translator`."
            ) from exc
        self._translator_cls = GoogleTranslator

    def translate(
        self,
        texts: Sequence[str],
        *,
        target_language: str,
    ) -> List[str]:
        if not texts:
            return []
        _log_debug(self.debug, "provider.request.texts", list(texts))
        try:
            translator = self._translator_cls(
                source=self.source_language,
                target=target_language,
            )
            if len(texts) == 1:
                raw = translator.translate(texts[0])
            else:
                raw = translator.translate_batch(list(texts))
        except Exception as exc:  # pragma: no cover - network call
            raise TranslationProviderError(
                f"Translation service unavailable: {exc}"
            ) from exc
        results = normalise_results(raw)
        _log_debug(self.debug, "provider.response.texts", results)
        return results


class OpenAITranslationProvider(TranslationProvider):
    """Translation provider that uses OpenAI (or Azure OpenAI) chat models."""

    name = "openai"
    DEFAULT_MODEL = "gpt-4o-mini"

    SYSTEM_PROMPT = (
        "You translate dialogue lines from a visual novel script. Return only JSON. "
        "Translate every item into the requested language. "
        "Tokens shaped like __0__, __1__ are placeholders: copy them unchanged. "
        "Keep Ren'Py text tags such as {b} and escape sequences such as \\n as written. "
        'Respond strictly with an object shaped as {"translations": [{"id": "...", '
        '"translated": "..."}]}, one entry per input id. '
        "Do not add commentary. Do not wrap the JSON in markdown code fences."
    )

    def __init__(
        self,
        *,
        kind: str = "openai",
        model: str | None = None,
        debug: bool = False,
        credentials: Mapping[str, str | None] | None = None,
    ) -> None:
        self.kind = kind
        self.debug = debug
        self.credentials = dict(credentials or {})
        self._client, default_model = (
            self._build_azure_client() if kind == "azure_openai" else self._build_openai_client()
        )
        self.model = model or default_model

    def _setting(self, name: str) -> str | None:
        """Configured value first, process environment as the fallback."""

        return self.credentials.get(name) or os.getenv(name)

    def _build_openai_client(self) -> tuple[Any, str]:
        api_key = self._setting("OPENAI_API_KEY")
        if not api_key:
            raise TranslationProviderConfigurationError(
                "OpenAI configuration missing. Set OPENAI_API_KEY or choose a "
                "different provider."
            )
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as exc:  # pragma: no cover - import guard
            raise TranslationProviderConfigurationError(
                "OpenAI Python SDK not installed. Install with `pip install openai`."
            ) from exc

        return OpenAI(api_key=api_key), self._setting("OPENAI_MODEL") or self.DEFAULT_MODEL

    def _build_azure_client(self) -> tuple[Any, str]:
        settings = {
            name: self._setting(name)
            for name in (
                "AZURE_OPENAI_API_KEY",
                "AZURE_OPENAI_ENDPOINT",
                "AZURE_OPENAI_API_VERSION",
                "AZURE_OPENAI_DEPLOYMENT_NAME",
            )
        }
        missing = [name for name, value in settings.items() if not value]
        if missing:
            raise TranslationProviderConfigurationError(
                "Azure OpenAI configuration incomplete. Please set: "
                + ", ".join(missing)
                + "."
            )
        try:
            from openai import AzureOpenAI  # type: ignore
        except ImportError as exc:  # pragma: no cover - import guard
            raise TranslationProviderConfigurationError(
                "OpenAI Python SDK not installed. Install with `pip install openai`."
            ) from exc

        client = AzureOpenAI(
            api_key=settings["AZURE_OPENAI_API_KEY"],
            api_version=settings["AZURE_OPENAI_API_VERSION"],
            azure_endpoint=settings["AZURE_OPENAI_ENDPOINT"],
        )
        return client, settings["AZURE_OPENAI_DEPLOYMENT_NAME"]  # type: ignore[return-value]

    def translate(
        self,
        texts: Sequence[str],
        *,
        target_language: str,
    ) -> List[str]:
        if not texts:
            return []

        payload = {
            "target_language": target_language,
            "items": [{"id": str(idx), "text": text} for idx, text in enumerate(texts)],
        }
        _log_debug(self.debug, "provider.request.payload", payload)

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                temperature=0,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
                ],
            )
        except Exception as exc:  # pragma: no cover - network call
            raise TranslationProviderError(
                f"Translation service temporarily unavailable: {exc}"
            ) from exc

        content = self._message_content(response)
        _log_debug(self.debug, "provider.response.content", content)
        return self._parse_translations(content, len(texts))

    def _message_content(self, response: Any) -> str:
        for choice in getattr(response, "choices", None) or []:
            message = getattr(choice, "message", None)
            content = getattr(message, "content", None)
            if content:
                return str(content)
        raise TranslationProviderError(
            "Translation provider response empty or unrecognised."
        )

    def _parse_translations(self, content: str, expected: int) -> List[str]:
        try:
            parsed = json.loads(strip_code_fence(content))
        except json.JSONDecodeError as exc:
            raise TranslationProviderError(
                f"Translation provider returned invalid JSON: {exc}"
            ) from exc

        items = parsed.get("translations") if isinstance(parsed, dict) else parsed
        if not isinstance(items, list):
            raise TranslationProviderError(
                "Translation provider response malformed: could not find translations list."
            )

        mapping: dict[str, str] = {}
        for item in items:
            if not isinstance(item, dict):
                raise TranslationProviderError(
                    "Translation provider response malformed: expected objects."
                )
            item_id = item.get("id")
            translated = item.get("translated")
            if item_id is None or not isinstance(translated, str):
                raise TranslationProviderError(
                    "Translation provider response malformed: missing fields."
                )
            mapping[str(item_id)] = translated

        missing = [str(idx) for idx in range(expected) if str(idx) not in mapping]
        if missing:
            raise TranslationProviderError(
                "Translation provider omitted items: " + ", ".join(missing)
            )
        return [mapping[str(idx)] for idx in range(expected)]


def strip_code_fence(text: str) -> str:
    """Remove leading/trailing markdown code fences if present."""

    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped

    # Drop opening fence and optional language hint.
    first_newline = stripped.find("\n")
    if first_newline == -1:
        return stripped
    body = stripped[first_newline + 1 :]
    closing_index = body.rfind("```")
    if closing_index != -1:
        body = body[:closing_index]
    return body.strip()


def _log_debug(enabled: bool, label: str, payload: Any) -> None:
    """Emit structured debug information when enabled."""

    if not enabled:
        return
    try:
        if isinstance(payload, (dict, list)):
            message = json.dumps(payload, ensure_ascii=False, indent=2)
        else:
            message = str(payload)
    except (TypeError, ValueError):
        message = repr(payload)
    print(f"[vntranslate][provider-debug] {label}:\n{message}", file=sys.stderr)


def build_provider(
    name: str | None,
    *,
    model: str | None = None,
    debug: bool = False,
    credentials: Mapping[str, str | None] | None = None,
) -> TranslationProvider:
    """Factory to create providers by name; ``credentials`` override the environment."""

    normalized = (name or "google").strip().lower().replace("-", "_")
    if normalized in {"google", "google_translate", "default"}:
        return GoogleTranslationProvider(debug=debug)
    if normalized in {"openai", "gpt"}:
        return OpenAITranslationProvider(
            kind="openai", model=model, debug=debug, credentials=credentials
        )
    if normalized in {"azure_openai", "azure_open_ai", "azureopenai", "azure"}:
        return OpenAITranslationProvider(
            kind="azure_openai", model=model, debug=debug, credentials=credentials
        )
    if normalized in {"echo", "noop", "mock"}:
        return EchoTranslationProvider()
    raise TranslationProviderConfigurationError(
        f"Unknown translation provider '{name}'."
    )
