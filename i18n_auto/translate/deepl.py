"""DeepL backend built on the official ``deepl`` SDK (one request per batch)."""

from __future__ import annotations

from typing import Optional

import deepl

from i18n_auto.errors import TranslationError
from i18n_auto.translate.base import (
    Translator,
    TranslationResult,
    TranslationContext,
)

FREE_SERVER = "https://api-free.deepl.com"
PRO_SERVER = "https://api.deepl.com"

# DeepL expects upper-case codes; a few targets need a regional variant
TARGET_OVERRIDES = {
    "EN": "EN-US",
    "PT": "PT-BR",
    "ZH-TW": "ZH-HANT",
}


class DeepLTranslator(Translator):
    """DeepL translator.

    ``is_pro`` selects the paid API host; free keys use the free host.
    """

    def __init__(self, auth_key: str, is_pro: bool = False, client: Optional[deepl.Translator] = None):
        self.server_url = PRO_SERVER if is_pro else FREE_SERVER
        self._client = client or deepl.Translator(auth_key, server_url=self.server_url)

    @property
    def name(self) -> str:
        return "deepl"

    def _target(self, lang: str) -> str:
        code = lang.upper().replace("_", "-")
        return TARGET_OVERRIDES.get(code, code)

    def translate(
        self,
        text: str,
        context: Optional[TranslationContext] = None,
    ) -> TranslationResult:
        return self.translate_batch([text], context)[0]

    def translate_batch(
        self,
        texts: list[str],
        context: Optional[TranslationContext] = None,
    ) -> list[TranslationResult]:
        """Translate all ``texts`` in a single request."""
        if not texts:
            return []
        context = context or TranslationContext()
        source = context.source_lang.upper().split("-")[0].split("_")[0]
        target = self._target(context.target_lang)

        try:
            translations = self._client.translate_text(texts, source_lang=source, target_lang=target)
        except deepl.DeepLException as e:
            raise TranslationError(f"DeepL request failed: {e}") from e

        if len(translations) != len(texts):
            raise TranslationError(
                f"DeepL returned {len(translations)} translations for {len(texts)} texts"
            )

        return [
            TranslationResult(
                text=item.text,
                source_text=text,
                metadata={"translator": self.name, "target_lang": target},
            )
            for text, item in zip(texts, translations)
        ]
