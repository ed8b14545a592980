"""
Free Google translator using the anonymous translate.googleapis.com endpoint.

No API key is required, but the endpoint is rate limited and unofficial:
it may change or start refusing requests. Texts of one batch are sent
concurrently and the batch only returns once every request has finished.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests

from i18n_auto.errors import TranslationError
from i18n_auto.translate.base import (
    Translator,
    TranslationResult,
    TranslationContext,
)

ENDPOINT = "https://translate.googleapis.com/translate_a/single"


class GoogleFreeTranslator(Translator):
    """Free Google Translate.

    Usage:
        translator = GoogleFreeTranslator()
        result = translator.translate("你好", TranslationContext(target_lang="en"))
    """

    def __init__(self, timeout: float = 10.0, max_workers: int = 20, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.max_workers = max_workers
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "google-free"

    def translate(
        self,
        text: str,
        context: Optional[TranslationContext] = None,
    ) -> TranslationResult:
        """Translate text using Google Translate (free).

        Raises:
            TranslationError: On network errors, timeouts or malformed responses
        """
        context = context or TranslationContext()
        src_lang = self._normalize_lang(context.source_lang)
        dest_lang = self._normalize_lang(context.target_lang)

        try:
            response = self.session.get(
                ENDPOINT,
                params={"client": "gtx", "sl": src_lang, "tl": dest_lang, "dt": "t", "q": text},
                headers={"User-Agent": "Mozilla/5.0"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
            # data[0] is a list of segments: [[translated, original, ...], ...]
            segments = data[0] or []
            translated = "".join(seg[0] for seg in segments if seg and seg[0])
        except (requests.RequestException, ValueError, TypeError, IndexError) as e:
            raise TranslationError(f"Google Free translation failed: {e}") from e

        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={
                "translator": self.name,
                "src_lang": src_lang,
                "dest_lang": dest_lang,
            },
        )

    def translate_batch(
        self,
        texts: list[str],
        context: Optional[TranslationContext] = None,
    ) -> list[TranslationResult]:
        if not texts:
            return []
        workers = max(1, min(self.max_workers, len(texts)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(lambda t: self.translate(t, context), texts))

    def _normalize_lang(self, lang: str) -> str:
        """Normalize language code for Google (zh -> zh-CN, zh_TW -> zh-TW)."""
        lang = lang.strip().replace("_", "-")
        lang_map = {
            "zh": "zh-CN",
            "zh-cn": "zh-CN",
            "zh-hans": "zh-CN",
            "zh-tw": "zh-TW",
            "zh-hant": "zh-TW",
        }
        return lang_map.get(lang.lower(), lang)
