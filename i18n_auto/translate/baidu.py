"""Baidu Translate backend (appid + secret key, md5-signed requests)."""

from __future__ import annotations

import hashlib
import time
from typing import Optional

import requests

from i18n_auto.errors import TranslationError
from i18n_auto.translate.base import (
    Translator,
    TranslationResult,
    TranslationContext,
)

ENDPOINT = "https://fanyi-api.baidu.com/api/trans/vip/translate"

# ISO 639-1 -> Baidu language codes
LANG_MAP = {
    "en": "en", "zh": "zh", "yue": "yue", "wyw": "wyw",
    "ja": "jp", "ko": "kor", "fr": "fra", "es": "spa",
    "th": "th", "ar": "ara", "ru": "ru", "pt": "pt",
    "de": "de", "it": "it", "el": "el", "nl": "nl",
    "pl": "pl", "bg": "bul", "et": "est", "da": "dan",
    "fi": "fin", "cs": "cs", "ro": "rom", "sl": "slo",
    "sv": "swe", "hu": "hu", "vi": "vie",
    "zh-tw": "cht",
}


def sign(appid: str, query: str, salt: str, secret_key: str) -> str:
    return hashlib.md5(f"{appid}{query}{salt}{secret_key}".encode("utf-8")).hexdigest()


class BaiduTranslator(Translator):
    """Baidu general translation API.

    One request per text; Baidu returns an ``error_code`` field instead of
    an HTTP error for auth and quota problems.
    """

    def __init__(self, appid: str, secret_key: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.appid = appid
        self.secret_key = secret_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "baidu"

    def translate(
        self,
        text: str,
        context: Optional[TranslationContext] = None,
    ) -> TranslationResult:
        context = context or TranslationContext()
        src = LANG_MAP.get(context.source_lang.lower().replace("_", "-"), context.source_lang)
        dest = LANG_MAP.get(context.target_lang.lower().replace("_", "-"), context.target_lang)
        salt = str(int(time.time() * 1000))

        try:
            response = self.session.post(
                ENDPOINT,
                data={
                    "q": text,
                    "from": src,
                    "to": dest,
                    "appid": self.appid,
                    "salt": salt,
                    "sign": sign(self.appid, text, salt, self.secret_key),
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TranslationError(f"Baidu request failed: {e}") from e

        if "trans_result" not in data:
            raise TranslationError(
                f"Baidu API error {data.get('error_code', '?')}: {data.get('error_msg', 'unknown error')}"
            )

        translated = "\n".join(item.get("dst", "") for item in data["trans_result"])
        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={"translator": self.name, "from": src, "to": dest},
        )
