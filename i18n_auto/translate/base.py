"""
Base translator interface and implementations.

This module defines:
- Abstract Translator interface that all backends implement
- DummyTranslator for testing and dry runs (echo or simple transformations)
- create_translator factory that builds a configured backend by name

Design Philosophy:
- Translators are stateless: they receive the language pair in each call
- translate_batch() returns exactly one result per input, in input order
- A backend may raise on failure; the catalog generator falls back to the
  source text for the whole batch
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from i18n_auto.config import I18nConfig


@dataclass
class TranslationResult:
    """Result of a translation operation.

    Attributes:
        text: The translated text
        source_text: Original source text
        metadata: Additional info (backend, language codes, ...)
    """
    text: str
    source_text: str
    metadata: dict = field(default_factory=dict)


@dataclass
class TranslationContext:
    """Language pair passed to every translation call."""
    source_lang: str = "zh"
    target_lang: str = "en"


class Translator(ABC):
    """Abstract base class for all translation backends.

    All translators must implement:
    - translate(): Translate a single text
    - translate_batch(): Translate several texts (can be overridden for efficiency)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the translator name (e.g., 'google', 'deepl', 'dummy')."""
        pass

    @abstractmethod
    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        """Translate a single text.

        Args:
            text: Source text to translate
            context: Language pair (defaults to zh -> en)

        Returns:
            TranslationResult with translation and metadata
        """
        pass

    def translate_batch(
        self,
        texts: list[str],
        context: TranslationContext | None = None,
    ) -> list[TranslationResult]:
        """Translate several texts.

        Default implementation calls translate() in a loop.
        Override for backends that support batching.
        """
        return [self.translate(text, context) for text in texts]


class DummyTranslator(Translator):
    """A dummy translator for testing.

    Modes:
    - 'echo': Return the input unchanged
    - 'upper': Return uppercase version
    - 'prefix': Add [<target>] prefix
    """

    def __init__(self, mode: str = "prefix"):
        self.mode = mode

    @property
    def name(self) -> str:
        return f"dummy-{self.mode}"

    def translate(
        self,
        text: str,
        context: TranslationContext | None = None,
    ) -> TranslationResult:
        context = context or TranslationContext()
        if self.mode == "echo":
            translated = text
        elif self.mode == "upper":
            translated = text.upper()
        else:  # prefix
            translated = f"[{context.target_lang}] {text}"

        return TranslationResult(
            text=translated,
            source_text=text,
            metadata={"translator": self.name, "mode": self.mode},
        )


BACKENDS = ("google", "baidu", "deepl", "dummy")

# Accepted spellings -> canonical backend name
BACKEND_ALIASES = {
    "dummy": "dummy",
    "echo": "dummy",
    "test": "dummy",
    "google": "google",
    "googlefree": "google",
    "google-free": "google",
    "free": "google",
    "baidu": "baidu",
    "deepl": "deepl",
}


def resolve_backend(backend: str) -> str:
    """Canonical name for ``backend``.

    Raises:
        ValueError: If the name is not a known backend
    """
    name = BACKEND_ALIASES.get(backend.lower().replace("_", "-"))
    if name is None:
        raise ValueError(
            f"Unknown translator backend: {backend}. "
            f"Available backends: {', '.join(BACKENDS)}"
        )
    return name


def available_backends(config: "I18nConfig") -> list[str]:
    """Backends usable with the current configuration and stored keys."""
    from i18n_auto.keys import KeyManager

    keys = KeyManager(config)
    available = []
    if config.free_google:
        available.append("google")
    if keys.get_key("baidu_appid") and keys.get_key("baidu_secret"):
        available.append("baidu")
    if keys.get_key("deepl"):
        available.append("deepl")
    return available


def create_translator(backend: str, config: Optional["I18nConfig"] = None, **kwargs) -> Translator:
    """Factory function to create a translator by name.

    Args:
        backend: Translator backend name
        config: Project configuration (credentials for baidu/deepl)
        **kwargs: Backend-specific arguments

    Returns:
        Configured Translator instance

    Supported backends and aliases:
        - google, googlefree, free: Free Google Translate endpoint (no key)
        - baidu: Baidu Translate (appid + secret key)
        - deepl: DeepL (auth key; free or pro endpoint)
        - dummy, echo, test: Offline test translator
    """
    name = resolve_backend(backend)

    if name == "dummy":
        mode = kwargs.get("mode", "echo" if backend.lower() == "echo" else "prefix")
        return DummyTranslator(mode=mode)

    elif name == "google":
        from i18n_auto.translate.google_free import GoogleFreeTranslator
        return GoogleFreeTranslator(timeout=kwargs.get("timeout", 10.0))

    elif name == "baidu":
        from i18n_auto.keys import require_key
        from i18n_auto.translate.baidu import BaiduTranslator
        return BaiduTranslator(
            appid=kwargs.get("appid") or require_key("baidu_appid", config),
            secret_key=kwargs.get("secret_key") or require_key("baidu_secret", config),
            timeout=kwargs.get("timeout", 10.0),
        )

    elif name == "deepl":
        from i18n_auto.keys import require_key
        from i18n_auto.translate.deepl import DeepLTranslator
        is_pro = kwargs.get("is_pro")
        if is_pro is None:
            is_pro = bool(config.deepl.get("isPro")) if config is not None else False
        return DeepLTranslator(
            auth_key=kwargs.get("auth_key") or require_key("deepl", config),
            is_pro=is_pro,
        )

    raise ValueError(f"No factory for translator backend: {name}")
