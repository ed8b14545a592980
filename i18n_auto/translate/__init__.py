"""
Translation backends for catalog generation.

Backends implement :class:`~i18n_auto.translate.base.Translator`; use
:func:`~i18n_auto.translate.base.create_translator` to build one by name.
"""

from i18n_auto.translate.base import (
    BACKENDS,
    DummyTranslator,
    TranslationContext,
    TranslationResult,
    Translator,
    available_backends,
    create_translator,
    resolve_backend,
)

__all__ = [
    "BACKENDS",
    "DummyTranslator",
    "TranslationContext",
    "TranslationResult",
    "Translator",
    "available_backends",
    "create_translator",
    "resolve_backend",
]
