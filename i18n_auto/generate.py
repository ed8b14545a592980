"""
Target-language catalog generation.

Builds ``<lang>.json`` next to the base catalog. Entries that already have a
translation are kept; the rest are translated in batches, with a pause
between batches to stay under free-tier rate limits. A failing batch falls
back to the source text so the generated catalog is always complete.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from i18n_auto.catalog import CatalogStore
from i18n_auto.config import I18nConfig
from i18n_auto.translate.base import Translator, TranslationContext
from i18n_auto.utils import chunked

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20
DEFAULT_DELAY = 1.0

# (language, done, total)
GenerateProgress = Callable[[str, int, int], None]


@dataclass
class GenerationStats:
    """Per-language outcome of a generation run."""
    language: str
    total: int = 0
    kept: int = 0
    translated: int = 0
    fallback: int = 0
    empty: int = 0


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


def generate_catalog(
    language: str,
    base_catalog: dict[str, str],
    translator: Optional[Translator],
    existing: Optional[dict[str, str]] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay: float = DEFAULT_DELAY,
    source_language: str = "zh",
    sleep: Callable[[float], None] = time.sleep,
    stats: Optional[GenerationStats] = None,
    progress: Optional[GenerateProgress] = None,
) -> dict[str, str]:
    """Build the catalog for ``language`` from the base catalog.

    Args:
        language: Target language code
        base_catalog: Source-of-truth key -> text mapping
        translator: Backend, or None for template mode (empty values)
        existing: Current target catalog; non-blank values are preserved
        batch_size: Texts per translator call
        delay: Seconds to wait between batches
        source_language: Language of the base catalog

    Returns:
        Mapping with exactly the keys of ``base_catalog``, in base order
    """
    existing = existing or {}
    stats = stats or GenerationStats(language=language)
    stats.total = len(base_catalog)

    result: dict[str, str] = {}
    pending: list[str] = []
    for key in base_catalog:
        value = existing.get(key)
        if _is_blank(value):
            pending.append(key)
        else:
            result[key] = str(value)
            stats.kept += 1

    if translator is None:
        for key in pending:
            result[key] = ""
        stats.empty += len(pending)
    else:
        context = TranslationContext(source_lang=source_language, target_lang=language)
        batches = chunked(pending, batch_size)
        done = 0
        for index, batch in enumerate(batches):
            if index > 0 and delay > 0:
                sleep(delay)
            texts = [base_catalog[key] for key in batch]
            translated = _translate_batch(translator, texts, context, language)
            for key, source, text in zip(batch, texts, translated):
                if text is None:
                    result[key] = source
                    stats.fallback += 1
                else:
                    result[key] = text
                    stats.translated += 1
            done += len(batch)
            if progress is not None:
                progress(language, done, len(pending))

    # Base order, base keys only
    return {key: result[key] for key in base_catalog}


def _translate_batch(
    translator: Translator,
    texts: list[str],
    context: TranslationContext,
    language: str,
) -> list[Optional[str]]:
    """Translate one batch; None marks an entry that needs the fallback."""
    try:
        results = translator.translate_batch(texts, context)
    except Exception as e:
        logger.warning(
            "Translation to %s failed for a batch of %d (%s); using source text",
            language, len(texts), e,
        )
        return [None] * len(texts)

    if len(results) != len(texts):
        logger.warning(
            "Translator %s returned %d results for %d texts; using source text",
            translator.name, len(results), len(texts),
        )
        return [None] * len(texts)

    translated: list[Optional[str]] = []
    for source, item in zip(texts, results):
        text = getattr(item, "text", None)
        if _is_blank(text):
            logger.warning("Empty translation to %s for %r; using source text", language, source)
            translated.append(None)
        else:
            translated.append(text)
    return translated


def generate_languages(
    languages: Iterable[str],
    config: I18nConfig,
    store: Optional[CatalogStore] = None,
    translator: Optional[Translator] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    delay: float = DEFAULT_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    progress: Optional[GenerateProgress] = None,
) -> dict[str, GenerationStats]:
    """Generate and save a catalog for each target language.

    Raises:
        CatalogError: If the base catalog does not exist
        CatalogWriteError: If a target catalog cannot be written
    """
    store = store or CatalogStore.from_config(config)
    base = store.load_required()
    report: dict[str, GenerationStats] = {}

    for language in languages:
        if language == store.base_language:
            logger.info("Skipping %s: it is the base language", language)
            continue
        stats = GenerationStats(language=language)
        catalog = generate_catalog(
            language,
            base,
            translator,
            existing=store.load(language),
            batch_size=batch_size,
            delay=delay,
            source_language=config.source_language,
            sleep=sleep,
            stats=stats,
            progress=progress,
        )
        path = store.save(catalog, language)
        logger.info(
            "Wrote %s (%d kept, %d translated, %d fallback, %d empty)",
            path, stats.kept, stats.translated, stats.fallback, stats.empty,
        )
        report[language] = stats

    return report
