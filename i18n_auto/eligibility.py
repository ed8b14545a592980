"""
Decide whether a literal text fragment should be extracted.

Both the script and the template rewriter call :func:`is_eligible`, so the
two extraction paths accept exactly the same fragments.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from i18n_auto.config import I18nConfig


# Character classes of the scripts a source language is written in
SCRIPT_RANGES = {
    "zh": r"\u4e00-\u9fff\u3400-\u4dbf",
    "ja": r"\u4e00-\u9fff\u3400-\u4dbf\u3040-\u309f\u30a0-\u30ff",
    "ko": r"\uac00-\ud7af\u1100-\u11ff\u3130-\u318f",
}

# Stray single characters that are never worth a catalog entry
PUNCTUATION = "，。、！？；：“”‘’\"'（）【】《》「」『』"

_SCRIPT_PATTERNS: dict[str, re.Pattern] = {}

_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def script_pattern(language: str) -> re.Pattern:
    """Compiled pattern matching one character of ``language``'s script."""
    lang = (language or "zh").lower().split("-")[0].split("_")[0]
    if lang not in SCRIPT_RANGES:
        lang = "zh"
    if lang not in _SCRIPT_PATTERNS:
        _SCRIPT_PATTERNS[lang] = re.compile(f"[{SCRIPT_RANGES[lang]}]")
    return _SCRIPT_PATTERNS[lang]


def contains_source_text(text: str, language: str = "zh") -> bool:
    return bool(script_pattern(language).search(text))


def is_eligible(text, config: "I18nConfig") -> bool:
    """Check whether ``text`` qualifies for extraction.

    Rules, in order:
    1. Non-strings, empty and whitespace-only input, and text holding a lone
       surrogate (left behind by a broken escape), are rejected
    2. Text without a character of the source language's script is rejected
    3. Text whose trimmed form is listed in ``excluded_strings`` is rejected
    4. A single punctuation or digit character is rejected

    Args:
        text: Candidate literal value
        config: Project configuration

    Returns:
        True if the fragment should be extracted
    """
    if not isinstance(text, str) or not text.strip():
        return False

    if _LONE_SURROGATE.search(text):
        return False

    if not contains_source_text(text, config.source_language):
        return False

    clean = text.strip()
    if clean in config.excluded_strings:
        return False

    if len(clean) == 1 and (clean in PUNCTUATION or clean.isdigit()):
        return False

    return True
