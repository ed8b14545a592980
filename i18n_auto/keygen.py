"""
Catalog key derivation.

Keys are a short content hash behind a fixed, tool-identifying prefix:

    >>> derive_key("你好")
    'i18n-auto-7eca689f'

The key depends on the text alone, never on the file, position or run
order, so the same text maps to the same catalog entry everywhere and
re-processing an already extracted project is a no-op.
"""

from __future__ import annotations

import hashlib

KEY_PREFIX = "i18n-auto-"
HASH_LENGTH = 8


def derive_key(text: str) -> str:
    """Return the catalog key for ``text``."""
    digest = hashlib.md5(text.encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}{digest[:HASH_LENGTH]}"


def is_generated_key(key: str) -> bool:
    """Whether ``key`` has the shape produced by :func:`derive_key`."""
    if not key.startswith(KEY_PREFIX):
        return False
    digest = key[len(KEY_PREFIX):]
    return len(digest) == HASH_LENGTH and all(c in "0123456789abcdef" for c in digest)
