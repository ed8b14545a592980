"""
i18n-auto: Extract hard-coded source-language text into i18n catalogs.

Scans JavaScript, TypeScript and Vue single-file components for literal
text in the source language (Chinese by default), moves every occurrence
into a key-value JSON catalog and rewrites the source to call the
translation-lookup function instead. Target-language catalogs are then
generated through pluggable translation backends.

Core pieces:
1. Deterministic key derivation and catalog storage
2. Syntax-aware script and template rewriting
3. Catalog generation with batched, failure-tolerant translation

License: MIT
"""

__version__ = "1.0.0"

from i18n_auto.config import I18nConfig, read_config
from i18n_auto.catalog import CatalogStore
from i18n_auto.keygen import derive_key
from i18n_auto.models import FileKind, RewriteResult
from i18n_auto.dispatcher import process_file

__all__ = [
    "I18nConfig",
    "read_config",
    "CatalogStore",
    "derive_key",
    "FileKind",
    "RewriteResult",
    "process_file",
]
