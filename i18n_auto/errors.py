"""Exception hierarchy for i18n-auto."""

from __future__ import annotations


class I18nAutoError(Exception):
    """Base class for all i18n-auto errors."""


class ConfigError(I18nAutoError):
    """The project configuration is unusable."""


class CatalogError(I18nAutoError):
    """A catalog could not be found or read where one is required."""


class CatalogWriteError(CatalogError):
    """A catalog could not be persisted (disk full, permissions, ...)."""


class ParseError(I18nAutoError):
    """Source text could not be parsed into a usable syntax tree."""


class TranslationError(I18nAutoError):
    """A translation backend failed to translate a batch."""
