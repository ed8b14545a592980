"""
Per-language key -> text JSON catalogs.

Catalogs live in ``<root>/<i18n_file_path>/locale/<lang>.json``. The
base-language catalog is the source of truth; rewriters add to it through
:meth:`CatalogStore.record`, which re-reads and re-writes the file for every
accepted extraction so that each file in a run sees the entries written by
the files before it.

Reading is forgiving: a missing, unreadable or malformed catalog is treated
as empty (with a warning). Writing is not: a failed write raises
:class:`~i18n_auto.errors.CatalogWriteError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from i18n_auto.config import I18nConfig
from i18n_auto.errors import CatalogError, CatalogWriteError
from i18n_auto.utils import atomic_write

logger = logging.getLogger(__name__)


class CatalogStore:
    """Read, merge and write catalogs in one locale directory.

    Usage:
        store = CatalogStore.from_config(config)
        added = store.record("i18n-auto-7eca689f", "你好")
        zh = store.load()
    """

    def __init__(self, locale_dir: Path, base_language: str = "zh"):
        self.locale_dir = Path(locale_dir)
        self.base_language = base_language

    @classmethod
    def from_config(cls, config: I18nConfig) -> "CatalogStore":
        return cls(config.catalog_dir, base_language=config.source_language)

    def path_for(self, language: Optional[str] = None) -> Path:
        return self.locale_dir / f"{language or self.base_language}.json"

    def exists(self, language: Optional[str] = None) -> bool:
        return self.path_for(language).is_file()

    def ensure_layout(self, languages: tuple[str, ...] = ()) -> list[Path]:
        """Create the locale directory and empty catalogs where missing.

        Returns:
            Paths of the catalogs that were created
        """
        created = []
        for language in (self.base_language, *languages):
            path = self.path_for(language)
            if not path.exists():
                self.save({}, language)
                created.append(path)
        return created

    def load(self, language: Optional[str] = None) -> dict[str, str]:
        """Load a catalog, degrading to an empty one on any read problem."""
        path = self.path_for(language)
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning("Could not read catalog %s (%s); starting from an empty catalog", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Catalog %s is not a JSON object; starting from an empty catalog", path)
            return {}
        return {str(k): "" if v is None else str(v) for k, v in data.items()}

    def load_required(self, language: Optional[str] = None) -> dict[str, str]:
        """Load a catalog that must exist (e.g. the base catalog for generation)."""
        path = self.path_for(language)
        if not path.is_file():
            raise CatalogError(f"Catalog not found: {path}")
        return self.load(language)

    def save(self, data: dict[str, str], language: Optional[str] = None) -> Path:
        """Write a catalog as pretty-printed UTF-8 JSON."""
        path = self.path_for(language)
        payload = json.dumps(data, ensure_ascii=False, indent=2) + "\n"
        try:
            atomic_write(path, payload)
        except OSError as e:
            raise CatalogWriteError(f"Failed to write catalog {path}: {e}") from e
        return path

    def record(self, key: str, text: str, language: Optional[str] = None) -> bool:
        """Add ``key -> text`` to a catalog.

        Existing entries are never replaced: an identical entry is a no-op,
        and a key that already maps to different text (a hash collision or a
        hand-edited value) is kept and reported.

        Returns:
            True if the entry was added, False if it was already present
        """
        data = self.load(language)
        current = data.get(key)

        if current == text:
            return False
        if current:
            logger.warning(
                "Catalog key %s already maps to %r; keeping it instead of %r",
                key, current, text,
            )
            return False
        if not text:
            return False

        data[key] = text
        self.save(data, language)
        return True

    def languages(self) -> list[str]:
        """Languages with a catalog file in the locale directory, sorted."""
        if not self.locale_dir.is_dir():
            return []
        return sorted(p.stem for p in self.locale_dir.glob("*.json") if p.is_file())


def translation_progress(catalog: dict[str, str]) -> tuple[int, int]:
    """Return (entries with a non-blank value, total entries)."""
    done = sum(1 for value in catalog.values() if value and str(value).strip())
    return done, len(catalog)
