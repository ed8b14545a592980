"""
File-level dispatch: route a file to the right rewriter and persist it.

Errors never escape :func:`process_file`; they are returned on the
:class:`~i18n_auto.models.RewriteResult` so a batch can keep going after a
bad file. A file is either rewritten and written whole, or left untouched.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from i18n_auto.catalog import CatalogStore
from i18n_auto.config import I18nConfig
from i18n_auto.errors import I18nAutoError
from i18n_auto.models import EXTENSION_KINDS, BatchReport, FileKind, RewriteResult
from i18n_auto.rewrite.script import rewrite_script
from i18n_auto.rewrite.template import rewrite_component
from i18n_auto.utils import BOM, atomic_write, read_text

logger = logging.getLogger(__name__)

# Called with (path, index, total) before each file of a batch
ProgressCallback = Callable[[Path, int, int], None]

SKIP_DIRS = {
    "node_modules", ".git", ".svn", ".hg", ".DS_Store",
    "dist", "build", "coverage", ".nyc_output", ".next", ".nuxt",
    "out", "temp", "tmp", "vendor", ".idea", ".vscode",
    "logs", "public", "static",
}


def file_kind_for(path: Path | str) -> Optional[FileKind]:
    """Map a path's extension to a :class:`FileKind` (``None`` if unsupported)."""
    return EXTENSION_KINDS.get(Path(path).suffix.lower())


def rewrite_content(content: str, kind: FileKind, config: I18nConfig, catalog: CatalogStore) -> RewriteResult:
    """Rewrite in-memory ``content`` of the given kind."""
    if kind is FileKind.COMPONENT:
        return rewrite_component(content, config, catalog)
    return rewrite_script(content, config, kind, catalog)


def process_file(path: Path | str, config: I18nConfig, catalog: Optional[CatalogStore] = None) -> RewriteResult:
    """Extract literal text from one file and rewrite it in place.

    Args:
        path: File to process
        config: Project configuration
        catalog: Base-language catalog store (built from ``config`` if omitted)

    Returns:
        RewriteResult. ``success`` is False for missing files, excluded or
        unsupported extensions, parse failures and write failures.
    """
    path = Path(path)
    catalog = catalog or CatalogStore.from_config(config)

    if not path.is_file():
        return RewriteResult.failed("", f"File not found: {path}")

    ext = path.suffix.lower()
    if ext in {e.lower() for e in config.excluded_extensions}:
        return RewriteResult.failed("", f"File type excluded: {ext}")

    kind = file_kind_for(path)
    if kind is None:
        return RewriteResult.failed("", f"Unsupported file type: {ext or path.name}")

    try:
        content, had_bom = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        return RewriteResult.failed("", f"Failed to read {path}: {e}")

    try:
        result = rewrite_content(content, kind, config, catalog)
        if result.success and result.content != content:
            atomic_write(path, (BOM if had_bom else "") + result.content)
            logger.debug("Rewrote %s (%d changes)", path, result.changes)
    except (I18nAutoError, OSError) as e:
        logger.error("Failed to process %s: %s", path, e)
        return RewriteResult.failed(content, f"Failed to process file: {e}")
    except Exception as e:  # keep the batch going on unexpected failures
        logger.exception("Unexpected error while processing %s", path)
        return RewriteResult.failed(content, f"Failed to process file: {e}")

    return result


def should_skip_directory(name: str) -> bool:
    return name in SKIP_DIRS or name.startswith(".")


def discover_files(
    root: Path | str,
    config: I18nConfig,
    exclude_patterns: Iterable[str] = (),
) -> list[Path]:
    """Find supported source files below ``root``.

    Dependency, build and VCS directories (and any dot-directory) are not
    entered. A file or directory whose path contains one of
    ``exclude_patterns`` is skipped.
    """
    root = Path(root)
    patterns = [p for p in exclude_patterns if p]
    excluded_exts = {e.lower() for e in config.excluded_extensions}
    files = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames
            if not should_skip_directory(d) and not any(p in d for p in patterns)
        )
        for filename in sorted(filenames):
            full = Path(dirpath) / filename
            ext = full.suffix.lower()
            if ext in excluded_exts or ext not in EXTENSION_KINDS:
                continue
            if any(p in full.relative_to(root).as_posix() for p in patterns):
                continue
            files.append(full)

    return files


def process_batch(
    files: Iterable[Path],
    config: I18nConfig,
    catalog: Optional[CatalogStore] = None,
    progress: Optional[ProgressCallback] = None,
) -> BatchReport:
    """Process files one after another.

    Files run strictly in sequence because every accepted extraction
    read-modify-writes the shared base catalog.
    """
    catalog = catalog or CatalogStore.from_config(config)
    files = list(files)
    report = BatchReport()
    for index, path in enumerate(files):
        if progress is not None:
            progress(path, index, len(files))
        report.add(path, process_file(path, config, catalog))
    logger.info("Batch finished: %s", report.to_dict())
    return report
