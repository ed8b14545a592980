"""
Utility functions used across the CLI, dispatcher and catalog store.

Functions:
    atomic_write: Replace a file's contents without leaving a partial file
    read_text: Read a UTF-8 source file, tolerating a byte-order mark
    chunked: Split a sequence into fixed-size batches

Example:
    >>> from i18n_auto.utils import chunked
    >>> list(chunked([1, 2, 3, 4, 5], 2))
    [[1, 2], [3, 4], [5]]
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

BOM = "\ufeff"


def atomic_write(path: Path, data: str) -> None:
    """Atomically write ``data`` to ``path``.

    Writes to a temporary file in the same directory, fsyncs, then replaces
    the target. Permission bits of an existing target are preserved when
    possible. Any OSError propagates to the caller; the target is left
    untouched in that case.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    orig_mode = None
    try:
        orig_mode = path.stat().st_mode & 0o777
    except OSError:
        pass

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", delete=False, dir=path.parent, encoding="utf-8", newline=""
        ) as tf:
            tmp_name = tf.name
            tf.write(data)
            tf.flush()
            os.fsync(tf.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
        if orig_mode is not None:
            try:
                os.chmod(path, orig_mode)
            except OSError:
                logger.debug("Failed to chmod %s", path)
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def read_text(path: Path) -> tuple[str, bool]:
    """Read a UTF-8 file.

    Returns:
        Tuple of (text without BOM, whether a BOM was present)
    """
    with open(path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    if text.startswith(BOM):
        return text[1:], True
    return text, False


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive batches of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
