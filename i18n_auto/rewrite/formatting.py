"""
Optional prettier pass over rewritten scripts.

Formatting is cosmetic: the rewritten text is already correct, so any
failure here (prettier missing, syntax it rejects, timeout) is logged and
the unformatted text is returned.
"""

from __future__ import annotations

import logging
import subprocess

from i18n_auto.config import I18nConfig
from i18n_auto.models import FileKind

logger = logging.getLogger(__name__)

PRETTIER_OPTIONS = [
    "--single-quote",
    "--tab-width", "2",
    "--trailing-comma", "es5",
]

_STDIN_NAMES = {
    FileKind.SCRIPT: "i18n-auto-input.js",
    FileKind.JSX: "i18n-auto-input.jsx",
    FileKind.TYPESCRIPT: "i18n-auto-input.ts",
    FileKind.TSX: "i18n-auto-input.tsx",
    FileKind.COMPONENT: "i18n-auto-input.vue",
}


def format_source(text: str, kind: FileKind, config: I18nConfig, timeout: float = 30.0) -> str:
    """Run ``text`` through prettier if ``config.format_code`` is enabled."""
    if not config.format_code or not config.prettier_command:
        return text

    cmd = [*config.prettier_command, "--stdin-filepath", _STDIN_NAMES[kind], *PRETTIER_OPTIONS]
    try:
        proc = subprocess.run(
            cmd,
            input=text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
            cwd=str(config.root),
            check=True,
        )
    except FileNotFoundError:
        logger.warning("Formatter %r not found; keeping unformatted output", cmd[0])
        return text
    except subprocess.TimeoutExpired:
        logger.warning("Formatter timed out after %.0fs; keeping unformatted output", timeout)
        return text
    except subprocess.CalledProcessError as e:
        logger.warning("Formatting failed, keeping unformatted output: %s", (e.stderr or "").strip())
        return text

    return proc.stdout or text
