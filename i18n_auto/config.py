"""
Project configuration for i18n-auto.

The configuration lives in ``automatically-i18n-config.json`` at the
project root. Keys are stored in camelCase (the layout the tool has always
written); snake_case keys are accepted on read as well.

Module Contents:
    CONFIG_FILENAME: Name of the configuration file
    I18nConfig: Typed view of the configuration
    read_config: Load configuration merged over the defaults
    write_config: Persist configuration
    ensure_config_exists: Write the default configuration if missing
    normalize_base_path: Clean the configured catalog base path
    resolve_i18n_path: Absolute path inside the catalog base directory

Example:
    >>> from i18n_auto.config import read_config, resolve_i18n_path
    >>> config = read_config()
    >>> print(resolve_i18n_path(config, "locale", "zh.json"))
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from i18n_auto.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "automatically-i18n-config.json"

DEFAULT_EXCLUDED_EXTENSIONS = [
    ".svg", ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico",
    ".md", ".txt", ".json",
    ".css", ".scss", ".less", ".sass", ".styl",
]

DEFAULT_EXCLUDED_STRINGS = [
    "宋体", "黑体", "楷体", "仿宋", "微软雅黑",
    "华文", "方正", "苹方", "思源",
    "YYYY年MM月DD日",
]

# Python attribute -> key written to the JSON file
_JSON_NAMES = {
    "i18n_file_path": "i18nFilePath",
    "auto_import_i18n": "autoImportI18n",
    "i18n_import_path": "i18nImportPath",
    "import_name": "importName",
    "template_i18n_call": "templateI18nCall",
    "script_i18n_call": "scriptI18nCall",
    "excluded_extensions": "excludedExtensions",
    "excluded_strings": "excludedStrings",
    "source_language": "sourceLanguage",
    "format_code": "formatCode",
    "prettier_command": "prettierCommand",
    "debug": "debug",
    "free_google": "freeGoogle",
    "baidu": "baidu",
    "deepl": "deepl",
}

_LIST_FIELDS = ("excluded_extensions", "excluded_strings", "prettier_command")


def _as_list(json_name: str, value: Any) -> list[str]:
    """Coerce a list-valued setting; a lone string is one entry.

    ``prettierCommand`` given as one string is split on whitespace.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split() if json_name == "prettierCommand" else [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(f"'{json_name}' must be a list of strings, got {value!r}")


@dataclass
class I18nConfig:
    """Configuration consumed by the extraction and generation core.

    The core treats an instance as read-only for the duration of a run.
    """
    # Catalog location, relative to the project root
    i18n_file_path: str = "/src/i18n"

    # Import handling
    auto_import_i18n: bool = True
    i18n_import_path: str = "@/i18n"
    import_name: Optional[str] = None  # defaults to the head of script_i18n_call

    # Call expressions emitted in place of literal text
    template_i18n_call: str = "$t"
    script_i18n_call: str = "i18n.global.t"

    # Filtering
    excluded_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_EXTENSIONS))
    excluded_strings: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_STRINGS))
    source_language: str = "zh"

    # Optional prettier pass over rewritten scripts
    format_code: bool = False
    prettier_command: list[str] = field(default_factory=lambda: ["npx", "prettier"])

    debug: bool = False

    # Translation services
    free_google: bool = True
    baidu: dict = field(default_factory=lambda: {"appid": "", "secretKey": ""})
    deepl: dict = field(default_factory=lambda: {"authKey": "", "isPro": False})

    # Project root (not persisted)
    root: Path = field(default_factory=Path.cwd)

    # Keys found in the file that this version does not know about
    extra: dict = field(default_factory=dict)

    @property
    def import_binding(self) -> str:
        """Identifier bound by the auto-inserted import statement."""
        if self.import_name:
            return self.import_name
        head = re.split(r"[.(\[]", self.script_i18n_call.strip(), maxsplit=1)[0]
        return head or "i18n"

    @property
    def import_statement(self) -> str:
        return f"import {self.import_binding} from '{self.i18n_import_path}';\n"

    @property
    def catalog_dir(self) -> Path:
        """Directory holding ``<lang>.json`` catalogs."""
        return resolve_i18n_path(self, "locale")

    @property
    def config_path(self) -> Path:
        return Path(self.root) / CONFIG_FILENAME

    @classmethod
    def from_dict(cls, data: dict, root: Path | None = None) -> "I18nConfig":
        """Build a config from a JSON mapping, camelCase or snake_case."""
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a JSON object, got {type(data).__name__}")

        by_json_name = {json_name: attr for attr, json_name in _JSON_NAMES.items()}
        kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for name, value in data.items():
            attr = by_json_name.get(name) or (name if name in _JSON_NAMES else None)
            if attr is None:
                extra[name] = value
            else:
                kwargs[attr] = value

        for name in _LIST_FIELDS:
            if name in kwargs:
                kwargs[name] = _as_list(_JSON_NAMES[name], kwargs[name])

        for name in ("baidu", "deepl"):
            if name in kwargs:
                merged = dict(getattr(cls(), name))
                merged.update(kwargs[name] or {})
                kwargs[name] = merged

        config = cls(**kwargs, extra=extra)
        if root is not None:
            config.root = Path(root)
        return config

    def to_dict(self) -> dict:
        """Serialize to the on-disk camelCase layout."""
        data = dict(self.extra)
        for f in fields(self):
            if f.name in _JSON_NAMES:
                value = getattr(self, f.name)
                if f.name == "import_name" and value is None:
                    continue
                data[_JSON_NAMES[f.name]] = value
        return data


def get_config_path(root: Path | None = None) -> Path:
    return Path(root or Path.cwd()) / CONFIG_FILENAME


def read_config(root: Path | None = None) -> I18nConfig:
    """Load the project configuration merged over the defaults.

    A missing file yields the defaults. An unreadable or malformed file is
    logged and also yields the defaults, so extraction never aborts because
    of a broken configuration file.
    """
    root = Path(root or Path.cwd())
    path = get_config_path(root)

    if not path.exists():
        return I18nConfig(root=root)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return I18nConfig.from_dict(data, root=root)
    except (OSError, ValueError, TypeError, ConfigError) as e:
        logger.error("Failed to read configuration %s: %s", path, e)
        return I18nConfig(root=root)


def write_config(config: I18nConfig) -> Path:
    """Persist ``config`` to its project root and return the path."""
    path = config.config_path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(config.to_dict(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise ConfigError(f"Failed to write configuration {path}: {e}") from e
    return path


def ensure_config_exists(root: Path | None = None) -> Path:
    """Write the default configuration unless one already exists."""
    path = get_config_path(root)
    if not path.exists():
        write_config(I18nConfig(root=Path(root or Path.cwd())))
    return path


def normalize_base_path(i18n_file_path: str) -> str:
    """Normalise the configured base path.

    Backslashes become forward slashes and leading separators are removed,
    so ``/src/i18n`` is resolved inside the project rather than at the
    filesystem root.
    """
    normalized = str(i18n_file_path or "").replace("\\", "/")
    return normalized.lstrip("/")


def resolve_i18n_path(config: I18nConfig, *segments: str) -> Path:
    base = normalize_base_path(config.i18n_file_path)
    return Path(config.root).joinpath(*(p for p in base.split("/") if p), *segments)


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
