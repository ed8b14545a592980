"""
Credential management for translation backends.

Credentials are looked up in this order:
1. Environment variables (preferred for CI)
2. OS keychain via keyring (secure local storage)
3. The project configuration file (``baidu`` / ``deepl`` sections)

Usage:
    from i18n_auto.keys import KeyManager

    km = KeyManager(config)
    km.set_key("deepl", "xxxx:fx")
    key = km.get_key("deepl")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from i18n_auto.config import I18nConfig, read_config, write_config
from i18n_auto.errors import ConfigError


# Service -> (environment variable, config section, config field)
SERVICES = {
    "baidu_appid": ("BAIDU_APPID", "baidu", "appid"),
    "baidu_secret": ("BAIDU_SECRET_KEY", "baidu", "secretKey"),
    "deepl": ("DEEPL_AUTH_KEY", "deepl", "authKey"),
}


@dataclass
class KeyInfo:
    """Information about a stored credential."""
    service: str
    is_set: bool
    source: str  # 'env', 'keyring', 'config', 'none'
    masked_value: str


class KeyManager:
    """Resolve and store backend credentials.

    Priority order for key retrieval:
    1. Environment variable
    2. OS keychain (via keyring)
    3. Project configuration file
    """

    SERVICE_NAME = "i18n-auto"

    def __init__(self, config: Optional[I18nConfig] = None):
        self.config = config or read_config()
        self._keyring_available = self._check_keyring()

    def _check_keyring(self) -> bool:
        """Check if a usable keyring backend is installed."""
        try:
            import keyring
            from keyring.backends import fail

            return not isinstance(keyring.get_keyring(), fail.Keyring)
        except Exception:
            return False

    def _lookup(self, service: str) -> tuple[Optional[str], str]:
        if service not in SERVICES:
            raise ValueError(f"Unknown credential: {service}. Known: {', '.join(SERVICES)}")
        env_var, section, name = SERVICES[service]

        if env_val := os.getenv(env_var):
            return env_val, "env"

        if self._keyring_available:
            try:
                import keyring
                if key := keyring.get_password(self.SERVICE_NAME, service):
                    return key, "keyring"
            except Exception:
                pass

        if value := (getattr(self.config, section, None) or {}).get(name):
            return str(value), "config"

        return None, "none"

    def get_key(self, service: str) -> Optional[str]:
        """Get a credential, or None if it is not configured anywhere."""
        return self._lookup(service)[0]

    def set_key(self, service: str, key: str, use_keyring: bool = True) -> str:
        """Store a credential.

        Returns:
            Storage location used ('keyring' or 'config')
        """
        if service not in SERVICES:
            raise ValueError(f"Unknown credential: {service}. Known: {', '.join(SERVICES)}")

        if use_keyring and self._keyring_available:
            try:
                import keyring
                keyring.set_password(self.SERVICE_NAME, service, key)
                return "keyring"
            except Exception:
                pass

        _, section, name = SERVICES[service]
        getattr(self.config, section)[name] = key
        write_config(self.config)
        return "config"

    def get_key_info(self, service: str) -> KeyInfo:
        value, source = self._lookup(service)
        return KeyInfo(
            service=service,
            is_set=value is not None,
            source=source,
            masked_value=self._mask_key(value) if value else "",
        )

    def list_keys(self) -> list[KeyInfo]:
        """Status of every known credential."""
        return [self.get_key_info(service) for service in SERVICES]

    def _mask_key(self, key: str) -> str:
        """Mask a key for display (show first 4 and last 4 chars)."""
        if len(key) <= 12:
            return "*" * len(key)
        return f"{key[:4]}...{key[-4:]}"


def require_key(service: str, config: Optional[I18nConfig] = None) -> str:
    """Get a credential or raise ConfigError if it is missing."""
    key = KeyManager(config).get_key(service)
    if not key:
        env_var, section, name = SERVICES[service]
        raise ConfigError(
            f"Credential '{service}' not found. "
            f"Set {env_var} or fill in \"{section}.{name}\" in the configuration file."
        )
    return key
