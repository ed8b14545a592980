"""Shared fixtures for the i18n-auto test suite."""

import pytest

from i18n_auto.catalog import CatalogStore
from i18n_auto.config import I18nConfig
from i18n_auto.keys import KeyManager


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests away from the real keychain and credential variables."""
    for var in ("BAIDU_APPID", "BAIDU_SECRET_KEY", "DEEPL_AUTH_KEY", "I18N_AUTO_DEBUG", "EDITOR", "VISUAL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(KeyManager, "_check_keyring", lambda self: False)


@pytest.fixture
def config(tmp_path):
    return I18nConfig(root=tmp_path)


@pytest.fixture
def store(config):
    return CatalogStore.from_config(config)
