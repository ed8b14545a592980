"""
Tests for configuration loading and catalog storage.

Run with: pytest tests/test_config_catalog.py -v
"""

import json
import logging

import pytest

from i18n_auto.catalog import CatalogStore, translation_progress
from i18n_auto.config import (
    CONFIG_FILENAME,
    I18nConfig,
    ensure_config_exists,
    normalize_base_path,
    read_config,
    resolve_i18n_path,
    write_config,
)
from i18n_auto.eligibility import is_eligible
from i18n_auto.errors import CatalogError, CatalogWriteError


class TestConfig:
    """Tests for the configuration layer."""

    def test_defaults_when_missing(self, tmp_path):
        config = read_config(tmp_path)
        assert config.i18n_file_path == "/src/i18n"
        assert config.script_i18n_call == "i18n.global.t"
        assert config.template_i18n_call == "$t"
        assert config.root == tmp_path

    def test_reads_camel_case(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(
            json.dumps({"i18nFilePath": "lang", "autoImportI18n": False, "scriptI18nCall": "t"}),
            encoding="utf-8",
        )
        config = read_config(tmp_path)
        assert config.i18n_file_path == "lang"
        assert config.auto_import_i18n is False
        assert config.script_i18n_call == "t"

    def test_reads_snake_case(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"format_code": True}), encoding="utf-8")
        assert read_config(tmp_path).format_code is True

    def test_corrupt_file_uses_defaults(self, tmp_path, caplog):
        (tmp_path / CONFIG_FILENAME).write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            config = read_config(tmp_path)
        assert config.i18n_file_path == "/src/i18n"
        assert "Failed to read configuration" in caplog.text

    def test_unknown_keys_preserved(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"customThing": 1}), encoding="utf-8")
        config = read_config(tmp_path)
        write_config(config)
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data["customThing"] == 1
        assert data["i18nFilePath"] == "/src/i18n"

    def test_partial_service_section_merged(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"deepl": {"isPro": True}}), encoding="utf-8")
        config = read_config(tmp_path)
        assert config.deepl == {"authKey": "", "isPro": True}

    def test_string_list_settings_coerced(self, tmp_path):
        data = {"excludedStrings": "宋体黑体", "excludedExtensions": ".png", "prettierCommand": "npx prettier"}
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

        config = read_config(tmp_path)

        assert config.excluded_strings == ["宋体黑体"]
        assert config.excluded_extensions == [".png"]
        assert config.prettier_command == ["npx", "prettier"]
        assert is_eligible("黑体", config)
        assert not is_eligible("宋体黑体", config)

    def test_malformed_list_setting_uses_defaults(self, tmp_path, caplog):
        (tmp_path / CONFIG_FILENAME).write_text(json.dumps({"excludedStrings": {"a": 1}}), encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            config = read_config(tmp_path)
        assert config.excluded_strings == I18nConfig().excluded_strings
        assert "excludedStrings" in caplog.text

    def test_ensure_config_exists(self, tmp_path):
        path = ensure_config_exists(tmp_path)
        assert path.exists()
        path.write_text(json.dumps({"debug": True}), encoding="utf-8")
        ensure_config_exists(tmp_path)
        assert json.loads(path.read_text(encoding="utf-8")) == {"debug": True}

    def test_import_binding(self):
        assert I18nConfig().import_binding == "i18n"
        assert I18nConfig(script_i18n_call="t").import_binding == "t"
        assert I18nConfig(import_name="lang").import_binding == "lang"
        assert I18nConfig().import_statement == "import i18n from '@/i18n';\n"

    @pytest.mark.parametrize("raw,expected", [
        ("/src/i18n", "src/i18n"),
        ("src\\i18n", "src/i18n"),
        ("\\\\src\\lang", "src/lang"),
        ("", ""),
    ])
    def test_normalize_base_path(self, raw, expected):
        assert normalize_base_path(raw) == expected

    def test_resolve_inside_root(self, tmp_path):
        config = I18nConfig(root=tmp_path)
        assert resolve_i18n_path(config, "locale", "zh.json") == tmp_path / "src" / "i18n" / "locale" / "zh.json"
        assert config.catalog_dir == tmp_path / "src" / "i18n" / "locale"


class TestCatalogStore:
    """Tests for CatalogStore."""

    def test_load_missing_is_empty(self, store):
        assert store.load() == {}
        assert not store.exists()

    def test_record_creates_catalog(self, store):
        assert store.record("i18n-auto-00000001", "你好")
        assert store.load() == {"i18n-auto-00000001": "你好"}
        assert store.path_for().name == "zh.json"

    def test_record_identical_is_noop(self, store):
        store.record("k1", "你好")
        assert not store.record("k1", "你好")
        assert store.load() == {"k1": "你好"}

    def test_record_never_overwrites(self, store, caplog):
        store.record("k1", "你好")
        with caplog.at_level(logging.WARNING):
            assert not store.record("k1", "世界")
        assert store.load() == {"k1": "你好"}
        assert "already maps to" in caplog.text

    def test_record_fills_empty_value(self, store):
        store.save({"k1": ""})
        assert store.record("k1", "你好")
        assert store.load() == {"k1": "你好"}

    def test_record_ignores_empty_text(self, store):
        store.save({"k1": "你好"})
        assert not store.record("k1", "")
        assert store.load() == {"k1": "你好"}

    def test_saved_file_format(self, store):
        store.save({"k1": "你好"})
        raw = store.path_for().read_text(encoding="utf-8")
        assert raw == '{\n  "k1": "你好"\n}\n'

    def test_corrupt_catalog_is_empty(self, store, caplog):
        store.locale_dir.mkdir(parents=True)
        store.path_for().write_text("{broken", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            assert store.load() == {}
        assert "Could not read catalog" in caplog.text

    def test_non_object_catalog_is_empty(self, store):
        store.locale_dir.mkdir(parents=True)
        store.path_for().write_text("[1, 2]", encoding="utf-8")
        assert store.load() == {}

    def test_load_required_missing(self, store):
        with pytest.raises(CatalogError):
            store.load_required()

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "locale"
        blocker.write_text("not a directory", encoding="utf-8")
        store = CatalogStore(blocker)
        with pytest.raises(CatalogWriteError):
            store.save({"k": "v"})

    def test_ensure_layout(self, store):
        created = store.ensure_layout(("en",))
        assert [p.name for p in created] == ["zh.json", "en.json"]
        assert store.ensure_layout(("en",)) == []
        assert store.languages() == ["en", "zh"]

    def test_languages_without_directory(self, tmp_path):
        assert CatalogStore(tmp_path / "missing").languages() == []

    def test_translation_progress(self):
        assert translation_progress({"a": "A", "b": "", "c": "  "}) == (1, 3)
        assert translation_progress({}) == (0, 0)
