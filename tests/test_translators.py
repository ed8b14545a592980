"""
Tests for translation backends and credential lookup.

Network backends are exercised with fake sessions and clients; no request
leaves the process.

Run with: pytest tests/test_translators.py -v
"""

import hashlib
import json
from types import SimpleNamespace

import deepl
import pytest
import requests

from i18n_auto.config import CONFIG_FILENAME, I18nConfig
from i18n_auto.errors import ConfigError, TranslationError
from i18n_auto.keys import KeyManager, require_key
from i18n_auto.translate.baidu import BaiduTranslator, sign
from i18n_auto.translate.base import (
    DummyTranslator,
    TranslationContext,
    available_backends,
    create_translator,
    resolve_backend,
)
from i18n_auto.translate.deepl import FREE_SERVER, PRO_SERVER, DeepLTranslator
from i18n_auto.translate.google_free import GoogleFreeTranslator


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Records calls and answers with a canned response (or a callable)."""

    def __init__(self, respond):
        self.respond = respond
        self.calls = []

    def _handle(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if isinstance(self.respond, Exception):
            raise self.respond
        return self.respond(url, kwargs) if callable(self.respond) else self.respond

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)


class TestDummyTranslator:
    """Tests for DummyTranslator."""

    def test_prefix(self):
        result = DummyTranslator().translate("你好", TranslationContext(target_lang="fr"))
        assert result.text == "[fr] 你好"
        assert result.source_text == "你好"

    def test_echo_and_upper(self):
        assert DummyTranslator("echo").translate("abc").text == "abc"
        assert DummyTranslator("upper").translate("abc").text == "ABC"

    def test_batch_keeps_order(self):
        results = DummyTranslator("echo").translate_batch(["甲", "乙", "丙"])
        assert [r.text for r in results] == ["甲", "乙", "丙"]


class TestCreateTranslator:
    """Tests for the create_translator factory."""

    @pytest.mark.parametrize("name", ["dummy", "test", "echo"])
    def test_dummy_aliases(self, name):
        assert isinstance(create_translator(name), DummyTranslator)

    @pytest.mark.parametrize("name", ["google", "free", "google-free", "GoogleFree"])
    def test_google_aliases(self, name):
        assert isinstance(create_translator(name), GoogleFreeTranslator)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown translator backend"):
            create_translator("babelfish")

    @pytest.mark.parametrize("name,expected", [
        ("GoogleFree", "google"),
        ("free", "google"),
        ("echo", "dummy"),
        ("DeepL", "deepl"),
    ])
    def test_resolve_backend(self, name, expected):
        assert resolve_backend(name) == expected

    def test_resolve_unknown_backend(self):
        with pytest.raises(ValueError):
            resolve_backend("skip")

    def test_baidu_requires_credentials(self, tmp_path):
        with pytest.raises(ConfigError, match="BAIDU_APPID"):
            create_translator("baidu", I18nConfig(root=tmp_path))

    def test_baidu_from_config(self, tmp_path):
        config = I18nConfig(root=tmp_path, baidu={"appid": "app", "secretKey": "secret"})
        translator = create_translator("baidu", config)
        assert isinstance(translator, BaiduTranslator)
        assert (translator.appid, translator.secret_key) == ("app", "secret")

    def test_deepl_pro_from_config(self, tmp_path):
        config = I18nConfig(root=tmp_path, deepl={"authKey": "key", "isPro": True})
        translator = create_translator("deepl", config)
        assert isinstance(translator, DeepLTranslator)
        assert translator.server_url == PRO_SERVER

    def test_available_backends(self, tmp_path, monkeypatch):
        config = I18nConfig(root=tmp_path)
        assert available_backends(config) == ["google"]
        monkeypatch.setenv("DEEPL_AUTH_KEY", "abc")
        assert available_backends(config) == ["google", "deepl"]


class TestGoogleFree:
    """Tests for GoogleFreeTranslator."""

    def test_joins_segments(self):
        session = FakeSession(FakeResponse([[["Hello ", "你好", None], ["world", "世界", None]], None, "zh-CN"]))
        translator = GoogleFreeTranslator(session=session)

        result = translator.translate("你好世界", TranslationContext(source_lang="zh", target_lang="en"))

        assert result.text == "Hello world"
        method, url, kwargs = session.calls[0]
        assert method == "GET"
        assert kwargs["params"]["sl"] == "zh-CN"
        assert kwargs["params"]["tl"] == "en"
        assert kwargs["params"]["q"] == "你好世界"
        assert kwargs["timeout"] == translator.timeout

    def test_batch_preserves_order(self):
        def respond(url, kwargs):
            return FakeResponse([[[f"T({kwargs['params']['q']})", None]]])

        translator = GoogleFreeTranslator(session=FakeSession(respond))
        results = translator.translate_batch(["甲", "乙", "丙"], TranslationContext())
        assert [r.text for r in results] == ["T(甲)", "T(乙)", "T(丙)"]

    def test_network_error(self):
        translator = GoogleFreeTranslator(session=FakeSession(requests.Timeout("slow")))
        with pytest.raises(TranslationError):
            translator.translate("你好")

    def test_http_error(self):
        translator = GoogleFreeTranslator(session=FakeSession(FakeResponse({}, status=429)))
        with pytest.raises(TranslationError):
            translator.translate("你好")


class TestBaidu:
    """Tests for BaiduTranslator."""

    def test_sign(self):
        expected = hashlib.md5("app你好123secret".encode("utf-8")).hexdigest()
        assert sign("app", "你好", "123", "secret") == expected

    def test_translate(self):
        session = FakeSession(FakeResponse({"trans_result": [{"src": "你好", "dst": "Hello"}]}))
        translator = BaiduTranslator("app", "secret", session=session)

        result = translator.translate("你好", TranslationContext(target_lang="ja"))

        assert result.text == "Hello"
        _, _, kwargs = session.calls[0]
        data = kwargs["data"]
        assert data["to"] == "jp"
        assert data["from"] == "zh"
        assert data["sign"] == sign("app", "你好", data["salt"], "secret")

    def test_api_error(self):
        session = FakeSession(FakeResponse({"error_code": "54001", "error_msg": "Invalid Sign"}))
        with pytest.raises(TranslationError, match="54001"):
            BaiduTranslator("app", "bad", session=session).translate("你好")


class TestDeepL:
    """Tests for DeepLTranslator."""

    class FakeClient:
        def __init__(self, respond):
            self.respond = respond
            self.calls = []

        def translate_text(self, texts, source_lang=None, target_lang=None):
            self.calls.append((list(texts), source_lang, target_lang))
            if isinstance(self.respond, Exception):
                raise self.respond
            return self.respond(texts)

    def test_single_request_per_batch(self):
        client = self.FakeClient(lambda texts: [SimpleNamespace(text=t.upper()) for t in texts])
        translator = DeepLTranslator("key:fx", client=client)

        results = translator.translate_batch(["a", "b"], TranslationContext(source_lang="zh", target_lang="en"))

        assert [r.text for r in results] == ["A", "B"]
        assert client.calls == [(["a", "b"], "ZH", "EN-US")]

    def test_free_server_by_default(self):
        translator = DeepLTranslator("key:fx", client=self.FakeClient(lambda texts: []))
        assert translator.server_url == FREE_SERVER

    def test_count_mismatch(self):
        client = self.FakeClient(lambda texts: [SimpleNamespace(text="A")])
        with pytest.raises(TranslationError):
            DeepLTranslator("key", client=client).translate_batch(["a", "b"])

    def test_sdk_error(self):
        client = self.FakeClient(deepl.DeepLException("quota exceeded"))
        with pytest.raises(TranslationError, match="quota exceeded"):
            DeepLTranslator("key", client=client).translate("a")


class TestKeyManager:
    """Tests for credential lookup."""

    def test_env_wins_over_config(self, tmp_path, monkeypatch):
        config = I18nConfig(root=tmp_path, deepl={"authKey": "from-config", "isPro": False})
        monkeypatch.setenv("DEEPL_AUTH_KEY", "from-env")
        info = KeyManager(config).get_key_info("deepl")
        assert info.source == "env"
        assert KeyManager(config).get_key("deepl") == "from-env"

    def test_config_fallback(self, tmp_path):
        config = I18nConfig(root=tmp_path, baidu={"appid": "app", "secretKey": ""})
        km = KeyManager(config)
        assert km.get_key("baidu_appid") == "app"
        assert km.get_key("baidu_secret") is None

    def test_list_keys(self, tmp_path):
        infos = KeyManager(I18nConfig(root=tmp_path)).list_keys()
        assert [i.service for i in infos] == ["baidu_appid", "baidu_secret", "deepl"]
        assert not any(i.is_set for i in infos)

    def test_set_key_without_keyring_writes_config(self, tmp_path):
        km = KeyManager(I18nConfig(root=tmp_path))
        assert km.set_key("deepl", "secret-key") == "config"
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data["deepl"]["authKey"] == "secret-key"

    def test_mask(self, tmp_path):
        km = KeyManager(I18nConfig(root=tmp_path))
        assert km._mask_key("short") == "*****"
        assert km._mask_key("abcdefghijklmnop") == "abcd...mnop"

    def test_unknown_service(self, tmp_path):
        with pytest.raises(ValueError):
            KeyManager(I18nConfig(root=tmp_path)).get_key("openai")

    def test_require_key_message(self, tmp_path):
        with pytest.raises(ConfigError, match="DEEPL_AUTH_KEY"):
            require_key("deepl", I18nConfig(root=tmp_path))
