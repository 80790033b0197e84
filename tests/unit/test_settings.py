from __future__ import annotations

import ssl
from typing import TYPE_CHECKING, cast

import pytest
from pydantic import ValidationError

from docautofill.exceptions import SettingsError
from docautofill.settings import (
    Settings,
    build_httpx_client_kwargs,
    build_ssl_context,
    ensure_env_file_exists,
    get_settings,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_settings_load_from_env_file(tmp_path: Path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "APP_ENV=test\n"
        "LOG_LEVEL=DEBUG\n"
        "LOG_JSON=false\n"
        "TIMEOUT=12\n"
        "STORAGE_NAMESPACE=ucrs\n"
        "PERSIST_ANALYSIS=false\n"
        "MAX_DOCUMENT_SIZE_BYTES=2048\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    settings = Settings()

    assert settings.app_env == "test"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.timeout == 12
    assert settings.storage_namespace == "ucrs"
    assert settings.persist_analysis is False
    assert settings.max_document_size_bytes == 2048


def test_settings_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = Settings()

    assert settings.storage_namespace == "arms"
    assert settings.extraction_endpoint == "/api/llm/categorize-document"
    assert settings.extraction_url is None
    assert settings.date_min_year == 1900
    assert settings.date_max_year == 2100


def test_settings_rejects_plain_http_service_url_outside_localhost(monkeypatch) -> None:
    monkeypatch.setenv("EXTRACTION_SERVICE_URL", "http://arms.example.org")
    with pytest.raises(ValidationError, match="must use https outside local development"):
        Settings()


def test_settings_allows_plain_http_service_url_for_localhost(monkeypatch) -> None:
    monkeypatch.setenv("EXTRACTION_SERVICE_URL", "http://127.0.0.1:3000/")
    settings = Settings()

    assert settings.extraction_service_url == "http://127.0.0.1:3000"
    assert settings.extraction_url == "http://127.0.0.1:3000/api/llm/categorize-document"


def test_settings_rejects_relative_service_url(monkeypatch) -> None:
    monkeypatch.setenv("EXTRACTION_SERVICE_URL", "/api")
    with pytest.raises(ValidationError, match="absolute"):
        Settings()


def test_get_settings_uses_environment(monkeypatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("APP_ENV", "ci")

    settings = get_settings()
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_retries_after_env_template_on_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    attempts = {"count": 0}

    class _DummySettings:
        app_env = "ci"

    def _fake_settings():
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise ValueError("missing")
        return _DummySettings()

    copied = {"done": 0}

    def _mark_env_copied(**kwargs: object) -> None:
        _ = kwargs
        copied["done"] += 1

    monkeypatch.setattr("docautofill.settings.Settings", _fake_settings)
    monkeypatch.setattr("docautofill.settings._is_missing_settings_error", lambda exc: True)
    monkeypatch.setattr("docautofill.settings.ensure_env_file_exists", _mark_env_copied)

    settings = get_settings()
    assert copied["done"] == 1
    assert attempts["count"] == 2
    assert settings.app_env == "ci"

    get_settings.cache_clear()


def test_get_settings_does_not_copy_env_on_non_missing(monkeypatch) -> None:
    get_settings.cache_clear()

    def _raise_runtime_error():
        raise RuntimeError("boom")

    def _raise_assertion_error(**kwargs: object) -> None:
        _ = kwargs
        raise AssertionError("should not copy env")

    monkeypatch.setattr("docautofill.settings.Settings", _raise_runtime_error)
    monkeypatch.setattr("docautofill.settings._is_missing_settings_error", lambda exc: False)
    monkeypatch.setattr("docautofill.settings.ensure_env_file_exists", _raise_assertion_error)

    with pytest.raises(SettingsError):
        get_settings()

    get_settings.cache_clear()


def test_ensure_env_file_exists_copies_template(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("EXTRACTION_SERVICE_URL=https://arms.example.org\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert "EXTRACTION_SERVICE_URL" in env_file.read_text(encoding="utf-8")


def test_ensure_env_file_exists_keeps_existing_env(tmp_path: Path) -> None:
    template = tmp_path / ".env.template"
    env_file = tmp_path / ".env"
    template.write_text("APP_ENV=template\n", encoding="utf-8")
    env_file.write_text("APP_ENV=mine\n", encoding="utf-8")

    ensure_env_file_exists(env_path=env_file, template_path=template)

    assert env_file.read_text(encoding="utf-8") == "APP_ENV=mine\n"


def test_build_ssl_context_enforces_tls() -> None:
    context = build_ssl_context(Settings())
    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.minimum_version == ssl.TLSVersion.TLSv1_2


def test_build_ssl_context_prefers_cert_path(monkeypatch) -> None:
    class _SettingsStub:
        cert_path = "/path/internal-ca.pem"

    class _FakeContext:
        verify_mode: int | None = None
        minimum_version: ssl.TLSVersion | None = None

    calls: list[str | None] = []

    def _fake_create_default_context(*, cafile: str | None = None) -> _FakeContext:
        calls.append(cafile)
        return _FakeContext()

    monkeypatch.setattr("docautofill.settings.ssl.create_default_context", _fake_create_default_context)

    _ = build_ssl_context(cast("Settings", _SettingsStub()))

    assert calls == ["/path/internal-ca.pem"]


def test_build_httpx_client_kwargs_uses_proxy_and_timeout() -> None:
    settings = Settings(timeout=5.0, https_proxy="http://proxy.local:3128")

    kwargs = build_httpx_client_kwargs(settings)

    assert kwargs["timeout"] == 5.0
    assert kwargs["proxy"] == "http://proxy.local:3128"
    assert isinstance(kwargs["verify"], ssl.SSLContext)
