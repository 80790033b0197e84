"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import ipaddress
import logging
import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import certifi
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docautofill.exceptions import SettingsError

logger = logging.getLogger(__name__)

_LOCAL_HOSTNAMES = frozenset({"localhost", "localhost.localdomain"})


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "docautofill"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    storage_namespace: str = Field(
        default="arms",
        validation_alias="STORAGE_NAMESPACE",
        description="Prefix of every durable session store key.",
    )
    session_store_path: str = Field(
        default=".docautofill/session.json",
        validation_alias="SESSION_STORE_PATH",
        description="File backing the durable session store used by the CLI.",
    )
    persist_analysis: bool = Field(
        default=True,
        validation_alias="PERSIST_ANALYSIS",
        description="Also persist the full extraction service response.",
    )

    extraction_service_url: str | None = Field(
        default=None,
        validation_alias="EXTRACTION_SERVICE_URL",
        description="Base URL of the document extraction service.",
    )
    extraction_endpoint: str = Field(
        default="/api/llm/categorize-document",
        validation_alias="EXTRACTION_ENDPOINT",
        description="Path of the document categorization endpoint.",
    )
    http_proxy: str | None = Field(default=None, validation_alias="HTTP_PROXY", description="HTTP proxy URL.")
    https_proxy: str | None = Field(
        default=None,
        validation_alias="HTTPS_PROXY",
        description="HTTPS proxy URL.",
    )
    all_proxy: str | None = Field(default=None, validation_alias="ALL_PROXY", description="All proxy URL.")
    cert_path: str | None = Field(
        default=None,
        validation_alias="CERT_PATH",
        description="Path to SSL certificate bundle.",
    )
    timeout: float = Field(
        default=30.0,
        validation_alias="TIMEOUT",
        description="Request timeout in seconds.",
    )

    max_document_size_bytes: int = Field(
        default=1024 * 1024,
        validation_alias="MAX_DOCUMENT_SIZE_BYTES",
        description="Largest accepted upload, in bytes.",
    )
    date_min_year: int = Field(
        default=1900,
        validation_alias="DATE_MIN_YEAR",
        description="Parsed dates must fall after this year.",
    )
    date_max_year: int = Field(
        default=2100,
        validation_alias="DATE_MAX_YEAR",
        description="Parsed dates must fall before this year.",
    )

    @field_validator("extraction_service_url")
    @classmethod
    def _validate_extraction_service_url(cls, value: str | None) -> str | None:
        """Require https for the extraction service outside local development.

        Args:
            value (str | None): Configured base URL.

        Raises:
            ValueError: If the URL is plain http on a non-local host.

        Returns:
            str | None: Base URL without trailing slash.
        """
        if value is None:
            return None
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise ValueError("EXTRACTION_SERVICE_URL must be an absolute http(s) URL")  # noqa: TRY003
        if parsed.scheme == "http" and not _is_local_host(parsed.hostname):
            raise ValueError("EXTRACTION_SERVICE_URL must use https outside local development")  # noqa: TRY003
        return value.rstrip("/")

    @property
    def extraction_url(self) -> str | None:
        """Return the full categorization endpoint URL."""
        if not self.extraction_service_url:
            return None
        return f"{self.extraction_service_url}/{self.extraction_endpoint.lstrip('/')}"


def _is_local_host(hostname: str) -> bool:
    """Return whether the host is a loopback address or localhost alias.

    Args:
        hostname (str): Host part of a URL.

    Returns:
        bool: True for local development hosts.
    """
    host = hostname.lower().strip("[]")
    if host in _LOCAL_HOSTNAMES:
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Build a strict SSL context from settings.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ssl.SSLContext: Configured TLS context.
    """
    ssl_context = ssl.create_default_context(cafile=settings.cert_path or certifi.where())
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def build_httpx_client_kwargs(settings: Settings) -> dict[str, Any]:
    """Build kwargs used for `httpx.Client`.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        dict[str, Any]: Arguments for the client constructor.
    """
    kwargs: dict[str, Any] = {
        "verify": build_ssl_context(settings),
        "timeout": settings.timeout,
    }
    proxy_url = settings.https_proxy or settings.http_proxy or settings.all_proxy
    if proxy_url:
        kwargs["proxy"] = proxy_url
    return kwargs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
