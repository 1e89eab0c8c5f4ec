"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from .runtime_settings import Configuration, PollingSettings, ServiceSettings

ENV_PREFIX = "JELLYFAAS_"


class ConfigurationError(Exception):
    """Raised when the runtime configuration is invalid."""


def load_configuration(environ: Mapping[str, str] | None = None) -> Configuration:
    """Build service and polling settings from defaults and JELLYFAAS_* overrides."""
    values = os.environ if environ is None else environ
    defaults = ServiceSettings()
    service = ServiceSettings(
        core_service_url=_url_setting(values, "CORE_SERVICE_URL", defaults.core_service_url),
        auth_service_url=_url_setting(values, "AUTH_SERVICE_URL", defaults.auth_service_url),
        web_ui_url=_url_setting(values, "WEB_UI_URL", defaults.web_ui_url, strip_slash=False),
        function_endpoint_url=_url_setting(
            values, "FUNCTION_ENDPOINT_URL", defaults.function_endpoint_url, strip_slash=False
        ),
        templates_repo_url=_url_setting(
            values, "TEMPLATES_REPO_URL", defaults.templates_repo_url
        ),
        api_key_header=_require_non_empty_string(
            values.get(f"{ENV_PREFIX}API_KEY_HEADER", defaults.api_key_header),
            f"{ENV_PREFIX}API_KEY_HEADER",
        ),
        request_timeout_seconds=_require_positive_int(
            values.get(f"{ENV_PREFIX}REQUEST_TIMEOUT_SECONDS", defaults.request_timeout_seconds),
            f"{ENV_PREFIX}REQUEST_TIMEOUT_SECONDS",
        ),
    )
    polling_defaults = PollingSettings()
    polling = PollingSettings(
        max_rounds=_require_positive_int(
            values.get(f"{ENV_PREFIX}POLL_MAX_ROUNDS", polling_defaults.max_rounds),
            f"{ENV_PREFIX}POLL_MAX_ROUNDS",
        ),
        interval_seconds=_require_non_negative_float(
            values.get(f"{ENV_PREFIX}POLL_INTERVAL_SECONDS", polling_defaults.interval_seconds),
            f"{ENV_PREFIX}POLL_INTERVAL_SECONDS",
        ),
    )
    return Configuration(service=service, polling=polling)


def _url_setting(
    values: Mapping[str, str], suffix: str, default: str, *, strip_slash: bool = True
) -> str:
    field_name = f"{ENV_PREFIX}{suffix}"
    url = _require_non_empty_string(values.get(field_name, default), field_name)
    if not url.startswith(("http://", "https://")):
        raise ConfigurationError(f"{field_name} must be an http(s) URL.")
    return url.rstrip("/") if strip_slash else url


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise ConfigurationError(f"{field_name} must be an integer.") from exc
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value


def _require_non_negative_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a number.")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as exc:
            raise ConfigurationError(f"{field_name} must be a number.") from exc
    if not isinstance(value, (int, float)):
        raise ConfigurationError(f"{field_name} must be a number.")
    if value < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return float(value)
