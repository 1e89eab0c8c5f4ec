"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CORE_SERVICE_URL = "https://api.jellyfaas.com/core-service/v1"
DEFAULT_AUTH_SERVICE_URL = "https://api.jellyfaas.com/auth-service/v1"
DEFAULT_WEB_UI_URL = "https://app.jellyfaas.com/function/"
DEFAULT_FUNCTION_ENDPOINT_URL = "https://api.jellyfaas.com/"
DEFAULT_TEMPLATES_REPO_URL = "https://github.com/Platform48/jellyfaas_public_templates.git"
DEFAULT_API_KEY_HEADER = "x-jf-apikey"
DEFAULT_ENVIRONMENT = "jellyfaas"


@dataclass(frozen=True)
class Credentials:
    """Secret key and environment label stored on disk."""

    api_key: str
    env: str = DEFAULT_ENVIRONMENT


@dataclass(frozen=True)
class ServiceSettings:  # pylint: disable=too-many-instance-attributes
    """Remote platform endpoints."""

    core_service_url: str = DEFAULT_CORE_SERVICE_URL
    auth_service_url: str = DEFAULT_AUTH_SERVICE_URL
    web_ui_url: str = DEFAULT_WEB_UI_URL
    function_endpoint_url: str = DEFAULT_FUNCTION_ENDPOINT_URL
    templates_repo_url: str = DEFAULT_TEMPLATES_REPO_URL
    api_key_header: str = DEFAULT_API_KEY_HEADER
    request_timeout_seconds: int = 60

    @property
    def upload_url(self) -> str:
        return f"{self.core_service_url}/upload"


@dataclass(frozen=True)
class PollingSettings:
    """Bounds for waiting on deployment operations."""

    max_rounds: int = 10
    interval_seconds: float = 30.0


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    service: ServiceSettings
    polling: PollingSettings
