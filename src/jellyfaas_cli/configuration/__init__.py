"""Configuration domain exports."""

from .credentials_store import (
    CredentialsError,
    default_credentials_path,
    load_credentials,
    validate_api_key,
    write_credentials,
)
from .loader import ConfigurationError, load_configuration
from .runtime_settings import Configuration, Credentials, PollingSettings, ServiceSettings

__all__ = [
    "Configuration",
    "Credentials",
    "PollingSettings",
    "ServiceSettings",
    "ConfigurationError",
    "load_configuration",
    "CredentialsError",
    "default_credentials_path",
    "load_credentials",
    "validate_api_key",
    "write_credentials",
]
