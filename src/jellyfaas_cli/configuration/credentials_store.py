"""Credential file reading and writing."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from .runtime_settings import DEFAULT_ENVIRONMENT, Credentials

CREDENTIALS_FILENAME = ".jellyfaas"
CREDENTIALS_PATH_ENV = "JELLYFAAS_CREDENTIALS_FILE"
MIN_API_KEY_LENGTH = 15


class CredentialsError(Exception):
    """Raised when the credentials file is missing or invalid."""


def default_credentials_path() -> Path:
    """Return the credentials file location, honouring JELLYFAAS_CREDENTIALS_FILE."""
    override = os.environ.get(CREDENTIALS_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / CREDENTIALS_FILENAME


def load_credentials(path: Path | str | None = None) -> Credentials:
    """Read the stored secret key.

    Raises:
      CredentialsError: If the file is absent, unparsable or has no API key.
    """
    credentials_path = Path(path) if path is not None else default_credentials_path()
    if not credentials_path.exists():
        raise CredentialsError(
            f"Credentials file not found: {credentials_path}. Run 'jellyfaas secret' first."
        )
    try:
        parsed = yaml.safe_load(credentials_path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as exc:
        raise CredentialsError(f"Failed to read credentials file: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise CredentialsError("Credentials file root must be a mapping.")

    api_key = parsed.get("apikey")
    if not isinstance(api_key, str) or not api_key.strip():
        raise CredentialsError("Credentials file does not contain an apikey.")
    env = parsed.get("env") or DEFAULT_ENVIRONMENT
    if not isinstance(env, str):
        raise CredentialsError("Credentials env must be a string.")
    return Credentials(api_key=api_key.strip(), env=env)


def validate_api_key(api_key: str) -> str:
    stripped = api_key.strip()
    if len(stripped) < MIN_API_KEY_LENGTH:
        raise CredentialsError(
            "Secret key too short, are you sure you entered the correct key?"
        )
    return stripped


def write_credentials(credentials: Credentials, path: Path | str | None = None) -> Path:
    """Persist credentials as YAML and return the resolved file path."""
    credentials_path = Path(path) if path is not None else default_credentials_path()
    payload = {"apikey": credentials.api_key, "env": credentials.env}
    try:
        credentials_path.parent.mkdir(parents=True, exist_ok=True)
        credentials_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    except OSError as exc:
        raise CredentialsError(f"Failed to write credentials file: {exc}") from exc
    return credentials_path.resolve()
