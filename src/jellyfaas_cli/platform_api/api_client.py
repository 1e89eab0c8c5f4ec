"""HTTP client for the JellyFaaS platform services."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import requests

from jellyfaas_cli.configuration.runtime_settings import ServiceSettings

from .api_errors import PlatformApiError
from .api_models import (
    BadBuildCleanup,
    BadBuildListing,
    DeployedFunction,
    LibraryItemDetails,
    LibraryListing,
    TokenDetails,
    UserDetails,
)

logger = logging.getLogger(__name__)


class PlatformApiClient:
    """Authenticated wrapper around the core and auth service endpoints."""

    def __init__(
        self,
        service_settings: ServiceSettings,
        api_key: str,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = service_settings
        self._api_key = api_key
        self._session = session or requests.Session()

    @property
    def status_base_url(self) -> str:
        return self._settings.upload_url

    def upload_function(self, archive_path: Path | str) -> DeployedFunction:
        """Upload a packaged function archive and return the deployment targets."""
        path = Path(archive_path)
        try:
            with path.open("rb") as archive:
                payload = self._request(
                    "POST",
                    self._settings.upload_url,
                    files={"file": (path.name, archive, "application/zip")},
                    failure_message=(
                        "Deployment was rejected, this normally happens when an upgrade is "
                        "already in progress"
                    ),
                )
        except OSError as exc:
            raise PlatformApiError(f"Cannot read archive {path}: {exc}") from exc
        return DeployedFunction.from_payload(_require_mapping(payload))

    def fetch_operation_status(self, url: str, *, api_key: str | None = None) -> str:
        payload = self._request(
            "GET",
            url,
            api_key=api_key,
            failure_message="Error calling backend service to validate status",
        )
        status = _require_mapping(payload).get("status")
        return "" if status is None else str(status)

    def list_library(self) -> LibraryListing:
        payload = self._request(
            "GET", self._core("library"), failure_message="Failed to list the library"
        )
        return LibraryListing.from_payload(_require_mapping(payload))

    def get_library_item(self, function_id: str) -> LibraryItemDetails:
        payload = self._request(
            "GET",
            self._core(f"library/{function_id}"),
            failure_message="Cannot find library item requested, is the name correct?",
        )
        return LibraryItemDetails.from_payload(_require_mapping(payload))

    def set_published_state(self, function_id: str, published: bool) -> None:
        action = "publish" if published else "withdraw"
        self._request(
            "PUT",
            self._core(f"library/{action}/{function_id}"),
            failure_message=f"Failed to {action} function",
        )

    def list_bad_builds(self) -> BadBuildListing:
        payload = self._request(
            "GET", self._core("badbuilds"), failure_message="Failed to list bad builds"
        )
        return BadBuildListing.from_payload(_require_mapping(payload))

    def clean_bad_build(self, build_id: str) -> BadBuildCleanup:
        payload = self._request(
            "DELETE",
            self._core("badbuilds"),
            params={"id": build_id},
            failure_message="Failed to clean bad build",
        )
        return BadBuildCleanup.from_payload(_require_mapping(payload))

    def function_exists(self, name: str) -> bool:
        payload = self._request(
            "GET",
            self._core("exists"),
            params={"name": name},
            failure_message="Failed to check whether the function exists",
        )
        return bool(_require_mapping(payload).get("exists", False))

    def create_user(self, email: str, name: str) -> str:
        """Create a user and return the generated password."""
        payload = self._request(
            "POST",
            self._core("entity"),
            json={"type": "user", "name": name, "email": email},
            expected_status=201,
            failure_message="An error happened when attempting to create a user",
        )
        return str(_require_mapping(payload).get("password", ""))

    def list_users(self) -> list[UserDetails]:
        payload = self._request(
            "GET", self._core("entity"), failure_message="Failed to list users"
        )
        entities = _require_mapping(payload).get("entities") or []
        return [UserDetails.from_payload(item) for item in entities if isinstance(item, Mapping)]

    def validate_token(self) -> TokenDetails:
        payload = _require_mapping(
            self._request(
                "GET",
                f"{self._settings.auth_service_url}/validate",
                failure_message="An error happened when attempting to get token",
            )
        )
        return TokenDetails(
            token=str(payload.get("token", "")), expiry=str(payload.get("expiry", ""))
        )

    def _core(self, path: str) -> str:
        return f"{self._settings.core_service_url}/{path}"

    def _request(
        self,
        method: str,
        url: str,
        *,
        failure_message: str,
        expected_status: int = 200,
        api_key: str | None = None,
        **kwargs: Any,
    ) -> Any:
        headers = {self._settings.api_key_header: api_key or self._api_key}
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                timeout=self._settings.request_timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise PlatformApiError(f"Error calling out to service: {exc}") from exc

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code != expected_status:
            error_id, error_message = _error_details(response)
            raise PlatformApiError(
                failure_message,
                status_code=response.status_code,
                error_id=error_id,
                error_message=error_message,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise PlatformApiError(f"Unexpected response from {url}: {exc}") from exc


def _error_details(response: requests.Response) -> tuple[str | None, str | None]:
    try:
        payload = response.json()
    except ValueError:
        return None, None
    if not isinstance(payload, Mapping):
        return None, None
    error_id = payload.get("errorId")
    error_message = payload.get("errorMessage")
    return (
        str(error_id) if error_id else None,
        str(error_message) if error_message else None,
    )


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise PlatformApiError("Unexpected response payload: expected a JSON object.")
    return payload
