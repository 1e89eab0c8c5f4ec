"""Platform API error types."""

from __future__ import annotations


class PlatformApiError(Exception):
    """Raised when a platform request fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_id: str | None = None,
        error_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_id = error_id
        self.error_message = error_message

    def __str__(self) -> str:
        text = super().__str__()
        if self.status_code is not None:
            text = f"{text} (HTTP {self.status_code})"
        if self.error_id or self.error_message:
            text = f"{text}\nSupport ID: {self.error_id or '-'}\nError: {self.error_message or '-'}"
        return text
