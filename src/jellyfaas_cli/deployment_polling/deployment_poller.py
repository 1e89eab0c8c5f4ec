"""Deployment completion polling service."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Protocol

from jellyfaas_cli.configuration.runtime_settings import PollingSettings
from jellyfaas_cli.platform_api.api_errors import PlatformApiError

from .polling_outcomes import (
    DEPLOYED_STATUS,
    HandleSnapshot,
    OperationHandle,
    PollProgress,
    PollSessionResult,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[PollProgress], None]


class StatusClient(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for fetching the status string of one deployment operation.

    Implementations raise PlatformApiError on transport failures and
    non-success responses.
    """

    def fetch_operation_status(self, url: str, *, api_key: str) -> str: ...


def build_operation_handles(
    function_id: str, operation_ids: Sequence[str], status_base_url: str
) -> list[OperationHandle]:
    """Create one pending handle per operation id, preserving order."""
    base = status_base_url.rstrip("/")
    return [
        OperationHandle(
            operation_id=operation_id,
            function_id=function_id,
            poll_url=f"{base}/{operation_id}/{function_id}",
        )
        for operation_id in operation_ids
    ]


def pending_handles(handles: Sequence[OperationHandle]) -> list[OperationHandle]:
    return [handle for handle in handles if not handle.complete]


def all_complete(handles: Sequence[OperationHandle]) -> bool:
    return all(handle.complete for handle in handles)


def mark_status(handle: OperationHandle, status: str) -> bool:
    """Apply a polled status to the handle and return whether it is complete."""
    if status == DEPLOYED_STATUS:
        handle.complete = True
    return handle.complete


def snapshot(handles: Sequence[OperationHandle]) -> tuple[HandleSnapshot, ...]:
    return tuple(
        HandleSnapshot(operation_id=handle.operation_id, complete=handle.complete)
        for handle in handles
    )


class DeploymentPoller:
    """Blocks until every deployment operation reports DEPLOYED or rounds run out."""

    def __init__(
        self,
        status_client: StatusClient,
        settings: PollingSettings,
        *,
        status_base_url: str,
        sleep: Callable[[float], None] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._status_client = status_client
        self._settings = settings
        self._status_base_url = status_base_url
        self._sleep = sleep or time.sleep
        self._on_progress = on_progress

    def wait_for_completion(
        self, function_id: str, operation_ids: Sequence[str], api_key: str
    ) -> PollSessionResult:
        handles = build_operation_handles(function_id, operation_ids, self._status_base_url)
        max_rounds = self._settings.max_rounds

        for round_number in range(1, max_rounds + 1):
            logger.debug(
                "poll round %d/%d, %d pending",
                round_number,
                max_rounds,
                len(pending_handles(handles)),
            )
            for handle in pending_handles(handles):
                try:
                    status = self._status_client.fetch_operation_status(
                        handle.poll_url, api_key=api_key
                    )
                except PlatformApiError as exc:
                    logger.debug("status check failed for %s: %s", handle.operation_id, exc)
                    return PollSessionResult.aborted(round_number, snapshot(handles), exc)
                if not mark_status(handle, status):
                    self._report(PollProgress(round_number, max_rounds, handle.operation_id, status))

            if all_complete(handles):
                return PollSessionResult.succeeded(round_number, snapshot(handles))
            if round_number < max_rounds:
                self._sleep(self._settings.interval_seconds)

        return PollSessionResult.exhausted(max_rounds, snapshot(handles))

    def _report(self, progress: PollProgress) -> None:
        if self._on_progress is not None:
            self._on_progress(progress)
