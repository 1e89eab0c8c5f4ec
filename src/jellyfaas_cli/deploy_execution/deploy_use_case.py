"""Deploy use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from jellyfaas_cli.deployment_polling.polling_outcomes import PollSessionResult
from jellyfaas_cli.platform_api.api_errors import PlatformApiError
from jellyfaas_cli.platform_api.api_models import DeployedFunction

from .deploy_contracts import DeployOutcome, DeployRequest

logger = logging.getLogger(__name__)


class DeployExecutionError(Exception):
    """Raised when a deployment cannot be completed."""


class UploadClient(Protocol):  # pylint: disable=too-few-public-methods
    def upload_function(self, archive_path: Path) -> DeployedFunction: ...


class CompletionWaiter(Protocol):  # pylint: disable=too-few-public-methods
    def wait_for_completion(
        self, function_id: str, operation_ids: Sequence[str], api_key: str
    ) -> PollSessionResult: ...


def execute_deploy(
    request: DeployRequest,
    *,
    api_client: UploadClient,
    api_key: str,
    poller: CompletionWaiter | None = None,
    on_uploaded: Callable[[DeployedFunction], None] | None = None,
) -> DeployOutcome:
    """Upload the archive and, when requested, wait for every target to deploy."""
    if not request.archive_path.is_file():
        raise DeployExecutionError(f"Zip file not found: {request.archive_path}")
    try:
        deployed = api_client.upload_function(request.archive_path)
    except PlatformApiError as exc:
        raise DeployExecutionError(str(exc)) from exc
    if on_uploaded is not None:
        on_uploaded(deployed)

    function_name = request.archive_path.stem
    if not request.wait:
        return DeployOutcome(function_name=function_name, deployed=deployed)
    if poller is None:
        raise DeployExecutionError("Waiting for deployment requires a poller.")

    logger.debug(
        "waiting on %d operations for function %s",
        len(deployed.operation_ids),
        deployed.function_id,
    )
    poll_result = poller.wait_for_completion(
        deployed.function_id, deployed.operation_ids, api_key
    )
    return DeployOutcome(function_name=function_name, deployed=deployed, poll_result=poll_result)
