"""Tests for the deploy use-case service."""

from __future__ import annotations

from pathlib import Path

import pytest
from jellyfaas_cli.deploy_execution.deploy_contracts import DeployRequest
from jellyfaas_cli.deploy_execution.deploy_use_case import DeployExecutionError, execute_deploy
from jellyfaas_cli.deployment_polling.polling_outcomes import PollSessionResult
from jellyfaas_cli.platform_api.api_errors import PlatformApiError
from jellyfaas_cli.platform_api.api_models import DeployedDetails, DeployedFunction

DEPLOYED = DeployedFunction(
    function="hello",
    function_id="fn-1",
    deployed_details=(
        DeployedDetails(size="small", operation_id="op-1", function_url="https://x/1"),
        DeployedDetails(size="large", operation_id="op-2", function_url="https://x/2"),
    ),
    new=True,
)


class FakeUploader:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploaded: list[Path] = []

    def upload_function(self, archive_path):
        self.uploaded.append(archive_path)
        if self.error:
            raise self.error
        return DEPLOYED


class FakePoller:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def wait_for_completion(self, function_id, operation_ids, api_key):
        self.calls.append((function_id, tuple(operation_ids), api_key))
        return PollSessionResult.succeeded(1, ())


def _archive(tmp_path: Path) -> Path:
    archive = tmp_path / "hello.zip"
    archive.write_bytes(b"zip")
    return archive


def test_deploy_without_wait_only_uploads(tmp_path: Path) -> None:
    uploader = FakeUploader()
    poller = FakePoller()
    seen: list[DeployedFunction] = []

    outcome = execute_deploy(
        DeployRequest(archive_path=_archive(tmp_path)),
        api_client=uploader,
        api_key="key",
        poller=poller,
        on_uploaded=seen.append,
    )

    assert outcome.function_name == "hello"
    assert outcome.deployed == DEPLOYED
    assert outcome.poll_result is None
    assert poller.calls == []
    assert seen == [DEPLOYED]


def test_deploy_with_wait_hands_every_operation_to_poller(tmp_path: Path) -> None:
    poller = FakePoller()

    outcome = execute_deploy(
        DeployRequest(archive_path=_archive(tmp_path), wait=True),
        api_client=FakeUploader(),
        api_key="key",
        poller=poller,
    )

    assert poller.calls == [("fn-1", ("op-1", "op-2"), "key")]
    assert outcome.poll_result is not None
    assert outcome.poll_result.is_success


def test_upload_failure_is_wrapped(tmp_path: Path) -> None:
    uploader = FakeUploader(error=PlatformApiError("rejected", status_code=409))

    with pytest.raises(DeployExecutionError, match="rejected"):
        execute_deploy(
            DeployRequest(archive_path=_archive(tmp_path), wait=True),
            api_client=uploader,
            api_key="key",
            poller=FakePoller(),
        )


def test_missing_archive_is_reported_before_upload(tmp_path: Path) -> None:
    uploader = FakeUploader()

    with pytest.raises(DeployExecutionError, match="Zip file not found"):
        execute_deploy(
            DeployRequest(archive_path=tmp_path / "absent.zip"),
            api_client=uploader,
            api_key="key",
        )
    assert uploader.uploaded == []
