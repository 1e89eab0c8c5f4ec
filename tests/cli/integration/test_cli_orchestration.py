"""CLI orchestration integration tests."""

from __future__ import annotations

import base64
import json
import zipfile
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner
from jellyfaas_cli.cli import cli
from jellyfaas_cli.platform_api.api_errors import PlatformApiError
from jellyfaas_cli.platform_api.api_models import (
    BadBuildCleanup,
    BadBuildListing,
    DeployedFunction,
    LibraryItemDetails,
)

FAST_POLLING = {"JELLYFAAS_POLL_INTERVAL_SECONDS": "0", "JELLYFAAS_POLL_MAX_ROUNDS": "3"}


def _write_credentials(tmp_path: Path) -> Path:
    path = tmp_path / ".jellyfaas"
    path.write_text(
        yaml.safe_dump({"apikey": "stored-secret-key-123", "env": "jellyfaas"}), encoding="utf-8"
    )
    return path


def _write_project(tmp_path: Path) -> Path:
    project = tmp_path / "hello"
    project.mkdir()
    (project / "jellyspec.json").write_text(
        json.dumps({"name": "hello", "shortname": "hello_fn"}), encoding="utf-8"
    )
    (project / "main.py").write_text("def handler(): ...\n", encoding="utf-8")
    return project


def _fake_client_class(statuses: list[str], *, fail_status: bool = False):
    class FakePlatformClient:
        instances: list[FakePlatformClient] = []

        def __init__(self, service_settings, api_key, *, session=None) -> None:
            self.api_key = api_key
            self.status_base_url = service_settings.upload_url
            self.uploaded: list[Path] = []
            self.status_urls: list[str] = []
            FakePlatformClient.instances.append(self)

        def upload_function(self, archive_path):
            self.uploaded.append(Path(archive_path))
            return DeployedFunction.from_payload(
                {
                    "function": "hellofn",
                    "function_id": "fn-1",
                    "deployedDetails": [
                        {"Size": "small", "opid": "op-1", "urlLocation": "https://api/x/fn-1"}
                    ],
                    "new": True,
                }
            )

        def fetch_operation_status(self, url, *, api_key=None):
            self.status_urls.append(url)
            if fail_status:
                raise PlatformApiError("backend unavailable", status_code=503)
            return statuses.pop(0) if len(statuses) > 1 else statuses[0]

        def function_exists(self, name):
            return name == "taken"

        def list_bad_builds(self):
            return BadBuildListing.from_payload(
                {"count": 1, "badBuilds": [{"buildId": "b-1", "errorDetails": "compile error"}]}
            )

        def clean_bad_build(self, build_id):
            return BadBuildCleanup(build_id=build_id, functions=("fn-1",))

        def get_library_item(self, function_id):
            readme = base64.b64encode(b"# Hello README\n\nUsage notes.").decode("ascii")
            return LibraryItemDetails.from_payload(
                {
                    "name": "hello",
                    "functionId": function_id,
                    "versions": [{"version": 1, "latest": True, "readmeFile": readme}],
                }
            )

    return FakePlatformClient


def test_spec_command_prints_raw_flat_schema() -> None:
    result = CliRunner().invoke(cli, ["spec", "--json", '{"a": 5, "b": [1.5]}', "--raw", "--flat"])

    assert result.exit_code == 0
    schema = json.loads(result.output)
    assert schema["properties"] == {
        "a": {"type": "integer"},
        "b": {"type": "array", "items": {"type": "number"}},
    }
    assert len(result.output.strip().splitlines()) == 1


def test_spec_command_frames_indented_schema_and_reads_files(tmp_path: Path) -> None:
    example = tmp_path / "example.json"
    example.write_text('{"name": "x"}', encoding="utf-8")

    result = CliRunner().invoke(cli, ["spec", "--file", str(example)])

    assert result.exit_code == 0
    assert result.output.startswith("Json Schema (basic):")
    assert '  "required": [' in result.output


def test_spec_command_requires_exactly_one_source() -> None:
    result = CliRunner().invoke(cli, ["spec"])

    assert result.exit_code == 2
    assert "exactly one of --json or --file" in result.output


def test_secret_command_writes_credentials_file(tmp_path: Path) -> None:
    credentials_path = tmp_path / "config" / ".jellyfaas"

    result = CliRunner().invoke(
        cli,
        ["--credentials-file", str(credentials_path), "secret"],
        input="abcdefghijklmnopqrstu\n",
    )

    assert result.exit_code == 0
    assert yaml.safe_load(credentials_path.read_text(encoding="utf-8")) == {
        "apikey": "abcdefghijklmnopqrstu",
        "env": "jellyfaas",
    }
    assert "abcdefghijklmnopqrstu" not in result.output


def test_secret_command_rejects_short_key(tmp_path: Path) -> None:
    credentials_path = tmp_path / ".jellyfaas"

    result = CliRunner().invoke(
        cli, ["--credentials-file", str(credentials_path), "secret"], input="short\n"
    )

    assert result.exit_code != 0
    assert "too short" in str(result.exception)
    assert not credentials_path.exists()


def test_zip_deploy_wait_reports_ready(tmp_path: Path, monkeypatch) -> None:
    credentials = _write_credentials(tmp_path)
    project = _write_project(tmp_path)
    fake_client = _fake_client_class(["BUILDING", "DEPLOYED"])
    monkeypatch.setattr("jellyfaas_cli.cli.PlatformApiClient", fake_client)
    runner = CliRunner()

    with runner.isolated_filesystem(temp_dir=str(tmp_path)):
        result = runner.invoke(
            cli,
            [
                "--credentials-file",
                str(credentials),
                "zip",
                "--source",
                str(project),
                "--deploy",
                "--wait",
            ],
            env=FAST_POLLING,
        )
        archive = Path("hellofn.zip").resolve()
        assert archive.exists()
        with zipfile.ZipFile(archive) as zipped:
            assert "hello_fn/main.py" in zipped.namelist()
            assert "hello_fn/" in zipped.namelist()

    assert result.exit_code == 0, result.output
    client = fake_client.instances[0]
    assert client.api_key == "stored-secret-key-123"
    assert client.uploaded[0].name == "hellofn.zip"
    assert client.status_urls == [
        "https://api.jellyfaas.com/core-service/v1/upload/op-1/fn-1",
        "https://api.jellyfaas.com/core-service/v1/upload/op-1/fn-1",
    ]
    assert "Count 1/3 : Operation is not complete" in result.output
    assert "status : BUILDING" in result.output
    assert "function(s) is ready to be used" in result.output


def test_deploy_wait_reports_exhausted_rounds(tmp_path: Path, monkeypatch) -> None:
    credentials = _write_credentials(tmp_path)
    archive = tmp_path / "hello.zip"
    archive.write_bytes(b"zip")
    fake_client = _fake_client_class(["BUILDING"])
    monkeypatch.setattr("jellyfaas_cli.cli.PlatformApiClient", fake_client)

    result = CliRunner().invoke(
        cli,
        ["--credentials-file", str(credentials), "deploy", "--zipfile", str(archive), "--wait"],
        env=FAST_POLLING,
    )

    assert result.exit_code == 1
    assert "did not finish in time" in str(result.exception)
    assert "builds list" in str(result.exception)
    assert len(fake_client.instances[0].status_urls) == 3
    assert "Function URL: https://app.jellyfaas.com/function/hello" in result.output


def test_deploy_wait_aborts_on_status_failure(tmp_path: Path, monkeypatch) -> None:
    credentials = _write_credentials(tmp_path)
    archive = tmp_path / "hello.zip"
    archive.write_bytes(b"zip")
    fake_client = _fake_client_class(["BUILDING"], fail_status=True)
    monkeypatch.setattr("jellyfaas_cli.cli.PlatformApiClient", fake_client)

    result = CliRunner().invoke(
        cli,
        ["--credentials-file", str(credentials), "deploy", "--zipfile", str(archive), "--wait"],
        env=FAST_POLLING,
    )

    assert result.exit_code == 1
    assert "aborted" in str(result.exception)
    assert "backend unavailable" in str(result.exception)
    assert len(fake_client.instances[0].status_urls) == 1


def test_library_details_renders_readme(tmp_path: Path, monkeypatch) -> None:
    credentials = _write_credentials(tmp_path)
    monkeypatch.setattr("jellyfaas_cli.cli.PlatformApiClient", _fake_client_class(["DEPLOYED"]))

    result = CliRunner().invoke(
        cli,
        ["--credentials-file", str(credentials), "library", "--details", "fn-9", "--readme"],
    )

    assert result.exit_code == 0, result.output
    assert "fn-9" in result.output
    assert "Hello README" in result.output
    assert "Usage notes." in result.output


def test_builds_and_exists_commands(tmp_path: Path, monkeypatch) -> None:
    credentials = _write_credentials(tmp_path)
    monkeypatch.setattr("jellyfaas_cli.cli.PlatformApiClient", _fake_client_class(["DEPLOYED"]))
    runner = CliRunner()
    base_args = ["--credentials-file", str(credentials)]

    listed = runner.invoke(cli, [*base_args, "builds", "list"])
    cleaned = runner.invoke(cli, [*base_args, "builds", "clean", "--build-id", "b-1"])
    exists = runner.invoke(cli, [*base_args, "exists", "--name", "taken"])

    assert listed.exit_code == 0
    assert "compile error" in listed.output
    assert cleaned.exit_code == 0
    assert "Function ID: fn-1" in cleaned.output
    assert exists.output.strip() == "Function taken exists: true"


def test_create_command_passes_template_repository(tmp_path: Path, monkeypatch) -> None:
    captured: dict = {}

    def _fake_create(name, language, destination, *, templates_repo_url, always):
        captured.update(
            name=name, language=language, repo=templates_repo_url, always=always
        )
        return Path(destination) / name

    monkeypatch.setattr("jellyfaas_cli.cli.create_function_project", _fake_create)

    result = CliRunner().invoke(
        cli,
        ["create", "--name", "hello", "--language", "python", "--destination", str(tmp_path)],
        env={"JELLYFAAS_TEMPLATES_REPO_URL": "https://example.com/templates.git"},
    )

    assert result.exit_code == 0
    assert captured == {
        "name": "hello",
        "language": "python",
        "repo": "https://example.com/templates.git",
        "always": False,
    }
    assert "Project created successfully" in result.output


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (["base64", "--encode", "hello"], "aGVsbG8="),
        (["base64", "--decode", "aGVsbG8="], "hello"),
    ],
)
def test_base64_command(args: list[str], expected: str) -> None:
    result = CliRunner().invoke(cli, args)

    assert result.exit_code == 0
    assert result.output.strip() == expected


def test_base64_command_reports_invalid_input() -> None:
    result = CliRunner().invoke(cli, ["base64", "--decode", "%%%"])

    assert result.exit_code == 1
    assert "Error decoding string" in str(result.exception)
