"""Command line interface entry point."""

from __future__ import annotations

import base64
import binascii
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import click
from rich.console import Console

from jellyfaas_cli import __version__
from jellyfaas_cli.configuration import (
    Configuration,
    ConfigurationError,
    Credentials,
    CredentialsError,
    load_configuration,
    load_credentials,
    validate_api_key,
    write_credentials,
)
from jellyfaas_cli.deploy_execution import DeployExecutionError, DeployRequest, execute_deploy
from jellyfaas_cli.deployment_polling import (
    DeploymentPoller,
    PollOutcome,
    PollProgress,
    PollSessionResult,
)
from jellyfaas_cli.library_rendering import (
    decode_readme,
    render_bad_builds,
    render_function_details,
    render_library_table,
    render_markdown,
    render_users_table,
)
from jellyfaas_cli.platform_api import DeployedFunction, PlatformApiClient, PlatformApiError
from jellyfaas_cli.project_packaging import PackagingError, package_project
from jellyfaas_cli.project_scaffolding import ScaffoldError, create_function_project
from jellyfaas_cli.schema_inference import SchemaParseError, generate_schema_document

SCHEMA_FRAME = "------------------------------"


class CliError(Exception):
    """Custom CLI error."""


@dataclass(frozen=True)
class CliState:
    credentials_path: Path | None


@dataclass(frozen=True)
class _ApiContext:
    client: PlatformApiClient
    credentials: Credentials
    configuration: Configuration


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="JellyFaaS CLI")
@click.option(
    "--credentials-file",
    "credentials_path",
    envvar="JELLYFAAS_CREDENTIALS_FILE",
    required=False,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Path to the secret key file (defaults to ~/.jellyfaas)",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, credentials_path: Path | None, verbose: bool) -> None:
    """JellyFaaS command line client."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CliState(credentials_path=credentials_path)


@cli.command(name="version")
def show_version() -> None:
    """Show the JellyFaaS CLI version."""
    click.echo(f"JellyFaaS CLI v{__version__}")


@cli.command(name="secret")
@click.pass_obj
def store_secret(state: CliState) -> None:
    """Store the secret key used for every authenticated command."""
    secret = click.prompt(
        "Enter (or paste from your UI Profile page) your secret key",
        hide_input=True,
        prompt_suffix=": ",
    )
    try:
        written = write_credentials(
            Credentials(api_key=validate_api_key(secret)), state.credentials_path
        )
    except CredentialsError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"Secret key written to file {written}")


@cli.command(name="token")
@click.pass_obj
def show_token(state: CliState) -> None:
    """Exchange the secret key for a short-lived token."""
    api = _api_context(state)
    try:
        token = api.client.validate_token()
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"Token details:\n\nToken:\n{token.token}\n\nExpiry: {token.expiry}")


@cli.group(name="user")
def user_group() -> None:
    """User related commands."""


@user_group.command(name="create")
@click.option("-e", "--email", required=True, help="Email of the user")
@click.option("-n", "--name", required=True, help="Name of the user")
@click.pass_obj
def create_user(state: CliState, email: str, name: str) -> None:
    """Create a new user."""
    api = _api_context(state)
    click.echo(f"Creating user: {email}")
    try:
        password = api.client.create_user(email, name)
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    click.echo(
        f"\tUser created, password set to: {password}\n"
        "\tYou cannot get this password again, please note it down."
    )


@user_group.command(name="list")
@click.pass_obj
def list_users(state: CliState) -> None:
    """List users."""
    api = _api_context(state)
    try:
        users = api.client.list_users()
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    render_users_table(Console(), users)


@cli.command(name="library")
@click.option("-d", "--details", "function_id", required=False, help="Show one library item")
@click.option("-r", "--readme", is_flag=True, default=False, help="Render the item README")
@click.pass_obj
def show_library(state: CliState, function_id: str | None, readme: bool) -> None:
    """List the function library or show one function in detail."""
    api = _api_context(state)
    console = Console()
    try:
        if not function_id:
            render_library_table(console, api.client.list_library())
            return
        details = api.client.get_library_item(function_id)
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc

    render_function_details(console, details, api.configuration.service)
    if readme:
        try:
            readme_text = decode_readme(details)
        except ValueError as exc:
            raise CliError(f"Cannot decode README: {exc}") from exc
        if readme_text:
            console.print()
            render_markdown(console, readme_text)


@cli.command(name="deploy")
@click.option(
    "-z",
    "--zipfile",
    "zip_path",
    required=True,
    type=click.Path(path_type=Path, dir_okay=False),
    help="Zip file to upload",
)
@click.option("-w", "--wait", is_flag=True, default=False, help="Wait for the function to be ready")
@click.pass_obj
def deploy(state: CliState, zip_path: Path, wait: bool) -> None:
    """Upload a packaged function."""
    _deploy_archive(state, zip_path, wait=wait)


@cli.command(name="publish")
@click.option("-i", "--id", "function_id", required=True, help="ID of the library item")
@click.option(
    "-s", "--state", "published", required=True, type=click.BOOL, help="Publish (true) or withdraw"
)
@click.pass_obj
def publish(state: CliState, function_id: str, published: bool) -> None:
    """Publish or withdraw a library item."""
    api = _api_context(state)
    try:
        api.client.set_published_state(function_id, published)
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"Function {'published' if published else 'withdrawn'} successfully")


@cli.command(name="spec")
@click.option("-j", "--json", "json_text", required=False, help="JSON example to convert")
@click.option(
    "--file",
    "json_file",
    required=False,
    type=click.File("r", encoding="utf-8"),
    help="Read the JSON example from a file ('-' for stdin)",
)
@click.option("-r", "--raw", is_flag=True, default=False, help="Print only the schema")
@click.option("-f", "--flat", is_flag=True, default=False, help="Single-line schema output")
def generate_spec(
    json_text: str | None, json_file: TextIO | None, raw: bool, flat: bool
) -> None:
    """Generate a JSON Schema from an example JSON document."""
    if json_text is not None and json_file is None:
        source = json_text
    elif json_file is not None and json_text is None:
        source = json_file.read()
    else:
        raise click.UsageError("Provide exactly one of --json or --file.")
    try:
        schema = generate_schema_document(source, flat=flat)
    except SchemaParseError as exc:
        raise CliError(f"Error generating schema: {exc}") from exc
    if raw:
        click.echo(schema)
        return
    click.echo(f"Json Schema (basic):\n{SCHEMA_FRAME}\n")
    click.echo(schema)
    click.echo(f"\n{SCHEMA_FRAME}")


@cli.group(name="builds")
def builds_group() -> None:
    """Failed build related commands."""


@builds_group.command(name="list")
@click.pass_obj
def list_builds(state: CliState) -> None:
    """List failed builds."""
    api = _api_context(state)
    try:
        listing = api.client.list_bad_builds()
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    if listing.bad_builds:
        render_bad_builds(Console(), listing.bad_builds)
    else:
        click.echo("No bad builds.")


@builds_group.command(name="clean")
@click.option("-b", "--build-id", "build_id", required=True, help="Build ID")
@click.pass_obj
def clean_build(state: CliState, build_id: str) -> None:
    """Remove a failed build."""
    api = _api_context(state)
    try:
        cleanup = api.client.clean_bad_build(build_id)
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    click.echo("Bad build cleaned successfully:")
    click.echo(f"  Build ID: {cleanup.build_id}")
    for function_id in cleanup.functions:
        click.echo(f"  Function ID: {function_id}")


@cli.command(name="create")
@click.option("-n", "--name", required=True, help="Name of the function")
@click.option("-l", "--language", required=True, help="Language of the function")
@click.option(
    "-d",
    "--destination",
    required=True,
    type=click.Path(path_type=Path, file_okay=False),
    help="Directory to create the function in",
)
@click.option(
    "-a", "--always", is_flag=True, default=False, help="Create even if the directory exists"
)
def create_project(name: str, language: str, destination: Path, always: bool) -> None:
    """Create a new function project from a template."""
    configuration = _load_configuration()
    try:
        project_dir = create_function_project(
            name,
            language,
            destination,
            templates_repo_url=configuration.service.templates_repo_url,
            always=always,
        )
    except ScaffoldError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"Project created successfully: {project_dir}")
    click.echo("Please read the README.md for getting started.")


@cli.command(name="zip")
@click.option(
    "-s",
    "--source",
    default=".",
    show_default=True,
    type=click.Path(path_type=Path, file_okay=False),
    help="Function project directory",
)
@click.option("-o", "--overwrite", is_flag=True, default=False, help="Overwrite the zip file")
@click.option("-d", "--deploy", "deploy_after", is_flag=True, default=False, help="Deploy it")
@click.option("-w", "--wait", is_flag=True, default=False, help="Wait for the function to be ready")
@click.pass_obj
def zip_project(
    state: CliState, source: Path, overwrite: bool, deploy_after: bool, wait: bool
) -> None:
    """Package a function project and optionally deploy it."""
    try:
        archive = package_project(source, overwrite=overwrite)
    except PackagingError as exc:
        raise CliError(str(exc)) from exc
    click.echo("Directory zipped successfully!")
    click.echo(f"Zip file: {archive.name}")
    if not deploy_after:
        return
    _deploy_archive(state, archive, wait=wait)
    click.echo(
        "This usually takes a few minutes, use 'jellyfaas builds list' to check "
        "whether a deploy failed."
    )


@cli.command(name="exists")
@click.option("-n", "--name", required=True, help="Name of the function")
@click.pass_obj
def function_exists(state: CliState, name: str) -> None:
    """Check whether a function name is taken."""
    api = _api_context(state)
    try:
        exists = api.client.function_exists(name)
    except PlatformApiError as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"Function {name} exists: {str(exists).lower()}")


@cli.command(name="base64")
@click.option("-e", "--encode", required=False, help="Encode a string")
@click.option("-d", "--decode", required=False, help="Decode a string")
def base64_command(encode: str | None, decode: str | None) -> None:
    """Base64 encode or decode a string."""
    if encode:
        click.echo(base64.b64encode(encode.encode("utf-8")).decode("ascii"))
        return
    if decode:
        try:
            click.echo(base64.b64decode(decode, validate=True).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise CliError(f"Error decoding string: {exc}") from exc
        return
    raise click.UsageError("Provide --encode or --decode.")


def _load_configuration() -> Configuration:
    try:
        return load_configuration()
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc


def _api_context(state: CliState) -> _ApiContext:
    configuration = _load_configuration()
    try:
        credentials = load_credentials(state.credentials_path)
    except CredentialsError as exc:
        raise CliError(str(exc)) from exc
    return _ApiContext(
        client=PlatformApiClient(configuration.service, credentials.api_key),
        credentials=credentials,
        configuration=configuration,
    )


def _deploy_archive(state: CliState, archive_path: Path, *, wait: bool) -> None:
    api = _api_context(state)
    poller = (
        DeploymentPoller(
            api.client,
            api.configuration.polling,
            status_base_url=api.client.status_base_url,
            on_progress=_echo_progress,
        )
        if wait
        else None
    )
    click.echo(f"Deploying function {archive_path}")

    def _echo_uploaded(deployed: DeployedFunction) -> None:
        for detail in deployed.deployed_details:
            click.echo(f"\tFunction URL: {api.configuration.service.web_ui_url}{archive_path.stem}")
            click.echo(f"\tAPI Endpoint: {detail.function_url}")
        if deployed.new:
            click.echo("\tFunction is a new function, and is currently deploying.")
        else:
            click.echo(
                f"\tFunction upgrading, current version is: {deployed.current_version}, "
                f"new version will be {deployed.deploying_version}"
            )
        if wait:
            click.echo("Waiting for function to be ready..")

    try:
        outcome = execute_deploy(
            DeployRequest(archive_path=archive_path, wait=wait),
            api_client=api.client,
            api_key=api.credentials.api_key,
            poller=poller,
            on_uploaded=_echo_uploaded,
        )
    except DeployExecutionError as exc:
        raise CliError(str(exc)) from exc
    if outcome.poll_result is not None:
        _report_poll_result(outcome.poll_result)


def _echo_progress(progress: PollProgress) -> None:
    click.echo(
        f"Count {progress.round_number}/{progress.max_rounds} : Operation is not complete, "
        f"waiting for function to be ready, status : {progress.status}"
    )


def _report_poll_result(result: PollSessionResult) -> None:
    if result.outcome == PollOutcome.SUCCEEDED:
        click.echo("\n\tOperation is complete, function(s) is ready to be used!")
        return
    if result.outcome == PollOutcome.ABORTED:
        raise CliError(f"Deployment status check aborted: {result.reason}")
    raise CliError(
        f"Deployment did not finish in time. {result.reason}. "
        "Use 'jellyfaas builds list' to check whether the build failed."
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), prog_name="jellyfaas", standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
