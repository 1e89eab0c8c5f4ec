"""Terminal rendering of library, user and build listings."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from jellyfaas_cli.configuration.runtime_settings import ServiceSettings
from jellyfaas_cli.platform_api.api_models import (
    BadBuild,
    LibraryItemDetails,
    LibraryListing,
    UserDetails,
    VersionDetails,
)

_LABEL_STYLE = "bold green"
_ERROR_STYLE = "bold red"


def decode_base64_text(value: str) -> str:
    """Decode standard base64 into UTF-8 text.

    Raises:
      ValueError: If the value is not valid base64 or not UTF-8.
    """
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError(f"Invalid encoded content: {exc}") from exc


def format_timestamp(value: str, pattern: str = "%a, %d %b %Y %H:%M:%S %Z") -> str:
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return value
    return parsed.strftime(pattern).strip()


def render_library_table(console: Console, listing: LibraryListing) -> None:
    table = Table("Name", "Id", "Owner", "Versions", "Created At", "Latest Change", "Description")
    for item in listing.items:
        table.add_row(
            escape(item.name),
            escape(item.function_id),
            escape(item.owner),
            str(item.versions),
            format_timestamp(item.created_at, "%Y-%m-%d"),
            format_timestamp(item.last_release, "%Y-%m-%d"),
            escape(item.description),
        )
    console.print(table)
    if listing.bad_builds:
        render_bad_builds(console, listing.bad_builds)


def render_bad_builds(console: Console, bad_builds: Sequence[BadBuild]) -> None:
    console.print()
    console.print("Bad Builds:", style="bold white on red")
    for build in bad_builds:
        _line(console, "Build Id:", build.build_id, indent=2)
        _line(console, "Created At:", format_timestamp(build.created_at), indent=2)
        _line(console, "Name:", build.name, indent=2)
        _line(console, "Function ID:", build.function_id, indent=2)
        _line(console, "Error Message:", build.error_message, indent=2, value_style="bold yellow")
        console.print()


def render_users_table(console: Console, users: Sequence[UserDetails]) -> None:
    table = Table("Name", "Email", "Created At", "Updated At")
    for user in users:
        table.add_row(
            escape(user.name),
            escape(user.email),
            format_timestamp(user.created_at),
            format_timestamp(user.updated_at),
        )
    console.print(table)


def render_function_details(
    console: Console, details: LibraryItemDetails, service_settings: ServiceSettings
) -> None:
    _line(console, "Function Name:", details.name)
    _line(console, "Function ID:", details.function_id)
    _line(console, "Owner:", details.owner)
    _line(console, "Owner Description:", details.owner_description)
    _line(console, "Version Count:", str(details.version_count))
    _line(console, "Created At:", format_timestamp(details.created_at))
    _line(console, "Updated At:", format_timestamp(details.updated_at))
    console.print("Versions:", style=_LABEL_STYLE)
    for version in details.versions:
        _render_version(console, details, version, service_settings)
        console.print()


def decode_readme(details: LibraryItemDetails) -> str | None:
    """Return the latest version's README text, if one was published."""
    latest = details.latest_version
    if latest is None or not latest.readme_encoded:
        return None
    return decode_base64_text(latest.readme_encoded)


def render_markdown(console: Console, markdown_text: str) -> None:
    console.print(Markdown(markdown_text))


def _render_version(
    console: Console,
    details: LibraryItemDetails,
    version: VersionDetails,
    service_settings: ServiceSettings,
) -> None:
    _line(console, "Description:", version.description)
    _line(console, "Entry Point:", version.entry_point)
    _line(console, "Version:", str(version.version), indent=2)
    _line(console, "Latest:", str(version.latest).lower(), indent=2)
    for size in version.sizes:
        _line(console, "FunctionId:", size.function_id, indent=4)
        _line(
            console,
            "Function URL:",
            f"{service_settings.web_ui_url}{details.function_id}",
            indent=4,
        )
        _line(
            console,
            "URL:",
            f"{service_settings.function_endpoint_url}{size.function_id}/{details.function_id}",
            indent=4,
        )
    _line(console, "Release Date:", format_timestamp(version.release_date), indent=2)
    _line(console, "Runtime:", version.runtime, indent=2)
    if not version.latest:
        return

    _line(console, "Readme File:", "Found" if version.readme_encoded else "Not found", indent=2)
    _line(
        console,
        "ChangeLog File:",
        "Found" if version.changelog_encoded else "Not found",
        indent=2,
    )
    console.print()
    console.print("  Requirements:", style=_LABEL_STYLE)
    _render_requirements(console, version.requirements)


def _render_requirements(console: Console, requirements: Mapping[str, Any]) -> None:
    _line(console, "Request Type:", str(requirements.get("requestType") or ""), indent=4)
    if requirements.get("inputType"):
        _line(console, "Input Type:", str(requirements["inputType"]), indent=4)
    for param in requirements.get("queryParams") or []:
        if isinstance(param, Mapping):
            _line(
                console,
                "Query Param:",
                f"{param.get('name', '')}, Required: {str(bool(param.get('required'))).lower()}",
                indent=5,
            )

    if requirements.get("inputJsonSchemaEncoded"):
        _encoded_line(console, "Input Schema:", requirements["inputJsonSchemaEncoded"])
        if requirements.get("inputJsonExample"):
            _encoded_line(console, "Input JSON Example:", requirements["inputJsonExample"])
    if isinstance(requirements.get("inputFileSchema"), Mapping):
        file_schema = requirements["inputFileSchema"]
        _line(console, "Input File Description:", str(file_schema.get("description", "")), indent=4)
        _line(
            console,
            "Input File Required:",
            str(bool(file_schema.get("required"))).lower(),
            indent=4,
        )
        _line(console, "Input File Extensions:", _joined(file_schema.get("extensions")), indent=4)

    if requirements.get("outputJsonSchemaEncoded"):
        _encoded_line(console, "Output Schema:", requirements["outputJsonSchemaEncoded"])
        if requirements.get("outputJsonExample"):
            _line(console, "Output JSON Example:", str(requirements["outputJsonExample"]), indent=4)
    if isinstance(requirements.get("outputFileSchema"), Mapping):
        file_schema = requirements["outputFileSchema"]
        _line(
            console, "Output File Description:", str(file_schema.get("description", "")), indent=4
        )
        _line(console, "Output File Extensions:", _joined(file_schema.get("extensions")), indent=4)


def _encoded_line(console: Console, label: str, encoded: Any) -> None:
    try:
        text = decode_base64_text(str(encoded))
    except ValueError:
        console.print(
            f"    {escape(label)} Error decoding content, please contact support",
            style=_ERROR_STYLE,
        )
        return
    _line(console, label, text, indent=4)


def _joined(values: Any) -> str:
    if not isinstance(values, Sequence) or isinstance(values, str):
        return ""
    return ", ".join(str(value) for value in values)


def _line(
    console: Console,
    label: str,
    value: str,
    *,
    indent: int = 0,
    value_style: str | None = None,
) -> None:
    rendered_value = escape(value)
    if value_style:
        rendered_value = f"[{value_style}]{rendered_value}[/]"
    console.print(f"{' ' * indent}[{_LABEL_STYLE}]{escape(label)}[/] {rendered_value}")
