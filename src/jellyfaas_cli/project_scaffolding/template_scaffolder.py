"""New function project creation from the public template repository."""

from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from jellyfaas_cli.project_packaging.archive_builder import SPEC_FILENAME, normalize_short_name

CommandRunner = Callable[[tuple[str, ...], Path], None]

TEMP_CLONE_DIRNAME = ".temp-repo"

_TEMPLATE_BY_LANGUAGE: dict[str, str] = {
    "go": "go-template",
    "golang": "go-template",
    "python": "python-template",
    "php": "php-template",
    "nodejs": "node-template",
    "javascript": "node-template",
    "js": "node-template",
    "node.js": "node-template",
    "node": "node-template",
    "ruby": "ruby-template",
    "java": "java-template",
    "dotnet": "dotnet-template",
    "csharp": "dotnet-template",
    "c#": "dotnet-template",
    "dn": "dotnet-template",
}

logger = logging.getLogger(__name__)


class ScaffoldError(Exception):
    """Raised when a function project cannot be created."""


def supported_languages() -> tuple[str, ...]:
    return tuple(_TEMPLATE_BY_LANGUAGE)


def resolve_template_directory(language: str) -> str:
    """Return the template folder name for a language alias."""
    template = _TEMPLATE_BY_LANGUAGE.get(language.strip().lower())
    if template is None:
        raise ScaffoldError(f"Language is not supported: {language}")
    return template


def create_function_project(
    name: str,
    language: str,
    destination: Path | str,
    *,
    templates_repo_url: str,
    always: bool = False,
    run_command: CommandRunner | None = None,
) -> Path:
    """Clone the templates, copy the language folder and stamp the project name.

    Returns:
      The created project directory.

    Raises:
      ScaffoldError: If the target exists, the language is unknown, or any step fails.
    """
    command_runner = run_command or _run_checked_command
    template = resolve_template_directory(language)
    destination_dir = Path(destination).resolve()
    project_dir = destination_dir / name

    if project_dir.exists() and not always:
        raise ScaffoldError(f"Folder already exists: {project_dir}")
    try:
        project_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ScaffoldError(f"Failed to create directory: {project_dir}") from exc

    temp_clone = destination_dir / TEMP_CLONE_DIRNAME
    try:
        command_runner(
            ("git", "clone", "--depth", "1", templates_repo_url, str(temp_clone)),
            destination_dir,
        )
        template_dir = temp_clone / template
        if not template_dir.is_dir():
            raise ScaffoldError(f"Template folder missing from repository: {template}")
        logger.debug("copying %s to %s", template_dir, project_dir)
        try:
            shutil.copytree(template_dir, project_dir, dirs_exist_ok=True)
        except OSError as exc:
            raise ScaffoldError(f"Failed to copy folder: {exc}") from exc
        update_spec_short_name(project_dir, name)
    finally:
        shutil.rmtree(temp_clone, ignore_errors=True)
    return project_dir


def update_spec_short_name(project_dir: Path, function_name: str) -> None:
    """Rewrite jellyspec.json so its shortname matches the new function."""
    spec_path = project_dir / SPEC_FILENAME
    try:
        spec = json.loads(spec_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ScaffoldError(f"Failed to read spec file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ScaffoldError(f"Failed to parse spec file: {exc}") from exc
    if not isinstance(spec, dict):
        raise ScaffoldError("Spec file root must be an object.")

    spec["shortname"] = normalize_short_name(function_name)
    try:
        spec_path.write_text(json.dumps(spec, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ScaffoldError(f"Failed to write spec file: {exc}") from exc


def _run_checked_command(command: tuple[str, ...], cwd: Path) -> None:
    """Run one command and wrap subprocess errors with domain-friendly messages."""
    try:
        subprocess.run(list(command), cwd=cwd, check=True)
    except FileNotFoundError as exc:
        raise ScaffoldError(f"Command not found: {shlex.join(command)}") from exc
    except subprocess.CalledProcessError as exc:
        raise ScaffoldError(
            f"Command failed with exit code {exc.returncode}: {shlex.join(command)}"
        ) from exc
