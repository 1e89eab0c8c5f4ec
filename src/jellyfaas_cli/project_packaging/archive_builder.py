"""Function project packaging into an uploadable zip archive."""

from __future__ import annotations

import json
import logging
import os
import zipfile
from collections.abc import Iterator
from pathlib import Path

SPEC_FILENAME = "jellyspec.json"
EXCLUDED_NAMES: frozenset[str] = frozenset(
    {".git", ".idea", "vendor", "node_modules", ".temp-repo"}
)

logger = logging.getLogger(__name__)


class PackagingError(Exception):
    """Raised when a project cannot be packaged."""


def normalize_short_name(name: str) -> str:
    return name.replace(" ", "").replace("_", "")


def read_project_short_name(source: Path | str) -> str:
    """Return the ``shortname`` declared in the project's jellyspec.json."""
    spec_path = Path(source) / SPEC_FILENAME
    if not spec_path.is_file():
        raise PackagingError(
            f"{SPEC_FILENAME} not found in {Path(source)} (did you supply the right folder name?)"
        )
    try:
        spec = json.loads(spec_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PackagingError(f"Error reading the {SPEC_FILENAME}: {exc}") from exc
    short_name = spec.get("shortname") if isinstance(spec, dict) else None
    if not isinstance(short_name, str) or not short_name.strip():
        raise PackagingError(f"{SPEC_FILENAME} does not define a shortname.")
    return short_name.strip()


def archive_file_name(short_name: str) -> str:
    return normalize_short_name(f"{short_name}.zip")


def package_project(
    source: Path | str, *, output_dir: Path | str | None = None, overwrite: bool = False
) -> Path:
    """Zip the project directory, rooted at its short name, and return the archive path.

    Raises:
      PackagingError: If the source is invalid or the archive already exists.
    """
    source_dir = Path(source).resolve()
    if not source_dir.exists():
        raise PackagingError(f"Source directory {source_dir} does not exist")
    if not source_dir.is_dir():
        raise PackagingError(f"Source {source_dir} is not a directory")

    short_name = read_project_short_name(source_dir)
    target = (Path(output_dir) if output_dir else Path.cwd()).resolve() / archive_file_name(
        short_name
    )
    if target.exists():
        if not overwrite:
            raise PackagingError(f"Target zip file {target} already exists")
        target.unlink()

    try:
        with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path in _iter_project_files(source_dir, target):
                relative = path.relative_to(source_dir).as_posix()
                arcname = short_name if relative == "." else f"{short_name}/{relative}"
                logger.debug("adding %s", arcname)
                archive.write(path, arcname=arcname)
    except OSError as exc:
        target.unlink(missing_ok=True)
        raise PackagingError(f"Error zipping directory: {exc}") from exc
    return target


def _iter_project_files(source_dir: Path, target: Path) -> Iterator[Path]:
    """Yield directories and files to archive, each directory before its contents."""
    for current, dirnames, filenames in os.walk(source_dir):
        dirnames[:] = sorted(name for name in dirnames if name not in EXCLUDED_NAMES)
        current_path = Path(current)
        yield current_path
        for filename in sorted(filenames):
            path = current_path / filename
            if filename in EXCLUDED_NAMES or path == target:
                continue
            yield path
