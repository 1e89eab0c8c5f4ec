"""Project packaging exports."""

from .archive_builder import (
    EXCLUDED_NAMES,
    SPEC_FILENAME,
    PackagingError,
    archive_file_name,
    normalize_short_name,
    package_project,
    read_project_short_name,
)

__all__ = [
    "EXCLUDED_NAMES",
    "SPEC_FILENAME",
    "PackagingError",
    "archive_file_name",
    "normalize_short_name",
    "package_project",
    "read_project_short_name",
]
