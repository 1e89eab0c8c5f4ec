"""Project scaffolding exports."""

from .template_scaffolder import (
    ScaffoldError,
    create_function_project,
    resolve_template_directory,
    supported_languages,
    update_spec_short_name,
)

__all__ = [
    "ScaffoldError",
    "create_function_project",
    "resolve_template_directory",
    "supported_languages",
    "update_spec_short_name",
]
