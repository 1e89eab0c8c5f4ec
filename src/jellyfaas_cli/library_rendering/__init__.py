"""Library rendering exports."""

from .library_report import (
    decode_base64_text,
    decode_readme,
    format_timestamp,
    render_bad_builds,
    render_function_details,
    render_library_table,
    render_markdown,
    render_users_table,
)

__all__ = [
    "decode_base64_text",
    "decode_readme",
    "format_timestamp",
    "render_bad_builds",
    "render_function_details",
    "render_library_table",
    "render_markdown",
    "render_users_table",
]
