"""Schema inference exports."""

from .schema_inferencer import (
    GENERATED_SCHEMA_TITLE,
    SCHEMA_DRAFT_URI,
    SchemaParseError,
    build_root_schema,
    generate_schema_document,
    infer_schema,
    load_example_document,
)

__all__ = [
    "GENERATED_SCHEMA_TITLE",
    "SCHEMA_DRAFT_URI",
    "SchemaParseError",
    "build_root_schema",
    "generate_schema_document",
    "infer_schema",
    "load_example_document",
]
