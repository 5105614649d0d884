"""
Logical field catalog and header resolution.
"""

from .field_catalog import (
    DEFAULT_FIELDS,
    IDENTIFIER_FIELD,
    FieldCatalog,
    FieldCatalogLoader,
    FieldDefinition,
    parse_field_overrides,
)
from .field_resolver import FieldResolver, ResolvedSchema, normalize_header

__all__ = [
    "DEFAULT_FIELDS",
    "IDENTIFIER_FIELD",
    "FieldCatalog",
    "FieldCatalogLoader",
    "FieldDefinition",
    "FieldResolver",
    "ResolvedSchema",
    "normalize_header",
    "parse_field_overrides",
]
