"""Database package exposing schema application helpers.

Public API:
 - apply_schema(conn): create the favorites table (idempotent)
 - get_existing_tables(conn): sorted table names for diagnostics
 - get_schema_version(conn): stored schema version or None
"""

from .schema import apply_schema, get_existing_tables, get_schema_version, SCHEMA_VERSION  # noqa: F401

__all__ = [
    "apply_schema",
    "get_existing_tables",
    "get_schema_version",
    "SCHEMA_VERSION",
]
