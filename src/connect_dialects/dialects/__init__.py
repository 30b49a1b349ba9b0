"""Database dialects and their registry."""

from .base import ColumnConverter, DialectProvider, GenericDatabaseDialect
from .sqlserver import SqlServerDatabaseDialect, register_output_converters
from .registry import (
    dialect_for_config,
    dialect_for_name,
    extract_subprotocol,
    find_dialect_for,
    register_provider,
    registered_dialect_names,
    registered_providers,
)

__all__ = [
    "ColumnConverter",
    "DialectProvider",
    "GenericDatabaseDialect",
    "SqlServerDatabaseDialect",
    "register_output_converters",
    "dialect_for_config",
    "dialect_for_name",
    "extract_subprotocol",
    "find_dialect_for",
    "register_provider",
    "registered_dialect_names",
    "registered_providers",
]
