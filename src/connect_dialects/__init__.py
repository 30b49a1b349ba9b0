"""Connect Dialects

SQL dialects for data-integration connectors: type mapping, DDL/DML
statement building, column introspection and connection URL sanitization.
"""

from .config import DialectConfig, StaticTimeZoneProvider, TimeZoneProvider
from .dialects import (
    GenericDatabaseDialect,
    SqlServerDatabaseDialect,
    dialect_for_config,
    dialect_for_name,
    find_dialect_for,
)
from .exceptions import (
    DialectError,
    InvalidKeyColumnsError,
    NoSuitableDialectError,
    UnsupportedStatementError,
    UnsupportedTypeError,
)
from .expressions import ExpressionBuilder, IdentifierRules, QuoteMethod
from .mapping import TypeMapping
from .models import (
    ColumnDefinition,
    ColumnId,
    ColumnMapping,
    DropOptions,
    Mutability,
    Nullability,
    SinkRecordField,
    TableId,
)
from .schema import Schema, SchemaBuilder, SchemaType
from .sqltypes import SqlType

__all__ = [
    # Dialects
    "GenericDatabaseDialect",
    "SqlServerDatabaseDialect",
    "dialect_for_config",
    "dialect_for_name",
    "find_dialect_for",

    # Configuration
    "DialectConfig",
    "StaticTimeZoneProvider",
    "TimeZoneProvider",

    # Identifiers and expressions
    "ExpressionBuilder",
    "IdentifierRules",
    "QuoteMethod",
    "TypeMapping",

    # Data models
    "ColumnDefinition",
    "ColumnId",
    "ColumnMapping",
    "DropOptions",
    "Mutability",
    "Nullability",
    "SinkRecordField",
    "TableId",
    "Schema",
    "SchemaBuilder",
    "SchemaType",
    "SqlType",

    # Errors
    "DialectError",
    "InvalidKeyColumnsError",
    "NoSuitableDialectError",
    "UnsupportedStatementError",
    "UnsupportedTypeError",
]

__version__ = "0.1.0"
