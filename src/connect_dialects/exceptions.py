"""Errors raised while building SQL or mapping schemas for a dialect."""

from __future__ import annotations
from typing import Any, Dict, Optional


class DialectError(Exception):
    """Base class for all dialect errors."""


class UnsupportedTypeError(DialectError):
    """A schema type has no SQL type under the dialect in use."""

    def __init__(self, field_name: Optional[str], schema_type: Any, schema_name: Optional[str] = None,
                 dialect_name: Optional[str] = None):
        self.field_name = field_name
        self.schema_type = schema_type
        self.schema_name = schema_name
        self.dialect_name = dialect_name
        type_label = f"{schema_type}" if not schema_name else f"{schema_type} ({schema_name})"
        super().__init__(
            f"{field_name or '<unnamed>'}: {type_label} type doesn't have a mapping "
            f"to the SQL database column type of {dialect_name or 'this dialect'}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to structured dict for logging."""
        return {
            "error_type": type(self).__name__,
            "field": self.field_name,
            "schema_type": str(self.schema_type),
            "schema_name": self.schema_name,
            "dialect": self.dialect_name,
            "message": str(self),
        }


class InvalidKeyColumnsError(DialectError, ValueError):
    """A statement needing key columns was asked to build without any."""

    def __init__(self, statement: str, table: Any):
        self.statement = statement
        self.table = table
        super().__init__(
            f"Cannot build {statement} statement for {table}: at least one key column is required"
        )


class UnsupportedStatementError(DialectError, NotImplementedError):
    """The dialect cannot express the requested statement."""


class NoSuitableDialectError(DialectError, LookupError):
    """No registered dialect matches a name or connection URL."""
