"""SQL type codes reported by driver metadata.

ODBC and JDBC share the numeric codes for the standard types, so the values
here can be compared directly with ``DATA_TYPE`` from ``cursor.columns()``.
"""

from __future__ import annotations
from enum import IntEnum


class SqlType(IntEnum):
    """Driver-reported SQL type codes."""

    # Standard types
    CHAR = 1
    NUMERIC = 2
    DECIMAL = 3
    INTEGER = 4
    SMALLINT = 5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    VARCHAR = 12
    BOOLEAN = 16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    LONGVARCHAR = -1
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    BIGINT = -5
    TINYINT = -6
    BIT = -7
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    WCHAR = -8
    WLONGVARCHAR = -10
    GUID = -11
    NULL = 0
    OTHER = 1111
    CLOB = 2005
    BLOB = 2004
    NCLOB = 2011

    # SQL Server extensions
    SS_XML = -152
    SS_TIME2 = -154
    SS_TIMESTAMPOFFSET = -155  # datetimeoffset

    @classmethod
    def from_code(cls, code: int) -> "SqlType":
        """Return the enum member for a code, or OTHER when unknown."""
        try:
            return cls(int(code))
        except ValueError:
            return cls.OTHER


INTEGER_TYPES = frozenset({SqlType.TINYINT, SqlType.SMALLINT, SqlType.INTEGER, SqlType.BIGINT})
CHARACTER_TYPES = frozenset({
    SqlType.CHAR, SqlType.VARCHAR, SqlType.LONGVARCHAR, SqlType.NCHAR, SqlType.NVARCHAR,
    SqlType.LONGNVARCHAR, SqlType.WCHAR, SqlType.WLONGVARCHAR, SqlType.CLOB, SqlType.NCLOB,
    SqlType.GUID, SqlType.SS_XML,
})
BINARY_TYPES = frozenset({SqlType.BINARY, SqlType.VARBINARY, SqlType.LONGVARBINARY, SqlType.BLOB})
