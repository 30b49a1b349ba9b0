"""Reading driver metadata rows and probing them for optional capabilities."""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

try:
    import pyodbc
except ImportError:
    pyodbc = None

from ..models import Nullability

logger = logging.getLogger(__name__)

# Errors a metadata row may raise when it lacks a column or the driver
# rejects the read.
METADATA_READ_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValueError)
if pyodbc is not None:
    METADATA_READ_ERRORS = METADATA_READ_ERRORS + (pyodbc.Error,)

AUTO_INCREMENT_FIELD = "IS_AUTOINCREMENT"
# SQL Server ODBC driver specific SQLColumns column
IDENTITY_FIELD = "SS_IS_IDENTITY"
TYPE_NAME_FIELD = "TYPE_NAME"
IDENTITY_TYPE_SUFFIX = " identity"

# ODBC SQLColumns NULLABLE values
SQL_NO_NULLS = 0
SQL_NULLABLE = 1


def read_metadata_field(row: Any, name: str) -> Any:
    """Read a named column from a metadata row.

    Supports mappings, rows carrying a ``cursor_description`` (pyodbc) and
    rows exposing columns as attributes. Names match case-insensitively.

    Raises:
        KeyError: the row has no such column
        AttributeError: the row exposes neither a description nor the attribute
    """
    wanted = name.lower()

    if isinstance(row, Mapping):
        for key, value in row.items():
            if str(key).lower() == wanted:
                return value
        raise KeyError(name)

    description = getattr(row, "cursor_description", None)
    if description:
        for index, column in enumerate(description):
            if str(column[0]).lower() == wanted:
                return row[index]
        raise KeyError(name)

    return getattr(row, wanted)


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing a metadata row for a capability.

    ``supported`` is false when the row could not be read; ``error`` then holds
    the cause. A supported probe may still carry ``value=None`` when the
    driver answered with something other than yes or no.
    """
    supported: bool
    value: Optional[bool] = None
    error: Optional[BaseException] = None

    @classmethod
    def unsupported(cls, error: BaseException) -> "ProbeResult":
        return cls(supported=False, error=error)

    def resolve(self, prior: Optional[bool]) -> Optional[bool]:
        """Return the probed value when known, else ``prior``."""
        if self.supported and self.value is not None:
            return self.value
        return prior


def parse_yes_no(raw: Any) -> Optional[bool]:
    """Map ``yes``/``no`` (any case) to booleans, anything else to ``None``."""
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if text == "yes":
        return True
    if text == "no":
        return False
    return None


def _read_optional(row: Any, name: str) -> Any:
    try:
        return read_metadata_field(row, name)
    except METADATA_READ_ERRORS:
        return None


def probe_auto_increment(row: Any) -> ProbeResult:
    """Probe a column metadata row for its auto-increment indicator.

    JDBC-style rows carry ``IS_AUTOINCREMENT``. ODBC ``SQLColumns`` rows do
    not; for those the SQL Server driver's ``SS_IS_IDENTITY`` column is used,
    then the `` identity`` suffix ``sp_columns`` appends to ``TYPE_NAME``.
    The result is unsupported only when the row carries none of them.
    """
    try:
        raw = read_metadata_field(row, AUTO_INCREMENT_FIELD)
    except METADATA_READ_ERRORS as e:
        error = e
    else:
        return ProbeResult(supported=True, value=parse_yes_no(raw))

    identity = _read_optional(row, IDENTITY_FIELD)
    if identity is not None:
        return ProbeResult(supported=True, value=str(identity).strip().lower() in ("1", "true", "yes"))

    type_name = _read_optional(row, TYPE_NAME_FIELD)
    if isinstance(type_name, str):
        return ProbeResult(supported=True, value=type_name.strip().lower().endswith(IDENTITY_TYPE_SUFFIX))

    return ProbeResult.unsupported(error)


def nullability_from_metadata(nullable: Any) -> Nullability:
    """Translate the ODBC/JDBC ``NULLABLE`` column of a metadata row."""
    if nullable == SQL_NO_NULLS:
        return Nullability.NOT_NULL
    if nullable == SQL_NULLABLE:
        return Nullability.NULL
    return Nullability.UNKNOWN
