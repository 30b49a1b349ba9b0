"""Value types describing tables, columns and fields handed to a dialect."""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .schema import DECIMAL_SCALE_FIELD, SchemaType
from .sqltypes import SqlType


@dataclass(frozen=True)
class TableId:
    """Identifies a table by optional catalog, optional schema and name."""
    catalog: Optional[str]
    schema_name: Optional[str]
    table_name: str

    @classmethod
    def parse(cls, qualified_name: str) -> "TableId":
        """Parse ``table``, ``schema.table`` or ``catalog.schema.table``."""
        parts = [p.strip() for p in qualified_name.split('.')]
        if not all(parts) or len(parts) > 3:
            raise ValueError(f"Invalid table name: '{qualified_name}'")
        if len(parts) == 3:
            return cls(parts[0], parts[1], parts[2])
        if len(parts) == 2:
            return cls(None, parts[0], parts[1])
        return cls(None, None, parts[0])

    @property
    def qualified_name(self) -> str:
        """Get the unquoted dotted name."""
        return ".".join(p for p in (self.catalog, self.schema_name, self.table_name) if p)

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True)
class ColumnId:
    """Identifies a column of a table."""
    table_id: Optional[TableId]
    name: str
    alias: Optional[str] = None

    @property
    def alias_or_name(self) -> str:
        return self.alias or self.name

    def __str__(self) -> str:
        if self.table_id is None:
            return self.name
        return f"{self.table_id}.{self.name}"


class Nullability(str, Enum):
    NULL = "null"
    NOT_NULL = "not_null"
    UNKNOWN = "unknown"


class Mutability(str, Enum):
    READ_ONLY = "read_only"
    MAYBE_WRITABLE = "maybe_writable"
    WRITABLE = "writable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SinkRecordField:
    """An outgoing column described by its schema."""
    name: str
    schema_type: SchemaType
    schema_name: Optional[str] = None  # logical type, e.g. Decimal
    schema_parameters: Dict[str, str] = field(default_factory=dict)
    optional: bool = False
    default_value: Any = None
    is_primary_key: bool = False

    @property
    def scale(self) -> Optional[str]:
        """Scale parameter of a decimal field."""
        return self.schema_parameters.get(DECIMAL_SCALE_FIELD)


@dataclass(frozen=True)
class ColumnDefinition:
    """A column discovered through driver metadata.

    ``auto_incremented`` is tri-state: ``True``, ``False`` or ``None`` when
    the driver could not tell.
    """
    id: ColumnId
    sql_type: int
    type_name: str
    class_name: Optional[str] = None
    nullability: Nullability = Nullability.UNKNOWN
    mutability: Mutability = Mutability.UNKNOWN
    precision: int = 0
    scale: int = 0
    signed_numbers: Optional[bool] = None
    display_size: Optional[int] = None
    auto_incremented: Optional[bool] = None
    case_sensitive: Optional[bool] = None
    searchable: Optional[bool] = None
    currency: Optional[bool] = None
    is_primary_key: bool = False

    @property
    def is_optional(self) -> bool:
        return self.nullability != Nullability.NOT_NULL

    @property
    def is_signed(self) -> bool:
        return bool(self.signed_numbers)

    @property
    def type(self) -> SqlType:
        return SqlType.from_code(self.sql_type)

    def as_part_of_primary_key(self, is_primary_key: bool = True) -> "ColumnDefinition":
        return replace(self, is_primary_key=is_primary_key)


@dataclass(frozen=True)
class ColumnMapping:
    """A column definition paired with its 1-based position in a result row."""
    column_definition: ColumnDefinition
    column_number: int
    name: Optional[str] = None

    def __post_init__(self):
        if self.column_number < 1:
            raise ValueError(f"column_number must be 1-based, got {self.column_number}")

    @property
    def field_name(self) -> str:
        return self.name or self.column_definition.id.alias_or_name


class DropOptions(BaseModel):
    """Options for DROP TABLE statements."""

    if_exists: bool = False
    cascade: bool = False

    model_config = {"frozen": True}

    def set_if_exists(self, if_exists: bool) -> "DropOptions":
        return self.model_copy(update={"if_exists": if_exists})

    def set_cascade(self, cascade: bool) -> "DropOptions":
        return self.model_copy(update={"cascade": cascade})
