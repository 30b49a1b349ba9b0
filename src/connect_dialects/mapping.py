"""Layered tables mapping sink fields to SQL column types.

A dialect registers only the entries it changes and chains to a parent table
holding the shared defaults. Within a layer the logical type name wins over
the primitive type; a dialect layer always wins over its parent.
"""

from __future__ import annotations
from typing import Callable, Dict, Mapping, Optional, Union

from .exceptions import UnsupportedTypeError
from .models import SinkRecordField
from .schema import (
    DATE_LOGICAL_NAME,
    DECIMAL_LOGICAL_NAME,
    TIME_LOGICAL_NAME,
    TIMESTAMP_LOGICAL_NAME,
    SchemaType,
)

Renderer = Callable[[SinkRecordField], str]


def constant(sql_type: str) -> Renderer:
    """Renderer returning a fixed SQL type."""
    return lambda _field: sql_type


def decimal_with_precision(precision: int) -> Renderer:
    """Renderer for ``decimal(<precision>,<scale>)`` using the field's scale."""
    def render(field: SinkRecordField) -> str:
        scale = field.scale if field.scale is not None else 0
        return f"decimal({precision},{scale})"
    return render


def _as_renderer(value: Union[str, Renderer]) -> Renderer:
    return constant(value) if isinstance(value, str) else value


class TypeMapping:
    """One layer of field-to-SQL-type renderers."""

    def __init__(
        self,
        logical: Optional[Mapping[str, Union[str, Renderer]]] = None,
        primitive: Optional[Mapping[SchemaType, Union[str, Renderer]]] = None,
        parent: Optional["TypeMapping"] = None,
        name: Optional[str] = None,
    ):
        self.name = name
        self.parent = parent
        self._logical: Dict[str, Renderer] = {k: _as_renderer(v) for k, v in (logical or {}).items()}
        self._primitive: Dict[SchemaType, Renderer] = {
            SchemaType(k): _as_renderer(v) for k, v in (primitive or {}).items()
        }

    def extend(self, logical=None, primitive=None, name: Optional[str] = None) -> "TypeMapping":
        """Create a delta layer on top of this one."""
        return TypeMapping(logical=logical, primitive=primitive, parent=self, name=name)

    def lookup(self, field: SinkRecordField) -> Optional[str]:
        """Resolve a field's SQL type, or ``None`` when no layer maps it."""
        layer: Optional[TypeMapping] = self
        while layer is not None:
            if field.schema_name and field.schema_name in layer._logical:
                return layer._logical[field.schema_name](field)
            if field.schema_type in layer._primitive:
                return layer._primitive[field.schema_type](field)
            layer = layer.parent
        return None

    def sql_type(self, field: SinkRecordField) -> str:
        """Resolve a field's SQL type, raising when no layer maps it."""
        sql_type = self.lookup(field)
        if sql_type is None:
            raise UnsupportedTypeError(field.name, field.schema_type.value, field.schema_name, self.name)
        return sql_type


DEFAULT_TYPE_MAPPING = TypeMapping(
    name="generic",
    logical={
        DECIMAL_LOGICAL_NAME: "DECIMAL",
        DATE_LOGICAL_NAME: "DATE",
        TIME_LOGICAL_NAME: "TIME",
        TIMESTAMP_LOGICAL_NAME: "TIMESTAMP",
    },
    primitive={
        SchemaType.INT8: "SMALLINT",
        SchemaType.INT16: "SMALLINT",
        SchemaType.INT32: "INTEGER",
        SchemaType.INT64: "BIGINT",
        SchemaType.FLOAT32: "REAL",
        SchemaType.FLOAT64: "DOUBLE PRECISION",
        SchemaType.BOOLEAN: "BOOLEAN",
        SchemaType.STRING: "TEXT",
        SchemaType.BYTES: "BLOB",
    },
)
