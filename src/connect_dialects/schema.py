"""Connect-style record schemas used on both sides of a dialect.

Sink fields describe their values with a primitive :class:`SchemaType` and an
optional logical name (decimal, date, time, timestamp). Source-side discovery
builds record schemas from table columns with :class:`SchemaBuilder`.
"""

from __future__ import annotations
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SchemaType(str, Enum):
    """Primitive and structural schema types."""

    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    MAP = "map"
    STRUCT = "struct"

    @property
    def is_primitive(self) -> bool:
        return self not in (SchemaType.ARRAY, SchemaType.MAP, SchemaType.STRUCT)


DECIMAL_LOGICAL_NAME = "org.apache.kafka.connect.data.Decimal"
DATE_LOGICAL_NAME = "org.apache.kafka.connect.data.Date"
TIME_LOGICAL_NAME = "org.apache.kafka.connect.data.Time"
TIMESTAMP_LOGICAL_NAME = "org.apache.kafka.connect.data.Timestamp"

# Parameter carrying the scale of a decimal schema
DECIMAL_SCALE_FIELD = "scale"


@dataclass(frozen=True)
class Field:
    """A named field of a struct schema."""
    name: str
    index: int
    schema: "Schema"


@dataclass(frozen=True)
class Schema:
    """Immutable schema description."""
    type: SchemaType
    optional: bool = False
    name: Optional[str] = None
    parameters: Dict[str, str] = dc_field(default_factory=dict)
    fields: Tuple[Field, ...] = ()
    default_value: Any = None

    def field(self, name: str) -> Optional[Field]:
        """Look a struct field up by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


class SchemaBuilder:
    """Fluent builder for :class:`Schema` values.

    Example:
        >>> schema = (SchemaBuilder.struct()
        ...           .field("id", SchemaBuilder.int64().build())
        ...           .field("created", SchemaBuilder.timestamp().optional().build())
        ...           .build())
        >>> schema.field_names()
        ['id', 'created']
    """

    def __init__(self, schema_type: SchemaType):
        self._type = schema_type
        self._optional = False
        self._name: Optional[str] = None
        self._parameters: Dict[str, str] = {}
        self._fields: Dict[str, Schema] = {}
        self._default_value: Any = None

    @classmethod
    def struct(cls) -> "SchemaBuilder":
        return cls(SchemaType.STRUCT)

    @classmethod
    def int8(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT8)

    @classmethod
    def int16(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT16)

    @classmethod
    def int32(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT32)

    @classmethod
    def int64(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT64)

    @classmethod
    def float32(cls) -> "SchemaBuilder":
        return cls(SchemaType.FLOAT32)

    @classmethod
    def float64(cls) -> "SchemaBuilder":
        return cls(SchemaType.FLOAT64)

    @classmethod
    def boolean(cls) -> "SchemaBuilder":
        return cls(SchemaType.BOOLEAN)

    @classmethod
    def string(cls) -> "SchemaBuilder":
        return cls(SchemaType.STRING)

    @classmethod
    def bytes(cls) -> "SchemaBuilder":
        return cls(SchemaType.BYTES)

    @classmethod
    def decimal(cls, scale: int) -> "SchemaBuilder":
        return cls(SchemaType.BYTES).name(DECIMAL_LOGICAL_NAME).parameter(DECIMAL_SCALE_FIELD, str(scale))

    @classmethod
    def date(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT32).name(DATE_LOGICAL_NAME)

    @classmethod
    def time(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT32).name(TIME_LOGICAL_NAME)

    @classmethod
    def timestamp(cls) -> "SchemaBuilder":
        return cls(SchemaType.INT64).name(TIMESTAMP_LOGICAL_NAME)

    @property
    def type(self) -> SchemaType:
        return self._type

    def optional(self) -> "SchemaBuilder":
        self._optional = True
        return self

    def required(self) -> "SchemaBuilder":
        self._optional = False
        return self

    def name(self, name: str) -> "SchemaBuilder":
        self._name = name
        return self

    def parameter(self, key: str, value: str) -> "SchemaBuilder":
        self._parameters[key] = value
        return self

    def default_value(self, value: Any) -> "SchemaBuilder":
        self._default_value = value
        return self

    def field(self, name: str, schema: Schema) -> "SchemaBuilder":
        """Add a field to a struct schema under construction."""
        if self._type is not SchemaType.STRUCT:
            raise ValueError(f"Cannot add field '{name}' to a non-struct schema ({self._type.value})")
        if name in self._fields:
            raise ValueError(f"Cannot create field because of field name duplication: {name}")
        self._fields[name] = schema
        return self

    def field_names(self) -> List[str]:
        return list(self._fields)

    def build(self) -> Schema:
        return Schema(
            type=self._type,
            optional=self._optional,
            name=self._name,
            parameters=dict(self._parameters),
            fields=tuple(Field(name, i, s) for i, (name, s) in enumerate(self._fields.items())),
            default_value=self._default_value,
        )
