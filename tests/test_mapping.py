"""Tests for layered type mappings."""

import pytest

from connect_dialects.exceptions import UnsupportedTypeError
from connect_dialects.mapping import DEFAULT_TYPE_MAPPING, TypeMapping, decimal_with_precision
from connect_dialects.models import SinkRecordField
from connect_dialects.schema import DATE_LOGICAL_NAME, DECIMAL_LOGICAL_NAME, SchemaType


class TestTypeMapping:
    """Test resolution order across layers."""

    def test_default_layer(self):
        assert DEFAULT_TYPE_MAPPING.sql_type(SinkRecordField("c", SchemaType.INT32)) == "INTEGER"
        assert DEFAULT_TYPE_MAPPING.sql_type(SinkRecordField("c", SchemaType.INT32, DATE_LOGICAL_NAME)) == "DATE"

    def test_delta_overrides_only_its_entries(self):
        """A delta layer changes what it lists and inherits the rest."""
        mapping = DEFAULT_TYPE_MAPPING.extend(primitive={SchemaType.STRING: "NVARCHAR(255)"}, name="custom")
        assert mapping.sql_type(SinkRecordField("c", SchemaType.STRING)) == "NVARCHAR(255)"
        assert mapping.sql_type(SinkRecordField("c", SchemaType.INT64)) == "BIGINT"
        assert mapping.parent is DEFAULT_TYPE_MAPPING

    def test_delta_primitive_beats_parent_logical(self):
        """Entries of a more specific layer win over any parent entry."""
        mapping = DEFAULT_TYPE_MAPPING.extend(primitive={SchemaType.INT32: "int"})
        field = SinkRecordField("c", SchemaType.INT32, DATE_LOGICAL_NAME)
        assert mapping.sql_type(field) == "int"

    def test_logical_beats_primitive_within_layer(self):
        mapping = TypeMapping(
            logical={DATE_LOGICAL_NAME: "date"},
            primitive={SchemaType.INT32: "int"},
        )
        assert mapping.sql_type(SinkRecordField("c", SchemaType.INT32, DATE_LOGICAL_NAME)) == "date"
        assert mapping.sql_type(SinkRecordField("c", SchemaType.INT32, "x.Unknown")) == "int"

    def test_renderers_receive_the_field(self):
        mapping = TypeMapping(logical={DECIMAL_LOGICAL_NAME: decimal_with_precision(18)})
        field = SinkRecordField("c", SchemaType.BYTES, DECIMAL_LOGICAL_NAME, {"scale": "6"})
        assert mapping.sql_type(field) == "decimal(18,6)"

    def test_lookup_returns_none_when_unmapped(self):
        assert TypeMapping().lookup(SinkRecordField("c", SchemaType.INT8)) is None

    def test_unmapped_raises(self):
        """Falling through every layer is a configuration error."""
        mapping = DEFAULT_TYPE_MAPPING.extend(name="custom")
        with pytest.raises(UnsupportedTypeError) as exc_info:
            mapping.sql_type(SinkRecordField("tags", SchemaType.ARRAY))

        error = exc_info.value
        assert "tags" in str(error)
        assert error.to_dict() == {
            "error_type": "UnsupportedTypeError",
            "field": "tags",
            "schema_type": "array",
            "schema_name": None,
            "dialect": "custom",
            "message": str(error),
        }
