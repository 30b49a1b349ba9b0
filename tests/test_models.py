"""Tests for identifiers, field descriptions and schemas."""

import pytest

from connect_dialects.models import ColumnDefinition, ColumnId, DropOptions, Nullability, SinkRecordField, TableId
from connect_dialects.schema import DECIMAL_LOGICAL_NAME, SchemaBuilder, SchemaType
from connect_dialects.sqltypes import SqlType


class TestTableId:
    """Test table identifiers."""

    @pytest.mark.parametrize("text,expected", [
        ("users", TableId(None, None, "users")),
        ("dbo.users", TableId(None, "dbo", "users")),
        ("sales.dbo.users", TableId("sales", "dbo", "users")),
    ])
    def test_parse(self, text, expected):
        assert TableId.parse(text) == expected
        assert str(TableId.parse(text)) == text

    @pytest.mark.parametrize("text", ["", "a..b", "a.b.c.d"])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError, match="Invalid table name"):
            TableId.parse(text)

    def test_identifiers_are_hashable_values(self):
        table = TableId(None, "dbo", "users")
        assert {ColumnId(table, "id"): 1}[ColumnId(TableId(None, "dbo", "users"), "id")] == 1


class TestFieldsAndColumns:
    def test_sink_field_scale(self):
        field = SinkRecordField("amount", SchemaType.BYTES, DECIMAL_LOGICAL_NAME, {"scale": "2"})
        assert field.scale == "2"
        assert SinkRecordField("name", SchemaType.STRING).scale is None

    def test_column_definition_defaults(self):
        definition = ColumnDefinition(id=ColumnId(None, "c"), sql_type=-155, type_name="datetimeoffset")
        assert definition.auto_incremented is None
        assert definition.is_optional
        assert definition.type == SqlType.SS_TIMESTAMPOFFSET

    def test_as_part_of_primary_key(self):
        definition = ColumnDefinition(id=ColumnId(None, "c"), sql_type=4, type_name="int",
                                      nullability=Nullability.NOT_NULL)
        key = definition.as_part_of_primary_key()
        assert key.is_primary_key and not definition.is_primary_key
        assert key.nullability == Nullability.NOT_NULL

    def test_unknown_sql_type_code(self):
        assert SqlType.from_code(424242) == SqlType.OTHER

    def test_drop_options_are_immutable(self):
        options = DropOptions()
        updated = options.set_if_exists(True)
        assert options.if_exists is False
        assert updated.if_exists is True and updated.cascade is False


class TestSchemaBuilder:
    """Test record schema construction."""

    def test_struct_fields_keep_order(self):
        schema = (SchemaBuilder.struct()
                  .field("id", SchemaBuilder.int64().build())
                  .field("price", SchemaBuilder.decimal(2).optional().build())
                  .build())
        assert schema.field_names() == ["id", "price"]
        price = schema.field("price")
        assert price.index == 1
        assert price.schema.optional is True
        assert price.schema.parameters == {"scale": "2"}
        assert schema.field("missing") is None

    def test_duplicate_field_rejected(self):
        builder = SchemaBuilder.struct().field("id", SchemaBuilder.int32().build())
        with pytest.raises(ValueError, match="duplication"):
            builder.field("id", SchemaBuilder.int32().build())

    def test_fields_only_on_structs(self):
        with pytest.raises(ValueError, match="non-struct"):
            SchemaBuilder.int32().field("id", SchemaBuilder.int32().build())

    def test_primitive_flag(self):
        assert SchemaType.INT8.is_primitive
        assert not SchemaType.STRUCT.is_primitive
