"""Tests for identifier quoting and expression building."""

from connect_dialects.expressions import (
    ExpressionBuilder,
    IdentifierRules,
    QuoteMethod,
    column_names,
    column_names_with_prefix,
)
from connect_dialects.models import ColumnId, TableId


class TestIdentifierRules:
    """Test quoting rules."""

    def test_trailing_defaults_to_leading(self):
        rules = IdentifierRules(".", '"')
        assert rules.quote("users") == '"users"'

    def test_closing_quote_is_doubled(self):
        assert IdentifierRules(".", "[", "]").quote("a]b") == "[a]]b]"

    def test_qualify_skips_missing_parts(self):
        rules = IdentifierRules(".", "[", "]")
        assert rules.qualify(None, "dbo", "users") == "[dbo].[users]"
        assert rules.qualify("db", "dbo", "users", quote=False) == "db.dbo.users"


class TestExpressionBuilder:
    """Test SQL text accumulation."""

    def test_tables_and_columns(self):
        table = TableId("db", "dbo", "users")
        builder = ExpressionBuilder(IdentifierRules(".", "[", "]"))
        builder.append("SELECT ").append(ColumnId(table, "id")).append(" FROM ").append(table)
        assert str(builder) == "SELECT [db].[dbo].[users].[id] FROM [db].[dbo].[users]"

    def test_catalog_can_be_dropped(self):
        builder = ExpressionBuilder(IdentifierRules(".", "[", "]"), use_catalog=False)
        builder.append(TableId("db", "dbo", "users"))
        assert str(builder) == "[dbo].[users]"

    def test_never_quote(self):
        builder = ExpressionBuilder(IdentifierRules(".", "[", "]"), QuoteMethod.NEVER)
        builder.append(TableId(None, "dbo", "users")).append(".").append_column_name("id")
        assert str(builder) == "dbo.users.id"

    def test_string_literal(self):
        builder = ExpressionBuilder()
        builder.append_string_literal("O'Brien")
        assert str(builder) == "'O''Brien'"

    def test_list_spans_collections(self):
        """Lists join every collection in order and skip empty ones."""
        table = TableId(None, None, "t")
        keys = [ColumnId(table, "id")]
        non_keys = [ColumnId(table, "a"), ColumnId(table, "b")]
        builder = ExpressionBuilder()
        builder.append_list().delimited_by(", ").transformed_by(column_names()).of(non_keys, [], keys)
        assert str(builder) == '"a", "b", "id"'

    def test_prefixed_names(self):
        table = TableId(None, None, "t")
        builder = ExpressionBuilder(IdentifierRules(".", "[", "]"))
        builder.append_list().delimited_by(",").transformed_by(
            column_names_with_prefix("incoming.")).of([ColumnId(table, "a"), ColumnId(table, "b")])
        assert str(builder) == "incoming.[a],incoming.[b]"

    def test_list_without_transform(self):
        builder = ExpressionBuilder()
        builder.append_list().of(["a", "b"])
        assert str(builder) == "a,b"

    def test_append_multiple(self):
        builder = ExpressionBuilder()
        builder.append_multiple(",", "?", 3)
        assert str(builder) == "?,?,?"
