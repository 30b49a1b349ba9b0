"""Generic dialect shared by every database.

Holds the default type mapping, statement builders, column conversion and URL
sanitization. Database dialects subclass :class:`GenericDatabaseDialect` and
override only what differs.
"""

from __future__ import annotations
import logging
import re
from datetime import tzinfo
from decimal import Decimal
from typing import Any, Callable, Collection, Dict, List, Optional, Sequence

from ..config import TimeZoneProvider, time_zone_provider_for
from ..discovery.base import nullability_from_metadata, read_metadata_field
from ..exceptions import InvalidKeyColumnsError, UnsupportedStatementError
from ..expressions import (
    ExpressionBuilder,
    IdentifierRules,
    QuoteMethod,
    column_names,
)
from ..mapping import DEFAULT_TYPE_MAPPING, TypeMapping
from ..models import (
    ColumnDefinition,
    ColumnId,
    ColumnMapping,
    DropOptions,
    Mutability,
    Nullability,
    SinkRecordField,
    TableId,
)
from ..schema import SchemaBuilder
from ..sqltypes import BINARY_TYPES, CHARACTER_TYPES, INTEGER_TYPES, SqlType
from ..timeutils import to_date, to_time, to_timestamp

logger = logging.getLogger(__name__)

ColumnConverter = Callable[[Sequence[Any]], Any]


class GenericDatabaseDialect:
    """Dialect for any database reachable through a standard driver."""

    name = "GenericDatabaseDialect"
    type_mapping: TypeMapping = DEFAULT_TYPE_MAPPING
    default_identifier_rules = IdentifierRules(".", '"', '"')

    def __init__(self, config: Any = None, identifier_rules: Optional[IdentifierRules] = None,
                 time_zone_provider: Optional[TimeZoneProvider] = None):
        """Create a dialect.

        Args:
            config: Connector configuration; may expose ``time_zone`` and
                ``quote_sql_identifiers``
            identifier_rules: Overrides the dialect's quoting rules
            time_zone_provider: Overrides the time zone taken from ``config``
        """
        self.config = config
        self.identifier_rules = identifier_rules or self.default_identifier_rules
        self.quote_method = QuoteMethod(getattr(config, "quote_sql_identifiers", QuoteMethod.ALWAYS))
        provider = time_zone_provider or time_zone_provider_for(config)
        self._time_zone = provider.time_zone()

    @property
    def time_zone(self) -> tzinfo:
        return self._time_zone

    def use_catalog(self) -> bool:
        """Whether qualified names include the catalog part."""
        return False

    def expression_builder(self) -> ExpressionBuilder:
        return ExpressionBuilder(self.identifier_rules, self.quote_method, self.use_catalog())

    # -- type mapping ---------------------------------------------------

    def sql_type(self, field: SinkRecordField) -> str:
        """Map a sink field to the SQL column type of this dialect."""
        return self.type_mapping.sql_type(field)

    # -- statements -----------------------------------------------------

    def build_create_table_statement(self, table: TableId, fields: Collection[SinkRecordField]) -> str:
        builder = self.expression_builder()
        pk_field_names = [f.name for f in fields if f.is_primary_key]
        builder.append("CREATE TABLE ")
        builder.append(table)
        builder.append(" (")
        self.write_columns_spec(builder, fields)
        if pk_field_names:
            builder.append(",\n")
            builder.append("PRIMARY KEY(")
            builder.append_list().delimited_by(",").transformed_by(
                lambda b, name: b.append_column_name(name)).of(pk_field_names)
            builder.append(")")
        builder.append(")")
        return str(builder)

    def build_alter_table(self, table: TableId, fields: Collection[SinkRecordField]) -> List[str]:
        newlines = len(fields) > 1

        def transform(builder: ExpressionBuilder, field: SinkRecordField) -> None:
            if newlines:
                builder.append("\n")
            builder.append("ADD ")
            self.write_column_spec(builder, field)

        builder = self.expression_builder()
        builder.append("ALTER TABLE ")
        builder.append(table)
        builder.append(" ")
        builder.append_list().delimited_by(",").transformed_by(transform).of(fields)
        return [str(builder)]

    def build_drop_table_statement(self, table: TableId, options: DropOptions) -> str:
        builder = self.expression_builder()
        builder.append("DROP TABLE ")
        if options.if_exists:
            builder.append("IF EXISTS ")
        builder.append(table)
        if options.cascade:
            builder.append(" CASCADE")
        return str(builder)

    def build_insert_statement(self, table: TableId, key_columns: Collection[ColumnId],
                               non_key_columns: Collection[ColumnId]) -> str:
        key_columns, non_key_columns = list(key_columns or []), list(non_key_columns or [])
        builder = self.expression_builder()
        builder.append("INSERT INTO ")
        builder.append(table)
        builder.append("(")
        builder.append_list().delimited_by(",").transformed_by(column_names()).of(key_columns, non_key_columns)
        builder.append(") VALUES(")
        builder.append_multiple(",", "?", len(key_columns) + len(non_key_columns))
        builder.append(")")
        return str(builder)

    def build_update_statement(self, table: TableId, key_columns: Collection[ColumnId],
                               non_key_columns: Collection[ColumnId]) -> str:
        key_columns, non_key_columns = list(key_columns or []), list(non_key_columns or [])
        builder = self.expression_builder()
        builder.append("UPDATE ")
        builder.append(table)
        builder.append(" SET ")
        builder.append_list().delimited_by(", ").transformed_by(
            self._equals_placeholder).of(non_key_columns)
        if key_columns:
            builder.append(" WHERE ")
            builder.append_list().delimited_by(" AND ").transformed_by(
                self._equals_placeholder).of(key_columns)
        return str(builder)

    def build_upsert_query_statement(self, table: TableId, key_columns: Collection[ColumnId],
                                     non_key_columns: Collection[ColumnId]) -> str:
        raise UnsupportedStatementError(f"{self.name} does not support upserts into {table}")

    def build_delete_statement(self, table: TableId, key_columns: Collection[ColumnId]) -> str:
        key_columns = list(key_columns or [])
        self.require_key_columns("DELETE", table, key_columns)
        builder = self.expression_builder()
        builder.append("DELETE FROM ")
        builder.append(table)
        builder.append(" WHERE ")
        builder.append_list().delimited_by(" AND ").transformed_by(
            self._equals_placeholder).of(key_columns)
        return str(builder)

    def require_key_columns(self, statement: str, table: TableId, key_columns: Optional[Collection[ColumnId]]):
        if not key_columns:
            raise InvalidKeyColumnsError(statement, table)

    @staticmethod
    def _equals_placeholder(builder: ExpressionBuilder, column: ColumnId) -> None:
        builder.append_column_name(column.name).append(" = ?")

    def write_columns_spec(self, builder: ExpressionBuilder, fields: Collection[SinkRecordField]) -> None:
        def transform(b: ExpressionBuilder, field: SinkRecordField) -> None:
            b.append("\n")
            self.write_column_spec(b, field)

        builder.append_list().delimited_by(",").transformed_by(transform).of(fields)

    def write_column_spec(self, builder: ExpressionBuilder, field: SinkRecordField) -> None:
        builder.append_column_name(field.name)
        builder.append(" ")
        builder.append(self.sql_type(field))
        if field.default_value is not None:
            builder.append(" DEFAULT ")
            self.format_column_value(builder, field, field.default_value)
        elif field.optional:
            builder.append(" NULL")
        else:
            builder.append(" NOT NULL")

    def format_column_value(self, builder: ExpressionBuilder, field: SinkRecordField, value: Any) -> None:
        """Render a literal value for a column default."""
        if isinstance(value, bool):
            builder.append("1" if value else "0")
        elif isinstance(value, (int, float, Decimal)):
            builder.append(str(value))
        elif isinstance(value, (bytes, bytearray)):
            builder.append(f"x'{bytes(value).hex()}'")
        else:
            builder.append_string_literal(str(value))

    # -- URL sanitization -----------------------------------------------

    def sanitized_url(self, url: str) -> str:
        """Mask password-like query parameters of a connection URL."""
        return re.sub(r"(?i)([?&]([^=&]*)password([^=&]*)=)[^&]*", r"\1****", url)

    # -- column introspection -------------------------------------------

    def column_definition(
        self,
        metadata_row: Any,
        column_id: ColumnId,
        sql_type: int,
        type_name: str,
        class_name: Optional[str],
        nullability: Nullability,
        mutability: Mutability,
        precision: int,
        scale: int,
        signed_numbers: Optional[bool],
        display_size: Optional[int],
        auto_incremented: Optional[bool],
        case_sensitive: Optional[bool],
        searchable: Optional[bool],
        currency: Optional[bool],
        is_primary_key: bool,
    ) -> ColumnDefinition:
        """Build the definition of a discovered column.

        ``metadata_row`` is the driver row the values were read from; the
        generic dialect does not look at it.
        """
        return ColumnDefinition(
            id=column_id,
            sql_type=sql_type,
            type_name=type_name,
            class_name=class_name,
            nullability=nullability,
            mutability=mutability,
            precision=precision,
            scale=scale,
            signed_numbers=signed_numbers,
            display_size=display_size,
            auto_incremented=auto_incremented,
            case_sensitive=case_sensitive,
            searchable=searchable,
            currency=currency,
            is_primary_key=is_primary_key,
        )

    def is_signed_type(self, sql_type: int, type_name: str) -> Optional[bool]:
        code = SqlType.from_code(sql_type)
        if code in INTEGER_TYPES or code in (SqlType.REAL, SqlType.FLOAT, SqlType.DOUBLE,
                                             SqlType.NUMERIC, SqlType.DECIMAL):
            return "unsigned" not in (type_name or "").lower()
        return None

    def describe_columns(self, connection: Any, table: TableId) -> Dict[ColumnId, ColumnDefinition]:
        """Describe a table's columns using the driver's catalog functions.

        ``connection`` is a DB-API connection whose cursors expose ODBC catalog
        calls (``columns()`` and ``primaryKeys()``), as pyodbc's do.
        """
        cursor = connection.cursor()
        try:
            rows = cursor.columns(table=table.table_name, catalog=table.catalog,
                                  schema=table.schema_name).fetchall()
            pk_rows = cursor.primaryKeys(table.table_name, catalog=table.catalog,
                                         schema=table.schema_name).fetchall()
        finally:
            cursor.close()

        pk_names = {read_metadata_field(r, "column_name") for r in pk_rows}
        definitions: Dict[ColumnId, ColumnDefinition] = {}
        for row in rows:
            column_name = read_metadata_field(row, "column_name")
            column_id = ColumnId(table, column_name)
            sql_type = int(read_metadata_field(row, "data_type"))
            type_name = read_metadata_field(row, "type_name")
            definitions[column_id] = self.column_definition(
                row,
                column_id,
                sql_type,
                type_name,
                None,
                nullability_from_metadata(read_metadata_field(row, "nullable")),
                Mutability.UNKNOWN,
                read_metadata_field(row, "column_size") or 0,
                read_metadata_field(row, "decimal_digits") or 0,
                self.is_signed_type(sql_type, type_name),
                None,
                None,
                None,
                None,
                None,
                column_name in pk_names,
            )
        logger.debug(f"Described {len(definitions)} columns of {table}")
        return definitions

    def field_name_for(self, column_definition: ColumnDefinition) -> str:
        return column_definition.id.alias_or_name

    def add_field_to_schema(self, column_definition: ColumnDefinition, builder: SchemaBuilder) -> Optional[str]:
        """Add a field for the column to the record schema under construction.

        Returns the field name, or ``None`` when the column type is not
        supported and the column is skipped.
        """
        field_name = self.field_name_for(column_definition)
        field_builder = self._field_builder_for(column_definition)
        if field_builder is None:
            logger.warning(
                f"JDBC type {column_definition.sql_type} ({column_definition.type_name}) not currently "
                f"supported; skipping column {column_definition.id}"
            )
            return None
        if column_definition.is_optional:
            field_builder.optional()
        builder.field(field_name, field_builder.build())
        return field_name

    def _field_builder_for(self, column_definition: ColumnDefinition) -> Optional[SchemaBuilder]:
        code = column_definition.type
        signed = column_definition.is_signed
        if code in (SqlType.BIT, SqlType.BOOLEAN):
            return SchemaBuilder.boolean()
        if code == SqlType.TINYINT:
            return SchemaBuilder.int8() if signed else SchemaBuilder.int16()
        if code == SqlType.SMALLINT:
            return SchemaBuilder.int16() if signed else SchemaBuilder.int32()
        if code == SqlType.INTEGER:
            return SchemaBuilder.int32() if signed else SchemaBuilder.int64()
        if code == SqlType.BIGINT:
            return SchemaBuilder.int64()
        if code == SqlType.REAL:
            return SchemaBuilder.float32()
        if code in (SqlType.FLOAT, SqlType.DOUBLE):
            return SchemaBuilder.float64()
        if code in (SqlType.NUMERIC, SqlType.DECIMAL):
            return SchemaBuilder.decimal(column_definition.scale)
        if code in CHARACTER_TYPES:
            return SchemaBuilder.string()
        if code in BINARY_TYPES:
            return SchemaBuilder.bytes()
        if code == SqlType.DATE:
            return SchemaBuilder.date()
        if code in (SqlType.TIME, SqlType.SS_TIME2):
            return SchemaBuilder.time()
        if code == SqlType.TIMESTAMP:
            return SchemaBuilder.timestamp()
        return None

    def create_column_converter(self, mapping: ColumnMapping) -> Optional[ColumnConverter]:
        """Return a function extracting the column's value from a result row.

        Returns ``None`` for unsupported column types; those columns were
        already skipped (and logged) when the schema was built.
        """
        index = mapping.column_number - 1
        code = mapping.column_definition.type
        zone = self.time_zone

        if code in (SqlType.BIT, SqlType.BOOLEAN):
            return lambda row: _nullable(row[index], bool)
        if code in INTEGER_TYPES:
            return lambda row: _nullable(row[index], int)
        if code in (SqlType.REAL, SqlType.FLOAT, SqlType.DOUBLE):
            return lambda row: _nullable(row[index], float)
        if code in (SqlType.NUMERIC, SqlType.DECIMAL):
            return lambda row: _nullable(row[index], _to_decimal)
        if code in CHARACTER_TYPES:
            return lambda row: _nullable(row[index], str)
        if code in BINARY_TYPES:
            return lambda row: _nullable(row[index], bytes)
        if code == SqlType.DATE:
            return lambda row: to_date(row[index])
        if code in (SqlType.TIME, SqlType.SS_TIME2):
            return lambda row: to_time(row[index])
        if code == SqlType.TIMESTAMP:
            return lambda row: to_timestamp(row[index], zone)
        return None

    def __str__(self) -> str:
        return self.name


def _nullable(value: Any, convert: Callable[[Any], Any]) -> Any:
    return None if value is None else convert(value)


def _to_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class DialectProvider:
    """Creates a dialect for connection URLs using one of its subprotocols."""

    def __init__(self, dialect_name: str, dialect_class: type, *subprotocols: str):
        self.dialect_name = dialect_name
        self.dialect_class = dialect_class
        self.subprotocols = tuple(s.lower() for s in subprotocols)

    def score(self, subprotocol: Optional[str]) -> int:
        """How well this provider matches a URL subprotocol (0 means no match)."""
        if subprotocol and subprotocol.lower() in self.subprotocols:
            return 100
        return 0

    def create(self, config: Any = None, **kwargs: Any) -> GenericDatabaseDialect:
        return self.dialect_class(config, **kwargs)

    def __repr__(self) -> str:
        return f"DialectProvider({self.dialect_name!r}, subprotocols={list(self.subprotocols)})"
