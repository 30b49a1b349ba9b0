"""SQL Server dialect."""

from __future__ import annotations
import logging
import re
from typing import Any, Collection, List, Optional

from ..discovery.base import probe_auto_increment
from ..expressions import ExpressionBuilder, IdentifierRules, column_names, column_names_with_prefix
from ..mapping import DEFAULT_TYPE_MAPPING, decimal_with_precision
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
from ..schema import (
    DATE_LOGICAL_NAME,
    DECIMAL_LOGICAL_NAME,
    TIME_LOGICAL_NAME,
    TIMESTAMP_LOGICAL_NAME,
    SchemaBuilder,
    SchemaType,
)
from ..sqltypes import SqlType
from ..timeutils import decode_timestamp_offset, to_timestamp
from .base import ColumnConverter, DialectProvider, GenericDatabaseDialect

logger = logging.getLogger(__name__)

# SQL Server has semicolon delimited property name-value pairs, and several
# properties that contain secrets
_SECRET_PROPERTIES = ("password", "keyStoreSecret", "gsscredential")
_SECRET_PATTERNS = [re.compile(rf"(;{name}=)[^;]*", re.IGNORECASE) for name in _SECRET_PROPERTIES]


class SqlServerDatabaseDialect(GenericDatabaseDialect):
    """Dialect for Microsoft SQL Server."""

    name = "SqlServerDatabaseDialect"
    default_identifier_rules = IdentifierRules(".", "[", "]")
    type_mapping = DEFAULT_TYPE_MAPPING.extend(
        name="SqlServerDatabaseDialect",
        logical={
            DECIMAL_LOGICAL_NAME: decimal_with_precision(38),
            DATE_LOGICAL_NAME: "date",
            TIME_LOGICAL_NAME: "time",
            TIMESTAMP_LOGICAL_NAME: "datetime2",
        },
        primitive={
            SchemaType.INT8: "tinyint",
            SchemaType.INT16: "smallint",
            SchemaType.INT32: "int",
            SchemaType.INT64: "bigint",
            SchemaType.FLOAT32: "real",
            SchemaType.FLOAT64: "float",
            SchemaType.BOOLEAN: "bit",
            SchemaType.STRING: "varchar(max)",
            SchemaType.BYTES: "varbinary(max)",
        },
    )

    def use_catalog(self) -> bool:
        # SQL Server uses the catalog for the database and the schema for the
        # owner (e.g. "dbo")
        return True

    def build_drop_table_statement(self, table: TableId, options: DropOptions) -> str:
        builder = self.expression_builder()
        if options.if_exists:
            builder.append("IF OBJECT_ID(")
            builder.append_string_literal(str(self.expression_builder().append(table)))
            builder.append(", 'U') IS NOT NULL ")
        builder.append("DROP TABLE ")
        builder.append(table)
        if options.cascade:
            builder.append(" CASCADE")
        return str(builder)

    def build_alter_table(self, table: TableId, fields: Collection[SinkRecordField]) -> List[str]:
        builder = self.expression_builder()
        builder.append("ALTER TABLE ")
        builder.append(table)
        builder.append(" ADD")
        self.write_columns_spec(builder, fields)
        return [str(builder)]

    def build_upsert_query_statement(self, table: TableId, key_columns: Collection[ColumnId],
                                     non_key_columns: Collection[ColumnId]) -> str:
        """Build a MERGE that updates or inserts one row.

        ``HOLDLOCK`` keeps the range lock for the whole merge, so concurrent
        upserts of the same key serialize instead of both inserting.
        """
        key_columns = list(key_columns or [])
        non_key_columns = list(non_key_columns or [])
        self.require_key_columns("MERGE", table, key_columns)

        builder = self.expression_builder()
        builder.append("merge into ")
        builder.append(table)
        builder.append(" with (HOLDLOCK) AS target using (select ")
        builder.append_list().delimited_by(", ").transformed_by(
            column_names_with_prefix("? AS ")).of(key_columns, non_key_columns)
        builder.append(") AS incoming on (")
        builder.append_list().delimited_by(" and ").transformed_by(self._transform_as).of(key_columns)
        builder.append(")")
        if non_key_columns:
            builder.append(" when matched then update set ")
            builder.append_list().delimited_by(",").transformed_by(self._transform_update).of(non_key_columns)
        builder.append(" when not matched then insert (")
        builder.append_list().delimited_by(", ").transformed_by(column_names()).of(non_key_columns, key_columns)
        builder.append(") values (")
        builder.append_list().delimited_by(",").transformed_by(
            column_names_with_prefix("incoming.")).of(non_key_columns, key_columns)
        builder.append(");")
        sql = str(builder)
        logger.debug(f"Built upsert for {table}: {sql}")
        return sql

    @staticmethod
    def _transform_as(builder: ExpressionBuilder, column: ColumnId) -> None:
        builder.append("target.").append_column_name(column.name)
        builder.append("=incoming.").append_column_name(column.name)

    @staticmethod
    def _transform_update(builder: ExpressionBuilder, column: ColumnId) -> None:
        builder.append_column_name(column.name).append("=incoming.").append_column_name(column.name)

    def format_column_value(self, builder: ExpressionBuilder, field: SinkRecordField, value: Any) -> None:
        if isinstance(value, (bytes, bytearray)):
            builder.append(f"0x{bytes(value).hex()}")
            return
        super().format_column_value(builder, field, value)

    def sanitized_url(self, url: str) -> str:
        sanitized = super().sanitized_url(url)
        for pattern in _SECRET_PATTERNS:
            sanitized = pattern.sub(r"\1****", sanitized)
        return sanitized

    def is_signed_type(self, sql_type: int, type_name: str) -> Optional[bool]:
        # tinyint is 0..255
        if SqlType.from_code(sql_type) == SqlType.TINYINT:
            return False
        return super().is_signed_type(sql_type, type_name)

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
        probe = probe_auto_increment(metadata_row)
        if probe.supported:
            auto_incremented = probe.resolve(auto_incremented)
        else:
            logger.warning(f"Unable to get auto incrementing column information for {column_id}: {probe.error!r}")

        return super().column_definition(
            metadata_row,
            column_id,
            sql_type,
            type_name,
            class_name,
            nullability,
            mutability,
            precision,
            scale,
            signed_numbers,
            display_size,
            auto_incremented,
            case_sensitive,
            searchable,
            currency,
            is_primary_key,
        )

    def add_field_to_schema(self, column_definition: ColumnDefinition, builder: SchemaBuilder) -> Optional[str]:
        # datetimeoffset is a date + time + offset, surfaced as a timestamp
        if column_definition.type == SqlType.SS_TIMESTAMPOFFSET:
            field_name = self.field_name_for(column_definition)
            ts_builder = SchemaBuilder.timestamp()
            if column_definition.is_optional:
                ts_builder.optional()
            builder.field(field_name, ts_builder.build())
            return field_name
        return super().add_field_to_schema(column_definition, builder)

    def create_column_converter(self, mapping: ColumnMapping) -> Optional[ColumnConverter]:
        if mapping.column_definition.type == SqlType.SS_TIMESTAMPOFFSET:
            index = mapping.column_number - 1
            zone = self.time_zone
            return lambda row: to_timestamp(row[index], zone)
        return super().create_column_converter(mapping)


def register_output_converters(connection: Any) -> None:
    """Teach a pyodbc connection to decode ``datetimeoffset`` columns.

    Without it pyodbc raises on columns of type -155.
    """
    connection.add_output_converter(int(SqlType.SS_TIMESTAMPOFFSET), decode_timestamp_offset)


PROVIDER = DialectProvider(
    SqlServerDatabaseDialect.name,
    SqlServerDatabaseDialect,
    "microsoft:sqlserver",
    "sqlserver",
    "jtds:sqlserver",
)
