#!/usr/bin/env python3
"""
SQL Server Source Schema Example

This example describes a live SQL Server table through pyodbc and turns its rows into
connector values. It requires the sqlserver extra (pyodbc) and a reachable server.
"""

import logging
import os

import pyodbc

from connect_dialects import ColumnMapping, DialectConfig, SchemaBuilder, TableId, dialect_for_config
from connect_dialects.dialects import register_output_converters
from connect_dialects.expressions import column_names

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def describe_and_read(odbc_connection_string: str, table: TableId):
    config = DialectConfig.from_env(connection_url="jdbc:sqlserver://localhost:1433")
    dialect = dialect_for_config(config)

    connection = pyodbc.connect(odbc_connection_string)
    register_output_converters(connection)
    try:
        definitions = dialect.describe_columns(connection, table)

        schema_builder = SchemaBuilder.struct()
        mappings = []
        for number, definition in enumerate(definitions.values(), start=1):
            field_name = dialect.add_field_to_schema(definition, schema_builder)
            if field_name is not None:
                mappings.append((field_name, dialect.create_column_converter(ColumnMapping(definition, number))))
        schema = schema_builder.build()
        print(f"📋 Schema fields: {schema.field_names()}")

        select = dialect.expression_builder()
        select.append("SELECT TOP 5 ")
        select.append_list().delimited_by(", ").transformed_by(column_names()).of(list(definitions))
        select.append(" FROM ").append(table)
        cursor = connection.cursor()
        cursor.execute(str(select))
        for row in cursor.fetchall():
            print({name: convert(row) for name, convert in mappings})
        cursor.close()
    finally:
        connection.close()


if __name__ == "__main__":
    describe_and_read(
        os.environ.get(
            "ODBC_CONNECTION_STRING",
            "DRIVER={ODBC Driver 18 for SQL Server};SERVER=localhost;DATABASE=sales;"
            "UID=sa;PWD=YourPassword123;TrustServerCertificate=yes",
        ),
        TableId("sales", "dbo", "orders"),
    )
