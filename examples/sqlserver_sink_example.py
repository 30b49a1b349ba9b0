#!/usr/bin/env python3
"""
SQL Server Sink Statements Example

This example shows how a sink connector renders SQL for SQL Server using connect-dialects.
It shows how to:
1. Pick a dialect from the connection URL
2. Create and evolve a table from sink fields
3. Build the MERGE upsert and the keyed delete
4. Log connection URLs without leaking secrets
"""

import logging

from connect_dialects import (
    ColumnId,
    DialectConfig,
    DropOptions,
    SinkRecordField,
    TableId,
    dialect_for_config,
)
from connect_dialects.schema import DECIMAL_LOGICAL_NAME, TIMESTAMP_LOGICAL_NAME, SchemaType

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def sink_statements_example():
    """Render every statement a sink task needs for one table."""

    print("\n📦 SQL Server Sink Statements")
    print("=" * 50)

    config = DialectConfig(
        connection_url="jdbc:sqlserver://localhost:1433;databaseName=sales;password=YourPassword123",
        time_zone="UTC",
    )
    dialect = dialect_for_config(config)
    logger.info(f"Connected to {dialect.sanitized_url(config.connection_url)}")

    orders = TableId("sales", "dbo", "orders")
    fields = [
        SinkRecordField("id", SchemaType.INT64, is_primary_key=True),
        SinkRecordField("customer", SchemaType.STRING),
        SinkRecordField("total", SchemaType.BYTES, DECIMAL_LOGICAL_NAME, {"scale": "2"}),
        SinkRecordField("placed_at", SchemaType.INT64, TIMESTAMP_LOGICAL_NAME, optional=True),
    ]

    print("\n🛠️  Create table:")
    print(dialect.build_create_table_statement(orders, fields))

    print("\n➕ Add a column:")
    for sql in dialect.build_alter_table(orders, [SinkRecordField("notes", SchemaType.STRING, optional=True)]):
        print(sql)

    keys = [ColumnId(orders, "id")]
    non_keys = [ColumnId(orders, f.name) for f in fields if not f.is_primary_key]

    print("\n🔁 Upsert:")
    print(dialect.build_upsert_query_statement(orders, keys, non_keys))

    print("\n🗑️  Delete:")
    print(dialect.build_delete_statement(orders, keys))

    print("\n💥 Drop:")
    print(dialect.build_drop_table_statement(orders, DropOptions(if_exists=True)))


if __name__ == "__main__":
    print("🔗 SQL Server dialect examples")
    print("=" * 60)
    sink_statements_example()
