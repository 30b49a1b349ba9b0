"""Connect Dialects CLI"""

from __future__ import annotations
import logging
import re
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table as RichTable

from .config import DialectConfig, env_default
from .dialects import GenericDatabaseDialect, dialect_for_config, registered_providers
from .exceptions import DialectError
from .models import ColumnId, DropOptions, SinkRecordField, TableId
from .schema import (
    DATE_LOGICAL_NAME,
    DECIMAL_LOGICAL_NAME,
    DECIMAL_SCALE_FIELD,
    TIME_LOGICAL_NAME,
    TIMESTAMP_LOGICAL_NAME,
    SchemaType,
)

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(
    help="Connect Dialects CLI - Render dialect-specific SQL for connector tables."
)

DEFAULT_URL = "jdbc:sqlserver://localhost:1433"

_DECIMAL_SPEC = re.compile(r"^decimal\((?P<scale>\d+)\)$", re.IGNORECASE)
_LOGICAL_SPECS = {
    "date": (SchemaType.INT32, DATE_LOGICAL_NAME),
    "time": (SchemaType.INT32, TIME_LOGICAL_NAME),
    "timestamp": (SchemaType.INT64, TIMESTAMP_LOGICAL_NAME),
}


def parse_field_spec(spec: str) -> SinkRecordField:
    """Parse ``NAME=TYPE`` into a sink field.

    TYPE is a schema type (``int32``, ``string``, ...), ``date``, ``time``,
    ``timestamp`` or ``decimal(SCALE)``; a trailing ``?`` marks the field
    optional.

    Examples:
        >>> parse_field_spec("price=decimal(4)?").scale
        '4'
    """
    if "=" not in spec:
        raise typer.BadParameter(f"Expected NAME=TYPE, got '{spec}'")
    name, type_spec = (part.strip() for part in spec.split("=", 1))
    optional = type_spec.endswith("?")
    type_spec = type_spec.rstrip("?").lower()
    if not name or not type_spec:
        raise typer.BadParameter(f"Expected NAME=TYPE, got '{spec}'")

    decimal = _DECIMAL_SPEC.match(type_spec)
    if decimal:
        return SinkRecordField(name, SchemaType.BYTES, DECIMAL_LOGICAL_NAME,
                               {DECIMAL_SCALE_FIELD: decimal.group("scale")}, optional=optional)
    if type_spec in _LOGICAL_SPECS:
        schema_type, logical_name = _LOGICAL_SPECS[type_spec]
        return SinkRecordField(name, schema_type, logical_name, optional=optional)
    try:
        return SinkRecordField(name, SchemaType(type_spec), optional=optional)
    except ValueError:
        raise typer.BadParameter(f"Unknown type '{type_spec}' for column '{name}'")


def _dialect(url: str, dialect_name: Optional[str], quote: str) -> GenericDatabaseDialect:
    config = DialectConfig(connection_url=url, dialect_name=dialect_name or None,
                           quote_sql_identifiers=quote)
    dialect = dialect_for_config(config)
    logger.debug(f"Rendering with {dialect}")
    return dialect


def _print_sql(*statements: str) -> None:
    for sql in statements:
        console.print(sql, markup=False, highlight=False, soft_wrap=True)


def _fail(error: Exception) -> None:
    console.print(f"❌ Error: {error}", style="red", markup=False, soft_wrap=True)
    raise typer.Exit(1)


def _columns(table: TableId, names: List[str]) -> List[ColumnId]:
    return [ColumnId(table, name) for name in names]


UrlOption = typer.Option(env_default("URL", DEFAULT_URL), "--url", help="Connection URL; env CONNECT_URL")
DialectOption = typer.Option(env_default("DIALECT"), "--dialect", help="Dialect name; env CONNECT_DIALECT")
QuoteOption = typer.Option(
    env_default("QUOTE_SQL_IDENTIFIERS", "always"), "--quote",
    help="Identifier quoting (always, never); env CONNECT_QUOTE_SQL_IDENTIFIERS",
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@app.command()
def sanitize(
    url: str = typer.Argument(..., help="Connection URL to redact"),
    dialect_name: Optional[str] = DialectOption,
):
    """Print a connection URL with its secrets masked."""
    try:
        dialect = _dialect(url, dialect_name, "always")
        _print_sql(dialect.sanitized_url(url))
    except (DialectError, ValueError) as e:
        _fail(e)


@app.command()
def drop(
    table: str = typer.Argument(..., help="Table as [catalog.]schema.table"),
    if_exists: bool = typer.Option(False, "--if-exists", help="Guard the drop with an existence check"),
    cascade: bool = typer.Option(False, "--cascade", help="Drop dependent objects"),
    url: str = UrlOption,
    dialect_name: Optional[str] = DialectOption,
    quote: str = QuoteOption,
):
    """Render a DROP TABLE statement."""
    try:
        dialect = _dialect(url, dialect_name, quote)
        options = DropOptions(if_exists=if_exists, cascade=cascade)
        _print_sql(dialect.build_drop_table_statement(TableId.parse(table), options))
    except (DialectError, ValueError) as e:
        _fail(e)


@app.command()
def alter(
    table: str = typer.Argument(..., help="Table as [catalog.]schema.table"),
    columns: List[str] = typer.Option(..., "--column", "-c", help="NAME=TYPE[?] (repeatable)"),
    url: str = UrlOption,
    dialect_name: Optional[str] = DialectOption,
    quote: str = QuoteOption,
):
    """Render ALTER TABLE statements adding columns."""
    fields = [parse_field_spec(spec) for spec in columns]
    try:
        dialect = _dialect(url, dialect_name, quote)
        _print_sql(*dialect.build_alter_table(TableId.parse(table), fields))
    except (DialectError, ValueError) as e:
        _fail(e)


@app.command()
def upsert(
    table: str = typer.Argument(..., help="Table as [catalog.]schema.table"),
    keys: List[str] = typer.Option([], "--key", "-k", help="Key column (repeatable)"),
    columns: List[str] = typer.Option([], "--column", "-c", help="Non-key column (repeatable)"),
    url: str = UrlOption,
    dialect_name: Optional[str] = DialectOption,
    quote: str = QuoteOption,
):
    """Render an upsert statement."""
    try:
        dialect = _dialect(url, dialect_name, quote)
        table_id = TableId.parse(table)
        _print_sql(dialect.build_upsert_query_statement(
            table_id, _columns(table_id, keys), _columns(table_id, columns)))
    except (DialectError, ValueError) as e:
        _fail(e)


@app.command()
def delete(
    table: str = typer.Argument(..., help="Table as [catalog.]schema.table"),
    keys: List[str] = typer.Option([], "--key", "-k", help="Key column (repeatable)"),
    url: str = UrlOption,
    dialect_name: Optional[str] = DialectOption,
    quote: str = QuoteOption,
):
    """Render a DELETE statement matching key columns."""
    try:
        dialect = _dialect(url, dialect_name, quote)
        table_id = TableId.parse(table)
        _print_sql(dialect.build_delete_statement(table_id, _columns(table_id, keys)))
    except (DialectError, ValueError) as e:
        _fail(e)


@app.command()
def dialects():
    """List registered dialects."""
    rich_table = RichTable(title="Registered dialects")
    rich_table.add_column("Dialect", style="cyan", no_wrap=True)
    rich_table.add_column("Subprotocols", style="green")
    for provider in registered_providers():
        rich_table.add_row(provider.dialect_name, ", ".join(provider.subprotocols) or "(fallback)")
    console.print(rich_table)


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"Connect Dialects v{__version__}")


if __name__ == "__main__":
    app()
