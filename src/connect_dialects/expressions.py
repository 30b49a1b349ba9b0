"""Identifier quoting and incremental SQL expression building."""

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from .models import ColumnId, TableId


class QuoteMethod(str, Enum):
    """When to quote table and column names."""

    ALWAYS = "always"
    NEVER = "never"


class IdentifierRules:
    """Quote characters and separator used to render qualified names.

    Examples:
        >>> rules = IdentifierRules(".", "[", "]")
        >>> rules.quote("users")
        '[users]'
        >>> rules.quote("odd]name")
        '[odd]]name]'
    """

    DEFAULT_QUOTE = '"'
    DEFAULT_ID_DELIMITER = "."

    def __init__(self, identifier_delimiter: str = DEFAULT_ID_DELIMITER,
                 leading_quote: str = DEFAULT_QUOTE, trailing_quote: Optional[str] = None):
        self.identifier_delimiter = identifier_delimiter
        self.leading_quote = leading_quote
        self.trailing_quote = trailing_quote if trailing_quote is not None else leading_quote

    def quote(self, name: str) -> str:
        """Quote a single identifier, doubling embedded closing quotes."""
        if not self.trailing_quote:
            return name
        escaped = name.replace(self.trailing_quote, self.trailing_quote * 2)
        return f"{self.leading_quote}{escaped}{self.trailing_quote}"

    def qualify(self, *parts: Optional[str], quote: bool = True) -> str:
        """Join the non-empty parts of a multi-part name."""
        rendered = [self.quote(p) if quote else p for p in parts if p]
        return self.identifier_delimiter.join(rendered)

    def __repr__(self) -> str:
        return (f"IdentifierRules({self.identifier_delimiter!r}, "
                f"{self.leading_quote!r}, {self.trailing_quote!r})")


Transform = Callable[["ExpressionBuilder", Any], None]


def column_names() -> Transform:
    """Render each column by name."""
    def transform(builder: "ExpressionBuilder", column: ColumnId) -> None:
        builder.append_column_name(column.name)
    return transform


def column_names_with_prefix(prefix: str) -> Transform:
    """Render each column by name, preceded by a literal prefix."""
    def transform(builder: "ExpressionBuilder", column: ColumnId) -> None:
        builder.append(prefix)
        builder.append_column_name(column.name)
    return transform


class ListBuilder:
    """Appends a delimited list of items to an :class:`ExpressionBuilder`."""

    def __init__(self, builder: "ExpressionBuilder"):
        self._builder = builder
        self._delimiter = ","
        self._transform: Optional[Transform] = None

    def delimited_by(self, delimiter: str) -> "ListBuilder":
        self._delimiter = delimiter
        return self

    def transformed_by(self, transform: Transform) -> "ListBuilder":
        self._transform = transform
        return self

    def of(self, *collections: Optional[Iterable[Any]]) -> "ExpressionBuilder":
        """Append the items of every collection, in order, as one list."""
        first = True
        for collection in collections:
            if not collection:
                continue
            for item in collection:
                if not first:
                    self._builder.append(self._delimiter)
                first = False
                if self._transform is not None:
                    self._transform(self._builder, item)
                else:
                    self._builder.append(item)
        return self._builder


class ExpressionBuilder:
    """Accumulates SQL text, rendering identifiers with the dialect's rules.

    Example:
        >>> builder = ExpressionBuilder(IdentifierRules(".", "[", "]"))
        >>> _ = builder.append("DELETE FROM ").append(TableId(None, "dbo", "users"))
        >>> str(builder)
        'DELETE FROM [dbo].[users]'
    """

    def __init__(self, rules: Optional[IdentifierRules] = None,
                 quote_method: QuoteMethod = QuoteMethod.ALWAYS, use_catalog: bool = True):
        self.rules = rules or IdentifierRules()
        self.quote_method = quote_method
        self.use_catalog = use_catalog
        self._parts: List[str] = []

    @property
    def quote_identifiers(self) -> bool:
        return self.quote_method == QuoteMethod.ALWAYS

    def append(self, obj: Any) -> "ExpressionBuilder":
        """Append literal text, or render a table or column identifier."""
        if isinstance(obj, TableId):
            return self.append_table(obj)
        if isinstance(obj, ColumnId):
            return self.append_column(obj)
        self._parts.append(str(obj))
        return self

    def append_table(self, table: TableId) -> "ExpressionBuilder":
        catalog = table.catalog if self.use_catalog else None
        self._parts.append(self.rules.qualify(
            catalog, table.schema_name, table.table_name, quote=self.quote_identifiers))
        return self

    def append_column(self, column: ColumnId) -> "ExpressionBuilder":
        if column.table_id is not None:
            self.append_table(column.table_id)
            self._parts.append(self.rules.identifier_delimiter)
        return self.append_column_name(column.name)

    def append_column_name(self, name: str) -> "ExpressionBuilder":
        return self.append_identifier(name)

    def append_identifier(self, name: str) -> "ExpressionBuilder":
        self._parts.append(self.rules.quote(name) if self.quote_identifiers else name)
        return self

    def append_string_literal(self, value: str) -> "ExpressionBuilder":
        """Append a single-quoted string literal."""
        escaped = value.replace("'", "''")
        self._parts.append(f"'{escaped}'")
        return self

    def append_list(self) -> ListBuilder:
        return ListBuilder(self)

    def append_multiple(self, delimiter: str, expression: str, times: int) -> "ExpressionBuilder":
        """Append ``expression`` ``times`` times, separated by ``delimiter``."""
        self._parts.append(delimiter.join([expression] * times))
        return self

    def __str__(self) -> str:
        return "".join(self._parts)

    def __repr__(self) -> str:
        return f"ExpressionBuilder({str(self)!r})"
