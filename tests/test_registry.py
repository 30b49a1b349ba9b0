"""Tests for dialect lookup by name and connection URL."""

import logging

import pytest

from connect_dialects.config import DialectConfig
from connect_dialects.dialects import (
    GenericDatabaseDialect,
    SqlServerDatabaseDialect,
    dialect_for_config,
    dialect_for_name,
    extract_subprotocol,
    find_dialect_for,
    registered_dialect_names,
    registered_providers,
)
from connect_dialects.exceptions import NoSuitableDialectError


class TestExtractSubprotocol:
    """Test subprotocol parsing."""

    @pytest.mark.parametrize("url,expected", [
        ("jdbc:sqlserver://db:1433;databaseName=sales", "sqlserver"),
        ("jdbc:microsoft:sqlserver://db:1433", "microsoft:sqlserver"),
        ("jdbc:jtds:sqlserver://db:1433/sales", "jtds:sqlserver"),
        ("JDBC:SQLServer://db", "sqlserver"),
        ("jdbc:oracle:thin:@db:1521:orcl", "oracle"),
        ("postgresql://db/sales", None),
    ])
    def test_extract(self, url, expected):
        assert extract_subprotocol(url) == expected


class TestFindDialect:
    """Test URL based dialect selection."""

    @pytest.mark.parametrize("url", [
        "jdbc:sqlserver://db:1433;databaseName=sales",
        "jdbc:microsoft:sqlserver://db:1433",
        "jdbc:jtds:sqlserver://db:1433/sales",
    ])
    def test_sqlserver_urls(self, url):
        assert isinstance(find_dialect_for(url), SqlServerDatabaseDialect)

    def test_unknown_subprotocol_is_generic(self):
        dialect = find_dialect_for("jdbc:postgresql://db/sales")
        assert type(dialect) is GenericDatabaseDialect

    def test_logs_sanitized_url(self, caplog):
        with caplog.at_level(logging.INFO, logger="connect_dialects.dialects.registry"):
            find_dialect_for("jdbc:sqlserver://db;password=secret")
        assert "SqlServerDatabaseDialect" in caplog.text
        assert "secret" not in caplog.text

    def test_config_is_passed_on(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db", time_zone="Asia/Tokyo")
        dialect = find_dialect_for(config.connection_url, config)
        assert dialect.config is config
        assert dialect.time_zone.name == "Asia/Tokyo"


class TestDialectByName:
    """Test name based dialect selection."""

    def test_registered_names(self):
        names = registered_dialect_names()
        assert "GenericDatabaseDialect" in names
        assert "SqlServerDatabaseDialect" in names

    def test_registered_providers(self):
        providers = {p.dialect_name: p for p in registered_providers()}
        assert [p.dialect_name for p in registered_providers()] == registered_dialect_names()
        assert "jtds:sqlserver" in providers["SqlServerDatabaseDialect"].subprotocols
        assert providers["GenericDatabaseDialect"].subprotocols == ()

    def test_by_name(self):
        assert isinstance(dialect_for_name("SqlServerDatabaseDialect"), SqlServerDatabaseDialect)

    def test_unknown_name(self):
        with pytest.raises(NoSuitableDialectError, match="Unknown dialect 'Db2DatabaseDialect'"):
            dialect_for_name("Db2DatabaseDialect")

    def test_config_name_wins_over_url(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db", dialect_name="GenericDatabaseDialect")
        assert type(dialect_for_config(config)) is GenericDatabaseDialect

    def test_config_without_name_uses_url(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db")
        assert isinstance(dialect_for_config(config), SqlServerDatabaseDialect)
