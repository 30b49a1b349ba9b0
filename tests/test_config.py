"""Tests for dialect configuration and time zone resolution."""

import logging
from datetime import timezone

import pendulum
import pytest
from pydantic import ValidationError

from connect_dialects.config import (
    DialectConfig,
    StaticTimeZoneProvider,
    env_default,
    time_zone_provider_for,
)
from connect_dialects.expressions import QuoteMethod


class TestDialectConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = DialectConfig(connection_url="  jdbc:sqlserver://db:1433  ")
        assert config.connection_url == "jdbc:sqlserver://db:1433"
        assert config.dialect_name is None
        assert config.time_zone == "UTC"
        assert config.quote_sql_identifiers == QuoteMethod.ALWAYS

    def test_connection_url_required(self):
        with pytest.raises(ValidationError, match="connection_url is required"):
            DialectConfig(connection_url="   ")

    def test_invalid_time_zone(self):
        with pytest.raises(ValidationError, match="Invalid time_zone"):
            DialectConfig(connection_url="jdbc:sqlserver://db", time_zone="Mars/Olympus_Mons")

    def test_quote_policy_case_insensitive(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db", quote_sql_identifiers="NEVER")
        assert config.quote_sql_identifiers == QuoteMethod.NEVER

    def test_invalid_quote_policy(self):
        with pytest.raises(ValidationError):
            DialectConfig(connection_url="jdbc:sqlserver://db", quote_sql_identifiers="sometimes")

    def test_password_hidden_from_repr(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db", connection_password="hunter2")
        assert "hunter2" not in repr(config)

    def test_frozen(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db")
        with pytest.raises(ValidationError):
            config.time_zone = "Europe/Paris"

    def test_tzinfo(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db", time_zone="Asia/Tokyo")
        assert config.tzinfo().name == "Asia/Tokyo"


class TestFromEnv:
    """Test environment based configuration."""

    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("CONNECT_URL", "jdbc:sqlserver://db;databaseName=sales")
        monkeypatch.setenv("CONNECT_TIME_ZONE", "Europe/Berlin")
        monkeypatch.setenv("CONNECT_QUOTE_SQL_IDENTIFIERS", "never")
        monkeypatch.setenv("CONNECT_PASSWORD", "secret")
        monkeypatch.delenv("CONNECT_DIALECT", raising=False)

        config = DialectConfig.from_env()
        assert config.connection_url == "jdbc:sqlserver://db;databaseName=sales"
        assert config.time_zone == "Europe/Berlin"
        assert config.quote_sql_identifiers == QuoteMethod.NEVER
        assert config.connection_password == "secret"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("APP_URL", "jdbc:sqlserver://db")
        config = DialectConfig.from_env(prefix="APP_", time_zone="Asia/Tokyo", dialect_name=None)
        assert config.time_zone == "Asia/Tokyo"
        assert config.dialect_name is None

    def test_env_default(self, monkeypatch):
        monkeypatch.setenv("CONNECT_SOMETHING", "value")
        assert env_default("SOMETHING") == "value"
        assert env_default("MISSING_SETTING", "fallback") == "fallback"


class TestTimeZoneProvider:
    """Test resolution of the time zone from configuration objects."""

    def test_no_config_is_utc(self):
        zone = time_zone_provider_for(None).time_zone()
        assert pendulum.datetime(2024, 1, 1, tz=zone).utcoffset().total_seconds() == 0

    def test_config_time_zone(self):
        config = DialectConfig(connection_url="jdbc:sqlserver://db", time_zone="Europe/Paris")
        assert time_zone_provider_for(config).time_zone().name == "Europe/Paris"

    def test_callable_time_zone(self):
        class LegacyConfig:
            def time_zone(self):
                return "America/Chicago"

        assert time_zone_provider_for(LegacyConfig()).time_zone().name == "America/Chicago"

    def test_tzinfo_passes_through(self):
        class Config:
            time_zone = timezone.utc

        assert time_zone_provider_for(Config()).time_zone() is timezone.utc

    def test_unrecognized_kind_is_utc(self):
        class Config:
            time_zone = 42

        zone = time_zone_provider_for(Config()).time_zone()
        assert zone.name == "UTC"

    def test_bad_zone_falls_back(self, caplog):
        class Config:
            time_zone = "Nowhere/Special"

        with caplog.at_level(logging.WARNING, logger="connect_dialects.config"):
            zone = time_zone_provider_for(Config()).time_zone()
        assert zone.name == "UTC"
        assert "Ignoring unknown time zone" in caplog.text

    def test_static_provider(self):
        assert StaticTimeZoneProvider("Asia/Kolkata").time_zone().name == "Asia/Kolkata"
