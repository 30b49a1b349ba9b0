"""Dialect configuration and time zone resolution."""

from __future__ import annotations
import logging
import os
from datetime import tzinfo
from typing import Any, Optional, Protocol

import pendulum
from pydantic import BaseModel, Field, field_validator

from .expressions import QuoteMethod

logger = logging.getLogger(__name__)

ENV_PREFIX = "CONNECT_"


def env_default(name: str, default: Optional[str] = None, prefix: str = ENV_PREFIX) -> Optional[str]:
    """Get environment variable with the CONNECT_ prefix."""
    return os.environ.get(f"{prefix}{name}", default)


class DialectConfig(BaseModel):
    """Configuration shared by every dialect.

    Args:
        connection_url: JDBC-style connection URL, e.g.
            ``jdbc:sqlserver://db:1433;databaseName=sales``
        dialect_name: Optional explicit dialect, e.g. ``SqlServerDatabaseDialect``;
            when unset the dialect is chosen from the URL subprotocol
        time_zone: IANA time zone name used to interpret zone-less temporal values
        quote_sql_identifiers: ``always`` or ``never``
        connection_user: Database user, never rendered into SQL
        connection_password: Database password, never logged
    """

    connection_url: str = Field(..., description="JDBC-style connection URL")
    dialect_name: Optional[str] = Field(None, description="Explicit dialect name")
    time_zone: str = Field(default="UTC", description="Time zone for temporal values")
    quote_sql_identifiers: QuoteMethod = Field(default=QuoteMethod.ALWAYS)
    connection_user: Optional[str] = None
    connection_password: Optional[str] = Field(None, repr=False)

    model_config = {"frozen": True}

    @field_validator('connection_url')
    @classmethod
    def validate_connection_url(cls, v):
        """Validate connection URL."""
        if not v or not v.strip():
            raise ValueError("connection_url is required")
        return v.strip()

    @field_validator('time_zone')
    @classmethod
    def validate_time_zone(cls, v):
        """Validate time zone name."""
        try:
            pendulum.timezone(v)
        except Exception as e:
            raise ValueError(f"Invalid time_zone '{v}': {e}") from e
        return v

    @field_validator('quote_sql_identifiers', mode='before')
    @classmethod
    def validate_quote_sql_identifiers(cls, v):
        """Accept quoting policies case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides: Any) -> "DialectConfig":
        """Build a configuration from ``<prefix>*`` environment variables."""
        values = {
            "connection_url": env_default("URL", "", prefix),
            "dialect_name": env_default("DIALECT", None, prefix),
            "time_zone": env_default("TIME_ZONE", "UTC", prefix),
            "quote_sql_identifiers": env_default("QUOTE_SQL_IDENTIFIERS", QuoteMethod.ALWAYS.value, prefix),
            "connection_user": env_default("USER", None, prefix),
            "connection_password": env_default("PASSWORD", None, prefix),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def tzinfo(self) -> tzinfo:
        return pendulum.timezone(self.time_zone)


class TimeZoneProvider(Protocol):
    """Anything that can supply the time zone for temporal conversions."""

    def time_zone(self) -> tzinfo: ...


class StaticTimeZoneProvider:
    """Provides a fixed time zone."""

    def __init__(self, zone: Any = "UTC"):
        self._zone = pendulum.timezone(zone) if isinstance(zone, str) else zone

    def time_zone(self) -> tzinfo:
        return self._zone


def time_zone_provider_for(config: Any) -> TimeZoneProvider:
    """Derive a time zone provider from whatever the configuration exposes.

    Configurations exposing ``time_zone`` as a name, a ``tzinfo`` or a callable
    returning either are honoured; anything else falls back to UTC.
    """
    zone = getattr(config, "time_zone", None)
    if callable(zone):
        zone = zone()
    if isinstance(zone, (str, tzinfo)):
        try:
            return StaticTimeZoneProvider(zone)
        except Exception as e:
            logger.warning(f"Ignoring unknown time zone {zone!r}, using UTC: {e}")
    return StaticTimeZoneProvider(pendulum.UTC)
