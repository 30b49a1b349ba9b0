"""Lookup of dialects by name or by connection URL subprotocol."""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from ..exceptions import NoSuitableDialectError
from .base import DialectProvider, GenericDatabaseDialect
from .sqlserver import PROVIDER as SQLSERVER_PROVIDER

logger = logging.getLogger(__name__)

GENERIC_PROVIDER = DialectProvider(GenericDatabaseDialect.name, GenericDatabaseDialect)

_providers: Dict[str, DialectProvider] = {}


def register_provider(provider: DialectProvider) -> None:
    """Register a dialect provider under its dialect name."""
    _providers[provider.dialect_name] = provider


def registered_dialect_names() -> List[str]:
    return sorted(_providers)


def registered_providers() -> List[DialectProvider]:
    """Registered providers, ordered by dialect name."""
    return [_providers[name] for name in registered_dialect_names()]


def extract_subprotocol(url: str) -> Optional[str]:
    """Return the subprotocol of a ``jdbc:`` URL, or ``None``.

    Examples:
        >>> extract_subprotocol("jdbc:sqlserver://db:1433;databaseName=sales")
        'sqlserver'
        >>> extract_subprotocol("jdbc:jtds:sqlserver://db:1433/sales")
        'jtds:sqlserver'
    """
    text = url.strip()
    if not text.lower().startswith("jdbc:"):
        return None
    rest = text[len("jdbc:"):]
    if "://" in rest:
        subprotocol = rest.split("://", 1)[0]
    else:
        subprotocol = rest.split(":", 1)[0]
    return subprotocol.lower() or None


def find_dialect_for(url: str, config: Any = None, **kwargs: Any) -> GenericDatabaseDialect:
    """Create the best dialect for a connection URL.

    Falls back to the generic dialect when no provider claims the URL's
    subprotocol.
    """
    subprotocol = extract_subprotocol(url)
    best: Optional[DialectProvider] = None
    best_score = 0
    for provider in _providers.values():
        score = provider.score(subprotocol)
        if score > best_score:
            best, best_score = provider, score

    provider = best or GENERIC_PROVIDER
    dialect = provider.create(config, **kwargs)
    logger.info(f"Using {dialect.name} for {dialect.sanitized_url(url)}")
    return dialect


def dialect_for_name(name: str, config: Any = None, **kwargs: Any) -> GenericDatabaseDialect:
    """Create a dialect by its registered name."""
    provider = _providers.get(name)
    if provider is None:
        raise NoSuitableDialectError(
            f"Unknown dialect '{name}'. Available dialects: {registered_dialect_names()}"
        )
    return provider.create(config, **kwargs)


def dialect_for_config(config: Any, **kwargs: Any) -> GenericDatabaseDialect:
    """Create the dialect a configuration asks for, by name or by URL."""
    name = getattr(config, "dialect_name", None)
    if name:
        return dialect_for_name(name, config, **kwargs)
    return find_dialect_for(config.connection_url, config, **kwargs)


register_provider(GENERIC_PROVIDER)
register_provider(SQLSERVER_PROVIDER)
