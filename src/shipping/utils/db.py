"""Schema bootstrap for SQL-backed providers.

The memory provider needs no schema; PostgreSQL and SQLite providers get
their tables from the SQLAlchemy metadata that Protean builds lazily, one
table per aggregate or entity DAO.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [
        provider for provider in domain.providers.values() if provider.conn_info["provider"] in _SQL_PROVIDERS
    ]


def _register_tables(domain: Domain, provider) -> None:
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for Shipment and Milestone on every SQL provider."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_tables(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain) -> None:
    """Drop every table the SQL providers know about."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_tables(domain, provider)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
