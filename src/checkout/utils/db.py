import os

from protean.domain import Domain
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url


def _register_models(domain: Domain, provider) -> None:
    """Force every aggregate and entity on this provider to register with SQLAlchemy.

    Accessing the repository's _dao attribute builds the model class, which adds
    its table to the provider's metadata.
    """
    for _, aggregate_record in domain.registry.aggregates.items():
        if aggregate_record.cls.meta_.provider == provider.name:
            domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

    for _, entity_record in domain.registry.entities.items():
        if entity_record.cls.meta_.provider == provider.name:
            domain.repository_for(entity_record.cls)._dao  # noqa: B018


def with_timeouts(database_uri: str, connect_timeout: float, statement_timeout: float) -> str:
    """Add libpq connect and statement timeouts to a PostgreSQL URI.

    Values already present in the URI win over the configured ones.
    """
    url = make_url(os.path.expandvars(database_uri))
    query = dict(url.query)
    query.setdefault("connect_timeout", str(max(1, round(connect_timeout))))

    options = query.get("options", "")
    if "statement_timeout" not in options:
        statement_ms = max(1, round(statement_timeout * 1000))
        query["options"] = f"{options} -c statement_timeout={statement_ms}".strip()

    return url.set(query=query).render_as_string(hide_password=False)


def apply_database_timeouts(domain: Domain, connect_timeout: float, statement_timeout: float) -> None:
    """Bound every PostgreSQL connection and statement the domain will issue.

    Must run before the domain initializes its providers.
    """
    for _, database in domain.config["databases"].items():
        if database.get("provider") == "postgresql" and database.get("database_uri"):
            database["database_uri"] = with_timeouts(database["database_uri"], connect_timeout, statement_timeout)


def setup_db(domain: Domain):
    """Create the order tables on every relational provider"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in ("sqlite", "postgresql"):
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider)
                provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop the order tables on every relational provider"""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in ("sqlite", "postgresql"):
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider)
                provider._metadata.drop_all(engine)
