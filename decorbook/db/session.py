# decorbook/db/session.py
# Builds the SQLAlchemy engine and session factory.
# Works with Postgres and SQLite (tests/local use). The engine lives on app.state, created in the lifespan.

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def build_engine(database_url: str) -> Engine:
    """Creates an engine; an in-memory SQLite URL gets a single shared connection."""
    # SQLite needs connect_args; Postgres gets an empty dict
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)

    # pool_pre_ping helps with long-lived Postgres connections
    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Dependency that yields a database session bound to the application's engine."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
