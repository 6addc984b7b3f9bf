"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# Deterministic settings for every test; don't inherit from .env.
os.environ["PREVENT_NUMERIC_CATEGORIES"] = "true"
os.environ["AI_PROVIDER"] = "ollama"
os.environ.pop("AI_DEBUG", None)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings and LLM clients are cached per process; start each test clean."""
    from gitinsight.config import get_settings
    from gitinsight.llm.router import clear_client_cache

    get_settings.cache_clear()
    clear_client_cache()
    yield
    get_settings.cache_clear()
    clear_client_cache()


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite engine with working SAVEPOINT support.

    pysqlite defers BEGIN until the first DML statement, which breaks nested
    transactions; emitting BEGIN ourselves restores them.
    """
    from gitinsight.db.session import Base
    import gitinsight.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db(sqlite_engine) -> Session:
    """Database session bound to a fresh in-memory schema."""
    session = Session(bind=sqlite_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db):
    """A stored repository named ``mater``."""
    from gitinsight.models import Repository

    repo = Repository(name="mater", url="https://example.com/mater.git")
    db.add(repo)
    db.commit()
    return repo


@pytest.fixture
def make_commit(db, repository):
    """Factory inserting a commit row for the ``mater`` repository."""
    from gitinsight.models import Commit

    def _make(commit_hash: str, subject: str, **kwargs):
        commit = Commit(
            repository_id=repository.id,
            hash=commit_hash,
            subject=subject,
            author_name=kwargs.pop("author_name", "Dev"),
            author_email=kwargs.pop("author_email", "dev@example.com"),
            **kwargs,
        )
        db.add(commit)
        db.commit()
        return commit

    return _make
