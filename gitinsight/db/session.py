"""
Engine and session factory for the commit analytics database. SQLAlchemy 2.x style.

PostgreSQL (psycopg3) is the production target; a ``sqlite://`` DATABASE_URL
works for local experiments.
"""

from collections.abc import Generator

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from gitinsight.config import Settings, get_settings


def _make_engine(settings: Settings) -> Engine:
    if settings.database_url.startswith("sqlite"):
        return create_engine(settings.database_url, echo=settings.debug)
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=settings.debug,
        connect_args={
            "connect_timeout": settings.db_connect_timeout,
            "options": "-c timezone=UTC",
        },
    )


engine = _make_engine(get_settings())
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Base class for repository, commit and category tables."""


def check_db_connection() -> None:
    """Run ``SELECT 1``; raises if the analytics database is unreachable."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db() -> None:
    """Create any missing tables. Local setups only; production schemas are managed elsewhere."""
    import gitinsight.models  # noqa: F401  (registers mappers on Base)

    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one unit of work and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
