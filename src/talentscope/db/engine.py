"""Engine factory and session management.

Creates the SQLAlchemy engine from TALENTSCOPE_DATABASE_URL. SQLite
connections receive WAL, foreign key and busy-timeout PRAGMAs so the
per-outcome worker threads can read concurrently.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from talentscope.config import get_settings


def create_db_engine(database_url: Optional[str] = None) -> Engine:
    """Create the SQLAlchemy engine.

    - Falls back to the configured database_url when none is given
    - SQLite file databases get their parent directory created and
      check_same_thread disabled for the worker pool
    - Event listener sets WAL mode, foreign keys, and busy timeout on each
      SQLite connection
    """
    settings = get_settings()
    url = make_url(database_url or settings.database_url)

    connect_args: dict = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        url,
        pool_pre_ping=True,
        echo=settings.debug,
        connect_args=connect_args,
    )

    if url.get_backend_name() == "sqlite":

        @event.listens_for(engine, "connect")
        def set_sqlite_pragmas(dbapi_connection, connection_record):
            """Set SQLite PRAGMAs on every new connection."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    return engine


# Module-level singleton engine
engine = create_db_engine()

# Session factory bound to the engine
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """Context manager yielding a database session.

    Usage:
        with get_db() as db:
            benchmarks = db.query(Benchmark).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
