"""Database configuration and session management.

The engine defaults to SQLite, configured the same way a small web service
needs it: WAL mode so the periodic auto-schedule job can write while API
requests read, and foreign key enforcement so attendance rows can never point
at a missing occurrence.

Occurrence materialization relies on the database for its uniqueness
guarantee (see ``AttendanceOccurrence``), so the pragmas below are applied on
every new pooled connection.
"""

from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings

# Sessions are handed between threads by FastAPI and APScheduler.
connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


@sa_event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    if engine.dialect.name != "sqlite":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables():
    """Create all database tables."""
    # Import models so every table is registered on the metadata
    import app.models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
