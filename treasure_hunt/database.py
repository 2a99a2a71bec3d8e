# treasure_hunt/database.py
from typing import Callable

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# SQLAlchemy Base
Base = declarative_base()

SessionFactory = Callable[[], Session]


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_in_memory(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """
    Create the engine backing the catalog store.

    The engine is owned by whoever hosts the application (API, console,
    tests); nothing in the package keeps a module-level instance.
    """
    kwargs = {}
    if _is_sqlite(database_url):
        # Sessions are opened on worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_in_memory(database_url):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)

    if _is_sqlite(database_url):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory handed to services and game sessions"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create the catalog tables if they do not exist yet"""
    # Register the models on Base.metadata
    import treasure_hunt.models.zone  # noqa: F401
    import treasure_hunt.models.sub_zone  # noqa: F401
    import treasure_hunt.models.treasure  # noqa: F401

    Base.metadata.create_all(bind=engine)

