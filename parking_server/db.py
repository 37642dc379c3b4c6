# parking_server/db.py
"""
Database configuration and session management
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

DATABASE_URL = settings.database_url


def _use_immediate_transactions(engine):
    """
    SQLite: open every transaction with BEGIN IMMEDIATE.

    pysqlite normally defers BEGIN until the first write, so two sessions can
    both read "no conflict" and then both insert. Taking the write lock when
    the transaction starts makes check-then-write sequences run one at a time.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def make_engine(url: str):
    # Engine configuration with better timeout settings
    engine_kwargs = {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }

    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    else:
        engine_kwargs.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "connect_args": {"connect_timeout": 30},
        })

    new_engine = create_engine(url, **engine_kwargs)
    if url.startswith("sqlite"):
        _use_immediate_transactions(new_engine)
    return new_engine


# Create engine
engine = make_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """Database session dependency"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
