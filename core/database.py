# core/database.py
# Central SQLAlchemy setup: engine factory, session factory, Base
# All models across the app must import THIS Base.

import logging
from datetime import datetime, timezone

from sqlalchemy import create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()

OTHER_CATEGORY = "Other"
DEFAULT_CATEGORIES = [
    "General",
    "Technology",
    "Sports",
    "Movies",
    "Music",
    "Books",
    "Travel",
    OTHER_CATEGORY,
]


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def create_db_engine(url: str, echo: bool = False, timeout: float = 5.0) -> Engine:
    is_sqlite = url.startswith("sqlite")
    connect_args = {}
    kwargs = {}
    if is_sqlite:
        # For SQLite + multithreaded FastAPI, set check_same_thread=False
        connect_args = {"check_same_thread": False, "timeout": timeout}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared in-memory database for every worker
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, echo=echo, connect_args=connect_args, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            # let SQLAlchemy own BEGIN, see do_begin
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            if "poolclass" not in kwargs:
                # WAL reduces writer blocks on readers
                cursor.execute("PRAGMA journal_mode=WAL;")
                cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.close()

        @event.listens_for(engine, "begin")
        def do_begin(conn):
            # take the write lock up front so read-then-write is serialized
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


def init_db(engine: Engine) -> None:
    """Create all tables and seed the fixed category set."""
    # ensure models import so SQLAlchemy registers them on Base
    import models  # noqa: F401
    from models import Category

    Base.metadata.create_all(bind=engine)

    factory = make_session_factory(engine)
    with factory() as db:
        existing = set(db.scalars(select(Category.name)))
        missing = [name for name in DEFAULT_CATEGORIES if name not in existing]
        for name in missing:
            db.add(Category(name=name))
        db.commit()
    if missing:
        logger.info("[Database] Seeded %d categories", len(missing))
