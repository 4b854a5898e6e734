"""Engine and session factory construction."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rms.infrastructure.persistence.orm import Base


def build_engine(
    url: str,
    isolation_level: str | None = None,
    lock_timeout: float | None = None,
) -> Engine:
    """Create an engine.

    On SQLite, where ``SELECT ... FOR UPDATE`` is a no-op, every transaction
    starts with ``BEGIN IMMEDIATE`` and holds the write lock until it ends;
    *isolation_level* does not apply there. A writer that waits longer than
    *lock_timeout* seconds fails with "database is locked".
    """
    parsed = make_url(url)
    options: dict = {"pool_pre_ping": True, "future": True}

    if parsed.get_backend_name() != "sqlite":
        if isolation_level:
            options["isolation_level"] = isolation_level
    else:
        connect_args: dict = {}
        if lock_timeout is not None:
            connect_args["timeout"] = lock_timeout
        database = parsed.database
        if not database or database == ":memory:":
            # One shared connection, otherwise every session sees an empty DB.
            options["poolclass"] = StaticPool
            connect_args["check_same_thread"] = False
        else:
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        if connect_args:
            options["connect_args"] = connect_args

    engine = create_engine(url, **options)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_immediate)

    logger.debug("Engine ready for {}", parsed.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        future=True,
    )


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    # Stop pysqlite from issuing its own deferred BEGIN; _begin_immediate does it.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn) -> None:
    conn.exec_driver_sql("BEGIN IMMEDIATE")
