from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DIALECT_SQLITE3, build_database_url, redact_target, validate_dialect
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class SchemaState:
    """Process-wide record of which databases have already been migrated.

    The first open of a given database migrates it; every later open of the
    same database in this process skips migration, including concurrent first
    opens. `reset()` forgets everything (tests).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._migrated: set[str] = set()
        self.migration_count = 0

    def ensure_migrated(self, key: str, migrate) -> bool:
        """Run `migrate()` unless `key` was already migrated. Returns True if it ran."""
        with self._lock:
            if key in self._migrated:
                return False
            migrate()
            self._migrated.add(key)
            self.migration_count += 1
            return True

    def reset(self) -> None:
        with self._lock:
            self._migrated.clear()
            self.migration_count = 0


schema_state = SchemaState()


def _is_memory(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and (url.database in (None, "", ":memory:"))


def _migration_key(dialect: str, url: URL, target: str, engine: Engine) -> str:
    """One key per physical database, however its target was spelled."""
    if _is_memory(url):
        return f"memory:{id(engine)}"
    if dialect == DIALECT_SQLITE3:
        return f"{dialect}:{os.path.realpath(url.database)}"
    if "://" not in target:
        # keyword DSN: the URL carries nothing, normalize whitespace only
        return f"{dialect}:" + " ".join(sorted(target.split()))
    return f"{dialect}:{url.render_as_string(hide_password=False)}"


def _make_engine(dialect: str, url: URL, target: str, debug_sql: bool) -> Engine:
    if dialect == DIALECT_SQLITE3:
        # Allow the HTTP server's worker threads to share the engine.
        connect_args = {"check_same_thread": False}
        if _is_memory(url):
            engine = create_engine(url, connect_args=connect_args, poolclass=StaticPool, echo=debug_sql)
        else:
            engine = create_engine(url, connect_args=connect_args, echo=debug_sql)

        @event.listens_for(engine, "connect")
        def _sqlite_foreign_keys(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

        return engine

    connect_args = {}
    if "://" not in target:
        connect_args["conninfo"] = target
    return create_engine(
        url,
        connect_args=connect_args,
        echo=debug_sql,
        pool_pre_ping=True,
        pool_size=20,
        max_overflow=40,
        pool_timeout=30,
    )


class Database:
    """An open, migrated database handle shared by all drivers."""

    def __init__(self, dialect: str, url: URL, engine: Engine, target: str):
        self.dialect = dialect
        self.url = url
        self.target = target
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
        self.closed = False

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self.engine.dispose()
        except SQLAlchemyError as e:
            raise StorageError(
                f"Failed to close DB. Type: {self.dialect}, Path: {self.target}, err: {e}",
                dialect=self.dialect,
                target=self.target,
            ) from e
        self.closed = True

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_database(
    dialect: str,
    target: str,
    debug_sql: bool = False,
    *,
    state: SchemaState | None = None,
    auto_migrate: bool = True,
    require_up_to_date: bool = True,
) -> Database:
    """Open a dialect-qualified connection, migrating the schema on first use.

    With auto_migrate=False the schema is expected to be managed by Alembic; it
    is checked for being at head unless require_up_to_date is False.
    """

    validate_dialect(dialect)
    url = build_database_url(dialect, target)
    shown = target if dialect == DIALECT_SQLITE3 else redact_target(target)
    state = state or schema_state

    try:
        engine = _make_engine(dialect, url, target, debug_sql)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        if dialect == DIALECT_SQLITE3:
            msg = f"Failed to open DB. datafile: {shown}, err: {e}"
        else:
            msg = f"Failed to open DB. dialect: {dialect}, target: {shown}, err: {e}"
        raise StorageError(msg, dialect=dialect, target=shown) from e

    db = Database(dialect, url, engine, shown)
    try:
        if auto_migrate:
            from .schema import migrate

            key = _migration_key(dialect, url, target, engine)
            if state.ensure_migrated(key, lambda: migrate(engine)):
                logger.info("Migrated database schema (%s %s)", dialect, shown)
        elif require_up_to_date:
            from .schema import assert_db_up_to_date

            assert_db_up_to_date(engine)

        if dialect == DIALECT_SQLITE3 and not _is_memory(url):
            with engine.begin() as conn:
                conn.execute(text("PRAGMA journal_mode=WAL"))
    except StorageError:
        engine.dispose()
        raise
    except SQLAlchemyError as e:
        engine.dispose()
        raise StorageError(
            f"Failed to prepare DB. dialect: {dialect}, target: {shown}, err: {e}",
            dialect=dialect,
            target=shown,
        ) from e
    except Exception:
        engine.dispose()
        raise

    return db
