from __future__ import annotations

import os
from pathlib import Path

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .exceptions import ConfigurationError

DIALECT_SQLITE3 = "sqlite3"
DIALECT_POSTGRES = "postgres"
SUPPORTED_DIALECTS = (DIALECT_SQLITE3, DIALECT_POSTGRES)


def default_db_path() -> str:
    # Mirrors the shell's $PWD when available so symlinked work dirs keep their name.
    cwd = os.environ.get("PWD") or os.getcwd()
    return str(Path(cwd) / "oval.sqlite3")


def default_log_dir() -> str:
    return str(Path.home() / ".cache" / "ovaldict")


class Settings(BaseSettings):
    # Storage
    db_type: str = DIALECT_SQLITE3  # sqlite3|postgres
    db_path: str = default_db_path()  # file path for sqlite3, URL or DSN for postgres
    debug_sql: bool = False

    # Schema management
    # For production on postgres: set db_auto_create_tables=false and run `alembic upgrade head`.
    db_auto_create_tables: bool = True
    db_require_migrations_up_to_date: bool = True

    # Logging
    debug: bool = False
    quiet: bool = False
    log_dir: str = default_log_dir()

    # HTTP server
    bind: str = "127.0.0.1"
    port: int = 1324

    def validate_storage(self) -> None:
        """Fail fast on a bad dialect or empty target, before any connection attempt."""
        validate_dialect(self.db_type)
        if not (self.db_path or "").strip():
            raise ConfigurationError(f"Empty connection target for dialect {self.db_type}")


def validate_dialect(dialect: str) -> str:
    if dialect not in SUPPORTED_DIALECTS:
        raise ConfigurationError(
            f"Invalid database dialect: {dialect!r}. Specify from {list(SUPPORTED_DIALECTS)}"
        )
    return dialect


def build_database_url(dialect: str, target: str) -> URL:
    """Turn a (dialect, target) pair into a SQLAlchemy URL."""
    validate_dialect(dialect)
    target = (target or "").strip()
    if not target:
        raise ConfigurationError(f"Empty connection target for dialect {dialect}")

    if dialect == DIALECT_SQLITE3:
        if target.startswith("sqlite"):
            return _parse_url(target)
        return URL.create("sqlite+pysqlite", database=target)

    # postgres
    if "://" not in target:
        # libpq keyword DSN ("host=... dbname=..."); handed to psycopg via connect_args.
        return URL.create("postgresql+psycopg")
    scheme, rest = target.split("://", 1)
    if scheme in ("postgres", "postgresql"):
        scheme = "postgresql+psycopg"
    if not scheme.startswith("postgresql"):
        raise ConfigurationError(f"Connection target {redact_target(target)} is not a postgres URL")
    return _parse_url(f"{scheme}://{rest}")


def _parse_url(value: str) -> URL:
    try:
        return make_url(value)
    except ArgumentError as e:
        raise ConfigurationError(f"Malformed connection target {redact_target(value)}: {e}") from e


def redact_target(target: str | URL) -> str:
    """Render a connection target for error messages without its password."""
    if isinstance(target, URL):
        return target.render_as_string(hide_password=True)
    if "://" in target:
        try:
            return make_url(target).render_as_string(hide_password=True)
        except ArgumentError:
            return target.split("://", 1)[0] + "://***"
    if "password=" in target:
        return " ".join("password=***" if p.startswith("password=") else p for p in target.split())
    return target


settings = Settings()
