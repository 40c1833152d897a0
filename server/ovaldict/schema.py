from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import Index, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .db import Base
from .exceptions import StorageError

logger = logging.getLogger(__name__)

# Bump together with a new Alembic revision under server/alembic/versions/.
SCHEMA_VERSION = 1

# Every index is non-unique and exists for lookup performance only.
INDEXES: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("idx_definition_root_id", "definitions", ("root_id",)),
    ("idx_packages_definition_id", "packages", ("definition_id",)),
    ("idx_packages_name", "packages", ("name",)),
    ("idx_reference_definition_id", "references", ("definition_id",)),
    ("idx_advisories_definition_id", "advisories", ("definition_id",)),
    ("idx_cves_advisory_id", "cves", ("advisory_id",)),
    ("idx_bugzillas_advisory_id", "bugzillas", ("advisory_id",)),
    ("idx_cpes_advisory_id", "cpes", ("advisory_id",)),
    ("idx_debian_definition_id", "debians", ("definition_id",)),
    ("idx_debian_cve_id", "debians", ("cve_id",)),
)

# Built once: Index() attaches itself to its table.
_INDEX_OBJECTS = [
    Index(name, *(Base.metadata.tables[table].c[col] for col in cols))
    for name, table, cols in INDEXES
]


def migrate(engine: Engine) -> None:
    """Create every entity table, then every lookup index.

    Safe to run against an already-migrated database. Raises StorageError
    naming the table or index that failed.
    """

    with engine.begin() as conn:
        for table in Base.metadata.sorted_tables:
            try:
                conn.execute(CreateTable(table, if_not_exists=True))
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to migrate table {table.name}. err: {e}") from e

        for idx in _INDEX_OBJECTS:
            try:
                conn.execute(CreateIndex(idx, if_not_exists=True))
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to create index {idx.name} on {idx.table.name}. err: {e}") from e

    logger.debug("Schema v%s ensured: %d tables, %d indexes", SCHEMA_VERSION, len(Base.metadata.tables), len(INDEXES))


def missing_structures(engine: Engine) -> list[str]:
    """Names of tables or indexes that should exist but don't."""
    insp = inspect(engine)
    missing: list[str] = []
    existing_tables = set(insp.get_table_names())
    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            missing.append(table.name)
    for name, table, _cols in INDEXES:
        if table not in existing_tables:
            missing.append(name)
            continue
        if name not in {ix.get("name") for ix in insp.get_indexes(table)}:
            missing.append(name)
    return missing


def _get_alembic_script_heads() -> set[str]:
    from alembic.config import Config
    from alembic.script import ScriptDirectory

    here = Path(__file__).resolve().parents[1]  # server/
    ini_path = here / "alembic.ini"
    cfg = Config(str(ini_path))
    cfg.set_main_option("script_location", str(here / "alembic"))
    script = ScriptDirectory.from_config(cfg)
    return set(script.get_heads())


def _get_db_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        if not inspect(conn).has_table("alembic_version"):
            return None
        row = conn.execute(text("SELECT version_num FROM alembic_version")).first()
        return row[0] if row else None


def assert_db_up_to_date(engine: Engine) -> None:
    """Fail fast if alembic_version is missing or not at head."""

    heads = _get_alembic_script_heads()
    db_rev = _get_db_revision(engine)

    if db_rev is None:
        raise StorageError(
            "Database is not stamped with Alembic (missing alembic_version). "
            "Run: alembic upgrade head"
        )

    if db_rev not in heads:
        raise StorageError(
            f"Database Alembic revision {db_rev} is not at head {sorted(heads)}. "
            "Run: alembic upgrade head"
        )
