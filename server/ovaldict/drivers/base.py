from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import Select

from ..db import Database, open_database
from ..exceptions import QueryError, StorageError
from ..models import Advisory, Cve, Definition, FetchMeta, Package, Root
from ..schemas import DefinitionOut, FetchMetaOut
from ..services.db_utils import transaction
from ..services.fetch_meta import get_fetch_meta, list_fetch_meta, upsert_fetch_meta

logger = logging.getLogger(__name__)


def major(os_version: str) -> str:
    return (os_version or "").strip().split(".")[0]


def major_minor(os_version: str) -> str:
    return ".".join((os_version or "").strip().split(".")[:2])


class Driver:
    """Query and write operations for one OS family.

    Families share the physical tables; rows are told apart by Root.family and
    Root.os_version. Subclasses override how an OS version is keyed and how a
    CVE id reaches a Definition.
    """

    family: str = ""

    def __init__(self, family: str | None = None, db: Database | None = None):
        if family:
            self.family = family
        self.db = db
        self._owns_db = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} family={self.family}>"

    # Connection lifecycle

    def open_db(self, dialect: str, target: str, debug_sql: bool = False, **kwargs) -> Database:
        self.db = open_database(dialect, target, debug_sql, **kwargs)
        self._owns_db = True
        return self.db

    def attach(self, db: Database) -> "Driver":
        """Use an already-open database (e.g. the HTTP server's) without owning it."""
        self.db = db
        self._owns_db = False
        return self

    def close_db(self) -> None:
        db, self.db = self.db, None
        if db is not None and self._owns_db:
            db.close()

    def __enter__(self) -> "Driver":
        return self

    def __exit__(self, *exc) -> None:
        self.close_db()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self.db is None:
            raise StorageError(f"DB is not opened for family {self.family}")
        with self.db.session() as s:
            yield s

    # Family-specific hooks

    def os_version_key(self, os_version: str) -> str:
        return major(os_version)

    def cve_definition_ids(self, cve_id: str) -> Select:
        """Definition ids linked to `cve_id`. Default path: Advisory -> Cve."""
        return (
            select(Advisory.definition_id)
            .join(Cve, Cve.advisory_id == Advisory.id)
            .where(Cve.cve_id == cve_id)
        )

    # Query contract

    def _definitions(self, os_version: str) -> Select:
        return (
            select(Definition)
            .join(Root, Root.id == Definition.root_id)
            .where(Root.family == self.family, Root.os_version == self.os_version_key(os_version))
            .options(
                selectinload(Definition.affected_packs),
                selectinload(Definition.references),
                selectinload(Definition.debian),
                selectinload(Definition.advisory).selectinload(Advisory.cves),
                selectinload(Definition.advisory).selectinload(Advisory.bugzillas),
                selectinload(Definition.advisory).selectinload(Advisory.affected_cpe_list),
            )
            .order_by(Definition.id)
        )

    def _fetch(self, stmt: Select, what: str) -> list[DefinitionOut]:
        with self._session() as s:
            try:
                rows = s.execute(stmt).scalars().all()
                return [DefinitionOut.model_validate(r) for r in rows]
            except SQLAlchemyError as e:
                raise QueryError(f"Failed to select {what}. family: {self.family}, err: {e}") from e

    def get_by_pack_name(self, os_version: str, pack_name: str) -> list[DefinitionOut]:
        stmt = self._definitions(os_version).where(
            Definition.id.in_(select(Package.definition_id).where(Package.name == pack_name))
        )
        return self._fetch(stmt, f"definitions by package {pack_name}")

    def get_by_cve_id(self, os_version: str, cve_id: str) -> list[DefinitionOut]:
        stmt = self._definitions(os_version).where(Definition.id.in_(self.cve_definition_ids(cve_id)))
        return self._fetch(stmt, f"definitions by CVE {cve_id}")

    def count_definitions(self, os_version: str) -> int:
        stmt = (
            select(func.count(Definition.id))
            .join(Root, Root.id == Definition.root_id)
            .where(Root.family == self.family, Root.os_version == self.os_version_key(os_version))
        )
        with self._session() as s:
            try:
                return int(s.execute(stmt).scalar_one())
            except SQLAlchemyError as e:
                raise QueryError(f"Failed to count definitions. family: {self.family}, err: {e}") from e

    # Writes

    def insert_fetch_meta(self, meta: FetchMeta) -> bool:
        with self._session() as s:
            with transaction(s, "upsert FetchMeta"):
                return upsert_fetch_meta(s, meta)

    def get_fetch_meta(self, file_name: str) -> FetchMetaOut | None:
        with self._session() as s:
            row = get_fetch_meta(s, file_name)
            return FetchMetaOut.model_validate(row) if row else None

    def list_fetch_meta(self) -> list[FetchMetaOut]:
        with self._session() as s:
            return [FetchMetaOut.model_validate(r) for r in list_fetch_meta(s)]

    def insert_oval(self, root: Root, meta: FetchMeta) -> None:
        """Replace this family's definitions for root.os_version and record `meta`, atomically."""
        root.family = self.family
        root.os_version = self.os_version_key(root.os_version)

        with self._session() as s:
            with transaction(s, f"insert OVAL for {self.family} {root.os_version}"):
                old_roots = s.execute(
                    select(Root).where(Root.family == root.family, Root.os_version == root.os_version)
                ).scalars().all()
                for old in old_roots:
                    s.delete(old)
                s.flush()

                s.add(root)
                upsert_fetch_meta(s, meta)

        logger.info(
            "Refreshed %d definitions for %s %s (replaced %d roots)",
            len(root.definitions), root.family, root.os_version, len(old_roots),
        )
