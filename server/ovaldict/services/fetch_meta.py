from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StorageError
from ..models import FetchMeta

logger = logging.getLogger(__name__)


def as_utc(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def get_fetch_meta(db: Session, file_name: str) -> FetchMeta | None:
    return db.execute(select(FetchMeta).where(FetchMeta.file_name == file_name)).scalar_one_or_none()


def list_fetch_meta(db: Session) -> list[FetchMeta]:
    return list(db.execute(select(FetchMeta).order_by(FetchMeta.file_name)).scalars().all())


def upsert_fetch_meta(db: Session, meta: FetchMeta) -> bool:
    """Record when `meta.file_name` was last ingested.

    Runs inside the caller's transaction and never commits. Returns False when
    the stored timestamp already equals `meta.timestamp` (nothing written).
    """

    if not meta.file_name:
        raise StorageError("Failed to upsert FetchMeta: file_name is required")
    ts = as_utc(meta.timestamp)

    old = get_fetch_meta(db, meta.file_name)
    if old is not None and as_utc(old.timestamp) == ts:
        logger.debug("FetchMeta unchanged, skipping: %s %s", meta.file_name, ts.isoformat())
        return False

    if old is None:
        try:
            db.add(FetchMeta(file_name=meta.file_name, timestamp=ts))
            db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to insert FetchMeta: {e}") from e
        logger.info("Recorded FetchMeta: %s %s", meta.file_name, ts.isoformat())
    else:
        try:
            old.file_name = meta.file_name
            old.timestamp = ts
            db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to update FetchMeta: {e}") from e
        logger.info("Updated FetchMeta: %s %s", meta.file_name, ts.isoformat())
    return True
