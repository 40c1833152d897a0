from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StorageError


@contextmanager
def transaction(db: Session, what: str = "write"):
    """Commit on success, roll back on any failure.

    Engine errors surface as StorageError naming `what`; other exceptions are
    re-raised untouched after the rollback.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to {what}: {e}") from e
    except Exception:
        db.rollback()
        raise
