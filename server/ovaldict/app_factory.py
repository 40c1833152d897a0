from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from .db import Database, open_database
from .routers import oval

logger = logging.getLogger(__name__)


def _open_from_settings() -> Database:
    from .config import settings

    settings.validate_storage()
    return open_database(
        settings.db_type,
        settings.db_path,
        settings.debug_sql,
        auto_migrate=settings.db_auto_create_tables,
        require_up_to_date=settings.db_require_migrations_up_to_date,
    )


def create_app(db: Database | None = None) -> FastAPI:
    """Build the HTTP app.

    A passed-in `db` stays owned by the caller; otherwise the app opens one from
    settings at startup and closes it at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if getattr(app.state, "db", None) is None:
            owned = _open_from_settings()
            app.state.db = owned
            logger.info("Opened %s database %s", owned.dialect, owned.target)
        try:
            yield
        finally:
            if owned is not None:
                app.state.db = None
                owned.close()

    app = FastAPI(title="OVAL dictionary", lifespan=lifespan)
    app.state.db = db

    app.include_router(oval.router)

    @app.get("/health")
    def health():
        return {"ok": True, "service": "ovaldict", "ts": datetime.now(timezone.utc).isoformat()}

    return app
