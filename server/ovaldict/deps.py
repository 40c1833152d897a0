from __future__ import annotations

from fastapi import HTTPException, Request

from .db import Database
from .drivers.base import Driver
from .exceptions import UnknownFamilyError
from .registry import resolve


def get_database(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(503, "Database is not opened")
    return db


def get_driver(family: str, request: Request) -> Driver:
    db = get_database(request)
    try:
        return resolve(family, db)
    except UnknownFamilyError as e:
        raise HTTPException(400, str(e))
