from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..db import Database
from ..deps import get_database, get_driver
from ..drivers.base import Driver
from ..exceptions import QueryError, StorageError
from ..schemas import DefinitionOut, FetchMetaOut
from ..services.fetch_meta import list_fetch_meta

logger = logging.getLogger(__name__)

router = APIRouter(tags=["oval"])


@router.get("/packs/{family}/{release}/{pack}", response_model=list[DefinitionOut])
def get_by_pack_name(release: str, pack: str, driver: Driver = Depends(get_driver)):
    try:
        defs = driver.get_by_pack_name(release, pack)
    except (QueryError, StorageError) as e:
        logger.error("Failed to get by package: %s", e)
        raise HTTPException(500, "Failed to query definitions")
    logger.debug("%d definitions for %s %s %s", len(defs), driver.family, release, pack)
    return defs


@router.get("/cves/{family}/{release}/{cve_id}", response_model=list[DefinitionOut])
def get_by_cve_id(release: str, cve_id: str, driver: Driver = Depends(get_driver)):
    try:
        defs = driver.get_by_cve_id(release, cve_id)
    except (QueryError, StorageError) as e:
        logger.error("Failed to get by CVE: %s", e)
        raise HTTPException(500, "Failed to query definitions")
    return defs


@router.get("/fetchmeta", response_model=list[FetchMetaOut])
def fetch_meta(db: Database = Depends(get_database)):
    with db.session() as s:
        return [FetchMetaOut.model_validate(m) for m in list_fetch_meta(s)]
