from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _OrmModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PackageOut(_OrmModel):
    name: str
    version: Optional[str] = None
    not_fixed_yet: bool = False


class ReferenceOut(_OrmModel):
    source: Optional[str] = None
    ref_id: Optional[str] = None
    ref_url: Optional[str] = None


class CveOut(_OrmModel):
    cve_id: str
    cvss2: Optional[str] = None
    cvss3: Optional[str] = None
    cwe: Optional[str] = None
    impact: Optional[str] = None
    href: Optional[str] = None
    public: Optional[str] = None


class BugzillaOut(_OrmModel):
    bugzilla_id: Optional[str] = None
    url: Optional[str] = None
    title: Optional[str] = None


class CpeOut(_OrmModel):
    cpe: str


class AdvisoryOut(_OrmModel):
    severity: Optional[str] = None
    issued: Optional[datetime] = None
    updated: Optional[datetime] = None
    cves: List[CveOut] = Field(default_factory=list)
    bugzillas: List[BugzillaOut] = Field(default_factory=list)
    affected_cpe_list: List[CpeOut] = Field(default_factory=list)


class DebianOut(_OrmModel):
    cve_id: Optional[str] = None
    more_info: Optional[str] = None
    date: Optional[datetime] = None


class DefinitionOut(_OrmModel):
    definition_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    affected_packs: List[PackageOut] = Field(default_factory=list)
    references: List[ReferenceOut] = Field(default_factory=list)
    advisory: Optional[AdvisoryOut] = None
    debian: Optional[DebianOut] = None


class FetchMetaOut(_OrmModel):
    file_name: str
    timestamp: datetime
