from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .db import Base

# Indexes are declared in schema.INDEXES, not on the columns, so migration can
# create and report on each one explicitly.


class FetchMeta(Base):
    __tablename__ = "fetch_meta"
    id = Column(Integer, primary_key=True, autoincrement=True)
    file_name = Column(String(255), unique=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Root(Base):
    __tablename__ = "roots"
    id = Column(Integer, primary_key=True, autoincrement=True)
    family = Column(String(64), nullable=False)
    os_version = Column(String(64), nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    definitions = relationship(
        "Definition", back_populates="root", cascade="all, delete-orphan", passive_deletes=True
    )


class Definition(Base):
    __tablename__ = "definitions"
    id = Column(Integer, primary_key=True, autoincrement=True)
    root_id = Column(Integer, ForeignKey("roots.id", ondelete="CASCADE"), nullable=False)
    definition_id = Column(String(255))  # e.g. "oval:com.redhat.rhsa:def:20170001"
    title = Column(Text)
    description = Column(Text)

    root = relationship("Root", back_populates="definitions")
    affected_packs = relationship(
        "Package", back_populates="definition", cascade="all, delete-orphan", passive_deletes=True,
        order_by="Package.id",
    )
    references = relationship(
        "Reference", back_populates="definition", cascade="all, delete-orphan", passive_deletes=True,
        order_by="Reference.id",
    )
    advisory = relationship(
        "Advisory", back_populates="definition", cascade="all, delete-orphan", passive_deletes=True,
        uselist=False,
    )
    debian = relationship(
        "Debian", back_populates="definition", cascade="all, delete-orphan", passive_deletes=True,
        uselist=False,
    )


class Package(Base):
    __tablename__ = "packages"
    id = Column(Integer, primary_key=True, autoincrement=True)
    definition_id = Column(Integer, ForeignKey("definitions.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    version = Column(String(255))  # affected if installed version is less than this
    not_fixed_yet = Column(Boolean, nullable=False, default=False)

    definition = relationship("Definition", back_populates="affected_packs")


class Reference(Base):
    __tablename__ = "references"
    id = Column(Integer, primary_key=True, autoincrement=True)
    definition_id = Column(Integer, ForeignKey("definitions.id", ondelete="CASCADE"), nullable=False)
    source = Column(String(64))  # CVE, RHSA, DSA, USN, ...
    ref_id = Column(String(255))
    ref_url = Column(Text)

    definition = relationship("Definition", back_populates="references")


class Advisory(Base):
    __tablename__ = "advisories"
    id = Column(Integer, primary_key=True, autoincrement=True)
    definition_id = Column(Integer, ForeignKey("definitions.id", ondelete="CASCADE"), nullable=False)
    severity = Column(String(64))
    issued = Column(DateTime(timezone=True))
    updated = Column(DateTime(timezone=True))

    definition = relationship("Definition", back_populates="advisory")
    cves = relationship(
        "Cve", back_populates="advisory", cascade="all, delete-orphan", passive_deletes=True,
        order_by="Cve.id",
    )
    bugzillas = relationship(
        "Bugzilla", back_populates="advisory", cascade="all, delete-orphan", passive_deletes=True,
        order_by="Bugzilla.id",
    )
    affected_cpe_list = relationship(
        "Cpe", back_populates="advisory", cascade="all, delete-orphan", passive_deletes=True,
        order_by="Cpe.id",
    )


class Cve(Base):
    __tablename__ = "cves"
    id = Column(Integer, primary_key=True, autoincrement=True)
    advisory_id = Column(Integer, ForeignKey("advisories.id", ondelete="CASCADE"), nullable=False)
    cve_id = Column(String(64), nullable=False)
    cvss2 = Column(String(255))
    cvss3 = Column(String(255))
    cwe = Column(String(255))
    impact = Column(String(64))
    href = Column(Text)
    public = Column(String(64))

    advisory = relationship("Advisory", back_populates="cves")


class Bugzilla(Base):
    __tablename__ = "bugzillas"
    id = Column(Integer, primary_key=True, autoincrement=True)
    advisory_id = Column(Integer, ForeignKey("advisories.id", ondelete="CASCADE"), nullable=False)
    bugzilla_id = Column(String(64))
    url = Column(Text)
    title = Column(Text)

    advisory = relationship("Advisory", back_populates="bugzillas")


class Cpe(Base):
    __tablename__ = "cpes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    advisory_id = Column(Integer, ForeignKey("advisories.id", ondelete="CASCADE"), nullable=False)
    cpe = Column(String(255), nullable=False)

    advisory = relationship("Advisory", back_populates="affected_cpe_list")


class Debian(Base):
    __tablename__ = "debians"
    id = Column(Integer, primary_key=True, autoincrement=True)
    definition_id = Column(Integer, ForeignKey("definitions.id", ondelete="CASCADE"), nullable=False)
    cve_id = Column(String(64))
    more_info = Column(Text)
    date = Column(DateTime(timezone=True))

    definition = relationship("Definition", back_populates="debian")
