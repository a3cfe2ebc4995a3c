"""
visatrack.db
============

SQLite persistence layer for VisaTrack.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at ``settings.DB_URL``
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``make_engine()`` – build another engine (tests use an in‑memory one)
* ``create_all()`` – helper to create tables at first run
* one ``*DB`` table class per entity, with ``from_*`` / ``to_*`` converters
  to the plain dataclasses in :pymod:`visatrack.models`
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine

from visatrack.models import (
    AlertStatus,
    AlertType,
    Company,
    ComplianceAlert,
    Employee,
    EmployeeStatus,
    Visa,
    VisaStatus,
)
from visatrack.settings import DB_ECHO, DB_URL


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
def make_engine(url: str = DB_URL, echo: bool = DB_ECHO) -> Engine:
    """
    Create an engine for *url*.

    SQLite connections are shared across FastAPI's worker threads, and an
    in‑memory database must live on a single connection to survive between
    sessions.
    """
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, echo=echo, **kwargs)


engine = make_engine()


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal() -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to the global engine."""
    return Session(engine)


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------
class CompanyDB(SQLModel, table=True):
    """A tenant account."""

    __tablename__ = "companies"

    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    registration_number: Optional[str] = None
    email: Optional[str] = None
    subscription_tier: str = "starter"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_company(self) -> Company:
        return Company(
            id=self.id,
            name=self.name,
            registration_number=self.registration_number,
            email=self.email,
            subscription_tier=self.subscription_tier,
        )


class ProfileDB(SQLModel, table=True):
    """
    User → company link.

    The primary key *is* the identity‑provider user id, so the storage layer
    itself guarantees at most one company per user.
    """

    __tablename__ = "profiles"

    id: str = Field(primary_key=True)
    company_id: str = Field(foreign_key="companies.id", index=True)
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str = "admin"
    created_at: datetime = Field(default_factory=utcnow)


class EmployeeDB(SQLModel, table=True):
    """SQLite‑backed representation of a :class:`visatrack.models.Employee`."""

    __tablename__ = "employees"

    id: str = Field(default_factory=_new_id, primary_key=True)
    company_id: str = Field(foreign_key="companies.id", index=True)
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    nationality: Optional[str] = None
    passport_number: Optional[str] = None
    passport_expiry: Optional[date] = None
    position: Optional[str] = None
    department: Optional[str] = None
    employment_start_date: Optional[date] = None
    status: str = EmployeeStatus.ACTIVE.value
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_employee(self, visas: List[Visa] | None = None) -> Employee:
        """Convert the DB row back into a plain Employee."""
        return Employee(
            id=self.id,
            company_id=self.company_id,
            first_name=self.first_name,
            last_name=self.last_name,
            status=self.status,
            passport_number=self.passport_number,
            passport_expiry=self.passport_expiry,
            email=self.email,
            phone=self.phone,
            nationality=self.nationality,
            position=self.position,
            department=self.department,
            employment_start_date=self.employment_start_date,
            notes=self.notes,
            visas=list(visas or []),
        )


class VisaDB(SQLModel, table=True):
    """SQLite‑backed representation of a :class:`visatrack.models.Visa`."""

    __tablename__ = "visas"

    id: str = Field(default_factory=_new_id, primary_key=True)
    employee_id: str = Field(foreign_key="employees.id", index=True)
    visa_type: str
    country_issued: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: date
    permit_number: Optional[str] = None
    status: str = VisaStatus.VALID.value
    application_status: Optional[str] = None
    renewal_reminder_sent: bool = False
    # insertion order within the employee, 1-based
    seq: int = Field(default=0, index=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_visa(self) -> Visa:
        return Visa(
            id=self.id,
            employee_id=self.employee_id,
            visa_type=self.visa_type,
            expiry_date=self.expiry_date,
            issue_date=self.issue_date,
            status=self.status,
            application_status=self.application_status,
            country_issued=self.country_issued,
            permit_number=self.permit_number,
            renewal_reminder_sent=self.renewal_reminder_sent,
        )


class ComplianceAlertDB(SQLModel, table=True):
    """SQLite‑backed representation of a :class:`visatrack.models.ComplianceAlert`."""

    __tablename__ = "compliance_alerts"

    id: str = Field(default_factory=_new_id, primary_key=True)
    company_id: str = Field(foreign_key="companies.id", index=True)
    employee_id: Optional[str] = Field(default=None, foreign_key="employees.id")
    alert_type: str = AlertType.EXPIRY.value
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: str = AlertStatus.OPEN.value
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def to_alert(self) -> ComplianceAlert:
        return ComplianceAlert(
            id=self.id,
            company_id=self.company_id,
            title=self.title,
            alert_type=self.alert_type,
            employee_id=self.employee_id,
            description=self.description,
            due_date=self.due_date,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Engine | None = None) -> None:
    """Create all tables (safe if they already exist)."""
    SQLModel.metadata.create_all(bind or engine)
