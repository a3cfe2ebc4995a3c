"""
visatrack.models
================

Dataclasses and enums representing a tenant's employees, their visa /
work‑permit grants and the compliance alerts raised against them.

Like the rest of the engine these objects carry **no** external‑library
dependencies; the ORM rows in :pymod:`visatrack.db` convert to and from
them so the compliance engine only ever sees plain Python objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union

# Dates may arrive as native values or as ISO‑8601 strings straight from
# the store; the engine parses them tolerantly (see visatrack.dates).
DateLike = Union[date, datetime, str, None]


class EmployeeStatus(str, Enum):
    """Employment states of a TCN on the roster."""
    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"

    def __str__(self) -> str:
        return self.value


class VisaStatus(str, Enum):
    """Recorded lifecycle status of a single visa / permit."""
    VALID = "valid"
    EXPIRED = "expired"
    PENDING_RENEWAL = "pending_renewal"

    def __str__(self) -> str:
        return self.value


class EffectiveStatus(str, Enum):
    """Status derived from the expiry date, never stored."""
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    VALID = "valid"
    NO_RECORD = "no_record"

    def __str__(self) -> str:
        return self.value


class AlertType(str, Enum):
    EXPIRY = "expiry"
    MISSING_DOCUMENT = "missing_document"
    STATUS_CHANGE = "status_change"

    def __str__(self) -> str:
        return self.value


class AlertStatus(str, Enum):
    OPEN = "open"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"

    def __str__(self) -> str:
        return self.value


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    VIEWER = "viewer"


@dataclass
class Company:
    """A tenant account."""
    id: str
    name: str
    registration_number: Optional[str] = None
    email: Optional[str] = None
    subscription_tier: str = "starter"


@dataclass
class Visa:
    """
    A single permit / visa grant.

    Parameters
    ----------
    id : str
        Unique identifier.
    employee_id : str
        Owning employee.
    visa_type : str
        Free‑text classification, e.g. "Single Permit" or "Key Employee".
    expiry_date : date | str | None
        Calendar expiry date. ``issue_date <= expiry_date`` is expected but
        never validated.
    status : VisaStatus | str
        Recorded lifecycle status (defaults to VALID).
    application_status : str | None
        Legacy status field kept for older records (e.g. ``"active"``).
    """
    id: str
    employee_id: str
    visa_type: str
    expiry_date: DateLike
    issue_date: DateLike = None
    status: Union[VisaStatus, str] = VisaStatus.VALID
    application_status: Optional[str] = None
    country_issued: Optional[str] = None
    permit_number: Optional[str] = None
    renewal_reminder_sent: bool = False


@dataclass
class Employee:
    """
    A TCN belonging to exactly one tenant.

    ``visas`` is unordered from the business point of view and may be empty;
    selection helpers respect its insertion order only as a tie‑break.
    """
    id: str
    company_id: str
    first_name: str
    last_name: str
    status: Union[EmployeeStatus, str] = EmployeeStatus.ACTIVE
    passport_number: Optional[str] = None
    passport_expiry: DateLike = None
    email: Optional[str] = None
    phone: Optional[str] = None
    nationality: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    employment_start_date: DateLike = None
    notes: Optional[str] = None
    visas: List[Visa] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class ComplianceAlert:
    """A recorded compliance notice; never deleted, only resolved."""
    id: str
    company_id: str
    title: str
    alert_type: Union[AlertType, str] = AlertType.EXPIRY
    employee_id: Optional[str] = None
    description: Optional[str] = None
    due_date: DateLike = None
    status: Union[AlertStatus, str] = AlertStatus.OPEN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
