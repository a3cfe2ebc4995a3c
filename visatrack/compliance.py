"""
visatrack.compliance
====================

The compliance engine: pure functions that turn a tenant's (employee, visa)
records into per‑visa statuses, per‑employee assessments, a fleet summary
and an urgency ordering.

None of these functions read the clock.  Callers pass a single ``now`` for
a whole pass so every record in a list is judged against the same day.
Bad data degrades one record to ``no_record`` / ``None`` and never aborts
the list.

Which visa counts as "active" differs between views, so the selection rule
is an explicit :class:`SelectionPolicy`:

=====================================  ===========================================
Policy                                 Used by
=====================================  ===========================================
``STRICT_VALID``                       employee table (``GET /employees``)
``VALID_OR_LEGACY_ACTIVE``             employee detail sidebar, dashboard display
``VALID_OR_LEGACY_ACTIVE_OR_EXPIRED``  dashboard expired count (fallback)
=====================================  ===========================================
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .dates import days_until
from .models import DateLike, EffectiveStatus, Employee, Visa, VisaStatus

# Fixed business constant: inside this many days a visa is "expiring soon".
EXPIRING_SOON_DAYS = 90

LEGACY_ACTIVE = "active"


# ---------------------------------------------------------------------
# Single‑visa classification
# ---------------------------------------------------------------------
def classify_days(days: Optional[int]) -> EffectiveStatus:
    """Bucket an already computed days‑until‑expiry value."""
    if days is None:
        return EffectiveStatus.NO_RECORD
    if days < 0:
        return EffectiveStatus.EXPIRED
    if days < EXPIRING_SOON_DAYS:
        return EffectiveStatus.EXPIRING_SOON
    return EffectiveStatus.VALID


def classify(expiry_date: DateLike, now: date | datetime) -> EffectiveStatus:
    """
    Classify one visa from its expiry date.

    >>> from datetime import date
    >>> classify(date(2025, 1, 1), date(2025, 1, 1))
    <EffectiveStatus.EXPIRING_SOON: 'expiring_soon'>
    >>> classify(None, date(2025, 1, 1))
    <EffectiveStatus.NO_RECORD: 'no_record'>
    """
    return classify_days(days_until(expiry_date, now))


# ---------------------------------------------------------------------
# Active‑visa selection
# ---------------------------------------------------------------------
class SelectionPolicy(Enum):
    """Which visa records may represent an employee's current compliance."""
    STRICT_VALID = "strict_valid"
    VALID_OR_LEGACY_ACTIVE = "valid_or_legacy_active"
    VALID_OR_LEGACY_ACTIVE_OR_EXPIRED = "valid_or_legacy_active_or_expired"

    def matches(self, visa: Visa) -> bool:
        status = _value(visa.status)
        if status == VisaStatus.VALID.value:
            return True
        if self is SelectionPolicy.STRICT_VALID:
            return False
        if visa.application_status == LEGACY_ACTIVE:
            return True
        return (
            self is SelectionPolicy.VALID_OR_LEGACY_ACTIVE_OR_EXPIRED
            and status == VisaStatus.EXPIRED.value
        )


def _value(status: Any) -> Any:
    return status.value if isinstance(status, Enum) else status


def select_active(
    visas: Iterable[Visa] | None,
    policy: SelectionPolicy = SelectionPolicy.VALID_OR_LEGACY_ACTIVE,
) -> Optional[Visa]:
    """Return the first visa (in collection order) accepted by *policy*."""
    for visa in visas or ():
        if policy.matches(visa):
            return visa
    return None


# ---------------------------------------------------------------------
# Per‑employee decoration
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class EmployeeCompliance:
    """An employee together with the view of its compliance state."""
    employee: Employee
    active_visa: Optional[Visa]
    days_until_expiry: Optional[int]
    status: EffectiveStatus


def assess(
    employee: Employee,
    now: date | datetime,
    policy: SelectionPolicy = SelectionPolicy.VALID_OR_LEGACY_ACTIVE,
) -> EmployeeCompliance:
    """Select *employee*'s active visa under *policy* and classify it."""
    visa = select_active(employee.visas, policy)
    days = days_until(visa.expiry_date, now) if visa is not None else None
    return EmployeeCompliance(employee, visa, days, classify_days(days))


def compliance_visa(employee: Employee) -> Optional[Visa]:
    """
    The visa used for fleet counting.

    Prefers the display‑active visa and falls back to one explicitly marked
    expired, so an employee whose only permit is flagged expired still shows
    up in the expired count.
    """
    return (
        select_active(employee.visas, SelectionPolicy.VALID_OR_LEGACY_ACTIVE)
        or select_active(employee.visas, SelectionPolicy.VALID_OR_LEGACY_ACTIVE_OR_EXPIRED)
    )


# ---------------------------------------------------------------------
# Fleet aggregation
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class FleetSummary:
    total: int
    expiring_soon: int
    expired: int
    valid_count: int
    compliance_health: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "expiring_soon": self.expiring_soon,
            "expired": self.expired,
            "valid_count": self.valid_count,
            "compliance_health": self.compliance_health,
        }


def health_percentage(valid_count: int, total: int) -> int:
    """Rounded share of compliant employees; 100 for an empty roster."""
    if total == 0:
        return 100
    return math.floor(100 * valid_count / total + 0.5)


def aggregate(employees: Sequence[Employee], now: date | datetime) -> FleetSummary:
    """Count expired / expiring employees and compute compliance health."""
    expiring_soon = expired = valid_count = 0
    for employee in employees:
        visa = compliance_visa(employee)
        days = days_until(visa.expiry_date, now) if visa is not None else None
        status = classify_days(days)
        if status is EffectiveStatus.EXPIRED:
            expired += 1
        elif status is EffectiveStatus.EXPIRING_SOON:
            expiring_soon += 1
        if days is not None and days >= 0:
            valid_count += 1

    total = len(employees)
    return FleetSummary(
        total=total,
        expiring_soon=expiring_soon,
        expired=expired,
        valid_count=valid_count,
        compliance_health=health_percentage(valid_count, total),
    )


class HealthBand(str, Enum):
    """Presentation colour band for a compliance percentage."""
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"


def health_band(percentage: int) -> HealthBand:
    if percentage >= 90:
        return HealthBand.GOOD
    if percentage >= 70:
        return HealthBand.WARNING
    return HealthBand.CRITICAL


# ---------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------
def _days_of(item: Any) -> Optional[int]:
    if isinstance(item, Mapping):
        return item.get("days_until_expiry")
    return getattr(item, "days_until_expiry", None)


def sort_by_urgency(
    items: Iterable[Any],
    key: Optional[Callable[[Any], Optional[int]]] = None,
) -> List[Any]:
    """
    Order *items* by ascending days‑until‑expiry with ``None`` last.

    Items may be objects exposing ``days_until_expiry`` or mappings with that
    key; pass *key* to read the value some other way.  The sort is stable.
    """
    get = key or _days_of

    def sort_key(item: Any):
        days = get(item)
        return (days is None, days if days is not None else 0)

    return sorted(items, key=sort_key)


# ---------------------------------------------------------------------
# Visa‑level views
# ---------------------------------------------------------------------
VISA_FILTERS = ("all", "expiring", "expired", "valid")

_BUCKETS = {
    "expiring": EffectiveStatus.EXPIRING_SOON,
    "expired": EffectiveStatus.EXPIRED,
    "valid": EffectiveStatus.VALID,
}


def visa_stats(visas: Iterable[Visa], now: date | datetime) -> Dict[str, int]:
    """Per‑visa counts of valid / expiring / expired records."""
    stats = {"total": 0, "valid": 0, "expiring": 0, "expired": 0}
    for visa in visas:
        stats["total"] += 1
        status = classify(visa.expiry_date, now)
        for name, bucket in _BUCKETS.items():
            if status is bucket:
                stats[name] += 1
    return stats


def filter_visas(visas: Iterable[Visa], bucket: str, now: date | datetime) -> List[Visa]:
    """Keep the visas whose expiry falls into *bucket* (``all`` keeps everything)."""
    if bucket == "all":
        return list(visas)
    if bucket not in _BUCKETS:
        raise ValueError(f"unknown visa filter {bucket!r}")
    wanted = _BUCKETS[bucket]
    return [v for v in visas if classify(v.expiry_date, now) is wanted]


# ---------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------
def describe_days(days: Optional[int]) -> str:
    """Human label used by the compliance sidebar."""
    if days is None:
        return "No active visa"
    if days < 0:
        return f"{abs(days)} days overdue"
    return f"{days} days"
