"""
visatrack.alerts
================

Presentation lookup and state‑transition guard for
:class:`visatrack.models.ComplianceAlert`.

Alerts only move forward: an ``open`` alert may be acknowledged or
resolved straight away, an acknowledged one may only be resolved, and a
resolved alert is final.  :pyfunc:`advance_alert` mutates an alert
**in‑place** after validating the transition.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable

from .models import AlertStatus, AlertType, ComplianceAlert

# ---------------------------------------------------------------------
# Allowed transitions: source status → set[valid target statuses]
# ---------------------------------------------------------------------
RULES = {
    AlertStatus.OPEN:         {AlertStatus.ACKNOWLEDGED, AlertStatus.RESOLVED},
    AlertStatus.ACKNOWLEDGED: {AlertStatus.RESOLVED},
}

ICONS = {
    AlertType.EXPIRY:           "clock",
    AlertType.MISSING_DOCUMENT: "file",
    AlertType.STATUS_CHANGE:    "warning",
}
DEFAULT_ICON = "bell"


def alert_icon(alert_type) -> str:
    """Icon name for an alert type; unknown types get the bell."""
    try:
        return ICONS.get(AlertType(alert_type), DEFAULT_ICON)
    except ValueError:
        return DEFAULT_ICON


def advance_alert(alert: ComplianceAlert, new_status, now: datetime | None = None) -> None:
    """
    Change :pyattr:`alert.status` if the transition is legal, otherwise
    raise :class:`ValueError`.

    Examples
    --------
    >>> a = ComplianceAlert("a1", "c1", "Permit expiring")
    >>> advance_alert(a, AlertStatus.ACKNOWLEDGED)
    >>> advance_alert(a, AlertStatus.OPEN)
    Traceback (most recent call last):
        ...
    ValueError: illegal transition acknowledged → open
    """
    current = AlertStatus(alert.status)
    target = AlertStatus(new_status)
    if target not in RULES.get(current, set()):
        raise ValueError(f"illegal transition {current.value} → {target.value}")
    alert.status = target
    if now is not None:
        alert.updated_at = now


def alert_counts(alerts: Iterable[ComplianceAlert]) -> Dict[str, int]:
    """Number of alerts in each lifecycle status (zeroes included)."""
    counts = {s.value: 0 for s in AlertStatus}
    for alert in alerts:
        status = AlertStatus(alert.status).value
        counts[status] += 1
    return counts
