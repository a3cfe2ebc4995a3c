"""
tests/test_alerts.py
====================

Unit tests for visatrack.alerts (lifecycle guard, icons, counts)
"""

from datetime import datetime

import pytest

from visatrack.alerts import advance_alert, alert_counts, alert_icon
from visatrack.models import AlertStatus, AlertType, ComplianceAlert


def _alert(status=AlertStatus.OPEN):
    return ComplianceAlert("a1", "c1", "Permit expiring for Rahul Sharma", status=status)


def test_open_to_acknowledged_to_resolved():
    alert = _alert()
    advance_alert(alert, AlertStatus.ACKNOWLEDGED)
    advance_alert(alert, "resolved")
    assert alert.status is AlertStatus.RESOLVED


def test_open_straight_to_resolved():
    alert = _alert()
    stamp = datetime(2025, 6, 1, 12, 0)
    advance_alert(alert, AlertStatus.RESOLVED, now=stamp)
    assert alert.status is AlertStatus.RESOLVED
    assert alert.updated_at == stamp


@pytest.mark.parametrize(
    "start, target",
    [
        (AlertStatus.ACKNOWLEDGED, AlertStatus.OPEN),
        (AlertStatus.RESOLVED, AlertStatus.OPEN),
        (AlertStatus.RESOLVED, AlertStatus.ACKNOWLEDGED),
        (AlertStatus.OPEN, AlertStatus.OPEN),
    ],
)
def test_backward_transitions_raise(start, target):
    alert = _alert(start)
    with pytest.raises(ValueError):
        advance_alert(alert, target)
    assert alert.status is start


def test_icons():
    assert alert_icon(AlertType.EXPIRY) == "clock"
    assert alert_icon("missing_document") == "file"
    assert alert_icon("status_change") == "warning"
    assert alert_icon("something_else") == "bell"


def test_alert_counts_include_zeroes():
    alerts = [_alert(), _alert(), _alert(AlertStatus.RESOLVED)]
    assert alert_counts(alerts) == {"open": 2, "acknowledged": 0, "resolved": 1}
