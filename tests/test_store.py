"""
tests/test_store.py
===================

Integration‑style tests for the SQLite‑backed TenantStore (in‑memory
database, see conftest.py).
"""

from datetime import date, datetime

import pytest
from sqlmodel import select

from visatrack.compliance import SelectionPolicy, select_active
from visatrack.db import VisaDB
from visatrack.models import AlertStatus, EmployeeStatus, VisaStatus
from visatrack.seed import SAMPLE_ROSTER, seed_demo_data
from visatrack.store import TenantStore
from visatrack.tenancy import ensure_company_for_user


def _maria(store):
    return store.add_employee({"first_name": "Maria", "last_name": "Santos", "passport_number": "P8291032A"})


def test_add_and_get_employee(store):
    emp = _maria(store)
    fetched = store.get_employee(emp.id)
    assert fetched.full_name == "Maria Santos"
    assert fetched.company_id == store.company_id
    assert fetched.status == EmployeeStatus.ACTIVE
    assert fetched.visas == []


def test_visas_are_nested(store):
    emp = _maria(store)
    visa = store.add_visa({
        "employee_id": emp.id,
        "visa_type": "Single Permit",
        "issue_date": date(2024, 1, 1),
        "expiry_date": date(2025, 9, 1),
    })
    assert visa.status == VisaStatus.VALID
    [nested] = store.get_employee(emp.id).visas
    assert nested.id == visa.id
    assert nested.expiry_date == date(2025, 9, 1)


def test_visas_keep_insertion_order(store, session):
    """Same-instant inserts still come back in the order they were added."""
    emp = _maria(store)
    added = [
        store.add_visa({"employee_id": emp.id, "visa_type": f"Permit {n}", "expiry_date": date(2026, 1, n)})
        for n in range(1, 6)
    ]
    for row in session.exec(select(VisaDB)).all():
        row.created_at = datetime(2025, 6, 1, 9, 0)
        session.add(row)
    session.commit()

    nested = store.get_employee(emp.id).visas
    assert [v.id for v in nested] == [v.id for v in added]
    assert select_active(nested, SelectionPolicy.STRICT_VALID).id == added[0].id


def test_search_matches_names_and_passport(store):
    _maria(store)
    store.add_employee({"first_name": "Rahul", "last_name": "Sharma", "passport_number": "Z1234567"})
    assert [e.first_name for e in store.list_employees("sant")] == ["Maria"]
    assert [e.first_name for e in store.list_employees("z123")] == ["Rahul"]
    assert len(store.list_employees()) == 2
    assert len(store) == 2


def test_update_employee(store):
    emp = _maria(store)
    updated = store.update_employee(emp.id, {"status": EmployeeStatus.ON_LEAVE, "position": "Nurse"})
    assert updated.status == "on_leave"
    assert updated.position == "Nurse"


def test_delete_employee_keeps_alerts(store):
    emp = _maria(store)
    store.add_visa({"employee_id": emp.id, "visa_type": "Single Permit", "expiry_date": date(2025, 7, 1)})
    alert = store.add_alert({"employee_id": emp.id, "title": "Permit expiring"})
    store.delete_employee(emp.id)

    with pytest.raises(KeyError):
        store.get_employee(emp.id)
    assert store.list_visas() == []
    [kept] = store.list_alerts()
    assert kept.id == alert.id
    assert kept.employee_id is None


def test_other_tenant_is_invisible(session, store):
    emp = _maria(store)
    other_id, _ = ensure_company_for_user(session, "user-2", "Gozo Hospitality Ltd")
    other = TenantStore(session, other_id)

    assert other.list_employees() == []
    with pytest.raises(KeyError):
        other.get_employee(emp.id)
    with pytest.raises(KeyError):
        other.add_visa({"employee_id": emp.id, "visa_type": "Single Permit", "expiry_date": date(2026, 1, 1)})
    with pytest.raises(KeyError):
        other.delete_employee(emp.id)


def test_list_visas_ordered_by_expiry(store):
    emp = _maria(store)
    for expiry in (date(2026, 1, 1), date(2025, 7, 1), date(2025, 12, 1)):
        store.add_visa({"employee_id": emp.id, "visa_type": "Single Permit", "expiry_date": expiry})
    pairs = store.list_visas()
    assert [v.expiry_date for v, _ in pairs] == [date(2025, 7, 1), date(2025, 12, 1), date(2026, 1, 1)]
    assert all(e.id == emp.id for _, e in pairs)


def test_alert_lifecycle(store):
    alert = store.add_alert({"title": "Missing passport scan", "alert_type": "missing_document"})
    assert alert.status == AlertStatus.OPEN
    assert alert.alert_type == "missing_document"

    acked = store.set_alert_status(alert.id, AlertStatus.ACKNOWLEDGED, now=datetime(2025, 6, 2, 9, 0))
    assert acked.status == "acknowledged"
    assert acked.updated_at == datetime(2025, 6, 2, 9, 0)
    assert [a.id for a in store.list_alerts("acknowledged")] == [alert.id]

    with pytest.raises(ValueError):
        store.set_alert_status(alert.id, AlertStatus.OPEN)


def test_seed_demo_data_is_repeatable(store, today):
    first = seed_demo_data(store, today)
    assert first == {"employees": len(SAMPLE_ROSTER), "visas": len(SAMPLE_ROSTER)}
    assert seed_demo_data(store, today) == {"employees": 0, "visas": 0}
    assert len(store.list_employees()) == len(SAMPLE_ROSTER)
