"""
visatrack.store
===============

Tenant‑scoped persistence client.

A :class:`TenantStore` is bound to one ``company_id`` at construction and
filters every query by it, so code holding a store can only ever see or
change that tenant's rows.  It returns the plain dataclasses from
:pymod:`visatrack.models`; missing (or foreign) ids raise :class:`KeyError`.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from visatrack.alerts import advance_alert
from visatrack.db import (
    ComplianceAlertDB,
    EmployeeDB,
    VisaDB,
    SessionLocal,
    utcnow,
)
from visatrack.models import (
    AlertStatus,
    AlertType,
    ComplianceAlert,
    Employee,
    EmployeeStatus,
    Visa,
    VisaStatus,
)

logger = logging.getLogger(__name__)

EMPLOYEE_FIELDS = {
    "first_name", "last_name", "email", "phone", "nationality",
    "passport_number", "passport_expiry", "position", "department",
    "employment_start_date", "status", "notes",
}
VISA_FIELDS = {
    "employee_id", "visa_type", "country_issued", "issue_date", "expiry_date",
    "permit_number", "status", "application_status", "renewal_reminder_sent",
}
ALERT_FIELDS = {"employee_id", "alert_type", "title", "description", "due_date"}


def _plain(value: Any) -> Any:
    """Store enum members by value."""
    return getattr(value, "value", value)


def _pick(data: Mapping[str, Any], allowed: set) -> Dict[str, Any]:
    return {k: _plain(v) for k, v in data.items() if k in allowed}


class TenantStore:
    """
    CRUD surface over one tenant's employees, visas and alerts.

    Example
    -------
    >>> with TenantStore(SessionLocal(), company_id) as store:
    ...     emp = store.add_employee({"first_name": "Maria", "last_name": "Santos"})
    ...     store.get_employee(emp.id).full_name
    'Maria Santos'
    """

    def __init__(self, session: Session | None, company_id: str) -> None:
        self._session: Session = session or SessionLocal()
        self.company_id = company_id

    # ------------------------------------------------------------ helpers
    def _employee_row(self, employee_id: str) -> EmployeeDB:
        row = self._session.get(EmployeeDB, employee_id)
        if row is None or row.company_id != self.company_id:
            raise KeyError(employee_id)
        return row

    def _alert_row(self, alert_id: str) -> ComplianceAlertDB:
        row = self._session.get(ComplianceAlertDB, alert_id)
        if row is None or row.company_id != self.company_id:
            raise KeyError(alert_id)
        return row

    def _visas_by_employee(self, employee_ids: List[str]) -> Dict[str, List[Visa]]:
        grouped: Dict[str, List[Visa]] = defaultdict(list)
        if not employee_ids:
            return grouped
        rows = self._session.exec(
            select(VisaDB)
            .where(col(VisaDB.employee_id).in_(employee_ids))
            .order_by(col(VisaDB.employee_id), col(VisaDB.seq))
        ).all()
        for row in rows:
            grouped[row.employee_id].append(row.to_visa())
        return grouped

    # ---------------------------------------------------------- employees
    def list_employees(self, search: Optional[str] = None) -> List[Employee]:
        """Return the roster with nested visas, optionally filtered by *search*."""
        query = select(EmployeeDB).where(EmployeeDB.company_id == self.company_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    col(EmployeeDB.first_name).ilike(pattern),
                    col(EmployeeDB.last_name).ilike(pattern),
                    col(EmployeeDB.passport_number).ilike(pattern),
                )
            )
        rows = self._session.exec(query.order_by(col(EmployeeDB.created_at), col(EmployeeDB.id))).all()
        visas = self._visas_by_employee([r.id for r in rows])
        logger.debug("company %s: %d employees (search=%r)", self.company_id, len(rows), search)
        return [row.to_employee(visas.get(row.id, [])) for row in rows]

    def get_employee(self, employee_id: str) -> Employee:
        row = self._employee_row(employee_id)
        return row.to_employee(self._visas_by_employee([row.id]).get(row.id, []))

    def add_employee(self, data: Mapping[str, Any]) -> Employee:
        fields = _pick(data, EMPLOYEE_FIELDS)
        fields.setdefault("status", EmployeeStatus.ACTIVE.value)
        row = EmployeeDB(company_id=self.company_id, **fields)
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        logger.info("company %s: created employee %s", self.company_id, row.id)
        return row.to_employee()

    def update_employee(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        row = self._employee_row(employee_id)
        for name, value in _pick(changes, EMPLOYEE_FIELDS).items():
            setattr(row, name, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return self.get_employee(employee_id)

    def delete_employee(self, employee_id: str) -> None:
        """Remove an employee and its visas; its alerts stay, unlinked."""
        row = self._employee_row(employee_id)
        for visa in self._session.exec(select(VisaDB).where(VisaDB.employee_id == row.id)).all():
            self._session.delete(visa)
        alerts = self._session.exec(
            select(ComplianceAlertDB).where(ComplianceAlertDB.employee_id == row.id)
        ).all()
        for alert in alerts:
            alert.employee_id = None
            self._session.add(alert)
        self._session.delete(row)
        self._session.commit()
        logger.info("company %s: deleted employee %s", self.company_id, employee_id)

    # -------------------------------------------------------------- visas
    def list_visas(self) -> List[Tuple[Visa, Employee]]:
        """Every tenant visa paired with its employee, soonest expiry first."""
        rows = self._session.exec(
            select(VisaDB, EmployeeDB)
            .join(EmployeeDB, col(EmployeeDB.id) == col(VisaDB.employee_id))
            .where(EmployeeDB.company_id == self.company_id)
            .order_by(col(VisaDB.expiry_date), col(VisaDB.id))
        ).all()
        return [(visa.to_visa(), emp.to_employee()) for visa, emp in rows]

    def add_visa(self, data: Mapping[str, Any]) -> Visa:
        fields = _pick(data, VISA_FIELDS)
        self._employee_row(fields.get("employee_id", ""))
        if not fields.get("status"):
            fields["status"] = VisaStatus.VALID.value
        last = self._session.exec(
            select(func.max(VisaDB.seq)).where(VisaDB.employee_id == fields["employee_id"])
        ).one()
        fields["seq"] = (last or 0) + 1
        row = VisaDB(**fields)
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        logger.info("company %s: added visa %s for employee %s", self.company_id, row.id, row.employee_id)
        return row.to_visa()

    # ------------------------------------------------------------- alerts
    def list_alerts(self, status: Optional[str] = None) -> List[ComplianceAlert]:
        query = select(ComplianceAlertDB).where(ComplianceAlertDB.company_id == self.company_id)
        if status:
            query = query.where(ComplianceAlertDB.status == _plain(status))
        rows = self._session.exec(query.order_by(col(ComplianceAlertDB.created_at).desc())).all()
        return [row.to_alert() for row in rows]

    def add_alert(self, data: Mapping[str, Any]) -> ComplianceAlert:
        fields = _pick(data, ALERT_FIELDS)
        if fields.get("employee_id"):
            self._employee_row(fields["employee_id"])
        if not fields.get("alert_type"):
            fields["alert_type"] = AlertType.EXPIRY.value
        row = ComplianceAlertDB(company_id=self.company_id, status=AlertStatus.OPEN.value, **fields)
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        logger.info("company %s: opened %s alert %s", self.company_id, row.alert_type, row.id)
        return row.to_alert()

    def set_alert_status(self, alert_id: str, status: Any, now: datetime | None = None) -> ComplianceAlert:
        """Move an alert through its lifecycle (``ValueError`` if illegal)."""
        row = self._alert_row(alert_id)
        alert = row.to_alert()
        advance_alert(alert, status, now or utcnow())
        row.status = _plain(alert.status)
        row.updated_at = alert.updated_at
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return row.to_alert()

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[Employee]:
        yield from self.list_employees()

    def __len__(self) -> int:
        return len(self.list_employees())

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "TenantStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()
