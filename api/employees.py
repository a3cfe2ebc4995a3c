"""
Employee roster endpoints.

The list view decorates every employee with the days left on its active
visa (strict ``valid`` selection) and returns the most urgent first.  The
detail view uses the wider valid‑or‑legacy‑active selection for the
compliance sidebar.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from visatrack.compliance import SelectionPolicy, assess, describe_days, sort_by_urgency
from visatrack.models import Employee
from visatrack.store import TenantStore

from .deps import dashboard_key, get_cache, get_store, get_today
from .schemas import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


def _decorate(employee: Employee, today: date, policy: SelectionPolicy) -> Dict[str, Any]:
    view = assess(employee, today, policy)
    payload = asdict(employee)
    payload["active_visa"] = asdict(view.active_visa) if view.active_visa else None
    payload["days_until_expiry"] = view.days_until_expiry
    payload["compliance_status"] = view.status.value
    return payload


@router.get("", response_model=List[Dict[str, Any]])
def list_employees(
    search: Optional[str] = Query(None, description="Match on first/last name or passport number"),
    store: TenantStore = Depends(get_store),
    today: date = Depends(get_today),
):
    employees = store.list_employees(search)
    logger.info(f"Retrieved {len(employees)} employees for company {store.company_id}")
    rows = [_decorate(e, today, SelectionPolicy.STRICT_VALID) for e in employees]
    return sort_by_urgency(rows)


@router.post("", status_code=201)
def create_employee(
    body: EmployeeCreate,
    store: TenantStore = Depends(get_store),
    cache=Depends(get_cache),
):
    employee = store.add_employee(body.model_dump(exclude_none=True))
    cache.delete(dashboard_key(store.company_id))
    return asdict(employee)


@router.get("/{employee_id}")
def get_employee(
    employee_id: str,
    store: TenantStore = Depends(get_store),
    today: date = Depends(get_today),
):
    """Employee record plus the compliance sidebar."""
    try:
        employee = store.get_employee(employee_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Employee not found")

    payload = _decorate(employee, today, SelectionPolicy.VALID_OR_LEGACY_ACTIVE)
    payload["compliance_label"] = describe_days(payload["days_until_expiry"])
    return payload


@router.patch("/{employee_id}")
def update_employee(
    employee_id: str,
    body: EmployeeUpdate,
    store: TenantStore = Depends(get_store),
    cache=Depends(get_cache),
):
    try:
        employee = store.update_employee(employee_id, body.changes())
    except KeyError:
        raise HTTPException(status_code=404, detail="Employee not found")
    cache.delete(dashboard_key(store.company_id))
    return asdict(employee)


@router.delete("/{employee_id}", status_code=204)
def delete_employee(
    employee_id: str,
    store: TenantStore = Depends(get_store),
    cache=Depends(get_cache),
):
    try:
        store.delete_employee(employee_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Employee not found")
    cache.delete(dashboard_key(store.company_id))
    return Response(status_code=204)
