"""
Compliance alert endpoints.

Alerts are created ``open`` and only ever move forward
(see :pymod:`visatrack.alerts`); an illegal transition is answered with
409.  Listing attaches the employee's name and the presentation icon.
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from visatrack.alerts import alert_counts, alert_icon
from visatrack.models import AlertStatus
from visatrack.store import TenantStore

from .schemas import AlertCreate, AlertStatusUpdate
from .deps import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("")
def list_alerts(
    status: Optional[AlertStatus] = Query(None, description="Only alerts in this lifecycle status"),
    store: TenantStore = Depends(get_store),
):
    alerts = store.list_alerts(status)
    names = {}
    if any(a.employee_id for a in alerts):
        names = {e.id: e for e in store.list_employees()}

    result = []
    for alert in alerts:
        payload = asdict(alert)
        emp = names.get(alert.employee_id)
        payload["employee"] = (
            {"id": emp.id, "first_name": emp.first_name, "last_name": emp.last_name}
            if emp else None
        )
        payload["icon"] = alert_icon(alert.alert_type)
        result.append(payload)
    return result


@router.get("/counts")
def get_alert_counts(store: TenantStore = Depends(get_store)):
    return alert_counts(store.list_alerts())


@router.post("", status_code=201)
def create_alert(body: AlertCreate, store: TenantStore = Depends(get_store)):
    try:
        alert = store.add_alert(body.model_dump(exclude_none=True))
    except KeyError:
        raise HTTPException(status_code=404, detail="Employee not found")
    return asdict(alert)


@router.patch("/{alert_id}")
def update_alert(
    alert_id: str,
    body: AlertStatusUpdate,
    store: TenantStore = Depends(get_store),
):
    try:
        alert = store.set_alert_status(alert_id, body.status)
    except KeyError:
        raise HTTPException(status_code=404, detail="Alert not found")
    except ValueError as e:
        logger.warning(f"Rejected alert update {alert_id}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    return asdict(alert)
