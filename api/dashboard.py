"""
Dashboard summary endpoint.

Runs the fleet aggregation over the caller's roster and caches the result
per company until the next write for that tenant (or the TTL).
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from visatrack.compliance import SelectionPolicy, aggregate, assess, health_band, sort_by_urgency
from visatrack.store import TenantStore

from .deps import dashboard_key, get_cache, get_store, get_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    limit: int = Query(5, ge=0, le=50, description="How many urgent employees to include"),
    store: TenantStore = Depends(get_store),
    cache=Depends(get_cache),
    today: date = Depends(get_today),
):
    key = dashboard_key(store.company_id)
    cached = cache.get(key)
    if cached is not None and cached[0] == (today, limit):
        return cached[1]

    employees = store.list_employees()
    summary = aggregate(employees, today)
    views = [assess(e, today, SelectionPolicy.VALID_OR_LEGACY_ACTIVE) for e in employees]
    urgent = [v for v in sort_by_urgency(views) if v.days_until_expiry is not None][:limit]

    payload = summary.as_dict()
    payload["health_band"] = health_band(summary.compliance_health).value
    payload["urgent"] = [
        {
            "employee_id": v.employee.id,
            "name": v.employee.full_name,
            "visa_type": v.active_visa.visa_type,
            "expiry_date": v.active_visa.expiry_date,
            "days_until_expiry": v.days_until_expiry,
            "compliance_status": v.status.value,
        }
        for v in urgent
    ]
    logger.info(
        f"Dashboard for company {store.company_id}: {summary.total} employees, "
        f"{summary.compliance_health}% healthy"
    )
    cache.set(key, ((today, limit), payload))
    return payload
