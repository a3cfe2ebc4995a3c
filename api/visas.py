"""
Visa / permit endpoints.

Visas are listed across the whole tenant, soonest expiry first, with a
short employee summary attached and each record classified on its own
expiry date.
"""

import logging
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from visatrack.compliance import VISA_FILTERS, classify, filter_visas, visa_stats
from visatrack.dates import days_until
from visatrack.store import TenantStore

from .deps import dashboard_key, get_cache, get_store, get_today
from .schemas import VisaCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visas", tags=["visas"])


@router.get("")
def list_visas(
    bucket: str = Query("all", alias="filter", pattern="^(" + "|".join(VISA_FILTERS) + ")$"),
    store: TenantStore = Depends(get_store),
    today: date = Depends(get_today),
):
    pairs = store.list_visas()
    employees = {visa.id: emp for visa, emp in pairs}
    keep = filter_visas([visa for visa, _ in pairs], bucket, today)

    result = []
    for visa in keep:
        emp = employees[visa.id]
        payload = asdict(visa)
        payload["employee"] = {
            "id": emp.id,
            "first_name": emp.first_name,
            "last_name": emp.last_name,
            "passport_number": emp.passport_number,
        }
        payload["days_until_expiry"] = days_until(visa.expiry_date, today)
        payload["compliance_status"] = classify(visa.expiry_date, today).value
        result.append(payload)
    return result


@router.get("/stats")
def get_visa_stats(
    store: TenantStore = Depends(get_store),
    today: date = Depends(get_today),
):
    return visa_stats([visa for visa, _ in store.list_visas()], today)


@router.post("", status_code=201)
def create_visa(
    body: VisaCreate,
    store: TenantStore = Depends(get_store),
    cache=Depends(get_cache),
):
    try:
        visa = store.add_visa(body.model_dump(exclude_none=True))
    except KeyError:
        logger.warning(f"Visa rejected: employee {body.employee_id} not in company {store.company_id}")
        raise HTTPException(status_code=404, detail="Employee not found")
    cache.delete(dashboard_key(store.company_id))
    return asdict(visa)
