"""
Account setup endpoints.

``POST /account/provision`` is the only place a company gets created: it is
called once when the account is set up and is safe to repeat.  ``POST
/seed`` fills the caller's company with the demo roster and is refused
unless seeding is enabled (development only).
"""

import logging
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from visatrack.db import CompanyDB
from visatrack.seed import seed_demo_data
from visatrack.store import TenantStore
from visatrack.tenancy import ensure_company_for_user

from .deps import dashboard_key, get_cache, get_session, get_settings, get_store, get_today, get_user_id
from .schemas import ProvisionRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["account"])


@router.post("/account/provision")
def provision_account(
    body: ProvisionRequest,
    response: Response,
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
):
    """Ensure the caller is linked to a company (201 if one was created)."""
    company_id, created = ensure_company_for_user(
        session, user_id, body.company_name, email=body.email, full_name=body.full_name
    )
    response.status_code = 201 if created else 200
    return {"company_id": company_id, "created": created}


@router.get("/account")
def get_account(
    store: TenantStore = Depends(get_store),
    session: Session = Depends(get_session),
):
    """The caller's company."""
    company = session.get(CompanyDB, store.company_id)
    return asdict(company.to_company())


@router.post("/seed")
def seed(
    store: TenantStore = Depends(get_store),
    settings=Depends(get_settings),
    cache=Depends(get_cache),
    today: date = Depends(get_today),
):
    if not settings.allow_seed:
        raise HTTPException(
            status_code=403,
            detail="Forbidden: Seeding is only allowed in local/dev environments.",
        )
    result = seed_demo_data(store, today)
    cache.delete(dashboard_key(store.company_id))
    logger.info(f"Seeded company {store.company_id}: {result}")
    return {"message": "Database seeded successfully", "result": result}
