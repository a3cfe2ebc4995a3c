"""
api.deps
========

FastAPI dependency providers.

* ``get_session`` – one SQLModel session per request
* ``get_user_id`` – the caller, as asserted by the upstream identity provider
  in the ``X-User-Id`` header
* ``get_store`` – a :class:`~visatrack.store.TenantStore` bound to the
  caller's company (401 without identity, 403 without a company)
* ``get_cache`` – the response cache; override with ``NullCache`` in tests
* ``get_today`` – the single reference day used for a whole request
"""

from datetime import date
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException
from sqlmodel import Session

from visatrack.cache import NullCache, TTLCache
from visatrack.db import SessionLocal
from visatrack.settings import settings
from visatrack.store import TenantStore
from visatrack.tenancy import resolve_company_id


def get_session() -> Iterator[Session]:
    """Yield a session that is closed when the request finishes."""
    with SessionLocal() as session:
        yield session


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Return the authenticated user id or fail with 401."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized: Please log in")
    return x_user_id


def get_store(
    user_id: str = Depends(get_user_id),
    session: Session = Depends(get_session),
) -> TenantStore:
    """Tenant‑scoped store for the caller's company."""
    company_id = resolve_company_id(session, user_id)
    if company_id is None:
        raise HTTPException(
            status_code=403,
            detail="User is not associated with any company profile.",
        )
    return TenantStore(session, company_id)


@lru_cache
def get_settings():
    """Return application settings."""
    return settings


@lru_cache
def get_cache():
    """Singleton response cache (persists across requests)."""
    if not settings.cache_enabled:
        return NullCache()
    return TTLCache(default_ttl=settings.cache_ttl)


def get_today() -> date:
    return date.today()


def dashboard_key(company_id: str) -> str:
    return f"dashboard:{company_id}"
