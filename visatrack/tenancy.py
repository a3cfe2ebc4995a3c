"""
visatrack.tenancy
=================

User → tenant resolution and explicit tenant provisioning.

Reading never creates anything: :pyfunc:`resolve_company_id` only looks a
user up.  :pyfunc:`ensure_company_for_user` is the one place a company is
created, called once when an account is set up.  It is idempotent and
relies on the ``profiles`` primary key so two concurrent first calls for
the same user still leave exactly one company behind.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from visatrack.db import CompanyDB, ProfileDB
from visatrack.models import Role

logger = logging.getLogger(__name__)


def resolve_company_id(session: Session, user_id: str) -> Optional[str]:
    """Return the tenant id linked to *user_id*, or ``None``."""
    profile = session.get(ProfileDB, user_id)
    return profile.company_id if profile else None


def ensure_company_for_user(
    session: Session,
    user_id: str,
    company_name: str,
    email: str | None = None,
    full_name: str | None = None,
) -> Tuple[str, bool]:
    """
    Make sure *user_id* belongs to a company.

    Returns ``(company_id, created)``.  The company and the profile row are
    written in one transaction; if another request linked the user first,
    our insert fails on the profile key, is rolled back, and the existing
    company is returned instead.
    """
    existing = resolve_company_id(session, user_id)
    if existing:
        return existing, False

    company = CompanyDB(name=company_name, email=email)
    session.add(company)
    session.flush()
    company_id = company.id
    session.add(
        ProfileDB(
            id=user_id,
            company_id=company_id,
            email=email,
            full_name=full_name,
            role=Role.ADMIN.value,
        )
    )
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        winner = resolve_company_id(session, user_id)
        if winner is None:
            raise
        logger.warning("user %s was provisioned concurrently; using company %s", user_id, winner)
        return winner, False

    logger.info("provisioned company %s (%r) for user %s", company_id, company_name, user_id)
    return company_id, True
