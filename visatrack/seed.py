"""
visatrack.seed
==============

Seed a tenant with a small Malta demo roster.

Expiry dates are relative to the *today* passed in, so the demo always
shows one employee in every compliance bucket: two comfortably valid, two
expiring within 90 days and one already expired.
"""

from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Dict, List

from visatrack.models import Employee
from visatrack.store import TenantStore

logger = logging.getLogger(__name__)

# (employee fields, visa type, issued days ago, expires in days, recorded status)
SAMPLE_ROSTER = [
    (
        {"first_name": "Maria", "last_name": "Santos", "nationality": "Philippines",
         "passport_number": "P8291032A", "position": "Senior Nurse", "department": "Healthcare"},
        "Single Permit", 200, 165, "valid",
    ),
    (
        {"first_name": "Rahul", "last_name": "Sharma", "nationality": "India",
         "passport_number": "Z1234567", "position": "Backend Developer", "department": "Engineering"},
        "Key Employee", 300, 45, "valid",
    ),
    (
        {"first_name": "Sofia", "last_name": "Petrova", "nationality": "Russia",
         "passport_number": "750281923", "position": "Marketing Specialist", "department": "Marketing"},
        "Specialist Employee", 350, 10, "valid",
    ),
    (
        {"first_name": "Arjun", "last_name": "Singh", "nationality": "Nepal",
         "passport_number": "N0987654", "position": "Construction Supervisor", "department": "Operations"},
        "Single Permit", 400, -5, "expired",
    ),
    (
        {"first_name": "Hassan", "last_name": "Ali", "nationality": "Pakistan",
         "passport_number": "PK998877", "position": "Delivery Coordinator", "department": "Logistics"},
        "Single Permit", 30, 330, "valid",
    ),
]


def seed_demo_data(store: TenantStore, today: date, rng: random.Random | None = None) -> Dict[str, int]:
    """
    Insert the demo roster into *store*'s tenant.

    Returns counts of created employees and visas.  Names already present on
    the roster are skipped so running the seed twice does not duplicate
    anyone.
    """
    rng = rng or random.Random()
    existing = {(e.first_name, e.last_name) for e in store.list_employees()}
    created: List[Employee] = []
    visas = 0

    for fields, visa_type, issued_ago, expires_in, status in SAMPLE_ROSTER:
        key = (fields["first_name"], fields["last_name"])
        if key in existing:
            logger.info("seed: %s %s already on roster, skipping", *key)
            continue
        email = f"{key[0].lower()}.{key[1].lower()}@example.com"
        employee = store.add_employee({**fields, "email": email, "status": "active"})
        created.append(employee)
        store.add_visa({
            "employee_id": employee.id,
            "visa_type": visa_type,
            "issue_date": today - timedelta(days=issued_ago),
            "expiry_date": today + timedelta(days=expires_in),
            "status": status,
            "country_issued": "Malta",
            "permit_number": f"MT-{rng.randrange(100000)}",
        })
        visas += 1

    logger.info("seed: company %s got %d employees", store.company_id, len(created))
    return {"employees": len(created), "visas": visas}
