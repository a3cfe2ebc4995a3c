"""
visatrack.cli
=============

Command line helpers for operators.

Examples
--------
$ visatrack init-db                              # first‑time table creation
$ visatrack provision auth0|42 "Malta Tech Solutions Ltd" --email hr@maltatech.com
$ visatrack seed auth0|42                        # demo roster for that tenant
$ visatrack summary auth0|42 --chart images/snapshot.png
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from datetime import date
from typing import List, Optional

from visatrack.compliance import aggregate, health_band
from visatrack.db import SessionLocal, create_all
from visatrack.seed import seed_demo_data
from visatrack.store import TenantStore
from visatrack.tenancy import ensure_company_for_user, resolve_company_id


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="visatrack",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            VisaTrack utilities
            -------------------
            init-db     Create all tables (safe if they already exist)
            provision   Link a user to a (new) company
            seed        Insert the Malta demo roster into a user's company
            summary     Print the compliance summary for a user's company
            """
        ),
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables")

    p = sub.add_parser("provision", help="ensure a company exists for a user")
    p.add_argument("user_id")
    p.add_argument("company_name")
    p.add_argument("--email")

    p = sub.add_parser("seed", help="seed demo employees")
    p.add_argument("user_id")

    p = sub.add_parser("summary", help="print fleet compliance summary")
    p.add_argument("user_id")
    p.add_argument("--chart", metavar="PATH", help="also write a PNG bar chart")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "init-db":
        create_all()
        print("✅ visatrack schema initialised")
        return 0

    with SessionLocal() as session:
        if args.command == "provision":
            company_id, created = ensure_company_for_user(
                session, args.user_id, args.company_name, email=args.email
            )
            print(f"{'created' if created else 'existing'} company {company_id}")
            return 0

        company_id = resolve_company_id(session, args.user_id)
        if company_id is None:
            print(f"user {args.user_id} has no company; run 'visatrack provision' first", file=sys.stderr)
            return 1
        store = TenantStore(session, company_id)
        today = date.today()

        if args.command == "seed":
            print(json.dumps(seed_demo_data(store, today)))
            return 0

        employees = store.list_employees()
        summary = aggregate(employees, today)
        payload = summary.as_dict()
        payload["health_band"] = health_band(summary.compliance_health).value
        print(json.dumps(payload, indent=2))
        if args.chart:
            from visatrack.viz import compliance_chart

            print(f"chart written to {compliance_chart(employees, today, args.chart)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
