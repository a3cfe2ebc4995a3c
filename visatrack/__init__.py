"""
VisaTrack
=========

Work‑permit and visa compliance tracking for employers of third‑country
nationals (TCNs) in Malta.

Import structure
----------------
`import visatrack` is intentionally cheap: the engine modules are
stdlib‑only.  The persistence layer (*sqlmodel*) and plotting helpers
(*matplotlib*) are only imported when you access :pymod:`visatrack.db`,
:pymod:`visatrack.store` or :pymod:`visatrack.viz`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`visatrack.models`      – Employee / Visa / ComplianceAlert dataclasses + enums
- :pymod:`visatrack.dates`       – tolerant date parsing, civil‑day difference
- :pymod:`visatrack.compliance`  – classification, active‑visa selection, fleet summary
- :pymod:`visatrack.alerts`      – alert lifecycle guard (`advance_alert`) and icons
- :pymod:`visatrack.cache`       – injectable TTL cache
- :pymod:`visatrack.store`       – tenant‑scoped SQLModel persistence
- :pymod:`visatrack.tenancy`     – explicit "ensure company for user"
- :pymod:`visatrack.viz`         – compliance bar chart

Quick start
-----------
>>> from datetime import date
>>> from visatrack.models import Employee, Visa
>>> from visatrack.compliance import aggregate
>>> emp = Employee("e1", "c1", "Maria", "Santos",
...                visas=[Visa("v1", "e1", "Single Permit", date(2025, 3, 1))])
>>> aggregate([emp], date(2025, 1, 1)).expiring_soon
1
"""

__all__ = [
    "models",
    "dates",
    "compliance",
    "alerts",
    "cache",
    "store",
    "tenancy",
    "viz",
]

__version__ = "0.1.0"
