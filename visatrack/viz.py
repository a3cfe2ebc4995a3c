"""
visatrack.viz
=============

Plotting helper used by ``visatrack summary --chart``.

Produces a PNG bar chart of how many employees sit in each effective
compliance status.  *matplotlib* is only imported here, so importing
``visatrack`` alone stays lightweight.
"""
from __future__ import annotations

import os
from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

from .compliance import SelectionPolicy, aggregate, assess
from .models import EffectiveStatus, Employee

_COLOURS = {
    EffectiveStatus.EXPIRED: "#d62828",
    EffectiveStatus.EXPIRING_SOON: "#f4a261",
    EffectiveStatus.VALID: "#2b9348",
    EffectiveStatus.NO_RECORD: "#8d99ae",
}


def compliance_chart(
    employees: Sequence[Employee],
    now: date | datetime,
    out_path: str | os.PathLike = Path("images") / "compliance_snapshot.png",
) -> Path:
    """
    Generate a bar chart of employee counts per effective status.

    Parameters
    ----------
    employees : sequence of Employee
        The tenant roster with nested visas.
    now : date or datetime
        Reference day for the classification.
    out_path : str or Path, default='images/compliance_snapshot.png'
        Where to save the PNG (parent folders are created).

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    counts = Counter(assess(e, now, SelectionPolicy.VALID_OR_LEGACY_ACTIVE).status for e in employees)
    statuses = list(EffectiveStatus)
    ys = [counts.get(s, 0) for s in statuses]
    health = aggregate(employees, now).compliance_health

    plt.figure()
    bars = plt.bar([s.value for s in statuses], ys,
                   color=[_COLOURS[s] for s in statuses], edgecolor="#333")
    # add counts on top of each bar
    for rect, cnt in zip(bars, ys):
        plt.text(rect.get_x() + rect.get_width() / 2,
                 cnt + 0.05,
                 str(cnt),
                 ha="center", va="bottom",
                 fontsize=8, color="#333")
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.title(f"Compliance Snapshot ({health}% healthy)")
    plt.ylabel("Employees")
    plt.tight_layout()

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path
