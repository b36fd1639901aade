"""
Permit Statistics Synthesis

Builds a reproducible permit-statistics record from a relative weight and a
caller-owned generator, plus the sidebar aggregations over many records.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping

from .rng import SeededSequenceGenerator

MIN_TOTAL = 200


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class StatisticsRecord:
    total: int
    approved: int
    pending: int
    denied: int
    avgDays: int
    approvalRate: float
    colorGroup: int
    lastScrapedDays: int

    def as_properties(self) -> Dict[str, Any]:
        """Flattened form merged into region properties, with the `rate` alias."""
        props = asdict(self)
        props["rate"] = self.approvalRate
        return props


def synthesize_stats(factor: float, rng: SeededSequenceGenerator) -> StatisticsRecord:
    """
    Draw a StatisticsRecord from `rng`.

    Draw order is fixed: total, approval rate, pending rate, avg days,
    color group, last-scraped days. Reordering changes every later value.
    """
    total = max(MIN_TOTAL, round_half_up(factor * rng.next_int(800, 3500)))
    approval_rate = 0.45 + rng.next() * 0.45
    approved = round_half_up(total * approval_rate)
    pending_rate = 0.05 + rng.next() * 0.2
    # the two rates can sum past 1; pending gets at most what approval leaves
    pending = min(round_half_up(total * pending_rate), total - approved)
    denied = max(0, total - approved - pending)
    avg_days = rng.next_int(12, 90)
    color_group = rng.next_int(0, 9)
    last_scraped_days = rng.next_int(0, 45)
    return StatisticsRecord(
        total=total,
        approved=approved,
        pending=pending,
        denied=denied,
        avgDays=avg_days,
        approvalRate=approval_rate,
        colorGroup=color_group,
        lastScrapedDays=last_scraped_days,
    )


def aggregate_stats(items: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Sum permit counts over region property maps.

    Missing fields count as zero. `avgDays` is the rounded mean of the items'
    averages, and the shares are percentages of the summed total.
    """
    agg = {"total": 0, "approved": 0, "pending": 0, "denied": 0, "avgDays": 0, "count": 0}
    for item in items:
        agg["total"] += item.get("total") or 0
        agg["approved"] += item.get("approved") or 0
        agg["pending"] += item.get("pending") or 0
        agg["denied"] += item.get("denied") or 0
        agg["avgDays"] += item.get("avgDays") or 0
        agg["count"] += 1
    if agg["count"]:
        agg["avgDays"] = round_half_up(agg["avgDays"] / agg["count"])

    total = agg["total"]
    agg["approvalPct"] = round_half_up(agg["approved"] / total * 100) if total else 0
    agg["shares"] = {
        "approved": agg["approved"] / total * 100 if total else 0.0,
        "pending": agg["pending"] / total * 100 if total else 0.0,
        "denied": agg["denied"] / total * 100 if total else 0.0,
    }
    return agg


def top_hotspots(items: Iterable[Mapping[str, Any]], limit: int = 5) -> List[Mapping[str, Any]]:
    return sorted(items, key=lambda item: item.get("total") or 0, reverse=True)[:limit]
