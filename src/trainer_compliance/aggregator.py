"""
Single-pass aggregation of ComplianceStatus objects into run-wide and
per-region compliance counts.
"""

from __future__ import annotations

from typing import Iterable

from trainer_compliance.models import AggregateStats, ComplianceStatus, GroupStats

UNKNOWN_REGION = "Unknown"


def region_label(region: str) -> str:
    """Grouping key for *region*; blank or whitespace-only becomes "Unknown"."""
    return region.strip() or UNKNOWN_REGION


def aggregate(statuses: Iterable[ComplianceStatus]) -> AggregateStats:
    """
    Fold *statuses* into an AggregateStats in one pass.
    Regions keep first-seen order; blank regions are grouped as "Unknown".
    """
    stats = AggregateStats()
    for s in statuses:
        stats.total += 1
        behind = s.versions_behind
        if behind is None:
            stats.unknown += 1
        elif behind == 0:
            stats.current += 1
        elif behind == 1:
            stats.one_behind += 1
        else:
            stats.two_plus_behind += 1
        if s.is_stale:
            stats.stale += 1
        if s.needs_notification:
            stats.needs_notification += 1

        region = region_label(s.record.region)
        group = stats.by_region.setdefault(region, GroupStats())
        group.total += 1
        if behind == 0:
            group.current += 1
    return stats
