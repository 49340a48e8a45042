"""
classifier.py – Per-trainer version & activity classification
==============================================================
Turns (VersionLedger, TrainerRecord, staleness threshold, now) into exactly
one ComplianceStatus.  Pure: no I/O, no shared state, and no dependency on
any other trainer's record.

Urgency policy
--------------
The tiering lives in ``URGENCY_RULES``: an ordered table of
(tier, predicate) pairs evaluated top to bottom, first match wins.

  versions_behind >= 2                 → CRITICAL
  versions_behind == 1 and stale       → HIGH
  versions_behind == 1                 → MEDIUM
  stale (and current)                  → LOW
  otherwise                            → OK

An unrecognised version short-circuits the table with UNKNOWN.  There is no
tier above CRITICAL: staleness only escalates a single-version gap.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Union

from trainer_compliance.models import (
    ComplianceStatus,
    DataError,
    TrainerRecord,
    Urgency,
    VersionLedger,
)


UrgencyRule = tuple[Urgency, Callable[[int, bool], bool]]

URGENCY_RULES: list[UrgencyRule] = [
    (Urgency.CRITICAL, lambda behind, stale: behind >= 2),
    (Urgency.HIGH,     lambda behind, stale: behind == 1 and stale),
    (Urgency.MEDIUM,   lambda behind, stale: behind == 1),
    (Urgency.LOW,      lambda behind, stale: stale),
    (Urgency.OK,       lambda behind, stale: True),
]


def determine_urgency(
    versions_behind: Optional[int],
    is_stale: bool,
    rules: list[UrgencyRule] = URGENCY_RULES,
) -> Urgency:
    """Apply *rules* in order; ``None`` versions_behind is always UNKNOWN."""
    if versions_behind is None:
        return Urgency.UNKNOWN
    for tier, predicate in rules:
        if predicate(versions_behind, is_stale):
            return tier
    # Only reachable with a custom rule table lacking a catch-all
    return Urgency.OK


# ─── Date handling ────────────────────────────────────────────────────────────

def _as_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    raise TypeError(f"unsupported date type {type(value).__name__}")


def days_since(value: Union[str, date, datetime], now: Union[date, datetime]) -> int:
    """
    Whole calendar days from *value* to *now*, both cut to midnight first,
    so anything earlier the same day counts as 0.  Future dates are negative.
    """
    today = now.date() if isinstance(now, datetime) else now
    return (today - _as_date(value)).days


# ─── Classifier ──────────────────────────────────────────────────────────────

def classify(
    ledger: VersionLedger,
    record: TrainerRecord,
    stale_threshold_days: int,
    now: Union[date, datetime],
) -> ComplianceStatus:
    """Derive the ComplianceStatus for one trainer."""
    behind = ledger.versions_behind(record.current_version)
    missed = ledger.missed_versions(record.current_version)

    try:
        days = days_since(record.last_accessed, now)
    except (TypeError, ValueError) as exc:
        raise DataError(
            record.trainer_id,
            f"unparseable last_accessed {record.last_accessed!r} ({exc})",
        ) from exc

    is_stale = days > stale_threshold_days

    return ComplianceStatus(
        record             = record,
        versions_behind    = behind,
        missed_versions    = missed,
        days_since_active  = days,
        is_stale           = is_stale,
        urgency            = determine_urgency(behind, is_stale),
        needs_notification = behind is not None and behind > 0,
    )
