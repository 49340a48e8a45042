"""
engine.py – One compliance run, end to end
==========================================
  ComplianceEngine.run(ledger, records, now, stale_threshold_days) → ComplianceRun

Pipeline (strictly one direction, nothing mutates an earlier stage's output):

  VersionLedger + TrainerRecords
    → classify()               one ComplianceStatus per record, input order
    → render_notifications()   ┐
    → aggregate()              ┘ both read the same statuses
    → render_report()          stable urgency sort happens here, after
                               every record has been classified

Failure policy: any malformed record aborts the whole run with DataError;
a malformed ledger or threshold aborts with ConfigError before the first
record is classified.  There is no partial report.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Union

from trainer_compliance.aggregator import aggregate
from trainer_compliance.classifier import classify
from trainer_compliance.config import Settings, get_settings, validate_threshold
from trainer_compliance.models import (
    AggregateStats,
    ComplianceStatus,
    ConfigError,
    DataError,
    Notification,
    TrainerRecord,
    VersionLedger,
)
from trainer_compliance.notifications import render_notifications
from trainer_compliance.report import render_report

logger = logging.getLogger(__name__)


@dataclass
class ComplianceRun:
    """Everything one run hands back to the caller. Nothing is persisted."""
    generated_on:         date
    stale_threshold_days: int
    statuses:             list[ComplianceStatus]
    stats:                AggregateStats
    notifications:        list[Notification]
    manual_review:        list[ComplianceStatus] = field(default_factory=list)
    report:               str = ""


class ComplianceEngine:
    """
    Classifies a snapshot of trainer records against an injected
    VersionLedger and renders notifications plus the markdown report.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def run(
        self,
        ledger: VersionLedger,
        records: Iterable[TrainerRecord],
        now: Optional[Union[date, datetime]] = None,
        stale_threshold_days: Optional[int] = None,
    ) -> ComplianceRun:

        # ── 1. Validate run inputs before touching any record ─────────────────
        if not isinstance(ledger, VersionLedger):
            raise ConfigError("ledger", f"expected VersionLedger, got {type(ledger).__name__}")
        threshold = validate_threshold(
            self.settings.compliance.stale_threshold_days
            if stale_threshold_days is None else stale_threshold_days
        )
        records = list(records)
        now = now or datetime.now()
        today = now.date() if isinstance(now, datetime) else now

        seen: set[str] = set()
        for rec in records:
            if rec.trainer_id in seen:
                raise DataError(rec.trainer_id, "duplicate trainer id in input")
            seen.add(rec.trainer_id)

        logger.info(
            "Checking %d trainer(s) against v%s (stale after %d days)",
            len(records), ledger.current_version, threshold,
        )

        # ── 2. Classify every record ─────────────────────────────────────────
        statuses = [classify(ledger, rec, threshold, now) for rec in records]

        for s in statuses:
            if s.days_since_active < 0:
                logger.warning(
                    "Trainer %s has last_accessed in the future (%d days ahead)",
                    s.record.trainer_id, -s.days_since_active,
                )
        manual_review = [s for s in statuses if s.needs_manual_review]
        for s in manual_review:
            logger.warning(
                "Trainer %s reports unknown version %r; flagged for manual review",
                s.record.trainer_id, s.record.current_version,
            )

        # ── 3. Fan out: notifications + aggregates ───────────────────────────
        notifications = render_notifications(statuses, ledger, self.settings)
        stats = aggregate(statuses)

        tiers = Counter(s.urgency.value for s in statuses)
        logger.debug("Urgency breakdown: %s", dict(sorted(tiers.items())))

        # ── 4. Report ────────────────────────────────────────────────────────
        report = render_report(
            stats,
            statuses,
            notifications,
            ledger,
            generated_on         = today,
            stale_threshold_days = threshold,
        )

        logger.info(
            "%d/%d trainer(s) current, %d notification(s) queued",
            stats.current, stats.total, len(notifications),
        )
        return ComplianceRun(
            generated_on         = today,
            stale_threshold_days = threshold,
            statuses             = statuses,
            stats                = stats,
            notifications        = notifications,
            manual_review        = manual_review,
            report               = report,
        )
