"""
report.py – Markdown compliance report
======================================
Deterministic rendering of one compliance run into a markdown document.

Sections
--------
  Compliance Summary      run-wide counts as "n/total (p%)"
  Compliance by Region    current / total / compliance % per region
  Trainer Status          every trainer once, most urgent first
  Action Required         CRITICAL and HIGH trainers (only when any)
  Manual Review           trainers on a version the ledger doesn't know
  Email Notifications     one block per ready-to-send message
  Version History         every release note, current version marked

Ordering within a tier always follows input order, so identical inputs give
byte-identical output.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from trainer_compliance.aggregator import region_label
from trainer_compliance.models import (
    SEVERITY_ORDER,
    AggregateStats,
    ComplianceStatus,
    Notification,
    Urgency,
    VersionLedger,
)

_SEVERITY_RANK: dict[Urgency, int] = {u: i for i, u in enumerate(SEVERITY_ORDER)}


def sort_by_urgency(statuses: Iterable[ComplianceStatus]) -> list[ComplianceStatus]:
    """Most severe first; ``sorted`` is stable so ties keep input order."""
    return sorted(statuses, key=lambda s: _SEVERITY_RANK[s.urgency])


def days_label(days: int, capitalise: bool = True) -> str:
    if days == 0:
        return "Today" if capitalise else "today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"


def _cell(value: object) -> str:
    """Make *value* safe inside one markdown table cell."""
    return " ".join(str(value).split()).replace("|", "\\|")


def _region(status: ComplianceStatus) -> str:
    return region_label(status.record.region)


def render_report(
    stats: AggregateStats,
    statuses: Sequence[ComplianceStatus],
    notifications: Sequence[Notification],
    ledger: VersionLedger,
    *,
    generated_on: date,
    stale_threshold_days: int,
) -> str:
    """Render the full markdown report. *statuses* may be in any order."""
    ordered = sort_by_urgency(statuses)
    latest = ledger.current_version
    lines: list[str] = []
    add = lines.append

    # ── Header ────────────────────────────────────────────────────────────
    add("# Version Compliance Report")
    add("")
    add(f"**Generated:** {generated_on.isoformat()}")
    add(f"**Latest version:** v{latest}")
    add(f"**Trainers tracked:** {stats.total}")
    add("")
    add("---")
    add("")

    # ── Summary ───────────────────────────────────────────────────────────
    add("## Compliance Summary")
    add("")
    add("| Metric | Count |")
    add("|---|---|")
    add(f"| On latest version (v{latest}) | {stats.pct(stats.current)} |")
    add(f"| One version behind | {stats.pct(stats.one_behind)} |")
    add(f"| Two or more versions behind | {stats.pct(stats.two_plus_behind)} |")
    add(f"| Stale (inactive >{stale_threshold_days} days) | {stats.pct(stats.stale)} |")
    add(f"| Unknown version | {stats.pct(stats.unknown)} |")
    add(f"| Notifications queued | {stats.needs_notification} |")
    add("")

    # ── By region ─────────────────────────────────────────────────────────
    add("## Compliance by Region")
    add("")
    add("| Region | Current | Total | Compliance |")
    add("|---|---|---|---|")
    for region, group in stats.by_region.items():
        add(f"| {_cell(region)} | {group.current} | {group.total} | {group.compliance_pct}% |")
    add("")
    add("---")
    add("")

    # ── Trainer table ─────────────────────────────────────────────────────
    add("## Trainer Status")
    add("")
    add("| Name | Region | Version | Status | Last Active | Sessions | Urgency |")
    add("|---|---|---|---|---|---|---|")
    for s in ordered:
        r = s.record
        stale_flag = " ⚠" if s.is_stale else ""
        add(
            f"| {_cell(r.name)} | {_cell(_region(s))} | v{_cell(r.current_version)} | {s.status_label} "
            f"| {days_label(s.days_since_active)}{stale_flag} | {r.sessions_delivered} "
            f"| {s.urgency.value} |"
        )
    add("")
    add("---")
    add("")

    # ── Action required ───────────────────────────────────────────────────
    critical = [s for s in ordered if s.urgency is Urgency.CRITICAL]
    high     = [s for s in ordered if s.urgency is Urgency.HIGH]
    if critical or high:
        add("## Action Required")
        add("")
        for heading, group in (
            ("CRITICAL - contact before their next session", critical),
            ("HIGH - send notification this week", high),
        ):
            if not group:
                continue
            add(f"**{heading}:**")
            add("")
            for s in group:
                add(
                    f"- {s.record.name} ({_region(s)}) - v{s.record.current_version}, "
                    f"last active {days_label(s.days_since_active, capitalise=False)}"
                )
            add("")

    # ── Manual review ─────────────────────────────────────────────────────
    review = [s for s in ordered if s.needs_manual_review]
    if review:
        add("## Manual Review")
        add("")
        add("These trainers report a version the ledger doesn't recognise. "
            "No notification was generated; confirm their version by hand.")
        add("")
        for s in review:
            add(f"- {s.record.name} <{s.record.email}> ({_region(s)}) - "
                f"reported v{s.record.current_version}")
        add("")

    # ── Notifications ─────────────────────────────────────────────────────
    by_id = {n.trainer_id: n for n in notifications}
    outbound = [by_id[s.record.trainer_id] for s in ordered if s.record.trainer_id in by_id]
    if outbound:
        add(f"## Email Notifications ({len(outbound)})")
        add("")
        add("Ready to send. Copy each block and paste into your email client or bulk sender.")
        add("")
        for n in outbound:
            add(f"### {n.name} - {n.urgency.value}")
            add("")
            add(f"**To:** {n.name} <{n.email}>")
            add(f"**Subject:** {n.subject}")
            add("")
            add("```")
            add(n.body)
            add("```")
            add("")
    else:
        add("## Email Notifications")
        add("")
        add("All trainers are on the current version. No notifications required.")
        add("")

    # ── Version history ───────────────────────────────────────────────────
    add("---")
    add("")
    add("## Version History")
    add("")
    extra = [v for v in ledger.release_notes if v not in ledger.history]
    for version in [*ledger.history, *extra]:
        marker = " *(current)*" if version == latest else ""
        add(f"**v{version}**{marker}: {ledger.release_note(version)}")
        add("")

    return "\n".join(lines)
