"""
notifications.py – Tiered plain-text notification rendering
============================================================
Produces ready-to-send e-mail text for every trainer whose guide version is
behind the ledger's current release.  Output is fully templated, so the same
inputs always give the same text: messages are reviewed and sent by a person,
never auto-dispatched from here.

Tone: direct and collegial, not corporate-form-letter.

Trainers on an unrecognised version never get an automatic message; the
engine surfaces them for manual review instead.
"""

from __future__ import annotations

from typing import Iterable, Optional

from trainer_compliance.config import NotificationConfig, Settings
from trainer_compliance.models import (
    ComplianceStatus,
    Notification,
    TrainerRecord,
    Urgency,
    VersionLedger,
)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


# ─── Subject lines by urgency ────────────────────────────────────────────────

_SUBJECTS: dict[Urgency, str] = {
    Urgency.CRITICAL: "Action needed: your {content} is {behind_text} out of date",
    Urgency.HIGH:     "{Content} update needed - v{latest} is available",
    Urgency.MEDIUM:   "{Content} update available - v{latest}",
}


# ─── Framing sentence by urgency ─────────────────────────────────────────────

_FRAMING: dict[Urgency, str] = {
    Urgency.CRITICAL: (
        "You're currently on v{version}, which is {behind_text} behind the current "
        "release. We ask that all trainers update before their next session to ensure "
        "participants receive consistent, accurate materials."
    ),
    Urgency.HIGH: (
        "You're currently on v{version}. Given that your last session was {days} days "
        "ago, you may be due for a refresh before your next delivery."
    ),
    Urgency.MEDIUM: (
        "You're currently on v{version}. The update is a quick read - most of the "
        "changes are in {scope}."
    ),
}


def render_notification(
    record: TrainerRecord,
    status: ComplianceStatus,
    ledger: VersionLedger,
    config: NotificationConfig,
) -> Optional[Notification]:
    """
    Build the message for one trainer, or return None when no notification is
    needed.  Only CRITICAL / HIGH / MEDIUM statuses ever reach the templates.
    """
    if not status.needs_notification:
        return None

    behind = status.versions_behind
    fields = {
        "content":     config.content_name,
        "Content":     config.content_name[:1].upper() + config.content_name[1:],
        "latest":      ledger.current_version,
        "version":     record.current_version,
        "behind_text": _plural(behind, "version"),
        "days":        status.days_since_active,
        "scope":       "one section" if len(status.missed_versions) == 1 else "a few sections",
    }

    subject = _SUBJECTS[status.urgency].format(**fields)

    change_lines = "\n".join(
        f"  v{v}: {ledger.release_note(v)}" for v in status.missed_versions
    )

    paragraphs = [
        f"Hi {record.first_name},",
        _FRAMING[status.urgency].format(**fields),
        f"Here's what changed since your version:\n\n{change_lines}",
        f"You can download the latest guide here:\n{config.guide_url}",
    ]
    if record.sessions_delivered > 0:
        paragraphs.append(
            f"Your {_plural(record.sessions_delivered, 'session')} to date are logged - "
            "thank you for the effort you've put in."
        )
    paragraphs.append(
        "If you have any questions or run into issues with the update, reply to this "
        f"email or reach the training team at {config.support_contact}."
    )
    paragraphs.append(f"Thanks,\n{config.sign_off}")

    return Notification(
        trainer_id = record.trainer_id,
        name       = record.name,
        email      = record.email,
        urgency    = status.urgency,
        subject    = subject,
        body       = "\n\n".join(paragraphs),
    )


def render_notifications(
    statuses: Iterable[ComplianceStatus],
    ledger: VersionLedger,
    settings: Settings,
) -> list[Notification]:
    """Render every needed notification, keeping input order."""
    out: list[Notification] = []
    for status in statuses:
        note = render_notification(status.record, status, ledger, settings.notification)
        if note is not None:
            out.append(note)
    return out
