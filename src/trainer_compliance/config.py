"""
config.py — Central settings for the Trainer Version Compliance engine
======================================================================
All configuration is loaded from environment variables / .env file.
Copy .env.example → .env and fill in your values.

The version ledger itself is NOT configured here: it is loaded from its own
file and passed into the engine explicitly for every run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from trainer_compliance.models import ConfigError

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)


DEFAULT_STALE_THRESHOLD_DAYS = 45
DEFAULT_GUIDE_URL            = "https://drive.google.com/[your-guide-folder]"
DEFAULT_SUPPORT_CONTACT      = "training-team@yourcompany.com"


# ─── Helpers ────────────────────────────────────────────────────────────────

def _is_placeholder(value: str) -> bool:
    """Return True if the value looks like an unfilled template placeholder."""
    return (
        not value
        or "<" in value
        or "[your-" in value
        or "yourcompany" in value
        or value.startswith("your-")
        or value == "PLACEHOLDER"
    )


def validate_threshold(value: object, field_name: str = "stale_threshold_days") -> int:
    """Staleness threshold must be a positive whole number of days."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(field_name, f"must be a positive integer, got {value!r}")
    return value


# ─── Compliance policy ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class ComplianceConfig:
    stale_threshold_days: int   # inactivity beyond this many days is "stale"


# ─── Notification wording ────────────────────────────────────────────────────

@dataclass(frozen=True)
class NotificationConfig:
    guide_url:       str
    support_contact: str
    content_name:    str        # e.g. "facilitator guide"
    sign_off:        str

    @property
    def is_configured(self) -> bool:
        """True when the link and contact are real (non-placeholder) values."""
        return not _is_placeholder(self.guide_url) and not _is_placeholder(self.support_contact)


# ─── File locations used by the CLI ──────────────────────────────────────────

@dataclass(frozen=True)
class PathsConfig:
    trainer_data: str
    ledger:       str
    report:       str


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    compliance:   ComplianceConfig
    notification: NotificationConfig
    paths:        PathsConfig

    def status_summary(self) -> dict[str, str]:
        """Return a dict of setting → status badge for the terminal header."""
        def badge(ok: bool) -> str:
            return "🟢 Set" if ok else "⚪ Placeholder"

        return {
            "Guide URL":       badge(not _is_placeholder(self.notification.guide_url)),
            "Support contact": badge(not _is_placeholder(self.notification.support_contact)),
        }


def get_settings() -> Settings:
    """Load all configuration from environment variables."""
    _str = lambda k, d="": os.getenv(k, d).strip()

    raw_days = _str("STALE_THRESHOLD_DAYS", str(DEFAULT_STALE_THRESHOLD_DAYS))
    try:
        days = int(raw_days)
    except ValueError:
        raise ConfigError("STALE_THRESHOLD_DAYS", f"not an integer: {raw_days!r}") from None

    return Settings(
        compliance=ComplianceConfig(
            stale_threshold_days = validate_threshold(days, "STALE_THRESHOLD_DAYS"),
        ),
        notification=NotificationConfig(
            guide_url       = _str("GUIDE_URL", DEFAULT_GUIDE_URL),
            support_contact = _str("SUPPORT_CONTACT", DEFAULT_SUPPORT_CONTACT),
            content_name    = _str("CONTENT_NAME", "facilitator guide"),
            sign_off        = _str("SIGN_OFF", "Training Team"),
        ),
        paths=PathsConfig(
            trainer_data = _str("TRAINER_DATA_PATH", "sample-data/trainer-versions.json"),
            ledger       = _str("LEDGER_PATH", "sample-data/version-ledger.json"),
            report       = _str("REPORT_OUTPUT_PATH", "output/version-report.md"),
        ),
    )
