"""
Data models for the Trainer Version Compliance engine.

Inputs (VersionLedger, TrainerRecord) are defined here together with the
derived per-run outputs (ComplianceStatus, Notification) and the error
taxonomy shared by every stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


# ─── Errors ──────────────────────────────────────────────────────────────────

class ComplianceError(Exception):
    """Base class for every failure that aborts a compliance run."""


class DataError(ComplianceError):
    """A single trainer record is structurally invalid."""

    def __init__(self, record_id: str, message: str):
        self.record_id = record_id
        super().__init__(f"Invalid trainer data [{record_id}]: {message}")


class ConfigError(ComplianceError):
    """The version ledger or a run setting is malformed."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(f"Invalid config [{field_name}]: {message}")


# ─── Enumerations ────────────────────────────────────────────────────────────

class Urgency(str, Enum):
    """How urgently a trainer needs to act on their guide version."""
    CRITICAL = "CRITICAL"  # two or more versions behind
    HIGH     = "HIGH"      # one behind and inactive past the threshold
    MEDIUM   = "MEDIUM"    # one behind
    LOW      = "LOW"       # current but inactive
    OK       = "OK"
    UNKNOWN  = "UNKNOWN"   # version not in the ledger


# Report / terminal ordering, most severe first.
SEVERITY_ORDER: tuple[Urgency, ...] = (
    Urgency.CRITICAL,
    Urgency.HIGH,
    Urgency.MEDIUM,
    Urgency.LOW,
    Urgency.OK,
    Urgency.UNKNOWN,
)


# ─── Version Ledger ──────────────────────────────────────────────────────────

class VersionLedger(BaseModel):
    """
    Ordered catalogue of every guide version ever released.

    Position in ``history`` (oldest first) defines how far behind a trainer
    is; identifiers missing from ``history`` are treated as unknown.
    """
    model_config = ConfigDict(frozen=True)

    current_version: str
    history:         list[str] = Field(description="Oldest → newest")
    release_notes:   dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_history(self) -> "VersionLedger":
        # ConfigError is not a ValueError, so pydantic lets it propagate as-is
        if not self.history:
            raise ConfigError("history", "must list at least one version")
        if len(set(self.history)) != len(self.history):
            dupes = sorted({v for v in self.history if self.history.count(v) > 1})
            raise ConfigError("history", f"duplicate versions {dupes}")
        if self.current_version not in self.history:
            raise ConfigError(
                "current_version",
                f"'{self.current_version}' is not present in history {self.history}",
            )
        return self

    @classmethod
    def from_dict(cls, data: Any) -> "VersionLedger":
        """Build a ledger from a plain mapping, reporting type errors as ConfigError."""
        if not isinstance(data, dict):
            raise ConfigError("ledger", "must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            loc = ".".join(str(p) for p in first["loc"]) or "ledger"
            raise ConfigError(loc, first["msg"]) from exc

    # ── Derived helpers ──────────────────────────────────────────────────────

    def index_of(self, version: str) -> Optional[int]:
        try:
            return self.history.index(version)
        except ValueError:
            return None

    def versions_behind(self, version: str) -> Optional[int]:
        idx = self.index_of(version)
        if idx is None:
            return None
        return max(0, self.history.index(self.current_version) - idx)

    def missed_versions(self, version: str) -> list[str]:
        """Versions strictly newer than *version*; empty when it is unknown."""
        idx = self.index_of(version)
        if idx is None:
            return []
        return list(self.history[idx + 1:])

    def release_note(self, version: str) -> str:
        return self.release_notes.get(version, "See release notes.")


# ─── Trainer input record ────────────────────────────────────────────────────

REQUIRED_FIELDS = ("name", "email", "current_version", "last_accessed")


@dataclass(frozen=True)
class TrainerRecord:
    """
    One tracked trainer as last confirmed.
    Records are an immutable snapshot for the duration of a run.
    """
    trainer_id:         str
    name:               str
    email:              str
    region:             str
    current_version:    str
    last_accessed:      Union[str, date, datetime]
    sessions_delivered: int = 0

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0]

    @classmethod
    def from_dict(cls, data: Any, position: int = 0) -> "TrainerRecord":
        """
        Validate one deserialised record.
        Raises DataError naming the record (or its position) on any problem.
        """
        if not isinstance(data, dict):
            raise DataError(f"#{position}", "record must be an object")

        record_id = str(data.get("id") or data.get("email") or f"#{position}")
        missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
        if missing:
            raise DataError(record_id, f"missing required field(s): {', '.join(missing)}")

        sessions = data.get("sessions_delivered", 0)
        if sessions is None:
            sessions = 0
        if isinstance(sessions, bool) or not isinstance(sessions, int) or sessions < 0:
            raise DataError(
                record_id,
                f"sessions_delivered must be a non-negative integer, got {sessions!r}",
            )

        return cls(
            trainer_id         = record_id,
            name               = str(data["name"]).strip(),
            email              = str(data["email"]).strip(),
            region             = str(data.get("region") or "").strip(),
            current_version    = str(data["current_version"]).strip(),
            last_accessed      = data["last_accessed"],
            sessions_delivered = sessions,
        )


# ─── Derived per-run outputs ─────────────────────────────────────────────────

@dataclass(frozen=True)
class ComplianceStatus:
    """Classifier output for a single trainer. Recomputed on every run."""
    record:             TrainerRecord
    versions_behind:    Optional[int]    # None → version unknown to the ledger
    missed_versions:    list[str]
    days_since_active:  int              # negative for future-dated activity
    is_stale:           bool
    urgency:            Urgency
    needs_notification: bool

    @property
    def status_label(self) -> str:
        if self.versions_behind is None:
            return "UNKNOWN"
        if self.versions_behind == 0:
            return "CURRENT"
        if self.versions_behind == 1:
            return "1 VERSION BEHIND"
        return f"{self.versions_behind} VERSIONS BEHIND"

    @property
    def needs_manual_review(self) -> bool:
        return self.urgency is Urgency.UNKNOWN


@dataclass(frozen=True)
class Notification:
    """Ready-to-send message text; delivery is someone else's job."""
    trainer_id: str
    name:       str
    email:      str
    urgency:    Urgency
    subject:    str
    body:       str


@dataclass
class GroupStats:
    """Compliance counts for one region."""
    total:   int = 0
    current: int = 0

    @property
    def compliance_pct(self) -> int:
        return percent(self.current, self.total)


@dataclass
class AggregateStats:
    """Run-wide compliance counts plus the per-region breakdown."""
    total:              int = 0
    current:            int = 0
    one_behind:         int = 0
    two_plus_behind:    int = 0
    stale:              int = 0
    unknown:            int = 0
    needs_notification: int = 0
    by_region:          dict[str, GroupStats] = field(default_factory=dict)

    def pct(self, n: int) -> str:
        """Format *n* as ``"n/total (p%)"``."""
        return f"{n}/{self.total} ({percent(n, self.total)}%)"


def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half-up; 0 when *whole* is 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (whole * 2)
