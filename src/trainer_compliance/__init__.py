"""
trainer_compliance — Trainer Version Compliance & Notification Engine
=====================================================================
Package containing the data models, classifier, renderers and the thin
file/CLI collaborators for the guide version compliance check.

Module map
----------
  models.py          VersionLedger, TrainerRecord, Urgency, ComplianceStatus,
                     aggregate dataclasses and the DataError / ConfigError
                     taxonomy.
  config.py          Settings loaded from .env (threshold, wording, paths).
  classifier.py      Ordered urgency rule table + per-trainer classification.
  notifications.py   Tiered plain-text e-mail rendering.
  aggregator.py      Single-pass run-wide and per-region counts.
  report.py          Deterministic markdown report.
  engine.py          ComplianceEngine: one run, end to end.
  loader.py          JSON file → VersionLedger / TrainerRecord list.
  cli.py             `trainer-compliance` terminal entry point (rich).

Pipeline order
--------------
  VersionLedger + TrainerRecords → classify → {render_notifications, aggregate}
  → render_report
"""
__version__ = "0.1.0"
