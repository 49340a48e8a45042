"""
JSON loaders for the ledger and trainer files.

The engine itself never reads files; these helpers are what the CLI uses to
hand it already-parsed values.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from trainer_compliance.models import ConfigError, DataError, TrainerRecord, VersionLedger

logger = logging.getLogger(__name__)


def _read_json(path: Path, error_cls: type, label: str) -> Any:
    if not path.exists():
        raise error_cls(label, f"input file not found: '{path}'")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise error_cls(label, f"'{path}' is not valid UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise error_cls(label, f"could not read '{path}': {exc.strerror or exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise error_cls(label, f"could not parse JSON from '{path}': {exc}") from exc


def load_ledger(path: Union[str, Path]) -> VersionLedger:
    """Read ``{"current_version", "history", "release_notes"}`` from *path*."""
    path = Path(path)
    ledger = VersionLedger.from_dict(_read_json(path, ConfigError, "ledger"))
    logger.debug("Loaded ledger from %s: %d version(s)", path, len(ledger.history))
    return ledger


def load_trainers(path: Union[str, Path]) -> list[TrainerRecord]:
    """Read the ``trainers`` array from *path*; every record is validated."""
    path = Path(path)
    data = _read_json(path, DataError, str(path))
    trainers = data.get("trainers") if isinstance(data, dict) else None
    if not isinstance(trainers, list) or not trainers:
        raise DataError(str(path), "JSON must have a non-empty 'trainers' array")
    records = [TrainerRecord.from_dict(t, position=i) for i, t in enumerate(trainers)]
    logger.debug("Loaded %d trainer record(s) from %s", len(records), path)
    return records
