"""
Shared pytest fixtures for the trainer compliance test suite.
Factory helpers live in tests/factories.py so they can be imported
directly by test modules as well as being used here.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

# Never let a developer's .env leak into test expectations
for _k in ("STALE_THRESHOLD_DAYS", "GUIDE_URL", "SUPPORT_CONTACT", "CONTENT_NAME", "SIGN_OFF"):
    os.environ.pop(_k, None)


import pytest

from factories import NOW, make_ledger, make_record

from trainer_compliance.config import get_settings
from trainer_compliance.engine import ComplianceEngine


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def ledger():
    return make_ledger()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def engine(settings):
    return ComplianceEngine(settings)


@pytest.fixture
def mixed_records():
    """One trainer per tier, deliberately not in severity order."""
    return [
        make_record("T1", name="Olivia Current",  version="1.2", days_ago=10, region="EMEA"),
        make_record("T2", name="Carl Critical",   version="1.0", days_ago=50, region="NA"),
        make_record("T3", name="Una Known",       version="0.9-beta", days_ago=5, region="NA"),
        make_record("T4", name="Mia Medium",      version="1.1", days_ago=3, region="APAC"),
        make_record("T5", name="Leo Lapsed",      version="1.2", days_ago=80, region="EMEA"),
        make_record("T6", name="Hana High",       version="1.1", days_ago=50, region=""),
    ]


@pytest.fixture
def mixed_run(engine, ledger, mixed_records):
    return engine.run(ledger, mixed_records, now=NOW, stale_threshold_days=45)
