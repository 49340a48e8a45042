"""
Tests for the classifier (classifier.py).
Validates the urgency rule table rule-by-rule, day arithmetic and the
concrete trainer scenarios used across the docs.
"""
from datetime import date, datetime, timezone

import pytest
from factories import NOW, make_ledger, make_record

from trainer_compliance.classifier import (
    URGENCY_RULES,
    classify,
    days_since,
    determine_urgency,
)
from trainer_compliance.models import DataError, Urgency


THRESHOLD = 45


# ─── Rule table ───────────────────────────────────────────────────────────────

class TestUrgencyRules:
    @pytest.mark.parametrize("behind,stale,expected", [
        (2, False, Urgency.CRITICAL),
        (2, True,  Urgency.CRITICAL),
        (5, True,  Urgency.CRITICAL),
        (1, True,  Urgency.HIGH),
        (1, False, Urgency.MEDIUM),
        (0, True,  Urgency.LOW),
        (0, False, Urgency.OK),
        (None, True,  Urgency.UNKNOWN),
        (None, False, Urgency.UNKNOWN),
    ])
    def test_decision_table(self, behind, stale, expected):
        assert determine_urgency(behind, stale) is expected

    def test_rule_order_is_most_severe_first(self):
        assert [tier for tier, _ in URGENCY_RULES] == [
            Urgency.CRITICAL, Urgency.HIGH, Urgency.MEDIUM, Urgency.LOW, Urgency.OK,
        ]

    def test_last_rule_is_catch_all(self):
        _, predicate = URGENCY_RULES[-1]
        assert predicate(0, False)

    def test_custom_rule_table(self):
        """The policy is data: a caller can swap in a stricter table."""
        strict = [(Urgency.CRITICAL, lambda b, s: b >= 1)] + URGENCY_RULES
        assert determine_urgency(1, False, rules=strict) is Urgency.CRITICAL
        assert determine_urgency(0, False, rules=strict) is Urgency.OK


# ─── Day arithmetic ───────────────────────────────────────────────────────────

class TestDaysSince:
    def test_same_calendar_day_is_zero(self):
        assert days_since("2026-03-01T23:59:00", datetime(2026, 3, 1, 0, 1)) == 0

    def test_time_of_day_ignored(self):
        assert days_since("2026-02-28T23:59:00", datetime(2026, 3, 1, 0, 1)) == 1

    def test_plain_date_string(self):
        assert days_since("2026-01-10", NOW) == 50

    def test_zulu_timestamp(self):
        assert days_since("2026-02-27T10:00:00Z", NOW) == 2

    def test_date_and_datetime_objects(self):
        assert days_since(date(2026, 2, 19), NOW) == 10
        assert days_since(datetime(2026, 2, 19, 18, 0, tzinfo=timezone.utc), NOW) == 10

    def test_now_as_date(self):
        assert days_since("2026-02-01", date(2026, 3, 1)) == 28

    def test_future_date_is_negative(self):
        assert days_since("2026-03-05", NOW) == -4

    @pytest.mark.parametrize("bad", ["yesterday", "2026-13-01", "", 20260101])
    def test_unparseable_values_raise(self, bad):
        with pytest.raises((TypeError, ValueError)):
            days_since(bad, NOW)


# ─── classify() ───────────────────────────────────────────────────────────────

class TestScenarios:
    def test_scenario_a_two_behind_and_stale(self):
        s = classify(make_ledger(), make_record(version="1.0", days_ago=50), THRESHOLD, NOW)
        assert s.versions_behind == 2
        assert s.is_stale is True
        assert s.urgency is Urgency.CRITICAL
        assert s.needs_notification is True
        assert s.missed_versions == ["1.1", "1.2"]

    def test_scenario_b_current_and_active(self):
        s = classify(make_ledger(), make_record(version="1.2", days_ago=10), THRESHOLD, NOW)
        assert s.versions_behind == 0
        assert s.is_stale is False
        assert s.urgency is Urgency.OK
        assert s.needs_notification is False
        assert s.status_label == "CURRENT"

    def test_scenario_c_one_behind_and_stale(self):
        s = classify(make_ledger(), make_record(version="1.1", days_ago=50), THRESHOLD, NOW)
        assert s.versions_behind == 1
        assert s.is_stale is True
        assert s.urgency is Urgency.HIGH
        assert s.status_label == "1 VERSION BEHIND"

    def test_scenario_d_unknown_version(self):
        s = classify(make_ledger(), make_record(version="0.9-beta", days_ago=50), THRESHOLD, NOW)
        assert s.versions_behind is None
        assert s.missed_versions == []
        assert s.urgency is Urgency.UNKNOWN
        assert s.needs_notification is False
        assert s.needs_manual_review is True
        assert s.status_label == "UNKNOWN"

    def test_unknown_version_still_computes_staleness(self):
        s = classify(make_ledger(), make_record(version="x", days_ago=90), THRESHOLD, NOW)
        assert s.days_since_active == 90
        assert s.is_stale is True

    def test_current_but_stale_is_low(self):
        s = classify(make_ledger(), make_record(version="1.2", days_ago=46), THRESHOLD, NOW)
        assert s.urgency is Urgency.LOW
        assert s.needs_notification is False

    def test_threshold_boundary_is_not_stale(self):
        s = classify(make_ledger(), make_record(version="1.1", days_ago=45), THRESHOLD, NOW)
        assert s.is_stale is False
        assert s.urgency is Urgency.MEDIUM

    def test_future_activity_is_not_stale(self):
        s = classify(make_ledger(), make_record(version="1.2", days_ago=-3), THRESHOLD, NOW)
        assert s.days_since_active == -3
        assert s.is_stale is False
        assert s.urgency is Urgency.OK

    def test_record_is_carried_unchanged(self):
        rec = make_record(version="1.1")
        s = classify(make_ledger(), rec, THRESHOLD, NOW)
        assert s.record is rec


class TestClassifierProperties:
    @pytest.mark.parametrize("days", [0, 10, 45, 46, 400])
    def test_current_version_never_above_low(self, days):
        s = classify(make_ledger(), make_record(version="1.2", days_ago=days), THRESHOLD, NOW)
        assert s.versions_behind == 0
        assert s.urgency in (Urgency.OK, Urgency.LOW)

    @pytest.mark.parametrize("days", [0, 50, 400])
    def test_two_plus_behind_always_critical(self, days):
        ledger = make_ledger(history=["0.8", "0.9", "1.0", "1.1", "1.2"])
        for version in ("0.8", "0.9", "1.0"):
            s = classify(ledger, make_record(version=version, days_ago=days), THRESHOLD, NOW)
            assert s.versions_behind >= 2
            assert s.urgency is Urgency.CRITICAL

    @pytest.mark.parametrize("version", ["1.0", "1.1", "1.2"])
    def test_missed_length_matches_versions_behind(self, version):
        s = classify(make_ledger(), make_record(version=version), THRESHOLD, NOW)
        assert len(s.missed_versions) == s.versions_behind

    def test_classification_is_deterministic(self):
        rec = make_record(version="1.0", days_ago=12)
        assert classify(make_ledger(), rec, THRESHOLD, NOW) == classify(make_ledger(), rec, THRESHOLD, NOW)


class TestClassifierErrors:
    def test_bad_date_raises_data_error_naming_record(self):
        rec = make_record("T042", last_accessed="last tuesday")
        with pytest.raises(DataError) as exc:
            classify(make_ledger(), rec, THRESHOLD, NOW)
        assert exc.value.record_id == "T042"
        assert "last tuesday" in str(exc.value)

    def test_non_string_date_raises_data_error(self):
        rec = make_record("T043", last_accessed=12345)
        with pytest.raises(DataError):
            classify(make_ledger(), rec, THRESHOLD, NOW)

    def test_unknown_version_never_raises(self):
        classify(make_ledger(), make_record(version="totally-made-up"), THRESHOLD, NOW)
