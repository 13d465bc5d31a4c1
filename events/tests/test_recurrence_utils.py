import datetime
import logging

import pytest

from events import recurrence_utils
from events.constants import RecurrenceFrequency
from events.exceptions import InvalidRecurrenceError
from events.recurrence_utils import (
    RecurrenceInstanceExpander,
    RecurrenceRuleEncoder,
    format_rrule_datetime,
    to_utc,
)
from events.services.dataclasses import RecurrencePatternData


# Helpers
def _dt(year, month, day, hour=9, minute=0):
    return datetime.datetime(year, month, day, hour, minute, tzinfo=datetime.UTC)


@pytest.fixture
def encoder():
    return RecurrenceRuleEncoder()


class TestToUtc:
    def test_naive_datetime_is_taken_as_utc(self):
        assert to_utc(datetime.datetime(2024, 1, 1, 9, 0)) == _dt(2024, 1, 1)

    def test_aware_datetime_is_converted(self):
        brasilia = datetime.timezone(datetime.timedelta(hours=-3))
        value = datetime.datetime(2024, 1, 1, 9, 0, tzinfo=brasilia)
        assert to_utc(value) == _dt(2024, 1, 1, 12)
        assert to_utc(value).tzinfo == datetime.UTC

    def test_format_drops_microseconds(self):
        assert format_rrule_datetime(_dt(2024, 1, 1).replace(microsecond=500)) == (
            "20240101T090000Z"
        )


class TestRecurrenceRuleEncoder:
    def test_encode_weekly_with_count(self, encoder):
        pattern = RecurrencePatternData(
            start=_dt(2024, 1, 1),
            frequency=RecurrenceFrequency.WEEKLY,
            count=6,
            by_day=["MO", "WE", "FR"],
        )

        assert encoder.encode(pattern) == (
            "DTSTART:20240101T090000Z\nRRULE:FREQ=WEEKLY;INTERVAL=1;COUNT=6;BYDAY=MO,WE,FR"
        )

    def test_encode_defaults_to_daily(self, encoder):
        pattern = RecurrencePatternData(start=_dt(2024, 1, 1))

        assert encoder.encode(pattern) == "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1"

    def test_encode_emits_parts_in_canonical_order(self, encoder):
        pattern = RecurrencePatternData(
            start=_dt(2024, 1, 1),
            frequency=RecurrenceFrequency.YEARLY,
            interval=2,
            until=_dt(2030, 12, 31, 0),
            by_day=["FR"],
            by_month=[1, 6],
            by_month_day=[13],
        )

        assert encoder.encode(pattern) == (
            "DTSTART:20240101T090000Z\n"
            "RRULE:FREQ=YEARLY;INTERVAL=2;UNTIL=20301231T000000Z;BYDAY=FR;BYMONTH=1,6;BYMONTHDAY=13"
        )

    def test_encode_prefers_count_over_until(self, encoder):
        pattern = RecurrencePatternData(
            start=_dt(2024, 1, 1),
            frequency=RecurrenceFrequency.WEEKLY,
            count=6,
            until=_dt(2024, 3, 1),
            by_day=["MO", "WE", "FR"],
        )

        assert encoder.encode(pattern) == (
            "DTSTART:20240101T090000Z\nRRULE:FREQ=WEEKLY;INTERVAL=1;COUNT=6;BYDAY=MO,WE,FR"
        )

    def test_encode_converts_start_to_utc(self, encoder):
        brasilia = datetime.timezone(datetime.timedelta(hours=-3))
        pattern = RecurrencePatternData(
            start=datetime.datetime(2024, 1, 1, 22, 30, tzinfo=brasilia)
        )

        assert encoder.encode(pattern).startswith("DTSTART:20240102T013000Z\n")

    def test_encode_normalizes_and_deduplicates_weekdays(self, encoder):
        pattern = RecurrencePatternData(start=_dt(2024, 1, 1), by_day=["mo", "WE", "MO"])

        assert encoder.encode(pattern).endswith(";BYDAY=MO,WE")

    def test_encode_weekdays_maps_through_ordinals(self):
        assert RecurrenceRuleEncoder.encode_weekdays(["su", "sa"]) == ["SU", "SA"]

    @pytest.mark.parametrize(
        "pattern_kwargs",
        [
            {"by_day": ["XX"]},
            {"interval": 0},
            {"count": 0},
            {"by_month": [13]},
            {"by_month_day": [0]},
            {"by_month_day": [32]},
            {"frequency": "HOURLY"},
        ],
    )
    def test_encode_rejects_malformed_parameters(self, encoder, pattern_kwargs):
        pattern = RecurrencePatternData(start=_dt(2024, 1, 1), **pattern_kwargs)

        with pytest.raises(InvalidRecurrenceError):
            encoder.encode(pattern)

    def test_invalid_recurrence_error_is_a_value_error(self):
        assert issubclass(InvalidRecurrenceError, ValueError)


class TestRecurrenceInstanceExpander:
    def test_weekly_on_weekdays_with_count(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=WEEKLY;INTERVAL=1;COUNT=6;BYDAY=MO,WE,FR"

        instants = recurrence_expander.expand(rule_string, _dt(2024, 1, 1))

        assert instants == [
            _dt(2024, 1, 1),
            _dt(2024, 1, 3),
            _dt(2024, 1, 5),
            _dt(2024, 1, 8),
            _dt(2024, 1, 10),
            _dt(2024, 1, 12),
        ]
        assert all(instant.tzinfo == datetime.UTC for instant in instants)

    def test_count_wins_over_horizon(self, fixed_now):
        expander = RecurrenceInstanceExpander(
            now=lambda: fixed_now, horizon=datetime.timedelta(days=1)
        )
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1;COUNT=5"

        assert len(expander.expand(rule_string, _dt(2024, 1, 1))) == 5

    def test_until_bounds_the_series(self, recurrence_expander):
        rule_string = (
            "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1;UNTIL=20240104T090000Z"
        )

        assert recurrence_expander.expand(rule_string, _dt(2024, 1, 1)) == [
            _dt(2024, 1, 1),
            _dt(2024, 1, 2),
            _dt(2024, 1, 3),
            _dt(2024, 1, 4),
        ]

    def test_unbounded_rule_stops_at_default_horizon(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1"

        instants = recurrence_expander.expand(rule_string, _dt(2024, 1, 1))

        # 2024 is a leap year, so now + 365 days is Dec 31 at the same time, inclusive
        assert len(instants) == 366
        assert instants[-1] == _dt(2024, 12, 31)

    def test_default_bound_reads_the_injected_clock(self, recurrence_expander, fixed_now):
        assert recurrence_expander.get_default_bound() == fixed_now + datetime.timedelta(
            days=365
        )

    def test_hard_end_is_inclusive(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1"

        instants = recurrence_expander.expand(
            rule_string, _dt(2024, 1, 1), hard_end=_dt(2024, 1, 3)
        )

        assert instants == [_dt(2024, 1, 1), _dt(2024, 1, 2), _dt(2024, 1, 3)]

    def test_hard_end_overrides_count(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1;COUNT=10"

        instants = recurrence_expander.expand(
            rule_string, _dt(2024, 1, 1), hard_end=_dt(2024, 1, 2)
        )

        assert instants == [_dt(2024, 1, 1), _dt(2024, 1, 2)]

    def test_hard_end_before_start_yields_nothing(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1"

        assert (
            recurrence_expander.expand(rule_string, _dt(2024, 1, 5), hard_end=_dt(2024, 1, 1))
            == []
        )

    def test_window_start_after_anchor_keeps_series_cardinality(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1;COUNT=5"

        instants = recurrence_expander.expand(rule_string, _dt(2024, 1, 3))

        assert instants == [_dt(2024, 1, 3), _dt(2024, 1, 4), _dt(2024, 1, 5)]

    def test_start_is_floored_to_the_second(self, recurrence_expander):
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1;COUNT=2"

        instants = recurrence_expander.expand(
            rule_string, _dt(2024, 1, 1).replace(microsecond=250_000)
        )

        assert instants == [_dt(2024, 1, 1), _dt(2024, 1, 2)]

    def test_anchor_outside_pattern_is_not_an_occurrence(self, recurrence_expander):
        # Jan 2 2024 is a Tuesday
        rule_string = "DTSTART:20240102T090000Z\nRRULE:FREQ=WEEKLY;INTERVAL=1;COUNT=2;BYDAY=MO"

        assert recurrence_expander.expand(rule_string, _dt(2024, 1, 2)) == [
            _dt(2024, 1, 8),
            _dt(2024, 1, 15),
        ]

    def test_expansion_is_capped(self, recurrence_expander, monkeypatch, caplog):
        monkeypatch.setattr(recurrence_utils, "MAX_EXPANDED_OCCURRENCES", 5)
        rule_string = "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1"

        with caplog.at_level(logging.WARNING, logger="events.recurrence_utils"):
            instants = recurrence_expander.expand(rule_string, _dt(2024, 1, 1))

        assert len(instants) == 5
        assert instants[-1] == _dt(2024, 1, 5)
        assert "truncated" in caplog.text

    @pytest.mark.parametrize(
        "rule_string",
        [
            "DTSTART:20240101T090000Z\nRRULE:FREQ=SOMETIMES",
            "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;FOO=1",
        ],
    )
    def test_expand_rejects_unparseable_rules(self, recurrence_expander, rule_string):
        with pytest.raises(InvalidRecurrenceError):
            recurrence_expander.expand(rule_string, _dt(2024, 1, 1))

    @pytest.mark.parametrize(
        ("rule_string", "expected"),
        [
            ("DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;COUNT=3", True),
            ("DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;UNTIL=20240201T000000Z", True),
            ("DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=2", False),
            ("RRULE:FREQ=WEEKLY;BYDAY=MO", False),
        ],
    )
    def test_is_self_bounded(self, rule_string, expected):
        assert RecurrenceInstanceExpander.is_self_bounded(rule_string) is expected

    def test_encoded_rule_round_trips_through_expander(self, encoder, recurrence_expander):
        pattern = RecurrencePatternData(
            start=_dt(2024, 1, 31),
            frequency=RecurrenceFrequency.MONTHLY,
            count=3,
            by_month_day=[31],
        )

        instants = recurrence_expander.expand(encoder.encode(pattern), pattern.start)

        # months without a 31st are skipped
        assert instants == [_dt(2024, 1, 31), _dt(2024, 3, 31), _dt(2024, 5, 31)]
