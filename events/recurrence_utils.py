"""Recurrence utilities: encoding recurrence patterns and expanding them into occurrences.

- ``RecurrenceRuleEncoder`` turns structured parameters into a canonical
  ``DTSTART``/``RRULE`` string. It never reads the clock.
- ``RecurrenceInstanceExpander`` turns a rule string into a finite, ascending list of
  aware UTC datetimes. The only clock read is the default horizon for unbounded rules,
  and the clock is injectable.
"""

import datetime
import itertools
import logging
from collections.abc import Callable, Iterable

from django.utils import timezone

from dateutil.rrule import rrule, rruleset, rrulestr

from events.constants import WEEKDAY_ORDINALS, RecurrenceFrequency
from events.exceptions import InvalidRecurrenceError
from events.services.dataclasses import RecurrencePatternData


logger = logging.getLogger(__name__)

RRULE_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"
DEFAULT_EXPANSION_HORIZON = datetime.timedelta(days=365)
MAX_EXPANDED_OCCURRENCES = 10_000

_WEEKDAY_CODES_BY_ORDINAL = {ordinal: code for code, ordinal in WEEKDAY_ORDINALS.items()}


def to_utc(value: datetime.datetime) -> datetime.datetime:
    """Naive datetimes are taken as UTC, aware ones are converted to it."""
    if timezone.is_naive(value):
        return value.replace(tzinfo=datetime.UTC)
    return value.astimezone(datetime.UTC)


def format_rrule_datetime(value: datetime.datetime) -> str:
    return to_utc(value).strftime(RRULE_DATETIME_FORMAT)


class RecurrenceRuleEncoder:
    """Builds canonical recurrence rule strings from `RecurrencePatternData`."""

    @staticmethod
    def encode_weekdays(codes: Iterable[str]) -> list[str]:
        ordinals: list[int] = []
        for code in codes:
            normalized = code.strip().upper()
            if normalized not in WEEKDAY_ORDINALS:
                raise InvalidRecurrenceError(f'Invalid weekday "{code}".')
            ordinal = WEEKDAY_ORDINALS[normalized]
            if ordinal not in ordinals:
                ordinals.append(ordinal)
        return [_WEEKDAY_CODES_BY_ORDINAL[ordinal] for ordinal in ordinals]

    @staticmethod
    def _encode_bounded_integers(
        values: Iterable[int], lower: int, upper: int, label: str
    ) -> list[str]:
        encoded: list[str] = []
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int) or not lower <= value <= upper:
                raise InvalidRecurrenceError(
                    f"Invalid {label} {value!r}. Must be between {lower}-{upper}."
                )
            if str(value) not in encoded:
                encoded.append(str(value))
        return encoded

    def encode(self, pattern: RecurrencePatternData) -> str:
        """
        Encodes `pattern` as ``DTSTART:<start>\\nRRULE:<parts>``.
        A missing frequency falls back to DAILY. `pattern.start` is recorded as DTSTART with
        second precision.
        :raises InvalidRecurrenceError: on malformed parameters.
        """
        frequency = pattern.frequency or RecurrenceFrequency.DAILY
        if frequency not in RecurrenceFrequency.values:
            raise InvalidRecurrenceError(f'Invalid frequency "{frequency}".')

        interval = 1 if pattern.interval is None else pattern.interval
        if interval < 1:
            raise InvalidRecurrenceError("Interval must be at least 1.")
        if pattern.count is not None and pattern.count < 1:
            raise InvalidRecurrenceError("Count must be at least 1.")

        parts = [f"FREQ={frequency}", f"INTERVAL={interval}"]
        # COUNT governs the series when both bounds are given
        if pattern.until is not None and pattern.count is None:
            parts.append(f"UNTIL={format_rrule_datetime(pattern.until)}")
        if pattern.count is not None:
            parts.append(f"COUNT={pattern.count}")
        if pattern.by_day:
            parts.append(f"BYDAY={','.join(self.encode_weekdays(pattern.by_day))}")
        if pattern.by_month:
            months = self._encode_bounded_integers(pattern.by_month, 1, 12, "month")
            parts.append(f"BYMONTH={','.join(months)}")
        if pattern.by_month_day:
            month_days = self._encode_bounded_integers(pattern.by_month_day, 1, 31, "month day")
            parts.append(f"BYMONTHDAY={','.join(month_days)}")

        return f"DTSTART:{format_rrule_datetime(pattern.start)}\nRRULE:{';'.join(parts)}"


class RecurrenceInstanceExpander:
    """
    Expands rule strings into occurrence datetimes.

    Bound policy when no `hard_end` is given: a rule with COUNT or UNTIL bounds itself,
    so COUNT wins over the default horizon; an unbounded rule stops at `now() + horizon`.
    """

    def __init__(
        self,
        now: Callable[[], datetime.datetime] | None = None,
        horizon: datetime.timedelta = DEFAULT_EXPANSION_HORIZON,
    ):
        self.now = now or timezone.now
        self.horizon = horizon

    @staticmethod
    def parse(rule_string: str, start: datetime.datetime) -> rrule | rruleset:
        try:
            return rrulestr(rule_string, dtstart=start)
        except (ValueError, TypeError) as e:
            raise InvalidRecurrenceError(f"Invalid recurrence rule: {e}") from e

    @staticmethod
    def is_self_bounded(rule_string: str) -> bool:
        """Whether the rule's own COUNT or UNTIL ends the series."""
        for line in rule_string.splitlines():
            body = line.split(":", 1)[1] if ":" in line else line
            if line.upper().startswith("DTSTART"):
                continue
            keys = {part.split("=", 1)[0].strip().upper() for part in body.split(";")}
            if "COUNT" in keys or "UNTIL" in keys:
                return True
        return False

    def get_default_bound(self) -> datetime.datetime:
        return to_utc(self.now()) + self.horizon

    def expand(
        self,
        rule_string: str,
        start: datetime.datetime,
        hard_end: datetime.datetime | None = None,
    ) -> list[datetime.datetime]:
        """
        Returns the occurrences of `rule_string` within `[start, hard_end]`, both inclusive,
        ascending and without duplicates, as aware UTC datetimes.
        `start` is floored to the second to match the precision of encoded rules.
        :raises InvalidRecurrenceError: if the rule string can't be parsed.
        """
        window_start = to_utc(start).replace(microsecond=0)
        rule = self.parse(rule_string, window_start)

        bound: datetime.datetime | None
        if hard_end is not None:
            bound = to_utc(hard_end)
        elif self.is_self_bounded(rule_string):
            bound = None
        else:
            bound = self.get_default_bound()

        if bound is not None and bound < window_start:
            return []

        occurrences = rule.xafter(window_start, inc=True)
        if bound is not None:
            occurrences = itertools.takewhile(
                lambda occurrence: to_utc(occurrence) <= bound, occurrences
            )
        instants = list(itertools.islice(occurrences, MAX_EXPANDED_OCCURRENCES + 1))

        if len(instants) > MAX_EXPANDED_OCCURRENCES:
            logger.warning(
                "Recurrence expansion truncated at %s occurrences for rule %r",
                MAX_EXPANDED_OCCURRENCES,
                rule_string,
            )
            instants = instants[:MAX_EXPANDED_OCCURRENCES]

        return sorted({to_utc(instant) for instant in instants})
