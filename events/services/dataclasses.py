import datetime
from dataclasses import dataclass
from dataclasses import field as dataclass_field

from attachments.services.dataclasses import AttachmentInputData


@dataclass
class RecurrencePatternData:
    """Structured recurrence parameters anchored at `start`."""

    start: datetime.datetime
    frequency: str | None = None
    interval: int | None = None
    count: int | None = None
    until: datetime.datetime | None = None
    by_day: list[str] = dataclass_field(default_factory=list)
    by_month: list[int] = dataclass_field(default_factory=list)
    by_month_day: list[int] = dataclass_field(default_factory=list)


@dataclass
class RecurrenceInputData:
    frequency: str | None = None
    interval: int | None = None
    count: int | None = None
    recurrence_end_date: datetime.datetime | None = None
    by_day: list[str] = dataclass_field(default_factory=list)
    by_month: list[int] = dataclass_field(default_factory=list)
    by_month_day: list[int] = dataclass_field(default_factory=list)

    def to_pattern(self, start: datetime.datetime) -> RecurrencePatternData:
        return RecurrencePatternData(
            start=start,
            frequency=self.frequency,
            interval=self.interval,
            count=self.count,
            until=self.recurrence_end_date,
            by_day=list(self.by_day),
            by_month=list(self.by_month),
            by_month_day=list(self.by_month_day),
        )


@dataclass
class EventInputData:
    name: str
    organization_id: int
    start_at: datetime.datetime
    end_at: datetime.datetime
    description: str = ""
    recurrence: RecurrenceInputData | None = None
    attachments: list[AttachmentInputData] = dataclass_field(default_factory=list)
