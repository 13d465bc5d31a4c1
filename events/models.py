from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from attachments.models import StoredAttachmentModel
from events.constants import EventAttachmentMimeType, RecurrenceFrequency, RecurrenceWeekday
from organizations.models import OrganizationModel


class Event(OrganizationModel):
    """
    Represents a calendar event.

    A recurring series is stored as a base event (`is_base_recurring_event=True`) owning a
    `RecurrenceRule`, plus instance rows pointing back at both. Instances beyond the first
    are materialized on demand from the rule.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    start_at = models.DateTimeField()
    end_at = models.DateTimeField()
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_events",
    )
    is_recurring = models.BooleanField(default=False)
    is_base_recurring_event = models.BooleanField(default=False)
    base_recurring_event = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="recurring_instances",
        help_text="If this is an instance of a recurring series, points to the base event",
    )
    recurrence_rule = models.ForeignKey(
        "RecurrenceRule",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="events",
        help_text="The recurrence rule of the series this event belongs to.",
    )

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_at__gte=models.F("start_at")),
                name="event_end_at_not_before_start_at",
            ),
            models.CheckConstraint(
                condition=models.Q(is_base_recurring_event=False)
                | models.Q(base_recurring_event__isnull=True),
                name="base_recurring_event_has_no_base",
            ),
            models.CheckConstraint(
                condition=models.Q(is_base_recurring_event=True)
                | models.Q(is_recurring=False)
                | (
                    models.Q(base_recurring_event__isnull=False)
                    & models.Q(recurrence_rule__isnull=False)
                ),
                name="recurring_instance_has_base_and_rule",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.start_at} - {self.end_at})"

    @property
    def duration(self):
        return self.end_at - self.start_at


class RecurrenceRule(OrganizationModel):
    """
    Represents the recurrence of a series following RFC 5545 (RRULE), owned by the series'
    base event. `recurrence_rule_string` is the canonical encoding the instances are
    expanded from; the structured fields mirror it.
    """

    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    base_recurring_event = models.OneToOneField(
        Event,
        on_delete=models.CASCADE,
        related_name="owned_recurrence_rule",
    )
    recurrence_rule_string = models.TextField()
    frequency = models.CharField(
        max_length=10,
        choices=RecurrenceFrequency,
        help_text="How often the event repeats (DAILY, WEEKLY, MONTHLY, YEARLY)",
    )
    interval = models.PositiveIntegerField(
        default=1, help_text="The interval between each frequency iteration (e.g., every 2 weeks)"
    )
    count = models.PositiveIntegerField(
        null=True, blank=True, help_text="Number of occurrences after which the recurrence ends"
    )
    recurrence_start_date = models.DateTimeField()
    recurrence_end_date = models.DateTimeField(
        null=True, blank=True, help_text="The date and time until which the recurrence is valid"
    )
    by_day = models.CharField(
        max_length=100, blank=True, help_text="Comma-separated list of weekdays (e.g., 'MO,WE,FR')"
    )
    by_month = models.CharField(
        max_length=50, blank=True, help_text="Comma-separated list of months (1-12)"
    )
    by_month_day = models.CharField(
        max_length=100, blank=True, help_text="Comma-separated list of month days (1-31)"
    )
    latest_instance_date = models.DateTimeField(
        help_text="Start of the latest generated instance of the series"
    )

    def __str__(self):
        return f"Recurrence: {self.frequency} every {self.interval}"

    def clean(self):
        """
        Validate the recurrence rule for common issues.
        """

        # Validate weekdays format
        if self.by_day:
            weekdays = [day.strip() for day in self.by_day.split(",")]
            invalid_weekdays = [day for day in weekdays if day not in RecurrenceWeekday.values]
            if invalid_weekdays:
                raise ValidationError(
                    f"Invalid weekdays: {', '.join(invalid_weekdays)}. "
                    "Valid options are: MO, TU, WE, TH, FR, SA, SU"
                )

        # Validate month days
        if self.by_month_day:
            try:
                month_days = [int(day.strip()) for day in self.by_month_day.split(",")]
            except ValueError as e:
                raise ValidationError("Month days must be integers separated by commas.") from e
            invalid_days = [day for day in month_days if day < 1 or day > 31]
            if invalid_days:
                raise ValidationError(
                    f"Invalid month days: {', '.join(map(str, invalid_days))}. "
                    "Must be between 1-31."
                )

        # Validate months
        if self.by_month:
            try:
                months = [int(month.strip()) for month in self.by_month.split(",")]
            except ValueError as e:
                raise ValidationError("Months must be integers separated by commas.") from e
            invalid_months = [month for month in months if month < 1 or month > 12]
            if invalid_months:
                raise ValidationError(
                    f"Invalid months: {', '.join(map(str, invalid_months))}. "
                    "Must be between 1-12."
                )

        # Validate interval
        if self.interval < 1:
            raise ValidationError("Interval must be at least 1.")

        if (
            self.latest_instance_date
            and self.recurrence_start_date
            and self.latest_instance_date < self.recurrence_start_date
        ):
            raise ValidationError("Latest instance date can't precede the recurrence start date.")

    def save(self, *args, **kwargs):
        """Override save to run validation."""
        self.clean()
        super().save(*args, **kwargs)


class EventAttachment(StoredAttachmentModel):
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="attachments",
    )
    media_type = models.CharField(max_length=100, choices=EventAttachmentMimeType)
