import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import model_utils.fields

import common.utils.model_utils


def base_model_fields():
    return [
        (
            "id",
            models.BigAutoField(
                auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
            ),
        ),
        (
            "created",
            model_utils.fields.AutoCreatedField(
                db_index=True,
                default=django.utils.timezone.now,
                editable=False,
                verbose_name="created",
            ),
        ),
        (
            "modified",
            model_utils.fields.AutoLastModifiedField(
                db_index=True,
                default=django.utils.timezone.now,
                editable=False,
                verbose_name="modified",
            ),
        ),
        ("meta", models.JSONField(blank=True, default=dict, verbose_name="meta")),
        (
            "organization",
            models.ForeignKey(
                help_text="The organization this model is associated with. Queries should use the `organization` field.",
                on_delete=django.db.models.deletion.CASCADE,
                related_name="+",
                to="organizations.organization",
            ),
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                *base_model_fields(),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("start_at", models.DateTimeField()),
                ("end_at", models.DateTimeField()),
                ("is_recurring", models.BooleanField(default=False)),
                ("is_base_recurring_event", models.BooleanField(default=False)),
                (
                    "base_recurring_event",
                    models.ForeignKey(
                        blank=True,
                        help_text="If this is an instance of a recurring series, points to the base event",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="recurring_instances",
                        to="events.event",
                    ),
                ),
                (
                    "creator",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="RecurrenceRule",
            fields=[
                *base_model_fields(),
                ("recurrence_rule_string", models.TextField()),
                (
                    "frequency",
                    models.CharField(
                        choices=[
                            ("DAILY", "Daily"),
                            ("WEEKLY", "Weekly"),
                            ("MONTHLY", "Monthly"),
                            ("YEARLY", "Yearly"),
                        ],
                        help_text="How often the event repeats (DAILY, WEEKLY, MONTHLY, YEARLY)",
                        max_length=10,
                    ),
                ),
                (
                    "interval",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="The interval between each frequency iteration (e.g., every 2 weeks)",
                    ),
                ),
                (
                    "count",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Number of occurrences after which the recurrence ends",
                        null=True,
                    ),
                ),
                ("recurrence_start_date", models.DateTimeField()),
                (
                    "recurrence_end_date",
                    models.DateTimeField(
                        blank=True,
                        help_text="The date and time until which the recurrence is valid",
                        null=True,
                    ),
                ),
                (
                    "by_day",
                    models.CharField(
                        blank=True,
                        help_text="Comma-separated list of weekdays (e.g., 'MO,WE,FR')",
                        max_length=100,
                    ),
                ),
                (
                    "by_month",
                    models.CharField(
                        blank=True, help_text="Comma-separated list of months (1-12)", max_length=50
                    ),
                ),
                (
                    "by_month_day",
                    models.CharField(
                        blank=True,
                        help_text="Comma-separated list of month days (1-31)",
                        max_length=100,
                    ),
                ),
                (
                    "latest_instance_date",
                    models.DateTimeField(
                        help_text="Start of the latest generated instance of the series"
                    ),
                ),
                (
                    "base_recurring_event",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="owned_recurrence_rule",
                        to="events.event",
                    ),
                ),
                (
                    "creator",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.AddField(
            model_name="event",
            name="recurrence_rule",
            field=models.ForeignKey(
                blank=True,
                help_text="The recurrence rule of the series this event belongs to.",
                null=True,
                on_delete=django.db.models.deletion.CASCADE,
                related_name="events",
                to="events.recurrencerule",
            ),
        ),
        migrations.CreateModel(
            name="EventAttachment",
            fields=[
                *base_model_fields(),
                (
                    "name",
                    models.CharField(
                        default=common.utils.model_utils.generate_unique_id,
                        help_text="Generated storage key of the blob.",
                        max_length=64,
                        unique=True,
                    ),
                ),
                (
                    "upload_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("stored", "Stored"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=10,
                    ),
                ),
                (
                    "media_type",
                    models.CharField(
                        choices=[
                            ("image/avif", "AVIF image"),
                            ("image/jpeg", "JPEG image"),
                            ("image/png", "PNG image"),
                            ("image/webp", "WebP image"),
                            ("video/mp4", "MP4 video"),
                            ("video/webm", "WebM video"),
                        ],
                        max_length=100,
                    ),
                ),
                (
                    "creator",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attachments",
                        to="events.event",
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="event",
            constraint=models.CheckConstraint(
                condition=models.Q(("end_at__gte", models.F("start_at"))),
                name="event_end_at_not_before_start_at",
            ),
        ),
        migrations.AddConstraint(
            model_name="event",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    ("is_base_recurring_event", False),
                    ("base_recurring_event__isnull", True),
                    _connector="OR",
                ),
                name="base_recurring_event_has_no_base",
            ),
        ),
        migrations.AddConstraint(
            model_name="event",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    ("is_base_recurring_event", True),
                    ("is_recurring", False),
                    models.Q(
                        ("base_recurring_event__isnull", False),
                        ("recurrence_rule__isnull", False),
                    ),
                    _connector="OR",
                ),
                name="recurring_instance_has_base_and_rule",
            ),
        ),
    ]
