from django.contrib import admin

from events.models import Event, EventAttachment, RecurrenceRule
from organizations.admin import OrganizationModelAdmin


@admin.register(Event)
class EventAdmin(OrganizationModelAdmin):
    list_display = (
        "id",
        "name",
        "organization",
        "start_at",
        "end_at",
        "is_recurring",
        "is_base_recurring_event",
        "created",
    )
    list_filter = ("is_recurring", "is_base_recurring_event")
    search_fields = ("name",)
    raw_id_fields = ("organization", "creator", "base_recurring_event", "recurrence_rule")
    date_hierarchy = "start_at"


@admin.register(RecurrenceRule)
class RecurrenceRuleAdmin(OrganizationModelAdmin):
    list_display = (
        "id",
        "base_recurring_event",
        "frequency",
        "interval",
        "count",
        "recurrence_end_date",
        "latest_instance_date",
    )
    list_filter = ("frequency",)
    raw_id_fields = ("organization", "creator", "base_recurring_event")
    readonly_fields = ("recurrence_rule_string", "latest_instance_date")


@admin.register(EventAttachment)
class EventAttachmentAdmin(OrganizationModelAdmin):
    list_display = ("id", "name", "event", "media_type", "upload_status", "created")
    list_filter = ("upload_status", "media_type")
    search_fields = ("name",)
    raw_id_fields = ("organization", "creator", "event")
