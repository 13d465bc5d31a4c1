import datetime

import strawberry
import strawberry_django

from events.models import Event, EventAttachment, RecurrenceRule


@strawberry_django.type(EventAttachment)
class EventAttachmentGraphQLType:
    id: strawberry.auto  # noqa: A003
    name: strawberry.auto
    media_type: str
    upload_status: str
    created: datetime.datetime


@strawberry_django.type(RecurrenceRule)
class RecurrenceRuleGraphQLType:
    id: strawberry.auto  # noqa: A003
    recurrence_rule_string: strawberry.auto
    frequency: str
    interval: strawberry.auto
    count: strawberry.auto
    recurrence_start_date: strawberry.auto
    recurrence_end_date: strawberry.auto
    by_day: strawberry.auto
    by_month: strawberry.auto
    by_month_day: strawberry.auto
    latest_instance_date: strawberry.auto
    created: datetime.datetime
    modified: datetime.datetime


@strawberry_django.type(Event)
class EventGraphQLType:
    id: strawberry.auto  # noqa: A003
    name: strawberry.auto
    description: strawberry.auto
    start_at: strawberry.auto
    end_at: strawberry.auto
    is_recurring: strawberry.auto
    is_base_recurring_event: strawberry.auto
    created: datetime.datetime
    modified: datetime.datetime

    @strawberry.field
    def organization_id(self) -> int:
        return self.organization_id  # type: ignore

    @strawberry.field
    def base_recurring_event_id(self) -> int | None:
        return self.base_recurring_event_id  # type: ignore

    @strawberry.field
    def recurrence_rule(self) -> RecurrenceRuleGraphQLType | None:
        if not self.recurrence_rule_id:  # type: ignore
            return None
        return (
            RecurrenceRule.objects.filter_by_organization(self.organization_id)  # type: ignore
            .filter(pk=self.recurrence_rule_id)  # type: ignore
            .first()
        )

    @strawberry.field
    def attachments(self) -> list[EventAttachmentGraphQLType]:
        attachment_list = getattr(self, "attachment_list", None)
        if attachment_list is not None:
            return attachment_list
        return list(
            EventAttachment.objects.filter_by_organization(self.organization_id)  # type: ignore
            .filter(event_id=self.pk)  # type: ignore
            .order_by("id")
        )
