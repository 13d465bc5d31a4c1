import datetime
import logging
from typing import Annotated

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from dependency_injector.wiring import Provide, inject

from attachments.services.attachment_storage_service import AttachmentStorageService
from attachments.services.dataclasses import AttachmentInputData
from attachments.validators import get_disallowed_media_type_issues
from common.exceptions import InvalidArgumentsError, UnexpectedError
from common.utils.model_utils import generate_unique_id, insert_model_instance
from events.constants import EventAttachmentMimeType, RecurrenceFrequency
from events.exceptions import InvalidRecurrenceError
from events.models import Event, EventAttachment, RecurrenceRule
from events.recurrence_utils import (
    RecurrenceInstanceExpander,
    RecurrenceRuleEncoder,
    to_utc,
)
from events.services.dataclasses import EventInputData, RecurrenceInputData
from organizations.models import Organization
from organizations.services import OrganizationAccessService
from users.models import User


logger = logging.getLogger(__name__)

RECURRENCE_ARGUMENT_PATH = ("input", "recurrence")


class EventService:
    """
    Creates events, recurring series and their attachments, and expands persisted series
    into instances.
    """

    @inject
    def __init__(
        self,
        organization_access_service: Annotated[
            OrganizationAccessService, Provide["organization_access_service"]
        ],
        attachment_storage_service: Annotated[
            AttachmentStorageService, Provide["attachment_storage_service"]
        ],
        recurrence_encoder: Annotated[RecurrenceRuleEncoder, Provide["recurrence_encoder"]],
        recurrence_expander: Annotated[
            RecurrenceInstanceExpander, Provide["recurrence_expander"]
        ],
    ) -> None:
        self.organization_access_service = organization_access_service
        self.attachment_storage_service = attachment_storage_service
        self.recurrence_encoder = recurrence_encoder
        self.recurrence_expander = recurrence_expander

    def _validate_event_data(self, event_data: EventInputData) -> None:
        if event_data.end_at < event_data.start_at:
            raise InvalidArgumentsError.at(("input", "endAt"), "End must not be before start.")

        issues = get_disallowed_media_type_issues(
            [attachment.media_type for attachment in event_data.attachments],
            EventAttachmentMimeType.values,
        )
        if issues:
            raise InvalidArgumentsError(issues=issues)

    def create_event(self, actor: User | None, event_data: EventInputData) -> Event:
        """
        Creates a standalone event, or a recurring series when `event_data.recurrence` is set,
        along with its attachments.

        For a series the base event, its recurrence rule and the first instance are created in
        one transaction, and the first instance is returned. If the recurrence yields no
        occurrence the base event is returned instead. Attachment blobs are written after the
        transaction commits.

        :param actor: the user performing the request.
        :param event_data: the event to create.
        :return: the created event annotated with `attachment_list`.
        :raises UnauthenticatedError: if `actor` is anonymous or no longer exists.
        :raises ResourceNotFoundError: if the organization doesn't exist.
        :raises UnauthorizedError: if `actor` can't administer the organization.
        :raises InvalidArgumentsError: if the input is invalid.
        :raises UnexpectedError: if the storage layer misbehaves, including
            `AttachmentStorageError` when blobs fail to be written after the rows committed.
        """
        user = self.organization_access_service.resolve_actor(actor)
        organization = self.organization_access_service.get_administered_organization(
            user, event_data.organization_id
        )
        self._validate_event_data(event_data)

        try:
            with transaction.atomic():
                if event_data.recurrence is not None:
                    event = self._create_recurring_event(
                        user, organization, event_data, event_data.recurrence
                    )
                else:
                    event = insert_model_instance(
                        Event(
                            organization=organization,
                            creator=user,
                            name=event_data.name,
                            description=event_data.description,
                            start_at=event_data.start_at,
                            end_at=event_data.end_at,
                        )
                    )
                attachments = self._create_attachment_rows(user, event, event_data.attachments)
        except DatabaseError as e:
            logger.exception(
                "Failed to create event %r for organization %s", event_data.name, organization.pk
            )
            raise UnexpectedError(str(e)) from e

        event.attachment_list = attachments
        if attachments:
            self.attachment_storage_service.persist_attachment_blobs(
                attachments, [attachment.stream for attachment in event_data.attachments]
            )
        return event

    def _create_recurring_event(
        self,
        creator: User,
        organization: Organization,
        event_data: EventInputData,
        recurrence: RecurrenceInputData,
    ) -> Event:
        base_event = insert_model_instance(
            Event(
                organization=organization,
                creator=creator,
                name=event_data.name,
                description=event_data.description,
                start_at=event_data.start_at,
                end_at=event_data.end_at,
                is_recurring=True,
                is_base_recurring_event=True,
            )
        )

        # encoded rules have second precision
        recurrence_start = to_utc(event_data.start_at).replace(microsecond=0)
        pattern = recurrence.to_pattern(start=recurrence_start)
        # the end date is kept on the rule but only bounds series without a count
        hard_end = recurrence.recurrence_end_date if recurrence.count is None else None
        try:
            rule_string = self.recurrence_encoder.encode(pattern)
            instants = self.recurrence_expander.expand(
                rule_string, recurrence_start, hard_end=hard_end
            )
        except InvalidRecurrenceError as e:
            raise InvalidArgumentsError.at(RECURRENCE_ARGUMENT_PATH, str(e)) from e

        duration = event_data.end_at - event_data.start_at

        recurrence_rule = RecurrenceRule(
            organization=organization,
            creator=creator,
            base_recurring_event=base_event,
            recurrence_rule_string=rule_string,
            frequency=pattern.frequency or RecurrenceFrequency.DAILY,
            interval=pattern.interval or 1,
            count=pattern.count,
            recurrence_start_date=recurrence_start,
            recurrence_end_date=pattern.until,
            by_day=",".join(self.recurrence_encoder.encode_weekdays(pattern.by_day)),
            by_month=",".join(str(month) for month in pattern.by_month),
            by_month_day=",".join(str(day) for day in pattern.by_month_day),
            latest_instance_date=instants[-1] if instants else recurrence_start,
        )
        try:
            insert_model_instance(recurrence_rule)
        except ValidationError as e:
            raise InvalidArgumentsError.at(RECURRENCE_ARGUMENT_PATH, " ".join(e.messages)) from e

        base_event.recurrence_rule = recurrence_rule
        base_event.save(update_fields=["recurrence_rule", "modified"])

        if not instants:
            logger.info(
                "Recurrence of event %s yields no occurrence, no instance was created",
                base_event.pk,
            )
            return base_event

        return insert_model_instance(
            Event(
                organization=organization,
                creator=creator,
                name=event_data.name,
                description=event_data.description,
                start_at=instants[0],
                end_at=instants[0] + duration,
                is_recurring=True,
                is_base_recurring_event=False,
                base_recurring_event=base_event,
                recurrence_rule=recurrence_rule,
            )
        )

    def _create_attachment_rows(
        self, creator: User, event: Event, attachments: list[AttachmentInputData]
    ) -> list[EventAttachment]:
        return [
            insert_model_instance(
                EventAttachment(
                    organization_id=event.organization_id,
                    event=event,
                    creator=creator,
                    media_type=attachment.media_type,
                    name=generate_unique_id(),
                )
            )
            for attachment in attachments
        ]

    def get_recurring_event_instances(
        self,
        base_event: Event,
        start: datetime.datetime,
        end: datetime.datetime,
    ) -> list[Event]:
        """
        Expands the series of `base_event` within `[start, end]`.
        Instances already persisted are returned as they are, the others as unsaved `Event`
        objects with the base event's duration.
        """
        recurrence_rule = (
            RecurrenceRule.objects.filter_by_organization(base_event.organization_id)
            .filter(base_recurring_event_id=base_event.pk)
            .first()
        )
        if recurrence_rule is None:
            return []

        window_start = max(to_utc(start), recurrence_rule.recurrence_start_date)
        instants = self.recurrence_expander.expand(
            recurrence_rule.recurrence_rule_string, window_start, hard_end=end
        )
        if not instants:
            return []

        persisted_by_start = {
            instance.start_at: instance
            for instance in Event.objects.filter_by_organization(base_event.organization_id)
            .filter(
                base_recurring_event_id=base_event.pk,
                start_at__gte=instants[0],
                start_at__lte=instants[-1],
            )
            .order_by("start_at")
        }

        duration = base_event.duration
        return [
            persisted_by_start.get(instant)
            or Event(
                organization_id=base_event.organization_id,
                creator_id=base_event.creator_id,
                name=base_event.name,
                description=base_event.description,
                start_at=instant,
                end_at=instant + duration,
                is_recurring=True,
                is_base_recurring_event=False,
                base_recurring_event=base_event,
                recurrence_rule=recurrence_rule,
            )
            for instant in instants
        ]

    @transaction.atomic()
    def materialize_recurring_event_instances(
        self, recurrence_rule: RecurrenceRule, until: datetime.datetime
    ) -> list[Event]:
        """
        Persists every instance of the series up to `until` that has no row yet and advances
        the rule's `latest_instance_date`, which never moves backwards.
        :return: all instances of the series up to `until`, persisted.
        """
        locked_rule = (
            RecurrenceRule.objects.filter_by_organization(recurrence_rule.organization_id)
            .select_for_update()
            .get(pk=recurrence_rule.pk)
        )
        base_event = Event.objects.filter_by_organization(locked_rule.organization_id).get(
            pk=locked_rule.base_recurring_event_id
        )

        instances = self.get_recurring_event_instances(
            base_event, locked_rule.recurrence_start_date, until
        )
        new_instances = [instance for instance in instances if instance.pk is None]
        if new_instances:
            Event.objects.bulk_create(new_instances)
            logger.info(
                "Materialized %s instances of recurring event %s",
                len(new_instances),
                base_event.pk,
            )

        if instances and instances[-1].start_at > locked_rule.latest_instance_date:
            locked_rule.latest_instance_date = instances[-1].start_at
            locked_rule.save(update_fields=["latest_instance_date", "modified"])

        recurrence_rule.latest_instance_date = locked_rule.latest_instance_date
        return instances
