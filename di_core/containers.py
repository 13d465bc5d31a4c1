import datetime

from django.utils import timezone

from dependency_injector import containers, providers

from attachments.services.attachment_storage_service import AttachmentStorageService
from events.recurrence_utils import RecurrenceInstanceExpander, RecurrenceRuleEncoder
from events.services.event_service import EventService
from organizations.services import OrganizationAccessService
from venues.services.venue_service import VenueService


class AppContainer(containers.DeclarativeContainer):
    config = providers.Configuration()

    # overridden in tests to pin "now"
    clock = providers.Object(timezone.now)

    recurrence_horizon = providers.Factory(
        datetime.timedelta,
        days=config.RECURRENCE_DEFAULT_HORIZON_DAYS,
    )

    recurrence_encoder = providers.Factory(
        RecurrenceRuleEncoder,
    )

    recurrence_expander = providers.Factory(
        RecurrenceInstanceExpander,
        now=clock,
        horizon=recurrence_horizon,
    )

    attachment_storage_service = providers.Factory(
        AttachmentStorageService,
        max_workers=config.ATTACHMENT_UPLOAD_MAX_WORKERS,
    )

    organization_access_service = providers.Factory(
        OrganizationAccessService,
    )

    event_service = providers.Factory(
        EventService,
        organization_access_service=organization_access_service,
        attachment_storage_service=attachment_storage_service,
        recurrence_encoder=recurrence_encoder,
        recurrence_expander=recurrence_expander,
    )

    venue_service = providers.Factory(
        VenueService,
        organization_access_service=organization_access_service,
        attachment_storage_service=attachment_storage_service,
    )


container: AppContainer | None = None  # set during app startup
