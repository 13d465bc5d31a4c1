import logging
from typing import Annotated

from django.db import DatabaseError, IntegrityError, transaction

from dependency_injector.wiring import Provide, inject

from attachments.services.attachment_storage_service import AttachmentStorageService
from attachments.validators import get_disallowed_media_type_issues
from common.exceptions import ConflictError, InvalidArgumentsError, UnexpectedError
from common.utils.model_utils import generate_unique_id, insert_model_instance
from organizations.services import OrganizationAccessService
from users.models import User
from venues.constants import VenueAttachmentMimeType
from venues.models import Venue, VenueAttachment
from venues.services.dataclasses import VenueInputData


logger = logging.getLogger(__name__)

NAME_ARGUMENT_PATH = ("input", "name")
VENUE_NAME_TAKEN_MESSAGE = "A venue with this name already exists in the organization."


class VenueService:
    @inject
    def __init__(
        self,
        organization_access_service: Annotated[
            OrganizationAccessService, Provide["organization_access_service"]
        ],
        attachment_storage_service: Annotated[
            AttachmentStorageService, Provide["attachment_storage_service"]
        ],
    ) -> None:
        self.organization_access_service = organization_access_service
        self.attachment_storage_service = attachment_storage_service

    def _is_name_taken(self, organization_id: int, name: str) -> bool:
        return (
            Venue.objects.filter_by_organization(organization_id).filter(name=name).exists()
        )

    def create_venue(self, actor: User | None, venue_data: VenueInputData) -> Venue:
        """
        Creates a venue and its attachments. Attachment blobs are written after the
        transaction commits.
        :raises ConflictError: if the organization already has a venue with the same name.
        """
        user = self.organization_access_service.resolve_actor(actor)
        organization = self.organization_access_service.get_administered_organization(
            user, venue_data.organization_id
        )

        issues = get_disallowed_media_type_issues(
            [attachment.media_type for attachment in venue_data.attachments],
            VenueAttachmentMimeType.values,
        )
        if issues:
            raise InvalidArgumentsError(issues=issues)

        try:
            with transaction.atomic():
                if self._is_name_taken(organization.pk, venue_data.name):
                    raise ConflictError.at(NAME_ARGUMENT_PATH, VENUE_NAME_TAKEN_MESSAGE)

                venue = insert_model_instance(
                    Venue(
                        organization=organization,
                        creator=user,
                        name=venue_data.name,
                        description=venue_data.description,
                    )
                )
                attachments = [
                    insert_model_instance(
                        VenueAttachment(
                            organization=organization,
                            venue=venue,
                            creator=user,
                            media_type=attachment.media_type,
                            name=generate_unique_id(),
                        )
                    )
                    for attachment in venue_data.attachments
                ]
        except IntegrityError as e:
            # a concurrent request may have taken the name between the check and the insert
            if self._is_name_taken(organization.pk, venue_data.name):
                logger.info(
                    "Venue name %r was taken concurrently in organization %s",
                    venue_data.name,
                    organization.pk,
                )
                raise ConflictError.at(NAME_ARGUMENT_PATH, VENUE_NAME_TAKEN_MESSAGE) from e
            logger.exception(
                "Integrity error creating venue %r for organization %s",
                venue_data.name,
                organization.pk,
            )
            raise UnexpectedError(str(e)) from e
        except DatabaseError as e:
            logger.exception(
                "Failed to create venue %r for organization %s", venue_data.name, organization.pk
            )
            raise UnexpectedError(str(e)) from e

        venue.attachment_list = attachments
        if attachments:
            self.attachment_storage_service.persist_attachment_blobs(
                attachments, [attachment.stream for attachment in venue_data.attachments]
            )
        return venue
