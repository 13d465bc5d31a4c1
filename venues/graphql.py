import datetime

import strawberry
import strawberry_django

from venues.models import Venue, VenueAttachment


@strawberry_django.type(VenueAttachment)
class VenueAttachmentGraphQLType:
    id: strawberry.auto  # noqa: A003
    name: strawberry.auto
    media_type: str
    upload_status: str
    created: datetime.datetime


@strawberry_django.type(Venue)
class VenueGraphQLType:
    id: strawberry.auto  # noqa: A003
    name: strawberry.auto
    description: strawberry.auto
    created: datetime.datetime
    modified: datetime.datetime

    @strawberry.field
    def organization_id(self) -> int:
        return self.organization_id  # type: ignore

    @strawberry.field
    def attachments(self) -> list[VenueAttachmentGraphQLType]:
        attachment_list = getattr(self, "attachment_list", None)
        if attachment_list is not None:
            return attachment_list
        return list(
            VenueAttachment.objects.filter_by_organization(self.organization_id)  # type: ignore
            .filter(venue_id=self.pk)  # type: ignore
            .order_by("id")
        )
