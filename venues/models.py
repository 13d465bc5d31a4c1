from django.conf import settings
from django.db import models

from attachments.models import StoredAttachmentModel
from organizations.models import OrganizationModel
from venues.constants import VenueAttachmentMimeType


class Venue(OrganizationModel):
    """
    Represents a place events can happen at. Names are unique within an organization.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_venues",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "name"], name="unique_venue_name_per_organization"
            ),
        ]

    def __str__(self):
        return self.name


class VenueAttachment(StoredAttachmentModel):
    venue = models.ForeignKey(
        Venue,
        on_delete=models.CASCADE,
        related_name="attachments",
    )
    media_type = models.CharField(max_length=100, choices=VenueAttachmentMimeType)
