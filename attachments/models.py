from django.conf import settings
from django.db import models

from attachments.constants import AttachmentUploadStatus
from common.utils.model_utils import generate_unique_id
from organizations.models import OrganizationModel


class StoredAttachmentModel(OrganizationModel):
    """
    A row referencing a blob in the attachments storage.

    The row is written inside the owner's transaction while the blob is written after it
    commits, so `upload_status` tracks the blob: rows start `pending` and become `stored` or
    `failed`. The reconciliation sweep settles stale rows.
    """

    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    media_type = models.CharField(max_length=100)
    name = models.CharField(
        max_length=64,
        unique=True,
        default=generate_unique_id,
        help_text="Generated storage key of the blob.",
    )
    upload_status = models.CharField(
        max_length=10,
        choices=AttachmentUploadStatus,
        default=AttachmentUploadStatus.PENDING,
        db_index=True,
    )

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.name} ({self.media_type})"
