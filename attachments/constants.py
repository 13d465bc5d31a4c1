from django.db.models import TextChoices


class AttachmentUploadStatus(TextChoices):
    PENDING = "pending", "Pending"
    STORED = "stored", "Stored"
    FAILED = "failed", "Failed"
