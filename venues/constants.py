from django.db.models import TextChoices


class VenueAttachmentMimeType(TextChoices):
    AVIF = "image/avif", "AVIF image"
    JPEG = "image/jpeg", "JPEG image"
    PNG = "image/png", "PNG image"
    WEBP = "image/webp", "WebP image"
