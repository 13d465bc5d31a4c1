from django.db.models import TextChoices


class RecurrenceFrequency(TextChoices):
    DAILY = "DAILY", "Daily"
    WEEKLY = "WEEKLY", "Weekly"
    MONTHLY = "MONTHLY", "Monthly"
    YEARLY = "YEARLY", "Yearly"


class RecurrenceWeekday(TextChoices):
    MONDAY = "MO", "Monday"
    TUESDAY = "TU", "Tuesday"
    WEDNESDAY = "WE", "Wednesday"
    THURSDAY = "TH", "Thursday"
    FRIDAY = "FR", "Friday"
    SATURDAY = "SA", "Saturday"
    SUNDAY = "SU", "Sunday"


# same ordinals as dateutil's weekday constants
WEEKDAY_ORDINALS: dict[str, int] = {
    RecurrenceWeekday.MONDAY: 0,
    RecurrenceWeekday.TUESDAY: 1,
    RecurrenceWeekday.WEDNESDAY: 2,
    RecurrenceWeekday.THURSDAY: 3,
    RecurrenceWeekday.FRIDAY: 4,
    RecurrenceWeekday.SATURDAY: 5,
    RecurrenceWeekday.SUNDAY: 6,
}


class EventAttachmentMimeType(TextChoices):
    AVIF = "image/avif", "AVIF image"
    JPEG = "image/jpeg", "JPEG image"
    PNG = "image/png", "PNG image"
    WEBP = "image/webp", "WebP image"
    MP4 = "video/mp4", "MP4 video"
    WEBM = "video/webm", "WebM video"
