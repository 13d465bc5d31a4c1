from django.db.models import TextChoices


class UserRole(TextChoices):
    ADMINISTRATOR = "administrator", "Administrator"
    REGULAR = "regular", "Regular"
