from django.db.models import TextChoices


class OrganizationMembershipRole(TextChoices):
    ADMINISTRATOR = "administrator", "Administrator"
    MEMBER = "member", "Member"
