from django.conf import settings
from django.db import models

from common.models import BaseModel
from organizations.constants import OrganizationMembershipRole
from organizations.managers import BaseOrganizationModelManager


class Organization(BaseModel):
    """
    Represents an organization. Events, venues and their attachments belong to one.
    """

    name = models.CharField(max_length=255)

    def __str__(self):
        return self.name


class OrganizationMembership(BaseModel):
    """
    Represents a membership of a user in an organization and the role they have in it.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organization_memberships",
    )
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    role = models.CharField(
        max_length=20,
        choices=OrganizationMembershipRole,
        default=OrganizationMembershipRole.MEMBER,
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "organization"], name="unique_membership_per_organization"
            ),
        ]

    def __str__(self):
        return f"{self.user} in {self.organization}"


class OrganizationModel(BaseModel):
    """
    Represents a model owned by an organization.
    Queries must be scoped with `filter_by_organization`; `original_manager` is reserved for
    maintenance jobs that sweep every organization.
    """

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="The organization this model is associated with. Queries should use the `organization` field.",
    )

    objects: BaseOrganizationModelManager = BaseOrganizationModelManager()
    original_manager = models.Manager()

    class Meta:
        abstract = True
