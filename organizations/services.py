import logging
from collections.abc import Sequence

from django.db.models import Exists, OuterRef

from common.exceptions import ResourceNotFoundError, UnauthenticatedError, UnauthorizedError
from organizations.constants import OrganizationMembershipRole
from organizations.models import Organization, OrganizationMembership
from users.models import User


logger = logging.getLogger(__name__)

ORGANIZATION_ARGUMENT_PATH = ("input", "organizationId")


class OrganizationAccessService:
    """
    Resolves who is acting and whether they may administer a given organization.
    """

    def resolve_actor(self, actor) -> User:
        """
        Returns the persisted user behind `actor`.
        :param actor: the request user, possibly anonymous or None.
        :raises UnauthenticatedError: if there is no session or the user row no longer exists.
        """
        if actor is None or not getattr(actor, "is_authenticated", False):
            raise UnauthenticatedError()

        user = User.objects.filter(pk=actor.pk, is_active=True).first()
        if user is None:
            logger.warning("Authenticated actor %s no longer exists", actor.pk)
            raise UnauthenticatedError()
        return user

    def get_administered_organization(
        self,
        actor: User,
        organization_id: int,
        argument_path: Sequence[str | int] = ORGANIZATION_ARGUMENT_PATH,
    ) -> Organization:
        """
        Loads the organization together with the actor's administrator membership in one query.
        :raises ResourceNotFoundError: if the organization doesn't exist.
        :raises UnauthorizedError: if the actor is neither a global nor an organization
            administrator.
        """
        organization = (
            Organization.objects.filter(pk=organization_id)
            .annotate(
                actor_is_administrator=Exists(
                    OrganizationMembership.objects.filter(
                        organization_id=OuterRef("pk"),
                        user_id=actor.pk,
                        role=OrganizationMembershipRole.ADMINISTRATOR,
                    )
                )
            )
            .first()
        )
        if organization is None:
            raise ResourceNotFoundError.at(argument_path)

        if not (actor.is_administrator or organization.actor_is_administrator):
            raise UnauthorizedError.at(argument_path)

        return organization
