from django.contrib.auth.models import AnonymousUser

import pytest
from model_bakery import baker

from common.exceptions import ResourceNotFoundError, UnauthenticatedError, UnauthorizedError
from organizations.constants import OrganizationMembershipRole
from organizations.models import Organization, OrganizationMembership
from organizations.services import OrganizationAccessService
from users.constants import UserRole
from users.models import User


@pytest.mark.django_db
class TestOrganizationAccessService:
    """Test suite for OrganizationAccessService."""

    @pytest.fixture
    def service(self):
        return OrganizationAccessService()

    @pytest.fixture
    def organization(self):
        return baker.make(Organization, name="Acme")

    @pytest.fixture
    def member(self, organization):
        user = baker.make(User, email="member@example.com", role=UserRole.REGULAR)
        baker.make(
            OrganizationMembership,
            user=user,
            organization=organization,
            role=OrganizationMembershipRole.MEMBER,
        )
        return user

    @pytest.fixture
    def organization_admin(self, organization):
        user = baker.make(User, email="org-admin@example.com", role=UserRole.REGULAR)
        baker.make(
            OrganizationMembership,
            user=user,
            organization=organization,
            role=OrganizationMembershipRole.ADMINISTRATOR,
        )
        return user

    def test_resolve_actor_returns_persisted_user(self, service, member):
        assert service.resolve_actor(member) == member

    def test_resolve_actor_rejects_missing_actor(self, service):
        with pytest.raises(UnauthenticatedError):
            service.resolve_actor(None)

    def test_resolve_actor_rejects_anonymous_user(self, service):
        with pytest.raises(UnauthenticatedError):
            service.resolve_actor(AnonymousUser())

    def test_resolve_actor_rejects_deleted_user(self, service, member):
        stale_actor = User.objects.get(pk=member.pk)
        member.delete()

        with pytest.raises(UnauthenticatedError) as exc_info:
            service.resolve_actor(stale_actor)

        assert exc_info.value.code == "unauthenticated"

    def test_organization_admin_is_accepted(self, service, organization, organization_admin):
        result = service.get_administered_organization(organization_admin, organization.pk)

        assert result == organization
        assert result.actor_is_administrator is True

    def test_global_admin_is_accepted_without_membership(self, service, organization):
        global_admin = baker.make(User, email="root@example.com", role=UserRole.ADMINISTRATOR)

        result = service.get_administered_organization(global_admin, organization.pk)

        assert result == organization
        assert result.actor_is_administrator is False

    def test_regular_member_is_rejected(self, service, organization, member):
        with pytest.raises(UnauthorizedError) as exc_info:
            service.get_administered_organization(member, organization.pk)

        assert exc_info.value.code == "unauthorized_action_on_arguments_associated_resources"
        assert exc_info.value.issues[0].argument_path == ("input", "organizationId")

    def test_admin_of_another_organization_is_rejected(self, service, organization):
        other_organization = baker.make(Organization, name="Other")
        other_admin = baker.make(User, email="other@example.com", role=UserRole.REGULAR)
        baker.make(
            OrganizationMembership,
            user=other_admin,
            organization=other_organization,
            role=OrganizationMembershipRole.ADMINISTRATOR,
        )

        with pytest.raises(UnauthorizedError):
            service.get_administered_organization(other_admin, organization.pk)

    def test_missing_organization(self, service, organization_admin):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.get_administered_organization(organization_admin, 987654)

        assert exc_info.value.code == "arguments_associated_resources_not_found"
        assert exc_info.value.issues[0].argument_path == ("input", "organizationId")

    def test_custom_argument_path(self, service, member):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            service.get_administered_organization(
                member, 987654, argument_path=("input", "venue", "organizationId")
            )

        assert exc_info.value.issues[0].argument_path == ("input", "venue", "organizationId")
