import datetime

import pytest
from model_bakery import baker
from rest_framework.test import APIClient


@pytest.fixture
def user_password():
    from users.factories import DEFAULT_TEST_USER_PASSWORD

    return DEFAULT_TEST_USER_PASSWORD


@pytest.fixture
def user(user_password):
    from users.factories import UserFactory

    return UserFactory().create_user()


@pytest.fixture
def organization():
    from organizations.models import Organization

    return baker.make(Organization, name="Test Organization")


@pytest.fixture
def organization_administrator(organization):
    from organizations.constants import OrganizationMembershipRole
    from organizations.models import OrganizationMembership
    from users.factories import UserFactory

    user = UserFactory().create_user()
    baker.make(
        OrganizationMembership,
        user=user,
        organization=organization,
        role=OrganizationMembershipRole.ADMINISTRATOR,
    )
    return user


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_login(user)
    return client


@pytest.fixture
def anonymous_client():
    client = APIClient()
    return client


@pytest.fixture
def di_container():
    """Fixture to create a DI container."""
    from di_core.containers import container

    return container


@pytest.fixture
def fixed_now():
    return datetime.datetime(2024, 1, 1, 9, 0, tzinfo=datetime.UTC)


@pytest.fixture
def recurrence_expander(fixed_now):
    from events.recurrence_utils import RecurrenceInstanceExpander

    return RecurrenceInstanceExpander(now=lambda: fixed_now)
