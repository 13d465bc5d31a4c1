import json

from django.core.files.uploadedfile import SimpleUploadedFile

import pytest
from rest_framework.test import APIClient

from attachments.constants import AttachmentUploadStatus
from events.models import Event, EventAttachment


CREATE_EVENT_MUTATION = """
mutation CreateEvent($input: CreateEventInput!) {
    createEvent(input: $input) {
        id
        name
        startAt
        endAt
        organizationId
        isRecurring
        isBaseRecurringEvent
        baseRecurringEventId
        recurrenceRule {
            recurrenceRuleString
            count
            latestInstanceDate
        }
        attachments {
            name
            mediaType
            uploadStatus
        }
    }
}
"""

RECURRENCE_OCCURRENCES_QUERY = """
query RecurrenceOccurrences($ruleString: String!, $startAt: DateTime!, $endAt: DateTime) {
    recurrenceOccurrences(ruleString: $ruleString, startAt: $startAt, endAt: $endAt)
}
"""


@pytest.fixture
def admin_client(organization_administrator):
    client = APIClient()
    client.force_login(organization_administrator)
    return client


def _create_event_input(organization, **kwargs):
    data = {
        "name": "Standup",
        "organizationId": organization.pk,
        "startAt": "2024-01-01T09:00:00+00:00",
        "endAt": "2024-01-01T10:00:00+00:00",
    }
    data.update(kwargs)
    return data


def _post_graphql(client, query, variables):
    return client.post(
        "/graphql/",
        data={"query": query, "variables": variables},
        format="json",
    )


def _error_codes(response):
    return [error["extensions"]["code"] for error in response.json()["errors"]]


@pytest.mark.django_db
class TestCreateEventMutation:
    def test_create_simple_event(self, admin_client, organization):
        response = _post_graphql(
            admin_client, CREATE_EVENT_MUTATION, {"input": _create_event_input(organization)}
        )

        assert response.status_code == 200
        data = response.json()["data"]["createEvent"]
        assert data["name"] == "Standup"
        assert data["organizationId"] == organization.pk
        assert data["isRecurring"] is False
        assert data["recurrenceRule"] is None
        assert data["attachments"] == []
        assert (
            Event.objects.filter_by_organization(organization.pk).filter(pk=data["id"]).exists()
        )

    def test_create_recurring_event_returns_first_instance(self, admin_client, organization):
        response = _post_graphql(
            admin_client,
            CREATE_EVENT_MUTATION,
            {
                "input": _create_event_input(
                    organization,
                    recurrence={"frequency": "WEEKLY", "count": 6, "byDay": ["MO", "WE", "FR"]},
                )
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]["createEvent"]
        assert data["isRecurring"] is True
        assert data["isBaseRecurringEvent"] is False
        assert data["baseRecurringEventId"] is not None
        assert data["startAt"] == "2024-01-01T09:00:00+00:00"
        assert data["recurrenceRule"]["count"] == 6
        assert data["recurrenceRule"]["recurrenceRuleString"] == (
            "DTSTART:20240101T090000Z\nRRULE:FREQ=WEEKLY;INTERVAL=1;COUNT=6;BYDAY=MO,WE,FR"
        )
        assert data["recurrenceRule"]["latestInstanceDate"] == "2024-01-12T09:00:00+00:00"

    def test_unbounded_recurrence_uses_the_container_clock(
        self, admin_client, organization, di_container, fixed_now
    ):
        with di_container.clock.override(lambda: fixed_now):
            response = _post_graphql(
                admin_client,
                CREATE_EVENT_MUTATION,
                {"input": _create_event_input(organization, recurrence={"frequency": "DAILY"})},
            )

        data = response.json()["data"]["createEvent"]
        assert data["recurrenceRule"]["latestInstanceDate"] == "2024-12-31T09:00:00+00:00"

    def test_unauthenticated_request_is_rejected(self, anonymous_client, organization):
        response = _post_graphql(
            anonymous_client,
            CREATE_EVENT_MUTATION,
            {"input": _create_event_input(organization, endAt="2023-01-01T00:00:00+00:00")},
        )

        assert response.status_code == 200
        assert response.json()["data"] is None
        assert _error_codes(response) == ["unauthenticated"]
        assert not Event.original_manager.exists()

    def test_invalid_arguments_carry_issues(self, admin_client, organization):
        response = _post_graphql(
            admin_client,
            CREATE_EVENT_MUTATION,
            {
                "input": _create_event_input(
                    organization,
                    recurrence={"frequency": "DAILY", "interval": 0},
                )
            },
        )

        error = response.json()["errors"][0]
        assert error["extensions"]["code"] == "invalid_arguments"
        assert error["extensions"]["issues"] == [
            {
                "argumentPath": ["input", "recurrence", "interval"],
                "message": "Ensure this value is greater than or equal to 1.",
            }
        ]

    def test_unauthorized_user_is_rejected(self, auth_client, organization):
        response = _post_graphql(
            auth_client, CREATE_EVENT_MUTATION, {"input": _create_event_input(organization)}
        )

        assert _error_codes(response) == ["unauthorized_action_on_arguments_associated_resources"]
        assert response.json()["errors"][0]["extensions"]["issues"][0]["argumentPath"] == [
            "input",
            "organizationId",
        ]

    def test_unknown_organization_is_reported(self, admin_client, organization):
        response = _post_graphql(
            admin_client,
            CREATE_EVENT_MUTATION,
            {"input": _create_event_input(organization, organizationId=999_999)},
        )

        assert _error_codes(response) == ["arguments_associated_resources_not_found"]


@pytest.mark.django_db
class TestCreateEventMutationUploads:
    def _post_multipart(self, client, variables, files):
        file_map = {
            str(index): [f"variables.input.attachments.{index}.file"]
            for index in range(len(files))
        }
        data = {
            "operations": json.dumps({"query": CREATE_EVENT_MUTATION, "variables": variables}),
            "map": json.dumps(file_map),
        }
        data.update({str(index): file for index, file in enumerate(files)})
        return client.post("/graphql/", data=data, format="multipart")

    def test_create_event_with_attachments(self, admin_client, organization):
        files = [
            SimpleUploadedFile("photo.png", b"png-bytes", content_type="image/png"),
            SimpleUploadedFile("clip.webm", b"webm-bytes", content_type="video/webm"),
        ]
        variables = {
            "input": _create_event_input(
                organization,
                attachments=[
                    {"mediaType": "image/png", "file": None},
                    {"mediaType": "video/webm", "file": None},
                ],
            )
        }

        response = self._post_multipart(admin_client, variables, files)

        assert response.status_code == 200
        data = response.json()["data"]["createEvent"]
        assert [attachment["mediaType"] for attachment in data["attachments"]] == [
            "image/png",
            "video/webm",
        ]
        assert all(
            attachment["uploadStatus"] == AttachmentUploadStatus.STORED
            for attachment in data["attachments"]
        )
        assert (
            EventAttachment.objects.filter_by_organization(organization.pk)
            .filter(event_id=data["id"], upload_status=AttachmentUploadStatus.STORED)
            .count()
            == 2
        )

    def test_disallowed_media_type_is_rejected(self, admin_client, organization):
        files = [
            SimpleUploadedFile("photo.png", b"png-bytes", content_type="image/png"),
            SimpleUploadedFile("doc.pdf", b"pdf-bytes", content_type="application/pdf"),
        ]
        variables = {
            "input": _create_event_input(
                organization,
                attachments=[
                    {"mediaType": "image/png", "file": None},
                    {"mediaType": "application/pdf", "file": None},
                ],
            )
        }

        response = self._post_multipart(admin_client, variables, files)

        error = response.json()["errors"][0]
        assert error["extensions"]["code"] == "invalid_arguments"
        assert error["extensions"]["issues"] == [
            {
                "argumentPath": ["input", "attachments", 1],
                "message": 'Mime type "application/pdf" is not allowed.',
            }
        ]
        assert not Event.original_manager.exists()


@pytest.mark.django_db
class TestRecurrenceOccurrencesQuery:
    def test_preview_occurrences(self, auth_client):
        response = _post_graphql(
            auth_client,
            RECURRENCE_OCCURRENCES_QUERY,
            {
                "ruleString": "DTSTART:20240101T090000Z\nRRULE:FREQ=DAILY;INTERVAL=1",
                "startAt": "2024-01-01T09:00:00+00:00",
                "endAt": "2024-01-03T09:00:00+00:00",
            },
        )

        assert response.json()["data"]["recurrenceOccurrences"] == [
            "2024-01-01T09:00:00+00:00",
            "2024-01-02T09:00:00+00:00",
            "2024-01-03T09:00:00+00:00",
        ]

    def test_invalid_rule_string(self, auth_client):
        response = _post_graphql(
            auth_client,
            RECURRENCE_OCCURRENCES_QUERY,
            {"ruleString": "RRULE:FREQ=SOMETIMES", "startAt": "2024-01-01T09:00:00+00:00"},
        )

        error = response.json()["errors"][0]
        assert error["extensions"]["code"] == "invalid_arguments"
        assert error["extensions"]["issues"][0]["argumentPath"] == ["ruleString"]

    def test_preview_requires_authentication(self, anonymous_client):
        response = _post_graphql(
            anonymous_client,
            RECURRENCE_OCCURRENCES_QUERY,
            {"ruleString": "RRULE:FREQ=DAILY;COUNT=1", "startAt": "2024-01-01T09:00:00+00:00"},
        )

        assert _error_codes(response) == ["unauthenticated"]
