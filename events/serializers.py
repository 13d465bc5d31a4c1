from collections.abc import Mapping

from rest_framework import serializers

from attachments.services.dataclasses import AttachmentInputData
from attachments.validators import get_media_type_not_allowed_message
from common.utils.serializer_utils import StreamField, validate_input
from events.constants import EventAttachmentMimeType, RecurrenceFrequency, RecurrenceWeekday
from events.services.dataclasses import EventInputData, RecurrenceInputData


class AttachmentInputSerializer(serializers.Serializer):
    # allow-listing happens on the parent so issues are addressed at the attachment index
    media_type = serializers.CharField()
    stream = StreamField()


class RecurrenceInputSerializer(serializers.Serializer):
    frequency = serializers.ChoiceField(
        choices=RecurrenceFrequency.choices, required=False, allow_null=True
    )
    interval = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    count = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    recurrence_end_date = serializers.DateTimeField(required=False, allow_null=True)
    by_day = serializers.ListField(
        child=serializers.ChoiceField(choices=RecurrenceWeekday.choices),
        required=False,
        allow_null=True,
    )
    by_month = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=12),
        required=False,
        allow_null=True,
    )
    by_month_day = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=31),
        required=False,
        allow_null=True,
    )


class EventCreateInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    organization_id = serializers.IntegerField(min_value=1)
    start_at = serializers.DateTimeField()
    end_at = serializers.DateTimeField()
    recurrence = RecurrenceInputSerializer(required=False, allow_null=True)
    attachments = AttachmentInputSerializer(many=True, required=False)

    def validate_attachments(self, attachments: list[dict]) -> list[dict]:
        errors = {
            index: [get_media_type_not_allowed_message(attachment["media_type"])]
            for index, attachment in enumerate(attachments)
            if attachment["media_type"] not in EventAttachmentMimeType.values
        }
        if errors:
            raise serializers.ValidationError(errors)
        return attachments

    def validate(self, attrs: dict) -> dict:
        if attrs["end_at"] < attrs["start_at"]:
            raise serializers.ValidationError({"end_at": "End must not be before start."})
        return attrs


def parse_event_input(data: Mapping) -> EventInputData:
    """
    Validates raw `createEvent` input.
    :raises InvalidArgumentsError: with issues addressed under `input`.
    """
    validated_data = validate_input(EventCreateInputSerializer, data)

    recurrence = None
    if (recurrence_data := validated_data.get("recurrence")) is not None:
        recurrence = RecurrenceInputData(
            frequency=recurrence_data.get("frequency"),
            interval=recurrence_data.get("interval"),
            count=recurrence_data.get("count"),
            recurrence_end_date=recurrence_data.get("recurrence_end_date"),
            by_day=recurrence_data.get("by_day") or [],
            by_month=recurrence_data.get("by_month") or [],
            by_month_day=recurrence_data.get("by_month_day") or [],
        )

    return EventInputData(
        name=validated_data["name"],
        description=validated_data.get("description") or "",
        organization_id=validated_data["organization_id"],
        start_at=validated_data["start_at"],
        end_at=validated_data["end_at"],
        recurrence=recurrence,
        attachments=[
            AttachmentInputData(media_type=attachment["media_type"], stream=attachment["stream"])
            for attachment in validated_data.get("attachments", [])
        ],
    )
