from collections.abc import Mapping

from rest_framework import serializers

from attachments.services.dataclasses import AttachmentInputData
from attachments.validators import get_media_type_not_allowed_message
from common.utils.serializer_utils import StreamField, validate_input
from venues.constants import VenueAttachmentMimeType
from venues.services.dataclasses import VenueInputData


class VenueAttachmentInputSerializer(serializers.Serializer):
    media_type = serializers.CharField()
    stream = StreamField()


class VenueCreateInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    organization_id = serializers.IntegerField(min_value=1)
    attachments = VenueAttachmentInputSerializer(many=True, required=False)

    def validate_attachments(self, attachments: list[dict]) -> list[dict]:
        errors = {
            index: [get_media_type_not_allowed_message(attachment["media_type"])]
            for index, attachment in enumerate(attachments)
            if attachment["media_type"] not in VenueAttachmentMimeType.values
        }
        if errors:
            raise serializers.ValidationError(errors)
        return attachments


def parse_venue_input(data: Mapping) -> VenueInputData:
    validated_data = validate_input(VenueCreateInputSerializer, data)
    return VenueInputData(
        name=validated_data["name"],
        description=validated_data.get("description") or "",
        organization_id=validated_data["organization_id"],
        attachments=[
            AttachmentInputData(media_type=attachment["media_type"], stream=attachment["stream"])
            for attachment in validated_data.get("attachments", [])
        ],
    )
