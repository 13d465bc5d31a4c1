from typing import Annotated

import strawberry
from dependency_injector.wiring import Provide, inject
from graphql import GraphQLError
from strawberry.file_uploads import Upload

from common.exceptions import ServiceError
from common.graphql_utils import get_authenticated_user
from venues.graphql import VenueGraphQLType
from venues.serializers import parse_venue_input
from venues.services.venue_service import VenueService


@inject
def get_venue_service(
    venue_service: Annotated[VenueService | None, Provide["venue_service"]] = None,
) -> VenueService:
    if venue_service is None:
        raise GraphQLError("Missing required dependency venue_service")
    return venue_service


@strawberry.input
class VenueAttachmentInput:
    media_type: str
    file: Upload


@strawberry.input
class CreateVenueInput:
    name: str
    organization_id: int
    description: str | None = None
    attachments: list[VenueAttachmentInput] | None = None


def get_create_venue_input_data(input: CreateVenueInput) -> dict:  # noqa: A002
    data: dict = {
        "name": input.name,
        "description": input.description,
        "organization_id": input.organization_id,
    }
    if input.attachments is not None:
        data["attachments"] = [
            {"media_type": attachment.media_type, "stream": attachment.file}
            for attachment in input.attachments
        ]
    return data


@strawberry.type
class VenueMutations:
    @strawberry.mutation
    def create_venue(
        self,
        info: strawberry.Info,
        input: CreateVenueInput,  # noqa: A002
    ) -> VenueGraphQLType:
        venue_service = get_venue_service()
        try:
            actor = get_authenticated_user(info)
            venue_data = parse_venue_input(get_create_venue_input_data(input))
            return venue_service.create_venue(actor, venue_data)  # type: ignore
        except ServiceError as e:
            raise e.to_graphql_error() from e
