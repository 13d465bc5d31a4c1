import dataclasses
import datetime
from dataclasses import dataclass
from typing import Annotated, cast

import strawberry
from dependency_injector.wiring import Provide, inject
from graphql import GraphQLError
from strawberry.file_uploads import Upload

from common.exceptions import InvalidArgumentsError, ServiceError
from common.graphql_utils import get_authenticated_user
from events.exceptions import InvalidRecurrenceError
from events.graphql import EventGraphQLType
from events.recurrence_utils import RecurrenceInstanceExpander
from events.serializers import parse_event_input
from events.services.event_service import EventService


@dataclass
class EventMutationDependencies:
    event_service: EventService
    recurrence_expander: RecurrenceInstanceExpander


@inject
def get_event_mutation_dependencies(
    event_service: Annotated[EventService | None, Provide["event_service"]] = None,
    recurrence_expander: Annotated[
        RecurrenceInstanceExpander | None, Provide["recurrence_expander"]
    ] = None,
) -> EventMutationDependencies:
    required_dependencies = [event_service, recurrence_expander]
    if any(dep is None for dep in required_dependencies):
        raise GraphQLError(
            f"Missing required dependency {', '.join([str(dep) for dep in required_dependencies if dep is None])}"
        )

    return EventMutationDependencies(
        event_service=cast(EventService, event_service),
        recurrence_expander=cast(RecurrenceInstanceExpander, recurrence_expander),
    )


@strawberry.input
class RecurrenceInput:
    frequency: str | None = None
    interval: int | None = None
    count: int | None = None
    recurrence_end_date: datetime.datetime | None = None
    by_day: list[str] | None = None
    by_month: list[int] | None = None
    by_month_day: list[int] | None = None


@strawberry.input
class EventAttachmentInput:
    media_type: str
    file: Upload


@strawberry.input
class CreateEventInput:
    name: str
    organization_id: int
    start_at: datetime.datetime
    end_at: datetime.datetime
    description: str | None = None
    recurrence: RecurrenceInput | None = None
    attachments: list[EventAttachmentInput] | None = None


def get_create_event_input_data(input: CreateEventInput) -> dict:  # noqa: A002
    data: dict = {
        "name": input.name,
        "description": input.description,
        "organization_id": input.organization_id,
        "start_at": input.start_at,
        "end_at": input.end_at,
    }
    if input.recurrence is not None:
        data["recurrence"] = dataclasses.asdict(input.recurrence)
    if input.attachments is not None:
        # uploads are passed as they are, they must not be copied
        data["attachments"] = [
            {"media_type": attachment.media_type, "stream": attachment.file}
            for attachment in input.attachments
        ]
    return data


@strawberry.type
class EventMutations:
    @strawberry.mutation
    def create_event(
        self,
        info: strawberry.Info,
        input: CreateEventInput,  # noqa: A002
    ) -> EventGraphQLType:
        """
        Creates an event, or a recurring series when `recurrence` is given, in which case the
        first instance of the series is returned.
        """
        deps = get_event_mutation_dependencies()
        try:
            actor = get_authenticated_user(info)
            event_data = parse_event_input(get_create_event_input_data(input))
            return deps.event_service.create_event(actor, event_data)  # type: ignore
        except ServiceError as e:
            raise e.to_graphql_error() from e


@strawberry.type
class EventQueries:
    @strawberry.field
    def recurrence_occurrences(
        self,
        info: strawberry.Info,
        rule_string: str,
        start_at: datetime.datetime,
        end_at: datetime.datetime | None = None,
    ) -> list[datetime.datetime]:
        """Previews the occurrences of a recurrence rule without persisting anything."""
        deps = get_event_mutation_dependencies()
        try:
            get_authenticated_user(info)
            return deps.recurrence_expander.expand(rule_string, start_at, hard_end=end_at)
        except InvalidRecurrenceError as e:
            raise InvalidArgumentsError.at(("ruleString",), str(e)).to_graphql_error() from e
        except ServiceError as e:
            raise e.to_graphql_error() from e
