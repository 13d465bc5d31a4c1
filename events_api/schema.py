import strawberry
from strawberry.extensions import (
    MaxTokensLimiter,
    QueryDepthLimiter,
)
from strawberry_django.optimizer import DjangoOptimizerExtension

from events.mutations import EventMutations, EventQueries
from venues.mutations import VenueMutations


@strawberry.type
class Query(EventQueries):
    pass


@strawberry.type
class Mutation(EventMutations, VenueMutations):
    pass


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        DjangoOptimizerExtension,
        lambda: MaxTokensLimiter(max_token_count=1000),
        lambda: QueryDepthLimiter(max_depth=10),
    ],
)
