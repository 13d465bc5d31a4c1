import dataclasses
from collections.abc import Iterable, Sequence

from graphql import GraphQLError


ArgumentPath = tuple[str | int, ...]


@dataclasses.dataclass(frozen=True)
class ArgumentIssue:
    """A single offending input location and what is wrong with it."""

    argument_path: ArgumentPath
    message: str

    def as_dict(self) -> dict:
        return {"argumentPath": list(self.argument_path), "message": self.message}


class ServiceError(Exception):
    """
    Base exception for errors surfaced to API callers.

    Every subclass carries a stable machine-readable `code` and, where applicable, a list of
    `ArgumentIssue` pinpointing the offending input fields.
    """

    code = "unexpected"
    default_message = ""

    def __init__(self, message: str | None = None, issues: Iterable[ArgumentIssue] = ()):
        if message is None:
            message = self.default_message
        super().__init__(message)
        self.message = message
        self.issues: list[ArgumentIssue] = list(issues)

    @classmethod
    def at(cls, argument_path: Sequence[str | int], message: str | None = None):
        """Builds the error with a single issue located at `argument_path`."""
        message = message or cls.default_message
        return cls(message, issues=[ArgumentIssue(tuple(argument_path), message)])

    def to_graphql_error(self) -> GraphQLError:
        return GraphQLError(
            self.message,
            extensions={
                "code": self.code,
                "issues": [issue.as_dict() for issue in self.issues],
            },
        )


class UnauthenticatedError(ServiceError):
    code = "unauthenticated"
    default_message = "Authentication is required to perform this action."


class InvalidArgumentsError(ServiceError):
    code = "invalid_arguments"
    default_message = "Invalid arguments."


class ResourceNotFoundError(ServiceError):
    code = "arguments_associated_resources_not_found"
    default_message = "A resource referenced by the arguments does not exist."


class UnauthorizedError(ServiceError):
    code = "unauthorized_action_on_arguments_associated_resources"
    default_message = "You are not allowed to perform this action on the referenced resources."


class ConflictError(ServiceError):
    code = "forbidden_action_on_arguments_associated_resources"
    default_message = "The arguments conflict with an existing resource."


class UnexpectedError(ServiceError):
    """
    An invariant the caller could not have violated was broken, usually by the storage layer.
    The message never carries internals: details are logged server side where it's raised.
    """

    code = "unexpected"
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None, issues: Iterable[ArgumentIssue] = ()):
        # callers may pass details for logging purposes, they never reach the API response
        self.detail = message
        super().__init__(self.default_message, issues=())
