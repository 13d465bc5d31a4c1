import strawberry

from common.exceptions import UnauthenticatedError


def get_authenticated_user(info: strawberry.Info):
    """
    Returns the user of the request behind `info`.
    :raises UnauthenticatedError: if the request has no authenticated session.
    """
    user = getattr(info.context.request, "user", None)
    if user is None or not user.is_authenticated:
        raise UnauthenticatedError()
    return user

