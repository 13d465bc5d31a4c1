from collections.abc import Mapping
from typing import Any

from rest_framework import serializers
from rest_framework.settings import api_settings
from strawberry.utils.str_converters import to_camel_case

from common.exceptions import ArgumentIssue, ArgumentPath, InvalidArgumentsError


class StreamField(serializers.Field):
    """Accepts any readable binary stream and passes it through untouched."""

    default_error_messages = {  # noqa: RUF012
        "invalid": "Expected a readable stream.",
    }

    def to_internal_value(self, data):
        if not callable(getattr(data, "read", None)):
            self.fail("invalid")
        return data

    def to_representation(self, value):
        return None


def get_argument_issues_from_errors(errors: Any, path: ArgumentPath = ()) -> list[ArgumentIssue]:
    """
    Flattens DRF serializer errors into `ArgumentIssue`s with camel cased paths.
    Non-field errors are addressed at the path of the serializer that raised them.
    """
    issues: list[ArgumentIssue] = []
    if isinstance(errors, Mapping):
        for key, value in errors.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                issues.extend(get_argument_issues_from_errors(value, path))
                continue
            if isinstance(key, str) and key.isdigit():
                key = int(key)
            segment = to_camel_case(key) if isinstance(key, str) else key
            issues.extend(get_argument_issues_from_errors(value, (*path, segment)))
    elif isinstance(errors, list | tuple):
        for index, value in enumerate(errors):
            if isinstance(value, str):
                issues.append(ArgumentIssue(path, str(value)))
            elif value:
                issues.extend(get_argument_issues_from_errors(value, (*path, index)))
    elif errors:
        issues.append(ArgumentIssue(path, str(errors)))
    return issues


def validate_input(
    serializer_class: type[serializers.Serializer],
    data: Mapping,
    path: ArgumentPath = ("input",),
) -> dict:
    """
    Runs `serializer_class` over `data` and returns the validated data.
    :raises InvalidArgumentsError: with one issue per error found.
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise InvalidArgumentsError(issues=get_argument_issues_from_errors(serializer.errors, path))
    return serializer.validated_data
