from collections.abc import Collection, Iterable, Sequence

from common.exceptions import ArgumentIssue


def get_media_type_not_allowed_message(media_type: str) -> str:
    return f'Mime type "{media_type}" is not allowed.'


def get_disallowed_media_type_issues(
    media_types: Iterable[str],
    allowed_media_types: Collection[str],
    argument_path: Sequence[str | int] = ("input", "attachments"),
) -> list[ArgumentIssue]:
    """
    Returns one issue per attachment whose media type isn't allowed, addressed at its index.
    """
    return [
        ArgumentIssue(
            (*argument_path, index),
            get_media_type_not_allowed_message(media_type),
        )
        for index, media_type in enumerate(media_types)
        if media_type not in allowed_media_types
    ]
