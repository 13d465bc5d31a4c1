from collections.abc import Sequence

from common.exceptions import UnexpectedError


class AttachmentStorageError(UnexpectedError):
    """Raised when one or more attachment blobs could not be written after their rows exist."""

    def __init__(self, failed_keys: Sequence[str]):
        self.failed_keys = list(failed_keys)
        super().__init__(f"Failed to store attachment blobs: {', '.join(self.failed_keys)}")
