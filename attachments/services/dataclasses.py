import dataclasses
from typing import IO


@dataclasses.dataclass
class AttachmentStoreRequest:
    key: str
    media_type: str
    stream: IO


@dataclasses.dataclass
class AttachmentStoreResult:
    key: str
    stored: bool
    error: str | None = None


@dataclasses.dataclass
class AttachmentReconciliationSummary:
    stored: int = 0
    deleted: int = 0


@dataclasses.dataclass
class AttachmentInputData:
    media_type: str
    stream: IO
