from dataclasses import dataclass
from dataclasses import field as dataclass_field

from attachments.services.dataclasses import AttachmentInputData


@dataclass
class VenueInputData:
    name: str
    organization_id: int
    description: str = ""
    attachments: list[AttachmentInputData] = dataclass_field(default_factory=list)
