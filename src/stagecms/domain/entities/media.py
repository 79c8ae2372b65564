"""Media entity for uploaded file metadata.

Media records are written by the upload pipeline. Collection items only
reference them from file fields and read them back for enrichment.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Media:
    """Metadata of one stored file.

    Attributes:
        id: Unique identifier (UUID string).
        file_name: Original file name.
        file_name_url: Generated storage file name.
        content_type: MIME type.
        file_size: Size in bytes.
        url: Public URL of the stored file.
        tags: Free-form tags.
        extension: File extension without the dot.
        stage_id: Owning stage.
        created_at: Upload timestamp.
        updated_at: Last metadata update.
    """

    id: str
    file_name: str
    file_name_url: str
    content_type: str
    file_size: int
    url: str
    stage_id: str
    extension: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_reference(self) -> dict[str, Any]:
        """Build the enriched value stored in place of a file reference."""
        return {
            "_id": self.id,
            "fileName": self.file_name,
            "fileNameUrl": self.file_name_url,
            "contentType": self.content_type,
            "fileSize": self.file_size,
            "url": self.url,
            "tags": list(self.tags),
            "extension": self.extension,
            "stageId": self.stage_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
