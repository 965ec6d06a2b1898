"""Shared image model."""

from typing import Any

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr


class Image(BaseModel):
    """Image record kept by the metadata store."""

    name: StrictStr = Field(..., min_length=1, description="Unique image name")
    format: StrictStr = Field(..., min_length=1, description="File extension of the stored blob")
    mime_type: StrictStr = Field(..., description="Sniffed MIME type (e.g. image/jpeg)")
    owner: StrictStr = Field(..., description="Uploading user, or 'anonymous'")
    uploader_address: StrictStr = Field(
        ..., description="Network origin of the creating or last mutating request"
    )
    client: StrictStr = Field(..., description="Name of the uploading application")
    hidden: StrictBool = Field(False, description="Excluded from search results when true")
    timestamp: StrictInt = Field(..., description="Creation/replace time in epoch seconds")

    def to_public(self) -> dict[str, Any]:
        """Serialize for API responses; the uploader address is never exposed."""
        return {
            "image-name": self.name,
            "image-format": self.format,
            "mime-type": self.mime_type,
            "uploader": self.owner,
            "client-name": self.client,
            "hidden": self.hidden,
            "timestamp": self.timestamp,
        }
