"""Pydantic model for the image search request."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.commands import SearchCommand


class SearchImagesRequest(BaseModel):
    """Wire model for searching visible images.

    Every field is optional; empty strings and non-positive times act as
    wildcards.
    """

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    image_format: str = Field("", alias="image-format", max_length=16)
    uploader: str = Field("", max_length=255)
    client_name: str = Field("", alias="client-name", max_length=255)
    uploaded_after: int = Field(0, alias="uploaded-after", description="Epoch seconds")
    uploaded_before: int = Field(0, alias="uploaded-before", description="Epoch seconds")

    def to_command(self, *, requester_address: str) -> SearchCommand:
        return SearchCommand(
            format=self.image_format,
            uploader=self.uploader,
            client=self.client_name,
            min_time=self.uploaded_after,
            max_time=self.uploaded_before,
            requester_address=requester_address,
        )
