"""Pydantic model for the image delete request."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.commands import DeleteCommand


class DeleteImageRequest(BaseModel):
    """Wire model for deleting an owned image."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    image_name: str = Field("", alias="image-name", max_length=255)
    username: str = Field("", max_length=255)
    auth_token: str = Field("", alias="auth-token")

    def to_command(self, *, requester_address: str) -> DeleteCommand:
        return DeleteCommand(
            name=self.image_name,
            username=self.username,
            token=self.auth_token,
            requester_address=requester_address,
        )
