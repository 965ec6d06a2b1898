"""Pydantic model for the hide/unhide request."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.commands import HideCommand


class HideImageRequest(BaseModel):
    """Wire model for changing an image's hidden flag."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    image_name: str = Field("", alias="image-name", max_length=255)
    hidden: bool = False
    username: str = Field("", max_length=255)
    auth_token: str = Field("", alias="auth-token")

    def to_command(self, *, requester_address: str) -> HideCommand:
        return HideCommand(
            name=self.image_name,
            hidden=self.hidden,
            username=self.username,
            token=self.auth_token,
            requester_address=requester_address,
        )
