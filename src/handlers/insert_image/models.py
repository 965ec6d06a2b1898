"""Pydantic model for the image insert request."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.commands import InsertCommand


class InsertImageRequest(BaseModel):
    """Wire model for image upload and replace requests."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    image: str = Field("", description="Base64 encoded image file")
    image_name: str | None = Field(
        None, alias="image-name", max_length=255, description="Requested image name"
    )
    image_format: str | None = Field(
        None, alias="image-format", max_length=16, description="Image file extension"
    )
    client_name: str | None = Field(
        None, alias="client-name", max_length=255, description="Uploading application"
    )
    username: str | None = Field(None, max_length=255)
    auth_token: str | None = Field(None, alias="auth-token")
    hidden: bool = False

    def to_command(self, *, require_auth: bool, requester_address: str) -> InsertCommand:
        return InsertCommand(
            image=self.image,
            name=self.image_name or None,
            format=self.image_format or None,
            client=self.client_name or None,
            username=self.username or None,
            token=self.auth_token or None,
            hidden=self.hidden,
            require_auth=require_auth,
            requester_address=requester_address,
        )
