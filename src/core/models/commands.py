"""Typed commands accepted by the image lifecycle and search services.

Handlers build these from decoded wire requests. Commands carry raw caller
input; defaults and shape checks are applied by the services so that the
same rules hold for every entry point.
"""

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field

from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_INVALID_PAYLOAD
from core.utils.names import is_safe_path_segment


class InsertCommand(BaseModel):
    """Upload or replace an image."""

    model_config = ConfigDict(frozen=True)

    image: str = Field("", description="Base64 encoded image bytes")
    name: str | None = Field(None, description="Requested image name, generated if absent")
    format: str | None = Field(None, description="File extension, defaults to png")
    client: str | None = Field(None, description="Uploading application")
    username: str | None = None
    token: str | None = None
    hidden: bool = False
    require_auth: bool = False
    requester_address: str = ""

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.token)

    def decode_image(self) -> bytes:
        """Decode the base64 payload.

        Raises:
            ValidationError: If the payload is empty or not valid base64
        """
        if not self.image or not self.image.strip():
            raise ValidationError(
                message="Image payload must not be empty",
                error_code=ERROR_CODE_INVALID_PAYLOAD,
            )

        try:
            data = base64.b64decode(self.image, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(
                message="Image payload is not valid base64",
                error_code=ERROR_CODE_INVALID_PAYLOAD,
            ) from exc

        if not data:
            raise ValidationError(
                message="Decoded image payload is empty",
                error_code=ERROR_CODE_INVALID_PAYLOAD,
            )

        return data

    def validate_path_fields(self) -> None:
        """Reject names or formats that would escape the image directory."""
        for field, value in (("name", self.name), ("format", self.format)):
            if value and not is_safe_path_segment(value):
                raise ValidationError(
                    message=f"Invalid image {field}",
                    error_code=ERROR_CODE_INVALID_PAYLOAD,
                    details={field: value},
                )


class HideCommand(BaseModel):
    """Change the hidden flag of an owned image."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    hidden: bool = False
    username: str = ""
    token: str = ""
    requester_address: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.username) and bool(self.token)


class DeleteCommand(BaseModel):
    """Delete an owned image."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    username: str = ""
    token: str = ""
    requester_address: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.username) and bool(self.token)


class SearchCommand(BaseModel):
    """Search for visible images; empty or non-positive fields are wildcards."""

    model_config = ConfigDict(frozen=True)

    format: str = ""
    uploader: str = ""
    client: str = ""
    min_time: int = 0
    max_time: int = 0
    requester_address: str = ""

    @property
    def is_empty(self) -> bool:
        return (
            not self.format
            and not self.uploader
            and not self.client
            and self.min_time <= 0
            and self.max_time <= 0
        )
