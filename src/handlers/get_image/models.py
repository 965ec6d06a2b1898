from pydantic import BaseModel, ConfigDict, Field, StrictStr


class GetImageRequest(BaseModel):
    """Path parameters of a get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    image: StrictStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Image name, or the stored file name (name.format)",
    )
