"""Service configuration loaded from environment variables."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_IMAGE_LOCATION,
    ENV_ALLOW_SEARCH,
    ENV_AUTH_TOKEN_TABLE_NAME,
    ENV_DATE_FORMAT,
    ENV_IMAGE_LOCATION,
    ENV_IMAGE_METADATA_TABLE_NAME,
    ENV_REQUIRE_AUTH,
    ENV_TRUST_HEADERS,
)


class ServiceConfig(BaseModel):
    """Runtime switches shared by every handler."""

    model_config = ConfigDict(frozen=True)

    image_location: str = Field(DEFAULT_IMAGE_LOCATION, min_length=1)
    metadata_table_name: str | None = None
    auth_table_name: str | None = None
    require_auth: bool = False
    allow_search: bool = True
    trust_headers: bool = False
    date_format: str = Field(DEFAULT_DATE_FORMAT, min_length=1)


def load_config(environ: Mapping[str, str] | None = None) -> ServiceConfig:
    """Build a ServiceConfig from the environment.

    Unset variables fall back to the model defaults. Boolean switches accept
    the usual pydantic spellings ("true", "1", "yes", "false", "0", ...).

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ

    values = {
        "image_location": env.get(ENV_IMAGE_LOCATION),
        "metadata_table_name": env.get(ENV_IMAGE_METADATA_TABLE_NAME),
        "auth_table_name": env.get(ENV_AUTH_TOKEN_TABLE_NAME),
        "require_auth": env.get(ENV_REQUIRE_AUTH),
        "allow_search": env.get(ENV_ALLOW_SEARCH),
        "trust_headers": env.get(ENV_TRUST_HEADERS),
        "date_format": env.get(ENV_DATE_FORMAT),
    }

    return ServiceConfig(**{key: value for key, value in values.items() if value is not None})
