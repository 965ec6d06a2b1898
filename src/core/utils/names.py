"""Image name generation and validation helpers."""

import secrets
import string

from core.utils.constants import GENERATED_NAME_LENGTH

NAME_ALPHABET = string.ascii_letters + string.digits


def generate_image_name(length: int = GENERATED_NAME_LENGTH) -> str:
    """Generate a random image name.

    The result is not checked against existing names; uniqueness is
    enforced by the metadata store when the image is claimed.
    """
    return "".join(secrets.choice(NAME_ALPHABET) for _ in range(length))


def blob_path(name: str, image_format: str) -> str:
    """Return the storage path of an image blob."""
    return f"{name}.{image_format}"


def is_safe_path_segment(value: str) -> bool:
    """Whether a name can be used as a single file name under the image root."""
    return bool(value) and "/" not in value and "\\" not in value and value not in (".", "..")
