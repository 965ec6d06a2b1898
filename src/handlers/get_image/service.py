"""
Business logic for image retrieval.

A request path naming an image row gets its description; any other path is
served as a stored blob (``name.format``). Hidden images stay readable by
direct name.
"""

from pathlib import PurePosixPath
from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from core.infrastructure.local.disk_image_storage import LocalDiskImageStorage
from core.models.errors import NotFoundError
from core.models.image import Image
from core.repositories.metadata_repository import ImageMetadataRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.config import ServiceConfig
from core.utils.constants import (
    ERROR_CODE_IMAGE_NOT_FOUND,
    EXTENSION_MIME_TYPE_MAP,
    FALLBACK_CONTENT_TYPE,
)
from core.utils.names import blob_path, is_safe_path_segment
from core.utils.time import format_timestamp

logger = Logger(UTC=True)


class GetService:
    """Application service responsible for reading images and their metadata."""

    def __init__(
        self,
        *,
        metadata: ImageMetadataRepository,
        storage: ImageStorageRepository,
        date_format: str,
    ) -> None:
        self.metadata = metadata
        self.storage = storage
        self.date_format = date_format

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "GetService":
        return cls(
            metadata=DynamoDBMetadata(DynamoDBAdapter(config.metadata_table_name)),
            storage=LocalDiskImageStorage(config.image_location),
            date_format=config.date_format,
        )

    @staticmethod
    def _not_found(path: str) -> NotFoundError:
        return NotFoundError(
            message="Image not found",
            error_code=ERROR_CODE_IMAGE_NOT_FOUND,
            details={"path": path},
        )

    def read_blob(self, path: str) -> tuple[bytes, str]:
        """Read a blob and resolve its content type.

        The stored MIME type wins when a row exists for the name, otherwise
        the type is derived from the file extension.

        Raises:
            NotFoundError: If the path is invalid or the blob doesn't exist
            StorageError: If the read fails
        """
        if not is_safe_path_segment(path):
            raise self._not_found(path)

        data = self.storage.read_image(path=path)

        stem = PurePosixPath(path).stem
        extension = PurePosixPath(path).suffix.lstrip(".").lower()

        image = self.metadata.fetch_image(name=stem)
        if image is not None and image.mime_type:
            content_type = image.mime_type
        else:
            content_type = EXTENSION_MIME_TYPE_MAP.get(extension, FALLBACK_CONTENT_TYPE)

        logger.debug(
            "Image read",
            extra={"path": path, "size": len(data), "content_type": content_type},
        )
        return data, content_type

    def describe(self, name: str) -> dict[str, Any] | None:
        """Describe an image for its display page.

        The whole request path is taken as the image name, so names that
        contain a dot are described too. Returns None when no image row
        carries exactly this name.

        Raises:
            DynamoDBError: If the metadata lookup fails
        """
        if not is_safe_path_segment(name):
            return None

        image: Image | None = self.metadata.fetch_image(name=name)
        if image is None:
            logger.debug("No image row for requested path", extra={"image_name": name})
            return None

        return {
            **image.to_public(),
            "image-path": blob_path(image.name, image.format),
            "date": format_timestamp(image.timestamp, self.date_format),
        }
