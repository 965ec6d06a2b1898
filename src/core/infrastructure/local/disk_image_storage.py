"""Local filesystem implementation of ImageStorageRepository."""

import os
from pathlib import Path

from aws_lambda_powertools import Logger

from core.models.errors import NotFoundError, StorageError
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ENV_IMAGE_LOCATION,
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_WRITE_FAILED,
)

logger = Logger(UTC=True)

FILE_MODE = 0o644


class LocalDiskImageStorage(ImageStorageRepository):
    """Stores image blobs as flat files under a base directory."""

    _base_directory: Path

    def __init__(self, base_directory: str | Path | None = None) -> None:
        location = base_directory or os.getenv(ENV_IMAGE_LOCATION)
        if not location:
            raise RuntimeError(f"{ENV_IMAGE_LOCATION} environment variable is not set")

        self._base_directory = Path(location).resolve()
        self._base_directory.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        # Blobs live directly under the base directory; anything else is rejected
        file_name = Path(path).name
        if not file_name or file_name != path:
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"path": path},
            )
        return self._base_directory / file_name

    def write_image(self, *, path: str, file_data: bytes) -> None:
        full_path = self._resolve(path)

        logger.debug("Writing image", extra={"path": path, "size": len(file_data)})

        try:
            full_path.write_bytes(file_data)
            full_path.chmod(FILE_MODE)
        except OSError as exc:
            logger.error("Image write failed", extra={"path": path})
            raise StorageError(
                message="Unable to save image at this time",
                error_code=ERROR_CODE_IMAGE_WRITE_FAILED,
                details={"path": path},
            ) from exc

        logger.info("Image written", extra={"path": path})

    def read_image(self, *, path: str) -> bytes:
        full_path = self._resolve(path)

        try:
            return full_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"path": path},
            ) from exc
        except OSError as exc:
            logger.error("Image read failed", extra={"path": path})
            raise StorageError(
                message="Unable to read image at this time",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"path": path},
            ) from exc

    def remove_image(self, *, path: str) -> None:
        full_path = self._resolve(path)

        logger.debug("Deleting image", extra={"path": path})

        try:
            full_path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"path": path},
            ) from exc
        except OSError as exc:
            logger.error("Image deletion failed", extra={"path": path})
            raise StorageError(
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"path": path},
            ) from exc

        logger.info("Image deleted", extra={"path": path})
