"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod


class ImageStorageRepository(ABC):
    """Contract for storing and retrieving image blobs.

    Blobs are addressed by a flat path of the form ``name.format``.
    """

    @abstractmethod
    def write_image(self, *, path: str, file_data: bytes) -> None:
        """Write image bytes, replacing any existing blob at the same path.

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def read_image(self, *, path: str) -> bytes:
        """Read image bytes.

        Raises:
            NotFoundError: If the blob doesn't exist
            StorageError: If the read fails
        """

    @abstractmethod
    def remove_image(self, *, path: str) -> None:
        """Delete an image blob.

        Raises:
            NotFoundError: If the blob doesn't exist
            StorageError: If deletion fails for any other reason
        """
