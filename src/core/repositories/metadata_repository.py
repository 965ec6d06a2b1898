"""Abstract contract for image metadata persistence."""

from abc import ABC, abstractmethod

from core.models.image import Image


class ImageMetadataRepository(ABC):
    """Contract for storing and retrieving image metadata.

    Implementations could be DynamoDB, PostgreSQL, SQLite, etc.
    Every method is expected to be atomic for a single image row.
    """

    @abstractmethod
    def find_owner(self, *, name: str) -> str | None:
        """Return the owner of an image name, or None if the name is unclaimed.

        Raises:
            DynamoDBError: If the lookup fails
        """

    @abstractmethod
    def fetch_image(self, *, name: str) -> Image | None:
        """Fetch a single image record.

        Returns:
            Image or None if not found

        Raises:
            DynamoDBError: If the fetch fails
        """

    @abstractmethod
    def create_image(self, *, image: Image) -> None:
        """Claim a new image name.

        Raises:
            DuplicateImageError: If the name is already claimed
            DynamoDBError: If creation fails for other reasons
        """

    @abstractmethod
    def update_image(
        self,
        *,
        name: str,
        image_format: str,
        mime_type: str,
        uploader_address: str,
        client: str,
        hidden: bool,
        timestamp: int,
    ) -> None:
        """Overwrite the mutable attributes of an existing image.

        Raises:
            NotFoundError: If the image row no longer exists
            DynamoDBError: If the update fails
        """

    @abstractmethod
    def set_hidden(self, *, name: str, hidden: bool) -> None:
        """Set the hidden flag of an existing image.

        Raises:
            NotFoundError: If the image row no longer exists
            DynamoDBError: If the update fails
        """

    @abstractmethod
    def remove_image(self, *, name: str) -> None:
        """Remove an image record.

        Raises:
            DynamoDBError: If deletion fails
        """

    @abstractmethod
    def search_images(
        self,
        *,
        image_format: str | None = None,
        uploader: str | None = None,
        client: str | None = None,
        min_time: int | None = None,
        max_time: int | None = None,
    ) -> list[Image]:
        """Search visible images. Every given predicate is ANDed.

        Returns:
            Matching images, newest first

        Raises:
            DynamoDBError: If the search fails
        """
