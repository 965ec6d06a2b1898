"""DynamoDB-backed implementation of ImageMetadataRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import (
    DuplicateImageError,
    DynamoDBError,
    NotFoundError,
)
from core.models.image import Image
from core.repositories.metadata_repository import ImageMetadataRepository
from core.utils.constants import (
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_SEARCH_FAILED,
    ERROR_CODE_METADATA_UPDATE_FAILED,
)

Item = dict[str, Any]

logger = Logger(UTC=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"
ROW_EXISTS = "attribute_exists(image_name)"
ROW_MISSING = "attribute_not_exists(image_name)"


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


def image_to_item(image: Image) -> Item:
    """Map an Image onto the table's attribute names."""
    return {
        "image_name": image.name,
        "image_format": image.format,
        "mime_type": image.mime_type,
        "owner": image.owner,
        "uploader_address": image.uploader_address,
        "client_name": image.client,
        "hidden": image.hidden,
        "created_at": image.timestamp,
    }


def item_to_image(item: Item) -> Image:
    """Build an Image from a table item. Numbers come back from boto3 as Decimal."""
    return Image(
        name=item["image_name"],
        format=item["image_format"],
        mime_type=item["mime_type"],
        owner=item["owner"],
        uploader_address=item.get("uploader_address", ""),
        client=item["client_name"],
        hidden=bool(item.get("hidden", False)),
        timestamp=int(item["created_at"]),
    )


class DynamoDBMetadata(ImageMetadataRepository):
    """DynamoDB-backed metadata storage with error handling.

    The table is keyed on ``image_name``. All boto3 errors are caught and
    translated into domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    def find_owner(self, *, name: str) -> str | None:
        logger.debug("Looking up image owner", extra={"image_name": name})

        try:
            response = self._db.get_item(key={"image_name": name})
        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"image_name": name})
            raise DynamoDBError(
                message="Unable to look up image owner",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_name": name},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error looking up image owner")
            raise DynamoDBError(
                message="Unable to look up image owner",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_name": name},
            ) from exc

        item = response.get("Item")
        if not item:
            return None

        owner = item.get("owner")
        return owner if isinstance(owner, str) and owner else None

    def fetch_image(self, *, name: str) -> Image | None:
        logger.debug("Fetching image", extra={"image_name": name})

        try:
            response = self._db.get_item(key={"image_name": name})
            item = response.get("Item")

            if item is None:
                return None

            return item_to_image(item)

        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"image_name": name})
            raise DynamoDBError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_name": name},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching image metadata")
            raise DynamoDBError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_name": name},
            ) from exc

    def create_image(self, *, image: Image) -> None:
        """Claim an image name with a conditional put.

        Raises:
            DuplicateImageError: If another row already holds the name
            DynamoDBError: If creation fails
        """
        logger.debug(
            "Creating image metadata",
            extra={"image_name": image.name, "owner": image.owner},
        )

        try:
            self._db.put_item(item=image_to_item(image), condition_expression=ROW_MISSING)
            logger.info(
                "Image metadata created",
                extra={"image_name": image.name, "owner": image.owner},
            )

        except ClientError as exc:
            if _error_code(exc) == CONDITIONAL_CHECK_FAILED:
                logger.info(
                    "Image name already claimed",
                    extra={"image_name": image.name, "owner": image.owner},
                )
                raise DuplicateImageError(
                    message="The image name is already in use",
                    details={"image_name": image.name},
                ) from exc

            logger.error("DynamoDB put_item failed", extra={"image_name": image.name})
            raise DynamoDBError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_name": image.name},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating image metadata")
            raise DynamoDBError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_name": image.name},
            ) from exc

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
        self._update_existing(
            name=name,
            attributes={
                "image_format": image_format,
                "mime_type": mime_type,
                "uploader_address": uploader_address,
                "client_name": client,
                "hidden": hidden,
                "created_at": timestamp,
            },
        )

    def set_hidden(self, *, name: str, hidden: bool) -> None:
        self._update_existing(name=name, attributes={"hidden": hidden})

    def _update_existing(self, *, name: str, attributes: dict[str, Any]) -> None:
        """SET the given attributes on a row that must already exist."""
        names = {f"#a{i}": attr for i, attr in enumerate(attributes)}
        values = {f":v{i}": value for i, value in enumerate(attributes.values())}
        assignments = ", ".join(f"#a{i} = :v{i}" for i in range(len(attributes)))

        logger.debug(
            "Updating image metadata",
            extra={"image_name": name, "attributes": sorted(attributes)},
        )

        try:
            self._db.update_item(
                key={"image_name": name},
                UpdateExpression=f"SET {assignments}",
                ConditionExpression=ROW_EXISTS,
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
            logger.info("Image metadata updated", extra={"image_name": name})

        except ClientError as exc:
            if _error_code(exc) == CONDITIONAL_CHECK_FAILED:
                raise NotFoundError(
                    message="Image not found",
                    error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                    details={"image_name": name},
                ) from exc

            logger.error("DynamoDB update_item failed", extra={"image_name": name})
            raise DynamoDBError(
                message="Unable to update image metadata",
                error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                details={"image_name": name},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating image metadata")
            raise DynamoDBError(
                message="Unable to update image metadata",
                error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                details={"image_name": name},
            ) from exc

    def remove_image(self, *, name: str) -> None:
        logger.debug("Removing image metadata", extra={"image_name": name})

        try:
            self._db.delete_item(key={"image_name": name})
            logger.info("Image metadata removed", extra={"image_name": name})

        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"image_name": name})
            raise DynamoDBError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_name": name},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing image metadata")
            raise DynamoDBError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_name": name},
            ) from exc

    def search_images(
        self,
        *,
        image_format: str | None = None,
        uploader: str | None = None,
        client: str | None = None,
        min_time: int | None = None,
        max_time: int | None = None,
    ) -> list[Image]:
        """Scan for visible images matching every given predicate.

        NOTE:
        - Predicates are applied as a scan filter, so cost grows with table size.
        - Results are sorted newest first after all pages are read.
        """
        predicates = {
            "image_format": image_format,
            "uploader": uploader,
            "client": client,
            "min_time": min_time,
            "max_time": max_time,
        }
        logger.debug("Searching images", extra=predicates)

        condition: ConditionBase = Attr("hidden").eq(False)

        if image_format:
            condition &= Attr("image_format").eq(image_format)
        if uploader:
            condition &= Attr("owner").eq(uploader)
        if client:
            condition &= Attr("client_name").eq(client)

        # Separate bounds instead of BETWEEN, which DynamoDB rejects when min > max
        if min_time and min_time > 0:
            condition &= Attr("created_at").gte(min_time)
        if max_time and max_time > 0:
            condition &= Attr("created_at").lte(max_time)

        scan_kwargs: dict[str, Any] = {"FilterExpression": condition}
        items: list[Item] = []

        try:
            while True:
                response = self._db.scan(**scan_kwargs)
                items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

            images = [item_to_image(item) for item in items]

        except ClientError as exc:
            logger.error("DynamoDB scan failed", extra=predicates)
            raise DynamoDBError(
                message="Unable to search images",
                error_code=ERROR_CODE_METADATA_SEARCH_FAILED,
                details=predicates,
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error searching images")
            raise DynamoDBError(
                message="Unable to search images",
                error_code=ERROR_CODE_METADATA_SEARCH_FAILED,
                details=predicates,
            ) from exc

        images.sort(key=lambda image: image.timestamp, reverse=True)
        logger.info("Image search completed", extra={"count": len(images)})
        return images
