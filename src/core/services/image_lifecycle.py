"""Ownership-aware lifecycle of stored images.

This module coordinates credential checks, ownership resolution, blob storage
and metadata persistence for insert, hide and delete requests.

Ordering rules:
- Insert writes the blob before the metadata row, so an interrupted insert
  leaves at worst an orphaned file, never a row that points at nothing.
- Delete removes the metadata row before the blob, so an interrupted delete
  leaves at worst an orphaned file, never a row that points at nothing.
- Already applied steps are never rolled back and nothing is retried.
"""

from enum import Enum
from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.aws.dynamodb_auth import DynamoDBAuthGateway
from core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from core.infrastructure.local.disk_image_storage import LocalDiskImageStorage
from core.models.commands import DeleteCommand, HideCommand, InsertCommand
from core.models.errors import (
    DuplicateImageError,
    ImageServiceError,
    MIMETypeError,
    NotFoundError,
    ValidationError,
)
from core.models.image import Image
from core.models.outcomes import (
    DeleteOutcome,
    DeleteStatus,
    HideOutcome,
    HideStatus,
    InsertOutcome,
    InsertStatus,
)
from core.repositories.auth_repository import AuthGateway, AuthVerdict
from core.repositories.metadata_repository import ImageMetadataRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.config import ServiceConfig
from core.utils.constants import (
    ANONYMOUS_USER,
    DEFAULT_CLIENT_NAME,
    DEFAULT_IMAGE_FORMAT,
    ENV_AUTH_TOKEN_TABLE_NAME,
)
from core.utils.mime import detect_mime_type
from core.utils.names import blob_path, generate_image_name
from core.utils.time import utc_now_epoch

logger = Logger(UTC=True)


class Authority(Enum):
    """What an identity may do with an image name."""

    UNCLAIMED = "unclaimed"
    OWNER = "owner"
    NOT_OWNER = "not-owner"


class ImageLifecycle:
    """Application service for creating, replacing, hiding and deleting images."""

    def __init__(
        self,
        *,
        auth: AuthGateway,
        metadata: ImageMetadataRepository,
        storage: ImageStorageRepository,
    ) -> None:
        self.auth = auth
        self.metadata = metadata
        self.storage = storage

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "ImageLifecycle":
        """Wire the DynamoDB and local disk implementations."""
        return cls(
            auth=DynamoDBAuthGateway(
                DynamoDBAdapter(config.auth_table_name, table_env=ENV_AUTH_TOKEN_TABLE_NAME)
            ),
            metadata=DynamoDBMetadata(DynamoDBAdapter(config.metadata_table_name)),
            storage=LocalDiskImageStorage(config.image_location),
        )

    # ------------------------------------------------------------------
    # Authorization helpers
    # ------------------------------------------------------------------

    def _authenticate(self, *, username: str, token: str, context: dict[str, Any]) -> bool:
        verdict = self.auth.verify(username=username, token=token)

        if verdict is AuthVerdict.OK:
            return True

        if verdict is AuthVerdict.TRANSPORT_ERROR:
            logger.warning("Credential check could not be completed", extra=context)
        else:
            logger.debug("Authentication with a wrong token", extra=context)
        return False

    def _authority(self, *, name: str, identity: str) -> Authority:
        """Resolve the identity's authority over a name.

        The anonymous identity never has authority over an existing image.

        Raises:
            ImageServiceError: If the owner lookup fails
        """
        owner = self.metadata.find_owner(name=name)

        if owner is None:
            return Authority.UNCLAIMED
        if owner == identity and identity != ANONYMOUS_USER:
            return Authority.OWNER
        return Authority.NOT_OWNER

    # ------------------------------------------------------------------
    # Insert
    # ------------------------------------------------------------------

    def insert(self, command: InsertCommand) -> InsertOutcome:
        """Create a new image or replace one the caller owns.

        The insert flow is:
        1. Decode the payload and fill in name, format and client defaults
        2. Resolve the caller's identity (token check or anonymous)
        3. Resolve ownership of the name (create, replace or reject)
        4. Sniff the content type
        5. Write the blob, then create or update the metadata row
        """
        context: dict[str, Any] = {
            "username": command.username or ANONYMOUS_USER,
            "address": command.requester_address,
        }

        try:
            command.validate_path_fields()
            file_data = command.decode_image()
        except ValidationError as exc:
            logger.debug("Invalid insert payload", extra={**context, "reason": exc.message})
            return InsertOutcome.of(InsertStatus.INVALID_PAYLOAD)

        name = command.name or generate_image_name()
        image_format = command.format or DEFAULT_IMAGE_FORMAT
        client = command.client or DEFAULT_CLIENT_NAME
        context["image_name"] = name

        if command.has_credentials:
            if not self._authenticate(
                username=command.username or "",
                token=command.token or "",
                context=context,
            ):
                return InsertOutcome.of(InsertStatus.INVALID_AUTHTOKEN)
            identity = command.username or ""
        elif command.require_auth:
            logger.debug("Insert without credentials rejected", extra=context)
            return InsertOutcome.of(InsertStatus.NOT_LOGGED_IN)
        else:
            identity = ANONYMOUS_USER

        try:
            authority = self._authority(name=name, identity=identity)
        except ImageServiceError:
            logger.exception("Owner lookup failed during insert", extra=context)
            return InsertOutcome.of(InsertStatus.INTERNAL_ERROR)

        if authority is Authority.NOT_OWNER:
            logger.debug("Attempt to override an image uploaded by another user", extra=context)
            return InsertOutcome.of(InsertStatus.ALREADY_EXISTS)

        replace = authority is Authority.OWNER

        try:
            mime_type = detect_mime_type(file_data)
        except MIMETypeError:
            logger.debug("Uploaded data is not an image", extra=context)
            return InsertOutcome.of(InsertStatus.INVALID_MIME)

        previous_format: str | None = None
        if replace:
            try:
                previous = self.metadata.fetch_image(name=name)
            except ImageServiceError:
                logger.exception("Fetching the replaced image failed", extra=context)
                return InsertOutcome.of(InsertStatus.INTERNAL_ERROR)
            previous_format = previous.format if previous else None

        path = blob_path(name, image_format)
        try:
            self.storage.write_image(path=path, file_data=file_data)
        except ImageServiceError:
            logger.exception("Error while saving image", extra={**context, "path": path})
            return InsertOutcome.of(InsertStatus.INTERNAL_ERROR)

        timestamp = utc_now_epoch()

        if replace:
            try:
                self.metadata.update_image(
                    name=name,
                    image_format=image_format,
                    mime_type=mime_type,
                    uploader_address=command.requester_address,
                    client=client,
                    hidden=command.hidden,
                    timestamp=timestamp,
                )
            except ImageServiceError:
                logger.exception(
                    "Error while updating image metadata; blob left in place",
                    extra={**context, "path": path},
                )
                return InsertOutcome.of(InsertStatus.INTERNAL_ERROR)

            if previous_format and previous_format != image_format:
                self._discard_stale_blob(blob_path(name, previous_format), context)

            logger.info("Image replaced", extra={**context, "path": path})
            return InsertOutcome.of(InsertStatus.REPLACED, name=name)

        image = Image(
            name=name,
            format=image_format,
            mime_type=mime_type,
            owner=identity,
            uploader_address=command.requester_address,
            client=client,
            hidden=command.hidden,
            timestamp=timestamp,
        )

        try:
            self.metadata.create_image(image=image)
        except DuplicateImageError:
            # Another request claimed the name between the owner check and the insert
            logger.warning("Lost a concurrent claim for the image name", extra=context)
            return InsertOutcome.of(InsertStatus.ALREADY_EXISTS)
        except ImageServiceError:
            logger.exception(
                "Error while inserting image metadata; blob left in place",
                extra={**context, "path": path},
            )
            return InsertOutcome.of(InsertStatus.INTERNAL_ERROR)

        logger.info("Image created", extra={**context, "path": path})
        return InsertOutcome.of(InsertStatus.CREATED, name=name)

    def _discard_stale_blob(self, path: str, context: dict[str, Any]) -> None:
        """Remove the blob left behind when a replace changed the format."""
        try:
            self.storage.remove_image(path=path)
        except NotFoundError:
            logger.warning("Stale blob already absent", extra={**context, "path": path})
        except ImageServiceError:
            logger.exception("Failed to remove stale blob", extra={**context, "path": path})

    # ------------------------------------------------------------------
    # Hide
    # ------------------------------------------------------------------

    def set_hidden(self, command: HideCommand) -> HideOutcome:
        """Hide or unhide an image owned by the caller. Idempotent."""
        context: dict[str, Any] = {
            "username": command.username,
            "address": command.requester_address,
            "image_name": command.name,
        }

        if not command.is_complete:
            logger.debug("Invalid hide request", extra=context)
            return HideOutcome.of(HideStatus.MALFORMED)

        if not self._authenticate(username=command.username, token=command.token, context=context):
            return HideOutcome.of(HideStatus.INVALID_AUTHTOKEN)

        try:
            authority = self._authority(name=command.name, identity=command.username)
        except ImageServiceError:
            logger.exception("Owner lookup failed during hide", extra=context)
            return HideOutcome.of(HideStatus.INTERNAL_ERROR)

        if authority is Authority.UNCLAIMED:
            logger.debug("Attempt to hide an image that doesn't exist", extra=context)
            return HideOutcome.of(HideStatus.DOES_NOT_EXIST)
        if authority is Authority.NOT_OWNER:
            logger.debug("Attempt to hide an image uploaded by another user", extra=context)
            return HideOutcome.of(HideStatus.NO_PERMISSIONS)

        try:
            self.metadata.set_hidden(name=command.name, hidden=command.hidden)
        except NotFoundError:
            logger.debug("Image removed before hide completed", extra=context)
            return HideOutcome.of(HideStatus.DOES_NOT_EXIST)
        except ImageServiceError:
            logger.exception("Error changing hidden status", extra=context)
            return HideOutcome.of(HideStatus.INTERNAL_ERROR)

        status = HideStatus.HIDDEN if command.hidden else HideStatus.UNHIDDEN
        logger.info("Hidden status changed", extra={**context, "hidden": command.hidden})
        return HideOutcome.of(status, name=command.name)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, command: DeleteCommand) -> DeleteOutcome:
        """Delete an image owned by the caller.

        The metadata row is removed first. A blob that is already absent
        afterwards is logged and tolerated; any other filesystem failure is
        reported even though the row is gone.
        """
        context: dict[str, Any] = {
            "username": command.username,
            "address": command.requester_address,
            "image_name": command.name,
        }

        if not command.is_complete:
            logger.debug("Invalid delete request", extra=context)
            return DeleteOutcome.of(DeleteStatus.MALFORMED)

        if not self._authenticate(username=command.username, token=command.token, context=context):
            return DeleteOutcome.of(DeleteStatus.INVALID_AUTHTOKEN)

        try:
            authority = self._authority(name=command.name, identity=command.username)
            image = (
                self.metadata.fetch_image(name=command.name)
                if authority is Authority.OWNER
                else None
            )
        except ImageServiceError:
            logger.exception("Metadata lookup failed during delete", extra=context)
            return DeleteOutcome.of(DeleteStatus.INTERNAL_ERROR)

        if authority is Authority.NOT_OWNER:
            logger.debug("Attempt to delete an image uploaded by another user", extra=context)
            return DeleteOutcome.of(DeleteStatus.NO_PERMISSIONS)
        if image is None:
            logger.debug("Attempt to delete an image that doesn't exist", extra=context)
            return DeleteOutcome.of(DeleteStatus.DOES_NOT_EXIST)

        try:
            self.metadata.remove_image(name=command.name)
        except ImageServiceError:
            logger.exception("Error deleting image metadata; blob left untouched", extra=context)
            return DeleteOutcome.of(DeleteStatus.INTERNAL_ERROR)

        path = blob_path(image.name, image.format)
        try:
            self.storage.remove_image(path=path)
        except NotFoundError:
            logger.warning("Image file not found during delete", extra={**context, "path": path})
        except ImageServiceError:
            logger.exception(
                "Error deleting image file after its metadata was removed",
                extra={**context, "path": path},
            )
            return DeleteOutcome.of(DeleteStatus.INTERNAL_ERROR)

        logger.info("Image deleted", extra={**context, "path": path})
        return DeleteOutcome.of(DeleteStatus.DELETED, name=command.name)
