"""
Pytest configuration and fixtures for image-share tests.
Provides AWS mocking, DynamoDB tables and a per-test image directory.
"""

import base64
import os
from collections.abc import Callable
from typing import Any

import boto3
import pytest
from moto import mock_aws

from core.infrastructure.aws.dynamodb_auth import DynamoDBAuthGateway
from core.models.errors import DuplicateImageError, DynamoDBError, NotFoundError, StorageError
from core.models.image import Image
from core.repositories.auth_repository import AuthGateway, AuthVerdict
from core.repositories.metadata_repository import ImageMetadataRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.services.image_lifecycle import ImageLifecycle

os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("IMAGE_METADATA_TABLE_NAME", "test-images")
os.environ.setdefault("AUTH_TOKEN_TABLE_NAME", "test-auth-tokens")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-share")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageShare")


@pytest.fixture(autouse=True)
def image_location(tmp_path, monkeypatch):
    """Every test gets its own blob directory and default switches."""
    location = tmp_path / "images"
    monkeypatch.setenv("IMAGE_LOCATION", str(location))
    for name in ("REQUIRE_AUTH", "ALLOW_SEARCH", "TRUST_HEADERS", "DATE_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return location


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def images_table(dynamodb_resource):
    """Image metadata table keyed on image_name."""
    table = dynamodb_resource.create_table(
        TableName=os.getenv("IMAGE_METADATA_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "image_name", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "image_name", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def auth_table(dynamodb_resource):
    """Auth token table keyed on username."""
    table = dynamodb_resource.create_table(
        TableName=os.getenv("AUTH_TOKEN_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "username", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "username", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def register_user(auth_table) -> Callable[[str, str], None]:
    """
    Helper to issue an auth token for a user.

    Usage:
        register_user("alice", "alice-token")
    """
    gateway = DynamoDBAuthGateway()

    def _register(username: str, token: str) -> None:
        gateway.store_token(username=username, token=token)

    return _register


@pytest.fixture
def image_item() -> Callable[..., dict[str, Any]]:
    """
    Build a raw metadata table item.

    Usage:
        images_table.put_item(Item=image_item("cat", owner="alice"))
    """

    def _item(name: str, **overrides: Any) -> dict[str, Any]:
        item: dict[str, Any] = {
            "image_name": name,
            "image_format": "png",
            "mime_type": "image/png",
            "owner": "alice",
            "uploader_address": "10.0.0.1",
            "client_name": "Unknown Client",
            "hidden": False,
            "created_at": 1_700_000_000,
        }
        item.update(overrides)
        return item

    return _item


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG data (minimal valid JPEG)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xdb\x00C\x00\x08\x06\x06\x07\x06\x05\x08\x07\x07\x07\t\t\x08\n\x0c"
        b"\x14\r\x0c\x0b\x0b\x0c\x19\x12\x13\x0f\x14\x1d\x1a\x1f\x1e\x1d\x1a\x1c"
        b"\x1c $.' \",#\x1c\x1c(7),01444\x1f'9=82<.342\xff\xc0\x00\x0b\x08"
        b"\x00\x01\x00\x01\x01\x01\x11\x00\xff\xc4\x00\x14\x00\x01\x00\x00\x00"
        b"\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\t\xff\xc4\x00\x14\x10"
        b"\x01\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00\x00"
        b"\xff\xda\x00\x08\x01\x01\x00\x00?\x00\x7f\x00\xff\xd9"
    )


# In-memory collaborators for service tests


class InMemoryAuth(AuthGateway):
    def __init__(self) -> None:
        self.tokens: dict[str, str] = {}
        self.unreachable = False

    def verify(self, *, username: str, token: str) -> AuthVerdict:
        if self.unreachable:
            return AuthVerdict.TRANSPORT_ERROR
        if username and self.tokens.get(username) == token:
            return AuthVerdict.OK
        return AuthVerdict.INVALID_CREDENTIALS


class InMemoryMetadata(ImageMetadataRepository):
    """Dict-backed store; `fail_on` names operations that raise DynamoDBError."""

    def __init__(self) -> None:
        self.rows: dict[str, Image] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise DynamoDBError(message=f"{operation} failed")

    def find_owner(self, *, name: str) -> str | None:
        self._enter("find_owner")
        image = self.rows.get(name)
        return image.owner if image else None

    def fetch_image(self, *, name: str) -> Image | None:
        self._enter("fetch_image")
        return self.rows.get(name)

    def create_image(self, *, image: Image) -> None:
        self._enter("create_image")
        if image.name in self.rows:
            raise DuplicateImageError(message="The image name is already in use")
        self.rows[image.name] = image

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
        self._enter("update_image")
        if name not in self.rows:
            raise NotFoundError(message="Image not found")
        self.rows[name] = self.rows[name].model_copy(
            update={
                "format": image_format,
                "mime_type": mime_type,
                "uploader_address": uploader_address,
                "client": client,
                "hidden": hidden,
                "timestamp": timestamp,
            }
        )

    def set_hidden(self, *, name: str, hidden: bool) -> None:
        self._enter("set_hidden")
        if name not in self.rows:
            raise NotFoundError(message="Image not found")
        self.rows[name] = self.rows[name].model_copy(update={"hidden": hidden})

    def remove_image(self, *, name: str) -> None:
        self._enter("remove_image")
        self.rows.pop(name, None)

    def search_images(
        self,
        *,
        image_format: str | None = None,
        uploader: str | None = None,
        client: str | None = None,
        min_time: int | None = None,
        max_time: int | None = None,
    ) -> list[Image]:
        self._enter("search_images")
        matches = [
            image
            for image in self.rows.values()
            if not image.hidden
            and (not image_format or image.format == image_format)
            and (not uploader or image.owner == uploader)
            and (not client or image.client == client)
            and (not min_time or image.timestamp >= min_time)
            and (not max_time or image.timestamp <= max_time)
        ]
        return sorted(matches, key=lambda image: image.timestamp, reverse=True)


class InMemoryStorage(ImageStorageRepository):
    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.fail_on: set[str] = set()

    def write_image(self, *, path: str, file_data: bytes) -> None:
        if "write_image" in self.fail_on:
            raise StorageError(message="disk full")
        self.blobs[path] = file_data

    def read_image(self, *, path: str) -> bytes:
        if path not in self.blobs:
            raise NotFoundError(message="Image not found")
        return self.blobs[path]

    def remove_image(self, *, path: str) -> None:
        if "remove_image" in self.fail_on:
            raise StorageError(message="permission denied")
        if path not in self.blobs:
            raise NotFoundError(message="Image not found")
        del self.blobs[path]


@pytest.fixture
def auth() -> InMemoryAuth:
    gateway = InMemoryAuth()
    gateway.tokens.update({"alice": "alice-token", "bob": "bob-token"})
    return gateway


@pytest.fixture
def metadata() -> InMemoryMetadata:
    return InMemoryMetadata()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def lifecycle(auth, metadata, storage) -> ImageLifecycle:
    return ImageLifecycle(auth=auth, metadata=metadata, storage=storage)
