from typing import Any

import pytest
from botocore.exceptions import ClientError
from passlib.hash import pbkdf2_sha256

from core.infrastructure.aws.dynamodb_auth import DynamoDBAuthGateway
from core.models.errors import DynamoDBError
from core.repositories.auth_repository import AuthVerdict


class DummyAdapter:
    """Minimal DynamoDBAdapter stub."""

    def __init__(self, item: dict[str, Any] | None = None) -> None:
        self.item = item
        self.put_calls: list[dict[str, Any]] = []

    def get_item(self, **_: Any) -> dict[str, Any]:
        return {"Item": self.item} if self.item else {}

    def put_item(self, **kwargs: Any) -> dict[str, Any]:
        self.put_calls.append(kwargs)
        return {}


class FailingAdapter(DummyAdapter):
    def get_item(self, **_: Any) -> dict[str, Any]:
        raise ClientError({"Error": {"Code": "InternalError"}}, "GetItem")

    def put_item(self, **_: Any) -> dict[str, Any]:
        raise ClientError({"Error": {"Code": "InternalError"}}, "PutItem")


class TestDynamoDBAuthGateway:
    def test_valid_token(self) -> None:
        adapter = DummyAdapter({"username": "alice", "auth_token_hash": pbkdf2_sha256.hash("secret")})

        assert DynamoDBAuthGateway(adapter).verify(username="alice", token="secret") is AuthVerdict.OK

    def test_wrong_token(self) -> None:
        adapter = DummyAdapter({"username": "alice", "auth_token_hash": pbkdf2_sha256.hash("secret")})

        verdict = DynamoDBAuthGateway(adapter).verify(username="alice", token="guess")

        assert verdict is AuthVerdict.INVALID_CREDENTIALS

    def test_unknown_user(self) -> None:
        verdict = DynamoDBAuthGateway(DummyAdapter()).verify(username="ghost", token="secret")

        assert verdict is AuthVerdict.INVALID_CREDENTIALS

    def test_malformed_hash(self) -> None:
        adapter = DummyAdapter({"username": "alice", "auth_token_hash": "not-a-hash"})

        verdict = DynamoDBAuthGateway(adapter).verify(username="alice", token="secret")

        assert verdict is AuthVerdict.INVALID_CREDENTIALS

    @pytest.mark.parametrize("username,token", [("", "secret"), ("alice", "")])
    def test_empty_credentials(self, username: str, token: str) -> None:
        verdict = DynamoDBAuthGateway(FailingAdapter()).verify(username=username, token=token)

        assert verdict is AuthVerdict.INVALID_CREDENTIALS

    def test_transport_error(self) -> None:
        verdict = DynamoDBAuthGateway(FailingAdapter()).verify(username="alice", token="secret")

        assert verdict is AuthVerdict.TRANSPORT_ERROR

    def test_store_token_hashes(self) -> None:
        adapter = DummyAdapter()

        DynamoDBAuthGateway(adapter).store_token(username="alice", token="secret")

        item = adapter.put_calls[0]["item"]
        assert item["username"] == "alice"
        assert item["auth_token_hash"] != "secret"
        assert pbkdf2_sha256.verify("secret", item["auth_token_hash"])

    def test_store_token_failure(self) -> None:
        with pytest.raises(DynamoDBError):
            DynamoDBAuthGateway(FailingAdapter()).store_token(username="alice", token="secret")


class TestDynamoDBAuthGatewayWithMoto:
    def test_register_and_verify(self, register_user) -> None:
        register_user("alice", "alice-token")
        gateway = DynamoDBAuthGateway()

        assert gateway.verify(username="alice", token="alice-token") is AuthVerdict.OK
        assert gateway.verify(username="alice", token="bob-token") is AuthVerdict.INVALID_CREDENTIALS

    def test_reissued_token_replaces_old_one(self, register_user) -> None:
        register_user("alice", "first")
        register_user("alice", "second")
        gateway = DynamoDBAuthGateway()

        assert gateway.verify(username="alice", token="first") is AuthVerdict.INVALID_CREDENTIALS
        assert gateway.verify(username="alice", token="second") is AuthVerdict.OK

    def test_missing_table_is_transport_error(self, aws_mock) -> None:
        verdict = DynamoDBAuthGateway().verify(username="alice", token="secret")

        assert verdict is AuthVerdict.TRANSPORT_ERROR
