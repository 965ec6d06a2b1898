"""DynamoDB-backed implementation of AuthGateway.

Each row of the auth token table holds a username and a pbkdf2 hash of the
user's current auth token. Plain tokens are never stored.
"""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from passlib.hash import pbkdf2_sha256

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import DynamoDBError
from core.repositories.auth_repository import AuthGateway, AuthVerdict
from core.utils.constants import ENV_AUTH_TOKEN_TABLE_NAME, ERROR_CODE_DYNAMODB

logger = Logger(UTC=True)


class DynamoDBAuthGateway(AuthGateway):
    """Verifies auth tokens against hashes kept in DynamoDB."""

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(
            table_env=ENV_AUTH_TOKEN_TABLE_NAME
        )

    def verify(self, *, username: str, token: str) -> AuthVerdict:
        if not username or not token:
            return AuthVerdict.INVALID_CREDENTIALS

        try:
            response = self._db.get_item(key={"username": username})
        except ClientError:
            logger.exception("DynamoDB get_item failed during auth", extra={"username": username})
            return AuthVerdict.TRANSPORT_ERROR
        except Exception:
            logger.exception("Unexpected error during auth", extra={"username": username})
            return AuthVerdict.TRANSPORT_ERROR

        item = response.get("Item") or {}
        token_hash = item.get("auth_token_hash")

        if not isinstance(token_hash, str) or not token_hash:
            logger.debug("Unknown user or no token issued", extra={"username": username})
            return AuthVerdict.INVALID_CREDENTIALS

        try:
            valid = pbkdf2_sha256.verify(token, token_hash)
        except ValueError:
            logger.warning("Stored token hash is malformed", extra={"username": username})
            return AuthVerdict.INVALID_CREDENTIALS

        return AuthVerdict.OK if valid else AuthVerdict.INVALID_CREDENTIALS

    def store_token(self, *, username: str, token: str) -> None:
        """Hash and store a user's auth token, replacing any previous one.

        Raises:
            DynamoDBError: If the write fails
        """
        try:
            self._db.put_item(
                item={"username": username, "auth_token_hash": pbkdf2_sha256.hash(token)}
            )
        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra={"username": username})
            raise DynamoDBError(
                message="Unable to store auth token",
                error_code=ERROR_CODE_DYNAMODB,
                details={"username": username},
            ) from exc

        logger.info("Auth token stored", extra={"username": username})
