"""Abstract contract for credential verification."""

from abc import ABC, abstractmethod
from enum import StrEnum


class AuthVerdict(StrEnum):
    OK = "ok"
    INVALID_CREDENTIALS = "invalid-credentials"
    TRANSPORT_ERROR = "transport-error"


class AuthGateway(ABC):
    """Verifies a (username, token) pair.

    Callers only see the verdict; token storage and hashing stay behind
    the implementation.
    """

    @abstractmethod
    def verify(self, *, username: str, token: str) -> AuthVerdict:
        """Check a user's auth token. Never raises for bad credentials."""
