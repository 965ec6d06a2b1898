"""Structured results returned by lifecycle and search operations.

Every operation reports one member of a closed status enumeration together
with a human-readable message. Handlers serialize outcomes with the wire keys
``success``, ``status-simple`` and ``status-humanreadable``.
"""

from enum import StrEnum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

StatusT = TypeVar("StatusT", bound=StrEnum)


class InsertStatus(StrEnum):
    CREATED = "created"
    REPLACED = "replaced"
    INVALID_PAYLOAD = "invalid-payload"
    NOT_LOGGED_IN = "not-logged-in"
    INVALID_AUTHTOKEN = "invalid-authtoken"
    ALREADY_EXISTS = "already-exists"
    INVALID_MIME = "invalid-mime"
    INTERNAL_ERROR = "internal-error"


class HideStatus(StrEnum):
    HIDDEN = "hidden"
    UNHIDDEN = "unhidden"
    MALFORMED = "malformed"
    INVALID_AUTHTOKEN = "invalid-authtoken"
    DOES_NOT_EXIST = "does-not-exist"
    NO_PERMISSIONS = "no-permissions"
    INTERNAL_ERROR = "internal-error"


class DeleteStatus(StrEnum):
    DELETED = "deleted"
    MALFORMED = "malformed"
    INVALID_AUTHTOKEN = "invalid-authtoken"
    DOES_NOT_EXIST = "does-not-exist"
    NO_PERMISSIONS = "no-permissions"
    INTERNAL_ERROR = "internal-error"


class SearchStatus(StrEnum):
    FOUND = "found"
    MALFORMED = "malformed"
    FORBIDDEN = "forbidden"
    INTERNAL_ERROR = "internal-error"


class Outcome(BaseModel, Generic[StatusT]):
    """Base outcome: a status code plus a human-readable description."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    SUCCESS_STATUSES: ClassVar[frozenset[StrEnum]] = frozenset()

    status: StatusT = Field(..., serialization_alias="status-simple")
    status_readable: str = Field(..., serialization_alias="status-humanreadable")

    @property
    def success(self) -> bool:
        return self.status in self.SUCCESS_STATUSES

    def to_body(self) -> dict[str, Any]:
        """Serialize to the JSON response body."""
        body: dict[str, Any] = {"success": self.success}
        body.update(self.model_dump(mode="json", by_alias=True, exclude_none=True))
        return body


class InsertOutcome(Outcome[InsertStatus]):
    SUCCESS_STATUSES: ClassVar[frozenset[StrEnum]] = frozenset(
        {InsertStatus.CREATED, InsertStatus.REPLACED}
    )

    name: str | None = Field(None, serialization_alias="image-name")

    @classmethod
    def of(cls, status: InsertStatus, *, name: str | None = None) -> "InsertOutcome":
        messages = {
            InsertStatus.CREATED: f"The image was successfully saved with the name {name}",
            InsertStatus.REPLACED: (
                f"The image was successfully saved with the name {name}, "
                "replacing your previous image with the same name"
            ),
            InsertStatus.INVALID_PAYLOAD: "The request did not contain valid base64 image data.",
            InsertStatus.NOT_LOGGED_IN: (
                "This server requires authentication. Please log in or register."
            ),
            InsertStatus.INVALID_AUTHTOKEN: (
                "Your authentication token was incorrect. Please try logging in again."
            ),
            InsertStatus.ALREADY_EXISTS: "The requested image name is already in use by another user",
            InsertStatus.INVALID_MIME: "The uploaded data is of an incorrect MIME type.",
            InsertStatus.INTERNAL_ERROR: "The image could not be saved due to an internal error.",
        }
        return cls(status=status, status_readable=messages[status], name=name)


class HideOutcome(Outcome[HideStatus]):
    SUCCESS_STATUSES: ClassVar[frozenset[StrEnum]] = frozenset(
        {HideStatus.HIDDEN, HideStatus.UNHIDDEN}
    )

    @classmethod
    def of(cls, status: HideStatus, *, name: str = "") -> "HideOutcome":
        messages = {
            HideStatus.HIDDEN: f"The image {name} was successfully hidden.",
            HideStatus.UNHIDDEN: f"The image {name} was successfully unhidden.",
            HideStatus.MALFORMED: "The request must contain an image name, username and auth token.",
            HideStatus.INVALID_AUTHTOKEN: (
                "The authentication token was incorrect. Please try logging in again."
            ),
            HideStatus.DOES_NOT_EXIST: "The image you requested to be hidden does not exist.",
            HideStatus.NO_PERMISSIONS: "The image you requested to be hidden was not uploaded by you.",
            HideStatus.INTERNAL_ERROR: "The hidden status could not be changed due to an internal error.",
        }
        return cls(status=status, status_readable=messages[status])


class DeleteOutcome(Outcome[DeleteStatus]):
    SUCCESS_STATUSES: ClassVar[frozenset[StrEnum]] = frozenset({DeleteStatus.DELETED})

    @classmethod
    def of(cls, status: DeleteStatus, *, name: str = "") -> "DeleteOutcome":
        messages = {
            DeleteStatus.DELETED: f"The image {name} was successfully deleted.",
            DeleteStatus.MALFORMED: "The request must contain an image name, username and auth token.",
            DeleteStatus.INVALID_AUTHTOKEN: (
                "The authentication token was incorrect. Please try logging in again."
            ),
            DeleteStatus.DOES_NOT_EXIST: "The image you requested to be deleted does not exist.",
            DeleteStatus.NO_PERMISSIONS: "The image you requested to be deleted was not uploaded by you.",
            DeleteStatus.INTERNAL_ERROR: "The image could not be deleted due to an internal error.",
        }
        return cls(status=status, status_readable=messages[status])


class SearchOutcome(Outcome[SearchStatus]):
    SUCCESS_STATUSES: ClassVar[frozenset[StrEnum]] = frozenset({SearchStatus.FOUND})

    results: list[dict[str, Any]] | None = None

    @classmethod
    def of(
        cls,
        status: SearchStatus,
        *,
        results: list[dict[str, Any]] | None = None,
    ) -> "SearchOutcome":
        messages = {
            SearchStatus.FOUND: f"The search matched {len(results or [])} image(s).",
            SearchStatus.MALFORMED: "At least one search field must be provided.",
            SearchStatus.FORBIDDEN: "Searching is disabled on this server.",
            SearchStatus.INTERNAL_ERROR: "The search could not be executed due to an internal error.",
        }
        return cls(status=status, status_readable=messages[status], results=results)
