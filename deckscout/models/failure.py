"""
Failure Envelope — Outcome Classification for Prediction Requests.

Every outcome the service reports is one of:
- Success: the operation completed
- Refusal: the system chose not to proceed
- KnownFailure: the caller sent something the engine cannot use
- UnknownFailure: something unexpected went wrong

The engine itself only raises KnownError subclasses, and only for
input the caller can correct. Missing catalog data is not a failure:
it degrades to an empty prediction list.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Caller input
    INVALID_INPUT = "invalid_input"

    # Lookups
    NOT_FOUND = "not_found"

    # Session state
    NOT_CONFIRMED = "not_confirmed"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    REFUSAL = "refusal"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="Explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested corrective action",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Response envelope shared by every endpoint."""

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def refusal(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create a refusal response."""
        return cls(
            outcome=OutcomeType.REFUSAL,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """
        Create a known failure response.

        Example: blank card name, unknown deck id.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(
        cls,
        detail: str | None = None,
    ) -> "ApiResponse[Any]":
        """Create an unknown failure response for unexpected exceptions."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="An unexpected error occurred while updating predictions.",
                detail=detail,
                suggestion="If this persists, reset the session and report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for explainable failures.

    Raised synchronously so the caller can correct its input.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class InvalidCardError(KnownError):
    """An observed card had an empty or blank name."""

    def __init__(self, name: object):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message="Card name must be a non-empty string.",
            detail=f"Received {name!r}",
            suggestion="Report the card's printed name.",
        )


class InvalidTurnError(KnownError):
    """A turn number was not a positive integer."""

    def __init__(self, turn: object):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message="Turn number must be a positive integer.",
            detail=f"Received {turn!r}",
        )


class DeckNotFoundError(KnownError):
    """A deck id was not among the current predictions."""

    def __init__(self, deck_id: str):
        self.deck_id = deck_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Deck '{deck_id}' is not among the current predictions.",
            suggestion="Confirm one of the decks returned by the latest observation.",
            status_code=404,
        )


class RefusalError(Exception):
    """The system refuses to proceed in the current session state."""

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.refusal(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )
