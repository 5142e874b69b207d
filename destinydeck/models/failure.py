"""
Failure taxonomy and caller-facing response envelope.

Every error the engine raises is a KnownError carrying a FailureKind, so a
caller can report it verbatim without inspecting exception types.

Taxonomy:
- ValidationError / PreconditionError: an unmet precondition. Recoverable,
  no game state was changed.
- DeckExhaustedError / InsufficientCardsError: the deck cannot satisfy a draw.
  Recovered locally by one reshuffle, otherwise escalated.
- ResolutionFailure: fatal for the attempt. No partial result is persisted.
- ConcurrencyConflictError: the character-state mutation lost the atomic
  race. The caller retries the whole attempt.

INVARIANT: classification functions never raise. Only I/O-adjacent steps
(validation, persistence, concurrent apply) produce these errors.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Caller input
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"

    # Preconditions
    PRECONDITION_FAILED = "precondition_failed"

    # Resolution
    DECK_EXHAUSTED = "deck_exhausted"
    RESOLUTION_FAILED = "resolution_failed"

    # Shared state
    CONCURRENCY_CONFLICT = "concurrency_conflict"

    # Reference data
    INVALID_CATALOG = "invalid_catalog"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    REFUSAL = "refusal"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class PreconditionKind(str, Enum):
    """A single precondition an action attempt can fail."""

    ACTION_INACTIVE = "action_inactive"
    JAILED = "jailed"
    INSUFFICIENT_ENERGY = "insufficient_energy"
    LEVEL_TOO_LOW = "level_too_low"
    ON_COOLDOWN = "on_cooldown"
    SKILL_TOO_LOW = "skill_too_low"
    LOCKED = "locked"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="Player-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the player",
    )
    retryable: bool = Field(
        default=False,
        description="True if repeating the whole attempt may succeed",
    )


class ResolutionResponse(BaseModel):
    """
    Envelope returned to callers that prefer values over exceptions.

    Exactly one of data / failure is present.
    """

    outcome: OutcomeType
    data: dict[str, Any] | None = None
    failure: FailureDetail | None = None

    @classmethod
    def success(cls, data: dict[str, Any]) -> "ResolutionResponse":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def from_error(cls, error: Exception) -> "ResolutionResponse":
        """
        Classify an exception into a response.

        KnownError subclasses keep their own detail. Precondition failures are
        refusals. Anything else becomes an unknown failure with a fixed message.
        """
        if isinstance(error, ValidationError):
            return cls(outcome=OutcomeType.REFUSAL, failure=error.to_detail())
        if isinstance(error, KnownError):
            return cls(outcome=OutcomeType.KNOWN_FAILURE, failure=error.to_detail())
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="The attempt failed for an unknown reason.",
                detail=type(error).__name__,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    retryable: bool = False

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

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
            retryable=self.retryable,
        )


class ValidationError(KnownError):
    """An attempt was rejected before any state changed."""


class PreconditionError(ValidationError):
    """
    One or more preconditions of an action are unmet.

    `unmet` lists every failed precondition in check order; `kind_unmet`
    is the first of them.
    """

    def __init__(self, action_id: str, unmet: Iterable[PreconditionKind]):
        self.action_id = action_id
        self.unmet = tuple(unmet)
        if not self.unmet:
            raise ValueError("PreconditionError requires at least one unmet precondition")
        self.kind_unmet = self.unmet[0]
        names = ", ".join(kind.value for kind in self.unmet)
        super().__init__(
            kind=FailureKind.PRECONDITION_FAILED,
            message=f"You cannot attempt this action yet ({names}).",
            detail=f"action={action_id} unmet={names}",
            suggestion=_PRECONDITION_SUGGESTIONS.get(self.kind_unmet),
        )


_PRECONDITION_SUGGESTIONS: dict[PreconditionKind, str] = {
    PreconditionKind.ACTION_INACTIVE: "This action is not currently available.",
    PreconditionKind.JAILED: "Wait out your sentence or pay bail.",
    PreconditionKind.INSUFFICIENT_ENERGY: "Rest to regain energy.",
    PreconditionKind.LEVEL_TOO_LOW: "Gain experience to reach the required level.",
    PreconditionKind.ON_COOLDOWN: "Try again once the cooldown has elapsed.",
    PreconditionKind.SKILL_TOO_LOW: "Train the required skill.",
    PreconditionKind.LOCKED: "Complete the unlock requirements first.",
}


class DeckExhaustedError(KnownError):
    """The deck cannot satisfy a draw."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.DECK_EXHAUSTED,
            message=message,
            detail=detail,
        )


class InsufficientCardsError(DeckExhaustedError):
    """A draw asked for more cards than remain in the deck."""

    def __init__(self, requested: int, remaining: int):
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            message=f"Cannot draw {requested} cards: only {remaining} remain.",
            detail=f"requested={requested} remaining={remaining}",
        )


class ResolutionFailure(KnownError):
    """The attempt could not be resolved. Nothing was persisted."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.RESOLUTION_FAILED,
            message=message,
            detail=detail,
            suggestion="Try the action again.",
        )


class ConcurrencyConflictError(KnownError):
    """Another attempt by the same character changed its state first."""

    retryable = True

    def __init__(self, character_id: str):
        self.character_id = character_id
        super().__init__(
            kind=FailureKind.CONCURRENCY_CONFLICT,
            message="Another action for this character finished first.",
            detail=f"character={character_id}",
            suggestion="Retry the attempt.",
        )


class ActionNotFoundError(KnownError):
    """No action with the given id is registered."""

    def __init__(self, action_id: str):
        self.action_id = action_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Unknown action: {action_id}",
            detail=f"action={action_id}",
        )


class CharacterNotFoundError(KnownError):
    """The character store has no record for the given id."""

    def __init__(self, character_id: str):
        self.character_id = character_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Unknown character: {character_id}",
            detail=f"character={character_id}",
        )


class CatalogError(KnownError):
    """Reference data failed to load or validate."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_CATALOG,
            message=message,
            detail=detail,
        )
