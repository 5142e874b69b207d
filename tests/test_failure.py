"""
Tests for the failure taxonomy.

Every error the engine raises must classify into a response without the
caller inspecting exception types.
"""

import pytest

from destinydeck.models.failure import (
    ActionNotFoundError,
    CatalogError,
    CharacterNotFoundError,
    ConcurrencyConflictError,
    FailureKind,
    InsufficientCardsError,
    KnownError,
    OutcomeType,
    PreconditionError,
    PreconditionKind,
    ResolutionFailure,
    ResolutionResponse,
    ValidationError,
)


class TestResponseEnvelope:
    def test_success(self) -> None:
        response = ResolutionResponse.success({"total_score": 55})

        assert response.outcome == OutcomeType.SUCCESS
        assert response.data == {"total_score": 55}
        assert response.failure is None

    def test_precondition_is_refusal(self) -> None:
        error = PreconditionError("bar_brawl", [PreconditionKind.JAILED])
        response = ResolutionResponse.from_error(error)

        assert response.outcome == OutcomeType.REFUSAL
        assert response.failure is not None
        assert response.failure.kind == FailureKind.PRECONDITION_FAILED
        assert response.failure.suggestion == "Wait out your sentence or pay bail."
        assert response.failure.retryable is False

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (InsufficientCardsError(requested=5, remaining=2), FailureKind.DECK_EXHAUSTED),
            (ResolutionFailure("no hand"), FailureKind.RESOLUTION_FAILED),
            (ConcurrencyConflictError("outlaw-1"), FailureKind.CONCURRENCY_CONFLICT),
            (ActionNotFoundError("rustle_cattle"), FailureKind.NOT_FOUND),
            (CharacterNotFoundError("nobody"), FailureKind.NOT_FOUND),
            (CatalogError("bad catalog"), FailureKind.INVALID_CATALOG),
        ],
    )
    def test_known_failures(self, error: KnownError, kind: FailureKind) -> None:
        response = ResolutionResponse.from_error(error)

        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == kind
        assert response.failure.message == error.message

    def test_unknown_failure_hides_message(self) -> None:
        response = ResolutionResponse.from_error(KeyError("secret internals"))

        assert response.outcome == OutcomeType.UNKNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.UNKNOWN
        assert "secret" not in response.failure.message
        assert response.failure.detail == "KeyError"


class TestPreconditionError:
    def test_keeps_every_unmet_kind(self) -> None:
        error = PreconditionError(
            "rob_stagecoach",
            [PreconditionKind.LEVEL_TOO_LOW, PreconditionKind.LOCKED],
        )

        assert error.unmet == (PreconditionKind.LEVEL_TOO_LOW, PreconditionKind.LOCKED)
        assert error.kind_unmet == PreconditionKind.LEVEL_TOO_LOW
        assert "level_too_low, locked" in error.message
        assert isinstance(error, ValidationError)

    def test_requires_an_unmet_kind(self) -> None:
        with pytest.raises(ValueError):
            PreconditionError("bar_brawl", [])


class TestRetryable:
    def test_only_conflicts_are_retryable(self) -> None:
        assert ConcurrencyConflictError("outlaw-1").to_detail().retryable is True
        assert ResolutionFailure("no hand").to_detail().retryable is False
        assert ActionNotFoundError("x").to_detail().retryable is False
