"""
Action resolution orchestrator.

Runs one attempt end to end:

    snapshot -> preconditions -> deal -> evaluate -> compose -> classify
    -> crime sub-procedure -> rewards -> atomic energy/cooldown apply
    -> persist result -> grant rewards -> crime consequences

INVARIANTS:
- A failed precondition raises before anything is mutated
- Character state changes only through apply_energy_and_cooldown, which
  rejects a stale snapshot; a lost race raises ConcurrencyConflictError
- No result is persisted unless the energy apply succeeded
- Given the same seed, snapshot and clock, the result is identical
"""

import logging
import random
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta

from destinydeck.config import settings
from destinydeck.engine.classifier import classify_outcome
from destinydeck.engine.crime import resolve_crime
from destinydeck.engine.deck import Deck
from destinydeck.engine.hand_evaluator import HandEvaluator
from destinydeck.engine.rewards import RewardCurve
from destinydeck.engine.scoring import ScoreModifier, compose_score
from destinydeck.models.action import Action, SuitBonus
from destinydeck.models.card import Hand
from destinydeck.models.character import ApplyStatus, CharacterSnapshot
from destinydeck.models.failure import (
    ConcurrencyConflictError,
    DeckExhaustedError,
    KnownError,
    PreconditionError,
    PreconditionKind,
    ResolutionFailure,
    ResolutionResponse,
)
from destinydeck.models.result import ActionResult, CrimeResolution
from destinydeck.services.collaborators import (
    CharacterStateStore,
    ResultStore,
    RewardSink,
    TimeOfDayService,
)
from destinydeck.services.registry import ReferenceRegistry, get_registry
from destinydeck.services.time_of_day import ClockTimeOfDayService

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def validate_preconditions(
    action: Action, snapshot: CharacterSnapshot, now: datetime
) -> list[PreconditionKind]:
    """
    Every precondition the character fails for `action`, in check order.

    An empty list means the attempt may proceed.
    """
    unmet: list[PreconditionKind] = []
    if not action.is_active:
        unmet.append(PreconditionKind.ACTION_INACTIVE)
    if snapshot.is_jailed(now):
        unmet.append(PreconditionKind.JAILED)
    if snapshot.energy < action.energy_cost:
        unmet.append(PreconditionKind.INSUFFICIENT_ENERGY)
    if snapshot.level < action.requirements.min_level:
        unmet.append(PreconditionKind.LEVEL_TOO_LOW)

    cooldown_until = snapshot.cooldown_until(action.id)
    if cooldown_until is not None and cooldown_until > now:
        unmet.append(PreconditionKind.ON_COOLDOWN)

    if any(
        snapshot.skills.get(skill, 0) < required
        for skill, required in action.requirements.skills.items()
    ):
        unmet.append(PreconditionKind.SKILL_TOO_LOW)
    if not action.unlock_requirements <= snapshot.unlocked:
        unmet.append(PreconditionKind.LOCKED)
    return unmet


class ActionResolver:
    """
    Resolves action attempts against the Destiny Deck.

    Args:
        character_store: Source of character snapshots and atomic mutations
        result_store: Receives every finished ActionResult
        reward_sink: Receives rewards for successful attempts
        time_of_day: Crime detection modifiers (hour-based by default)
        registry: Reference data (process-wide registry by default)
        reward_curve: Margin-to-multiplier curve (configured curve by default)
        evaluator: Hand evaluator (default strength table by default)
        clock: Returns the current time; fixed clocks make replays exact
        hand_size: Cards dealt per attempt (configured size by default)
    """

    def __init__(
        self,
        character_store: CharacterStateStore,
        result_store: ResultStore,
        reward_sink: RewardSink,
        time_of_day: TimeOfDayService | None = None,
        registry: ReferenceRegistry | None = None,
        *,
        reward_curve: RewardCurve | None = None,
        evaluator: HandEvaluator | None = None,
        clock: Clock = utc_now,
        hand_size: int | None = None,
    ):
        self.character_store = character_store
        self.result_store = result_store
        self.reward_sink = reward_sink
        self.time_of_day = time_of_day or ClockTimeOfDayService()
        self._registry = registry
        self.reward_curve = reward_curve or RewardCurve()
        self.evaluator = evaluator or HandEvaluator()
        self.clock = clock
        self.hand_size = settings.hand_size if hand_size is None else hand_size
        if self.hand_size < 1:
            raise ValueError(f"hand_size must be at least 1, got {self.hand_size}")

    @property
    def registry(self) -> ReferenceRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    def _lookup(self, action: Action | str) -> Action:
        if isinstance(action, Action):
            return action
        return self.registry.get_action(action)

    async def validate(self, action: Action | str, character_id: str) -> list[PreconditionKind]:
        """Unmet preconditions for the character's next attempt (read-only)."""
        snapshot = await self.character_store.get_energy_level_cooldown(character_id)
        return validate_preconditions(self._lookup(action), snapshot, self.clock())

    async def resolve_action(
        self,
        action: Action | str,
        character_id: str,
        *,
        seed: int | None = None,
        context_modifiers: Sequence[ScoreModifier] = (),
    ) -> ActionResult:
        """
        Resolve one attempt.

        Args:
            action: Action or registered action id
            character_id: Acting character
            seed: RNG seed for the deal and crime rolls (random when None)
            context_modifiers: Extra score modifiers, applied after suit bonuses

        Returns:
            The persisted ActionResult

        Raises:
            ActionNotFoundError: Unknown action id
            CharacterNotFoundError: Unknown character
            PreconditionError: One or more preconditions unmet (nothing changed)
            ResolutionFailure: A hand could not be dealt (nothing changed)
            ConcurrencyConflictError: Another attempt changed the character first
        """
        action = self._lookup(action)
        snapshot = await self.character_store.get_energy_level_cooldown(character_id)
        now = self.clock()

        unmet = validate_preconditions(action, snapshot, now)
        if unmet:
            logger.info(
                "PRECONDITION_FAILED",
                extra={
                    "character_id": character_id,
                    "action_id": action.id,
                    "unmet": [kind.value for kind in unmet],
                },
            )
            raise PreconditionError(action.id, unmet)

        rng = random.Random(seed)
        hand = self._deal(rng, action.id)
        evaluation = self.evaluator.evaluate(hand)
        composed = compose_score(
            evaluation,
            _suit_bonuses(action, snapshot),
            hand,
            context_modifiers,
        )
        outcome = classify_outcome(composed.total, action.target_score)
        success = outcome.success
        if (
            success
            and action.min_hand_category is not None
            and evaluation.category < action.min_hand_category
        ):
            success = False

        crime: CrimeResolution | None = None
        if action.is_crime and action.crime is not None:
            modifier = await self.time_of_day.get_crime_detection_modifier(
                snapshot.location_id, now
            )
            crime = resolve_crime(success, action.crime, modifier, rng)

        rewards = self.reward_curve.scale(action.rewards, outcome.margin, success)
        multiplier = self.reward_curve.multiplier(outcome.margin, success)

        cooldown = action.cooldown.duration
        cooldown_until = now + cooldown if cooldown is not None else None

        status = await self.character_store.apply_energy_and_cooldown(
            character_id,
            action.energy_cost,
            action.id,
            cooldown_until,
            snapshot.version,
        )
        if status == ApplyStatus.CONFLICT:
            logger.warning(
                "CONCURRENCY_CONFLICT",
                extra={
                    "character_id": character_id,
                    "action_id": action.id,
                    "expected_version": snapshot.version,
                },
            )
            raise ConcurrencyConflictError(character_id)

        result = ActionResult(
            character_id=character_id,
            action_id=action.id,
            action_type=action.type,
            hand=hand,
            hand_evaluation=evaluation,
            applied_suit_bonuses=composed.applied_suit_bonuses,
            total_score=composed.total,
            target_score=action.target_score,
            success=success,
            margin=outcome.margin,
            rewards=rewards,
            reward_multiplier=multiplier,
            energy_spent=action.energy_cost,
            cooldown_until=cooldown_until,
            timestamp=now,
            crime_resolution=crime,
            breakdown=composed.breakdown,
        )

        await self.result_store.save_action_result(result)
        if rewards is not None:
            await self.reward_sink.grant_rewards(character_id, rewards)
        if crime is not None and crime.caught:
            await self._apply_crime_consequences(character_id, action, crime, now)

        logger.info(
            "ACTION_RESOLVED",
            extra={
                "character_id": character_id,
                "action_id": action.id,
                "hand": str(hand),
                "category": evaluation.category.name,
                "total_score": composed.total,
                "target_score": action.target_score,
                "success": success,
                "margin": outcome.margin,
            },
        )
        return result

    async def try_resolve(
        self,
        action: Action | str,
        character_id: str,
        *,
        seed: int | None = None,
        context_modifiers: Sequence[ScoreModifier] = (),
    ) -> ResolutionResponse:
        """resolve_action, reporting failures as a response instead of raising."""
        try:
            result = await self.resolve_action(
                action, character_id, seed=seed, context_modifiers=context_modifiers
            )
        except KnownError as e:
            return ResolutionResponse.from_error(e)
        except Exception as e:
            logger.exception("Unexpected error resolving %s for %s", action, character_id)
            return ResolutionResponse.from_error(e)
        return ResolutionResponse.success(result.to_dict())

    def _deal(self, rng: random.Random, action_id: str) -> Hand:
        deck = Deck(rng=rng)
        try:
            return deck.deal_hand(self.hand_size)
        except DeckExhaustedError:
            logger.warning(
                "DECK_RESHUFFLED",
                extra={"action_id": action_id, "remaining": deck.remaining},
            )
            deck.shuffle()
        try:
            return deck.deal_hand(self.hand_size)
        except DeckExhaustedError as e:
            raise ResolutionFailure(
                "The Destiny Deck could not deal a hand.",
                detail=f"action={action_id} hand_size={self.hand_size}: {e.message}",
            ) from e

    async def _apply_crime_consequences(
        self,
        character_id: str,
        action: Action,
        crime: CrimeResolution,
        now: datetime,
    ) -> None:
        jail_until = None
        if crime.jailed and crime.jail_minutes > 0:
            jail_until = now + timedelta(minutes=crime.jail_minutes)
        await self.character_store.apply_crime_consequences(
            character_id, jail_until, crime.wanted_level_delta
        )
        logger.info(
            "CRIME_CAUGHT",
            extra={
                "character_id": character_id,
                "action_id": action.id,
                "jailed": crime.jailed,
                "jail_minutes": crime.jail_minutes,
                "wanted_level_delta": crime.wanted_level_delta,
            },
        )


def _suit_bonuses(action: Action, snapshot: CharacterSnapshot) -> tuple[SuitBonus, ...]:
    """Action suit bonuses first, then the character's own affinities."""
    return (*action.suit_bonuses, *snapshot.suit_bonuses)