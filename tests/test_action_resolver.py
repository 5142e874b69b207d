"""
Tests for the action resolution orchestrator.

INVARIANTS:
- A failed precondition changes nothing
- A lost race changes nothing and raises ConcurrencyConflictError
- Same seed, snapshot and clock give the same result
"""

import asyncio
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from destinydeck.engine.rewards import RewardCurve
from destinydeck.engine.scoring import ScoreModifier
from destinydeck.models.action import (
    Action,
    ActionRequirements,
    CooldownPolicy,
    SuitBonus,
    frozen_mapping,
)
from destinydeck.models.card import Suit
from destinydeck.models.character import CharacterSnapshot
from destinydeck.models.failure import (
    ActionNotFoundError,
    CharacterNotFoundError,
    ConcurrencyConflictError,
    FailureKind,
    OutcomeType,
    PreconditionError,
    PreconditionKind,
    ResolutionFailure,
)
from destinydeck.models.hand import HandCategory
from destinydeck.services.action_resolver import ActionResolver, validate_preconditions
from destinydeck.services.collaborators import (
    HistoryQuery,
    InMemoryCharacterStore,
    InMemoryResultStore,
    InMemoryRewardLedger,
)
from destinydeck.services.registry import ReferenceRegistry
from destinydeck.services.time_of_day import ClockTimeOfDayService, FixedTimeOfDayService


class BarrierCharacterStore(InMemoryCharacterStore):
    """Holds every reader until `parties` attempts have taken their snapshot."""

    def __init__(self, characters: list[CharacterSnapshot], parties: int = 2):
        super().__init__(characters)
        self.parties = parties
        self.arrived = 0
        self.all_read = asyncio.Event()

    async def get_energy_level_cooldown(self, character_id: str) -> CharacterSnapshot:
        snapshot = await super().get_energy_level_cooldown(character_id)
        self.arrived += 1
        if self.arrived >= self.parties:
            self.all_read.set()
        await self.all_read.wait()
        return snapshot


class ExplodingResultStore(InMemoryResultStore):
    async def save_action_result(self, result) -> None:
        raise RuntimeError("disk on fire")


@pytest.fixture
def sure_shot(bar_brawl: Action) -> Action:
    """Any hand clears a target of zero."""
    return replace(bar_brawl, id="sure_shot", name="Sure Shot", target_score=0)


@pytest.fixture
def store(outlaw: CharacterSnapshot) -> InMemoryCharacterStore:
    return InMemoryCharacterStore([outlaw])


@pytest.fixture
def result_store() -> InMemoryResultStore:
    return InMemoryResultStore()


@pytest.fixture
def ledger() -> InMemoryRewardLedger:
    return InMemoryRewardLedger()


@pytest.fixture
def resolver(
    store: InMemoryCharacterStore,
    result_store: InMemoryResultStore,
    ledger: InMemoryRewardLedger,
    registry: ReferenceRegistry,
    fixed_now: datetime,
) -> ActionResolver:
    return ActionResolver(
        store,
        result_store,
        ledger,
        FixedTimeOfDayService(1.0),
        registry,
        clock=lambda: fixed_now,
    )


class TestPreconditions:
    def test_ready_character_has_none(
        self, bar_brawl: Action, outlaw: CharacterSnapshot, fixed_now: datetime
    ) -> None:
        assert validate_preconditions(bar_brawl, outlaw, fixed_now) == []

    def test_lists_every_unmet_precondition_in_order(
        self, bar_brawl: Action, fixed_now: datetime
    ) -> None:
        action = replace(
            bar_brawl,
            is_active=False,
            requirements=ActionRequirements(min_level=20, skills=frozen_mapping({"fists": 5})),
            unlock_requirements=frozenset({"fight_club"}),
        )
        character = CharacterSnapshot(
            character_id="greenhorn",
            energy=1,
            level=1,
            cooldowns={"bar_brawl": fixed_now + timedelta(minutes=5)},
            jailed_until=fixed_now + timedelta(hours=1),
        )

        assert validate_preconditions(action, character, fixed_now) == [
            PreconditionKind.ACTION_INACTIVE,
            PreconditionKind.JAILED,
            PreconditionKind.INSUFFICIENT_ENERGY,
            PreconditionKind.LEVEL_TOO_LOW,
            PreconditionKind.ON_COOLDOWN,
            PreconditionKind.SKILL_TOO_LOW,
            PreconditionKind.LOCKED,
        ]

    def test_expired_cooldown_and_sentence(
        self, bar_brawl: Action, outlaw: CharacterSnapshot, fixed_now: datetime
    ) -> None:
        character = replace(
            outlaw,
            cooldowns={"bar_brawl": fixed_now},
            jailed_until=fixed_now - timedelta(seconds=1),
        )
        assert validate_preconditions(bar_brawl, character, fixed_now) == []

    def test_exact_energy_is_enough(
        self, bar_brawl: Action, outlaw: CharacterSnapshot, fixed_now: datetime
    ) -> None:
        character = replace(outlaw, energy=bar_brawl.energy_cost)
        assert validate_preconditions(bar_brawl, character, fixed_now) == []

    async def test_failed_precondition_changes_nothing(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        outlaw: CharacterSnapshot,
    ) -> None:
        store.put(replace(outlaw, energy=3, level=1))
        before = store.get("outlaw-1")

        with pytest.raises(PreconditionError) as exc_info:
            await resolver.resolve_action("bar_brawl", "outlaw-1", seed=1)

        assert exc_info.value.unmet == (PreconditionKind.INSUFFICIENT_ENERGY,)
        assert exc_info.value.kind_unmet == PreconditionKind.INSUFFICIENT_ENERGY
        assert exc_info.value.kind == FailureKind.PRECONDITION_FAILED
        assert store.get("outlaw-1") == before
        assert result_store.results == []

    async def test_validate_is_read_only(
        self, resolver: ActionResolver, store: InMemoryCharacterStore
    ) -> None:
        assert await resolver.validate("bar_brawl", "outlaw-1") == []
        assert store.get("outlaw-1").version == 0


class TestResolveAction:
    async def test_success_deducts_energy_and_grants_rewards(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        sure_shot: Action,
        fixed_now: datetime,
    ) -> None:
        result = await resolver.resolve_action(sure_shot, "outlaw-1", seed=7)

        assert result.success is True
        assert result.margin == result.total_score
        assert len(result.hand) == 5
        assert result.energy_spent == 15
        assert result.timestamp == fixed_now
        assert result.rewards is not None
        assert result.reward_multiplier == RewardCurve().multiplier(result.margin)
        assert ledger.xp["outlaw-1"] == result.rewards.xp
        assert ledger.gold["outlaw-1"] == result.rewards.gold
        assert result_store.results == [result]

        character = store.get("outlaw-1")
        assert character.energy == 85
        assert character.version == 1

    async def test_breakdown_matches_total(
        self, resolver: ActionResolver, bar_brawl: Action
    ) -> None:
        result = await resolver.resolve_action(bar_brawl, "outlaw-1", seed=11)

        assert result.breakdown[0].contribution == result.hand_evaluation.strength_score
        assert sum(entry.contribution for entry in result.breakdown) == result.total_score
        assert result.success == (result.total_score >= result.target_score)

    async def test_same_seed_same_result(
        self, registry: ReferenceRegistry, outlaw: CharacterSnapshot, fixed_now: datetime
    ) -> None:
        """Two independent resolvers replay the same attempt identically."""
        results = []
        for _ in range(2):
            resolver = ActionResolver(
                InMemoryCharacterStore([outlaw]),
                InMemoryResultStore(),
                InMemoryRewardLedger(),
                FixedTimeOfDayService(1.0),
                registry,
                clock=lambda: fixed_now,
            )
            results.append(await resolver.resolve_action("bar_brawl", "outlaw-1", seed=1234))

        assert results[0] == results[1]

    async def test_failure_has_no_rewards(
        self,
        resolver: ActionResolver,
        ledger: InMemoryRewardLedger,
        bar_brawl: Action,
        store: InMemoryCharacterStore,
    ) -> None:
        impossible = replace(bar_brawl, target_score=10_000)
        result = await resolver.resolve_action(impossible, "outlaw-1", seed=2)

        assert result.success is False
        assert result.margin < 0
        assert result.rewards is None
        assert result.reward_multiplier == 0.0
        assert ledger.xp == {}
        assert store.get("outlaw-1").energy == 85

    async def test_cooldown_set_and_enforced(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        sure_shot: Action,
        fixed_now: datetime,
    ) -> None:
        action = replace(sure_shot, cooldown=CooldownPolicy(seconds=60))

        result = await resolver.resolve_action(action, "outlaw-1", seed=1)

        assert result.cooldown_until == fixed_now + timedelta(seconds=60)
        assert store.get("outlaw-1").cooldown_until("sure_shot") == result.cooldown_until

        with pytest.raises(PreconditionError) as exc_info:
            await resolver.resolve_action(action, "outlaw-1", seed=2)
        assert exc_info.value.unmet == (PreconditionKind.ON_COOLDOWN,)

    async def test_no_cooldown_policy(self, resolver: ActionResolver, sure_shot: Action) -> None:
        result = await resolver.resolve_action(sure_shot, "outlaw-1", seed=1)
        assert result.cooldown_until is None

    async def test_min_hand_category_forces_failure(
        self, resolver: ActionResolver, sure_shot: Action
    ) -> None:
        """Clearing the target is not enough below the required hand."""
        action = replace(sure_shot, min_hand_category=HandCategory.ROYAL_FLUSH)

        result = await resolver.resolve_action(action, "outlaw-1", seed=5)

        assert result.total_score >= result.target_score
        assert result.success is False
        assert result.rewards is None

    async def test_character_suit_affinities_apply(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        outlaw: CharacterSnapshot,
        sure_shot: Action,
    ) -> None:
        action = replace(sure_shot, suit_bonuses=())
        affinities = tuple(SuitBonus(suit=suit, bonus=5, source="Lucky") for suit in Suit)
        store.put(replace(outlaw, suit_bonuses=affinities))

        result = await resolver.resolve_action(action, "outlaw-1", seed=3)

        applied_suits = {bonus.suit for bonus in result.applied_suit_bonuses}
        assert applied_suits == result.hand.suits
        assert result.total_score == result.hand_evaluation.strength_score + 5 * len(applied_suits)

    async def test_action_bonuses_apply_before_character_bonuses(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        outlaw: CharacterSnapshot,
        sure_shot: Action,
    ) -> None:
        action = replace(
            sure_shot,
            suit_bonuses=tuple(SuitBonus(suit=suit, bonus=1, source="Action") for suit in Suit),
        )
        store.put(
            replace(
                outlaw,
                suit_bonuses=tuple(
                    SuitBonus(suit=suit, bonus=2, source="Character") for suit in Suit
                ),
            )
        )

        result = await resolver.resolve_action(action, "outlaw-1", seed=3)

        sources = [bonus.source for bonus in result.applied_suit_bonuses]
        half = len(sources) // 2
        assert sources[:half] == ["Action"] * half
        assert sources[half:] == ["Character"] * half

    async def test_context_modifiers_apply_last(
        self, resolver: ActionResolver, sure_shot: Action
    ) -> None:
        result = await resolver.resolve_action(
            sure_shot,
            "outlaw-1",
            seed=3,
            context_modifiers=[ScoreModifier("Whiskey courage", 7)],
        )

        assert result.breakdown[-1].label == "Whiskey courage"
        assert result.breakdown[-1].contribution == 7

    async def test_resolves_by_registered_id(self, resolver: ActionResolver) -> None:
        result = await resolver.resolve_action("bar_brawl", "outlaw-1", seed=1)
        assert result.action_id == "bar_brawl"

    async def test_unknown_action(self, resolver: ActionResolver) -> None:
        with pytest.raises(ActionNotFoundError):
            await resolver.resolve_action("rustle_cattle", "outlaw-1")

    async def test_unknown_character(self, resolver: ActionResolver) -> None:
        with pytest.raises(CharacterNotFoundError):
            await resolver.resolve_action("bar_brawl", "nobody")

    async def test_undealable_hand_is_resolution_failure(
        self,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
    ) -> None:
        resolver = ActionResolver(
            store, result_store, ledger, FixedTimeOfDayService(), registry, hand_size=60
        )

        with pytest.raises(ResolutionFailure):
            await resolver.resolve_action("bar_brawl", "outlaw-1", seed=1)

        assert store.get("outlaw-1").version == 0
        assert result_store.results == []

    @pytest.mark.parametrize("hand_size", [0, -5])
    def test_hand_size_must_be_positive(
        self,
        hand_size: int,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
    ) -> None:
        with pytest.raises(ValueError, match="hand_size"):
            ActionResolver(
                store, result_store, ledger, FixedTimeOfDayService(), registry, hand_size=hand_size
            )


class TestCrime:
    async def test_failed_crime_caught_and_jailed(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        fixed_now: datetime,
    ) -> None:
        """A certain witness and a certain jail roll put the character away."""
        result = await resolver.resolve_action("pickpocket_drunk", "outlaw-1", seed=9)

        assert result.success is False
        assert result.rewards is None
        crime = result.crime_resolution
        assert crime is not None
        assert crime.caught is True
        assert crime.jailed is True
        assert crime.jail_minutes == 30
        assert crime.bail_cost == 50
        assert crime.wanted_level_delta == 1
        assert result_store.results == [result]
        assert ledger.gold == {}

        character = store.get("outlaw-1")
        assert character.energy == 90
        assert character.jailed_until == fixed_now + timedelta(minutes=30)
        assert character.wanted_level == 1
        assert character.version == 2

    async def test_jailed_character_cannot_act(self, resolver: ActionResolver) -> None:
        await resolver.resolve_action("pickpocket_drunk", "outlaw-1", seed=9)

        with pytest.raises(PreconditionError) as exc_info:
            await resolver.resolve_action("bar_brawl", "outlaw-1", seed=10)

        assert PreconditionKind.JAILED in exc_info.value.unmet

    async def test_successful_crime_is_clean(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        pickpocket: Action,
    ) -> None:
        easy = replace(pickpocket, target_score=0)

        result = await resolver.resolve_action(easy, "outlaw-1", seed=9)

        assert result.success is True
        assert result.crime_resolution is not None
        assert result.crime_resolution.caught is False
        assert result.crime_resolution.witness_roll is None
        assert store.get("outlaw-1").wanted_level == 0

    async def test_wanted_level_capped(
        self,
        resolver: ActionResolver,
        store: InMemoryCharacterStore,
        outlaw: CharacterSnapshot,
        pickpocket: Action,
    ) -> None:
        assert pickpocket.crime is not None
        notorious = replace(pickpocket, crime=replace(pickpocket.crime, wanted_level_increase=3))
        store.put(replace(outlaw, wanted_level=4))

        await resolver.resolve_action(notorious, "outlaw-1", seed=9)

        assert store.get("outlaw-1").wanted_level == 5

    async def test_default_detection_uses_hour(
        self,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
        fixed_now: datetime,
    ) -> None:
        """22:30 is night: a 100% witness chance becomes 60%."""
        resolver = ActionResolver(
            store, result_store, ledger, registry=registry, clock=lambda: fixed_now
        )
        assert isinstance(resolver.time_of_day, ClockTimeOfDayService)

        result = await resolver.resolve_action("pickpocket_drunk", "outlaw-1", seed=9)

        assert result.crime_resolution is not None
        assert result.crime_resolution.witness_chance == pytest.approx(60.0)


class TestConcurrency:
    async def test_racing_attempts_one_wins(
        self,
        outlaw: CharacterSnapshot,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
        fixed_now: datetime,
    ) -> None:
        """Both attempts read version 0; only the first apply goes through."""
        store = BarrierCharacterStore([outlaw])
        resolver = ActionResolver(
            store,
            result_store,
            ledger,
            FixedTimeOfDayService(),
            registry,
            clock=lambda: fixed_now,
        )

        outcomes = await asyncio.gather(
            resolver.resolve_action("bar_brawl", "outlaw-1", seed=1),
            resolver.resolve_action("bar_brawl", "outlaw-1", seed=2),
            return_exceptions=True,
        )

        conflicts = [o for o in outcomes if isinstance(o, ConcurrencyConflictError)]
        assert len(conflicts) == 1
        assert conflicts[0].retryable is True
        assert len(result_store.results) == 1

        character = store.get("outlaw-1")
        assert character.energy == 85
        assert character.version == 1

    async def test_energy_for_one_attempt_is_spent_once(
        self,
        outlaw: CharacterSnapshot,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
        fixed_now: datetime,
    ) -> None:
        """Energy equal to one action's cost: both pass validation, one applies."""
        store = BarrierCharacterStore([replace(outlaw, energy=15)])
        resolver = ActionResolver(
            store,
            result_store,
            ledger,
            FixedTimeOfDayService(),
            registry,
            clock=lambda: fixed_now,
        )

        outcomes = await asyncio.gather(
            resolver.resolve_action("bar_brawl", "outlaw-1", seed=1),
            resolver.resolve_action("bar_brawl", "outlaw-1", seed=2),
            return_exceptions=True,
        )

        assert sorted(type(o).__name__ for o in outcomes) == [
            "ActionResult",
            "ConcurrencyConflictError",
        ]
        assert len(result_store.results) == 1
        assert store.get("outlaw-1").energy == 0

    async def test_different_characters_do_not_conflict(
        self,
        outlaw: CharacterSnapshot,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
    ) -> None:
        deputy = replace(outlaw, character_id="deputy-1")
        store = BarrierCharacterStore([outlaw, deputy])
        resolver = ActionResolver(
            store, result_store, ledger, FixedTimeOfDayService(), registry
        )

        await asyncio.gather(
            resolver.resolve_action("bar_brawl", "outlaw-1", seed=1),
            resolver.resolve_action("bar_brawl", "deputy-1", seed=2),
        )

        assert len(result_store.results) == 2


class TestTryResolve:
    async def test_success_envelope(self, resolver: ActionResolver, sure_shot: Action) -> None:
        response = await resolver.try_resolve(sure_shot, "outlaw-1", seed=1)

        assert response.outcome == OutcomeType.SUCCESS
        assert response.data is not None
        assert response.data["action_id"] == "sure_shot"
        assert response.failure is None

    async def test_precondition_is_refusal(
        self, resolver: ActionResolver, store: InMemoryCharacterStore, outlaw: CharacterSnapshot
    ) -> None:
        store.put(replace(outlaw, energy=0))

        response = await resolver.try_resolve("bar_brawl", "outlaw-1")

        assert response.outcome == OutcomeType.REFUSAL
        assert response.failure is not None
        assert response.failure.kind == FailureKind.PRECONDITION_FAILED
        assert response.failure.suggestion == "Rest to regain energy."

    async def test_known_failure(self, resolver: ActionResolver) -> None:
        response = await resolver.try_resolve("rustle_cattle", "outlaw-1")

        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.NOT_FOUND

    async def test_unexpected_error(
        self,
        store: InMemoryCharacterStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
    ) -> None:
        resolver = ActionResolver(
            store, ExplodingResultStore(), ledger, FixedTimeOfDayService(), registry
        )

        response = await resolver.try_resolve("bar_brawl", "outlaw-1", seed=1)

        assert response.outcome == OutcomeType.UNKNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.detail == "RuntimeError"


class TestHistory:
    async def test_results_listed_newest_first(
        self,
        store: InMemoryCharacterStore,
        result_store: InMemoryResultStore,
        ledger: InMemoryRewardLedger,
        registry: ReferenceRegistry,
        fixed_now: datetime,
        sure_shot: Action,
    ) -> None:
        times = iter([fixed_now, fixed_now + timedelta(minutes=1)])
        resolver = ActionResolver(
            store,
            result_store,
            ledger,
            FixedTimeOfDayService(),
            registry,
            clock=lambda: next(times),
        )
        first = await resolver.resolve_action(sure_shot, "outlaw-1", seed=1)
        second = await resolver.resolve_action(sure_shot, "outlaw-1", seed=2)

        history = await result_store.list_action_results(HistoryQuery(character_id="outlaw-1"))

        assert history == [second, first]
        assert await result_store.list_action_results(HistoryQuery(character_id="other")) == []
