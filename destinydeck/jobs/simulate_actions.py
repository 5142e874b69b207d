"""
Simulate action attempts.

Runs N seeded attempts of one action against a fresh character each time and
logs the success rate and mean margin. Useful for checking that a target
score lands where intended before it ships in a catalog. With --database the
attempts run against the configured database, creating its tables if missing.

    python -m destinydeck.jobs.simulate_actions rob_stagecoach --attempts 1000
    python -m destinydeck.jobs.simulate_actions bar_brawl --database
"""

import argparse
import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from destinydeck.db.database import async_session_factory, engine, init_db
from destinydeck.db.stores import SqlCharacterStore, SqlResultStore
from destinydeck.models.character import CharacterSnapshot
from destinydeck.services.action_resolver import ActionResolver
from destinydeck.services.collaborators import (
    InMemoryCharacterStore,
    InMemoryResultStore,
    InMemoryRewardLedger,
)
from destinydeck.services.registry import ReferenceRegistry, get_registry
from destinydeck.services.time_of_day import FixedTimeOfDayService

logger = logging.getLogger(__name__)

SIMULATION_CHARACTER = "simulation"
DEFAULT_ATTEMPTS = 500


@dataclass
class SimulationSummary:
    """Aggregate outcome of a simulation run."""

    action_id: str
    attempts: int = 0
    successes: int = 0
    caught: int = 0
    jailed: int = 0
    total_margin: int = 0
    categories: Counter[str] = field(default_factory=Counter)

    @property
    def success_rate(self) -> float:
        return self.successes / self.attempts if self.attempts else 0.0

    @property
    def mean_margin(self) -> float:
        return self.total_margin / self.attempts if self.attempts else 0.0


def simulation_character(registry: ReferenceRegistry, action_id: str) -> CharacterSnapshot:
    """A character that meets every precondition of the action."""
    action = registry.get_action(action_id)
    return CharacterSnapshot(
        character_id=SIMULATION_CHARACTER,
        energy=action.energy_cost,
        level=action.requirements.min_level,
        skills=action.requirements.skills,
        unlocked=action.unlock_requirements,
    )


async def run_simulation(
    action_id: str,
    attempts: int = DEFAULT_ATTEMPTS,
    base_seed: int = 0,
    detection_modifier: float = 1.0,
    registry: ReferenceRegistry | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> SimulationSummary:
    """
    Resolve `attempts` seeded attempts of an action.

    Attempt i uses seed base_seed + i, so a run is reproducible. Characters
    and results live in memory unless a session factory is given.
    """
    registry = registry or get_registry()
    fresh = simulation_character(registry, action_id)
    store: InMemoryCharacterStore | SqlCharacterStore
    result_store: InMemoryResultStore | SqlResultStore
    if session_factory is None:
        store = InMemoryCharacterStore()
        result_store = InMemoryResultStore()
    else:
        store = SqlCharacterStore(session_factory)
        result_store = SqlResultStore(session_factory)
    resolver = ActionResolver(
        character_store=store,
        result_store=result_store,
        reward_sink=InMemoryRewardLedger(),
        time_of_day=FixedTimeOfDayService(detection_modifier),
        registry=registry,
        clock=lambda: datetime(2000, 1, 1, 12, tzinfo=UTC),
    )

    summary = SimulationSummary(action_id=action_id)
    for attempt in range(attempts):
        await store.save(fresh)
        result = await resolver.resolve_action(
            action_id, SIMULATION_CHARACTER, seed=base_seed + attempt
        )
        summary.attempts += 1
        summary.successes += int(result.success)
        summary.total_margin += result.margin
        summary.categories[result.hand_evaluation.category.name] += 1
        if result.crime_resolution is not None:
            summary.caught += int(result.crime_resolution.caught)
            summary.jailed += int(result.crime_resolution.jailed)

    logger.info(
        "Simulated %d attempts of %s: success rate %.1f%%, mean margin %+.2f",
        summary.attempts,
        action_id,
        summary.success_rate * 100,
        summary.mean_margin,
    )
    if summary.caught:
        logger.info("Caught %d times, jailed %d times", summary.caught, summary.jailed)
    for category, count in summary.categories.most_common():
        logger.info("  %-16s %d", category, count)
    return summary


async def run_database_simulation(action_id: str, **kwargs) -> SimulationSummary:
    """Create the schema in the configured database, then simulate against it."""
    await init_db(engine)
    try:
        return await run_simulation(action_id, session_factory=async_session_factory, **kwargs)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Simulate Destiny Deck action attempts.")
    parser.add_argument("action_id", help="Registered action id")
    parser.add_argument("--attempts", type=int, default=DEFAULT_ATTEMPTS)
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first attempt")
    parser.add_argument(
        "--detection-modifier",
        type=float,
        default=1.0,
        help="Crime detection multiplier applied to every attempt",
    )
    parser.add_argument(
        "--database",
        action="store_true",
        help="Persist characters and results to the configured database",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    run = run_database_simulation if args.database else run_simulation
    asyncio.run(
        run(
            args.action_id,
            attempts=args.attempts,
            base_seed=args.seed,
            detection_modifier=args.detection_modifier,
        )
    )


if __name__ == "__main__":
    main()
