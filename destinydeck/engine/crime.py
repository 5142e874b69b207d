"""
Crime consequence resolution.

Runs only for CRIME actions. A successful crime is a clean getaway. A failed
crime rolls for witnesses and, if caught, for jail:

    effective chance = clamp(witness_chance * detection_modifier, 0, 100)
    caught  iff d100 >= 101 - effective chance
    jailed  iff caught, jail_time_on_failure > 0 and d100 >= 101 - jail_chance

A chance of 0 can never trigger (target 101) and a chance of 100 always does
(target 1). Both rolls come from the attempt's RNG, after the deal, so a
fixed seed reproduces the whole attempt.
"""

import random

from destinydeck.models.action import CrimeProperties
from destinydeck.models.result import CrimeResolution

D100_SIDES = 100


def clamp_chance(chance: float) -> float:
    return max(0.0, min(100.0, chance))


def roll_d100(rng: random.Random) -> int:
    return rng.randint(1, D100_SIDES)


def d100_target(chance: float) -> float:
    """Lowest d100 roll that triggers an event of the given percent chance."""
    return D100_SIDES + 1 - chance


def resolve_crime(
    success: bool,
    props: CrimeProperties,
    detection_modifier: float,
    rng: random.Random,
) -> CrimeResolution:
    """
    Resolve witness and jail checks for a crime attempt.

    Args:
        success: Whether the action succeeded
        props: Crime properties of the action
        detection_modifier: Time-of-day multiplier on the witness chance
        rng: The attempt's random source

    Returns:
        CrimeResolution describing the rolls made and their consequences
    """
    witness_chance = clamp_chance(props.witness_chance * detection_modifier)
    if success:
        return CrimeResolution.clean_getaway(witness_chance)

    witness_target = d100_target(witness_chance)
    witness_roll = roll_d100(rng)
    caught = witness_roll >= witness_target
    if not caught:
        return CrimeResolution(
            witness_chance=witness_chance,
            witness_roll=witness_roll,
            witness_target=witness_target,
            caught=False,
        )

    jail_roll: int | None = None
    jail_target: float | None = None
    jailed = False
    if props.jail_time_on_failure > 0:
        jail_target = d100_target(clamp_chance(props.jail_chance))
        jail_roll = roll_d100(rng)
        jailed = jail_roll >= jail_target

    return CrimeResolution(
        witness_chance=witness_chance,
        witness_roll=witness_roll,
        witness_target=witness_target,
        caught=True,
        jail_roll=jail_roll,
        jail_target=jail_target,
        jailed=jailed,
        jail_minutes=props.jail_time_on_failure if jailed else 0,
        wanted_level_delta=props.wanted_level_increase,
        bail_cost=props.bail_cost if jailed else 0,
    )
