"""Pure resolution engines: deck, hand evaluation, scoring and classification."""

from destinydeck.engine.classifier import (
    Outcome,
    ThresholdTable,
    classify_outcome,
    classify_quality,
    quality_table,
)
from destinydeck.engine.crime import resolve_crime
from destinydeck.engine.deck import Deck
from destinydeck.engine.hand_evaluator import HandEvaluator, compare_hands, evaluate_hand
from destinydeck.engine.quality import assign_special_effects, base_chance, roll_quality
from destinydeck.engine.rewards import RewardCurve
from destinydeck.engine.scoring import (
    ComposedScore,
    ScoreLedger,
    ScoreModifier,
    compose_score,
    truncate_score,
)

__all__ = [
    "ComposedScore",
    "Deck",
    "HandEvaluator",
    "Outcome",
    "RewardCurve",
    "ScoreLedger",
    "ScoreModifier",
    "ThresholdTable",
    "assign_special_effects",
    "base_chance",
    "classify_outcome",
    "classify_quality",
    "compare_hands",
    "compose_score",
    "evaluate_hand",
    "quality_table",
    "resolve_crime",
    "roll_quality",
    "truncate_score",
]
