"""
Reward scaling by success margin.

multiplier = min(max_multiplier, 1 + (margin // step) * step_bonus)

INVARIANTS:
- Monotonic non-decreasing in the margin
- 1.0 at margin 0, never above max_multiplier
- No rewards on failure
- xp and gold are floored to integers; item grants are not scaled
"""

import math

from destinydeck.config import settings
from destinydeck.models.action import ActionReward


class RewardCurve:
    """Step curve from success margin to reward multiplier."""

    def __init__(
        self,
        margin_step: int | None = None,
        step_bonus: float | None = None,
        max_multiplier: float | None = None,
    ):
        self.margin_step = settings.reward_margin_step if margin_step is None else margin_step
        self.step_bonus = settings.reward_step_bonus if step_bonus is None else step_bonus
        self.max_multiplier = (
            settings.max_reward_multiplier if max_multiplier is None else max_multiplier
        )
        if self.margin_step <= 0:
            raise ValueError(f"margin_step must be positive, got {self.margin_step}")
        if self.step_bonus < 0:
            raise ValueError(f"step_bonus must not be negative, got {self.step_bonus}")
        if self.max_multiplier < 1.0:
            raise ValueError(f"max_multiplier must be at least 1.0, got {self.max_multiplier}")

    def multiplier(self, margin: int, success: bool = True) -> float:
        if not success or margin < 0:
            return 0.0
        steps = margin // self.margin_step
        return min(self.max_multiplier, round(1.0 + steps * self.step_bonus, 6))

    def scale(self, base: ActionReward, margin: int, success: bool = True) -> ActionReward | None:
        """Scaled rewards, or None when the attempt failed."""
        multiplier = self.multiplier(margin, success)
        if multiplier == 0.0:
            return None
        return ActionReward(
            xp=math.floor(base.xp * multiplier),
            gold=math.floor(base.gold * multiplier),
            items=base.items,
        )
