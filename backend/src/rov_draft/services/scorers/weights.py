"""Tunable scoring constants."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for every additive scoring term.

    These are empirical tuning values, not structural rules, so they can be
    overridden per engine instance.
    """

    # Pick terms
    tier_bonus: dict[str, float] = field(default_factory=lambda: {"S": 10.0, "A": 5.0})
    synergy_scale: float = 0.5
    counter_multipliers: tuple[float, ...] = (1.0, 1.5, 2.0, 2.5, 3.0)  # by pick slot 1-5
    comfort_per_match: float = 2.0
    comfort_cap: float = 20.0
    first_pick_scale: float = 20.0
    first_pick_top_n: int = 5
    threat_counter_scale: float = 1.0
    strategy_core_bonus: tuple[float, ...] = (500.0, 800.0, 1000.0, 1200.0, 1500.0)  # by pick slot 1-5
    flex_bonus: float = 5.0
    flex_max_slot: int = 2

    # Ban terms
    avoid_bonus: float = 5000.0
    meta_ban_threshold: float = 52.0
    meta_ban_scale: float = 10.0
    meta_ban_tier_bonus: dict[str, float] = field(default_factory=lambda: {"S": 50.0, "A": 25.0})
    threat_ban_scale: float = 200.0
    protect_scale: float = 5.0
    deny_scale: float = 5.0
    deny_tier_bonus: dict[str, float] = field(default_factory=lambda: {"S": 25.0, "A": 10.0})
    first_pick_protect_scale: float = 3.0
    comfort_ban_per_match: float = 20.0
    comfort_ban_cap: float = 300.0

    def __post_init__(self):
        if len(self.counter_multipliers) != 5:
            raise ValueError("counter_multipliers needs one entry per pick slot (5)")
        core = self.strategy_core_bonus
        if len(core) != 5:
            raise ValueError("strategy_core_bonus needs one entry per pick slot (5)")
        if any(core[0] >= later for later in core[1:]):
            raise ValueError("strategy_core_bonus slot 1 must be the smallest bonus")
        if any(a > b for a, b in zip(core[1:], core[2:])):
            raise ValueError("strategy_core_bonus must be non-decreasing over slots 2-5")

    @staticmethod
    def _by_slot(table: tuple[float, ...], slot: int) -> float:
        return table[min(max(slot, 1), len(table)) - 1]

    def counter_multiplier(self, pick_slot: int) -> float:
        return self._by_slot(self.counter_multipliers, pick_slot)

    def core_bonus(self, pick_slot: int) -> float:
        return self._by_slot(self.strategy_core_bonus, pick_slot)
