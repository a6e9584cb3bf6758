"""Scoring context and candidate models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from rov_draft.models.draft import Side
from rov_draft.models.reference import TeamProfile
from rov_draft.utils.role_normalizer import missing_roles

INELIGIBLE_SCORE = -9999.0
PROTECTED_SCORE = -50000.0


class ScoreCategory(str, Enum):
    """Tag attached to every score contribution."""

    # Hard filters and fallbacks
    INELIGIBLE = "ineligible"
    PROTECTED = "protected"
    FALLBACK = "fallback"

    # Pick terms
    META = "meta"
    SYNERGY = "synergy"
    COUNTER = "counter"
    COMFORT = "comfort"
    FIRST_PICK = "first_pick"
    THREAT_COUNTER = "threat_counter"
    STRATEGY_CORE = "strategy_core"
    FLEX = "flex"

    # Ban terms
    STRATEGY_AVOID = "strategy_avoid"
    META_BAN = "meta_ban"
    THREAT_BAN = "threat_ban"
    PROTECT_BAN = "protect_ban"
    DENY_BAN = "deny_ban"
    FIRST_PICK_PROTECT = "first_pick_protect"
    COMFORT_BAN = "comfort_ban"


@dataclass(frozen=True)
class ScoreContribution:
    category: ScoreCategory
    value: float
    reason: str


@dataclass
class ScoredCandidate:
    """A hero's total score for one step, with its audit trail."""

    hero_id: str
    score: float = 0.0
    contributions: list[ScoreContribution] = field(default_factory=list)
    eligible: bool = True

    def add(self, category: ScoreCategory, value: float, reason: str) -> None:
        """Accumulate one additive term. Zero-valued terms are not recorded."""
        if value == 0:
            return
        self.contributions.append(ScoreContribution(category, round(value, 2), reason))
        self.score = round(self.score + value, 2)

    @classmethod
    def rejected(cls, hero_id: str, category: ScoreCategory, score: float, reason: str) -> "ScoredCandidate":
        return cls(
            hero_id=hero_id,
            score=score,
            contributions=[ScoreContribution(category, score, reason)],
            eligible=False,
        )

    @property
    def top_contribution(self) -> Optional[ScoreContribution]:
        if not self.contributions:
            return None
        return max(self.contributions, key=lambda c: c.value)

    @property
    def top_category(self) -> Optional[ScoreCategory]:
        top = self.top_contribution
        return top.category if top else None

    @property
    def primary_reason(self) -> str:
        top = self.top_contribution
        return top.reason if top else "No distinguishing factor"

    def breakdown(self) -> dict[str, float]:
        """Sum of contributions per category."""
        totals: dict[str, float] = {}
        for c in self.contributions:
            totals[c.category.value] = round(totals.get(c.category.value, 0.0) + c.value, 2)
        return totals

    def to_dict(self) -> dict:
        return {
            "hero_id": self.hero_id,
            "score": self.score,
            "eligible": self.eligible,
            "contributions": [
                {"category": c.category.value, "value": c.value, "reason": c.reason}
                for c in self.contributions
            ],
        }


@dataclass(frozen=True)
class ScoringContext:
    """Snapshot of a draft as seen by the scoring engine.

    Built fresh for every scoring pass and never mutated while one is in
    flight. ``perspective_side`` is the coached side; the other side is
    scored as a predicted opponent.
    """

    teams: dict[Side, TeamProfile]
    perspective_side: Side = Side.BLUE
    unavailable: frozenset[str] = frozenset()
    picks: dict[Side, tuple[str, ...]] = field(default_factory=dict)
    bans: dict[Side, tuple[str, ...]] = field(default_factory=dict)
    roles_filled: dict[Side, frozenset[str]] = field(default_factory=dict)

    def team(self, side: Side) -> TeamProfile:
        return self.teams[side]

    def is_available(self, hero_id: str) -> bool:
        return hero_id not in self.unavailable

    def allies(self, side: Side) -> tuple[str, ...]:
        return self.picks.get(side, ())

    def enemies(self, side: Side) -> tuple[str, ...]:
        return self.picks.get(side.opponent, ())

    def missing_roles(self, side: Side) -> set[str]:
        return missing_roles(self.roles_filled.get(side, frozenset()))

    def pick_count(self, side: Side) -> int:
        return len(self.allies(side))
