"""Live recommendations for a human-controlled turn.

Ranks candidates under four independent rubrics and returns the top N of
each. Nothing is committed and the context is only read.
"""

import logging
from typing import Callable, Optional

from rov_draft.models.draft import ActionType, DraftStepSpec, Side
from rov_draft.models.hero import Hero, hero_sort_key
from rov_draft.models.recommendations import LiveRecommendations, Recommendation
from rov_draft.models.reference import ReferenceData
from rov_draft.models.scoring import ScoredCandidate, ScoringContext
from rov_draft.services.scorers.weights import ScoringWeights
from rov_draft.services.scoring_engine import ScoringEngine
from rov_draft.services.scoring_logger import ScoringLogger
from rov_draft.utils.draft_sequence import next_step_for, step_at

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


class LiveRecommendationService:
    """Per-turn suggestion panels: meta, analyst, hybrid and smart ban."""

    def __init__(
        self,
        reference: ReferenceData,
        weights: Optional[ScoringWeights] = None,
        limit: int = DEFAULT_LIMIT,
        engine: Optional[ScoringEngine] = None,
        scoring_logger: Optional[ScoringLogger] = None,
    ):
        self.reference = reference
        self.engine = engine or ScoringEngine(reference, weights)
        self.limit = limit
        self.scoring_logger = scoring_logger

    def recommend(
        self,
        context: ScoringContext,
        step_index: int,
        for_side: Optional[Side] = None,
    ) -> LiveRecommendations:
        """Build the four recommendation lists for ``for_side``.

        Args:
            context: Frozen view of the draft in progress
            step_index: Current step of the draft (18 when finished)
            for_side: Side asking; defaults to the side on the clock

        Returns:
            LiveRecommendations; all lists are empty once the draft is over
        """
        current = step_at(step_index)
        if current is None:
            return LiveRecommendations(for_side=for_side or context.perspective_side, step_index=step_index, action=None)

        side = for_side or current.side
        step = current if current.side == side else next_step_for(side, current.action, step_index)

        eligible = [
            hero for hero in self.reference.roster
            if self.engine.score(hero, context, step).eligible
        ]

        result = LiveRecommendations(
            for_side=side,
            step_index=step_index,
            action=step.action,
            meta=self._top(eligible, lambda h: self._meta_score(h, context, step)),
            analyst=self._top(eligible, lambda h: self._analyst_score(h, context, step)),
            hybrid=self._top_scored([self.engine.score(h, context, step) for h in eligible]),
            smart_ban=self._smart_bans(context, side, step_index),
        )
        if self.scoring_logger:
            self.scoring_logger.log_recommendations(result)
        return result

    def _top(
        self,
        heroes: list[Hero],
        scorer: Callable[[Hero], tuple[float, list[str]]],
    ) -> list[Recommendation]:
        scored = []
        for hero in heroes:
            score, reasons = scorer(hero)
            scored.append(Recommendation(hero.id, hero.name, round(score, 2), reasons))
        scored.sort(key=lambda r: (-r.score, hero_sort_key(r.hero_id)))
        return scored[: self.limit]

    def _top_scored(self, candidates: list[ScoredCandidate]) -> list[Recommendation]:
        candidates = sorted(candidates, key=lambda c: (-c.score, hero_sort_key(c.hero_id)))
        return [
            Recommendation(
                hero_id=c.hero_id,
                hero_name=self.reference.name_of(c.hero_id),
                score=c.score,
                reasons=[contribution.reason for contribution in c.contributions],
            )
            for c in candidates[: self.limit]
        ]

    def _meta_score(self, hero: Hero, context: ScoringContext, step: DraftStepSpec) -> tuple[float, list[str]]:
        """General meta/history view: win rate, tier and pool history.

        History is the acting team's own pool for a pick and the opponent's
        pool for a ban, capped like team comfort.
        """
        reasons = [f"Win rate {hero.win_rate:.1f}%"]
        score = hero.win_rate
        bonus = self.engine.meta.tier_bonus(hero.id)
        if bonus:
            score += bonus
            reasons.append(f"{hero.tier}-tier")

        owner = step.side if step.action == ActionType.PICK else step.side.opponent
        matches = context.team(owner).matches_played(hero.id)
        if matches > 0:
            weights = self.engine.weights
            score += min(weights.comfort_cap, matches * weights.comfort_per_match)
            whose = "Our" if owner == step.side else "Their"
            reasons.append(f"{whose} pool: {matches} matches played")
        return score, reasons

    def _analyst_score(self, hero: Hero, context: ScoringContext, step: DraftStepSpec) -> tuple[float, list[str]]:
        """Synergy and counter view.

        For a pick: synergy with our picks and edges over enemy picks. For a
        ban: edges over our picks and synergy with enemy picks.
        """
        if step.action == ActionType.PICK:
            partners, targets = context.allies(step.side), context.enemies(step.side)
        else:
            partners, targets = context.enemies(step.side), context.allies(step.side)

        reasons = []
        synergy = self.engine.synergy.synergy_with(hero.id, partners)
        synergy_total = sum(score for _, score in synergy) * self.engine.weights.synergy_scale
        if synergy:
            reasons.append("Synergy with " + ", ".join(self.reference.name_of(h) for h, _ in synergy))

        beaten = self.engine.matchups.counters_of(hero.id, targets)
        counter_total = sum(edge for _, edge in beaten)
        if beaten:
            reasons.append("Counters " + ", ".join(self.reference.name_of(h) for h, _ in beaten))

        return synergy_total + counter_total + (hero.win_rate - 50) / 2, reasons

    def _smart_bans(self, context: ScoringContext, side: Side, step_index: int) -> list[Recommendation]:
        """Ban-phase logic for the side's next ban, even while picks are ongoing."""
        ban_step = next_step_for(side, ActionType.BAN, step_index)
        if ban_step is None:
            return []
        candidates = [self.engine.score_ban(h, context, ban_step) for h in self.reference.roster]
        return self._top_scored([c for c in candidates if c.eligible])
