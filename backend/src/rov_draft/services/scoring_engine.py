"""Candidate scoring: hard filters followed by additive, auditable terms."""
from typing import Iterable, Optional

from rov_draft.models.draft import DraftStepSpec
from rov_draft.models.hero import Hero, hero_sort_key
from rov_draft.models.reference import ReferenceData
from rov_draft.models.scoring import (
    INELIGIBLE_SCORE,
    PROTECTED_SCORE,
    ScoreCategory,
    ScoredCandidate,
    ScoringContext,
)
from rov_draft.services.scorers.ban_scorer import BanScorer
from rov_draft.services.scorers.matchup_calculator import MatchupCalculator
from rov_draft.services.scorers.meta_scorer import MetaScorer
from rov_draft.services.scorers.pick_scorer import PickScorer
from rov_draft.services.scorers.weights import ScoringWeights
from rov_draft.services.synergy_service import SynergyService


def candidate_sort_key(candidate: ScoredCandidate) -> tuple:
    """Eligible first, then highest score, then ascending hero id."""
    return (not candidate.eligible, -candidate.score, hero_sort_key(candidate.hero_id))


def select_best(candidates: Iterable[ScoredCandidate]) -> Optional[ScoredCandidate]:
    """Highest-scoring eligible candidate, ties broken by hero id. None if none is eligible."""
    eligible = [c for c in candidates if c.eligible]
    if not eligible:
        return None
    return min(eligible, key=candidate_sort_key)


class ScoringEngine:
    """Scores every hero for a step from the acting side's point of view.

    Pure over its inputs: the reference tables are read-only and the
    context is never mutated, so concurrent calls are safe.
    """

    def __init__(self, reference: ReferenceData, weights: Optional[ScoringWeights] = None):
        self.reference = reference
        self.weights = weights or ScoringWeights()
        self.meta = MetaScorer(reference.heroes, self.weights)
        self.matchups = MatchupCalculator(reference.matchups)
        self.synergy = SynergyService(reference.synergies)
        self.pick_scorer = PickScorer(reference, self.meta, self.matchups, self.synergy, self.weights)
        self.ban_scorer = BanScorer(reference, self.meta, self.matchups, self.weights)

    def score(self, hero: Hero, context: ScoringContext, step: DraftStepSpec) -> ScoredCandidate:
        """Score one hero for ``step``.

        Ineligible heroes come back with a sentinel score and the
        ``ineligible`` (or ``protected``) category instead of raising.
        """
        rejection = self._check_filters(hero, context, step)
        if rejection is not None:
            return rejection

        candidate = ScoredCandidate(hero_id=hero.id)
        if step.is_ban:
            self.ban_scorer.score(candidate, hero, context, step)
        else:
            self.pick_scorer.score(candidate, hero, context, step)
        return candidate

    def score_ban(
        self,
        hero: Hero,
        context: ScoringContext,
        step: DraftStepSpec,
        phase: Optional[int] = None,
    ) -> ScoredCandidate:
        """Ban-only evaluation, usable while the current step is a pick."""
        rejection = self._check_filters(hero, context, step, as_ban=True)
        if rejection is not None:
            return rejection
        candidate = ScoredCandidate(hero_id=hero.id)
        self.ban_scorer.score(candidate, hero, context, step, phase=phase)
        return candidate

    def _check_filters(
        self,
        hero: Hero,
        context: ScoringContext,
        step: DraftStepSpec,
        as_ban: Optional[bool] = None,
    ) -> Optional[ScoredCandidate]:
        is_ban = step.is_ban if as_ban is None else as_ban
        side = step.side
        team = context.team(side)

        if not context.is_available(hero.id):
            return ScoredCandidate.rejected(
                hero.id, ScoreCategory.INELIGIBLE, INELIGIBLE_SCORE, "Already banned or picked"
            )
        if hero.id in team.global_bans:
            return ScoredCandidate.rejected(
                hero.id, ScoreCategory.INELIGIBLE, INELIGIBLE_SCORE, f"Global ban for {side.value}"
            )

        if is_ban:
            if hero.id in team.core_heroes:
                return ScoredCandidate.rejected(
                    hero.id, ScoreCategory.PROTECTED, PROTECTED_SCORE, "Own strategy core hero"
                )
            if hero.id in context.team(side.opponent).global_bans:
                return ScoredCandidate.rejected(
                    hero.id,
                    ScoreCategory.INELIGIBLE,
                    INELIGIBLE_SCORE,
                    f"Wasted ban: global ban for {side.opponent.value}",
                )
            return None

        missing = context.missing_roles(side)
        if context.pick_count(side) >= 5 or not missing:
            return ScoredCandidate.rejected(
                hero.id, ScoreCategory.INELIGIBLE, INELIGIBLE_SCORE, "No roles left to fill"
            )
        if not missing.intersection(hero.roles):
            return ScoredCandidate.rejected(
                hero.id,
                ScoreCategory.INELIGIBLE,
                INELIGIBLE_SCORE,
                f"No open role ({' / '.join(hero.roles)} filled)",
            )
        return None

    def rank(
        self,
        context: ScoringContext,
        step: DraftStepSpec,
        heroes: Optional[Iterable[Hero]] = None,
    ) -> list[ScoredCandidate]:
        """Score every hero and sort best first, ineligible last."""
        heroes = self.reference.roster if heroes is None else heroes
        return sorted((self.score(h, context, step) for h in heroes), key=candidate_sort_key)
