"""Ban-phase scoring terms.

Phase 1 (first four bans) is about broad denial: the acting side's strategy
avoid set and meta threats. Phase 2 is targeted: protect committed allies
from their counters and deny strong heroes for roles the opponent still
needs. Threat denial applies in both phases.
"""
from rov_draft.models.draft import DraftStepSpec
from rov_draft.models.hero import Hero
from rov_draft.models.reference import ReferenceData
from rov_draft.models.scoring import ScoreCategory, ScoredCandidate, ScoringContext
from rov_draft.services.scorers.matchup_calculator import MatchupCalculator
from rov_draft.services.scorers.meta_scorer import MetaScorer
from rov_draft.services.scorers.weights import ScoringWeights


class BanScorer:
    """Accumulates ban terms for a hero that passed the hard filters."""

    def __init__(
        self,
        reference: ReferenceData,
        meta: MetaScorer,
        matchups: MatchupCalculator,
        weights: ScoringWeights,
    ):
        self.reference = reference
        self.meta = meta
        self.matchups = matchups
        self.weights = weights

    def score(
        self,
        candidate: ScoredCandidate,
        hero: Hero,
        context: ScoringContext,
        step: DraftStepSpec,
        phase: int | None = None,
    ) -> None:
        """Add ban terms. ``phase`` overrides the step's phase when set."""
        phase = phase or step.phase
        if phase == 1:
            self._strategy_avoid(candidate, hero, context, step)
            self._meta_denial(candidate, hero)
        else:
            self._protect(candidate, hero, context, step)
            self._deny(candidate, hero, context, step)
        self._threat_denial(candidate, hero, context, step)

        if step.side != context.perspective_side:
            self._protect_first_picks(candidate, hero, context, step)
            self._deny_comfort(candidate, hero, context, step)

    def _strategy_avoid(self, candidate, hero, context, step) -> None:
        team = context.team(step.side)
        if hero.id in team.avoid_heroes:
            name = team.strategy.name if team.strategy else "strategy"
            candidate.add(ScoreCategory.STRATEGY_AVOID, self.weights.avoid_bonus, f"Counters our {name}")

    def _meta_denial(self, candidate, hero) -> None:
        value, reason = self.meta.ban_priority(hero.id)
        candidate.add(ScoreCategory.META_BAN, value, reason)

    def _threat_denial(self, candidate, hero, context, step) -> None:
        for threat in context.team(step.side).enemy_threats:
            if threat.hero_id == hero.id:
                candidate.add(
                    ScoreCategory.THREAT_BAN,
                    self.weights.threat_ban_scale * threat.threat_level,
                    f"Enemy threat ({threat.win_rate:.0f}% win rate)",
                )
                return

    def _protect(self, candidate, hero, context, step) -> None:
        """Ban heroes that beat our committed picks."""
        total = 0.0
        threatened = []
        for ally in context.allies(step.side):
            wr = self.matchups.win_rate(hero.id, ally)
            if wr is not None and wr > 50:
                total += (wr - 50) * self.weights.protect_scale
                threatened.append(self.reference.name_of(ally))
        if threatened:
            candidate.add(ScoreCategory.PROTECT_BAN, total, f"Protects {', '.join(threatened)}")

    def _deny(self, candidate, hero, context, step) -> None:
        """Ban strong heroes for roles the opponent still has to fill."""
        open_roles = context.missing_roles(step.side.opponent)
        fills = [r for r in hero.roles if r in open_roles]
        if not fills:
            return
        w = self.weights
        value = max(0.0, hero.win_rate - 50) * w.deny_scale
        if hero.tier:
            value += w.deny_tier_bonus.get(hero.tier, 0.0)
        candidate.add(ScoreCategory.DENY_BAN, value, f"Denies enemy {fills[0]}")

    def _protect_first_picks(self, candidate, hero, context, step) -> None:
        """Predicted opponent: ban what counters its own favourite first picks."""
        team = context.team(step.side)
        total = 0.0
        protected = []
        for entry in team.top_first_picks(self.weights.first_pick_top_n):
            if entry.hero_id == hero.id:
                continue
            wr = self.matchups.win_rate(hero.id, entry.hero_id)
            if wr is not None and wr > 50:
                total += (wr - 50) * self.weights.first_pick_protect_scale
                protected.append(self.reference.name_of(entry.hero_id))
        if protected:
            candidate.add(ScoreCategory.FIRST_PICK_PROTECT, total, f"Protects first pick {', '.join(protected)}")

    def _deny_comfort(self, candidate, hero, context, step) -> None:
        """Predicted opponent: ban the coached side's comfort heroes."""
        matches = context.team(context.perspective_side).matches_played(hero.id)
        if matches <= 0:
            return
        w = self.weights
        value = min(w.comfort_ban_cap, matches * w.comfort_ban_per_match)
        candidate.add(ScoreCategory.COMFORT_BAN, value, f"Denies enemy comfort ({matches} matches)")
