"""Pick-phase scoring terms."""
from rov_draft.models.draft import DraftStepSpec
from rov_draft.models.hero import Hero
from rov_draft.models.reference import ReferenceData
from rov_draft.models.scoring import ScoreCategory, ScoredCandidate, ScoringContext
from rov_draft.services.scorers.matchup_calculator import MatchupCalculator
from rov_draft.services.scorers.meta_scorer import MetaScorer
from rov_draft.services.scorers.weights import ScoringWeights
from rov_draft.services.synergy_service import SynergyService


class PickScorer:
    """Accumulates pick terms for a hero that already passed the role filter."""

    def __init__(
        self,
        reference: ReferenceData,
        meta: MetaScorer,
        matchups: MatchupCalculator,
        synergy: SynergyService,
        weights: ScoringWeights,
    ):
        self.reference = reference
        self.meta = meta
        self.matchups = matchups
        self.synergy = synergy
        self.weights = weights

    def score(self, candidate: ScoredCandidate, hero: Hero, context: ScoringContext, step: DraftStepSpec) -> None:
        self._base_power(candidate, hero)
        self._synergy(candidate, hero, context, step)
        self._counter(candidate, hero, context, step)
        self._comfort(candidate, hero, context, step)
        if step.slot == 1:
            self._first_pick(candidate, hero, context, step)
            self._threat_counter(candidate, hero, context, step)
        self._strategy_core(candidate, hero, context, step)
        self._flex(candidate, hero, step)

    def _base_power(self, candidate: ScoredCandidate, hero: Hero) -> None:
        candidate.add(ScoreCategory.META, self.meta.get_meta_score(hero.id), f"Win rate {hero.win_rate:.1f}%")
        bonus = self.meta.tier_bonus(hero.id)
        candidate.add(ScoreCategory.META, bonus, f"{hero.tier}-tier on this patch")

    def _synergy(self, candidate, hero, context, step) -> None:
        pairs = self.synergy.synergy_with(hero.id, context.allies(step.side))
        if not pairs:
            return
        total = sum(score for _, score in pairs) * self.weights.synergy_scale
        names = ", ".join(self.reference.name_of(ally) for ally, _ in pairs)
        candidate.add(ScoreCategory.SYNERGY, total, f"Synergy with {names}")

    def _counter(self, candidate, hero, context, step) -> None:
        beaten = self.matchups.counters_of(hero.id, context.enemies(step.side))
        if not beaten:
            return
        multiplier = self.weights.counter_multiplier(step.slot)
        total = sum(edge for _, edge in beaten) * multiplier
        names = ", ".join(self.reference.name_of(enemy) for enemy, _ in beaten)
        candidate.add(ScoreCategory.COUNTER, total, f"Counters {names}")

    def _comfort(self, candidate, hero, context, step) -> None:
        # Pool history is only trusted for the coached side
        if step.side != context.perspective_side:
            return
        matches = context.team(step.side).matches_played(hero.id)
        if matches <= 0:
            return
        value = min(self.weights.comfort_cap, matches * self.weights.comfort_per_match)
        candidate.add(ScoreCategory.COMFORT, value, f"Team comfort ({matches} matches played)")

    def _first_pick(self, candidate, hero, context, step) -> None:
        team = context.team(step.side)
        for entry in team.top_first_picks(self.weights.first_pick_top_n):
            if entry.hero_id != hero.id:
                continue
            value = self.weights.first_pick_scale * (entry.win_rate / 100) * (min(entry.pick_count, 5) / 5)
            candidate.add(
                ScoreCategory.FIRST_PICK,
                value,
                f"Preferred first pick ({entry.pick_count} picks, {entry.win_rate:.0f}% win rate)",
            )
            return

    def _threat_counter(self, candidate, hero, context, step) -> None:
        """Pre-empt the enemy's known threats before any enemy pick exists."""
        team = context.team(step.side)
        total = 0.0
        countered = []
        for threat in team.enemy_threats:
            if threat.hero_id == hero.id or not context.is_available(threat.hero_id):
                continue
            wr = self.matchups.win_rate(hero.id, threat.hero_id)
            if wr is not None and wr > 50:
                total += (wr - 50) * self.weights.threat_counter_scale * threat.threat_level
                countered.append(self.reference.name_of(threat.hero_id))
        if countered:
            candidate.add(ScoreCategory.THREAT_COUNTER, total, f"Counters enemy pool: {', '.join(countered)}")

    def _strategy_core(self, candidate, hero, context, step) -> None:
        team = context.team(step.side)
        if hero.id not in team.core_heroes:
            return
        name = team.strategy.name if team.strategy else "strategy"
        candidate.add(
            ScoreCategory.STRATEGY_CORE,
            self.weights.core_bonus(step.slot),
            f"Core hero of {name}",
        )

    def _flex(self, candidate, hero, step) -> None:
        if hero.is_flex and step.slot <= self.weights.flex_max_slot:
            candidate.add(ScoreCategory.FLEX, self.weights.flex_bonus, f"Flex pick ({' / '.join(hero.roles)})")
