"""Full-draft simulation: both sides played by the scoring engine."""

import logging
import threading
from typing import Iterable, Iterator, Optional

from rov_draft.models.draft import DraftAction, DraftStepSpec, Side
from rov_draft.models.hero import Hero
from rov_draft.models.recommendations import (
    CandidateSummary,
    DraftStepRecord,
    SimulationResult,
    StepAnalysis,
)
from rov_draft.models.reference import ReferenceData, TeamProfile, default_teams
from rov_draft.models.scoring import ScoreCategory, ScoredCandidate, ScoringContext
from rov_draft.services.draft_machine import DEFAULT_BAN_SECONDS, DEFAULT_PICK_SECONDS, DraftMachine
from rov_draft.services.scorers.weights import ScoringWeights
from rov_draft.services.scoring_engine import ScoringEngine, select_best
from rov_draft.services.scoring_logger import ScoringLogger
from rov_draft.utils.draft_sequence import TOTAL_STEPS, step_at

logger = logging.getLogger(__name__)

TOP_CANDIDATES = 5
WHY_NOT_COUNT = 3


class DraftSimulator:
    """Plays out a draft step by step, recording why each hero was chosen."""

    def __init__(
        self,
        reference: ReferenceData,
        weights: Optional[ScoringWeights] = None,
        scoring_logger: Optional[ScoringLogger] = None,
        ban_seconds: int = DEFAULT_BAN_SECONDS,
        pick_seconds: int = DEFAULT_PICK_SECONDS,
    ):
        self.reference = reference
        self.engine = ScoringEngine(reference, weights)
        self.scoring_logger = scoring_logger
        self.ban_seconds = ban_seconds
        self.pick_seconds = pick_seconds

    def new_machine(self, initial_actions: Iterable[DraftAction] = ()) -> DraftMachine:
        machine = DraftMachine(self.reference.heroes, self.ban_seconds, self.pick_seconds)
        initial_actions = list(initial_actions)
        if initial_actions:
            machine.rehydrate(initial_actions)
        return machine

    def iter_steps(
        self,
        teams: Optional[dict[Side, TeamProfile]] = None,
        perspective_side: Side = Side.BLUE,
        initial_actions: Iterable[DraftAction] = (),
        cancel_event: Optional[threading.Event] = None,
        machine: Optional[DraftMachine] = None,
    ) -> Iterator[DraftStepRecord]:
        """Yield one record per remaining step, as each step is finalized.

        Cancellation is cooperative: ``cancel_event`` is checked between
        steps, and records already yielded stay valid.
        """
        teams = default_teams(teams)
        machine = machine or self.new_machine(initial_actions)
        start = machine.state.step_index
        logger.info(f"Simulation started at step {start} (perspective {perspective_side.value})")

        exhausted = False
        for index in range(start, TOTAL_STEPS):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Simulation cancelled before step {index}")
                return

            step = step_at(index)
            context = machine.scoring_context(teams, perspective_side)
            ranked = [] if exhausted else self.engine.rank(context, step)
            best = select_best(ranked)

            if best is not None:
                machine.commit(best.hero_id)
                record = self._build_record(step, best, ranked, context)
            else:
                fallback = None if exhausted else self._fallback_hero(machine, step)
                if fallback is None:
                    # Nothing left to commit; the machine stays put and every later step is empty
                    exhausted = True
                    logger.warning(f"No hero available for {step.label}; recording an empty step")
                else:
                    logger.warning(f"No eligible candidate for {step.label}; falling back to {fallback.id}")
                    machine.commit(fallback.id, enforce_roles=False)
                record = self._build_fallback_record(step, fallback)

            if self.scoring_logger:
                self.scoring_logger.log_step(record)
            yield record

        logger.info(f"Simulation completed: {TOTAL_STEPS - start} steps")

    def simulate(
        self,
        teams: Optional[dict[Side, TeamProfile]] = None,
        perspective_side: Side = Side.BLUE,
        initial_actions: Iterable[DraftAction] = (),
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationResult:
        """Run the remaining steps to completion (or cancellation)."""
        machine = self.new_machine(initial_actions)
        records = list(
            self.iter_steps(teams, perspective_side, cancel_event=cancel_event, machine=machine)
        )
        return SimulationResult(records=records, final_state=machine.snapshot())

    def _fallback_hero(self, machine: DraftMachine, step: DraftStepSpec) -> Optional[Hero]:
        """First still-available hero in roster order, preferring an open role for picks."""
        available = [h for h in self.reference.roster if machine.tracker.is_available(h.id)]
        if not available:
            return None
        if step.is_pick:
            missing = machine.tracker.missing_roles(step.side)
            for hero in available:
                if missing.intersection(hero.roles):
                    return hero
        return available[0]

    def _summaries(self, ranked: list[ScoredCandidate]) -> tuple[CandidateSummary, ...]:
        eligible = [c for c in ranked if c.eligible][:TOP_CANDIDATES]
        return tuple(CandidateSummary.from_candidate(c, self.reference.name_of(c.hero_id)) for c in eligible)

    def _build_record(
        self,
        step: DraftStepSpec,
        best: ScoredCandidate,
        ranked: list[ScoredCandidate],
        context: ScoringContext,
    ) -> DraftStepRecord:
        hero_name = self.reference.name_of(best.hero_id)
        runners_up = [c for c in ranked if c.eligible and c.hero_id != best.hero_id][:WHY_NOT_COUNT]

        counters: tuple[str, ...] = ()
        if step.is_pick:
            beaten = self.engine.matchups.counters_of(best.hero_id, context.enemies(step.side))
            counters = tuple(self.reference.name_of(enemy) for enemy, _ in beaten)

        analysis = StepAnalysis(
            slot_context=f"{step.label} (phase {step.phase})",
            rationale=f"{step.action.value.title()} {hero_name} ({best.score:.1f}): {best.primary_reason}",
            why_not=tuple(self._why_not(best, other) for other in runners_up),
            counters=counters,
        )
        return DraftStepRecord(
            step_index=step.index,
            side=step.side,
            action=step.action,
            hero_id=best.hero_id,
            hero_name=hero_name,
            score=best.score,
            top_candidates=self._summaries(ranked),
            analysis=analysis,
            contributions=tuple(best.to_dict()["contributions"]),
        )

    def _build_fallback_record(self, step: DraftStepSpec, hero: Optional[Hero]) -> DraftStepRecord:
        if hero is None:
            rationale = "No hero left to select"
        else:
            rationale = f"No eligible candidate; fell back to {hero.name} (first available)"
        return DraftStepRecord(
            step_index=step.index,
            side=step.side,
            action=step.action,
            hero_id=hero.id if hero else None,
            hero_name=hero.name if hero else None,
            score=0.0,
            top_candidates=(),
            analysis=StepAnalysis(slot_context=f"{step.label} (phase {step.phase})", rationale=rationale),
            fallback=True,
            contributions=(
                ({"category": ScoreCategory.FALLBACK.value, "value": 0.0, "reason": rationale},) if hero else ()
            ),
        )

    def _why_not(self, best: ScoredCandidate, other: ScoredCandidate) -> str:
        """Explain why ``other`` lost to ``best``."""
        name = self.reference.name_of(other.hero_id)
        chosen = self.reference.name_of(best.hero_id)
        gap = round(best.score - other.score, 2)
        if gap == 0:
            return f"{name} tied at {other.score:.1f}; {chosen} wins on hero id order"

        best_top, other_top = best.top_contribution, other.top_contribution
        if other_top is None or best_top is None:
            return f"{name} scored {gap:.1f} lower with no distinguishing factor"
        if other_top.category != best_top.category:
            return (
                f"{name} scored {gap:.1f} lower: its top factor was {other_top.category.value} "
                f"({other_top.reason}) vs {best_top.category.value}"
            )
        return (
            f"{name} scored {gap:.1f} lower: same top factor ({best_top.category.value}) "
            f"but weaker ({other_top.value:.1f} vs {best_top.value:.1f})"
        )
