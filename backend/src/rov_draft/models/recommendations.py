"""Simulation trace and live recommendation models."""

from dataclasses import asdict, dataclass, field
from typing import Optional

from rov_draft.models.draft import ActionType, DraftState, Side
from rov_draft.models.scoring import ScoredCandidate


@dataclass(frozen=True)
class CandidateSummary:
    """Compact view of a scored candidate for display."""

    hero_id: str
    hero_name: str
    score: float
    top_category: Optional[str] = None
    reason: str = ""

    @classmethod
    def from_candidate(cls, candidate: ScoredCandidate, hero_name: str) -> "CandidateSummary":
        top = candidate.top_category
        return cls(
            hero_id=candidate.hero_id,
            hero_name=hero_name,
            score=candidate.score,
            top_category=top.value if top else None,
            reason=candidate.primary_reason,
        )


@dataclass(frozen=True)
class StepAnalysis:
    slot_context: str  # "Blue Pick 3 (phase 1)"
    rationale: str
    why_not: tuple[str, ...] = ()
    counters: tuple[str, ...] = ()  # enemy picks this choice counters


@dataclass(frozen=True)
class DraftStepRecord:
    """One simulated step. Immutable once produced."""

    step_index: int
    side: Side
    action: ActionType
    hero_id: Optional[str]  # None only when nothing at all was available
    hero_name: Optional[str]
    score: float
    top_candidates: tuple[CandidateSummary, ...]
    analysis: StepAnalysis
    fallback: bool = False
    contributions: tuple[dict, ...] = ()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["side"] = self.side.value
        data["action"] = self.action.value
        data["top_candidates"] = [asdict(c) for c in self.top_candidates]
        data["contributions"] = list(self.contributions)
        data["analysis"]["why_not"] = list(self.analysis.why_not)
        data["analysis"]["counters"] = list(self.analysis.counters)
        return data


@dataclass
class SimulationResult:
    records: list[DraftStepRecord] = field(default_factory=list)
    final_state: Optional[DraftState] = None

    def to_dict(self) -> dict:
        return {
            "records": [r.to_dict() for r in self.records],
            "final_state": self.final_state.to_dict() if self.final_state else None,
        }


@dataclass
class Recommendation:
    hero_id: str
    hero_name: str
    score: float
    reasons: list[str] = field(default_factory=list)


@dataclass
class LiveRecommendations:
    """Four independent top-N lists for one human turn."""

    for_side: Side
    step_index: int
    action: Optional[ActionType]
    meta: list[Recommendation] = field(default_factory=list)
    analyst: list[Recommendation] = field(default_factory=list)
    hybrid: list[Recommendation] = field(default_factory=list)
    smart_ban: list[Recommendation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "for_side": self.for_side.value,
            "step_index": self.step_index,
            "action": self.action.value if self.action else None,
            "meta": [asdict(r) for r in self.meta],
            "analyst": [asdict(r) for r in self.analyst],
            "hybrid": [asdict(r) for r in self.hybrid],
            "smart_ban": [asdict(r) for r in self.smart_ban],
        }
