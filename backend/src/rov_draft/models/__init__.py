"""Data models for the RoV draft engine."""

from rov_draft.models.draft import ActionType, DraftAction, DraftState, DraftStepSpec, Side
from rov_draft.models.hero import Hero, hero_sort_key
from rov_draft.models.reference import (
    FirstPickEntry,
    Matchup,
    PoolEntry,
    ReferenceData,
    Strategy,
    SynergyPair,
    TeamProfile,
    ThreatEntry,
    default_teams,
)
from rov_draft.models.scoring import (
    INELIGIBLE_SCORE,
    PROTECTED_SCORE,
    ScoreCategory,
    ScoreContribution,
    ScoredCandidate,
    ScoringContext,
)
from rov_draft.models.recommendations import (
    CandidateSummary,
    DraftStepRecord,
    LiveRecommendations,
    Recommendation,
    SimulationResult,
    StepAnalysis,
)

__all__ = [
    "ActionType",
    "DraftAction",
    "DraftState",
    "DraftStepSpec",
    "Side",
    "Hero",
    "hero_sort_key",
    "FirstPickEntry",
    "Matchup",
    "PoolEntry",
    "ReferenceData",
    "Strategy",
    "SynergyPair",
    "TeamProfile",
    "ThreatEntry",
    "default_teams",
    "INELIGIBLE_SCORE",
    "PROTECTED_SCORE",
    "ScoreCategory",
    "ScoreContribution",
    "ScoredCandidate",
    "ScoringContext",
    "CandidateSummary",
    "DraftStepRecord",
    "LiveRecommendations",
    "Recommendation",
    "SimulationResult",
    "StepAnalysis",
]
