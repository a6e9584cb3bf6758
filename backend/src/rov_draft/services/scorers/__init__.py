"""Core scoring components for the draft engine."""
from rov_draft.services.scorers.weights import ScoringWeights
from rov_draft.services.scorers.meta_scorer import MetaScorer
from rov_draft.services.scorers.matchup_calculator import MatchupCalculator
from rov_draft.services.scorers.pick_scorer import PickScorer
from rov_draft.services.scorers.ban_scorer import BanScorer

__all__ = [
    "ScoringWeights",
    "MetaScorer",
    "MatchupCalculator",
    "PickScorer",
    "BanScorer",
]
