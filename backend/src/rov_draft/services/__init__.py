"""Draft engine services."""

from rov_draft.services.availability import AvailabilityTracker
from rov_draft.services.draft_machine import DraftMachine
from rov_draft.services.scoring_engine import ScoringEngine, select_best
from rov_draft.services.draft_simulator import DraftSimulator
from rov_draft.services.recommendation_service import LiveRecommendationService
from rov_draft.services.strategy_service import StrategyFeasibility, StrategyService
from rov_draft.services.room_registry import DraftRoom, DraftRoomRegistry
from rov_draft.services.scoring_logger import ScoringLogger

__all__ = [
    "AvailabilityTracker",
    "DraftMachine",
    "ScoringEngine",
    "select_best",
    "DraftSimulator",
    "LiveRecommendationService",
    "StrategyFeasibility",
    "StrategyService",
    "DraftRoom",
    "DraftRoomRegistry",
    "ScoringLogger",
]
