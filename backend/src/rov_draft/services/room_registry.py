"""In-memory draft room management."""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from rov_draft.models.draft import DraftAction, Side
from rov_draft.models.recommendations import LiveRecommendations
from rov_draft.models.reference import ReferenceData, TeamProfile, default_teams
from rov_draft.services.draft_machine import DEFAULT_BAN_SECONDS, DEFAULT_PICK_SECONDS, DraftMachine
from rov_draft.services.recommendation_service import DEFAULT_LIMIT, LiveRecommendationService
from rov_draft.services.scoring_engine import ScoringEngine
from rov_draft.services.strategy_service import StrategyFeasibility, StrategyService

logger = logging.getLogger(__name__)

ActionSink = Callable[[str, int, DraftAction], None]


@dataclass
class DraftRoom:
    """One live draft: its machine, session data and serialisation lock."""

    id: str
    machine: DraftMachine
    reference: ReferenceData
    teams: dict[Side, TeamProfile]
    perspective_side: Side = Side.BLUE
    recommendation_limit: int = DEFAULT_LIMIT

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    ticker_task: Optional[asyncio.Task] = None
    created_at: float = field(default_factory=time.time)
    last_access: float = field(default_factory=time.time)
    action_sink: Optional[ActionSink] = None
    engine: Optional[ScoringEngine] = None

    def __post_init__(self):
        if self.engine is None:
            self.engine = ScoringEngine(self.reference)

    def touch(self, now: Optional[float] = None) -> None:
        self.last_access = now if now is not None else time.time()

    async def commit(self, hero_id: str) -> DraftAction:
        """Commit a hero for the current step. Draft errors propagate unchanged."""
        async with self.lock:
            step_index = self.machine.state.step_index
            action = self.machine.commit(hero_id)
        if self.action_sink:
            self.action_sink(self.id, step_index, action)
        if self.machine.finished:
            logger.info(f"Room {self.id} finished")
        return action

    async def tick(self) -> int:
        async with self.lock:
            return self.machine.tick()

    async def toggle_pause(self, tick_interval: float = 0.0) -> bool:
        async with self.lock:
            paused = self.machine.toggle_pause()
        if not paused and tick_interval > 0:
            self.start_ticker(tick_interval)
        return paused

    def start_ticker(self, interval: float) -> None:
        """Run one tick per ``interval`` seconds in the background until finished."""
        if self.ticker_task and not self.ticker_task.done():
            return
        self.ticker_task = asyncio.create_task(self._run_ticker(interval))

    async def _run_ticker(self, interval: float) -> None:
        while not self.machine.finished:
            await asyncio.sleep(interval)
            await self.tick()

    def stop_ticker(self) -> None:
        if self.ticker_task and not self.ticker_task.done():
            self.ticker_task.cancel()
        self.ticker_task = None

    def recommendations(self, for_side: Optional[Side] = None) -> LiveRecommendations:
        service = LiveRecommendationService(
            self.reference, limit=self.recommendation_limit, engine=self.engine
        )
        context = self.machine.scoring_context(self.teams, self.perspective_side)
        return service.recommend(context, self.machine.state.step_index, for_side=for_side)

    def strategies(self, side: Optional[Side] = None) -> list[StrategyFeasibility]:
        side = side or self.perspective_side
        team = self.teams[side]
        strategies = team.strategies or ([team.strategy] if team.strategy else [])
        return StrategyService().rank_strategies(strategies, side, self.machine.tracker, self.teams)

    def to_dict(self) -> dict:
        state = self.machine.snapshot()
        step = self.machine.current_step
        return {
            "room_id": self.id,
            "perspective_side": self.perspective_side.value,
            "teams": {side.value: self.teams[side].name for side in Side},
            "current_step": {
                "index": step.index,
                "side": step.side.value,
                "action": step.action.value,
                "slot": step.slot,
                "label": step.label,
                "phase": step.phase,
            } if step else None,
            "state": state.to_dict(),
        }


class DraftRoomRegistry:
    """Explicit map of live rooms, owned by the application state."""

    def __init__(
        self,
        ttl_seconds: float = 60 * 60,
        ban_seconds: int = DEFAULT_BAN_SECONDS,
        pick_seconds: int = DEFAULT_PICK_SECONDS,
        recommendation_limit: int = DEFAULT_LIMIT,
        action_sink: Optional[ActionSink] = None,
    ):
        self.rooms: dict[str, DraftRoom] = {}
        self.ttl_seconds = ttl_seconds
        self.ban_seconds = ban_seconds
        self.pick_seconds = pick_seconds
        self.recommendation_limit = recommendation_limit
        self.action_sink = action_sink

    def create_room(
        self,
        reference: ReferenceData,
        teams: Optional[dict[Side, TeamProfile]] = None,
        perspective_side: Side = Side.BLUE,
        initial_actions: Iterable[DraftAction] = (),
        room_id: Optional[str] = None,
    ) -> DraftRoom:
        """Create a room, rehydrating it from persisted actions if given.

        Args:
            reference: Hero roster and pair tables for the session
            teams: Team profiles per side; empty profiles are filled in
            perspective_side: The coached side
            initial_actions: Previously persisted actions to replay
            room_id: Explicit id; a short random id otherwise

        Returns:
            The created DraftRoom
        """
        self.prune_expired()
        machine = DraftMachine(reference.heroes, self.ban_seconds, self.pick_seconds)
        initial_actions = list(initial_actions)
        if initial_actions:
            machine.rehydrate(initial_actions)

        room = DraftRoom(
            id=room_id or str(uuid.uuid4())[:8],
            machine=machine,
            reference=reference,
            teams=default_teams(teams),
            perspective_side=perspective_side,
            recommendation_limit=self.recommendation_limit,
            action_sink=self.action_sink,
        )
        self.rooms[room.id] = room
        logger.info(f"Room {room.id} created at step {machine.state.step_index}")
        return room

    def get_room(self, room_id: str) -> Optional[DraftRoom]:
        room = self.rooms.get(room_id)
        if room:
            room.touch()
        return room

    def remove_room(self, room_id: str) -> bool:
        """Remove a room and cancel its ticker."""
        room = self.rooms.pop(room_id, None)
        if room is None:
            return False
        room.stop_ticker()
        logger.info(f"Room {room_id} removed")
        return True

    def prune_expired(self, now: Optional[float] = None) -> list[str]:
        now = now if now is not None else time.time()
        expired = [rid for rid, room in self.rooms.items() if now - room.last_access >= self.ttl_seconds]
        for room_id in expired:
            self.remove_room(room_id)
        return expired

    def list_rooms(self) -> list[dict]:
        """List all active rooms (for debugging)."""
        return [
            {
                "id": r.id,
                "step_index": r.machine.state.step_index,
                "finished": r.machine.finished,
                "paused": r.machine.state.paused,
            }
            for r in self.rooms.values()
        ]
