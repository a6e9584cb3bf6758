"""Tests for draft rooms and the room registry."""
import asyncio
import time

import pytest

from rov_draft.exceptions import HeroUnavailableError, InvalidStateError
from rov_draft.models import ActionType, DraftAction, Side, Strategy, TeamProfile
from rov_draft.services.draft_simulator import DraftSimulator
from rov_draft.services.room_registry import DraftRoomRegistry

pytestmark = pytest.mark.anyio


@pytest.fixture
def sink_calls():
    return []


@pytest.fixture
def registry(sink_calls):
    return DraftRoomRegistry(
        ttl_seconds=60,
        ban_seconds=30,
        pick_seconds=30,
        recommendation_limit=3,
        action_sink=lambda room_id, step_index, action: sink_calls.append((room_id, step_index, action)),
    )


async def test_create_and_get_room(registry, full_reference, empty_teams):
    room = registry.create_room(full_reference, empty_teams, room_id="room-1")
    assert room.id == "room-1"
    assert registry.get_room("room-1") is room
    assert registry.get_room("missing") is None


async def test_generated_room_ids_are_unique(registry, full_reference):
    first = registry.create_room(full_reference)
    second = registry.create_room(full_reference)
    assert first.id != second.id
    assert first.teams[Side.BLUE].name == "Blue"


async def test_commit_persists_through_sink(registry, full_reference, sink_calls):
    room = registry.create_room(full_reference, room_id="room-1")
    action = await room.commit("7")
    assert action == DraftAction(Side.BLUE, ActionType.BAN, "7", 0)
    assert sink_calls == [("room-1", 0, action)]


async def test_rejected_commit_is_not_persisted(registry, full_reference, sink_calls):
    room = registry.create_room(full_reference)
    await room.commit("7")
    with pytest.raises(HeroUnavailableError):
        await room.commit("7")
    assert len(sink_calls) == 1
    assert room.machine.state.step_index == 1


async def test_concurrent_commits_are_serialised(registry, full_reference):
    room = registry.create_room(full_reference)
    results = await asyncio.gather(
        room.commit("7"), room.commit("7"), return_exceptions=True
    )
    assert sum(isinstance(r, HeroUnavailableError) for r in results) == 1
    assert room.machine.state.step_index == 1


async def test_rehydrated_room_resumes(registry, full_reference):
    actions = [
        DraftAction(Side.BLUE, ActionType.BAN, "1", 0),
        DraftAction(Side.RED, ActionType.BAN, "2", 0),
    ]
    room = registry.create_room(full_reference, initial_actions=actions)
    assert room.machine.state.step_index == 2
    assert room.to_dict()["current_step"]["label"] == "Blue Ban 2"


async def test_finished_room_rejects_commits(registry, full_reference, empty_teams):
    actions = DraftSimulator(full_reference).simulate(empty_teams).final_state.actions
    room = registry.create_room(full_reference)
    for action in actions:
        await room.commit(action.hero_id)
    assert room.machine.finished
    assert room.to_dict()["current_step"] is None

    spare = next(h for h in full_reference.heroes if room.machine.tracker.is_available(h))
    with pytest.raises(InvalidStateError):
        await room.commit(spare)


async def test_ticker_counts_down_once_unpaused(registry, full_reference):
    room = registry.create_room(full_reference)
    paused = await room.toggle_pause(tick_interval=0.01)
    assert paused is False
    await asyncio.sleep(0.1)
    assert room.machine.state.timer < 30

    registry.remove_room(room.id)
    assert room.ticker_task is None


async def test_remove_room(registry, full_reference):
    room = registry.create_room(full_reference)
    assert registry.remove_room(room.id)
    assert not registry.remove_room(room.id)
    assert registry.get_room(room.id) is None


async def test_prune_expired_rooms(registry, full_reference):
    stale = registry.create_room(full_reference, room_id="stale")
    fresh = registry.create_room(full_reference, room_id="fresh")
    now = time.time()
    stale.touch(now - 120)
    fresh.touch(now)

    assert registry.prune_expired(now) == ["stale"]
    assert [r["id"] for r in registry.list_rooms()] == ["fresh"]


async def test_room_recommendations_use_limit(registry, full_reference, empty_teams):
    room = registry.create_room(full_reference, empty_teams)
    recommendations = room.recommendations()
    assert recommendations.for_side == Side.BLUE
    assert len(recommendations.hybrid) == 3


async def test_room_strategies(registry, full_reference):
    teams = {
        Side.BLUE: TeamProfile(
            name="Blue",
            strategies=[Strategy("a", "A", core=("1",), win_rate=50), Strategy("b", "B", core=("2",), win_rate=60)],
        ),
        Side.RED: TeamProfile(name="Red"),
    }
    room = registry.create_room(full_reference, teams)
    await room.commit("1")
    ranked = room.strategies()
    assert [r.strategy.id for r in ranked] == ["b", "a"]
    assert ranked[1].denied == ["1"]
