"""Tests for the draft state machine."""
import pytest

from rov_draft.exceptions import HeroUnavailableError, InvalidStateError, RoleExhaustedError
from rov_draft.models import ActionType, DraftAction, Hero, Side
from rov_draft.services.draft_machine import DraftMachine
from rov_draft.services.draft_simulator import DraftSimulator
from rov_draft.utils.draft_sequence import DRAFT_SEQUENCE


@pytest.fixture
def machine(full_reference):
    return DraftMachine(full_reference.heroes, ban_seconds=30, pick_seconds=20)


@pytest.fixture
def full_actions(full_reference, empty_teams):
    """A legal 18-action draft produced by the simulator."""
    result = DraftSimulator(full_reference).simulate(empty_teams)
    return result.final_state.actions


def test_new_machine_starts_paused_at_step_zero(machine):
    assert machine.state.step_index == 0
    assert machine.state.paused
    assert not machine.finished
    assert machine.state.timer == 30
    assert machine.current_step.label == "Blue Ban 1"


def test_step_index_tracks_commit_count(machine, full_actions):
    for n, action in enumerate(full_actions, start=1):
        machine.commit(action.hero_id)
        assert machine.state.step_index == n
        assert machine.finished == (n == 18)
    assert machine.current_step is None
    assert machine.state.timer == 0


def test_commit_records_ban_and_pick_slots(machine):
    actions = [machine.commit(hero_id) for hero_id in ["1", "2", "3", "4", "5"]]
    assert [a.action for a in actions] == [ActionType.BAN] * 4 + [ActionType.PICK]
    assert [a.slot_index for a in actions] == [0, 0, 1, 1, 0]
    assert machine.state.blue_bans == ["1", "3"]
    assert machine.state.red_bans == ["2", "4"]
    assert machine.state.blue_picks == {0: "5"}


def test_timer_resets_per_action_type(machine):
    for hero_id in ["1", "2", "3"]:
        machine.commit(hero_id)
    assert machine.state.timer == 30
    machine.commit("4")
    assert machine.current_step.action == ActionType.PICK
    assert machine.state.timer == 20


def test_commit_after_finished_raises(machine, full_actions):
    for action in full_actions:
        machine.commit(action.hero_id)
    spare = next(h for h in machine.heroes if machine.tracker.is_available(h))
    with pytest.raises(InvalidStateError):
        machine.commit(spare)


def test_commit_used_hero_rejected_without_side_effects(machine):
    machine.commit("1")
    before = machine.snapshot()
    with pytest.raises(HeroUnavailableError) as exc_info:
        machine.commit("1")
    assert exc_info.value.hero_id == "1"
    assert machine.snapshot() == before


def test_commit_unknown_hero_rejected(machine):
    with pytest.raises(HeroUnavailableError):
        machine.commit("no-such-hero")
    assert machine.state.step_index == 0


def test_commit_pick_without_open_role_rejected():
    roles = {"5": "Mid", "6": "Mid", "7": "Roam", "8": "Mid"}
    heroes = {
        h.id: h for h in [Hero.create(str(i), f"H{i}", [roles.get(str(i), "Jungle")]) for i in range(1, 9)]
    }
    machine = DraftMachine(heroes)
    for hero_id in ["1", "2", "3", "4", "5", "6", "7"]:
        machine.commit(hero_id)
    # Step 7 is Blue Pick 2; blue already has its Mid
    before = machine.snapshot()
    with pytest.raises(RoleExhaustedError):
        machine.commit("8")
    assert machine.snapshot() == before
    # Forced commit is allowed
    machine.commit("8", enforce_roles=False)
    assert machine.state.blue_picks == {0: "5", 1: "8"}


def test_tick_counts_down_only_when_running(machine):
    assert machine.tick() == 30
    machine.toggle_pause()
    assert machine.tick() == 29
    assert machine.tick() == 28
    machine.toggle_pause()
    assert machine.tick() == 28


def test_tick_floors_at_zero_and_never_commits(machine):
    machine.toggle_pause()
    for _ in range(40):
        machine.tick()
    assert machine.state.timer == 0
    assert machine.is_expired()
    assert machine.state.step_index == 0


def test_toggle_pause_does_not_touch_lists(machine):
    machine.commit("1")
    machine.toggle_pause()
    assert not machine.state.paused
    assert machine.state.blue_bans == ["1"]
    assert machine.state.step_index == 1


def test_tick_and_pause_are_noops_when_finished(machine, full_actions):
    for action in full_actions:
        machine.commit(action.hero_id)
    paused = machine.state.paused
    assert machine.toggle_pause() == paused
    assert machine.tick() == 0


def test_rehydrate_full_draft_matches_replayed_commits(full_reference, full_actions):
    replayed = DraftMachine(full_reference.heroes)
    for action in full_actions:
        replayed.commit(action.hero_id)

    rehydrated = DraftMachine(full_reference.heroes)
    rehydrated.rehydrate(full_actions)

    assert rehydrated.snapshot() == replayed.snapshot()
    assert rehydrated.finished
    assert rehydrated.state.step_index == 18


def test_rehydrate_prefix_sets_timer_for_current_step(full_reference, full_actions):
    machine = DraftMachine(full_reference.heroes, ban_seconds=30, pick_seconds=20)
    state = machine.rehydrate(full_actions[:5])
    assert state.step_index == 5
    assert not state.finished
    assert state.timer == 20
    assert machine.current_step == DRAFT_SEQUENCE[5]


def test_rehydrate_rejects_duplicate_heroes(machine):
    machine.commit("9")
    actions = [
        DraftAction(Side.BLUE, ActionType.BAN, "1", 0),
        DraftAction(Side.RED, ActionType.BAN, "1", 0),
    ]
    with pytest.raises(HeroUnavailableError):
        machine.rehydrate(actions)
    # previous state is kept
    assert machine.state.blue_bans == ["9"]
    assert machine.state.step_index == 1


def test_rehydrate_rejects_too_many_actions(machine, full_actions):
    extra = DraftAction(Side.BLUE, ActionType.BAN, "zzz", 4)
    with pytest.raises(InvalidStateError):
        machine.rehydrate(list(full_actions) + [extra])


def test_snapshot_is_a_copy(machine):
    snap = machine.snapshot()
    machine.commit("1")
    assert snap.blue_bans == []
    assert snap.step_index == 0


def opening_bans():
    return [
        DraftAction(Side.BLUE, ActionType.BAN, "1", 0),
        DraftAction(Side.RED, ActionType.BAN, "2", 0),
        DraftAction(Side.BLUE, ActionType.BAN, "3", 1),
        DraftAction(Side.RED, ActionType.BAN, "4", 1),
    ]


def test_rehydrate_keeps_persisted_slot_and_commit_fills_lowest_free(machine):
    actions = opening_bans() + [DraftAction(Side.BLUE, ActionType.PICK, "5", 1)]
    machine.rehydrate(actions)
    for hero_id in ["6", "7", "8"]:
        machine.commit(hero_id)

    assert machine.state.blue_picks == {1: "5", 0: "8"}
    assert sorted(machine.state.blue_picks.values()) == sorted(machine.tracker.picks(Side.BLUE))
    assert machine.state.actions[-1].slot_index == 0


def test_rehydrate_without_pick_slot_takes_next_free(machine):
    actions = opening_bans() + [DraftAction(Side.BLUE, ActionType.PICK, "5", None)]
    state = machine.rehydrate(actions)
    assert state.blue_picks == {0: "5"}
    assert state.actions[-1].slot_index == 0


@pytest.mark.parametrize("slot_index", [5, -1])
def test_rehydrate_rejects_pick_slot_out_of_range(machine, slot_index):
    actions = opening_bans() + [DraftAction(Side.BLUE, ActionType.PICK, "5", slot_index)]
    with pytest.raises(InvalidStateError):
        machine.rehydrate(actions)
    assert machine.state.step_index == 0


def test_rehydrate_rejects_taken_pick_slot(machine):
    actions = opening_bans() + [
        DraftAction(Side.BLUE, ActionType.PICK, "5", 0),
        DraftAction(Side.RED, ActionType.PICK, "6", 0),
        DraftAction(Side.RED, ActionType.PICK, "7", 0),
    ]
    with pytest.raises(InvalidStateError) as exc_info:
        machine.rehydrate(actions)
    assert exc_info.value.step_index == 6
    assert machine.state.red_picks == {}


def test_rehydrate_rejects_actions_out_of_sequence(machine):
    actions = [
        DraftAction(Side.BLUE, ActionType.PICK, "1", 0),
        DraftAction(Side.BLUE, ActionType.PICK, "2", 1),
    ]
    with pytest.raises(InvalidStateError) as exc_info:
        machine.rehydrate(actions)
    assert exc_info.value.step_index == 0
    assert machine.state.step_index == 0
    assert machine.tracker.is_available("1")
