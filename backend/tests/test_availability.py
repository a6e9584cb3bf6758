"""Tests for AvailabilityTracker."""
import pytest

from rov_draft.exceptions import RoleExhaustedError
from rov_draft.models import Hero, Side
from rov_draft.services.availability import AvailabilityTracker


@pytest.fixture
def heroes():
    return {
        h.id: h
        for h in [
            Hero.create("a", "Flex", ["Mid", "Roam"]),
            Hero.create("b", "Mage", ["Mid"]),
            Hero.create("c", "Support", ["Roam"]),
            Hero.create("d", "Tank", ["Dark Slayer"]),
            Hero.create("e", "Jungler", ["Jungle"]),
            Hero.create("f", "Carry", ["Abyssal Dragon"]),
            Hero.create("g", "Other Mage", ["Mid"]),
        ]
    }


@pytest.fixture
def tracker(heroes):
    return AvailabilityTracker(heroes)


def test_ban_marks_unavailable(tracker):
    assert tracker.is_available("a")
    tracker.record_ban(Side.BLUE, "a")
    assert not tracker.is_available("a")
    assert tracker.bans(Side.BLUE) == ["a"]
    assert tracker.missing_roles(Side.BLUE) == {"Dark Slayer", "Jungle", "Mid", "Abyssal Dragon", "Roam"}


def test_pick_fills_first_open_role(tracker):
    assert tracker.record_pick(Side.BLUE, "a") == "Mid"
    assert tracker.record_pick(Side.BLUE, "c") == "Roam"
    assert "Mid" not in tracker.missing_roles(Side.BLUE)
    assert tracker.missing_roles(Side.RED) == {"Dark Slayer", "Jungle", "Mid", "Abyssal Dragon", "Roam"}


def test_flex_hero_takes_second_role_when_first_filled(tracker):
    tracker.record_pick(Side.BLUE, "b")
    assert tracker.record_pick(Side.BLUE, "a") == "Roam"


def test_role_hint_preferred_when_open(tracker):
    assert tracker.record_pick(Side.BLUE, "a", role_hint="Support") == "Roam"


def test_pick_without_open_role_falls_back_to_primary(tracker):
    tracker.record_pick(Side.BLUE, "b")
    assert tracker.record_pick(Side.BLUE, "g") == "Mid"
    assert tracker.picks(Side.BLUE) == ["b", "g"]


def test_pick_without_open_role_rejected_when_enforced(tracker):
    tracker.record_pick(Side.BLUE, "b")
    with pytest.raises(RoleExhaustedError):
        tracker.record_pick(Side.BLUE, "g", enforce_roles=True)
    assert tracker.is_available("g")
    assert tracker.picks(Side.BLUE) == ["b"]


def test_sixth_pick_rejected(tracker):
    for hero_id in ["a", "b", "c", "d", "e"]:
        tracker.record_pick(Side.RED, hero_id)
    with pytest.raises(RoleExhaustedError):
        tracker.record_pick(Side.RED, "f")
    assert len(tracker.roles_filled(Side.RED)) == 5


def test_copy_is_independent(tracker):
    tracker.record_pick(Side.BLUE, "a")
    clone = tracker.copy()
    clone.record_ban(Side.RED, "b")
    assert tracker.is_available("b")
    assert clone.picks(Side.BLUE) == ["a"]


def test_scoring_context_snapshot(tracker, empty_teams):
    tracker.record_pick(Side.BLUE, "a")
    tracker.record_ban(Side.RED, "d")
    context = tracker.scoring_context(empty_teams, Side.BLUE)
    tracker.record_pick(Side.RED, "e")

    assert context.unavailable == frozenset({"a", "d"})
    assert context.allies(Side.BLUE) == ("a",)
    assert context.enemies(Side.RED) == ("a",)
    assert context.missing_roles(Side.BLUE) == {"Dark Slayer", "Jungle", "Abyssal Dragon", "Roam"}
