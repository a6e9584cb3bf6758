"""Shared fixtures: synthetic rosters and team profiles."""
import pytest

from rov_draft.models import Hero, ReferenceData, Side, TeamProfile
from rov_draft.utils.role_normalizer import ROLE_ORDER


@pytest.fixture
def anyio_backend():
    """The application is asyncio-based; run anyio-marked tests on asyncio."""
    return "asyncio"


def spread_win_rate(i: int) -> float:
    return 45.0 + (i * 37 % 50) / 4


def build_roster(count: int, win_rate=None) -> list[Hero]:
    """Heroes "1".."count"; hero k plays roles ROLE_ORDER[(k-1)%5] and ROLE_ORDER[k%5]."""
    heroes = []
    for i in range(count):
        wr = win_rate(i) if callable(win_rate) else (win_rate if win_rate is not None else 50.0)
        heroes.append(
            Hero.create(
                id=str(i + 1),
                name=f"Hero{i + 1}",
                roles=[ROLE_ORDER[i % 5], ROLE_ORDER[(i + 1) % 5]],
                win_rate=wr,
            )
        )
    return heroes


@pytest.fixture
def small_reference():
    """10 two-role heroes, all at 50% win rate, no pair tables."""
    return ReferenceData.from_heroes(build_roster(10))


@pytest.fixture
def full_reference():
    """50 two-role heroes with spread win rates; every role is on 20 heroes."""
    return ReferenceData.from_heroes(build_roster(50, win_rate=spread_win_rate))


@pytest.fixture
def empty_teams():
    return {Side.BLUE: TeamProfile(name="Blue Team"), Side.RED: TeamProfile(name="Red Team")}


@pytest.fixture
def reference_payload():
    """The full roster as an inline reference payload for API requests."""
    return {
        "heroes": [
            {"id": h.id, "name": h.name, "roles": list(h.roles), "win_rate": h.win_rate}
            for h in build_roster(50, win_rate=spread_win_rate)
        ]
    }
