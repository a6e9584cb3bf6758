"""Read-only reference data supplied for a draft session.

Everything here is loaded once per session (from DuckDB or an inline request
payload) and treated as immutable while a draft is scored.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from rov_draft.models.draft import Side
from rov_draft.models.hero import Hero, hero_sort_key


@dataclass(frozen=True)
class SynergyPair:
    """Symmetric compatibility score between two heroes on the same side."""

    hero_a: str
    hero_b: str
    synergy_score: float


@dataclass(frozen=True)
class Matchup:
    """Directional win rate (percent) of ``hero`` against ``opponent``."""

    hero: str
    opponent: str
    win_rate: float


@dataclass(frozen=True)
class PoolEntry:
    hero_id: str
    matches_played: int


@dataclass(frozen=True)
class FirstPickEntry:
    hero_id: str
    win_rate: float
    pick_count: int


@dataclass(frozen=True)
class ThreatEntry:
    hero_id: str
    win_rate: float
    threat_level: float = 1.0


@dataclass(frozen=True)
class Strategy:
    """A named pre-planned composition.

    ``core`` heroes are never banned by the owning side and are prioritised
    for picking. ``avoid`` heroes are enemy answers to the plan, prioritised
    for banning.
    """

    id: str
    name: str
    core: tuple[str, ...] = ()
    avoid: tuple[str, ...] = ()
    win_rate: float = 0.0


@dataclass
class TeamProfile:
    """Everything known about one side before the draft starts."""

    name: str = ""
    pool: list[PoolEntry] = field(default_factory=list)
    first_picks: list[FirstPickEntry] = field(default_factory=list)  # ranked
    enemy_threats: list[ThreatEntry] = field(default_factory=list)  # ranked
    strategy: Optional[Strategy] = None
    strategies: list[Strategy] = field(default_factory=list)
    global_bans: frozenset[str] = frozenset()

    def matches_played(self, hero_id: str) -> int:
        for entry in self.pool:
            if entry.hero_id == hero_id:
                return entry.matches_played
        return 0

    @property
    def core_heroes(self) -> frozenset[str]:
        return frozenset(self.strategy.core) if self.strategy else frozenset()

    @property
    def avoid_heroes(self) -> frozenset[str]:
        return frozenset(self.strategy.avoid) if self.strategy else frozenset()

    def top_first_picks(self, limit: int = 5) -> list[FirstPickEntry]:
        return self.first_picks[:limit]


@dataclass
class ReferenceData:
    """Hero roster plus the synergy and matchup tables for one patch."""

    heroes: dict[str, Hero] = field(default_factory=dict)
    synergies: list[SynergyPair] = field(default_factory=list)
    matchups: list[Matchup] = field(default_factory=list)

    @classmethod
    def from_heroes(
        cls,
        heroes: Iterable[Hero],
        synergies: Iterable[SynergyPair] = (),
        matchups: Iterable[Matchup] = (),
    ) -> "ReferenceData":
        return cls(
            heroes={h.id: h for h in heroes},
            synergies=list(synergies),
            matchups=list(matchups),
        )

    @property
    def roster(self) -> list[Hero]:
        """Heroes in deterministic hero-id order."""
        return [self.heroes[hid] for hid in sorted(self.heroes, key=hero_sort_key)]

    def hero(self, hero_id: str) -> Optional[Hero]:
        return self.heroes.get(hero_id)

    def name_of(self, hero_id: Optional[str]) -> str:
        if hero_id is None:
            return "-"
        hero = self.heroes.get(hero_id)
        return hero.name if hero else hero_id


def default_teams(teams: Optional[dict[Side, TeamProfile]] = None) -> dict[Side, TeamProfile]:
    """Fill in an empty profile for any side without one."""
    teams = dict(teams or {})
    for side in Side:
        teams.setdefault(side, TeamProfile(name=side.value.title()))
    return teams
