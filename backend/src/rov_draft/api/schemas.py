"""Request payloads shared by the draft and simulator routes."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from rov_draft.models.draft import ActionType, DraftAction, Side
from rov_draft.models.hero import Hero
from rov_draft.models.reference import (
    FirstPickEntry,
    Matchup,
    PoolEntry,
    ReferenceData,
    Strategy,
    SynergyPair,
    TeamProfile,
    ThreatEntry,
)

SideName = Literal["BLUE", "RED"]


class HeroIn(BaseModel):
    id: str
    name: str
    roles: list[str] = Field(default_factory=list)
    tier: Optional[str] = None
    win_rate: Optional[float] = None


class SynergyIn(BaseModel):
    hero_a: str
    hero_b: str
    synergy_score: float


class MatchupIn(BaseModel):
    hero: str
    opponent: str
    win_rate: float


class PoolIn(BaseModel):
    hero_id: str
    matches_played: int


class FirstPickIn(BaseModel):
    hero_id: str
    win_rate: float
    pick_count: int


class ThreatIn(BaseModel):
    hero_id: str
    win_rate: float
    threat_level: float = 1.0


class StrategyIn(BaseModel):
    id: str
    name: str
    core: list[str] = Field(default_factory=list)
    avoid: list[str] = Field(default_factory=list)
    win_rate: float = 0.0

    def to_strategy(self) -> Strategy:
        return Strategy(self.id, self.name, tuple(self.core), tuple(self.avoid), self.win_rate)


class TeamIn(BaseModel):
    name: str = ""
    pool: list[PoolIn] = Field(default_factory=list)
    first_picks: list[FirstPickIn] = Field(default_factory=list)
    enemy_threats: list[ThreatIn] = Field(default_factory=list)
    strategy: Optional[StrategyIn] = None
    strategies: list[StrategyIn] = Field(default_factory=list)
    global_bans: list[str] = Field(default_factory=list)

    def to_profile(self, default_name: str) -> TeamProfile:
        return TeamProfile(
            name=self.name or default_name,
            pool=[PoolEntry(p.hero_id, p.matches_played) for p in self.pool],
            first_picks=[FirstPickEntry(f.hero_id, f.win_rate, f.pick_count) for f in self.first_picks],
            enemy_threats=[ThreatEntry(t.hero_id, t.win_rate, t.threat_level) for t in self.enemy_threats],
            strategy=self.strategy.to_strategy() if self.strategy else None,
            strategies=[s.to_strategy() for s in self.strategies],
            global_bans=frozenset(self.global_bans),
        )


class ReferenceIn(BaseModel):
    heroes: list[HeroIn]
    synergies: list[SynergyIn] = Field(default_factory=list)
    matchups: list[MatchupIn] = Field(default_factory=list)

    def to_reference(self) -> ReferenceData:
        return ReferenceData.from_heroes(
            [Hero.create(h.id, h.name, h.roles, h.tier, h.win_rate) for h in self.heroes],
            [SynergyPair(s.hero_a, s.hero_b, s.synergy_score) for s in self.synergies],
            [Matchup(m.hero, m.opponent, m.win_rate) for m in self.matchups],
        )


class ActionIn(BaseModel):
    side: SideName
    action: Literal["BAN", "PICK"]
    hero_id: str
    slot_index: Optional[int] = None

    def to_action(self) -> DraftAction:
        return DraftAction(Side(self.side), ActionType(self.action), self.hero_id, self.slot_index)


class DraftSetup(BaseModel):
    """Everything needed to open a room or run a simulation.

    ``reference`` may be omitted when the server has a reference database.
    """

    reference: Optional[ReferenceIn] = None
    blue_team: TeamIn = Field(default_factory=TeamIn)
    red_team: TeamIn = Field(default_factory=TeamIn)
    perspective_side: SideName = "BLUE"
    actions: list[ActionIn] = Field(default_factory=list)

    def teams(self) -> dict[Side, TeamProfile]:
        return {
            Side.BLUE: self.blue_team.to_profile("Blue"),
            Side.RED: self.red_team.to_profile("Red"),
        }

    def draft_actions(self) -> list[DraftAction]:
        return [a.to_action() for a in self.actions]
