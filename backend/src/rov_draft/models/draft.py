"""Draft sequence, action and state models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Side(str, Enum):
    """The two sides of a draft. Blue holds first pick."""

    BLUE = "BLUE"
    RED = "RED"

    @property
    def opponent(self) -> "Side":
        return Side.RED if self is Side.BLUE else Side.BLUE


class ActionType(str, Enum):
    """Kind of draft action."""

    BAN = "BAN"
    PICK = "PICK"


@dataclass(frozen=True)
class DraftStepSpec:
    """One entry of the static draft sequence."""

    order: int  # 1-18
    side: Side
    action: ActionType
    slot: int  # 1-based slot within this side/action pair
    label: str  # "Blue Ban 1", "Red Pick 3", ...
    phase: int  # 1 or 2

    @property
    def index(self) -> int:
        """0-based step index."""
        return self.order - 1

    @property
    def is_ban(self) -> bool:
        return self.action == ActionType.BAN

    @property
    def is_pick(self) -> bool:
        return self.action == ActionType.PICK


@dataclass(frozen=True)
class DraftAction:
    """A committed ban or pick, as persisted by the surrounding application."""

    side: Side
    action: ActionType
    hero_id: str
    slot_index: Optional[int]  # 0-based; None on input takes the next free slot

    def to_dict(self) -> dict:
        return {
            "side": self.side.value,
            "action": self.action.value,
            "hero_id": self.hero_id,
            "slot_index": self.slot_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DraftAction":
        return cls(
            side=Side(str(data["side"]).upper()),
            action=ActionType(str(data["action"]).upper()),
            hero_id=str(data["hero_id"]),
            slot_index=None if data.get("slot_index") is None else int(data["slot_index"]),
        )


@dataclass
class DraftState:
    """Mutable state of one draft in progress.

    ``step_index`` always equals the number of committed actions.
    """

    step_index: int = 0
    blue_picks: dict[int, str] = field(default_factory=dict)  # slot -> hero id
    red_picks: dict[int, str] = field(default_factory=dict)
    blue_bans: list[str] = field(default_factory=list)
    red_bans: list[str] = field(default_factory=list)
    timer: int = 0
    paused: bool = True
    finished: bool = False
    actions: list[DraftAction] = field(default_factory=list)

    def picks_for(self, side: Side) -> dict[int, str]:
        return self.blue_picks if side == Side.BLUE else self.red_picks

    def bans_for(self, side: Side) -> list[str]:
        return self.blue_bans if side == Side.BLUE else self.red_bans

    def ordered_picks(self, side: Side) -> list[str]:
        """Pick hero ids for a side in slot order."""
        picks = self.picks_for(side)
        return [picks[slot] for slot in sorted(picks)]

    @property
    def used_heroes(self) -> set[str]:
        """Every hero banned or picked so far."""
        used = set(self.blue_bans) | set(self.red_bans)
        used.update(self.blue_picks.values())
        used.update(self.red_picks.values())
        return used

    def last_action(self) -> Optional[DraftAction]:
        return self.actions[-1] if self.actions else None

    def to_dict(self) -> dict:
        return {
            "step_index": self.step_index,
            "blue_picks": self.ordered_picks(Side.BLUE),
            "red_picks": self.ordered_picks(Side.RED),
            "blue_bans": list(self.blue_bans),
            "red_bans": list(self.red_bans),
            "timer": self.timer,
            "paused": self.paused,
            "finished": self.finished,
            "actions": [a.to_dict() for a in self.actions],
        }
