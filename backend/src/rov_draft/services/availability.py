"""Ban/pick bookkeeping and per-side role fill."""

import copy
from typing import Optional

from rov_draft.exceptions import RoleExhaustedError
from rov_draft.models.draft import Side
from rov_draft.models.hero import Hero
from rov_draft.models.reference import TeamProfile
from rov_draft.models.scoring import ScoringContext
from rov_draft.utils.role_normalizer import DEFAULT_ROLE, missing_roles, normalize_role

MAX_PICKS = 5


class AvailabilityTracker:
    """Tracks which heroes are used and which roles each side has filled."""

    def __init__(self, heroes: dict[str, Hero]):
        self.heroes = heroes
        self._used: set[str] = set()
        self._bans: dict[Side, list[str]] = {Side.BLUE: [], Side.RED: []}
        self._picks: dict[Side, list[str]] = {Side.BLUE: [], Side.RED: []}
        self._roles: dict[Side, list[str]] = {Side.BLUE: [], Side.RED: []}

    def is_available(self, hero_id: str) -> bool:
        return hero_id not in self._used

    @property
    def unavailable(self) -> frozenset[str]:
        return frozenset(self._used)

    def bans(self, side: Side) -> list[str]:
        return list(self._bans[side])

    def picks(self, side: Side) -> list[str]:
        return list(self._picks[side])

    def roles_filled(self, side: Side) -> list[str]:
        """Roles filled by each pick, in pick order."""
        return list(self._roles[side])

    def missing_roles(self, side: Side) -> set[str]:
        return missing_roles(self._roles[side])

    def open_role_for(self, side: Side, hero: Hero, role_hint: Optional[str] = None) -> Optional[str]:
        """First of the hero's roles still open for ``side`` (hint first), or None."""
        missing = self.missing_roles(side)
        hint = normalize_role(role_hint)
        if hint and hint in hero.roles and hint in missing:
            return hint
        for role in hero.roles:
            if role in missing:
                return role
        return None

    def record_ban(self, side: Side, hero_id: str) -> None:
        self._bans[side].append(hero_id)
        self._used.add(hero_id)

    def record_pick(
        self,
        side: Side,
        hero_id: str,
        role_hint: Optional[str] = None,
        enforce_roles: bool = False,
    ) -> str:
        """Record a pick and return the role it fills.

        If none of the hero's roles is open the primary role is recorded
        anyway, unless ``enforce_roles`` is set, in which case
        RoleExhaustedError is raised. A sixth pick is always rejected.
        """
        if len(self._picks[side]) >= MAX_PICKS:
            raise RoleExhaustedError(f"{side.value} already has {MAX_PICKS} picks", hero_id=hero_id)

        hero = self.heroes.get(hero_id)
        role = self.open_role_for(side, hero, role_hint) if hero else None
        if role is None:
            if enforce_roles:
                raise RoleExhaustedError(
                    f"{hero_id} has no role open for {side.value}", hero_id=hero_id
                )
            role = hero.primary_role if hero else normalize_role(role_hint) or DEFAULT_ROLE

        self._picks[side].append(hero_id)
        self._roles[side].append(role)
        self._used.add(hero_id)
        return role

    def copy(self) -> "AvailabilityTracker":
        clone = AvailabilityTracker(self.heroes)
        clone._used = set(self._used)
        clone._bans = copy.deepcopy(self._bans)
        clone._picks = copy.deepcopy(self._picks)
        clone._roles = copy.deepcopy(self._roles)
        return clone

    def scoring_context(self, teams: dict[Side, TeamProfile], perspective_side: Side) -> ScoringContext:
        """Freeze the current bookkeeping into a ScoringContext."""
        return ScoringContext(
            teams=teams,
            perspective_side=perspective_side,
            unavailable=frozenset(self._used),
            picks={side: tuple(self._picks[side]) for side in Side},
            bans={side: tuple(self._bans[side]) for side in Side},
            roles_filled={side: frozenset(self._roles[side]) for side in Side},
        )
