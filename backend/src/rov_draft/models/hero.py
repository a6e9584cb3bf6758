"""Hero roster model."""

from dataclasses import dataclass
from typing import Iterable, Optional

from rov_draft.utils.role_normalizer import normalize_roles


def hero_sort_key(hero_id: str) -> tuple:
    """Deterministic hero-id ordering: numeric ids numerically, then the rest lexically."""
    if hero_id.isdigit():
        return (0, int(hero_id), hero_id)
    return (1, 0, hero_id)


@dataclass(frozen=True)
class Hero:
    """A hero for the active patch. Immutable during a draft."""

    id: str
    name: str
    roles: tuple[str, ...]  # canonical roles, primary first
    tier: Optional[str] = None  # "S", "A", "B", ...
    win_rate: float = 50.0  # aggregate win rate, percent

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        roles: Iterable[Optional[str]],
        tier: Optional[str] = None,
        win_rate: Optional[float] = None,
    ) -> "Hero":
        """Build a hero from raw data, normalizing roles and tier."""
        return cls(
            id=str(id),
            name=name,
            roles=normalize_roles(roles),
            tier=tier.strip().upper() if tier else None,
            win_rate=float(win_rate) if win_rate is not None else 50.0,
        )

    @property
    def primary_role(self) -> str:
        return self.roles[0]

    @property
    def is_flex(self) -> bool:
        """Heroes with two or more role tags hide which lane they will play."""
        return len(self.roles) >= 2
