"""Centralized role normalization utility.

All role handling in the codebase should go through this module so that hero
data coming from different sources (stat sheets, scrim logs, manual entry)
agrees on one vocabulary. The canonical roles are the five lanes of the
global ban-pick format: Dark Slayer, Jungle, Mid, Abyssal Dragon, Roam.
"""

from typing import Iterable, Optional

# Canonical roles - the standard format used throughout the application
CANONICAL_ROLES = frozenset({"Dark Slayer", "Jungle", "Mid", "Abyssal Dragon", "Roam"})

# Role ordering for consistent display/sorting
ROLE_ORDER = ["Dark Slayer", "Jungle", "Mid", "Abyssal Dragon", "Roam"]

# Role given to heroes whose data carries no recognisable role
DEFAULT_ROLE = "Dark Slayer"

# Mapping from known role spellings and class names to canonical roles.
# Keys are lowercase; lookup lowercases the input first.
ROLE_ALIASES: dict[str, str] = {
    # Dark Slayer lane
    "dark slayer": "Dark Slayer",
    "darkslayer": "Dark Slayer",
    "dsl": "Dark Slayer",
    "slayer": "Dark Slayer",
    "warrior": "Dark Slayer",
    "tank": "Dark Slayer",

    # Jungle
    "jungle": "Jungle",
    "jungler": "Jungle",
    "jug": "Jungle",
    "jg": "Jungle",
    "assassin": "Jungle",

    # Mid lane
    "mid": "Mid",
    "middle": "Mid",
    "mid laner": "Mid",
    "mage": "Mid",

    # Abyssal Dragon lane
    "abyssal dragon": "Abyssal Dragon",
    "abyssal": "Abyssal Dragon",
    "adl": "Abyssal Dragon",
    "carry": "Abyssal Dragon",
    "marksman": "Abyssal Dragon",
    "archer": "Abyssal Dragon",

    # Roam
    "roam": "Roam",
    "roamer": "Roam",
    "support": "Roam",
    "sup": "Roam",
}


def normalize_role(role: Optional[str]) -> Optional[str]:
    """Normalize a role string to its canonical name.

    Args:
        role: Role string in any known format (e.g., "ADL", "support", "Abyssal")

    Returns:
        Canonical role name or None if the role is unknown/None

    Examples:
        >>> normalize_role("Support")
        'Roam'
        >>> normalize_role("abyssal")
        'Abyssal Dragon'
        >>> normalize_role("Healer") is None
        True
    """
    if role is None:
        return None

    if role in CANONICAL_ROLES:
        return role

    return ROLE_ALIASES.get(role.strip().lower())


def normalize_role_strict(role: str) -> str:
    """Normalize a role string, raising ValueError if unknown."""
    normalized = normalize_role(role)
    if normalized is None:
        raise ValueError(f"Unknown role: {role}")
    return normalized


def normalize_roles(roles: Iterable[Optional[str]]) -> tuple[str, ...]:
    """Normalize a hero's role tags, keeping first-seen order and dropping duplicates.

    A hero with no recognisable role is slotted as DEFAULT_ROLE so that every
    hero can still be drafted.
    """
    result: list[str] = []
    for role in roles:
        normalized = normalize_role(role)
        if normalized and normalized not in result:
            result.append(normalized)
    if not result:
        result.append(DEFAULT_ROLE)
    return tuple(result)


def is_valid_role(role: Optional[str]) -> bool:
    """Check if a role string can be normalized."""
    return normalize_role(role) is not None


def missing_roles(filled: Iterable[str]) -> set[str]:
    """Return the canonical roles not yet covered by ``filled``."""
    return set(CANONICAL_ROLES) - set(filled)


def sort_roles(roles: Iterable[str]) -> list[str]:
    """Sort canonical roles in lane order (unknown roles last)."""
    def role_sort_key(role: str) -> int:
        try:
            return ROLE_ORDER.index(role)
        except ValueError:
            return 99

    return sorted(roles, key=role_sort_key)
