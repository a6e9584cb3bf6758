"""Meta strength scorer based on aggregate win rate and tier."""
from typing import Optional

from rov_draft.models.hero import Hero, hero_sort_key
from rov_draft.services.scorers.weights import ScoringWeights
from rov_draft.utils.role_normalizer import normalize_role


class MetaScorer:
    """Scores heroes on current patch strength."""

    def __init__(self, heroes: dict[str, Hero], weights: Optional[ScoringWeights] = None):
        self.heroes = heroes
        self.weights = weights or ScoringWeights()

    def get_meta_score(self, hero_id: str) -> float:
        """Aggregate win rate (percent); 50 for unknown heroes."""
        hero = self.heroes.get(hero_id)
        return hero.win_rate if hero else 50.0

    def get_meta_tier(self, hero_id: str) -> Optional[str]:
        hero = self.heroes.get(hero_id)
        return hero.tier if hero else None

    def tier_bonus(self, hero_id: str) -> float:
        """Pick bonus for top-tier (S) and second-tier (A) heroes."""
        tier = self.get_meta_tier(hero_id)
        return self.weights.tier_bonus.get(tier, 0.0) if tier else 0.0

    def ban_priority(self, hero_id: str) -> tuple[float, str]:
        """Broad meta-denial value of banning a hero.

        Returns:
            Tuple of (value, reason). Value is 0 for heroes that are neither
            above the win-rate threshold nor top-tier.
        """
        w = self.weights
        wr = self.get_meta_score(hero_id)
        tier = self.get_meta_tier(hero_id)
        value = 0.0
        parts = []
        if wr > w.meta_ban_threshold:
            value += (wr - w.meta_ban_threshold) * w.meta_ban_scale
            parts.append(f"{wr:.1f}% win rate")
        if tier and tier in w.meta_ban_tier_bonus:
            value += w.meta_ban_tier_bonus[tier]
            parts.append(f"{tier}-tier")
        reason = ("Meta threat: " + ", ".join(parts)) if parts else ""
        return value, reason

    def get_top_meta_heroes(self, role: Optional[str] = None, limit: int = 10) -> list[str]:
        """Top heroes by win rate, optionally filtered to one role.

        Args:
            role: Optional role filter; aliases such as "ADL" or "Support" are accepted.
            limit: Maximum number of heroes to return.
        """
        wanted = normalize_role(role) if role else None
        heroes = [h for h in self.heroes.values() if wanted is None or wanted in h.roles]
        heroes.sort(key=lambda h: (-h.win_rate, hero_sort_key(h.id)))
        return [h.id for h in heroes[:limit]]
