"""Matchup lookup over the directed counter table."""
from typing import Iterable, Optional

from rov_draft.models.reference import Matchup


class MatchupCalculator:
    """Answers "how does hero A fare against hero B" in win-rate percent."""

    def __init__(self, matchups: Iterable[Matchup] = ()):
        self._counters: dict[str, dict[str, float]] = {}
        for m in matchups:
            self._counters.setdefault(m.hero, {})[m.opponent] = m.win_rate

    def get_matchup(self, our_hero: str, enemy_hero: str) -> dict:
        """Get the matchup between two heroes.

        Uses a two-step lookup strategy:

        1. DIRECT LOOKUP: our_hero vs enemy_hero, stored win rate as-is.
        2. REVERSE LOOKUP: enemy_hero vs our_hero, then INVERT (100 - wr).
           Matchup win rates are complementary: if A beats B 60% of the
           time, B beats A 40% of the time.

        Returns a dict with ``win_rate`` (None when there is no data) and
        ``data_source`` ("direct_lookup", "reverse_lookup" or "none").
        """
        direct = self._counters.get(our_hero, {})
        if enemy_hero in direct:
            return {"win_rate": direct[enemy_hero], "data_source": "direct_lookup"}

        reverse = self._counters.get(enemy_hero, {})
        if our_hero in reverse:
            return {"win_rate": round(100.0 - reverse[our_hero], 2), "data_source": "reverse_lookup"}

        return {"win_rate": None, "data_source": "none"}

    def win_rate(self, our_hero: str, enemy_hero: str) -> Optional[float]:
        return self.get_matchup(our_hero, enemy_hero)["win_rate"]

    def counters_of(self, our_hero: str, enemies: Iterable[str]) -> list[tuple[str, float]]:
        """Enemies that ``our_hero`` beats (win rate above 50), with the edge in points."""
        result = []
        for enemy in enemies:
            wr = self.win_rate(our_hero, enemy)
            if wr is not None and wr > 50:
                result.append((enemy, round(wr - 50, 2)))
        return result
