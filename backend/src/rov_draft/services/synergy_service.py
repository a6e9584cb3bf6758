"""Pair synergy lookups."""
from typing import Iterable, Optional

from rov_draft.models.reference import SynergyPair


class SynergyService:
    """Scores hero synergies from an unordered pair table."""

    def __init__(self, pairs: Iterable[SynergyPair] = ()):
        self._synergies: dict[tuple[str, str], float] = {}
        for pair in pairs:
            self._synergies[self._key(pair.hero_a, pair.hero_b)] = pair.synergy_score

    @staticmethod
    def _key(hero_a: str, hero_b: str) -> tuple[str, str]:
        return tuple(sorted([hero_a, hero_b]))

    def get_synergy_score(self, hero_a: str, hero_b: str) -> Optional[float]:
        """Raw synergy score for a pair, or None if the pair is unknown."""
        return self._synergies.get(self._key(hero_a, hero_b))

    def synergy_with(self, hero_id: str, allies: Iterable[str]) -> list[tuple[str, float]]:
        """Known synergy scores between ``hero_id`` and each ally."""
        result = []
        for ally in allies:
            score = self.get_synergy_score(hero_id, ally)
            if score is not None:
                result.append((ally, score))
        return result

    def calculate_team_synergy(self, picks: list[str]) -> dict:
        """Aggregate synergy over every known pair in a team."""
        pairs = []
        for i, hero_a in enumerate(picks):
            for hero_b in picks[i + 1:]:
                score = self.get_synergy_score(hero_a, hero_b)
                if score is not None:
                    pairs.append({"heroes": [hero_a, hero_b], "score": score})

        pairs.sort(key=lambda x: -x["score"])
        return {
            "total_score": round(sum(p["score"] for p in pairs), 2),
            "pair_count": len(pairs),
            "synergy_pairs": pairs[:5],
        }
