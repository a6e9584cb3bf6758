"""Strategy feasibility ranking for a side mid-draft."""
from dataclasses import dataclass, field

from rov_draft.models.draft import Side
from rov_draft.models.reference import Strategy, TeamProfile
from rov_draft.services.availability import AvailabilityTracker


@dataclass
class StrategyFeasibility:
    strategy: Strategy
    feasibility: float  # 0-100
    denied: list[str] = field(default_factory=list)
    safe: list[str] = field(default_factory=list)
    at_risk: list[str] = field(default_factory=list)
    enemy_picked: list[str] = field(default_factory=list)
    neutralized: list[str] = field(default_factory=list)
    remaining: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.strategy.id,
            "name": self.strategy.name,
            "win_rate": self.strategy.win_rate,
            "feasibility": self.feasibility,
            "denied": self.denied,
            "safe": self.safe,
            "at_risk": self.at_risk,
            "avoid": {
                "enemy_picked": self.enemy_picked,
                "neutralized": self.neutralized,
                "remaining": self.remaining,
            },
        }


class StrategyService:
    """Ranks a side's named strategies by how achievable they still are."""

    def evaluate(
        self,
        strategy: Strategy,
        side: Side,
        tracker: AvailabilityTracker,
        teams: dict[Side, TeamProfile],
    ) -> StrategyFeasibility:
        own, enemy = teams[side], teams[side.opponent]
        enemy_picks = set(tracker.picks(side.opponent))
        own_picks = set(tracker.picks(side))
        result = StrategyFeasibility(strategy=strategy, feasibility=100.0)

        points = []
        threat_ids = {t.hero_id for t in own.enemy_threats}
        for hero_id in strategy.core:
            if hero_id in own.global_bans or hero_id in enemy_picks or (
                not tracker.is_available(hero_id) and hero_id not in own_picks
            ):
                result.denied.append(hero_id)
                points.append(0.0)
            elif hero_id in enemy.global_bans:
                # The opponent already used it this series, so it cannot be taken from us
                result.safe.append(hero_id)
                points.append(1.0)
            elif hero_id in threat_ids:
                result.at_risk.append(hero_id)
                points.append(0.5)
            else:
                points.append(1.0)
        if points:
            result.feasibility = round(sum(points) / len(points) * 100, 1)

        for hero_id in strategy.avoid:
            if hero_id in enemy_picks:
                result.enemy_picked.append(hero_id)
            elif hero_id in enemy.global_bans:
                result.neutralized.append(hero_id)
            else:
                result.remaining.append(hero_id)
        return result

    def rank_strategies(
        self,
        strategies: list[Strategy],
        side: Side,
        tracker: AvailabilityTracker,
        teams: dict[Side, TeamProfile],
    ) -> list[StrategyFeasibility]:
        """Fewest denied core heroes first, then highest historical win rate."""
        evaluated = [self.evaluate(s, side, tracker, teams) for s in strategies]
        evaluated.sort(key=lambda r: (len(r.denied), -r.strategy.win_rate))
        return evaluated
