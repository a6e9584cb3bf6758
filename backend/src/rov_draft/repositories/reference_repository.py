"""DuckDB-based access to reference data and persisted draft actions."""

import logging
from pathlib import Path
from typing import Iterable, Optional

import duckdb
import pandas as pd

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

logger = logging.getLogger(__name__)

ROLE_SEPARATORS = ("|", ",", "/")


def _split_roles(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    for sep in ROLE_SEPARATORS[1:]:
        raw = raw.replace(sep, ROLE_SEPARATORS[0])
    return [part.strip() for part in raw.split(ROLE_SEPARATORS[0]) if part.strip()]


def _float(value, default: float = 0.0) -> float:
    if value is None or value == "" or value == "None" or value == "nan":
        return default
    return float(value)


def _int(value, default: int = 0) -> int:
    return int(_float(value, default))


class ReferenceRepository:
    """Data access layer - DuckDB queries against a pre-built database file."""

    def __init__(self, database_path: str | Path):
        """Initialize with path to DuckDB database.

        Args:
            database_path: Path to the .duckdb file
                          (built from CSV exports by scripts/build_duckdb.py)

        Raises:
            FileNotFoundError: If the database file doesn't exist
        """
        self._db_path = Path(database_path)

        if not self._db_path.exists():
            raise FileNotFoundError(
                f"DuckDB database not found: {self._db_path}\n"
                f"Run: cd backend && python scripts/build_duckdb.py <csv_dir>"
            )

        with duckdb.connect(str(self._db_path), read_only=True) as conn:
            self._tables = {row[0] for row in conn.execute("SHOW TABLES").fetchall()}
        logger.info(f"ReferenceRepository: Using {self._db_path} ({len(self._tables)} tables)")

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def _query(self, sql: str, params: Optional[list] = None) -> list[dict]:
        """Execute query and return list of dicts with string-typed values."""
        # Read-only connection per query - no locks needed
        with duckdb.connect(str(self._db_path), read_only=True) as conn:
            df = conn.execute(sql, params or []).df()

        for col in df.columns:
            if pd.api.types.is_numeric_dtype(df[col]):
                df[col] = df[col].astype(str)
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict(orient="records")

    def get_heroes(self) -> list[Hero]:
        rows = self._query("SELECT id, name, roles, tier, win_rate FROM heroes")
        return [
            Hero.create(
                id=row["id"],
                name=row["name"] or row["id"],
                roles=_split_roles(row["roles"]),
                tier=row["tier"],
                win_rate=_float(row["win_rate"], 50.0),
            )
            for row in rows
        ]

    def get_synergies(self) -> list[SynergyPair]:
        if not self.has_table("hero_combos"):
            return []
        rows = self._query("SELECT hero_a, hero_b, synergy_score FROM hero_combos")
        return [SynergyPair(r["hero_a"], r["hero_b"], _float(r["synergy_score"])) for r in rows]

    def get_matchups(self) -> list[Matchup]:
        if not self.has_table("matchups"):
            return []
        rows = self._query("SELECT hero, opponent, win_rate FROM matchups")
        return [Matchup(r["hero"], r["opponent"], _float(r["win_rate"], 50.0)) for r in rows]

    def load_reference_data(self) -> ReferenceData:
        """Load the roster and pair tables for one session."""
        data = ReferenceData.from_heroes(self.get_heroes(), self.get_synergies(), self.get_matchups())
        logger.info(
            f"Loaded {len(data.heroes)} heroes, {len(data.synergies)} synergy pairs, "
            f"{len(data.matchups)} matchups"
        )
        return data

    def get_team_pool(self, team_id: str) -> list[PoolEntry]:
        if not self.has_table("team_hero_pool"):
            return []
        rows = self._query(
            "SELECT hero_id, matches_played FROM team_hero_pool WHERE team_id = ?",
            [team_id],
        )
        return [PoolEntry(r["hero_id"], _int(r["matches_played"])) for r in rows]

    def get_first_picks(self, team_id: str) -> list[FirstPickEntry]:
        if not self.has_table("team_first_picks"):
            return []
        rows = self._query(
            "SELECT hero_id, win_rate, pick_count FROM team_first_picks "
            "WHERE team_id = ? ORDER BY CAST(rank AS INTEGER)",
            [team_id],
        )
        return [FirstPickEntry(r["hero_id"], _float(r["win_rate"]), _int(r["pick_count"])) for r in rows]

    def get_threats(self, team_id: str) -> list[ThreatEntry]:
        """Heroes ``team_id`` is dangerous with, ranked."""
        if not self.has_table("team_threats"):
            return []
        rows = self._query(
            "SELECT hero_id, win_rate, threat_level FROM team_threats "
            "WHERE team_id = ? ORDER BY CAST(rank AS INTEGER)",
            [team_id],
        )
        return [
            ThreatEntry(r["hero_id"], _float(r["win_rate"]), _float(r["threat_level"], 1.0))
            for r in rows
        ]

    def get_strategies(self, team_id: str) -> list[Strategy]:
        if not self.has_table("strategies"):
            return []
        rows = self._query(
            "SELECT id, name, win_rate FROM strategies WHERE team_id = ?",
            [team_id],
        )
        heroes: list[dict] = []
        if rows and self.has_table("strategy_heroes"):
            heroes = self._query(
                "SELECT sh.strategy_id, sh.hero_id, sh.kind FROM strategy_heroes sh "
                "JOIN strategies s ON s.id = sh.strategy_id WHERE s.team_id = ?",
                [team_id],
            )

        strategies = []
        for row in rows:
            members = [h for h in heroes if h["strategy_id"] == row["id"]]
            strategies.append(
                Strategy(
                    id=row["id"],
                    name=row["name"],
                    core=tuple(h["hero_id"] for h in members if (h["kind"] or "").lower() == "core"),
                    avoid=tuple(h["hero_id"] for h in members if (h["kind"] or "").lower() == "avoid"),
                    win_rate=_float(row["win_rate"]),
                )
            )
        return strategies

    def load_team_profile(
        self,
        team_id: str,
        opponent_team_id: Optional[str] = None,
        strategy_id: Optional[str] = None,
        global_bans: Iterable[str] = (),
        name: Optional[str] = None,
    ) -> TeamProfile:
        """Assemble a side's profile.

        Args:
            team_id: The team being profiled
            opponent_team_id: Its opponent; the opponent's threat list becomes
                this side's ``enemy_threats``
            strategy_id: Active strategy; defaults to the highest win-rate one
            global_bans: Heroes this team already used earlier in the series
            name: Display name, defaults to the team id
        """
        strategies = self.get_strategies(team_id)
        active = None
        if strategy_id:
            active = next((s for s in strategies if s.id == strategy_id), None)
        elif strategies:
            active = max(strategies, key=lambda s: s.win_rate)

        return TeamProfile(
            name=name or team_id,
            pool=self.get_team_pool(team_id),
            first_picks=self.get_first_picks(team_id),
            enemy_threats=self.get_threats(opponent_team_id) if opponent_team_id else [],
            strategy=active,
            strategies=strategies,
            global_bans=frozenset(global_bans),
        )

    def get_draft_actions(self, room_id: str) -> list[DraftAction]:
        """Persisted actions for a room, in commit order."""
        if not self.has_table("draft_actions"):
            return []
        rows = self._query(
            "SELECT side, action, hero_id, slot_index FROM draft_actions "
            "WHERE room_id = ? ORDER BY CAST(step_index AS INTEGER)",
            [room_id],
        )
        return [
            DraftAction(
                side=Side(r["side"]),
                action=ActionType(r["action"]),
                hero_id=r["hero_id"],
                slot_index=_int(r["slot_index"]),
            )
            for r in rows
        ]

    def append_action(self, room_id: str, step_index: int, action: DraftAction) -> None:
        """Persist one committed action."""
        with duckdb.connect(str(self._db_path)) as conn:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS draft_actions ("
                "room_id VARCHAR, step_index INTEGER, side VARCHAR, action VARCHAR, "
                "hero_id VARCHAR, slot_index INTEGER)"
            )
            conn.execute(
                "INSERT INTO draft_actions VALUES (?, ?, ?, ?, ?, ?)",
                [room_id, step_index, action.side.value, action.action.value, action.hero_id, action.slot_index],
            )
        self._tables.add("draft_actions")
