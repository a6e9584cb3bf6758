"""Tests for the DuckDB reference repository and the database build script."""
import importlib.util
from pathlib import Path

import pandas as pd
import pytest

from rov_draft.models import ActionType, DraftAction, Side
from rov_draft.repositories.reference_repository import ReferenceRepository

BUILD_SCRIPT = Path(__file__).parents[1] / "scripts" / "build_duckdb.py"

TABLES = {
    "heroes": [
        {"id": "1", "name": "Florentino", "roles": "Dark Slayer|Jungle", "tier": "s", "win_rate": "53.5"},
        {"id": "2", "name": "Nakroth", "roles": "Jungle", "tier": "A", "win_rate": "52"},
        {"id": "3", "name": "Liliana", "roles": "Mid, Roam", "tier": "B", "win_rate": ""},
        {"id": "4", "name": "Yorn", "roles": "ADL", "tier": "", "win_rate": "49.5"},
        {"id": "10", "name": "Alice", "roles": "Support", "tier": "A", "win_rate": "51"},
    ],
    "hero_combos": [{"hero_a": "1", "hero_b": "2", "synergy_score": "15"}],
    "matchups": [{"hero": "1", "opponent": "3", "win_rate": "56"}],
    "team_hero_pool": [
        {"team_id": "t1", "hero_id": "1", "matches_played": "12"},
        {"team_id": "t1", "hero_id": "3", "matches_played": "4"},
    ],
    "team_first_picks": [
        {"team_id": "t1", "hero_id": "3", "win_rate": "60", "pick_count": "4", "rank": "2"},
        {"team_id": "t1", "hero_id": "1", "win_rate": "55", "pick_count": "8", "rank": "1"},
    ],
    "team_threats": [
        {"team_id": "t2", "hero_id": "2", "win_rate": "54", "threat_level": "1", "rank": "2"},
        {"team_id": "t2", "hero_id": "4", "win_rate": "58", "threat_level": "1.5", "rank": "1"},
    ],
    "strategies": [
        {"id": "s1", "team_id": "t1", "name": "Dive", "win_rate": "52"},
        {"id": "s2", "team_id": "t1", "name": "Poke", "win_rate": "58"},
    ],
    "strategy_heroes": [
        {"strategy_id": "s1", "hero_id": "1", "kind": "core"},
        {"strategy_id": "s1", "hero_id": "4", "kind": "avoid"},
        {"strategy_id": "s2", "hero_id": "3", "kind": "core"},
        {"strategy_id": "s2", "hero_id": "10", "kind": "CORE"},
    ],
}


def load_build_script():
    spec = importlib.util.spec_from_file_location("build_duckdb", BUILD_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def build_database(csv_dir: Path, tables: dict) -> Path:
    csv_dir.mkdir(exist_ok=True)
    for name, rows in tables.items():
        pd.DataFrame(rows).to_csv(csv_dir / f"{name}.csv", index=False)
    return load_build_script().build_duckdb(csv_dir, csv_dir / "draft_data.duckdb")


@pytest.fixture
def repo(tmp_path):
    return ReferenceRepository(build_database(tmp_path / "csv", TABLES))


@pytest.fixture
def heroes_only_repo(tmp_path):
    return ReferenceRepository(build_database(tmp_path / "minimal", {"heroes": TABLES["heroes"]}))


def test_missing_database_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ReferenceRepository(tmp_path / "nope.duckdb")


def test_build_requires_heroes_csv(tmp_path):
    csv_dir = tmp_path / "empty"
    csv_dir.mkdir()
    with pytest.raises(FileNotFoundError, match="heroes"):
        load_build_script().build_duckdb(csv_dir)


class TestReferenceData:
    def test_heroes_are_normalised(self, repo):
        heroes = {h.id: h for h in repo.get_heroes()}
        assert set(heroes) == {"1", "2", "3", "4", "10"}
        assert heroes["1"].roles == ("Dark Slayer", "Jungle")
        assert heroes["1"].tier == "S"
        assert heroes["1"].win_rate == 53.5
        assert heroes["3"].roles == ("Mid", "Roam")
        assert heroes["3"].win_rate == 50.0
        assert heroes["4"].roles == ("Abyssal Dragon",)
        assert heroes["4"].tier is None
        assert heroes["10"].roles == ("Roam",)

    def test_load_reference_data(self, repo):
        reference = repo.load_reference_data()
        assert [h.id for h in reference.roster] == ["1", "2", "3", "4", "10"]
        assert reference.synergies[0].synergy_score == 15.0
        assert reference.matchups[0].win_rate == 56.0

    def test_missing_optional_tables(self, heroes_only_repo):
        assert heroes_only_repo.get_synergies() == []
        assert heroes_only_repo.get_matchups() == []
        assert heroes_only_repo.get_strategies("t1") == []
        assert heroes_only_repo.get_draft_actions("room") == []
        profile = heroes_only_repo.load_team_profile("t1", "t2")
        assert profile.pool == [] and profile.strategy is None


class TestTeamProfile:
    def test_pool_and_first_picks(self, repo):
        profile = repo.load_team_profile("t1", "t2", name="Team One")
        assert profile.name == "Team One"
        assert profile.matches_played("1") == 12
        assert [f.hero_id for f in profile.first_picks] == ["1", "3"]
        assert profile.first_picks[0].pick_count == 8

    def test_threats_come_from_opponent(self, repo):
        profile = repo.load_team_profile("t1", "t2")
        assert [t.hero_id for t in profile.enemy_threats] == ["4", "2"]
        assert profile.enemy_threats[0].threat_level == 1.5
        assert repo.load_team_profile("t1").enemy_threats == []

    def test_default_strategy_is_best_win_rate(self, repo):
        profile = repo.load_team_profile("t1")
        assert profile.strategy.id == "s2"
        assert profile.core_heroes == frozenset({"3", "10"})
        assert len(profile.strategies) == 2

    def test_explicit_strategy_and_global_bans(self, repo):
        profile = repo.load_team_profile("t1", strategy_id="s1", global_bans=["2"])
        assert profile.strategy.core == ("1",)
        assert profile.strategy.avoid == ("4",)
        assert profile.global_bans == frozenset({"2"})


class TestDraftActions:
    def test_append_and_read_back_in_step_order(self, repo):
        repo.append_action("room-1", 1, DraftAction(Side.RED, ActionType.BAN, "2", 0))
        repo.append_action("room-1", 0, DraftAction(Side.BLUE, ActionType.BAN, "1", 0))
        repo.append_action("room-2", 0, DraftAction(Side.BLUE, ActionType.BAN, "4", 0))

        actions = repo.get_draft_actions("room-1")
        assert actions == [
            DraftAction(Side.BLUE, ActionType.BAN, "1", 0),
            DraftAction(Side.RED, ActionType.BAN, "2", 0),
        ]

    def test_actions_visible_to_new_repository(self, repo, tmp_path):
        repo.append_action("room-1", 0, DraftAction(Side.BLUE, ActionType.BAN, "1", 0))
        reopened = ReferenceRepository(tmp_path / "csv" / "draft_data.duckdb")
        assert reopened.has_table("draft_actions")
        assert len(reopened.get_draft_actions("room-1")) == 1
