"""Tests for matchup calculator."""
import pytest

from rov_draft.models import Matchup
from rov_draft.services.scorers.matchup_calculator import MatchupCalculator


@pytest.fixture
def calculator():
    return MatchupCalculator(
        [
            Matchup("zata", "liliana", 56.0),
            Matchup("nakroth", "zata", 47.5),
        ]
    )


def test_direct_lookup(calculator):
    result = calculator.get_matchup("zata", "liliana")
    assert result == {"win_rate": 56.0, "data_source": "direct_lookup"}


def test_reverse_lookup_inverts(calculator):
    """Reverse lookup returns the complementary win rate."""
    result = calculator.get_matchup("liliana", "zata")
    assert result["win_rate"] == 44.0
    assert result["data_source"] == "reverse_lookup"


def test_missing_pair_has_no_data(calculator):
    result = calculator.get_matchup("zata", "yorn")
    assert result["win_rate"] is None
    assert result["data_source"] == "none"
    assert calculator.win_rate("zata", "yorn") is None


def test_counters_of_lists_only_favourable_matchups(calculator):
    counters = calculator.counters_of("zata", ["liliana", "nakroth", "yorn"])
    assert counters == [("liliana", 6.0), ("nakroth", 2.5)]


def test_counters_of_ignores_even_matchups():
    calculator = MatchupCalculator([Matchup("a", "b", 50.0)])
    assert calculator.counters_of("a", ["b"]) == []
    assert calculator.counters_of("b", ["a"]) == []
