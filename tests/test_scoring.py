"""Tests for scoring module."""

import pytest
import sys
import polars as pl
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from common_objects import Contract, Direction, Doubling, Strain, Vulnerability
from common_objects import InvalidResultError, parse_contract
from scoring import score, score_ns, contract_type, compute_contract_details_and_NSscore


def c(text: str) -> Contract:
    return parse_contract(text)


class TestMadeContracts:
    """Tests for contracts that make."""

    def test_major_game(self):
        """4S= scores the trick score plus the game bonus."""
        assert score(c("4S"), 0, False) == 420
        assert score(c("4S"), 0, True) == 620

    def test_notrump_game_with_overtrick(self):
        assert score(c("3NT"), 1, False) == 430

    def test_small_slam(self):
        assert score(c("6H"), 0, True) == 1430

    @pytest.mark.parametrize("contract, result, vul, expected", [
        ("1NT", 0, False, 90),
        ("2S", 2, False, 170),
        ("3D", 0, True, 110),
        ("5C", 0, False, 400),
        ("6NT", 1, False, 1020),
        ("7NT", 0, True, 2220),
        ("7C", 0, False, 1440),
    ])
    def test_undoubled(self, contract, result, vul, expected):
        assert score(c(contract), result, vul) == expected

    @pytest.mark.parametrize("contract, result, vul, expected", [
        ("1CX", 0, False, 140),     # doubled partscore
        ("2HX", 0, False, 470),     # doubled into game
        ("1CX", 1, True, 340),      # vulnerable doubled overtrick
        ("1NTXX", 0, False, 560),
        ("3NTX", 2, True, 1150),
        ("5CX", 0, False, 550),
        ("4HXX", 1, True, 1480),
        ("2SX", 1, False, 570),     # non-vulnerable doubled overtrick
        ("2SXX", 1, False, 840),
        ("1DXX", 2, False, 630),     # redoubled partscore, 200 per overtrick
    ])
    def test_doubled(self, contract, result, vul, expected):
        assert score(c(contract), result, vul) == expected


class TestUndertricks:
    """Every penalty ladder at 1 to 5 down."""

    @pytest.mark.parametrize("doubling, vul, expected", [
        ("", False, [-50, -100, -150, -200, -250]),
        ("X", False, [-100, -300, -500, -800, -1100]),
        ("XX", False, [-200, -600, -1000, -1600, -2200]),
        ("", True, [-100, -200, -300, -400, -500]),
        ("X", True, [-200, -500, -800, -1100, -1400]),
        ("XX", True, [-400, -1000, -1600, -2200, -2800]),
    ])
    def test_ladder(self, doubling, vul, expected):
        contract = c(f"4S{doubling}")
        assert [score(contract, -n, vul) for n in range(1, 6)] == expected

    def test_one_club_doubled_one_down(self):
        assert score(c("1CX"), -1, False) == -100

    def test_penalty_independent_of_strain_and_level(self):
        assert score(c("1CX"), -3, True) == score(c("6NTX"), -3, True) == -800

    def test_all_thirteen_down(self):
        """7NT doubled vulnerable, no tricks taken."""
        assert score(c("7NTX"), -13, True) == -200 - 300 * 12


class TestInvalidInput:
    """Tests for input validation."""

    def test_impossible_results(self):
        with pytest.raises(InvalidResultError):
            score(c("4S"), 4, False)
        with pytest.raises(InvalidResultError):
            score(c("4S"), -11, False)

    def test_non_contract(self):
        with pytest.raises(TypeError):
            score("4S", 0, False)


class TestContractType:
    def test_types(self):
        assert contract_type(c("2S")) == "PartScore"
        assert contract_type(c("2SX")) == "Game"
        assert contract_type(c("3NT")) == "Game"
        assert contract_type(c("5D")) == "Game"
        assert contract_type(c("4D")) == "PartScore"
        assert contract_type(c("6C")) == "Slam"
        assert contract_type(c("7H")) == "Grand"
        assert contract_type(None) == "AllPass"


class TestNSScore:
    """Tests for NS-centric scoring."""

    def test_ns_declarer(self):
        assert score_ns(c("4S"), 0, Direction.NORTH, Vulnerability.NS) == 620

    def test_ew_declarer_negated(self):
        assert score_ns(c("4S"), 0, Direction.EAST, Vulnerability.EW) == -620
        assert score_ns(c("4S"), -1, Direction.WEST, Vulnerability.NS) == 50

    def test_passed_out(self):
        assert score_ns(None, 0, None, Vulnerability.BOTH) == 0

    def test_missing_declarer(self):
        with pytest.raises(ValueError):
            score_ns(c("4S"), 0, None, Vulnerability.NONE)


class TestFrameScoring:
    """Tests for compute_contract_details_and_NSscore."""

    def test_frame(self):
        df = pl.DataFrame({
            "Board": [1, 2, 3, 4],
            "Contract": ["4S", "3NT", "PASS", "1CX"],
            "Declarer": ["N", "E", None, "S"],
            "Result": ["=", "+1", "0", "-1"],
        })
        out = compute_contract_details_and_NSscore(df)
        # board 2: NS vul, EW not; board 4: both vul
        assert out["ScoreNS"].to_list() == [420, -430, 0, -200]
        assert out["ContractType"].to_list() == ["Game", "Game", "AllPass", "PartScore"]
        assert out["DeclSide"].to_list() == ["NS", "EW", None, "NS"]
        assert out["Result"].to_list() == ["=", "+1", "0", "-1"]

    def test_vulnerability_column_wins(self):
        df = pl.DataFrame({
            "Board": [1],
            "Contract": ["4H"],
            "Declarer": ["W"],
            "Result": [0],
            "Vulnerability": ["Both"],
        })
        out = compute_contract_details_and_NSscore(df)
        assert out["ScoreNS"].to_list() == [-620]
        assert out["Level"].to_list() == [4]
        assert out["Strain"].to_list() == ["H"]
        assert out["Doubling"].to_list() == [""]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
