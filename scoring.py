import polars as pl
from typing import Dict, Optional, Tuple, Any
from common_objects import Contract, Direction, Doubling, Side, Strain, Vulnerability
from common_objects import board_vulnerability, parse_contract, parse_result, validate_result

# Constants
GAME_THRESHOLD = 100
PARTSCORE_BONUS = 50
NT_FIRST_TRICK_BONUS = 10
INSULT_BONUS = 25
GAME_BONUS = {False: 300, True: 500}
SMALL_SLAM_BONUS = {False: 500, True: 750}
GRAND_SLAM_BONUS = {False: 1000, True: 1500}
DOUBLED_OVERTRICK = {False: 50, True: 100}

# Cost per undertrick: (1st, each of 2nd-3rd, each of 4th onwards)
PENALTY_LADDER: Dict[Tuple[bool, Doubling], Tuple[int, int, int]] = {
    (False, Doubling.NONE):         (50, 50, 50),
    (False, Doubling.DOUBLED):      (100, 200, 300),
    (False, Doubling.REDOUBLED):    (200, 400, 600),
    (True, Doubling.NONE):          (100, 100, 100),
    (True, Doubling.DOUBLED):       (200, 300, 300),
    (True, Doubling.REDOUBLED):     (400, 600, 600),
}

def compute_basic_trick_score(contract: Contract) -> int:
    """
    Compute the basic trick score (bid level * denomination value + NT bonus) * premium
    """
    mult: int = contract.doubling.multiplier
    trick_score: int = contract.level * contract.strain.trick_value * mult
    if contract.strain == Strain.NOTRUMP:
        trick_score += NT_FIRST_TRICK_BONUS * mult
    return trick_score

def compute_game_bonus(contract: Contract, vulnerable: bool) -> int:
    """
    Compute the game/part-game bonus, including the bonus for making a doubled contract
    """
    bonus: int = GAME_BONUS[vulnerable] if compute_basic_trick_score(contract) >= GAME_THRESHOLD else PARTSCORE_BONUS
    if contract.doubling != Doubling.NONE:
        bonus += INSULT_BONUS * contract.doubling.multiplier
    return bonus

def compute_slam_bonus(contract: Contract, vulnerable: bool) -> int:
    if contract.level == 6:
        return SMALL_SLAM_BONUS[vulnerable]
    if contract.level == 7:
        return GRAND_SLAM_BONUS[vulnerable]
    return 0

def compute_overtrick_bonus(contract: Contract, overtricks: int, vulnerable: bool) -> int:
    if contract.doubling == Doubling.NONE:
        return overtricks * contract.strain.trick_value
    return overtricks * DOUBLED_OVERTRICK[vulnerable] * contract.doubling.multiplier

def compute_penalty_score(contract: Contract, undertricks: int, vulnerable: bool) -> int:
    """
    Compute penalty score for undertricks (returns negative value)
    """
    first, second_third, fourth_on = PENALTY_LADDER[(vulnerable, contract.doubling)]
    penalty: int = first
    penalty += second_third * min(max(undertricks - 1, 0), 2)
    penalty += fourth_on * max(undertricks - 3, 0)
    return -penalty

def score(contract: Contract, result: int, vulnerable: bool) -> int:
    """
    Duplicate score of a contract from the declaring side's perspective.

    Args:
        contract: The contract played
        result: 0 for made exactly, +n overtricks, -n undertricks
        vulnerable: Whether the declaring side is vulnerable

    Raises:
        InvalidContractError, InvalidResultError for impossible input
    """
    if not isinstance(contract, Contract):
        raise TypeError(f"contract must be Contract, got {type(contract)}")
    validate_result(contract, result)
    vulnerable = bool(vulnerable)
    if result < 0:
        return compute_penalty_score(contract, -result, vulnerable)
    return (
        compute_basic_trick_score(contract) +
        compute_overtrick_bonus(contract, result, vulnerable) +
        compute_game_bonus(contract, vulnerable) +
        compute_slam_bonus(contract, vulnerable)
    )

def contract_type(contract: Optional[Contract]) -> str:
    if contract is None:
        return "AllPass"
    if contract.level == 7:
        return "Grand"
    if contract.level == 6:
        return "Slam"
    if compute_basic_trick_score(contract) >= GAME_THRESHOLD:
        return "Game"
    return "PartScore"

def score_ns(contract: Optional[Contract], result: int, declarer: Optional[Direction], vulnerability: Vulnerability) -> int:
    """Score a result from NS's perspective. A passed-out board scores 0."""
    if contract is None:
        return 0
    if declarer is None:
        raise ValueError(f"Contract {contract} has no declarer")
    decl_side: Side = declarer.side()
    declarer_score: int = score(contract, result, vulnerability.is_vulnerable(decl_side))
    return declarer_score if decl_side == Side.NS else -declarer_score

SCORED_SCHEMA = pl.Struct({
    "Level": pl.Int64,
    "Strain": pl.Utf8,
    "Doubling": pl.Utf8,
    "ContractType": pl.Utf8,
    "DeclSide": pl.Utf8,
    "ScoreNS": pl.Int64,
})

def _score_row(row: Dict[str, Any]) -> Dict[str, Any]:
    contract: Optional[Contract] = parse_contract(row["Contract"])
    vul_str: Optional[str] = row.get("Vulnerability")
    vulnerability: Vulnerability = Vulnerability.from_str(vul_str) if vul_str else board_vulnerability(row["Board"])
    if contract is None:
        return {"Level": None, "Strain": None, "Doubling": None,
                "ContractType": contract_type(None), "DeclSide": None, "ScoreNS": 0}
    declarer: Direction = Direction.from_str(row["Declarer"] or "")
    return {
        "Level": contract.level,
        "Strain": contract.strain.abbreviation(),
        "Doubling": contract.doubling.abbreviation(),
        "ContractType": contract_type(contract),
        "DeclSide": str(declarer.side()),
        "ScoreNS": score_ns(contract, parse_result(row["Result"]), declarer, vulnerability),
    }

def compute_contract_details_and_NSscore(df: pl.DataFrame) -> pl.DataFrame:
    """
    Compute NS score and contract details from Board, Contract, Declarer and Result columns.
    Uses the Vulnerability column when present, otherwise the board number cycle.
    Raises the first scoring error met, so callers should drop bad rows beforehand.
    """
    cols = [pl.col("Board"), pl.col("Contract"), pl.col("Declarer"), pl.col("Result").cast(pl.Utf8)]
    if "Vulnerability" in df.columns:
        cols.append(pl.col("Vulnerability"))
    return df.with_columns(
        pl.struct(cols).map_elements(_score_row, return_dtype=SCORED_SCHEMA).alias("_Scored")
    ).unnest("_Scored")
