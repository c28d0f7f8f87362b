import bisect
import logging
import polars as pl
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Hashable, List, Mapping, Optional
from common_objects import UndefinedPercentageError

def percentage_of(matchpoints: float, top: int) -> Optional[float]:
    """
    Matchpoints as a percentage of top, rounded half-up to one decimal.
    Returns None when there is no field (top == 0).
    """
    if top <= 0:
        return None
    pct: Decimal = Decimal(str(matchpoints)) * 100 / Decimal(top)
    return float(pct.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

@dataclass(frozen=True)
class MatchpointOutcome:
    """Matchpoints earned by one result on a board, out of top."""
    matchpoints: float
    top: int
    percentage: Optional[float]

    @property
    def has_field(self) -> bool:
        return self.top > 0

    def require_percentage(self) -> float:
        if self.percentage is None:
            raise UndefinedPercentageError("Only one result on this board, no comparison available")
        return self.percentage

    def for_opponents(self) -> "MatchpointOutcome":
        """The same comparison seen from the other side of the table."""
        mp: float = self.top - self.matchpoints
        return MatchpointOutcome(mp, self.top, percentage_of(mp, self.top))

def rank_board(scores: Mapping[Hashable, int]) -> Dict[Hashable, MatchpointOutcome]:
    """
    Matchpoint every result on one board.

    Args:
        scores: identity -> score, all from the same side (normally NS)

    Returns:
        identity -> MatchpointOutcome. Ties share the average; an empty board gives {}.
    """
    if not scores:
        return {}
    values: List[int] = list(scores.values())
    ordered: List[int] = sorted(values)
    counts: Counter = Counter(values)
    top: int = len(values) - 1

    outcomes: Dict[Hashable, MatchpointOutcome] = {}
    for identity, s in scores.items():
        equal_adj: float = 0.5 * (counts[s] - 1)
        greater: int = len(ordered) - bisect.bisect_right(ordered, s)
        mp: float = top - equal_adj - greater
        outcomes[identity] = MatchpointOutcome(mp, top, percentage_of(mp, top))
    return outcomes

def check_matchpoint_total(outcomes: Mapping[Hashable, MatchpointOutcome]) -> bool:
    """Every pairwise comparison hands out exactly one matchpoint: total is N(N+1)/2."""
    if not outcomes:
        return True
    top: int = len(outcomes) - 1
    return sum(o.matchpoints for o in outcomes.values()) == top * (top + 1) / 2

def rank_boards(boards: Mapping[Hashable, Mapping[Hashable, int]], parallelize: bool = False) -> Dict[Hashable, Dict[Hashable, MatchpointOutcome]]:
    """Rank several independent boards, optionally in a thread pool."""
    if parallelize:
        with ThreadPoolExecutor() as executor:
            futures = {board: executor.submit(rank_board, scores) for board, scores in boards.items()}
            ranked = {board: future.result() for board, future in futures.items()}
    else:
        ranked = {board: rank_board(scores) for board, scores in boards.items()}
    for board, outcomes in ranked.items():
        if len(outcomes) == 1:
            logging.info(f"Board {board} has a single result, no percentage")
    return ranked

def rank_results(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add Top, MatchpointsNS/EW and PercentNS/EW columns, comparing ScoreNS within each Board.
    """
    if df.is_empty():
        return df.with_columns(
            pl.lit(None, dtype=pl.Int64).alias("Top"),
            pl.lit(None, dtype=pl.Float64).alias("MatchpointsNS"),
            pl.lit(None, dtype=pl.Float64).alias("MatchpointsEW"),
            pl.lit(None, dtype=pl.Float64).alias("PercentNS"),
            pl.lit(None, dtype=pl.Float64).alias("PercentEW"),
        )
    # Average rank counts 1 per lower score and 1/2 per other equal score, plus 1 for itself
    df = df.with_columns(
        (pl.col("Board").len().over("Board").cast(pl.Int64) - 1).alias("Top"),
        (pl.col("ScoreNS").rank("average").over("Board").cast(pl.Float64) - 1).alias("MatchpointsNS"),
    ).with_columns(
        (pl.col("Top") - pl.col("MatchpointsNS")).alias("MatchpointsEW")
    )
    return df.with_columns(
        pl.struct(["MatchpointsNS", "Top"])
        .map_elements(lambda x: percentage_of(x["MatchpointsNS"], x["Top"]), return_dtype=pl.Float64)
        .alias("PercentNS"),
        pl.struct(["MatchpointsEW", "Top"])
        .map_elements(lambda x: percentage_of(x["MatchpointsEW"], x["Top"]), return_dtype=pl.Float64)
        .alias("PercentEW"),
    )
