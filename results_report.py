import logging
import polars as pl
from pathlib import Path
from typing import List, Dict, Any, Optional
from common_objects import Contract, Direction, Side, Vulnerability, BridgeScoringError
from common_objects import board_vulnerability, parse_contract, parse_result, validate_result
from scoring import compute_contract_details_and_NSscore
from matchpoints import rank_results
from perspective import adjust_perspective, my_score_from_ns, side_of, vulnerability_label

REQUIRED_COLUMNS: List[str] = ["Board", "Table", "Contract", "Declarer", "Result"]
REPORT_SCHEMA: Dict[str, Any] = {
    "Board": pl.Int64, "Dir": pl.Utf8, "Contract": pl.Utf8, "Score": pl.Int64,
    "% vs Field": pl.Float64, "% vs Club": pl.Float64, "Leader": pl.Utf8,
    "Declarer": pl.Utf8, "Vul": pl.Utf8,
}
REPORT_COLUMNS: List[str] = list(REPORT_SCHEMA)

def _row_error(row: Dict[str, Any]) -> Optional[str]:
    """Describe why a result row cannot be scored, or None if it can."""
    try:
        board = row["Board"]
        if board is None or not str(board).strip().isdigit():
            return f"bad board number {board!r}"
        board_vulnerability(int(str(board).strip()))
        contract: Optional[Contract] = parse_contract(row["Contract"])
        if contract is None:
            return None
        Direction.from_str(row["Declarer"] or "")
        validate_result(contract, parse_result(row["Result"]))
        if row.get("Vulnerability"):
            Vulnerability.from_str(row["Vulnerability"])
    except (BridgeScoringError, ValueError, TypeError) as e:
        return str(e)
    return None

def drop_invalid_results(df: pl.DataFrame) -> pl.DataFrame:
    """Log and remove rows whose contract, declarer or result cannot be scored."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Results are missing columns {missing}")
    if df.is_empty():
        return df
    cols = [pl.col(c) for c in ["Board", "Contract", "Declarer"]] + [pl.col("Result").cast(pl.Utf8)]
    if "Vulnerability" in df.columns:
        cols.append(pl.col("Vulnerability"))
    checked = df.with_columns(
        pl.struct(cols).map_elements(_row_error, return_dtype=pl.Utf8).alias("_Error")
    )
    bad = checked.filter(pl.col("_Error").is_not_null())
    for row in bad.iter_rows(named=True):
        logging.warning(f"Skipping board {row['Board']} table {row['Table']}: {row['_Error']}")
    return checked.filter(pl.col("_Error").is_null()).drop("_Error").with_columns(
        pl.col("Board").cast(pl.Utf8).str.strip_chars().cast(pl.Int64)
    )

def score_session(results: pl.DataFrame) -> pl.DataFrame:
    """Score every valid result and matchpoint each board."""
    valid = drop_invalid_results(results)
    if valid.is_empty():
        logging.warning("No scorable results")
    scored = compute_contract_details_and_NSscore(valid) if not valid.is_empty() else valid.with_columns(
        pl.lit(None, dtype=pl.Int64).alias("ScoreNS"))
    return rank_results(scored)

def _report_row(row: Dict[str, Any], my_seat: Direction, partner_name: str) -> Dict[str, Any]:
    board: int = int(row["Board"])
    vul_str: Optional[str] = row.get("Vulnerability")
    vul: Vulnerability = Vulnerability.from_str(vul_str) if vul_str else board_vulnerability(board)
    my_side = side_of(my_seat)
    contract: Optional[Contract] = parse_contract(row["Contract"])
    field_pct: Optional[float] = row["PercentNS"] if my_side == Side.NS else row["PercentEW"]
    club_pct: Optional[float] = row.get("ClubPct")

    report: Dict[str, Any] = {
        "Board": board,
        "Dir": str(my_side),
        "Contract": str(contract) if contract else "PASS",
        "Score": my_score_from_ns(row["ScoreNS"], my_seat),
        "% vs Field": field_pct,
        "% vs Club": club_pct if club_pct is not None else field_pct,
        "Leader": "",
        "Declarer": "",
        "Vul": vulnerability_label(vul, my_side),
    }
    if contract is not None:
        view = adjust_perspective(vul, Direction.from_str(row["Declarer"]), my_seat, my_seat.partner(), partner_name)
        report["Leader"] = view.leader_label
        report["Declarer"] = view.declarer_label
    return report

def build_pair_report(results: pl.DataFrame, table: int, my_seat: Direction, partner_name: str) -> pl.DataFrame:
    """
    One row per board played at the given table, seen from my_seat.

    Args:
        results: Board, Table, Contract, Declarer, Result (+ optional Vulnerability, ClubPct)
            for every table in the session
        table: The table whose results are reported
        my_seat: Seat held at that table
        partner_name: Partner's name, first name is used in labels
    """
    ranked: pl.DataFrame = score_session(results)
    mine: pl.DataFrame = ranked.filter(pl.col("Table") == table).sort("Board")
    if mine.is_empty():
        logging.warning(f"No results found for table {table}")
        return pl.DataFrame(schema=REPORT_SCHEMA)
    if mine.height != mine.select("Board").n_unique():
        logging.warning(f"Table {table} has repeated boards, keeping the first result of each")
        mine = mine.unique(subset="Board", keep="first", maintain_order=True)

    rows: List[Dict[str, Any]] = [_report_row(row, my_seat, partner_name) for row in mine.iter_rows(named=True)]
    logging.info(f"Built report for {len(rows)} boards at table {table}")
    return pl.DataFrame(rows, schema=REPORT_SCHEMA)

def write_report(report: pl.DataFrame, path: Path) -> None:
    report.write_csv(path)
    logging.warning(f"Wrote {path}")
