import logging
import cProfile
import pstats
import sys
import polars as pl
from line_profiler import LineProfiler
from pathlib import Path
from argparse import ArgumentParser, Namespace
from configparser import ConfigParser
from dataclasses import dataclass
from typing import Optional, List
from common_objects import Direction, lineProf
from results_report import build_pair_report, write_report, score_session

@dataclass
class ReportConfig:
    """Which pair to report on, and where to write the report."""
    table: Optional[int] = None
    seat: Optional[Direction] = None
    partner: Optional[str] = None
    output: Path = Path("results.csv")

    @classmethod
    def from_config_file(cls, config_path: Path) -> 'ReportConfig':
        """Load configuration from a file. A missing file gives the defaults."""
        config = ConfigParser()
        config.read(config_path)
        table: Optional[int] = config.getint('Player', 'table', fallback=None)
        seat_str: Optional[str] = config.get('Player', 'seat', fallback=None)
        return cls(
            table=table,
            seat=Direction.from_str(seat_str) if seat_str else None,
            partner=config.get('Player', 'partner', fallback=None),
            output=Path(config.get('Paths', 'output', fallback='results.csv'))
        )

    def override(self, args: Namespace) -> 'ReportConfig':
        """Command line values win over the config file."""
        if args.table is not None:
            self.table = args.table
        if args.seat is not None:
            self.seat = Direction.from_str(args.seat)
        if args.partner is not None:
            self.partner = args.partner
        if args.output is not None:
            self.output = Path(args.output)
        return self

    def validate(self) -> None:
        if self.table is None or self.seat is None:
            raise ValueError("Table and seat must be given on the command line or in the config file")
        if not self.partner:
            raise ValueError(f"Partner name for table {self.table} is unknown, provide it with --partner")

def read_results(path: Path) -> pl.DataFrame:
    results = pl.read_csv(path, schema_overrides={"Contract": pl.Utf8, "Declarer": pl.Utf8, "Result": pl.Utf8})
    logging.info(f"Read {results.height} results from {path}")
    return results

def _parse_args(argv: Optional[List[str]] = None) -> Namespace:
    arg_list = ArgumentParser(description="Score a duplicate session and report one pair's matchpoints")
    arg_list.add_argument("results", help="CSV with Board, Table, Contract, Declarer, Result columns")
    arg_list.add_argument("-t", "--table", type=int, help="Table (pair) to report on")
    arg_list.add_argument("-s", "--seat", help="Seat held at that table (N, E, S or W)")
    arg_list.add_argument("--partner", help="Partner's name, overrides the config file")
    arg_list.add_argument("-o", "--output", help="Report CSV to write")
    arg_list.add_argument("-c", "--config", default="config.ini", help="Configuration file")
    arg_list.add_argument("--session", action="store_true", help="Also write the scored session next to the report")
    arg_list.add_argument("--profile", action="store_true", help="Enable performance profiling")
    arg_list.add_argument("-v", "--verbose", action="store_true", help="Log progress messages")
    return arg_list.parse_args(argv)

def _main_impl(lp: LineProfiler, argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        config = ReportConfig.from_config_file(Path(args.config)).override(args)
        config.validate()
        results = read_results(Path(args.results))
        report = build_pair_report(results, config.table, config.seat, config.partner)
        write_report(report, config.output)
        if args.session:
            write_report(score_session(results), config.output.with_name(f"{config.output.stem}_session.csv"))
    except Exception as e:
        logging.error(f"Error during processing: {str(e)}")
        return 1
    return 0

def main() -> None:
    """Entry point for the bridge-matchpoints console script."""
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(levelname)s - %(message)s')
    if '--profile' in sys.argv:
        # Set up profiling
        profiler = cProfile.Profile()
        profiler.enable()
        lineProf.add_function(_main_impl)
        lineProf.add_function(build_pair_report)
        status = lineProf.runcall(_main_impl, lineProf)
        lineProf.print_stats()
        profiler.disable()
        stats = pstats.Stats(profiler)
        stats.strip_dirs().sort_stats('time').print_stats(10)  # Top 10 functions sorted by time
    else:
        status = _main_impl(lineProf)
    sys.exit(status)

if __name__ == "__main__":
    main()
