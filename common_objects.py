import re
from dataclasses import dataclass
from typing import Optional, Dict, List, Union
from enum import Enum, IntEnum
from functools import total_ordering
from line_profiler import LineProfiler

class BridgeScoringError(ValueError):
    """Base class for invalid scoring input."""

class InvalidContractError(BridgeScoringError):
    """Level outside 1-7, or an unrecognized strain/doubling token."""

class InvalidResultError(BridgeScoringError):
    """Result outside the range of tricks that can physically be taken."""

class UndefinedPercentageError(BridgeScoringError):
    """A board with a single result has no field to compare against."""

@total_ordering
class Direction(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    __from_str_map__ = {
        "N": NORTH, "NORTH": NORTH,
        "E": EAST, "EAST": EAST,
        "S": SOUTH, "SOUTH": SOUTH,
        "W": WEST, "WEST": WEST,
    }

    @classmethod
    def from_str(cls, direction_str: str) -> "Direction":
        key: str = direction_str.strip().upper()
        if key not in cls.__from_str_map__:
            raise ValueError(f"Unknown direction '{direction_str}'")
        return Direction(cls.__from_str_map__[key])

    def __lt__(self, other) -> bool:
        return self.value < other.value

    def __repr__(self) -> str:
        return self.name

    def offset(self, offset: int) -> "Direction":
        return Direction((self.value + offset) % 4)

    def next(self) -> "Direction":
        return self.offset(1)

    def partner(self) -> "Direction":
        return self.offset(2)

    def previous(self) -> "Direction":
        return self.offset(3)

    def abbreviation(self) -> str:
        return self.name[0]

    def side(self) -> "Side":
        return Side.from_direction(self)

class Side(Enum):
    NS = "NS"
    EW = "EW"

    @classmethod
    def from_direction(cls, dirn: Direction) -> "Side":
        return Side.NS if (dirn == Direction.NORTH or dirn == Direction.SOUTH) else Side.EW

    def opponents(self) -> "Side":
        return Side.EW if self == Side.NS else Side.NS

    def __str__(self) -> str:
        return self.value

class Vulnerability(Enum):
    NONE = "None"
    NS = "NS"
    EW = "EW"
    BOTH = "Both"

    @classmethod
    def from_str(cls, vul_str: str) -> "Vulnerability":
        try:
            return vulDict[vul_str.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown vulnerability '{vul_str}'") from None

    def is_vulnerable(self, side: Side) -> bool:
        return self == Vulnerability.BOTH or self.value == side.value

    def __str__(self) -> str:
        return self.value

vulDict: Dict[str, Vulnerability] = {
    'Z': Vulnerability.NONE,
    'O': Vulnerability.NONE,
    '-': Vulnerability.NONE,
    'NONE': Vulnerability.NONE,
    'LOVE': Vulnerability.NONE,
    'N': Vulnerability.NS,
    'NS': Vulnerability.NS,
    'E': Vulnerability.EW,
    'EW': Vulnerability.EW,
    'WE': Vulnerability.EW,
    'B': Vulnerability.BOTH,
    'BOTH': Vulnerability.BOTH,
    'ALL': Vulnerability.BOTH
}

# Board 1 first; the cycle repeats every 16 boards
dealVulnerabilities: List[Vulnerability] = [
    Vulnerability.NONE,
    Vulnerability.NS,
    Vulnerability.EW,
    Vulnerability.BOTH,
    Vulnerability.NS,
    Vulnerability.EW,
    Vulnerability.BOTH,
    Vulnerability.NONE,
    Vulnerability.EW,
    Vulnerability.BOTH,
    Vulnerability.NONE,
    Vulnerability.NS,
    Vulnerability.BOTH,
    Vulnerability.NONE,
    Vulnerability.NS,
    Vulnerability.EW
]

def _check_board(board: int) -> None:
    if isinstance(board, bool) or not isinstance(board, int) or board < 1:
        raise ValueError(f"Board number must be a positive integer, got {board!r}")

def board_vulnerability(board: int) -> Vulnerability:
    _check_board(board)
    return dealVulnerabilities[(board - 1) % len(dealVulnerabilities)]

def board_dealer(board: int) -> Direction:
    _check_board(board)
    return Direction((board - 1) % 4)

class Strain(Enum):
    CLUBS       = ("C", 20)
    DIAMONDS    = ("D", 20)
    HEARTS      = ("H", 30)
    SPADES      = ("S", 30)
    NOTRUMP     = ("N", 30)

    __from_str_map__ = {"C": "C", "D": "D", "H": "H", "S": "S", "N": "N", "NT": "N"}

    @classmethod
    def from_str(cls, strain_str: str) -> "Strain":
        key: Optional[str] = cls.__from_str_map__.get(strain_str.strip().upper())
        if key is None:
            raise InvalidContractError(f"Unknown strain '{strain_str}'")
        return next(s for s in cls if s.value[0] == key)

    @property
    def trick_value(self) -> int:
        return self.value[1]

    def abbreviation(self) -> str:
        return self.value[0]

class Doubling(Enum):
    NONE        = ("", 1)
    DOUBLED     = ("X", 2)
    REDOUBLED   = ("XX", 4)

    __from_str_map__ = {"": "", "X": "X", "XX": "XX", "*": "X", "**": "XX"}

    @classmethod
    def from_str(cls, doubling_str: Optional[str]) -> "Doubling":
        key: Optional[str] = cls.__from_str_map__.get((doubling_str or "").strip().upper())
        if key is None:
            raise InvalidContractError(f"Unknown doubling '{doubling_str}'")
        return next(d for d in cls if d.value[0] == key)

    @property
    def multiplier(self) -> int:
        return self.value[1]

    def abbreviation(self) -> str:
        return self.value[0]

@dataclass(frozen=True)
class Contract:
    """A real (not passed-out) contract: level, strain and doubling."""
    level: int
    strain: Strain
    doubling: Doubling = Doubling.NONE

    def __post_init__(self):
        if isinstance(self.level, bool) or not isinstance(self.level, int) or not 1 <= self.level <= 7:
            raise InvalidContractError(f"Contract level must be 1-7, got {self.level!r}")
        if not isinstance(self.strain, Strain):
            raise InvalidContractError(f"Invalid strain {self.strain!r}")
        if not isinstance(self.doubling, Doubling):
            raise InvalidContractError(f"Invalid doubling {self.doubling!r}")

    @property
    def tricks_required(self) -> int:
        return self.level + 6

    def __str__(self) -> str:
        return f"{self.level}{self.strain.abbreviation()}{self.doubling.abbreviation()}"

PASSED_OUT = {"P", "PASS", "AP", "ALLPASS", "PASSED"}
contract_re = re.compile(r'^([1-7])\s*(NT|[CDHSN])\s*(XX|X|\*\*|\*)?$')

def parse_contract(contract_str: Optional[str]) -> Optional[Contract]:
    """
    Parse a contract such as "4S", "3NT", "2DXX" or the spaced "4 S x".
    Returns None for a passed-out board.
    """
    if contract_str is None:
        raise InvalidContractError("Missing contract")
    text: str = contract_str.strip().upper()
    if text.replace(" ", "") in PASSED_OUT:
        return None
    match: Optional[re.Match] = contract_re.match(text)
    if not match:
        raise InvalidContractError(f"Cannot parse contract '{contract_str}'")
    return Contract(int(match.group(1)), Strain.from_str(match.group(2)), Doubling.from_str(match.group(3)))

def result_range(contract: Contract) -> range:
    # Declarer takes between 0 and 13 tricks
    return range(-contract.tricks_required, 13 - contract.tricks_required + 1)

def validate_result(contract: Contract, result: int) -> int:
    if isinstance(result, bool) or not isinstance(result, int):
        raise InvalidResultError(f"Result must be an integer, got {result!r}")
    if result not in result_range(contract):
        raise InvalidResultError(f"Result {result:+d} is impossible for {contract}")
    return result

def parse_result(result: Union[str, int]) -> int:
    """Parse "=", "+1", "-2" (or a plain int) into a signed result."""
    if isinstance(result, int) and not isinstance(result, bool):
        return result
    text: str = str(result).strip()
    if text.upper() in ("=", "MADE"):
        return 0
    if not re.fullmatch(r'[+-]?\d+', text):
        raise InvalidResultError(f"Cannot parse result '{result}'")
    return int(text)

def result_from_tricks(contract: Contract, tricks: int) -> int:
    if not 0 <= tricks <= 13:
        raise InvalidResultError(f"Tricks taken must be 0-13, got {tricks}")
    return tricks - contract.tricks_required

lineProf: LineProfiler = LineProfiler()
