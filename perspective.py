"""
Re-express a board's result from one pair's point of view.

Scores and seats are stored absolutely (declarer's side, NS-centric);
reports are read in first person: "Me", partner's first name, opponents,
and vulnerability as "Us"/"Them".
"""
from dataclasses import dataclass
from typing import Optional
from common_objects import Direction, Side, Vulnerability

ME_LABEL = "Me"
OPPONENTS_LABEL = "Opponents"
DEFENSE_LABEL = "Defense"

def side_of(dirn: Direction) -> Side:
    return Side.from_direction(dirn)

def opening_leader(declarer: Direction) -> Direction:
    """The defender on declarer's left."""
    return declarer.next()

def first_name(name: str) -> str:
    parts = name.split() if name else []
    if not parts:
        raise ValueError("Partner name is blank")
    return parts[0]

def seat_label(dirn: Direction, my_seat: Direction, partner_seat: Direction, partner_name: str) -> str:
    if dirn == my_seat:
        return ME_LABEL
    if dirn == partner_seat:
        return first_name(partner_name)
    return OPPONENTS_LABEL

def declarer_label(declarer: Direction, my_seat: Direction, partner_seat: Direction, partner_name: str) -> str:
    label: str = seat_label(declarer, my_seat, partner_seat, partner_name)
    return DEFENSE_LABEL if label == OPPONENTS_LABEL else label

def vulnerability_label(vul: Vulnerability, my_side: Side) -> str:
    if vul == Vulnerability.NONE:
        return "None"
    if vul == Vulnerability.BOTH:
        return "Both"
    return "Us" if vul.is_vulnerable(my_side) else "Them"

def my_score_from_ns(ns_score: int, my_seat: Direction) -> int:
    return ns_score if side_of(my_seat) == Side.NS else -ns_score

@dataclass(frozen=True)
class PerspectiveView:
    my_side: Side
    my_score_sign: int
    leader_label: str
    declarer_label: str
    vulnerability_label: str
    my_score: Optional[int] = None

def adjust_perspective(board_vulnerability: Vulnerability, declarer: Direction, my_seat: Direction,
                       partner_seat: Direction, partner_name: str,
                       declarer_score: Optional[int] = None) -> PerspectiveView:
    """
    Labels for one board seen from my_seat.

    my_score_sign is +1 when my side declared, -1 when we defended, so that
    my_score = my_score_sign * declarer_score whichever side held the cards.
    """
    if partner_seat != my_seat.partner():
        raise ValueError(f"Partner must sit opposite {my_seat!r}, got {partner_seat!r}")
    my_side: Side = side_of(my_seat)
    sign: int = 1 if side_of(declarer) == my_side else -1
    return PerspectiveView(
        my_side=my_side,
        my_score_sign=sign,
        leader_label=seat_label(opening_leader(declarer), my_seat, partner_seat, partner_name),
        declarer_label=declarer_label(declarer, my_seat, partner_seat, partner_name),
        vulnerability_label=vulnerability_label(board_vulnerability, my_side),
        my_score=None if declarer_score is None else sign * declarer_score,
    )
