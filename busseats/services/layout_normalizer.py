"""Bring any stored seat layout into the canonical left/right shape.

Stored layouts come in three forms: the canonical side/level structure the
builder writes, the older lowerDeck/upperDeck structure keyed by
row/column, or nothing at all. :func:`resolve` decides which one a raw
document is, once, and :func:`normalize` turns the result into a
:class:`Layout`, synthesizing a plain layout from the seat count when
nothing is stored.

Stored documents are read one seat at a time. A malformed seat is repaired
or skipped on its own and never costs the rest of the layout.
"""
import logging
import math
from typing import Any, List, Optional, Set, Tuple, Union

from pydantic import ValidationError

from busseats.schemas.layout import (
    SEAT_TYPES,
    Layout,
    LayoutShape,
    LegacyDeck,
    LegacyLayout,
    Seat,
    SeatPosition,
    SideGroup,
    lenient_int,
    seat_number_or_none,
)
from busseats.services.layout_generator import SLEEPER_CLASSES

logger = logging.getLogger(__name__)

# Legacy sleeper decks put two seats right of the aisle (columns 1-2) and one
# seat left of it (column 3). Unlisted columns fall on the right.
LEGACY_COLUMN_SIDES = {1: "right", 2: "right", 3: "left"}
LEGACY_DEFAULT_SIDE = "right"
LEGACY_DEFAULT_ROWS = 10

# seats per row in a synthesized layout: (left, right)
FALLBACK_SLEEPER_SPLIT = (1, 2)
FALLBACK_SEATER_SPLIT = (2, 2)

CANONICAL_SIDES = ("left", "right")
CANONICAL_LEVELS = ("upper", "lower")

ResolvedLayout = Union[Layout, LegacyLayout, None]


def _group_entries(raw: dict, side: str, level: str) -> list:
    entries = raw[side].get(level)
    return entries if isinstance(entries, list) else []


def _has_canonical_keys(raw: Any) -> bool:
    return isinstance(raw, dict) and isinstance(raw.get("left"), dict) and isinstance(raw.get("right"), dict)


def has_canonical_seats(raw: Any) -> bool:
    """True for a stored document in the left/right shape listing at least one seat entry."""
    if not _has_canonical_keys(raw):
        return False
    return any(_group_entries(raw, side, level) for side in CANONICAL_SIDES for level in CANONICAL_LEVELS)


def _positive_or_one(value: Optional[int]) -> int:
    return value if value and value > 0 else 1


def _canonical_seat(entry: Any, side: str, level: str) -> Optional[Seat]:
    try:
        return Seat.model_validate(entry)
    except ValidationError as exc:
        problems = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]

    number = seat_number_or_none(entry.get("seatNumber")) if isinstance(entry, dict) else None
    if number is None:
        logger.warning("Skipping %s %s seat without a seat number", side, level)
        return None

    seat_type = entry.get("seatType")
    position = entry.get("position") if isinstance(entry.get("position"), dict) else {}
    logger.warning("Repairing stored seat %s (invalid: %s)", number, ", ".join(problems))
    return Seat(
        seat_number=number,
        seat_type=seat_type if seat_type in SEAT_TYPES else level,
        position=SeatPosition(
            row=_positive_or_one(lenient_int(position.get("row"))),
            side=side,
            level=level,
            seat=_positive_or_one(lenient_int(position.get("seat"))),
        ),
    )


def _parse_canonical(raw: dict) -> Optional[Layout]:
    """Read a left/right document seat by seat; None when it has no rows or no seats."""
    total_rows = lenient_int(raw.get("totalRows"))
    if not total_rows or total_rows <= 0:
        return None

    groups = {}
    for side in CANONICAL_SIDES:
        for level in CANONICAL_LEVELS:
            seats = (_canonical_seat(entry, side, level) for entry in _group_entries(raw, side, level))
            groups[side, level] = [seat for seat in seats if seat is not None]

    layout = Layout(
        left=SideGroup(upper=groups["left", "upper"], lower=groups["left", "lower"]),
        right=SideGroup(upper=groups["right", "upper"], lower=groups["right", "lower"]),
        total_rows=total_rows,
    )
    return layout if layout.count_seats() > 0 else None


def resolve(raw: Any) -> ResolvedLayout:
    """Classify a stored layout document as canonical, legacy or absent."""
    if raw is None:
        return None
    if isinstance(raw, Layout):
        return raw if raw.total_rows > 0 and raw.count_seats() > 0 else None
    if isinstance(raw, LegacyLayout):
        return raw if raw.has_seats() else None
    if not isinstance(raw, dict):
        logger.warning("Ignoring seat layout of unexpected type %s", type(raw).__name__)
        return None

    if _has_canonical_keys(raw):
        layout = _parse_canonical(raw)
        if layout is not None:
            return layout

    if raw.get("lowerDeck") or raw.get("upperDeck"):
        legacy = LegacyLayout.model_validate(raw)
        if legacy.has_seats():
            return legacy
    return None


def legacy_side(column: int) -> str:
    return LEGACY_COLUMN_SIDES.get(column, LEGACY_DEFAULT_SIDE)


def _convert_deck(deck: Optional[LegacyDeck], level: str, left: List[Seat], right: List[Seat], seen: Set[str]):
    if deck is None:
        return
    for legacy_seat in deck.seats:
        if legacy_seat is None or not legacy_seat.seat_number:
            logger.warning("Skipping legacy %s deck seat without a seat number", level)
            continue
        if legacy_seat.seat_number in seen:
            logger.warning("Skipping duplicate legacy seat %s", legacy_seat.seat_number)
            continue
        seen.add(legacy_seat.seat_number)
        position = legacy_seat.position
        if position is None:
            logger.warning("Legacy seat %s has no position, placing it at row 1 column 1", legacy_seat.seat_number)
        row = _positive_or_one(position.row if position else None)
        column = _positive_or_one(position.column if position else None)
        side = legacy_side(column)
        is_left = side == "left"
        seat = Seat(
            seat_number=legacy_seat.seat_number,
            seat_type=level,
            position=SeatPosition(row=row, side=side, level=level, seat=1 if is_left else column),
        )
        (left if is_left else right).append(seat)


def convert_legacy(legacy: LegacyLayout) -> Layout:
    left_upper, left_lower, right_upper, right_lower = [], [], [], []
    seen: Set[str] = set()
    _convert_deck(legacy.lower_deck, "lower", left_lower, right_lower, seen)
    _convert_deck(legacy.upper_deck, "upper", left_upper, right_upper, seen)

    deck_rows = [deck.rows for deck in (legacy.lower_deck, legacy.upper_deck) if deck is not None]
    total_rows = next((rows for rows in deck_rows if rows and rows > 0), LEGACY_DEFAULT_ROWS)
    return Layout(
        left=SideGroup(upper=left_upper, lower=left_lower),
        right=SideGroup(upper=right_upper, lower=right_lower),
        total_rows=total_rows,
    )


def synthesize_fallback(total_seats: Optional[int], seat_type_hint: Optional[str] = None) -> Optional[Layout]:
    """Lay out ``S1..Sn`` when no stored layout exists.

    Seats fill each row right side first, then left, and stop exactly at
    ``total_seats``. Everything is placed on the lower level since berth
    placement cannot be inferred from a bare count.
    """
    if not total_seats or total_seats <= 0:
        return None

    left_count, right_count = FALLBACK_SLEEPER_SPLIT if seat_type_hint in SLEEPER_CLASSES else FALLBACK_SEATER_SPLIT
    rows = math.ceil(total_seats / (left_count + right_count))

    left, right = [], []
    next_number = 1
    for row in range(1, rows + 1):
        for side, count, bucket in (("right", right_count, right), ("left", left_count, left)):
            for index in range(1, count + 1):
                if next_number > total_seats:
                    break
                bucket.append(
                    Seat(
                        seat_number=f"S{next_number}",
                        seat_type="single",
                        position=SeatPosition(row=row, side=side, level="lower", seat=index),
                    )
                )
                next_number += 1

    return Layout(left=SideGroup(lower=left), right=SideGroup(lower=right), total_rows=rows)


def normalize_with_shape(
    raw: Any,
    total_seats: Optional[int] = None,
    seat_type_hint: Optional[str] = None,
) -> Tuple[Optional[Layout], LayoutShape]:
    resolved = resolve(raw)
    if isinstance(resolved, Layout):
        return resolved, LayoutShape.CANONICAL
    if isinstance(resolved, LegacyLayout):
        logger.debug("Converting legacy deck layout")
        return convert_legacy(resolved), LayoutShape.LEGACY

    fallback = synthesize_fallback(total_seats, seat_type_hint)
    if fallback is not None:
        logger.debug("No stored layout, synthesized %s seats (%s)", total_seats, seat_type_hint)
        return fallback, LayoutShape.FALLBACK
    return None, LayoutShape.NONE


def normalize(raw: Any, total_seats: Optional[int] = None, seat_type_hint: Optional[str] = None) -> Optional[Layout]:
    layout, _ = normalize_with_shape(raw, total_seats, seat_type_hint)
    return layout


def seat_type_from_number(seat_number: str) -> str:
    """Berth class as older displays infer it from the seat number."""
    if seat_number.startswith("U"):
        return "upper"
    if seat_number.startswith("L"):
        return "lower"
    return "seater"
