from enum import Enum
from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator


Side = Literal["left", "right"]
Level = Literal["upper", "lower"]
SeatType = Literal["upper", "lower", "single"]
SEAT_TYPES = get_args(SeatType)

_INT = TypeAdapter(int)


class SeatStatus(str, Enum):
    BOOKED = "booked"
    LOCKED = "locked"
    SELECTED = "selected"
    AVAILABLE = "available"


class LayoutShape(str, Enum):
    CANONICAL = "canonical"
    LEGACY = "legacy"
    FALLBACK = "fallback"
    NONE = "none"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SeatPosition(_CamelModel):
    row: int = Field(..., ge=1)
    side: Side
    level: Level
    seat: int = Field(..., ge=1)


class Seat(_CamelModel):
    seat_number: str = Field(..., alias="seatNumber")
    seat_type: SeatType = Field(..., alias="seatType")
    position: SeatPosition


class SideGroup(_CamelModel):
    upper: List[Seat] = Field(default_factory=list)
    lower: List[Seat] = Field(default_factory=list)


class RowSeats(_CamelModel):
    upper: List[Seat] = Field(default_factory=list)
    lower: List[Seat] = Field(default_factory=list)


class Layout(_CamelModel):
    """Canonical side/level keyed seat map of a vehicle."""

    left: SideGroup = Field(default_factory=SideGroup)
    right: SideGroup = Field(default_factory=SideGroup)
    total_rows: int = Field(0, alias="totalRows", ge=0)

    def all_seats(self) -> List[Seat]:
        return [*self.left.upper, *self.left.lower, *self.right.upper, *self.right.lower]

    def seat_numbers(self) -> List[str]:
        return [s.seat_number for s in self.all_seats()]

    def count_seats(self) -> int:
        return len(self.all_seats())

    def find_seat(self, seat_number: str) -> Optional[Seat]:
        for seat in self.all_seats():
            if seat.seat_number == seat_number:
                return seat
        return None

    def rows_for(self, side: Side) -> Dict[int, RowSeats]:
        """Group one side's seats by row, upper above lower.

        Rows without any seat on that side are left out, so a renderer can
        walk ``range(1, total_rows + 1)`` and skip the gaps.
        """
        group = self.left if side == "left" else self.right
        rows: Dict[int, RowSeats] = {}
        for seat in group.upper:
            rows.setdefault(seat.position.row, RowSeats()).upper.append(seat)
        for seat in group.lower:
            rows.setdefault(seat.position.row, RowSeats()).lower.append(seat)
        return dict(sorted(rows.items()))

    def to_document(self) -> dict:
        """Serialize with the camelCase keys used in stored seat maps."""
        return self.model_dump(by_alias=True)


class LayoutConfig(_CamelModel):
    """Generator input: a row count and seats per row for each side/level group."""

    rows: int
    left_upper_seats: int = Field(0, alias="leftUpperSeats")
    left_lower_seats: int = Field(0, alias="leftLowerSeats")
    right_upper_seats: int = Field(0, alias="rightUpperSeats")
    right_lower_seats: int = Field(0, alias="rightLowerSeats")

    @property
    def seats_per_row(self) -> int:
        return self.left_upper_seats + self.left_lower_seats + self.right_upper_seats + self.right_lower_seats

    @property
    def configured_total(self) -> int:
        return self.rows * self.seats_per_row


def lenient_int(value: Any) -> Optional[int]:
    """``value`` as an int when pydantic can read it as one, else None."""
    if isinstance(value, bool):
        return None
    try:
        return _INT.validate_python(value)
    except ValidationError:
        return None


def seat_number_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value or None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


class LegacyPosition(_CamelModel):
    row: Optional[int] = None
    column: Optional[int] = None

    @field_validator("row", "column", mode="before")
    @classmethod
    def _int_or_none(cls, value):
        return lenient_int(value)


class LegacySeat(_CamelModel):
    seat_number: Optional[str] = Field(None, alias="seatNumber")
    seat_type: Optional[str] = Field(None, alias="seatType")
    position: Optional[LegacyPosition] = None

    @field_validator("seat_number", mode="before")
    @classmethod
    def _number_or_none(cls, value):
        return seat_number_or_none(value)

    @field_validator("seat_type", mode="before")
    @classmethod
    def _type_or_none(cls, value):
        return value if isinstance(value, str) else None

    @field_validator("position", mode="before")
    @classmethod
    def _position_or_none(cls, value):
        return value if isinstance(value, dict) else None


class LegacyDeck(_CamelModel):
    """One deck of the older structure.

    Stored decks are read leniently: unreadable counts become None and seat
    entries that are not objects become None, so one bad record never
    invalidates the deck.
    """

    rows: Optional[int] = None
    seats_per_row: Optional[int] = Field(None, alias="seatsPerRow")
    seats: List[Optional[LegacySeat]] = Field(default_factory=list)

    @field_validator("rows", "seats_per_row", mode="before")
    @classmethod
    def _count_or_none(cls, value):
        return lenient_int(value)

    @field_validator("seats", mode="before")
    @classmethod
    def _seat_entries(cls, value):
        if not isinstance(value, list):
            return []
        return [entry if isinstance(entry, dict) else None for entry in value]


class LegacyLayout(_CamelModel):
    """Older row/column deck structure; side is implied by the column."""

    lower_deck: Optional[LegacyDeck] = Field(None, alias="lowerDeck")
    upper_deck: Optional[LegacyDeck] = Field(None, alias="upperDeck")

    @field_validator("lower_deck", "upper_deck", mode="before")
    @classmethod
    def _deck_or_none(cls, value):
        return value if isinstance(value, dict) else None

    def has_seats(self) -> bool:
        return any(
            seat is not None and seat.seat_number
            for deck in (self.lower_deck, self.upper_deck)
            if deck is not None
            for seat in deck.seats
        )
