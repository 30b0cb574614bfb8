import logging
from typing import Callable, Collection, Dict, List, NamedTuple, Optional, Sequence, Tuple

from busseats.schemas.layout import Layout, SeatStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEATS_PER_BOOKING = 6

StatusPredicate = Callable[[str, Collection[str], Collection[str], Collection[str]], bool]

# Evaluated top-down, first match wins. Booked and locked come from the
# reservation backend and always override a local selection.
STATUS_RULES: Tuple[Tuple[StatusPredicate, SeatStatus], ...] = (
    (lambda seat, booked, locked, selected: seat in booked, SeatStatus.BOOKED),
    (lambda seat, booked, locked, selected: seat in locked, SeatStatus.LOCKED),
    (lambda seat, booked, locked, selected: seat in selected, SeatStatus.SELECTED),
)

UNAVAILABLE = (SeatStatus.BOOKED, SeatStatus.LOCKED)


def derive_status(
    seat_number: str,
    booked_seats: Collection[str] = (),
    locked_seats: Collection[str] = (),
    selected_seats: Collection[str] = (),
) -> SeatStatus:
    for predicate, status in STATUS_RULES:
        if predicate(seat_number, booked_seats, locked_seats, selected_seats):
            return status
    return SeatStatus.AVAILABLE


def apply_toggle(
    seat_number: str,
    selected_seats: Sequence[str],
    max_seats: int,
    booked_seats: Collection[str] = (),
    locked_seats: Collection[str] = (),
) -> Tuple[List[str], str]:
    """Toggle ``seat_number`` and say what happened.

    The outcome is one of ``selected``, ``deselected``, ``unavailable`` or
    ``full``; the last two leave the selection unchanged.
    """
    status = derive_status(seat_number, booked_seats, locked_seats, selected_seats)
    if status in UNAVAILABLE:
        return list(selected_seats), "unavailable"
    if status == SeatStatus.SELECTED:
        return [s for s in selected_seats if s != seat_number], "deselected"
    if len(selected_seats) >= max_seats:
        return list(selected_seats), "full"
    return [*selected_seats, seat_number], "selected"


def toggle(
    seat_number: str,
    selected_seats: Sequence[str],
    max_seats: int,
    booked_seats: Collection[str] = (),
    locked_seats: Collection[str] = (),
) -> List[str]:
    """Return the selection after a rider taps ``seat_number``.

    Booked or locked seats never change, deselecting is always allowed and
    a full selection rejects additions. A rejected toggle returns an
    unchanged copy; the input list is never mutated.
    """
    updated, _ = apply_toggle(seat_number, selected_seats, max_seats, booked_seats, locked_seats)
    return updated


def seat_statuses(
    layout: Optional[Layout],
    booked_seats: Collection[str] = (),
    locked_seats: Collection[str] = (),
    selected_seats: Collection[str] = (),
) -> Dict[str, SeatStatus]:
    if layout is None:
        return {}
    booked, locked, selected = set(booked_seats), set(locked_seats), set(selected_seats)
    return {number: derive_status(number, booked, locked, selected) for number in layout.seat_numbers()}


class SelectionCheck(NamedTuple):
    is_valid: bool
    message: str


def validate_selection(
    layout: Optional[Layout],
    selected_seats: Sequence[str],
    booked_seats: Collection[str] = (),
    locked_seats: Collection[str] = (),
    max_seats: int = DEFAULT_MAX_SEATS_PER_BOOKING,
) -> SelectionCheck:
    """Check a finished selection before it is submitted for booking."""
    if not selected_seats:
        return SelectionCheck(False, "No seats selected")

    known = set(layout.seat_numbers()) if layout is not None else set()
    invalid = [s for s in selected_seats if s not in known]
    if invalid:
        return SelectionCheck(False, f"Invalid seats: {', '.join(invalid)}")

    already_booked = [s for s in selected_seats if s in booked_seats]
    if already_booked:
        return SelectionCheck(False, f"Seats already booked: {', '.join(already_booked)}")

    locked = [s for s in selected_seats if s in locked_seats]
    if locked:
        return SelectionCheck(False, f"Seats currently unavailable: {', '.join(locked)}")

    if len(selected_seats) > max_seats:
        return SelectionCheck(False, f"Cannot book more than {max_seats} seats at once")

    return SelectionCheck(True, "Seat selection is valid")


class SeatSelection:
    """A rider's in-progress seat pick for one trip.

    ``booked`` and ``locked`` belong to the reservation backend and are
    swapped in wholesale through :meth:`refresh`. The selection itself
    belongs to the booking flow, which can overwrite it at any time with
    :meth:`reset`. ``on_change`` receives the full selection after every
    accepted toggle.
    """

    def __init__(
        self,
        layout: Optional[Layout],
        booked_seats: Collection[str] = (),
        locked_seats: Collection[str] = (),
        selected_seats: Sequence[str] = (),
        max_seats: int = 5,
        on_change: Optional[Callable[[List[str]], None]] = None,
    ):
        self.layout = layout
        self.booked_seats = frozenset(booked_seats)
        self.locked_seats = frozenset(locked_seats)
        self.selected_seats: List[str] = list(selected_seats)
        self.max_seats = max_seats
        self.on_change = on_change

    def reset(self, selected_seats: Sequence[str]):
        self.selected_seats = list(selected_seats)

    def refresh(self, booked_seats: Collection[str], locked_seats: Collection[str]):
        self.booked_seats = frozenset(booked_seats)
        self.locked_seats = frozenset(locked_seats)

    def status(self, seat_number: str) -> SeatStatus:
        return derive_status(seat_number, self.booked_seats, self.locked_seats, self.selected_seats)

    def statuses(self) -> Dict[str, SeatStatus]:
        return seat_statuses(self.layout, self.booked_seats, self.locked_seats, self.selected_seats)

    def available_count(self) -> int:
        return sum(1 for status in self.statuses().values() if status == SeatStatus.AVAILABLE)

    def toggle(self, seat_number: str) -> bool:
        """Toggle a seat; returns True when the selection changed."""
        updated, outcome = apply_toggle(
            seat_number, self.selected_seats, self.max_seats, self.booked_seats, self.locked_seats
        )
        if outcome in ("unavailable", "full"):
            logger.debug("Toggle of seat %s rejected: %s", seat_number, outcome)
            return False
        self.selected_seats = updated
        if self.on_change:
            self.on_change(list(updated))
        return True
