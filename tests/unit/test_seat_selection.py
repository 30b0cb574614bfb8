"""
Unit tests for seat status derivation and the rider selection state machine
"""

import random

import pytest

from busseats.schemas.layout import SeatStatus
from busseats.services.layout_normalizer import synthesize_fallback
from busseats.services.seat_selection import (
    STATUS_RULES,
    SeatSelection,
    apply_toggle,
    derive_status,
    seat_statuses,
    toggle,
    validate_selection,
)


@pytest.fixture
def layout():
    return synthesize_fallback(12, "seater")


@pytest.mark.unit
class TestDeriveStatus:
    def test_rule_order_is_booked_locked_selected(self) -> None:
        assert [status for _, status in STATUS_RULES] == [SeatStatus.BOOKED, SeatStatus.LOCKED, SeatStatus.SELECTED]

    @pytest.mark.parametrize(
        "booked,locked,selected,expected",
        [
            (["S1"], [], [], SeatStatus.BOOKED),
            (["S1"], ["S1"], ["S1"], SeatStatus.BOOKED),
            ([], ["S1"], ["S1"], SeatStatus.LOCKED),
            ([], [], ["S1"], SeatStatus.SELECTED),
            (["S2"], ["S3"], ["S4"], SeatStatus.AVAILABLE),
        ],
    )
    def test_precedence(self, booked, locked, selected, expected) -> None:
        assert derive_status("S1", booked, locked, selected) == expected

    def test_stale_selection_of_booked_seat_shows_booked(self) -> None:
        assert derive_status("S1", ["S1"], [], ["S1"]) == SeatStatus.BOOKED

    def test_seat_statuses_cover_every_layout_seat(self, layout) -> None:
        statuses = seat_statuses(layout, booked_seats=["S1"], locked_seats=["S2"], selected_seats=["S3"])

        assert len(statuses) == 12
        assert statuses["S1"] == SeatStatus.BOOKED
        assert statuses["S2"] == SeatStatus.LOCKED
        assert statuses["S3"] == SeatStatus.SELECTED
        assert statuses["S12"] == SeatStatus.AVAILABLE

    def test_seat_statuses_without_layout_is_empty(self) -> None:
        assert seat_statuses(None, ["S1"]) == {}


@pytest.mark.unit
class TestToggle:
    def test_booked_seat_cannot_be_toggled_even_if_selected(self) -> None:
        """
        Given: S1 is booked and still in the rider's stale selection
        When: The rider taps S1
        Then: Nothing changes
        """
        assert toggle("S1", ["S1"], 5, booked_seats=["S1"]) == ["S1"]

    def test_locked_seat_cannot_be_selected(self) -> None:
        assert apply_toggle("S3", [], 5, locked_seats=["S3"]) == ([], "unavailable")

    def test_full_selection_rejects_additions(self) -> None:
        assert apply_toggle("S5", ["S2", "S4"], 2) == (["S2", "S4"], "full")

    def test_deselect_is_allowed_at_capacity(self) -> None:
        assert toggle("S2", ["S2", "S4"], 2) == ["S4"]

    def test_deselect_keeps_relative_order(self) -> None:
        assert toggle("S3", ["S5", "S3", "S1", "S9"], 5) == ["S5", "S1", "S9"]

    def test_new_selection_is_appended(self) -> None:
        assert apply_toggle("S1", ["S7"], 5) == (["S7", "S1"], "selected")

    def test_input_list_is_not_mutated(self) -> None:
        selected = ["S1"]

        toggle("S2", selected, 5)
        toggle("S1", selected, 5)

        assert selected == ["S1"]

    def test_zero_capacity_rejects_everything(self) -> None:
        assert toggle("S1", [], 0) == []

    def test_random_toggle_sequences_never_exceed_capacity(self) -> None:
        rng = random.Random(7)
        seats = [f"S{i}" for i in range(1, 21)]
        booked, locked = {"S1", "S2"}, {"S3"}
        for max_seats in range(0, 6):
            selected = []
            for _ in range(200):
                seat = rng.choice(seats)
                before = list(selected)
                selected = toggle(seat, selected, max_seats, booked, locked)
                assert len(selected) <= max_seats
                assert not (set(selected) & (booked | locked))
                if seat in before:
                    assert selected == [s for s in before if s != seat]


@pytest.mark.unit
class TestSeatSelection:
    def test_accepted_toggles_notify_with_full_selection(self, layout) -> None:
        received = []
        selection = SeatSelection(layout, max_seats=2, on_change=received.append)

        assert selection.toggle("S1")
        assert selection.toggle("S2")
        assert not selection.toggle("S3")
        assert selection.toggle("S1")

        assert received == [["S1"], ["S1", "S2"], ["S2"]]
        assert selection.selected_seats == ["S2"]

    def test_rejected_toggle_does_not_notify(self, layout) -> None:
        received = []
        selection = SeatSelection(layout, booked_seats=["S4"], on_change=received.append)

        assert not selection.toggle("S4")
        assert received == []

    def test_refresh_makes_selected_seat_unavailable(self, layout) -> None:
        selection = SeatSelection(layout, selected_seats=["S5", "S6"], max_seats=4)

        selection.refresh(booked_seats=[], locked_seats=["S5"])

        assert selection.status("S5") == SeatStatus.LOCKED
        assert not selection.toggle("S5")
        assert selection.selected_seats == ["S5", "S6"]

    def test_reset_replaces_selection(self, layout) -> None:
        selection = SeatSelection(layout, selected_seats=["S1"])

        selection.reset(["S7", "S8"])

        assert selection.selected_seats == ["S7", "S8"]
        assert selection.status("S1") == SeatStatus.AVAILABLE

    def test_available_count(self, layout) -> None:
        selection = SeatSelection(layout, booked_seats=["S1"], locked_seats=["S2"], selected_seats=["S3"])

        assert selection.available_count() == 9
        assert selection.statuses()["S3"] == SeatStatus.SELECTED


@pytest.mark.unit
class TestValidateSelection:
    def test_valid_selection(self, layout) -> None:
        check = validate_selection(layout, ["S1", "S2"], booked_seats=["S3"], locked_seats=["S4"])

        assert check.is_valid
        assert check.message == "Seat selection is valid"

    @pytest.mark.parametrize(
        "selected,message",
        [
            ([], "No seats selected"),
            (["S1", "X9"], "Invalid seats: X9"),
            (["S3"], "Seats already booked: S3"),
            (["S4", "S1"], "Seats currently unavailable: S4"),
            ([f"S{i}" for i in range(5, 12)], "Cannot book more than 6 seats at once"),
        ],
    )
    def test_invalid_selections(self, layout, selected, message) -> None:
        check = validate_selection(layout, selected, booked_seats=["S3"], locked_seats=["S4"])

        assert not check.is_valid
        assert check.message == message

    def test_without_layout_every_seat_is_unknown(self) -> None:
        check = validate_selection(None, ["S1"])

        assert not check.is_valid
        assert check.message.startswith("Invalid seats")
