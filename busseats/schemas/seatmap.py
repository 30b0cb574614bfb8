from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from busseats.config import settings
from busseats.schemas.layout import Layout, LayoutShape, SeatStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LayoutConfigIn(_CamelModel):
    rows: int = Field(..., ge=1, le=15, description="Rows from driver seat to back")
    left_upper_seats: int = Field(0, ge=0, le=3, alias="leftUpperSeats")
    left_lower_seats: int = Field(0, ge=0, le=3, alias="leftLowerSeats")
    right_upper_seats: int = Field(0, ge=0, le=3, alias="rightUpperSeats")
    right_lower_seats: int = Field(0, ge=0, le=3, alias="rightLowerSeats")


class GenerateLayoutRequest(LayoutConfigIn):
    expected_total: int = Field(..., ge=1, alias="expectedTotal")


class GenerateLayoutResponse(_CamelModel):
    configured_total: int = Field(..., alias="configuredTotal")
    expected_total: int = Field(..., alias="expectedTotal")
    matches: bool
    layout: Optional[Layout] = None


class NormalizeRequest(_CamelModel):
    layout: Optional[Dict[str, Any]] = None
    total_seats: Optional[int] = Field(None, ge=0, alias="totalSeats")
    seat_type: Optional[str] = Field(None, alias="seatType")


class NormalizedLayoutResponse(_CamelModel):
    shape: LayoutShape
    layout: Optional[Layout] = None


class SeatSetsIn(_CamelModel):
    booked_seats: List[str] = Field(default_factory=list, alias="bookedSeats")
    locked_seats: List[str] = Field(default_factory=list, alias="lockedSeats")
    selected_seats: List[str] = Field(default_factory=list, alias="selectedSeats")


class SeatStatusRequest(NormalizeRequest, SeatSetsIn):
    pass


class SeatStatusResponse(_CamelModel):
    shape: LayoutShape
    statuses: Dict[str, SeatStatus]


class ToggleRequest(SeatSetsIn):
    seat_number: str = Field(..., alias="seatNumber")
    max_seats: int = Field(default_factory=lambda: settings.MAX_SEATS_PER_BOOKING, ge=0, alias="maxSeats")


class ToggleResponse(_CamelModel):
    selected_seats: List[str] = Field(..., alias="selectedSeats")
    changed: bool
    result: str


class ValidateSelectionRequest(SeatStatusRequest):
    max_seats: int = Field(default_factory=lambda: settings.MAX_SEATS_PER_BOOKING, ge=1, alias="maxSeats")


class SelectionCheckOut(_CamelModel):
    is_valid: bool = Field(..., alias="isValid")
    message: str


class BusCreate(_CamelModel):
    registration_number: str = Field(..., min_length=1, alias="registrationNumber")
    capacity: int = Field(..., ge=1, le=100)
    seat_type: str = Field("seater", alias="seatType", description="sleeper, semi-sleeper, seater or luxury")
    model: Optional[str] = None
    seat_layout: Optional[Dict[str, Any]] = Field(None, alias="seatLayout")


class BusOut(_CamelModel):
    id: int
    registration_number: str = Field(..., alias="registrationNumber")
    capacity: int
    seat_type: str = Field(..., alias="seatType")
    model: Optional[str] = None


class MigrationReport(BaseModel):
    converted: int = 0
    synthesized: int = 0
    skipped: int = 0
    empty: int = 0
    total: int = 0
