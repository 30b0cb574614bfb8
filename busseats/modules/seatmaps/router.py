import time

from fastapi import APIRouter

from busseats.metrics import LAYOUTS_GENERATED, LAYOUT_GENERATION_LATENCY, LAYOUTS_NORMALIZED, SEAT_TOGGLES
from busseats.schemas.layout import LayoutConfig
from busseats.schemas.seatmap import (
    GenerateLayoutRequest,
    GenerateLayoutResponse,
    NormalizeRequest,
    NormalizedLayoutResponse,
    SeatStatusRequest,
    SeatStatusResponse,
    SelectionCheckOut,
    ToggleRequest,
    ToggleResponse,
    ValidateSelectionRequest,
)
from busseats.services import layout_generator, seat_selection
from busseats.services.layout_normalizer import normalize_with_shape

router = APIRouter(tags=["seatmaps"])


@router.get("/")
async def seatmaps_root():
    return {"module": "seatmaps", "status": "ok"}


@router.post("/generate", response_model=GenerateLayoutResponse)
async def generate_layout(req: GenerateLayoutRequest):
    """Generate a seat map from a row/group config once its total matches the bus."""
    config = LayoutConfig(**req.model_dump(exclude={"expected_total"}))
    configured = layout_generator.total_seats_in_layout(config)
    if not layout_generator.matches_expected(config, req.expected_total):
        LAYOUTS_GENERATED.labels(result="mismatch").inc()
        return GenerateLayoutResponse(configured_total=configured, expected_total=req.expected_total, matches=False)

    start = time.perf_counter()
    layout = layout_generator.generate(config)
    LAYOUT_GENERATION_LATENCY.observe(time.perf_counter() - start)
    LAYOUTS_GENERATED.labels(result="match").inc()
    return GenerateLayoutResponse(
        configured_total=configured, expected_total=req.expected_total, matches=True, layout=layout
    )


@router.post("/normalize", response_model=NormalizedLayoutResponse)
async def normalize_layout(req: NormalizeRequest):
    """Canonical layout for a stored document; ``layout`` is null when nothing can be shown."""
    layout, shape = normalize_with_shape(req.layout, req.total_seats, req.seat_type)
    LAYOUTS_NORMALIZED.labels(shape=shape.value).inc()
    return NormalizedLayoutResponse(shape=shape, layout=layout)


@router.post("/status", response_model=SeatStatusResponse)
async def seat_status(req: SeatStatusRequest):
    layout, shape = normalize_with_shape(req.layout, req.total_seats, req.seat_type)
    statuses = seat_selection.seat_statuses(layout, req.booked_seats, req.locked_seats, req.selected_seats)
    return SeatStatusResponse(shape=shape, statuses=statuses)


@router.post("/toggle", response_model=ToggleResponse)
async def toggle_seat(req: ToggleRequest):
    """Apply one seat tap to the rider's selection. Rejected taps leave it unchanged."""
    selected, result = seat_selection.apply_toggle(
        req.seat_number, req.selected_seats, req.max_seats, req.booked_seats, req.locked_seats
    )
    SEAT_TOGGLES.labels(result=result).inc()
    return ToggleResponse(selected_seats=selected, changed=result in ("selected", "deselected"), result=result)


@router.post("/validate", response_model=SelectionCheckOut)
async def validate_selection(req: ValidateSelectionRequest):
    layout, _ = normalize_with_shape(req.layout, req.total_seats, req.seat_type)
    check = seat_selection.validate_selection(
        layout, req.selected_seats, req.booked_seats, req.locked_seats, max_seats=req.max_seats
    )
    return SelectionCheckOut(is_valid=check.is_valid, message=check.message)
