import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from busseats.db.session import get_session
from busseats.metrics import LAYOUTS_GENERATED
from busseats.schemas.layout import LayoutConfig, LayoutShape
from busseats.schemas.seatmap import BusCreate, BusOut, LayoutConfigIn, MigrationReport, NormalizedLayoutResponse
from busseats.services import layout_generator, seatmap_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["buses"])


@router.get("/")
async def buses_root():
    return {"module": "buses", "status": "ok"}


@router.post("", response_model=BusOut, status_code=201)
async def create_bus(payload: BusCreate, db: AsyncSession = Depends(get_session)):
    try:
        async with db.begin():
            bus = await seatmap_store.create_bus(db, payload)
    except IntegrityError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Bus already registered")
    return BusOut(
        id=bus.id,
        registration_number=bus.registration_number,
        capacity=bus.capacity,
        seat_type=bus.seat_type,
        model=bus.model,
    )


@router.get("/{bus_id}/seatmap", response_model=NormalizedLayoutResponse)
async def get_seatmap(bus_id: int, db: AsyncSession = Depends(get_session)):
    """Seat map of a bus in canonical form, converting or synthesizing as needed."""
    found = await seatmap_store.load_layout(db, bus_id)
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
    layout, shape = found
    return NormalizedLayoutResponse(shape=shape, layout=layout)


@router.put("/{bus_id}/seatmap", response_model=NormalizedLayoutResponse)
async def put_seatmap(bus_id: int, config_in: LayoutConfigIn, db: AsyncSession = Depends(get_session)):
    """Generate and store a bus's seat map; refused until the config accounts for every seat."""
    async with db.begin():
        bus = await seatmap_store.get_bus(db, bus_id)
        if bus is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bus not found")
        config = LayoutConfig(**config_in.model_dump())
        if not layout_generator.matches_expected(config, bus.capacity):
            LAYOUTS_GENERATED.labels(result="mismatch").inc()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Configured {config.configured_total} seats but bus has {bus.capacity}",
            )
        layout = layout_generator.generate(config)
        LAYOUTS_GENERATED.labels(result="match").inc()
        await seatmap_store.save_layout(db, bus, layout)
    logger.info("Stored generated seat layout for bus %s (%s seats)", bus.registration_number, layout.count_seats())
    return NormalizedLayoutResponse(shape=LayoutShape.CANONICAL, layout=layout)


@router.post("/seatmaps/migrate", response_model=MigrationReport)
async def migrate_seatmaps(db: AsyncSession = Depends(get_session)):
    """Rewrite legacy and missing seat maps in the canonical left/right shape."""
    async with db.begin():
        report = await seatmap_store.migrate_layouts(db)
    logger.info("Seat map migration finished", extra=report.model_dump())
    return report
