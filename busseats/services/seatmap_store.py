import logging
from typing import Optional, Tuple

from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession

from busseats.metrics import LAYOUTS_NORMALIZED
from busseats.models.models import Bus, SeatMap
from busseats.schemas.layout import Layout, LayoutShape
from busseats.schemas.seatmap import BusCreate, MigrationReport
from busseats.services.layout_normalizer import has_canonical_seats, normalize_with_shape

logger = logging.getLogger(__name__)


async def create_bus(db: AsyncSession, payload: BusCreate) -> Bus:
    """Insert a bus and, when given, its stored layout document as-is.

    The caller owns the transaction; an IntegrityError on a duplicate
    registration number surfaces on commit.
    """
    bus = Bus(
        registration_number=payload.registration_number.strip().upper(),
        capacity=payload.capacity,
        seat_type=payload.seat_type,
        model=payload.model,
    )
    if payload.seat_layout is not None:
        bus.seatmap = SeatMap(layout=payload.seat_layout)
    db.add(bus)
    return bus


async def get_bus(db: AsyncSession, bus_id: int) -> Optional[Bus]:
    stmt = sa_select(Bus).where(Bus.id == bus_id)
    res = await db.execute(stmt)
    return res.scalars().first()


async def save_layout(db: AsyncSession, bus: Bus, layout: Layout) -> SeatMap:
    """Store ``layout`` as the bus's seat map, replacing any previous one."""
    document = layout.to_document()
    if bus.seatmap is None:
        bus.seatmap = SeatMap(bus_id=bus.id, layout=document)
        db.add(bus.seatmap)
    else:
        bus.seatmap.layout = document
    return bus.seatmap


def layout_for_bus(bus: Bus) -> Tuple[Optional[Layout], LayoutShape]:
    raw = bus.seatmap.layout if bus.seatmap is not None else None
    layout, shape = normalize_with_shape(raw, bus.capacity, bus.seat_type)
    LAYOUTS_NORMALIZED.labels(shape=shape.value).inc()
    return layout, shape


async def load_layout(db: AsyncSession, bus_id: int) -> Optional[Tuple[Optional[Layout], LayoutShape]]:
    """Normalized layout of a bus, or None when the bus does not exist."""
    bus = await get_bus(db, bus_id)
    if bus is None:
        return None
    return layout_for_bus(bus)


async def migrate_layouts(db: AsyncSession) -> MigrationReport:
    """Rewrite every stored layout in the canonical shape.

    Canonical layouts are left alone. Legacy deck layouts are converted,
    buses with nothing stored get the synthesized fallback, and buses with
    neither a layout nor a seat count stay empty. A left/right document that
    lists seats but cannot be read (no usable rows or seat numbers) is never
    overwritten; it is counted as skipped for an operator to fix.
    """
    report = MigrationReport()
    res = await db.execute(sa_select(Bus).order_by(Bus.id))
    for bus in res.scalars().all():
        report.total += 1
        layout, shape = layout_for_bus(bus)
        if shape == LayoutShape.CANONICAL:
            report.skipped += 1
            continue
        if bus.seatmap is not None and has_canonical_seats(bus.seatmap.layout):
            logger.warning("Bus %s has an unreadable left/right seat map, leaving it in place", bus.registration_number)
            report.skipped += 1
            continue
        if layout is None:
            logger.warning("Bus %s has no layout and no seat count, leaving it empty", bus.registration_number)
            report.empty += 1
            continue
        await save_layout(db, bus, layout)
        if shape == LayoutShape.LEGACY:
            report.converted += 1
        else:
            report.synthesized += 1
        logger.info(
            "Migrated seat layout for bus %s from %s: %s seats over %s rows",
            bus.registration_number,
            shape.value,
            layout.count_seats(),
            layout.total_rows,
        )
    return report
