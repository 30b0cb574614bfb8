from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    JSON,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from busseats.db.base import Base


class Bus(Base):
    __tablename__ = "buses"
    id = Column(Integer, primary_key=True)
    registration_number = Column(String(64), nullable=False, unique=True, index=True)
    # declared seat count; a generated layout must account for exactly this many seats
    capacity = Column(Integer, nullable=False, default=0)
    # vehicle class: sleeper, semi-sleeper, seater, luxury
    seat_type = Column(String(32), nullable=False, default="seater", index=True)
    model = Column(String(128), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    seatmap = relationship("SeatMap", back_populates="bus", uselist=False, lazy="selectin")


class SeatMap(Base):
    __tablename__ = "seatmaps"
    id = Column(Integer, primary_key=True)
    bus_id = Column(Integer, ForeignKey("buses.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    # canonical left/right document, or a legacy lowerDeck/upperDeck one
    layout = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    bus = relationship("Bus", back_populates="seatmap")
