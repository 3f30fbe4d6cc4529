"""SQLAlchemy models mirroring the JSON document (places, photos, id counters)."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)

from .session import Base


class Place(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    date_visited = Column(String(64), nullable=False, default="")
    sort_order = Column(Integer, nullable=False, default=0)
    # kept as the ISO string written by the API so both backends round-trip identically
    created_at = Column(String(40), nullable=False)


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, autoincrement=False)
    place_id = Column(Integer, ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False, default="")
    created_at = Column(String(40), nullable=False)


class Counter(Base):
    __tablename__ = "counters"

    name = Column(String(32), primary_key=True)
    value = Column(Integer, nullable=False)
