"""
Bike database model.

Holds the catalog entry plus every pricing field the pricing engine reads.
"""

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from rental_backend.app.core.config import settings
from rental_backend.app.db.session import Base


class Bike(Base):
    """
    Bike model.

    Pricing fields belong to three schemes that coexist on a row:
    the legacy hourly rate, the slabs (see BikeSlab) and the simple tier
    (12-hour package, per-hour rates for hours 13-24, weekly price).
    Which one applies is decided by the pricing engine, not stored.
    """
    __tablename__ = "bikes"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Catalog
    name = Column(String(120), nullable=False, unique=True)
    bike_type = Column(String(30), nullable=False)  # fuel, electric, scooter
    km_limit = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Legacy scheme
    price_per_hour = Column(Numeric(10, 2), nullable=True)

    # Simple tier
    price_12_hours = Column(Numeric(10, 2), nullable=True)
    hourly_rates_13_to_24 = Column(JSON, nullable=True)  # 12 entries, null for unset hours
    price_per_week = Column(Numeric(10, 2), nullable=True)

    # Adjustments
    weekend_surge_multiplier = Column(Numeric(5, 2), nullable=False, default=settings.default_weekend_surge_multiplier)
    gst_percentage = Column(Numeric(5, 2), nullable=False, default=settings.default_gst_percentage)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    slabs = relationship("BikeSlab", back_populates="bike", lazy="selectin", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Bike(id={self.id}, name='{self.name}', type='{self.bike_type}')>"
