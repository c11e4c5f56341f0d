"""
Bike pricing slab database model.
"""

from sqlalchemy import Column, Integer, Numeric, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from rental_backend.app.db.session import Base
from rental_backend.app.models.pricing_enums import PricingType, MinimumBookingRule


class BikeSlab(Base):
    """
    Bike Slab model.

    One hourly, daily or weekly tier per bike with its own duration range,
    included distance and minimum booking rule.
    """
    __tablename__ = "bike_slabs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    bike_id = Column(Integer, ForeignKey('bikes.id', ondelete="CASCADE"), nullable=False, index=True)

    slab_type = Column(Enum(PricingType), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # per hour / day / week depending on slab_type

    # Standard duration range for this slab
    duration_min_hours = Column(Numeric(8, 2), nullable=False, default=0)
    duration_max_hours = Column(Numeric(8, 2), nullable=False)

    # Distance allowance
    included_km = Column(Integer, nullable=False, default=0)
    extra_km_price = Column(Numeric(10, 2), nullable=False, default=0)

    # Minimum booking
    minimum_booking_rule = Column(Enum(MinimumBookingRule), nullable=False, default=MinimumBookingRule.NONE)
    minimum_value = Column(Numeric(10, 2), nullable=False, default=0)

    bike = relationship("Bike", back_populates="slabs")

    __table_args__ = (
        UniqueConstraint('bike_id', 'slab_type', name='uq_bike_slabs_bike_type'),
    )

    def __repr__(self):
        return f"<BikeSlab(bike_id={self.bike_id}, type='{self.slab_type.value}', price={self.price})>"
