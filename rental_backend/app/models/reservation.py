"""
Reservation database model.

Reservations are written by the booking workflow once payment succeeds;
the availability checker only reads them.
"""

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, Enum, Index
from sqlalchemy.sql import func
from rental_backend.app.db.session import Base
from rental_backend.app.models.reservation_enums import ReservationStatus


class Reservation(Base):
    """
    Reservation model.

    start_time/end_time track the actual ride; pickup_time/dropoff_time
    are the booked window. Either pair may be partially empty: an ongoing
    ride has no end_time until it is closed.
    """
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    bike_id = Column(Integer, ForeignKey('bikes.id'), nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    booking_id = Column(String(20), nullable=True, unique=True)  # RF-BK-123456

    status = Column(Enum(ReservationStatus), default=ReservationStatus.CONFIRMED, nullable=False, index=True)

    # Actual ride
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)

    # Booked window
    pickup_time = Column(DateTime(timezone=True), nullable=True)
    dropoff_time = Column(DateTime(timezone=True), nullable=True)

    total_amount = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('ix_reservations_bike_status', 'bike_id', 'status'),
    )

    def __repr__(self):
        return f"<Reservation(id={self.id}, bike_id={self.bike_id}, status='{self.status.value}')>"
