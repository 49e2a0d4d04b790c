"""
Catering and table bookings.
"""
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select

from chef_site.database import Database
from chef_site.errors import NotFound
from chef_site.models import Booking
from chef_site.schemas import BookingFields, BookingUpdate

logger = logging.getLogger(__name__)


def dishes_for_storage(selected_dishes) -> Optional[List[Dict[str, Any]]]:
    """Dish selections as stored in the JSON column (frontend `totalPrice` key)."""
    if not selected_dishes:
        return None
    return [dish.model_dump(by_alias=True) for dish in selected_dishes]


class BookingService:
    def __init__(self, database: Database):
        self.database = database

    async def create(self, payload: BookingFields) -> Booking:
        values = payload.model_dump(exclude={"selected_dishes"})
        return await self.create_from_values(
            selected_dishes=dishes_for_storage(payload.selected_dishes),
            **values,
        )

    async def create_from_values(self, **values: Any) -> Booking:
        """Insert a booking from already-validated column values. Status starts as pending."""
        async with self.database.session() as session:
            booking = Booking(status="pending", **values)
            session.add(booking)
            await session.flush()
            await session.refresh(booking)

        logger.info(
            f"Created booking {booking.id} for {booking.customer_email} "
            f"on {booking.event_date} ({booking.event_type or 'unspecified'})"
        )
        return booking

    async def list(self, status: Optional[str] = None) -> List[Booking]:
        query = select(Booking).order_by(Booking.created_at.desc())
        if status:
            query = query.where(Booking.status == status)
        async with self.database.session() as session:
            result = await session.execute(query)
            return list(result.scalars())

    async def get(self, booking_id: str) -> Booking:
        async with self.database.session() as session:
            booking = await session.get(Booking, booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    async def update(self, booking_id: str, payload: BookingUpdate) -> Booking:
        """Change status, total or notes. Fields not in the request are left as they are."""
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("status") is None:
            changes.pop("status", None)

        async with self.database.session() as session:
            booking = await session.get(Booking, booking_id)
            if booking is None:
                raise NotFound("Booking not found")
            for field, value in changes.items():
                setattr(booking, field, value)
            await session.flush()
            await session.refresh(booking)

        logger.info(f"Updated booking {booking_id}: {changes}")
        return booking

    async def delete(self, booking_id: str) -> None:
        async with self.database.session() as session:
            booking = await session.get(Booking, booking_id)
            if booking is None:
                raise NotFound("Booking not found")
            await session.delete(booking)
        logger.info(f"Deleted booking {booking_id}")
