"""
Booking routes. Creating a booking is public; everything else requires a session.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from chef_site.deps import get_booking_service, require_login
from chef_site.schemas import (
    BookingCreate,
    BookingResponse,
    BookingStatus,
    BookingUpdate,
    MessageResponse,
    SessionUser,
)
from chef_site.services.bookings import BookingService

router = APIRouter()


@router.post("/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(payload: BookingCreate, bookings: BookingService = Depends(get_booking_service)):
    """
    Submit a booking. New bookings start as "pending".

    Raises:
        RequestValidationError: 400 if customer name, email, phone or event date is missing
    """
    return await bookings.create(payload)


@router.get("/bookings", response_model=List[BookingResponse])
async def list_bookings(
    status: Optional[BookingStatus] = None,
    bookings: BookingService = Depends(get_booking_service),
    user: SessionUser = Depends(require_login),
):
    return await bookings.list(status=status)


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
    user: SessionUser = Depends(require_login),
):
    return await bookings.get(booking_id)


@router.put("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    bookings: BookingService = Depends(get_booking_service),
    user: SessionUser = Depends(require_login),
):
    """Update status, total amount or notes; other fields are left unchanged."""
    return await bookings.update(booking_id, payload)


@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: str,
    bookings: BookingService = Depends(get_booking_service),
    user: SessionUser = Depends(require_login),
):
    await bookings.delete(booking_id)
    return MessageResponse(message="Booking deleted successfully")
