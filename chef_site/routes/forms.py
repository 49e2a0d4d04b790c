"""
Public website forms: contact, table booking, catering inquiry and cart booking.
Each submission is emailed to the site owner and then stored best-effort.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from chef_site.deps import get_notification_service
from chef_site.schemas import (
    BookingResponse,
    CartBookingForm,
    CateringInquiry,
    ContactForm,
    FormSubmissionResponse,
    TableBookingForm,
)
from chef_site.services.notifications import NotificationResult, NotificationService

router = APIRouter()


def _submission_body(result: NotificationResult) -> Dict[str, Any]:
    # `booking` is only present when the database copy was written
    body: Dict[str, Any] = {"success": True, "message": result.message}
    if result.booking is not None:
        body["booking"] = BookingResponse.model_validate(result.booking)
    return body


@router.post("/contact", response_model=FormSubmissionResponse, response_model_exclude_unset=True)
async def submit_contact(form: ContactForm, notifications: NotificationService = Depends(get_notification_service)):
    """
    Send a contact form message.

    Raises:
        RequestValidationError: 400 if name, email, subject or message is missing
        DispatchError: 500 if the email could not be sent
    """
    return _submission_body(await notifications.send("contact", form))


@router.post("/book-table", response_model=FormSubmissionResponse, response_model_exclude_unset=True)
async def submit_table_booking(
    form: TableBookingForm,
    notifications: NotificationService = Depends(get_notification_service),
):
    return _submission_body(await notifications.send("table_booking", form))


@router.post("/catering-inquiry", response_model=FormSubmissionResponse, response_model_exclude_unset=True)
async def submit_catering_inquiry(
    form: CateringInquiry,
    notifications: NotificationService = Depends(get_notification_service),
):
    """Send a catering inquiry; the stored booking is returned when the database write succeeded."""
    return _submission_body(await notifications.send("catering_inquiry", form))


@router.post("/cart-booking", response_model=FormSubmissionResponse, response_model_exclude_unset=True)
async def submit_cart_booking(
    form: CartBookingForm,
    notifications: NotificationService = Depends(get_notification_service),
):
    """Send a booking built from the menu cart; the stored booking is returned when the database write succeeded."""
    return _submission_body(await notifications.send("cart_booking", form))
