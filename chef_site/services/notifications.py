"""
Public form notifications.

Each submission is emailed to the site owner first. Only after the email has
gone out is a copy written to the database, and that write is best-effort:
if it fails the submission still counts as delivered.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol
import logging

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from chef_site.database import Database
from chef_site.errors import AppError, DispatchError
from chef_site.models import Booking, Contact
from chef_site.schemas import CartBookingForm, CateringInquiry, ContactForm, TableBookingForm
from chef_site.services.bookings import BookingService, dishes_for_storage
from chef_site.utils.mailer import OutgoingEmail, TemplateRenderer

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    async def send(self, email: OutgoingEmail) -> None:
        ...


@dataclass(frozen=True)
class NotificationKind:
    template: str
    sender_name: str
    subject: Callable[[Any], str]
    reply_to: Callable[[Any], str]
    success_message: str
    failure_message: str


@dataclass
class NotificationResult:
    message: str
    booking: Optional[Booking] = None


KINDS: Dict[str, NotificationKind] = {
    "contact": NotificationKind(
        template="email/contact.html",
        sender_name="Chef Stefan Website",
        subject=lambda form: f"Contact Form: {form.subject}",
        reply_to=lambda form: form.email,
        success_message="Message sent successfully!",
        failure_message="Failed to send message. Please try again later.",
    ),
    "table_booking": NotificationKind(
        template="email/table_booking.html",
        sender_name="Chef Stefan Bookings",
        subject=lambda form: f"New Booking Request - {form.name} for {form.date} at {form.time}",
        reply_to=lambda form: form.email,
        success_message="Booking request sent successfully! We will contact you soon to confirm.",
        failure_message="Failed to process booking. Please try again later.",
    ),
    "catering_inquiry": NotificationKind(
        template="email/catering_inquiry.html",
        sender_name="Chef Stefan Catering",
        subject=lambda form: f"Catering Inquiry - {form.customer_name} for {form.event_date}",
        reply_to=lambda form: form.customer_email,
        success_message=(
            "Your catering inquiry has been sent successfully! "
            "We will contact you shortly to discuss your requirements."
        ),
        failure_message="Failed to process catering inquiry. Please try again later.",
    ),
    "cart_booking": NotificationKind(
        template="email/cart_booking.html",
        sender_name="Chef Stefan Cart Booking",
        subject=lambda form: (
            f"Cart Booking Request - {form.customer_name} for {form.event_date} at {form.event_time}"
        ),
        reply_to=lambda form: form.customer_email,
        success_message=(
            "Your booking request has been sent successfully! We will contact you shortly "
            "to confirm your reservation and discuss the final menu details."
        ),
        failure_message="Failed to process booking request. Please try again later.",
    ),
}


class NotificationService:
    def __init__(
        self,
        mailer: Mailer,
        renderer: TemplateRenderer,
        database: Database,
        bookings: BookingService,
        notify_email: str,
        site_name: str,
    ):
        self.mailer = mailer
        self.renderer = renderer
        self.database = database
        self.bookings = bookings
        self.notify_email = notify_email
        self.site_name = site_name
        self._persisters: Dict[str, Callable[[Any], Awaitable[Optional[Booking]]]] = {
            "contact": self._store_contact,
            "table_booking": self._store_table_booking,
            "catering_inquiry": self._store_catering_inquiry,
            "cart_booking": self._store_cart_booking,
        }

    async def send(self, kind: str, form: BaseModel) -> NotificationResult:
        """
        Email a form submission, then try to store it.

        Args:
            kind: "contact", "table_booking", "catering_inquiry" or "cart_booking"
            form: The validated submission

        Returns:
            NotificationResult: Success message, plus the stored booking when
                the kind creates one and the write succeeded

        Raises:
            DispatchError: The email could not be sent; nothing is stored
        """
        config = KINDS[kind]
        context = form.model_dump()
        context.update(
            site_name=self.site_name,
            notify_email=self.notify_email,
            received_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        )
        html = self.renderer.render(config.template, context)

        try:
            await self.mailer.send(OutgoingEmail(
                to=self.notify_email,
                subject=config.subject(form),
                html=html,
                sender_name=config.sender_name,
                reply_to=config.reply_to(form),
            ))
        except DispatchError as e:
            logger.error(f"Failed to send {kind} notification: {e.message}")
            raise DispatchError(config.failure_message) from e

        booking = None
        try:
            booking = await self._persisters[kind](form)
        except (AppError, SQLAlchemyError) as e:
            logger.error(f"{kind} email sent but database copy failed: {str(e)}", exc_info=True)

        logger.info(f"Processed {kind} submission from {config.reply_to(form)}")
        return NotificationResult(message=config.success_message, booking=booking)

    async def _store_contact(self, form: ContactForm) -> None:
        async with self.database.session() as session:
            session.add(Contact(**form.model_dump()))

    async def _store_table_booking(self, form: TableBookingForm) -> None:
        # Kept for the dashboard only; the table form response carries no booking
        await self.bookings.create_from_values(
            customer_name=form.name,
            customer_email=form.email,
            customer_phone=form.phone,
            event_date=form.date,
            event_time=form.time,
            occasion=form.occasion or "",
            dietary_restrictions=form.dietary_requirements or "",
            additional_info=form.special_requests or f"Table booking for {form.people} people",
        )

    async def _store_catering_inquiry(self, form: CateringInquiry) -> Booking:
        return await self.bookings.create(form)

    async def _store_cart_booking(self, form: CartBookingForm) -> Booking:
        return await self.bookings.create_from_values(
            customer_name=form.customer_name,
            customer_email=form.customer_email,
            customer_phone=form.customer_phone,
            event_type="Cart Booking",
            event_date=form.event_date,
            event_time=form.event_time,
            location=form.location,
            occasion=f"{form.guest_count} guests",
            additional_info=form.special_requests or f"Cart booking for {form.guest_count} guests",
            selected_dishes=dishes_for_storage(form.selected_dishes),
            total_amount=form.total_amount,
        )
