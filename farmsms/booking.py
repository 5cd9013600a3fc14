"""Booking orchestrator for parsed SMS commands.

Maps an intent to requester, catalog and ledger calls and always answers
with an Outcome. Collaborator failures never reach the caller.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta
from typing import TYPE_CHECKING

from farmsms.commands import parse_command
from farmsms.models import (
    Booking,
    BookingItem,
    HelpRequest,
    Intent,
    InvalidField,
    LabourRequest,
    MachineryBooking,
    Outcome,
    Requester,
)

if TYPE_CHECKING:
    from farmsms.stores.base import BookingLedger, LabourPool, MachineryCatalog, RequesterStore

LOGGER = logging.getLogger(__name__)

USAGE_MESSAGE = "Invalid format.\nUse:\nBOOK TRACTOR YYYY-MM-DD LOCATION\nLABOR SKILL QTY DATE"
SERVER_ERROR_MESSAGE = "Server error while processing booking."

# Machinery is booked by the day over SMS.
BOOKING_DURATION_DAYS = 1

_SMS_REQUESTER_NAME = "SMS User"
_SMS_DISABLED_PASSWORD = "sms-disabled"


class BookingOrchestrator:
    """Executes booking intents against injected collaborators."""

    def __init__(
        self,
        requesters: RequesterStore,
        machinery: MachineryCatalog,
        labour: LabourPool,
        bookings: BookingLedger,
        platform_name: str = "FarmConnect",
        email_domain: str = "farmconnect.local",
    ) -> None:
        self._requesters = requesters
        self._machinery = machinery
        self._labour = labour
        self._bookings = bookings
        self._platform_name = platform_name
        self._email_domain = email_domain

    async def handle_sms(self, text: str, phone: str) -> Outcome:
        """Parse and handle one SMS from ``phone``."""

        return await self.handle(parse_command(text), phone)

    async def handle(self, intent: Intent | None, phone: str) -> Outcome:
        """Run the workflow for ``intent``. Never raises."""

        LOGGER.info("SMS booking dispatch: intent=%r phone=%s", intent, phone)
        try:
            return await self._dispatch(intent, phone)
        except Exception:  # noqa: BLE001
            LOGGER.exception("SMS booking failed for %s", phone)
            return Outcome(success=False, message=SERVER_ERROR_MESSAGE)

    async def _dispatch(self, intent: Intent | None, phone: str) -> Outcome:
        if intent is None:
            return Outcome(success=False, message=USAGE_MESSAGE)
        if isinstance(intent, HelpRequest):
            return Outcome(success=True, message=self._help_text())
        if isinstance(intent, InvalidField):
            return Outcome(success=False, message=_invalid_field_message(intent))
        if isinstance(intent, MachineryBooking):
            return await self._book_machinery(intent, phone)
        if isinstance(intent, LabourRequest):
            return await self._request_labour(intent)
        raise TypeError(f"Unsupported intent: {intent!r}")

    async def _book_machinery(self, intent: MachineryBooking, phone: str) -> Outcome:
        requester = await self._find_or_create_requester(phone)

        machinery = await self._machinery.find_available(intent.item)
        if machinery is None:
            LOGGER.info("No available machinery named %r", intent.item)
            return Outcome(success=False, message=f'Machinery "{intent.item}" not available')

        start_date = date.fromisoformat(intent.date)
        booking = await self._bookings.create(
            Booking(
                customer_id=requester.phone,
                machinery_id=machinery.id,
                items=[BookingItem(product_id=machinery.id, quantity=1, price=machinery.price)],
                total_amount=machinery.price,
                start_date=start_date,
                end_date=start_date + timedelta(days=BOOKING_DURATION_DAYS),
                duration=BOOKING_DURATION_DAYS,
                delivery_address={"city": intent.location},
                status="pending",
                payment_status="pending",
            )
        )
        LOGGER.info(
            "Booking created: %s for %s (%s on %s)", booking.id, phone, machinery.name, intent.date
        )
        return Outcome(
            success=True,
            booking_id=str(booking.id),
            message=(
                "✅ Booking received!\n"
                f"Machinery: {machinery.name}\n"
                f"Date: {intent.date}\n"
                f"Location: {intent.location}\n"
                f"Booking ID: {booking.id}\n"
                "Status: Pending confirmation"
            ),
        )

    async def _request_labour(self, intent: LabourRequest) -> Outcome:
        entry = await self._labour.find_available(intent.skill)
        if entry is None:
            LOGGER.info("No available labour with skill %r", intent.skill)
            return Outcome(success=False, message=f'No labour available for skill "{intent.skill}"')

        return Outcome(
            success=True,
            booking_id=str(uuid.uuid4()),
            message=(
                "✅ Labour request received!\n"
                f"Skill: {intent.skill}\n"
                f"Quantity: {intent.quantity}\n"
                f"Date: {intent.date}\n"
                "Status: Pending confirmation"
            ),
        )

    async def _find_or_create_requester(self, phone: str) -> Requester:
        requester = await self._requesters.find(phone)
        if requester is not None:
            return requester
        LOGGER.info("Creating SMS requester for %s", phone)
        return await self._requesters.create(
            Requester(
                phone=phone,
                name=_SMS_REQUESTER_NAME,
                email=f"sms_{phone.replace('+', '')}@{self._email_domain}",
                password=_SMS_DISABLED_PASSWORD,
                role="customer",
            )
        )

    def _help_text(self) -> str:
        return (
            f"{self._platform_name} SMS Help:\n"
            "BOOK <MACHINERY> <DATE> <LOCATION>\n"
            "LABOR <SKILL> <QTY> <DATE>\n"
            "\n"
            "Example:\n"
            "BOOK tractor 2026-02-16 kalyani"
        )


def _invalid_field_message(intent: InvalidField) -> str:
    if intent.field == "date":
        return f'Invalid date "{intent.value}". Use a real calendar date as YYYY-MM-DD.'
    return f'Invalid quantity "{intent.value}". Quantity must be a positive whole number.'
