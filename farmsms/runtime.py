"""Per-message runtime between the SMS transport and the booking orchestrator."""

from __future__ import annotations

import asyncio
import logging

from farmsms.booking import SERVER_ERROR_MESSAGE, BookingOrchestrator
from farmsms.db import Database
from farmsms.models import Message, Outcome

LOGGER = logging.getLogger(__name__)


class SmsRuntime:
    """Logs SMS traffic and runs each message through the orchestrator under a deadline."""

    def __init__(
        self,
        db: Database,
        orchestrator: BookingOrchestrator,
        request_timeout_seconds: float,
    ) -> None:
        self._db = db
        self._orchestrator = orchestrator
        self._request_timeout_seconds = request_timeout_seconds

    async def handle_message(self, message: Message) -> Outcome:
        """Handle one inbound SMS and return the outcome to send back."""

        self._db.add_message(message.sender, direction="inbound", content=message.text)

        try:
            outcome = await asyncio.wait_for(
                self._orchestrator.handle_sms(message.text, message.sender),
                timeout=self._request_timeout_seconds,
            )
        except asyncio.TimeoutError:
            LOGGER.warning(
                "SMS from %s timed out after %.1fs", message.sender, self._request_timeout_seconds
            )
            outcome = Outcome(success=False, message=SERVER_ERROR_MESSAGE)

        self._db.add_message(
            message.sender,
            direction="outbound",
            content=outcome.message,
            booking_id=outcome.booking_id,
        )
        return outcome
