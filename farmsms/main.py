"""Application entrypoint."""

from __future__ import annotations

import asyncio
import logging

from farmsms.booking import BookingOrchestrator
from farmsms.config import load_settings
from farmsms.db import Database
from farmsms.runtime import SmsRuntime
from farmsms.signal_adapter import SignalAdapter
from farmsms.stores.sqlite import (
    SqliteBookingLedger,
    SqliteLabourPool,
    SqliteMachineryCatalog,
    SqliteRequesterStore,
)

logging.basicConfig(level=logging.INFO)
LOGGER = logging.getLogger(__name__)


async def run() -> None:
    """Initialize app layers and start processing loop."""

    settings = load_settings()

    db = Database(settings.database_path)
    db.initialize()

    orchestrator = BookingOrchestrator(
        requesters=SqliteRequesterStore(db),
        machinery=SqliteMachineryCatalog(db),
        labour=SqliteLabourPool(db),
        bookings=SqliteBookingLedger(db),
        platform_name=settings.platform_name,
        email_domain=settings.requester_email_domain,
    )
    runtime = SmsRuntime(
        db=db,
        orchestrator=orchestrator,
        request_timeout_seconds=settings.request_timeout_seconds,
    )

    signal_adapter = SignalAdapter(
        signal_cli_path=settings.signal_cli_path,
        account=settings.signal_account,
        poll_interval_seconds=settings.signal_poll_interval_seconds,
    )

    try:
        async for message in signal_adapter.poll_messages():
            outcome = await runtime.handle_message(message)
            try:
                await signal_adapter.send_message(message.sender, outcome.message)
            except RuntimeError as exc:
                LOGGER.warning("Reply to %s not delivered: %s", message.sender, exc)
    finally:
        LOGGER.info("SMS booking gateway shutdown complete")


def main() -> None:
    """Synchronous wrapper for asyncio entrypoint."""

    asyncio.run(run())


if __name__ == "__main__":
    main()
