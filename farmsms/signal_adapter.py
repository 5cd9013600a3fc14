"""Signal CLI adapter used as the SMS gateway."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import AsyncIterator

from farmsms.models import Message

LOGGER = logging.getLogger(__name__)


class SignalAdapter:
    """Adapter around signal-cli JSON commands."""

    def __init__(
        self,
        signal_cli_path: str,
        account: str,
        poll_interval_seconds: float,
    ) -> None:
        self._signal_cli_path = signal_cli_path
        self._account = account
        self._poll_interval_seconds = poll_interval_seconds

    async def poll_messages(self) -> AsyncIterator[Message]:
        """Poll receive endpoint and yield normalized direct messages."""

        while True:
            process = await asyncio.create_subprocess_exec(
                self._signal_cli_path,
                "-o",
                "json",
                "-a",
                self._account,
                "receive",
                "-t",
                str(int(self._poll_interval_seconds)),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
            if process.returncode != 0:
                LOGGER.warning("signal-cli receive failed: %s", stderr.decode().strip())
                await asyncio.sleep(self._poll_interval_seconds)
                continue

            for line in stdout.decode().splitlines():
                line = line.strip()
                if not line:
                    continue
                try:
                    payload = json.loads(line)
                    message = _to_message(payload)
                except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                    continue
                if message is None:
                    continue
                if not message.sender.startswith("+"):
                    number = await self.resolve_number(message.sender)
                    if number is None:
                        LOGGER.warning("Dropping message from unresolvable sender %s", message.sender)
                        continue
                    message.sender = number
                yield message

    async def resolve_number(self, uuid: str) -> str | None:
        """Return the phone number for a UUID by scanning the contacts list."""

        process = await asyncio.create_subprocess_exec(
            self._signal_cli_path,
            "-o",
            "json",
            "-a",
            self._account,
            "listContacts",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, _ = await process.communicate()
        for line in stdout.decode().splitlines():
            try:
                contact = json.loads(line)
                if contact.get("uuid") == uuid and contact.get("number"):
                    return contact["number"]
            except (json.JSONDecodeError, AttributeError):
                continue
        return None

    async def send_message(self, recipient: str, text: str) -> None:
        """Send a text reply to a phone number."""

        process = await asyncio.create_subprocess_exec(
            self._signal_cli_path,
            "-a",
            self._account,
            "send",
            "-m",
            text,
            recipient,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await process.communicate()
        if process.returncode != 0:
            raise RuntimeError(f"signal-cli send failed: {stderr.decode().strip()}")


def _to_message(payload: dict[str, object]) -> Message | None:
    envelope = payload.get("envelope")
    if not isinstance(envelope, dict):
        return None
    data_message = envelope.get("dataMessage")
    if not isinstance(data_message, dict):
        return None
    # Bookings are one-to-one; group chatter is ignored.
    if data_message.get("groupInfo") is not None:
        return None

    text = data_message.get("message")
    text = text.strip() if isinstance(text, str) else ""
    if not text:
        return None

    source = envelope.get("sourceNumber") or envelope.get("source")
    if not isinstance(source, str) or not source:
        return None
    timestamp_ms = int(envelope.get("timestamp") or 0)
    timestamp = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)

    return Message(
        sender=source,
        text=text,
        timestamp=timestamp,
        message_id=str(envelope.get("timestamp") or ""),
    )
