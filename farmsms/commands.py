"""Parser for SMS booking commands.

Recognised forms (keywords are case-insensitive):

    BOOK <item, possibly multi-word> <YYYY-MM-DD> <location>
    LABOR <skill> <quantity> <date>
    HELP

Anything else parses to None. A recognised command whose date or quantity
fails validation parses to InvalidField so the reply can name the bad value.
"""

from __future__ import annotations

import re
from datetime import date

from farmsms.models import HelpRequest, Intent, InvalidField, LabourRequest, MachineryBooking

_DATE_TOKEN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)


def parse_command(text: str) -> Intent | None:
    """Turn raw SMS text into an intent, or None when it is not a command."""

    parts = text.split()
    if not parts:
        return None

    command = parts[0].upper()
    if command == "HELP":
        return HelpRequest()
    if len(parts) < 2:
        return None
    if command == "BOOK":
        return _parse_book(parts[1:])
    if command == "LABOR":
        return _parse_labor(parts[1:])
    return None


def _parse_book(args: list[str]) -> Intent | None:
    date_index = next((i for i, token in enumerate(args) if _DATE_TOKEN.match(token)), None)
    if date_index is None:
        return None

    item = " ".join(args[:date_index]).lower()
    location = " ".join(args[date_index + 1 :])
    if not item or not location:
        return None

    token = args[date_index]
    if not _is_calendar_date(token):
        return InvalidField(field="date", value=token)
    return MachineryBooking(item=item, date=token, location=location)


def _parse_labor(args: list[str]) -> Intent | None:
    if len(args) < 3:
        return None

    skill, raw_quantity, when = args[0].lower(), args[1], args[2]
    quantity = _positive_int(raw_quantity)
    if quantity is None:
        return InvalidField(field="quantity", value=raw_quantity)
    return LabourRequest(skill=skill, quantity=quantity, date=when)


def _is_calendar_date(token: str) -> bool:
    try:
        date.fromisoformat(token)
    except ValueError:
        return False
    return True


def _positive_int(token: str) -> int | None:
    if not token.isascii() or not token.isdigit():
        return None
    value = int(token)
    return value if value > 0 else None
