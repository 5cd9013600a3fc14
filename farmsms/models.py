"""Core domain models used across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal


@dataclass(slots=True)
class Message:
    """Inbound SMS normalized by the transport adapter."""

    sender: str
    text: str
    timestamp: datetime
    message_id: str | None = None


@dataclass(slots=True, frozen=True)
class MachineryBooking:
    """BOOK command: reserve one machine for one day."""

    item: str
    date: str
    location: str


@dataclass(slots=True, frozen=True)
class LabourRequest:
    """LABOR command: ask for workers with a given skill."""

    skill: str
    quantity: int
    date: str


@dataclass(slots=True, frozen=True)
class HelpRequest:
    """HELP command."""


@dataclass(slots=True, frozen=True)
class InvalidField:
    """A recognised command whose field failed validation."""

    field: Literal["date", "quantity"]
    value: str


Intent = MachineryBooking | LabourRequest | HelpRequest | InvalidField


@dataclass(slots=True)
class Outcome:
    """Result handed back to the SMS transport."""

    success: bool
    message: str
    booking_id: str | None = None


@dataclass(slots=True)
class Requester:
    """Phone-identified customer placing SMS bookings."""

    phone: str
    name: str
    email: str
    password: str
    role: str = "customer"
    created_at: str | None = None


@dataclass(slots=True)
class Machinery:
    id: int
    name: str
    price: float
    is_available: bool = True


@dataclass(slots=True)
class LabourEntry:
    id: int
    name: str
    skills: list[str] = field(default_factory=list)
    is_available: bool = True


@dataclass(slots=True)
class BookingItem:
    product_id: int
    quantity: int
    price: float


@dataclass(slots=True)
class Booking:
    """Machinery reservation. ``id`` is assigned by the ledger on create."""

    customer_id: str
    machinery_id: int
    items: list[BookingItem]
    total_amount: float
    start_date: date
    end_date: date
    duration: int
    delivery_address: dict[str, Any]
    status: str = "pending"
    payment_status: str = "pending"
    id: int | None = None
    created_at: str | None = None
