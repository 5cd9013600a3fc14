"""Collaborator contracts consumed by the booking orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod

from farmsms.models import Booking, LabourEntry, Machinery, Requester


class RequesterStore(ABC):
    """Phone-keyed directory of SMS requesters."""

    @abstractmethod
    async def find(self, phone: str) -> Requester | None:
        """Return the requester stored under ``phone``, if any."""

    @abstractmethod
    async def create(self, requester: Requester) -> Requester:
        """Persist a new requester, leaving an existing one with the same phone untouched."""


class MachineryCatalog(ABC):
    @abstractmethod
    async def find_available(self, name: str) -> Machinery | None:
        """Return an available machine whose name equals ``name`` ignoring case."""


class LabourPool(ABC):
    @abstractmethod
    async def find_available(self, skill: str) -> LabourEntry | None:
        """Return an available labour entry whose skills include ``skill``."""


class BookingLedger(ABC):
    @abstractmethod
    async def create(self, booking: Booking) -> Booking:
        """Persist ``booking`` and return it with its generated id."""
