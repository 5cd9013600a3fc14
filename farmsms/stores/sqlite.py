"""SQLite-backed collaborators.

``Database`` calls block, so each one runs in a worker thread.
"""

from __future__ import annotations

import asyncio

from farmsms.db import Database
from farmsms.models import Booking, LabourEntry, Machinery, Requester
from farmsms.stores.base import BookingLedger, LabourPool, MachineryCatalog, RequesterStore


class SqliteRequesterStore(RequesterStore):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def find(self, phone: str) -> Requester | None:
        return await asyncio.to_thread(self._db.get_requester, phone)

    async def create(self, requester: Requester) -> Requester:
        return await asyncio.to_thread(self._db.create_requester, requester)


class SqliteMachineryCatalog(MachineryCatalog):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def find_available(self, name: str) -> Machinery | None:
        return await asyncio.to_thread(self._db.find_available_machinery, name)


class SqliteLabourPool(LabourPool):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def find_available(self, skill: str) -> LabourEntry | None:
        return await asyncio.to_thread(self._db.find_available_labour, skill)


class SqliteBookingLedger(BookingLedger):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, booking: Booking) -> Booking:
        return await asyncio.to_thread(self._db.create_booking, booking)
