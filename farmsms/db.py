"""SQLite persistence layer."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from farmsms.models import Booking, BookingItem, LabourEntry, Machinery, Requester

SCHEMA_VERSION = 1


class Database:
    """Small SQLite wrapper with explicit schema management."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create or migrate schema."""

        with self._connect() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)")
            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
            if row is None:
                self._create_schema(conn)
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
            elif row["version"] != SCHEMA_VERSION:
                raise RuntimeError(
                    f"Unsupported schema version {row['version']} (expected {SCHEMA_VERSION})"
                )

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS requesters (
                phone TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT NOT NULL,
                password TEXT NOT NULL,
                role TEXT NOT NULL,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS machinery (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                name_key TEXT NOT NULL,
                price REAL NOT NULL,
                is_available INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS labour (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                skills_json TEXT NOT NULL,
                is_available INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS bookings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                customer_id TEXT NOT NULL,
                machinery_id INTEGER NOT NULL,
                items_json TEXT NOT NULL,
                total_amount REAL NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                duration INTEGER NOT NULL,
                delivery_address_json TEXT NOT NULL,
                status TEXT NOT NULL,
                payment_status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                FOREIGN KEY(customer_id) REFERENCES requesters(phone),
                FOREIGN KEY(machinery_id) REFERENCES machinery(id)
            );

            CREATE TABLE IF NOT EXISTS sms_messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                phone TEXT NOT NULL,
                direction TEXT NOT NULL,
                content TEXT NOT NULL,
                booking_id TEXT,
                created_at TEXT NOT NULL
            );
            """
        )

    # Requesters

    def get_requester(self, phone: str) -> Requester | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT phone, name, email, password, role, created_at FROM requesters WHERE phone = ?",
                (phone,),
            ).fetchone()
        return Requester(**dict(row)) if row else None

    def create_requester(self, requester: Requester) -> Requester:
        """Insert a requester unless the phone is already taken; return the stored row."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO requesters(phone, name, email, password, role, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(phone) DO NOTHING
                """,
                (
                    requester.phone,
                    requester.name,
                    requester.email,
                    requester.password,
                    requester.role,
                    _utc_now_iso(),
                ),
            )
            row = conn.execute(
                "SELECT phone, name, email, password, role, created_at FROM requesters WHERE phone = ?",
                (requester.phone,),
            ).fetchone()
        return Requester(**dict(row))

    def count_requesters(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM requesters").fetchone()
        return int(row["n"])

    # Machinery

    def add_machinery(self, name: str, price: float, is_available: bool = True) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO machinery(name, name_key, price, is_available, created_at) VALUES (?, ?, ?, ?, ?)",
                (name, _name_key(name), price, int(is_available), _utc_now_iso()),
            )
            return int(cur.lastrowid)

    def set_machinery_availability(self, machinery_id: int, is_available: bool) -> None:
        with self._connect() as conn:
            conn.execute(
                "UPDATE machinery SET is_available = ? WHERE id = ?",
                (int(is_available), machinery_id),
            )

    def find_available_machinery(self, name: str) -> Machinery | None:
        """Return the first available machine whose name equals ``name`` ignoring case."""

        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT id, name, price, is_available
                FROM machinery
                WHERE name_key = ? AND is_available = 1
                ORDER BY id ASC
                LIMIT 1
                """,
                (_name_key(name),),
            ).fetchone()
        if row is None:
            return None
        return Machinery(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            is_available=bool(row["is_available"]),
        )

    # Labour

    def add_labour(self, name: str, skills: list[str], is_available: bool = True) -> int:
        normalized = [skill.lower() for skill in skills]
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO labour(name, skills_json, is_available, created_at) VALUES (?, ?, ?, ?)",
                (name, json.dumps(normalized), int(is_available), _utc_now_iso()),
            )
            return int(cur.lastrowid)

    def find_available_labour(self, skill: str) -> LabourEntry | None:
        """Return the first available labour entry listing ``skill``."""

        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT id, name, skills_json, is_available
                FROM labour
                WHERE is_available = 1
                  AND EXISTS (SELECT 1 FROM json_each(labour.skills_json) WHERE value = ?)
                ORDER BY id ASC
                LIMIT 1
                """,
                (skill,),
            ).fetchone()
        if row is None:
            return None
        return LabourEntry(
            id=row["id"],
            name=row["name"],
            skills=json.loads(row["skills_json"]),
            is_available=bool(row["is_available"]),
        )

    # Bookings

    def create_booking(self, booking: Booking) -> Booking:
        now = _utc_now_iso()
        items = [
            {"product_id": item.product_id, "quantity": item.quantity, "price": item.price}
            for item in booking.items
        ]
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO bookings(
                    customer_id, machinery_id, items_json, total_amount, start_date, end_date,
                    duration, delivery_address_json, status, payment_status, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    booking.customer_id,
                    booking.machinery_id,
                    json.dumps(items),
                    booking.total_amount,
                    booking.start_date.isoformat(),
                    booking.end_date.isoformat(),
                    booking.duration,
                    json.dumps(booking.delivery_address),
                    booking.status,
                    booking.payment_status,
                    now,
                ),
            )
            booking_id = int(cur.lastrowid)
        booking.id = booking_id
        booking.created_at = now
        return booking

    def get_booking(self, booking_id: int) -> Booking | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)).fetchone()
        return _row_to_booking(row) if row else None

    def list_bookings(self, customer_id: str, limit: int = 20) -> list[Booking]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM bookings WHERE customer_id = ? ORDER BY id DESC LIMIT ?",
                (customer_id, limit),
            ).fetchall()
        return [_row_to_booking(row) for row in rows]

    # SMS log

    def add_message(
        self, phone: str, direction: str, content: str, booking_id: str | None = None
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO sms_messages(phone, direction, content, booking_id, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (phone, direction, content, booking_id, _utc_now_iso()),
            )

    def get_recent_messages(self, phone: str, limit: int) -> list[dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT direction, content, booking_id
                FROM sms_messages
                WHERE phone = ?
                ORDER BY id DESC
                LIMIT ?
                """,
                (phone, limit),
            ).fetchall()
        return [dict(row) for row in reversed(rows)]


def _row_to_booking(row: sqlite3.Row) -> Booking:
    return Booking(
        id=row["id"],
        customer_id=row["customer_id"],
        machinery_id=row["machinery_id"],
        items=[BookingItem(**item) for item in json.loads(row["items_json"])],
        total_amount=row["total_amount"],
        start_date=date.fromisoformat(row["start_date"]),
        end_date=date.fromisoformat(row["end_date"]),
        duration=row["duration"],
        delivery_address=json.loads(row["delivery_address_json"]),
        status=row["status"],
        payment_status=row["payment_status"],
        created_at=row["created_at"],
    )


def _name_key(name: str) -> str:
    return name.casefold()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
