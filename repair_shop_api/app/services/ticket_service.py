"""
Business logic for repair service tickets.

``TicketService`` is the only writer of the ``services`` table.  It
assigns serial numbers, forces new tickets into ``in_progress`` and
moves them to ``completed`` or ``returned``, stamping the matching
timestamp.  A ticket leaves ``in_progress`` exactly once: the status
update is conditional on the current status, so a second transition
(or a concurrent conflicting one) is rejected instead of stamping a
second timestamp.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Optional

from ..core.db import MAX_ROW_ID, Database, like_pattern, utcnow
from ..core.errors import InvalidTransitionError, NotFoundError, StoreError
from ..schemas.service import (
    DailySummary,
    ServiceStatus,
    ServiceTicketCreate,
    ServiceTicketRead,
    ServiceTransition,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

_SELECT_TICKET = """
    SELECT id, serial_number, customer_name, phone_number, device_model,
           fault_description, service_date, estimated_cost, status,
           created_at, completed_at, returned_at
    FROM services
"""

_TIMESTAMP_COLUMNS = {
    ServiceTransition.COMPLETED: "completed_at",
    ServiceTransition.RETURNED: "returned_at",
}


def _row_to_ticket(row: sqlite3.Row) -> ServiceTicketRead:
    return ServiceTicketRead(
        id=row["id"],
        serial_number=row["serial_number"],
        customer_name=row["customer_name"],
        phone_number=row["phone_number"],
        device_model=row["device_model"],
        fault_description=row["fault_description"],
        service_date=row["service_date"],
        estimated_cost=Decimal(row["estimated_cost"]),
        status=row["status"],
        created_at=row["created_at"],
        completed_at=row["completed_at"],
        returned_at=row["returned_at"],
    )


class TicketService:
    """Repository for service tickets.

    Parameters
    ----------
    db : Database
        Store handle shared with the rest of the application.
    serial_prefix : str
        Leading characters of generated serial numbers.
    clock : Callable[[], datetime]
        Source of the current UTC time; replaced in tests.
    """

    def __init__(
        self,
        db: Database,
        serial_prefix: str = "SN",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.db = db
        self.serial_prefix = serial_prefix
        self.clock = clock or utcnow

    def _next_serial(self, conn: sqlite3.Connection, now: datetime) -> str:
        """Return ``<prefix><YYYYMMDD><seq>`` for the next ticket created today.

        Must run inside an immediate transaction so two writers cannot read
        the same sequence value.  Tickets are never deleted, so counting the
        serials issued today gives the next free sequence number.
        """
        day_prefix = f"{self.serial_prefix}{now.strftime('%Y%m%d')}"
        issued = conn.execute(
            "SELECT COUNT(*) FROM services WHERE substr(serial_number, 1, ?) = ?",
            (len(day_prefix), day_prefix),
        ).fetchone()[0]
        return f"{day_prefix}{issued + 1:03d}"

    async def create_ticket(self, data: ServiceTicketCreate) -> ServiceTicketRead:
        """Persist a new ticket in ``in_progress`` and return it."""
        now = self.clock()
        try:
            with self.db.connection(immediate=True) as conn:
                serial_number = self._next_serial(conn, now)
                cursor = conn.execute(
                    """
                    INSERT INTO services (
                        serial_number, customer_name, phone_number, device_model,
                        fault_description, service_date, estimated_cost, status, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        serial_number,
                        data.customer_name,
                        data.phone_number,
                        data.device_model,
                        data.fault_description,
                        data.service_date.isoformat(),
                        str(data.estimated_cost.quantize(CENTS)),
                        ServiceStatus.IN_PROGRESS.value,
                        now.isoformat(),
                    ),
                )
                row = conn.execute(_SELECT_TICKET + " WHERE id = ?", (cursor.lastrowid,)).fetchone()
        except sqlite3.Error as e:
            logger.exception("Failed to create service for %s", data.customer_name)
            raise StoreError("Failed to create service") from e
        logger.info("Created service %s (id=%s)", serial_number, row["id"])
        return _row_to_ticket(row)

    async def list_tickets(
        self,
        status: Optional[ServiceStatus] = None,
        service_date: Optional[date] = None,
        q: Optional[str] = None,
    ) -> List[ServiceTicketRead]:
        """Return tickets matching the given filters in insertion order.

        - ``service_date``: only tickets *completed* for that service date
          (the daily revenue report).  Takes precedence over ``status``.
        - ``status``: tickets currently in that status.
        - neither: every ticket.
        - ``q``: optional case-insensitive substring matched against the
          customer name, device model, phone number and serial number.
        """
        where_clauses: List[str] = []
        params: list = []
        if service_date is not None:
            where_clauses.append("service_date = ?")
            params.append(service_date.isoformat())
            where_clauses.append("status = ?")
            params.append(ServiceStatus.COMPLETED.value)
        elif status is not None:
            where_clauses.append("status = ?")
            params.append(ServiceStatus(status).value)
        if q:
            pattern = like_pattern(q.strip())
            where_clauses.append(
                "(customer_name LIKE ? ESCAPE '\\' OR device_model LIKE ? ESCAPE '\\'"
                " OR phone_number LIKE ? ESCAPE '\\' OR serial_number LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern] * 4)
        query = _SELECT_TICKET
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY id"
        try:
            with self.db.connection() as conn:
                rows = conn.execute(query, tuple(params)).fetchall()
        except sqlite3.Error as e:
            logger.exception("Failed to fetch services")
            raise StoreError("Failed to fetch services") from e
        return [_row_to_ticket(row) for row in rows]

    async def list_by_status(self, status: ServiceStatus) -> List[ServiceTicketRead]:
        return await self.list_tickets(status=status)

    async def list_by_date(self, service_date: date) -> List[ServiceTicketRead]:
        return await self.list_tickets(service_date=service_date)

    async def list_all(self) -> List[ServiceTicketRead]:
        return await self.list_tickets()

    async def transition(self, ticket_id: int, target: ServiceTransition) -> ServiceTicketRead:
        """Move an ``in_progress`` ticket to ``completed`` or ``returned``.

        Sets ``completed_at`` or ``returned_at`` to the current time.  Raises
        ``NotFoundError`` for an unknown id and ``InvalidTransitionError`` if
        the ticket has already left ``in_progress``; in both cases nothing
        is written.
        """
        if not 0 < ticket_id <= MAX_ROW_ID:
            raise NotFoundError("Service", ticket_id)
        target = ServiceTransition(target)
        column = _TIMESTAMP_COLUMNS[target]
        now = self.clock()
        try:
            with self.db.connection() as conn:
                cursor = conn.execute(
                    f"UPDATE services SET status = ?, {column} = ? WHERE id = ? AND status = ?",
                    (target.value, now.isoformat(), ticket_id, ServiceStatus.IN_PROGRESS.value),
                )
                updated = cursor.rowcount
                row = conn.execute(_SELECT_TICKET + " WHERE id = ?", (ticket_id,)).fetchone()
        except sqlite3.Error as e:
            logger.exception("Failed to update service %s", ticket_id)
            raise StoreError("Failed to update service") from e
        if row is None:
            raise NotFoundError("Service", ticket_id)
        if not updated:
            raise InvalidTransitionError(ticket_id, row["status"], target.value)
        logger.info("Service %s marked %s", row["serial_number"], target.value)
        return _row_to_ticket(row)

    async def daily_summary(self, service_date: date) -> DailySummary:
        """Total and average estimated cost of tickets completed for ``service_date``."""
        tickets = await self.list_by_date(service_date)
        total = sum((ticket.estimated_cost for ticket in tickets), Decimal("0"))
        average = total / len(tickets) if tickets else Decimal("0")
        return DailySummary(
            service_date=service_date,
            completed_count=len(tickets),
            total_revenue=total.quantize(CENTS, rounding=ROUND_HALF_UP),
            average_ticket=average.quantize(CENTS, rounding=ROUND_HALF_UP),
        )
