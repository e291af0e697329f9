"""
Service ticket endpoints for API v1.

Tickets are created through the intake form, listed by status or by
service date, and closed by marking them completed or returned.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from repair_shop_api.app.api.v1.deps import get_ticket_service
from repair_shop_api.app.core.errors import InvalidTransitionError, NotFoundError
from repair_shop_api.app.schemas.service import (
    DailySummary,
    ServiceStatus,
    ServiceStatusUpdate,
    ServiceTicketCreate,
    ServiceTicketRead,
)
from repair_shop_api.app.services import TicketService

router = APIRouter()


@router.post("", response_model=ServiceTicketRead, status_code=status.HTTP_201_CREATED)
async def create_service(
    ticket: ServiceTicketCreate,
    tickets: TicketService = Depends(get_ticket_service),
) -> ServiceTicketRead:
    """Register a device for repair.

    The ticket starts ``in_progress`` with a freshly generated serial
    number.  Any ``status`` or timestamp sent by the client is ignored.
    """
    return await tickets.create_ticket(ticket)


@router.get("", response_model=List[ServiceTicketRead])
async def list_services(
    status_filter: Optional[ServiceStatus] = Query(None, alias="status"),
    service_date: Optional[date] = Query(
        None,
        alias="date",
        description="Return tickets completed for this service date (YYYY-MM-DD)",
    ),
    q: Optional[str] = Query(
        None,
        max_length=100,
        description="Search customer name, device model, phone or serial number",
    ),
    tickets: TicketService = Depends(get_ticket_service),
) -> List[ServiceTicketRead]:
    """List service tickets.

    - **date**: completed tickets for that service date.  When given,
      ``status`` is ignored.
    - **status**: tickets currently in that status.
    - neither: every ticket.
    """
    return await tickets.list_tickets(status=status_filter, service_date=service_date, q=q)


@router.get("/daily-summary", response_model=DailySummary)
async def get_daily_summary(
    service_date: date = Query(..., alias="date"),
    tickets: TicketService = Depends(get_ticket_service),
) -> DailySummary:
    """Revenue summary of the tickets completed for a service date."""
    return await tickets.daily_summary(service_date)


@router.patch("/{ticket_id}", response_model=ServiceTicketRead)
async def update_service_status(
    ticket_id: int,
    update: ServiceStatusUpdate,
    tickets: TicketService = Depends(get_ticket_service),
) -> ServiceTicketRead:
    """Mark an in-progress ticket as completed or returned.

    Returns 404 for an unknown ticket and 409 if the ticket has already
    been completed or returned.
    """
    try:
        return await tickets.transition(ticket_id, update.status)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
