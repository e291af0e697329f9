"""
Pydantic models for repair service tickets.

``ServiceTicketBase`` holds the intake fields shared by the create
payload and the response model.  ``ServiceTicketRead`` adds the
server-managed fields (id, serial number, status and timestamps).
Status changes go through ``ServiceStatusUpdate`` which only accepts the
two terminal statuses.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelInputModel, CamelModel


class ServiceStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    RETURNED = "returned"


class ServiceTransition(str, Enum):
    """Statuses a ticket may be moved to from ``in_progress``."""

    COMPLETED = "completed"
    RETURNED = "returned"


class ServiceTicketBase(CamelModel):
    customer_name: str = Field(..., min_length=1, examples=["Jane Doe"])
    phone_number: str = Field(..., min_length=1, max_length=20, examples=["555-0100"])
    device_model: str = Field(..., min_length=1, examples=["Phone X"])
    fault_description: str = Field(..., min_length=1, examples=["cracked screen"])
    service_date: date = Field(..., examples=["2024-05-01"])
    estimated_cost: Decimal = Field(
        ..., ge=0, max_digits=10, decimal_places=2, examples=["149.99"]
    )


class ServiceTicketCreate(ServiceTicketBase, CamelInputModel):
    """Schema for the intake form.

    ``status``, ``serialNumber`` and the timestamps are assigned by the
    server; any values supplied for them are ignored.
    """


class ServiceTicketRead(ServiceTicketBase):
    """Schema for a persisted service ticket."""

    id: int
    serial_number: str
    status: ServiceStatus
    created_at: datetime
    completed_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None


class ServiceStatusUpdate(CamelInputModel):
    status: ServiceTransition = Field(..., description="Target status: completed or returned")


class DailySummary(CamelModel):
    """Revenue figures for tickets completed on a given service date."""

    service_date: date
    completed_count: int
    total_revenue: Decimal
    average_ticket: Decimal
