"""
FastAPI dependencies that hand repository services to the routes.

The services are constructed once in ``create_app`` and stored on
``app.state``; routes never open database connections themselves.
"""

from fastapi import Request

from repair_shop_api.app.services import InventoryService, TicketService


def get_ticket_service(request: Request) -> TicketService:
    return request.app.state.ticket_service


def get_inventory_service(request: Request) -> InventoryService:
    return request.app.state.inventory_service
