"""
Top‑level router for version 1 of the API.

Service tickets are exposed under ``/services`` and parts inventory
under ``/inventory``.  ``create_app`` mounts this router under the
configured ``API_PREFIX``.
"""

from fastapi import APIRouter

from .endpoints import inventory, tickets

router = APIRouter()

router.include_router(tickets.router, prefix="/services", tags=["services"])
router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
