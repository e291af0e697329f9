"""
Repository services.

Each service wraps one table of the store and owns the rules for
mutating it: ``TicketService`` for repair tickets and
``InventoryService`` for parts inventory.  Instances are built by
``create_app`` around a shared ``Database`` handle.
"""

from .inventory_service import InventoryService  # noqa: F401
from .ticket_service import TicketService  # noqa: F401
