"""
Domain exceptions raised by the repository layer.

Routers translate ``NotFoundError`` and ``InvalidTransitionError`` into
``HTTPException`` responses.  ``StoreError`` is handled once by an
application-level exception handler registered in ``main`` and always
carries a generic message safe to return to clients.
"""


class ServiceError(Exception):
    """Base class for errors raised by repository services."""


class NotFoundError(ServiceError, LookupError):
    """The requested record does not exist."""

    def __init__(self, entity: str, object_id: int) -> None:
        self.entity = entity
        self.object_id = object_id
        super().__init__(f"{entity} {object_id} not found")


class InvalidTransitionError(ServiceError):
    """A service ticket cannot move to the requested status."""

    def __init__(self, ticket_id: int, current: str, target: str) -> None:
        self.ticket_id = ticket_id
        self.current = current
        self.target = target
        super().__init__(
            f"Service {ticket_id} is already {current} and cannot be marked {target}"
        )


class StoreError(ServiceError):
    """The database could not complete an operation."""
