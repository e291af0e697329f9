"""
Pydantic models for inventory items.

An item is a (model, product, condition) combination with a target
``quantity`` chosen by the shop and a running ``count`` managed by the
server.  The count is never accepted from clients: it starts at zero and
only changes through ``InventoryCountUpdate``.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import CamelInputModel, CamelModel


class InventoryCondition(str, Enum):
    NEW = "new"
    USED = "used"
    REFURBISHED = "refurbished"


class CountOperation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"


# Quantity bands used by the ``stockLevel`` filter.
LOW_STOCK_BELOW = 5
HIGH_STOCK_FROM = 10

# Upper bound for a quantity or a single count adjustment.
MAX_UNITS = 1_000_000


class StockLevel(str, Enum):
    LOW = "low"  # quantity < 5
    MEDIUM = "medium"  # 5 <= quantity < 10
    HIGH = "high"  # quantity >= 10


class InventoryItemBase(CamelModel):
    model: str = Field(..., min_length=1, examples=["Phone X"])
    product: str = Field(..., min_length=1, examples=["Screen"])
    condition: InventoryCondition = Field(..., examples=["new"])
    quantity: int = Field(1, ge=1, le=MAX_UNITS, examples=[5])


class InventoryItemCreate(InventoryItemBase, CamelInputModel):
    """Schema for adding an item.  A client-supplied ``count`` is ignored."""


class InventoryItemRead(InventoryItemBase):
    id: int
    count: int = Field(..., ge=0)
    created_at: datetime
    updated_at: datetime


class InventoryCountUpdate(CamelInputModel):
    """Schema for adjusting the running count of an item.

    ``amount`` must be a positive whole number no larger than
    ``MAX_UNITS``.  Subtracting more than the current count leaves the
    count at zero.
    """

    operation: CountOperation
    amount: int = Field(..., gt=0, le=MAX_UNITS, examples=[1])
