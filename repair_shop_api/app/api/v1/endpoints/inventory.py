"""
Inventory endpoints for API v1.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from repair_shop_api.app.api.v1.deps import get_inventory_service
from repair_shop_api.app.core.errors import NotFoundError
from repair_shop_api.app.schemas.inventory import (
    InventoryCondition,
    InventoryCountUpdate,
    InventoryItemCreate,
    InventoryItemRead,
    StockLevel,
)
from repair_shop_api.app.services import InventoryService

router = APIRouter()


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    item: InventoryItemCreate,
    inventory: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    """Add an item to the inventory.  Its count always starts at zero."""
    return await inventory.create_item(item)


@router.get("", response_model=List[InventoryItemRead])
async def list_inventory(
    q: Optional[str] = Query(None, max_length=100, description="Search model or product"),
    condition: Optional[InventoryCondition] = Query(None),
    stock_level: Optional[StockLevel] = Query(
        None,
        alias="stockLevel",
        description="Quantity band: low (<5), medium (5-9) or high (10+)",
    ),
    inventory: InventoryService = Depends(get_inventory_service),
) -> List[InventoryItemRead]:
    return await inventory.list_items(q=q, condition=condition, stock_level=stock_level)


@router.patch("/{item_id}/count", response_model=InventoryItemRead)
async def update_inventory_count(
    item_id: int,
    update: InventoryCountUpdate,
    inventory: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    """Add to or subtract from an item's running count.

    Subtracting more than the current count leaves it at zero.
    """
    try:
        return await inventory.adjust_count(item_id, update.operation, update.amount)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
