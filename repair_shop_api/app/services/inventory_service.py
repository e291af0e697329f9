"""
Business logic for the parts inventory.

``InventoryService`` owns the ``inventory`` table.  New items always
start with a count of zero.  Count adjustments are a single ``UPDATE``
statement evaluated by SQLite, so concurrent adjustments of the same
item are serialised by the store and none of them is lost; subtraction
is clamped at zero inside the statement.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Callable, List, Optional

from ..core.db import MAX_ROW_ID, Database, like_pattern, utcnow
from ..core.errors import NotFoundError, StoreError
from ..schemas.inventory import (
    HIGH_STOCK_FROM,
    LOW_STOCK_BELOW,
    MAX_UNITS,
    CountOperation,
    InventoryCondition,
    InventoryItemCreate,
    InventoryItemRead,
    StockLevel,
)

logger = logging.getLogger(__name__)

_SELECT_ITEM = """
    SELECT id, model, product, condition, quantity, count, created_at, updated_at
    FROM inventory
"""

_COUNT_UPDATES = {
    CountOperation.ADD: "UPDATE inventory SET count = count + ?, updated_at = ? WHERE id = ?",
    CountOperation.SUBTRACT: "UPDATE inventory SET count = MAX(count - ?, 0), updated_at = ? WHERE id = ?",
}

_STOCK_LEVEL_CLAUSES = {
    StockLevel.LOW: ("quantity < ?", (LOW_STOCK_BELOW,)),
    StockLevel.MEDIUM: ("quantity >= ? AND quantity < ?", (LOW_STOCK_BELOW, HIGH_STOCK_FROM)),
    StockLevel.HIGH: ("quantity >= ?", (HIGH_STOCK_FROM,)),
}


def _row_to_item(row: sqlite3.Row) -> InventoryItemRead:
    return InventoryItemRead(
        id=row["id"],
        model=row["model"],
        product=row["product"],
        condition=row["condition"],
        quantity=row["quantity"],
        count=row["count"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class InventoryService:
    """Repository for inventory items."""

    def __init__(self, db: Database, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.db = db
        self.clock = clock or utcnow

    async def create_item(self, data: InventoryItemCreate) -> InventoryItemRead:
        """Persist a new item with ``count = 0`` and return it."""
        now = self.clock().isoformat()
        try:
            with self.db.connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO inventory (model, product, condition, quantity, count, created_at, updated_at)
                    VALUES (?, ?, ?, ?, 0, ?, ?)
                    """,
                    (
                        data.model,
                        data.product,
                        InventoryCondition(data.condition).value,
                        data.quantity,
                        now,
                        now,
                    ),
                )
                row = conn.execute(_SELECT_ITEM + " WHERE id = ?", (cursor.lastrowid,)).fetchone()
        except sqlite3.Error as e:
            logger.exception("Failed to create inventory item %s / %s", data.model, data.product)
            raise StoreError("Failed to create inventory item") from e
        logger.info("Created inventory item %s (%s / %s)", row["id"], row["model"], row["product"])
        return _row_to_item(row)

    async def list_items(
        self,
        q: Optional[str] = None,
        condition: Optional[InventoryCondition] = None,
        stock_level: Optional[StockLevel] = None,
    ) -> List[InventoryItemRead]:
        """Return inventory items in insertion order.

        - ``q``: case-insensitive substring of the model or product.
        - ``condition``: only items in that condition.
        - ``stock_level``: quantity band, ``low`` (< 5), ``medium`` (5-9)
          or ``high`` (10 and above).
        """
        where_clauses: List[str] = []
        params: list = []
        if q:
            pattern = like_pattern(q.strip())
            where_clauses.append("(model LIKE ? ESCAPE '\\' OR product LIKE ? ESCAPE '\\')")
            params.extend([pattern, pattern])
        if condition is not None:
            where_clauses.append("condition = ?")
            params.append(InventoryCondition(condition).value)
        if stock_level is not None:
            clause, values = _STOCK_LEVEL_CLAUSES[StockLevel(stock_level)]
            where_clauses.append(clause)
            params.extend(values)
        query = _SELECT_ITEM
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY id"
        try:
            with self.db.connection() as conn:
                rows = conn.execute(query, tuple(params)).fetchall()
        except sqlite3.Error as e:
            logger.exception("Failed to fetch inventory")
            raise StoreError("Failed to fetch inventory") from e
        return [_row_to_item(row) for row in rows]

    async def adjust_count(
        self, item_id: int, operation: CountOperation, amount: int
    ) -> InventoryItemRead:
        """Add ``amount`` to, or subtract it from, an item's running count.

        Subtraction never drives the count below zero.  Raises
        ``NotFoundError`` if the item does not exist.
        """
        if not 0 < amount <= MAX_UNITS:
            raise ValueError(f"amount must be between 1 and {MAX_UNITS}")
        if not 0 < item_id <= MAX_ROW_ID:
            raise NotFoundError("Inventory item", item_id)
        operation = CountOperation(operation)
        now = self.clock().isoformat()
        try:
            with self.db.connection() as conn:
                cursor = conn.execute(_COUNT_UPDATES[operation], (amount, now, item_id))
                if cursor.rowcount == 0:
                    raise NotFoundError("Inventory item", item_id)
                row = conn.execute(_SELECT_ITEM + " WHERE id = ?", (item_id,)).fetchone()
        except sqlite3.Error as e:
            logger.exception("Failed to update inventory item %s", item_id)
            raise StoreError("Failed to update inventory count") from e
        logger.info(
            "Inventory item %s: %s %s -> count %s", item_id, operation.value, amount, row["count"]
        )
        return _row_to_item(row)
