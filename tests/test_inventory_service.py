import threading

import pytest
from pydantic import ValidationError

from repair_shop_api.app.core.errors import NotFoundError
from repair_shop_api.app.schemas.inventory import (
    CountOperation,
    InventoryCondition,
    InventoryCountUpdate,
    InventoryItemCreate,
    StockLevel,
)
from repair_shop_api.app.services import InventoryService
from tests.helpers import run


def _item(**overrides) -> InventoryItemCreate:
    payload = {"model": "Phone X", "product": "Screen", "condition": "new", "quantity": 5}
    payload.update(overrides)
    return InventoryItemCreate.model_validate(payload)


def test_create_item_starts_at_zero_count(inventory_service):
    item = run(inventory_service.create_item(_item(count=7)))

    assert item.id > 0
    assert item.count == 0
    assert item.quantity == 5
    assert item.condition == InventoryCondition.NEW
    assert item.created_at == item.updated_at


def test_quantity_defaults_to_one(inventory_service):
    data = InventoryItemCreate.model_validate({"model": "Phone X", "product": "Battery", "condition": "used"})
    item = run(inventory_service.create_item(data))
    assert item.quantity == 1


def test_add_and_subtract(inventory_service, clock):
    item = run(inventory_service.create_item(_item()))
    clock.advance(minutes=5)

    added = run(inventory_service.adjust_count(item.id, CountOperation.ADD, 3))
    assert added.count == 3
    assert added.updated_at == clock.now
    assert added.created_at == item.created_at

    subtracted = run(inventory_service.adjust_count(item.id, "subtract", 2))
    assert subtracted.count == 1


def test_subtract_clamps_at_zero(inventory_service):
    item = run(inventory_service.create_item(_item()))
    run(inventory_service.adjust_count(item.id, CountOperation.ADD, 4))

    updated = run(inventory_service.adjust_count(item.id, CountOperation.SUBTRACT, 10))

    assert updated.count == 0


def test_adjust_unknown_item_raises_not_found(inventory_service):
    run(inventory_service.create_item(_item()))

    with pytest.raises(NotFoundError) as exc:
        run(inventory_service.adjust_count(42, CountOperation.ADD, 1))
    assert str(exc.value) == "Inventory item 42 not found"


def test_adjust_out_of_range_id_raises_not_found(inventory_service):
    run(inventory_service.create_item(_item()))

    with pytest.raises(NotFoundError):
        run(inventory_service.adjust_count(10**20, CountOperation.ADD, 1))
    assert [i.count for i in run(inventory_service.list_items())] == [0]


def test_adjust_rejects_non_positive_amount(inventory_service):
    item = run(inventory_service.create_item(_item()))
    with pytest.raises(ValueError):
        run(inventory_service.adjust_count(item.id, CountOperation.ADD, 0))


def test_concurrent_adjustments_are_not_lost(db):
    service = InventoryService(db)
    item = run(service.create_item(_item()))
    errors = []

    def worker(operation):
        try:
            for _ in range(10):
                run(service.adjust_count(item.id, operation, 1))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(CountOperation.ADD,)) for _ in range(6)]
    threads += [threading.Thread(target=worker, args=(CountOperation.SUBTRACT,)) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    final = run(service.list_items())[0]
    # Clamping can absorb early subtractions, so the total lies between the
    # two extremes but never below zero.
    assert 40 <= final.count <= 60


def test_concurrent_additions_sum_exactly(db):
    service = InventoryService(db)
    item = run(service.create_item(_item()))

    def worker():
        for _ in range(10):
            run(service.adjust_count(item.id, CountOperation.ADD, 2))

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert run(service.list_items())[0].count == 100


def test_list_filters(inventory_service):
    screen = run(inventory_service.create_item(_item(quantity=2)))
    battery = run(inventory_service.create_item(_item(product="Battery", condition="used", quantity=7)))
    tablet = run(
        inventory_service.create_item(_item(model="Tablet S", condition="refurbished", quantity=12))
    )

    assert [i.id for i in run(inventory_service.list_items())] == [screen.id, battery.id, tablet.id]
    assert [i.id for i in run(inventory_service.list_items(q="batt"))] == [battery.id]
    assert [i.id for i in run(inventory_service.list_items(q="tablet"))] == [tablet.id]
    assert [i.id for i in run(inventory_service.list_items(condition=InventoryCondition.USED))] == [battery.id]
    assert [i.id for i in run(inventory_service.list_items(stock_level=StockLevel.LOW))] == [screen.id]
    assert [i.id for i in run(inventory_service.list_items(stock_level=StockLevel.MEDIUM))] == [battery.id]
    assert [i.id for i in run(inventory_service.list_items(stock_level=StockLevel.HIGH))] == [tablet.id]
    assert run(inventory_service.list_items(q="screen", condition=InventoryCondition.USED)) == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"model": ""},
        {"product": "  "},
        {"condition": "broken"},
        {"quantity": 0},
        {"quantity": -3},
        {"quantity": 10**20},
    ],
)
def test_item_validation_rejects_bad_input(overrides):
    with pytest.raises(ValidationError):
        _item(**overrides)


@pytest.mark.parametrize(
    "payload",
    [
        {"operation": "add", "amount": 0},
        {"operation": "subtract", "amount": -1},
        {"operation": "add", "amount": 1.5},
        {"operation": "add", "amount": 10**20},
        {"operation": "multiply", "amount": 1},
        {"operation": "add"},
    ],
)
def test_count_update_validation(payload):
    with pytest.raises(ValidationError):
        InventoryCountUpdate.model_validate(payload)
