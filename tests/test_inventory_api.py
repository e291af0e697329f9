ITEM = {"model": "Phone X", "product": "Screen", "condition": "new", "quantity": 5}


def _create(client, **overrides):
    response = client.post("/inventory", json={**ITEM, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_item(client):
    response = client.post("/inventory", json=ITEM)

    assert response.status_code == 201
    body = response.json()
    assert body["count"] == 0
    assert body["quantity"] == 5
    assert body["condition"] == "new"
    assert body["model"] == "Phone X"
    assert body["product"] == "Screen"
    assert body["createdAt"] and body["updatedAt"]


def test_create_item_ignores_client_count(client):
    assert _create(client, count=25)["count"] == 0


def test_create_item_validation_error(client):
    response = client.post(
        "/inventory",
        json={"model": "Phone X", "product": "", "condition": "mint", "quantity": 0},
    )

    assert response.status_code == 400
    fields = {err["field"] for err in response.json()["errors"]}
    assert fields == {"product", "condition", "quantity"}


def test_subtract_below_zero_clamps(client):
    item = _create(client)

    response = client.patch(f"/inventory/{item['id']}/count", json={"operation": "subtract", "amount": 10})

    assert response.status_code == 200
    assert response.json()["count"] == 0


def test_add_then_subtract(client):
    item = _create(client)

    added = client.patch(f"/inventory/{item['id']}/count", json={"operation": "add", "amount": 3}).json()
    assert added["count"] == 3
    assert added["quantity"] == 5

    subtracted = client.patch(f"/inventory/{item['id']}/count", json={"operation": "subtract", "amount": 1}).json()
    assert subtracted["count"] == 2


def test_adjust_unknown_item_returns_404(client):
    item = _create(client)
    client.patch(f"/inventory/{item['id']}/count", json={"operation": "add", "amount": 2})

    response = client.patch("/inventory/999/count", json={"operation": "add", "amount": 1})

    assert response.status_code == 404
    assert response.json()["detail"] == "Inventory item 999 not found"
    assert [i["count"] for i in client.get("/inventory").json()] == [2]


def test_adjust_validation_error(client):
    item = _create(client)

    for payload in (
        {"operation": "add", "amount": 0},
        {"operation": "add", "amount": -2},
        {"operation": "remove", "amount": 1},
        {"amount": 1},
    ):
        response = client.patch(f"/inventory/{item['id']}/count", json=payload)
        assert response.status_code == 400, payload

    assert client.get("/inventory").json()[0]["count"] == 0


def test_list_inventory_with_filters(client):
    screen = _create(client, quantity=2)
    battery = _create(client, product="Battery", condition="used", quantity=6)
    tablet = _create(client, model="Tablet S", condition="refurbished", quantity=10)

    assert [i["id"] for i in client.get("/inventory").json()] == [screen["id"], battery["id"], tablet["id"]]
    assert [i["id"] for i in client.get("/inventory", params={"q": "BATT"}).json()] == [battery["id"]]
    assert [i["id"] for i in client.get("/inventory", params={"condition": "refurbished"}).json()] == [tablet["id"]]
    assert [i["id"] for i in client.get("/inventory", params={"stockLevel": "low"}).json()] == [screen["id"]]
    assert [i["id"] for i in client.get("/inventory", params={"stockLevel": "medium"}).json()] == [battery["id"]]
    assert [i["id"] for i in client.get("/inventory", params={"stockLevel": "high"}).json()] == [tablet["id"]]


def test_list_inventory_rejects_unknown_filter_values(client):
    assert client.get("/inventory", params={"condition": "broken"}).status_code == 400
    assert client.get("/inventory", params={"stockLevel": "huge"}).status_code == 400


def test_oversized_values_are_rejected(client):
    item = _create(client)

    response = client.post("/inventory", json={**ITEM, "quantity": 10**20})
    assert response.status_code == 400
    assert [err["field"] for err in response.json()["errors"]] == ["quantity"]

    response = client.patch(f"/inventory/{item['id']}/count", json={"operation": "add", "amount": 10**20})
    assert response.status_code == 400
    assert [err["field"] for err in response.json()["errors"]] == ["amount"]

    assert [i["count"] for i in client.get("/inventory").json()] == [0]


def test_adjust_out_of_range_id_returns_404(client):
    item = _create(client)

    response = client.patch("/inventory/99999999999999999999/count", json={"operation": "add", "amount": 1})

    assert response.status_code == 404
    assert response.json()["detail"] == "Inventory item 99999999999999999999 not found"
    assert [(i["id"], i["count"]) for i in client.get("/inventory").json()] == [(item["id"], 0)]
