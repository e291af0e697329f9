from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from repair_shop_api.app.core.config import Settings
from repair_shop_api.app.core.db import Database
from repair_shop_api.app.main import create_app
from repair_shop_api.app.services import InventoryService, TicketService
from tests.helpers import FrozenClock


@pytest.fixture()
def clock():
    return FrozenClock(datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def db(tmp_path):
    database = Database(str(tmp_path / "store.db"))
    database.init_db()
    yield database
    database.close()


@pytest.fixture()
def ticket_service(db, clock):
    return TicketService(db, serial_prefix="SN", clock=clock)


@pytest.fixture()
def inventory_service(db, clock):
    return InventoryService(db, clock=clock)


@pytest.fixture()
def app_settings(tmp_path):
    return Settings(
        database_url=str(tmp_path / "api.db"),
        api_prefix="",
        serial_prefix="SN",
        log_level="WARNING",
        log_file="",
    )


@pytest.fixture()
def app(app_settings):
    return create_app(app_settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
