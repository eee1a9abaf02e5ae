import os
import tempfile
from decimal import Decimal

# Configure the app before anything from tableside is imported
_tmpdir = tempfile.mkdtemp(prefix="tableside-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ADMIN_PASSWORD"] = "letmein"
os.environ["ADMIN_PASSWORD_HASH"] = ""
os.environ["TIMEZONE"] = "UTC"
os.environ["ORDER_STATUS_POLICY"] = "forward"
os.environ["APP_ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from tableside.db.session import SessionLocal, create_db, drop_db
from tableside.main import app
from tableside.services import catalog

ADMIN_PASSWORD = "letmein"


@pytest.fixture(autouse=True)
def fresh_db():
    drop_db()
    create_db()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    resp = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def menu(db):
    """Two categories and three items; 'Old Soup' is inactive."""
    mains = catalog.create_category(db, {"name": "Mains", "display_order": 1})
    drinks = catalog.create_category(db, {"name": "Drinks", "display_order": 2})
    burger = catalog.create_menu_item(db, {"name": "Burger", "price": Decimal("10.00"), "category_id": mains.id})
    lemonade = catalog.create_menu_item(db, {"name": "Lemonade", "price": Decimal("5.00"), "category_id": drinks.id})
    soup = catalog.create_menu_item(db, {"name": "Old Soup", "price": Decimal("4.50"), "category_id": mains.id, "is_active": False})
    return {
        "mains": mains.id,
        "drinks": drinks.id,
        "burger": burger.id,
        "lemonade": lemonade.id,
        "soup": soup.id,
    }


@pytest.fixture
def order_payload(menu):
    return {
        "tableNumber": 7,
        "items": [
            {"menuItemId": menu["burger"], "quantity": 2, "unitPrice": 10.00},
            {"menuItemId": menu["lemonade"], "quantity": 1, "unitPrice": 5.00},
        ],
        "paymentMethod": "cash",
        "specialInstructions": "no onions",
    }
