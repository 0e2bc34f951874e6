"""
Shared pytest fixtures: in-memory SQLite session, fake catalog,
in-memory lock store and a mocked notifier.
"""

import copy
import os
from decimal import Decimal
from unittest.mock import Mock

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_API_TOKEN"] = "test-admin-token"
os.environ["ORDER_TRANSITION_POLICY"] = "strict"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.data.database import Base
from storefront.repos.cart_repo import CartLine, CartRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.product_validation import ProductValidationService


CATALOG = {
    1: {
        "id": 1,
        "name": "Keyboard",
        "status": "ACTIVE",
        "sku": "KB-STD",
        "base_price": 100.00,
        "inventory_tracking": True,
        "stock": 10,
        "variants": [
            {"id": 11, "name": "ISO layout", "sku": "KB-ISO", "price": 120.00, "stock": 2},
        ],
    },
    2: {
        "id": 2,
        "name": "Mouse",
        "status": "ACTIVE",
        "sku": "MS-STD",
        "base_price": 25.50,
        "inventory_tracking": True,
        "stock": 5,
        "variants": [],
    },
    3: {
        "id": 3,
        "name": "Monitor",
        "status": "ACTIVE",
        "sku": "MON-27",
        "base_price": 300.00,
        "inventory_tracking": False,
        "stock": 0,
        "variants": [],
    },
    4: {
        "id": 4,
        "name": "Webcam",
        "status": "INACTIVE",
        "sku": "CAM-HD",
        "base_price": 80.00,
        "inventory_tracking": True,
        "stock": 3,
        "variants": [],
    },
}


class FakeProductClient:
    """Stands in for the catalog HTTP service."""

    def __init__(self, products: dict):
        self.products = copy.deepcopy(products)
        self.calls = []

    def fetch_product(self, product_id: int) -> dict | None:
        self.calls.append(product_id)
        product = self.products.get(product_id)
        return copy.deepcopy(product) if product else None


class InMemoryRedis:
    """The two redis calls LockService makes."""

    def __init__(self):
        self.store = {}

    def set(self, name, value, nx=False, ex=None):
        if nx and name in self.store:
            return None
        self.store[name] = value
        return True

    def eval(self, script, numkeys, key, token):
        if self.store.get(key) == token:
            del self.store[key]
            return 1
        return 0


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def product_client():
    return FakeProductClient(CATALOG)


@pytest.fixture
def product_validation(product_client):
    return ProductValidationService(product_client)


@pytest.fixture
def redis_store():
    return InMemoryRedis()


@pytest.fixture
def lock_service(redis_store):
    return LockService(client=redis_store)


@pytest.fixture
def notifier():
    return Mock(spec=NotificationService)


@pytest.fixture
def order_service(db, product_validation, lock_service, notifier):
    return OrderService(
        db=db,
        product_validation=product_validation,
        lock_service=lock_service,
        notification_service=notifier,
    )


@pytest.fixture
def cart_service(db, product_validation, order_service):
    return CartService(db=db, product_validation=product_validation, order_service=order_service)


@pytest.fixture
def seed_cart(db):
    """
    Writes cart lines straight through the store, bypassing catalog checks,
    so tests can plant stale prices or products that are no longer valid.
    """

    def _seed(user_id: int, *lines: tuple):
        repo = CartRepo(db)
        cart = repo.get_or_create_for_user(user_id)
        cart_lines = [
            CartLine(
                product_id=product_id,
                variant_id=variant_id,
                quantity=quantity,
                unit_price=Decimal(str(price)),
            )
            for product_id, variant_id, quantity, price in lines
        ]
        repo.save(cart, cart_lines)
        repo.commit()
        return cart

    return _seed
