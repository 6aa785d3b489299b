"""
Pytest fixtures for the partsdesk test suite.

Every test runs against a fresh in-memory SQLite database. The factory
fixtures insert and commit rows directly, so services and HTTP routes see
them exactly as they would see data written by another request.
"""

from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from partsdesk.database import Base, get_db, load_models
from partsdesk.models.client import Client
from partsdesk.models.order import Order, OrderItem, OrderStatus, Carrier
from partsdesk.models.pricing import ClientProductPricing
from partsdesk.models.product import Product, ProductSubstitute
from partsdesk.models.stock import Stock, Warehouse
from partsdesk.models.users import User, UserRole

load_models()

_seq = count(1)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite leaves foreign keys unchecked unless asked, PostgreSQL always checks them
    @event.listens_for(eng, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """HTTP client on the app with ``get_db`` bound to the test database."""
    from fastapi.testclient import TestClient
    from partsdesk.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.REPRESENTATIVE, **kw):
        user = User(
            email=kw.pop("email", f"user{next(_seq)}@example.com"),
            password_hash="x",
            role=role,
            **kw,
        )
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def representative(make_user):
    return make_user(UserRole.REPRESENTATIVE)


@pytest.fixture
def warehouse_user(make_user):
    return make_user(UserRole.WAREHOUSE_LA_VILLETTE)


@pytest.fixture
def make_client(db, make_user):
    def _make(**kw):
        owner = make_user(UserRole.CLIENT)
        row = Client(
            user_id=owner.id,
            company_name=kw.pop("company_name", f"Garage {next(_seq)}"),
            contact_name=kw.pop("contact_name", "Contact"),
            **kw,
        )
        db.add(row)
        db.commit()
        return row
    return _make


@pytest.fixture
def customer(make_client):
    return make_client()


@pytest.fixture
def make_product(db):
    def _make(base_price="100.00", is_active=True, **kw):
        product = Product(
            reference=kw.pop("reference", f"REF-{next(_seq):05d}"),
            designation=kw.pop("designation", "Brake pad set"),
            base_price=Decimal(str(base_price)),
            is_active=is_active,
            **kw,
        )
        db.add(product)
        db.commit()
        return product
    return _make


@pytest.fixture
def make_pricing(db):
    def _make(client_id, product_id, custom_price=None, discount_percentage="0", stock_limit_monthly=None):
        row = ClientProductPricing(
            client_id=client_id,
            product_id=product_id,
            custom_price=Decimal(str(custom_price)) if custom_price is not None else None,
            discount_percentage=Decimal(str(discount_percentage)),
            stock_limit_monthly=stock_limit_monthly,
        )
        db.add(row)
        db.commit()
        return row
    return _make


@pytest.fixture
def make_order(db):
    """Insert an order directly, with an explicit ``created_at`` for month-window tests."""
    def _make(client_id, lines, created_at=None, carrier=Carrier.GHAZALA):
        order = Order(
            client_id=client_id,
            order_number=f"ORD-TEST-{next(_seq):05d}",
            status=OrderStatus.SUBMITTED,
            total_amount=Decimal("0"),
            carrier=carrier,
            created_at=created_at or datetime.now(),
        )
        order.items = [
            OrderItem(product_id=pid, quantity=qty, unit_price=Decimal("1"), total_price=Decimal(qty))
            for pid, qty in lines
        ]
        db.add(order)
        db.commit()
        return order
    return _make


@pytest.fixture
def make_stock(db):
    def _make(product_id, warehouse: Warehouse, quantity: int):
        row = Stock(product_id=product_id, warehouse=warehouse, quantity=quantity)
        db.add(row)
        db.commit()
        return row
    return _make


@pytest.fixture
def make_substitute(db):
    def _make(product_id, substitute_product_id, priority):
        row = ProductSubstitute(
            product_id=product_id, substitute_product_id=substitute_product_id, priority=priority
        )
        db.add(row)
        db.commit()
        return row
    return _make
