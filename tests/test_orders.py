import re
from decimal import Decimal

import pytest

from partsdesk.models.order import Carrier, OrderStatus
from partsdesk.schemas.pricing import LineItem
from partsdesk.services.orders import OrderService
from partsdesk.utils.errors import NotFoundError, StockLimitExceeded

ORDER_NUMBER = re.compile(r"^ORD-\d{8}-[0-9A-F]{4}$")


def test_create_order_prices_with_client_conditions(db, customer, representative, make_product, make_pricing):
    a = make_product(base_price="100.00")
    b = make_product(base_price="200.00")
    make_pricing(customer.id, a.id, custom_price="80.00")
    make_pricing(customer.id, b.id, discount_percentage="25")

    order = OrderService(db).create_order(
        customer.id,
        Carrier.SH2T,
        [LineItem(product_id=a.id, quantity=2), LineItem(product_id=b.id, quantity=1)],
        representative_id=representative.id,
    )

    assert ORDER_NUMBER.match(order.order_number)
    assert order.status == OrderStatus.SUBMITTED
    assert order.carrier == Carrier.SH2T
    assert order.total_amount == Decimal("310.00")
    prices = sorted((it.product_id, it.unit_price, it.total_price) for it in order.items)
    assert prices == sorted([(a.id, Decimal("80"), Decimal("160")), (b.id, Decimal("150"), Decimal("150"))])


def test_create_order_over_limit_is_rejected(db, customer, make_product, make_pricing):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=5)
    service = OrderService(db, enforce_limits=True)

    with pytest.raises(StockLimitExceeded) as exc:
        service.create_order(customer.id, Carrier.BAHA, [LineItem(product_id=product.id, quantity=6)])

    assert exc.value.violations[0].remaining_limit == 5
    assert service.get_orders_by_client(customer.id) == []


def test_orders_consume_the_monthly_limit(db, customer, make_product, make_pricing):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=10)
    service = OrderService(db, enforce_limits=True)

    service.create_order(customer.id, Carrier.BAHA, [LineItem(product_id=product.id, quantity=7)])
    with pytest.raises(StockLimitExceeded):
        service.create_order(customer.id, Carrier.BAHA, [LineItem(product_id=product.id, quantity=4)])
    service.create_order(customer.id, Carrier.BAHA, [LineItem(product_id=product.id, quantity=3)])

    assert len(service.get_orders_by_client(customer.id)) == 2


def test_limits_not_enforced_only_warn(db, customer, make_product, make_pricing, caplog):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=1)

    with caplog.at_level("WARNING"):
        order = OrderService(db, enforce_limits=False).create_order(
            customer.id, Carrier.GHAZALA, [LineItem(product_id=product.id, quantity=3)]
        )

    assert order.id is not None
    assert "monthly stock limit" in caplog.text


def test_create_order_unknown_representative(db, customer, make_product):
    product = make_product()
    with pytest.raises(NotFoundError):
        OrderService(db).create_order(
            customer.id, Carrier.GHAZALA, [LineItem(product_id=product.id, quantity=1)], representative_id=999
        )


def test_create_order_inactive_product(db, customer, make_product):
    product = make_product(is_active=False)
    service = OrderService(db)

    with pytest.raises(NotFoundError):
        service.create_order(customer.id, Carrier.GHAZALA, [LineItem(product_id=product.id, quantity=1)])
    assert service.get_orders_by_client(customer.id) == []


def test_update_order_status_stamps(db, customer, warehouse_user, make_product):
    product = make_product()
    service = OrderService(db)
    order = service.create_order(customer.id, Carrier.GHAZALA, [LineItem(product_id=product.id, quantity=1)])

    validated = service.update_order_status(order.id, OrderStatus.VALIDATED, warehouse_user.id)
    assert validated.validated_by == warehouse_user.id
    assert validated.validated_at is not None
    assert validated.shipped_at is None

    shipped = service.update_order_status(order.id, OrderStatus.SHIPPED, warehouse_user.id)
    assert shipped.shipped_at is not None

    delivered = service.update_order_status(order.id, OrderStatus.DELIVERED, warehouse_user.id)
    assert delivered.status == OrderStatus.DELIVERED
    assert delivered.delivered_at is not None


def test_order_lookups(db, customer, make_product):
    product = make_product()
    service = OrderService(db)
    order = service.create_order(customer.id, Carrier.GHAZALA, [LineItem(product_id=product.id, quantity=4)])

    assert service.get_order(order.id).order_number == order.order_number
    items = service.get_order_items(order.id)
    assert [(it.product_id, it.quantity) for it in items] == [(product.id, 4)]
    with pytest.raises(NotFoundError):
        service.get_order(12345)


def test_split_lines_cannot_exceed_limit(db, customer, make_product, make_pricing):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=50)
    service = OrderService(db, enforce_limits=True)

    with pytest.raises(StockLimitExceeded) as exc:
        service.create_order(
            customer.id,
            Carrier.GHAZALA,
            [LineItem(product_id=product.id, quantity=30), LineItem(product_id=product.id, quantity=30)],
        )

    assert exc.value.violations[0].requested_quantity == 60
    assert service.get_orders_by_client(customer.id) == []
