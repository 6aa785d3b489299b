from datetime import datetime

import pytest

from partsdesk.schemas.pricing import LineItem
from partsdesk.services.limits import StockLimitValidator, month_start
from partsdesk.utils.errors import NotFoundError

NOW = datetime(2026, 3, 14, 15, 30)


def test_month_start():
    assert month_start(NOW) == datetime(2026, 3, 1, 0, 0, 0)
    assert month_start(datetime(2026, 1, 1, 0, 0)) == datetime(2026, 1, 1)


def test_no_limits_is_valid(db, customer, make_product, make_pricing):
    a = make_product()
    b = make_product()
    make_pricing(customer.id, b.id, discount_percentage="10")  # row without a limit

    result = StockLimitValidator(db).validate_limits(
        customer.id, [LineItem(product_id=a.id, quantity=500), LineItem(product_id=b.id, quantity=500)], now=NOW
    )

    assert result.is_valid
    assert result.violations == []


def test_violation_reports_remaining(db, customer, make_product, make_pricing, make_order):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=100)
    make_order(customer.id, [(product.id, 60)], created_at=datetime(2026, 3, 2, 9, 0))

    result = StockLimitValidator(db).validate_limits(
        customer.id, [LineItem(product_id=product.id, quantity=50)], now=NOW
    )

    assert not result.is_valid
    assert len(result.violations) == 1
    v = result.violations[0]
    assert (v.product_id, v.requested_quantity, v.remaining_limit, v.monthly_limit) == (product.id, 50, 40, 100)


def test_request_equal_to_remaining_is_allowed(db, customer, make_product, make_pricing, make_order):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=100)
    make_order(customer.id, [(product.id, 60)], created_at=datetime(2026, 3, 2))

    result = StockLimitValidator(db).validate_limits(
        customer.id, [LineItem(product_id=product.id, quantity=40)], now=NOW
    )

    assert result.is_valid


def test_only_current_month_counts(db, customer, make_product, make_pricing, make_order):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=10)
    make_order(customer.id, [(product.id, 10)], created_at=datetime(2026, 2, 28, 23, 59, 59))
    make_order(customer.id, [(product.id, 3)], created_at=datetime(2026, 3, 1, 0, 0, 0))

    validator = StockLimitValidator(db)
    assert validator.monthly_usage(customer.id, product.id, month_start(NOW)) == 3
    assert validator.validate_limits(customer.id, [LineItem(product_id=product.id, quantity=7)], now=NOW).is_valid


def test_other_clients_do_not_consume_limit(db, customer, make_client, make_product, make_pricing, make_order):
    product = make_product()
    other = make_client()
    make_pricing(customer.id, product.id, stock_limit_monthly=5)
    make_order(other.id, [(product.id, 50)], created_at=datetime(2026, 3, 5))

    result = StockLimitValidator(db).validate_limits(
        customer.id, [LineItem(product_id=product.id, quantity=5)], now=NOW
    )

    assert result.is_valid


def test_overconsumed_limit_floors_remaining_at_zero(db, customer, make_product, make_pricing, make_order):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=10)
    make_order(customer.id, [(product.id, 15)], created_at=datetime(2026, 3, 3))

    result = StockLimitValidator(db).validate_limits(
        customer.id, [LineItem(product_id=product.id, quantity=1)], now=NOW
    )

    assert result.violations[0].remaining_limit == 0


def test_zero_limit_blocks_everything(db, customer, make_product, make_pricing):
    product = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=0)

    result = StockLimitValidator(db).validate_limits(
        customer.id, [LineItem(product_id=product.id, quantity=1)], now=NOW
    )

    assert not result.is_valid


def test_unknown_client(db, make_product):
    product = make_product()
    with pytest.raises(NotFoundError):
        StockLimitValidator(db).validate_limits(31337, [LineItem(product_id=product.id, quantity=1)], now=NOW)


def test_repeated_product_lines_are_summed(db, customer, make_product, make_pricing):
    product = make_product()
    other = make_product()
    make_pricing(customer.id, product.id, stock_limit_monthly=50)

    result = StockLimitValidator(db).validate_limits(
        customer.id,
        [
            LineItem(product_id=product.id, quantity=30),
            LineItem(product_id=other.id, quantity=1),
            LineItem(product_id=product.id, quantity=30),
        ],
        now=NOW,
    )

    assert not result.is_valid
    assert len(result.violations) == 1
    v = result.violations[0]
    assert (v.product_id, v.requested_quantity, v.remaining_limit) == (product.id, 60, 50)
