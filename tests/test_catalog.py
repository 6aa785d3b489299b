import pytest

from partsdesk.models.stock import Warehouse
from partsdesk.services.catalog import CatalogStore, MAX_SUBSTITUTES
from partsdesk.utils.errors import NotFoundError


def test_substitutes_capped_and_ordered(db, make_product, make_substitute):
    product = make_product()
    subs = [make_product() for _ in range(7)]
    # priorities 1..5 with two duplicates on 2 and 4
    for sub, priority in zip(subs, [5, 2, 4, 1, 3, 2, 4]):
        make_substitute(product.id, sub.id, priority)

    result = CatalogStore(db).get_product_substitutes(product.id)

    assert len(result) == MAX_SUBSTITUTES
    priorities = [s.priority for s in result]
    assert priorities == sorted(priorities)
    assert priorities[0] == 1
    assert result[0].substitute.id == subs[3].id


def test_inactive_substitutes_are_skipped(db, make_product, make_substitute):
    product = make_product()
    retired = make_product(is_active=False)
    current = make_product()
    make_substitute(product.id, retired.id, 1)
    make_substitute(product.id, current.id, 2)

    result = CatalogStore(db).get_product_substitutes(product.id)

    assert [s.substitute_product_id for s in result] == [current.id]


def test_substitutes_of_unknown_product(db):
    with pytest.raises(NotFoundError):
        CatalogStore(db).get_product_substitutes(1234)


def test_get_product_active_only(db, make_product):
    retired = make_product(is_active=False)
    catalog = CatalogStore(db)

    with pytest.raises(NotFoundError) as exc:
        catalog.get_product(retired.id)
    assert "not found or inactive" in str(exc.value)
    assert catalog.get_product(retired.id, active_only=False).id == retired.id


def test_update_product_stock_creates_then_overwrites(db, make_product):
    product = make_product()
    catalog = CatalogStore(db)

    created = catalog.update_product_stock(product.id, Warehouse.DRB_OMAR, 12)
    updated = catalog.update_product_stock(product.id, Warehouse.DRB_OMAR, 4)

    assert created.id == updated.id
    assert updated.quantity == 4
    assert [(s.warehouse, s.quantity) for s in catalog.get_product_stock(product.id)] == [(Warehouse.DRB_OMAR, 4)]


def test_update_product_stock_rejects_negative(db, make_product):
    product = make_product()
    with pytest.raises(ValueError):
        CatalogStore(db).update_product_stock(product.id, Warehouse.DRB_OMAR, -1)


def test_product_stock_across_warehouses(db, make_product, make_stock):
    product = make_product()
    make_stock(product.id, Warehouse.LA_VILLETTE, 7)
    make_stock(product.id, Warehouse.IBN_TACHFINE, 3)

    levels = {s.warehouse: s.quantity for s in CatalogStore(db).get_product_stock(product.id)}

    assert levels == {Warehouse.LA_VILLETTE: 7, Warehouse.IBN_TACHFINE: 3}
