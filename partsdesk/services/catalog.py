# partsdesk/services/catalog.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from partsdesk.database import upsert
from partsdesk.models.product import Product, ProductSubstitute
from partsdesk.models.stock import Stock, Warehouse
from partsdesk.utils.errors import NotFoundError

logger = logging.getLogger(__name__)

MAX_SUBSTITUTES = 5


class CatalogStore:
    """Products, their substitutes and the per-warehouse stock ledger."""

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int, active_only: bool = True) -> Product:
        product = self.db.get(Product, product_id)
        if product is None or (active_only and not product.is_active):
            raise NotFoundError("Product", product_id, f"Product with ID {product_id} not found or inactive")
        return product

    def get_product_substitutes(self, product_id: int) -> List[ProductSubstitute]:
        self.get_product(product_id, active_only=False)
        return (
            self.db.query(ProductSubstitute)
            .join(Product, ProductSubstitute.substitute_product_id == Product.id)
            .filter(ProductSubstitute.product_id == product_id, Product.is_active.is_(True))
            .order_by(ProductSubstitute.priority.asc(), ProductSubstitute.id.asc())
            .limit(MAX_SUBSTITUTES)
            .all()
        )

    def get_product_stock(self, product_id: int) -> List[Stock]:
        self.get_product(product_id, active_only=False)
        return (
            self.db.query(Stock)
            .filter(Stock.product_id == product_id)
            .order_by(Stock.warehouse.asc())
            .all()
        )

    def get_stock(self, product_id: int, warehouse: Warehouse) -> Optional[Stock]:
        return (
            self.db.query(Stock)
            .populate_existing()
            .filter(Stock.product_id == product_id, Stock.warehouse == warehouse)
            .first()
        )

    def update_product_stock(self, product_id: int, warehouse: Warehouse, quantity: int) -> Stock:
        """Set the absolute stock level of a product at a warehouse (creates the row if needed)."""
        if quantity < 0:
            raise ValueError("Stock quantity cannot be negative")
        self.get_product(product_id, active_only=False)

        stmt = upsert(
            self.db,
            Stock,
            {"product_id": product_id, "warehouse": warehouse, "quantity": quantity, "updated_at": datetime.now()},
            conflict_cols=("product_id", "warehouse"),
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Stock set: product=%s warehouse=%s quantity=%s", product_id, warehouse.value, quantity)
        return self.get_stock(product_id, warehouse)

    # Ledger movements below run inside the caller's transaction and never commit.

    def receive_stock(self, product_id: int, warehouse: Warehouse, quantity: int) -> Stock:
        """Add ``quantity`` to the warehouse row, creating it with that quantity if absent."""
        stmt = upsert(
            self.db,
            Stock,
            {"product_id": product_id, "warehouse": warehouse, "quantity": quantity, "updated_at": datetime.now()},
            conflict_cols=("product_id", "warehouse"),
            set_=lambda excluded: {
                "quantity": Stock.quantity + excluded.quantity,
                "updated_at": excluded.updated_at,
            },
        )
        self.db.execute(stmt)
        return self.get_stock(product_id, warehouse)

    def release_stock(self, product_id: int, warehouse: Warehouse, quantity: int) -> Optional[Stock]:
        """Remove ``quantity`` from the warehouse row, floored at zero. A missing row is left missing."""
        self.db.query(Stock).filter(
            Stock.product_id == product_id, Stock.warehouse == warehouse
        ).update(
            {
                Stock.quantity: case((Stock.quantity > quantity, Stock.quantity - quantity), else_=0),
                Stock.updated_at: datetime.now(),
            },
            synchronize_session=False,
        )
        return self.get_stock(product_id, warehouse)
