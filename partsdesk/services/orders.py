# partsdesk/services/orders.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from partsdesk.config import settings
from partsdesk.models.order import Order, OrderItem, OrderStatus, Carrier
from partsdesk.schemas.pricing import LineItem, LimitValidation
from partsdesk.services.limits import StockLimitValidator
from partsdesk.services.lookups import require, require_client, require_user
from partsdesk.services.pricing import PricingResolver
from partsdesk.utils.errors import StockLimitExceeded
from partsdesk.utils.numbering import generate_document_number

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, db: Session, enforce_limits: Optional[bool] = None):
        self.db = db
        self.enforce_limits = settings.ENFORCE_STOCK_LIMITS if enforce_limits is None else enforce_limits
        self.pricing = PricingResolver(db)
        self.limits = StockLimitValidator(db)

    def check_limits(self, client_id: int, items: List[LineItem]) -> LimitValidation:
        """Validate monthly limits with the pricing rows locked; raise when enforcement is on."""
        result = self.limits.validate_limits(client_id, items, lock=True)
        if result.is_valid:
            return result
        if self.enforce_limits:
            raise StockLimitExceeded(result.violations)
        logger.warning("Order for client %s accepted over its monthly stock limits", client_id)
        return result

    def add_order(
        self,
        client_id: int,
        carrier: Carrier,
        items: List[OrderItem],
        total_amount: Decimal,
        representative_id: Optional[int] = None,
    ) -> Order:
        """Stage an order with its items in the current transaction (flushed, not committed)."""
        order = Order(
            order_number=generate_document_number(self.db, Order.order_number, "ORD"),
            client_id=client_id,
            representative_id=representative_id,
            carrier=carrier,
            status=OrderStatus.SUBMITTED,
            total_amount=total_amount,
        )
        order.items = items
        self.db.add(order)
        self.db.flush()
        return order

    def create_order(
        self,
        client_id: int,
        carrier: Carrier,
        items: Iterable[LineItem],
        representative_id: Optional[int] = None,
    ) -> Order:
        items = list(items)
        try:
            if representative_id is not None:
                require_user(self.db, representative_id)
            self.check_limits(client_id, items)
            priced = self.pricing.price_line_items(client_id, items)
            order = self.add_order(
                client_id,
                carrier,
                [
                    OrderItem(
                        product_id=line.product_id,
                        quantity=line.quantity,
                        unit_price=line.final_price,
                        total_price=line.total_price,
                    )
                    for line in priced.items
                ],
                priced.total_amount,
                representative_id=representative_id,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(order)
        logger.info("Order %s created for client %s, total %s", order.order_number, client_id, order.total_amount)
        return order

    def get_order(self, order_id: int) -> Order:
        return require(self.db, Order, order_id)

    def get_order_items(self, order_id: int) -> List[OrderItem]:
        self.get_order(order_id)
        return self.db.query(OrderItem).filter(OrderItem.order_id == order_id).order_by(OrderItem.id).all()

    def get_orders_by_client(self, client_id: int) -> List[Order]:
        require_client(self.db, client_id)
        return (
            self.db.query(Order)
            .filter(Order.client_id == client_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def update_order_status(self, order_id: int, status: OrderStatus, updated_by: int) -> Order:
        order = self.get_order(order_id)
        require_user(self.db, updated_by)

        old_status = order.status
        now = datetime.now()
        order.status = status
        # Stamp the transition where the order keeps a dedicated field for it
        if status == OrderStatus.VALIDATED:
            order.validated_by = updated_by
            order.validated_at = now
        elif status == OrderStatus.SHIPPED:
            order.shipped_at = now
        elif status == OrderStatus.DELIVERED:
            order.delivered_at = now

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(order)
        logger.info("Order %s status %s -> %s", order.id, old_status.value, status.value)
        return order
