# partsdesk/services/limits.py
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partsdesk.models.order import Order, OrderItem
from partsdesk.models.pricing import ClientProductPricing
from partsdesk.schemas.pricing import LineItem, LimitValidation, LimitViolation
from partsdesk.services.lookups import require_client

logger = logging.getLogger(__name__)


def month_start(now: datetime) -> datetime:
    """First day of ``now``'s calendar month at 00:00:00."""
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class StockLimitValidator:
    """
    Checks requested quantities against each client's monthly stock limits.

    Consumption is read from the client's order items of the current calendar
    month. The validator reports violations, it never rejects anything itself.
    """

    def __init__(self, db: Session):
        self.db = db

    def monthly_usage(self, client_id: int, product_id: int, since: datetime) -> int:
        used = (
            self.db.query(func.coalesce(func.sum(OrderItem.quantity), 0))
            .join(Order, OrderItem.order_id == Order.id)
            .filter(
                Order.client_id == client_id,
                OrderItem.product_id == product_id,
                Order.created_at >= since,
            )
            .scalar()
        )
        return int(used or 0)

    def validate_limits(
        self,
        client_id: int,
        items: Iterable[LineItem],
        now: Optional[datetime] = None,
        lock: bool = False,
    ) -> LimitValidation:
        """
        ``lock`` holds the client's pricing rows FOR UPDATE so that a caller
        committing an order in the same transaction cannot race another one.
        """
        require_client(self.db, client_id)
        since = month_start(now or datetime.now())

        # A product may appear on several lines; the cap applies to their sum
        requested: Dict[int, int] = defaultdict(int)
        for item in items:
            requested[item.product_id] += item.quantity

        violations: List[LimitViolation] = []
        # Sorted so concurrent callers take the row locks in the same order
        for product_id in sorted(requested):
            quantity = requested[product_id]
            query = self.db.query(ClientProductPricing).filter(
                ClientProductPricing.client_id == client_id,
                ClientProductPricing.product_id == product_id,
            )
            if lock:
                query = query.with_for_update()
            row = query.first()
            if row is None or row.stock_limit_monthly is None:
                continue

            used = self.monthly_usage(client_id, product_id, since)
            remaining = row.stock_limit_monthly - used
            if quantity > remaining:
                violations.append(LimitViolation(
                    product_id=product_id,
                    requested_quantity=quantity,
                    remaining_limit=max(0, remaining),
                    monthly_limit=row.stock_limit_monthly,
                ))

        if violations:
            logger.warning(
                "Stock limit violations for client %s: %s",
                client_id, [(v.product_id, v.requested_quantity, v.remaining_limit) for v in violations],
            )
        return LimitValidation(is_valid=not violations, violations=violations)
