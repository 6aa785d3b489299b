# partsdesk/services/pricing.py
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from partsdesk.database import upsert
from partsdesk.models.pricing import ClientProductPricing
from partsdesk.schemas.pricing import LineItem, PriceResolution, PricedLineItem, OrderTotal
from partsdesk.services.catalog import CatalogStore
from partsdesk.services.lookups import require_client

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def final_unit_price(base_price: Decimal, custom_price: Optional[Decimal], discount_percentage: Optional[Decimal]) -> Decimal:
    """
    Effective unit price for one (client, product) pair.

    A positive custom price wins over any discount on the same row; a positive
    discount applies to the base price otherwise; the base price is the fallback.
    """
    if custom_price is not None and custom_price > 0:
        return Decimal(custom_price)
    if discount_percentage is not None and discount_percentage > 0:
        return Decimal(base_price) * (1 - Decimal(discount_percentage) / HUNDRED)
    return Decimal(base_price)


def round_amount(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingResolver:
    """Resolves client-specific unit prices and prices order/quote line items."""

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogStore(db)

    def pricing_row(self, client_id: int, product_id: int) -> Optional[ClientProductPricing]:
        return (
            self.db.query(ClientProductPricing)
            .filter(ClientProductPricing.client_id == client_id, ClientProductPricing.product_id == product_id)
            .first()
        )

    def resolve_price(self, client_id: int, product_id: int) -> PriceResolution:
        require_client(self.db, client_id)
        product = self.catalog.get_product(product_id)
        row = self.pricing_row(client_id, product_id)
        if row is None:
            return PriceResolution(base_price=product.base_price, final_price=product.base_price)

        # Both stored values are reported, even the one the policy ignored
        return PriceResolution(
            base_price=product.base_price,
            custom_price=row.custom_price,
            discount_percentage=row.discount_percentage,
            final_price=final_unit_price(product.base_price, row.custom_price, row.discount_percentage),
        )

    def price_line_items(self, client_id: int, items: Iterable[LineItem]) -> OrderTotal:
        require_client(self.db, client_id)

        lines: List[PricedLineItem] = []
        for item in items:
            resolution = self.resolve_price(client_id, item.product_id)
            lines.append(PricedLineItem(
                product_id=item.product_id,
                quantity=item.quantity,
                total_price=resolution.final_price * item.quantity,
                **resolution.model_dump(),
            ))

        # Rounded once over the whole list, never per line
        total = round_amount(sum((line.total_price for line in lines), Decimal("0")))
        return OrderTotal(items=lines, total_amount=total)


class ClientPricingService:
    """Administration of the per-client pricing rows."""

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogStore(db)

    def set_client_pricing(
        self,
        client_id: int,
        product_id: int,
        custom_price: Optional[Decimal],
        discount_percentage: Decimal = Decimal("0"),
        stock_limit_monthly: Optional[int] = None,
    ) -> ClientProductPricing:
        require_client(self.db, client_id)
        self.catalog.get_product(product_id, active_only=False)

        now = datetime.now()
        stmt = upsert(
            self.db,
            ClientProductPricing,
            {
                "client_id": client_id,
                "product_id": product_id,
                "custom_price": custom_price,
                "discount_percentage": discount_percentage,
                "stock_limit_monthly": stock_limit_monthly,
                "created_at": now,
                "updated_at": now,
            },
            conflict_cols=("client_id", "product_id"),
            set_=lambda excluded: {
                "custom_price": excluded.custom_price,
                "discount_percentage": excluded.discount_percentage,
                "stock_limit_monthly": excluded.stock_limit_monthly,
                "updated_at": excluded.updated_at,
            },
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Pricing set: client=%s product=%s custom=%s discount=%s limit=%s",
            client_id, product_id, custom_price, discount_percentage, stock_limit_monthly,
        )
        return (
            self.db.query(ClientProductPricing)
            .populate_existing()
            .filter(ClientProductPricing.client_id == client_id, ClientProductPricing.product_id == product_id)
            .one()
        )

    def get_client_pricing(self, client_id: int) -> List[ClientProductPricing]:
        require_client(self.db, client_id)
        return (
            self.db.query(ClientProductPricing)
            .filter(ClientProductPricing.client_id == client_id)
            .order_by(ClientProductPricing.product_id.asc())
            .all()
        )
