# partsdesk/services/quotes.py
import logging
import secrets
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from partsdesk.config import settings
from partsdesk.models.order import Order, OrderItem, Carrier
from partsdesk.models.quote import Quote, QuoteItem
from partsdesk.models.users import User, UserRole
from partsdesk.schemas.pricing import LineItem
from partsdesk.services.lookups import require, require_client
from partsdesk.services.orders import OrderService
from partsdesk.services.pricing import PricingResolver
from partsdesk.utils.errors import NotFoundError, PreconditionFailedError
from partsdesk.utils.numbering import generate_document_number

logger = logging.getLogger(__name__)


def qr_payload(quote_id: int, token: str) -> str:
    return f"QUOTE:{quote_id}:{token}"


class QuoteService:
    def __init__(self, db: Session, share_base_url: Optional[str] = None, orders: Optional[OrderService] = None):
        self.db = db
        self.share_base_url = (share_base_url or settings.QUOTE_SHARE_BASE_URL).rstrip("/")
        self.pricing = PricingResolver(db)
        self.orders = orders or OrderService(db)

    def _require_representative(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None or user.role != UserRole.REPRESENTATIVE:
            raise NotFoundError("Representative", user_id)
        return user

    def create_quote(
        self,
        client_id: int,
        representative_id: int,
        items: Iterable[LineItem],
        expires_in_days: Optional[int] = None,
    ) -> Quote:
        days = expires_in_days or settings.QUOTE_DEFAULT_EXPIRY_DAYS
        try:
            require_client(self.db, client_id)
            self._require_representative(representative_id)
            priced = self.pricing.price_line_items(client_id, list(items))

            token = secrets.token_hex(32)
            now = datetime.now()
            quote = Quote(
                quote_number=generate_document_number(self.db, Quote.quote_number, "QUO", now=now),
                client_id=client_id,
                representative_id=representative_id,
                total_amount=priced.total_amount,
                qr_code="",
                share_token=token,
                share_link=f"{self.share_base_url}/quotes/share/{token}",
                expires_at=now + timedelta(days=days),
                created_at=now,
                updated_at=now,
            )
            quote.items = [
                QuoteItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.final_price,
                    total_price=line.total_price,
                )
                for line in priced.items
            ]
            self.db.add(quote)
            # The QR payload embeds the generated id
            self.db.flush()
            quote.qr_code = qr_payload(quote.id, token)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(quote)
        logger.info("Quote %s created for client %s by representative %s", quote.quote_number, client_id, representative_id)
        return quote

    def get_quote(self, quote_id: int) -> Quote:
        return require(self.db, Quote, quote_id)

    def get_quote_by_share_token(self, token: str) -> Quote:
        quote = self.db.query(Quote).filter(Quote.share_token == token).first()
        if quote is None:
            raise NotFoundError("Quote", token, "Quote not found for this share link")
        return quote

    def get_quote_items(self, quote_id: int) -> List[QuoteItem]:
        self.get_quote(quote_id)
        return self.db.query(QuoteItem).filter(QuoteItem.quote_id == quote_id).order_by(QuoteItem.id).all()

    def get_quotes_by_client(self, client_id: int) -> List[Quote]:
        require_client(self.db, client_id)
        return self.db.query(Quote).filter(Quote.client_id == client_id).order_by(Quote.created_at.desc()).all()

    def get_quotes_by_representative(self, representative_id: int) -> List[Quote]:
        return (
            self.db.query(Quote)
            .filter(Quote.representative_id == representative_id)
            .order_by(Quote.created_at.desc())
            .all()
        )

    def convert_quote_to_order(self, quote_id: int, carrier: Carrier, now: Optional[datetime] = None) -> Tuple[Quote, Order]:
        """
        Turn a quote into an order at the prices frozen when the quote was issued.
        The order is subject to the same monthly stock-limit policy as a direct order.
        """
        now = now or datetime.now()
        try:
            quote = self.db.query(Quote).filter(Quote.id == quote_id).with_for_update().first()
            if quote is None:
                raise NotFoundError("Quote", quote_id)
            if quote.is_converted_to_order:
                raise PreconditionFailedError(f"Quote {quote.quote_number} is already converted to order {quote.order_id}")
            if quote.expires_at < now:
                raise PreconditionFailedError(f"Quote {quote.quote_number} expired on {quote.expires_at:%Y-%m-%d}")

            self.orders.check_limits(
                quote.client_id,
                [LineItem(product_id=it.product_id, quantity=it.quantity) for it in quote.items],
            )
            order = self.orders.add_order(
                quote.client_id,
                carrier,
                [
                    OrderItem(
                        product_id=it.product_id,
                        quantity=it.quantity,
                        unit_price=it.unit_price,
                        total_price=it.total_price,
                    )
                    for it in quote.items
                ],
                quote.total_amount,
                representative_id=quote.representative_id,
            )
            quote.is_converted_to_order = True
            quote.order_id = order.id
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(quote)
        self.db.refresh(order)
        logger.info("Quote %s converted to order %s", quote.quote_number, order.order_number)
        return quote, order
