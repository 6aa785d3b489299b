# partsdesk/models/pricing.py
from datetime import datetime
from sqlalchemy import (
    Column, Integer, ForeignKey, DateTime, Numeric, CheckConstraint, UniqueConstraint,
)
from partsdesk.database import Base

# Negotiated conditions for one (client, product) pair.
# custom_price NULL or 0 means "no override"; stock_limit_monthly NULL means unlimited.
class ClientProductPricing(Base):
    __tablename__ = "client_product_pricing"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    custom_price = Column(Numeric(10, 2), CheckConstraint("custom_price >= 0"), nullable=True)
    discount_percentage = Column(
        Numeric(5, 2),
        CheckConstraint("discount_percentage >= 0 AND discount_percentage <= 100"),
        nullable=False,
        default=0,
    )
    stock_limit_monthly = Column(Integer, CheckConstraint("stock_limit_monthly >= 0"), nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    __table_args__ = (
        UniqueConstraint("client_id", "product_id", name="uq_pricing_client_product"),
    )
