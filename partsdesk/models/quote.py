# partsdesk/models/quote.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DateTime, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from partsdesk.database import Base
from partsdesk.models.product import Product

# Quote issued by a representative, shareable through a public token.
# Priced like an order but does not count against stock limits until converted.
class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    representative_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quote_number = Column(String(50), unique=True, nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)

    # Public access
    qr_code = Column(Text, nullable=False)
    share_token = Column(String(64), unique=True, nullable=False, index=True)
    share_link = Column(Text, nullable=False)

    # Conversion tracking
    is_converted_to_order = Column(Boolean, default=False, nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)

    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    items = relationship("QuoteItem", back_populates="quote", cascade="all, delete-orphan")

class QuoteItem(Base):
    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    unit_price = Column(Numeric(12, 4), nullable=False)
    total_price = Column(Numeric(14, 4), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    quote = relationship("Quote", back_populates="items")
    product = relationship(Product)
