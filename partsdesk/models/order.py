# partsdesk/models/order.py
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from partsdesk.database import Base, enum_column
from partsdesk.models.product import Product

class OrderStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    VALIDATED = "validated"
    IN_PREPARATION = "in_preparation"
    READY = "ready"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    REFUSED = "refused"

# Partner carriers handling deliveries
class Carrier(str, enum.Enum):
    GHAZALA = "ghazala"
    SH2T = "sh2t"
    BAHA = "baha"

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    representative_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    order_number = Column(String(50), unique=True, nullable=False)
    status = Column(enum_column(OrderStatus, "order_status"), default=OrderStatus.SUBMITTED, nullable=False)
    # Sum of the items' total_price, rounded once to the cent
    total_amount = Column(Numeric(12, 2), nullable=False)
    carrier = Column(enum_column(Carrier, "carrier"), nullable=False)
    is_grouped = Column(Boolean, default=False, nullable=False)
    sage_document_number = Column(String(50), nullable=True)

    # Status transition stamps
    validated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    validated_at = Column(DateTime, nullable=True)
    shipped_at = Column(DateTime, nullable=True)
    delivered_at = Column(DateTime, nullable=True)

    # Local server time, the monthly stock limits are computed against it
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

# Immutable priced line; the system of record for monthly consumption
class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    unit_price = Column(Numeric(12, 4), nullable=False)
    total_price = Column(Numeric(14, 4), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship(Product)
