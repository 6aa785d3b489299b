# partsdesk/models/product.py
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey,
    CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from partsdesk.database import Base

# Model Product
# A catalog auto part. Products referenced by orders are never deleted,
# they are deactivated through is_active instead.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    reference = Column(String(100), unique=True, nullable=False, index=True)
    designation = Column(Text, nullable=False)

    brand = Column(String(100), index=True)
    category = Column(String(100), index=True)
    vehicle_compatibility = Column(Text)

    base_price = Column(Numeric(10, 2), CheckConstraint("base_price >= 0"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)


# Alternative part proposed when a product is unavailable (priority 1 = best match)
class ProductSubstitute(Base):
    __tablename__ = "product_substitutes"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    substitute_product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    priority = Column(Integer, CheckConstraint("priority >= 1 AND priority <= 5"), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    substitute = relationship(Product, foreign_keys=[substitute_product_id], lazy="joined")

    __table_args__ = (
        UniqueConstraint("product_id", "substitute_product_id", name="uq_substitute_pair"),
    )
