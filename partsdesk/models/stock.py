# partsdesk/models/stock.py
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, ForeignKey, DateTime, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from partsdesk.database import Base, enum_column
from partsdesk.models.product import Product

# The three physical sites stock is held at
class Warehouse(str, enum.Enum):
    IBN_TACHFINE = "ibn_tachfine"
    DRB_OMAR = "drb_omar"
    LA_VILLETTE = "la_villette"

# Stock ledger: one row per (product, warehouse), created lazily on first write
class Stock(Base):
    __tablename__ = "stock"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    warehouse = Column(enum_column(Warehouse, "warehouse"), nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    product = relationship(Product)

    __table_args__ = (
        UniqueConstraint("product_id", "warehouse", name="uq_stock_product_warehouse"),
    )
