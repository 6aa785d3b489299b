# partsdesk/models/transfer.py
import enum
from datetime import datetime
from sqlalchemy import Column, Integer, ForeignKey, DateTime, CheckConstraint
from partsdesk.database import Base, enum_column
from partsdesk.models.stock import Warehouse

# Lifecycle of an inter-warehouse transfer
class TransferStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PREPARATION = "in_preparation"
    READY_TO_SHIP = "ready_to_ship"
    SHIPPED = "shipped"
    RECEIVED = "received"
    CANCELLED = "cancelled"

# Stock movement request between two sites, raised for a given order line
class TransferRequest(Base):
    __tablename__ = "transfer_requests"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    from_warehouse = Column(enum_column(Warehouse, "warehouse"), nullable=False, index=True)
    to_warehouse = Column(enum_column(Warehouse, "warehouse"), nullable=False, index=True)

    quantity_requested = Column(Integer, CheckConstraint("quantity_requested > 0"), nullable=False)
    quantity_prepared = Column(Integer, CheckConstraint("quantity_prepared >= 0"), nullable=False, default=0)
    status = Column(
        enum_column(TransferStatus, "transfer_status"), default=TransferStatus.PENDING, nullable=False, index=True
    )

    # Actors and timestamps of each step
    requested_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    prepared_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    received_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    requested_at = Column(DateTime, default=datetime.now, nullable=False)
    prepared_at = Column(DateTime, nullable=True)
    received_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)
