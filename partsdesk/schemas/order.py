# partsdesk/schemas/order.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from partsdesk.models.order import OrderStatus, Carrier
from partsdesk.schemas.catalog import ORMBase
from partsdesk.schemas.pricing import LineItem


# Output schema for an individual order line item
class OrderItemOut(ORMBase):
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


# Input schema for placing an order
class OrderCreate(BaseModel):
    client_id: int
    representative_id: Optional[int] = None
    carrier: Carrier
    items: List[LineItem] = Field(min_length=1)


# Output schema representing the order header
class OrderOut(ORMBase):
    id: int
    client_id: int
    representative_id: Optional[int] = None
    order_number: str
    status: OrderStatus
    total_amount: Decimal
    carrier: Carrier
    validated_by: Optional[int] = None
    validated_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class OrderDetail(OrderOut):
    items: List[OrderItemOut]


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: OrderStatus
    updated_by: int
