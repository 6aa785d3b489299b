# partsdesk/schemas/quote.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from partsdesk.models.order import Carrier
from partsdesk.schemas.catalog import ORMBase
from partsdesk.schemas.order import OrderOut
from partsdesk.schemas.pricing import LineItem


class QuoteCreate(BaseModel):
    client_id: int
    representative_id: int
    items: List[LineItem] = Field(min_length=1)
    expires_in_days: Optional[int] = Field(default=None, gt=0)


class QuoteItemOut(ORMBase):
    id: int
    quote_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class QuoteOut(ORMBase):
    id: int
    client_id: int
    representative_id: int
    quote_number: str
    total_amount: Decimal
    qr_code: str
    share_link: str
    is_converted_to_order: bool
    order_id: Optional[int] = None
    expires_at: datetime
    created_at: datetime
    updated_at: datetime


class QuoteConvert(BaseModel):
    carrier: Carrier
    converted_by: Optional[int] = None


class QuoteConversionOut(BaseModel):
    quote: QuoteOut
    order: OrderOut
