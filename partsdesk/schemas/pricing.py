# partsdesk/schemas/pricing.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from partsdesk.schemas.catalog import ORMBase


# One requested (product, quantity) line
class LineItem(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class LineItemsPayload(BaseModel):
    items: List[LineItem]


# Effective unit price of a product for a client.
# custom_price / discount_percentage are absent when the client has no pricing row.
class PriceResolution(BaseModel):
    base_price: Decimal
    custom_price: Optional[Decimal] = None
    discount_percentage: Optional[Decimal] = None
    final_price: Decimal


class PricedLineItem(PriceResolution):
    product_id: int
    quantity: int
    total_price: Decimal


class OrderTotal(BaseModel):
    items: List[PricedLineItem]
    total_amount: Decimal


class LimitViolation(BaseModel):
    product_id: int
    requested_quantity: int
    remaining_limit: int
    monthly_limit: int


class LimitValidation(BaseModel):
    is_valid: bool
    violations: List[LimitViolation]


# Payload for setting a client's conditions on one product
class ClientPricingSet(BaseModel):
    custom_price: Optional[Decimal] = Field(default=None, ge=0)
    discount_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    stock_limit_monthly: Optional[int] = Field(default=None, ge=0)
    updated_by: Optional[int] = None


class ClientPricingOut(ORMBase):
    id: int
    client_id: int
    product_id: int
    custom_price: Optional[Decimal] = None
    discount_percentage: Decimal
    stock_limit_monthly: Optional[int] = None
    created_at: datetime
    updated_at: datetime
