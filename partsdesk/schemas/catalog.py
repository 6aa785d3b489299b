# partsdesk/schemas/catalog.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from partsdesk.models.stock import Warehouse


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Catalog view of a product
class ProductOut(ORMBase):
    id: int
    reference: str
    designation: str
    brand: Optional[str] = None
    category: Optional[str] = None
    vehicle_compatibility: Optional[str] = None
    base_price: Decimal
    is_active: bool


# Substitute entry, best match first
class SubstituteOut(ORMBase):
    id: int
    product_id: int
    substitute_product_id: int
    priority: int
    substitute: ProductOut


# Stock level of a product at one warehouse
class StockOut(ORMBase):
    id: int
    product_id: int
    warehouse: Warehouse
    quantity: int
    updated_at: datetime


# Absolute stock level set by warehouse staff
class StockUpdate(BaseModel):
    quantity: int = Field(ge=0)
    updated_by: Optional[int] = None


class StockList(BaseModel):
    items: List[StockOut]
