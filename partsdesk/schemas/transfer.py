# partsdesk/schemas/transfer.py
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime

from partsdesk.models.stock import Warehouse
from partsdesk.models.transfer import TransferStatus
from partsdesk.schemas.catalog import ORMBase


class TransferCreate(BaseModel):
    order_id: int
    product_id: int
    from_warehouse: Warehouse
    to_warehouse: Warehouse
    quantity: int = Field(gt=0)
    requested_by: int

    @model_validator(mode="after")
    def _distinct_sites(self):
        if self.from_warehouse == self.to_warehouse:
            raise ValueError("Source and destination warehouses must differ")
        return self


class TransferStatusUpdate(BaseModel):
    status: TransferStatus
    updated_by: int
    quantity_prepared: Optional[int] = Field(default=None, ge=0)


class TransferReception(BaseModel):
    received_by: int
    quantity_received: int = Field(gt=0)


class TransferOut(ORMBase):
    id: int
    order_id: int
    product_id: int
    from_warehouse: Warehouse
    to_warehouse: Warehouse
    quantity_requested: int
    quantity_prepared: int
    status: TransferStatus
    requested_by: int
    prepared_by: Optional[int] = None
    received_by: Optional[int] = None
    requested_at: datetime
    prepared_at: Optional[datetime] = None
    received_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TransferList(BaseModel):
    items: List[TransferOut]
