# partsdesk/routes/pricing.py
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from partsdesk.database import get_db
from partsdesk.services.limits import StockLimitValidator
from partsdesk.services.lookups import require_actor
from partsdesk.services.pricing import PricingResolver, ClientPricingService
from partsdesk.utils.audit import write_log
from partsdesk.schemas.pricing import (
    PriceResolution, OrderTotal, LimitValidation, LineItemsPayload,
    ClientPricingSet, ClientPricingOut,
)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


# Effective unit price of a product for a client
@router.get("/clients/{client_id}/products/{product_id}", response_model=PriceResolution)
def resolve_price(client_id: int, product_id: int, db: Session = Depends(get_db)):
    return PricingResolver(db).resolve_price(client_id, product_id)


# All negotiated conditions of a client
@router.get("/clients/{client_id}", response_model=List[ClientPricingOut])
def get_client_pricing(client_id: int, db: Session = Depends(get_db)):
    return ClientPricingService(db).get_client_pricing(client_id)


# Create or replace the conditions of a client on one product
@router.put("/clients/{client_id}/products/{product_id}", response_model=ClientPricingOut)
def set_client_pricing(
    client_id: int,
    product_id: int,
    payload: ClientPricingSet,
    request: Request,
    db: Session = Depends(get_db),
):
    require_actor(db, payload.updated_by)
    row = ClientPricingService(db).set_client_pricing(
        client_id,
        product_id,
        custom_price=payload.custom_price,
        discount_percentage=payload.discount_percentage,
        stock_limit_monthly=payload.stock_limit_monthly,
    )
    write_log(
        db, user_id=payload.updated_by, action="PRICING_SET", resource="pricing", status="SUCCESS",
        ip=request.client.host,
        meta={
            "client_id": client_id, "product_id": product_id,
            "custom_price": row.custom_price,
            "discount_percentage": row.discount_percentage,
            "stock_limit_monthly": row.stock_limit_monthly,
        },
    )
    return row


# Price a list of lines for a client without persisting anything
@router.post("/clients/{client_id}/total", response_model=OrderTotal)
def price_line_items(client_id: int, payload: LineItemsPayload, db: Session = Depends(get_db)):
    return PricingResolver(db).price_line_items(client_id, payload.items)


# Check requested quantities against the client's monthly limits
@router.post("/clients/{client_id}/limits", response_model=LimitValidation)
def validate_limits(client_id: int, payload: LineItemsPayload, db: Session = Depends(get_db)):
    return StockLimitValidator(db).validate_limits(client_id, payload.items)
