# partsdesk/routes/products.py
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from partsdesk.database import get_db
from partsdesk.models.stock import Warehouse
from partsdesk.services.catalog import CatalogStore
from partsdesk.services.lookups import require_actor
from partsdesk.utils.audit import write_log
import partsdesk.schemas.catalog as catalog_schemas

router = APIRouter(prefix="/products", tags=["Products"])


# Up to five active substitutes, best match first
@router.get("/{product_id}/substitutes", response_model=List[catalog_schemas.SubstituteOut])
def get_product_substitutes(product_id: int, db: Session = Depends(get_db)):
    return CatalogStore(db).get_product_substitutes(product_id)


# Stock of a product across all warehouses
@router.get("/{product_id}/stock", response_model=catalog_schemas.StockList)
def get_product_stock(product_id: int, db: Session = Depends(get_db)):
    return {"items": CatalogStore(db).get_product_stock(product_id)}


# Set the absolute stock level at one warehouse
@router.put("/{product_id}/stock/{warehouse}", response_model=catalog_schemas.StockOut)
def update_product_stock(
    product_id: int,
    warehouse: Warehouse,
    payload: catalog_schemas.StockUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    require_actor(db, payload.updated_by)
    stock = CatalogStore(db).update_product_stock(product_id, warehouse, payload.quantity)
    write_log(
        db, user_id=payload.updated_by, action="STOCK_SET", resource="stock", status="SUCCESS",
        ip=request.client.host,
        meta={"product_id": product_id, "warehouse": warehouse.value, "quantity": payload.quantity},
    )
    return stock
