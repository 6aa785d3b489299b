# partsdesk/routes/orders.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from partsdesk.database import get_db
from partsdesk.services.orders import OrderService
from partsdesk.utils.audit import write_log
from partsdesk.schemas.order import OrderCreate, OrderOut, OrderDetail, OrderItemOut, OrderStatusPatch

router = APIRouter(prefix="/orders", tags=["Orders"])


# Place an order priced with the client's conditions
@router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, request: Request, db: Session = Depends(get_db)):
    order = OrderService(db).create_order(
        payload.client_id, payload.carrier, payload.items, representative_id=payload.representative_id
    )
    write_log(
        db, user_id=payload.representative_id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=request.client.host,
        meta={"order_id": order.id, "client_id": order.client_id, "total": order.total_amount},
    )
    return order


# List a client's order history
@router.get("/client/{client_id}", response_model=List[OrderOut])
def get_orders_by_client(client_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_orders_by_client(client_id)


# Get details of a specific order
@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_order(order_id)


@router.get("/{order_id}/items", response_model=List[OrderItemOut])
def get_order_items(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_order_items(order_id)


# Move an order through its lifecycle (validation, shipping, delivery)
@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusPatch, request: Request, db: Session = Depends(get_db)):
    service = OrderService(db)
    old_status = service.get_order(order_id).status
    order = service.update_order_status(order_id, payload.status, payload.updated_by)
    write_log(
        db, user_id=payload.updated_by, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
        ip=request.client.host,
        meta={"order_id": order.id, "old": old_status.value, "new": order.status.value},
    )
    return order
