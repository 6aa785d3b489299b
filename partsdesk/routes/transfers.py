# partsdesk/routes/transfers.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from partsdesk.database import get_db
from partsdesk.models.stock import Warehouse
from partsdesk.services.transfers import TransferWorkflow
from partsdesk.utils.audit import write_log
from partsdesk.schemas.transfer import (
    TransferCreate, TransferStatusUpdate, TransferReception, TransferOut, TransferList,
)

router = APIRouter(prefix="/transfers", tags=["Transfers"])


# Request stock to be moved between two warehouses for an order
@router.post("", response_model=TransferOut, status_code=status.HTTP_201_CREATED)
def create_transfer_request(payload: TransferCreate, request: Request, db: Session = Depends(get_db)):
    transfer = TransferWorkflow(db).create_transfer_request(
        payload.order_id,
        payload.product_id,
        payload.from_warehouse,
        payload.to_warehouse,
        payload.quantity,
        payload.requested_by,
    )
    write_log(
        db, user_id=payload.requested_by, action="TRANSFER_CREATE", resource="transfers", status="SUCCESS",
        ip=request.client.host,
        meta={
            "id": transfer.id, "order_id": transfer.order_id, "product_id": transfer.product_id,
            "from": transfer.from_warehouse.value, "to": transfer.to_warehouse.value,
            "qty": transfer.quantity_requested,
        },
    )
    return transfer


# Transfers leaving a warehouse
@router.get("/warehouse/{warehouse}", response_model=TransferList)
def get_transfer_requests_for_warehouse(warehouse: Warehouse, db: Session = Depends(get_db)):
    return {"items": TransferWorkflow(db).get_transfer_requests_for_warehouse(warehouse)}


# Transfers a destination warehouse still has to receive
@router.get("/pending-reception/{warehouse}", response_model=TransferList)
def get_pending_receptions(warehouse: Warehouse, db: Session = Depends(get_db)):
    return {"items": TransferWorkflow(db).get_pending_receptions(warehouse)}


@router.get("/order/{order_id}", response_model=TransferList)
def get_transfer_requests_by_order(order_id: int, db: Session = Depends(get_db)):
    return {"items": TransferWorkflow(db).get_transfer_requests_by_order(order_id)}


@router.get("/{transfer_id}", response_model=TransferOut)
def get_transfer(transfer_id: int, db: Session = Depends(get_db)):
    return TransferWorkflow(db).get_transfer(transfer_id)


# Preparation / shipment progress
@router.patch("/{transfer_id}/status", response_model=TransferOut)
def update_transfer_status(
    transfer_id: int, payload: TransferStatusUpdate, request: Request, db: Session = Depends(get_db)
):
    transfer = TransferWorkflow(db).update_transfer_status(
        transfer_id, payload.status, payload.updated_by, quantity_prepared=payload.quantity_prepared
    )
    write_log(
        db, user_id=payload.updated_by, action="TRANSFER_STATUS", resource="transfers", status="SUCCESS",
        ip=request.client.host,
        meta={"id": transfer.id, "new": transfer.status.value, "qty_prepared": transfer.quantity_prepared},
    )
    return transfer


# Destination confirms arrival; stock moves from source to destination
@router.post("/{transfer_id}/reception", response_model=TransferOut)
def confirm_transfer_reception(
    transfer_id: int, payload: TransferReception, request: Request, db: Session = Depends(get_db)
):
    transfer = TransferWorkflow(db).confirm_transfer_reception(
        transfer_id, payload.received_by, payload.quantity_received
    )
    write_log(
        db, user_id=payload.received_by, action="TRANSFER_RECEIVED", resource="transfers", status="SUCCESS",
        ip=request.client.host,
        meta={"id": transfer.id, "qty": payload.quantity_received, "to": transfer.to_warehouse.value},
    )
    return transfer
