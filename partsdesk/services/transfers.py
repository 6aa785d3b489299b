# partsdesk/services/transfers.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from partsdesk.models.order import Order
from partsdesk.models.stock import Warehouse
from partsdesk.models.transfer import TransferRequest, TransferStatus
from partsdesk.services.catalog import CatalogStore
from partsdesk.services.lookups import require, require_user
from partsdesk.utils.errors import NotFoundError, PreconditionFailedError

logger = logging.getLogger(__name__)

# Statuses that record who prepared the goods
PREPARATION_STATUSES = {TransferStatus.IN_PREPARATION, TransferStatus.READY_TO_SHIP}
# Statuses a destination still has to receive
AWAITING_RECEPTION = (TransferStatus.SHIPPED, TransferStatus.READY_TO_SHIP)
TERMINAL_STATUSES = {TransferStatus.RECEIVED, TransferStatus.CANCELLED}


class TransferWorkflow:
    """
    Inter-warehouse transfers:
    pending -> in_preparation -> ready_to_ship -> shipped -> received, or cancelled.

    Reception is the only step touching the stock ledger; it moves the received
    quantity from the source site to the destination site in one transaction.
    """

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogStore(db)

    def _require_transfer(self, transfer_id: int, lock: bool = False) -> TransferRequest:
        query = self.db.query(TransferRequest).filter(TransferRequest.id == transfer_id)
        if lock:
            query = query.with_for_update()
        transfer = query.first()
        if transfer is None:
            raise NotFoundError("Transfer request", transfer_id)
        return transfer

    def get_transfer(self, transfer_id: int) -> TransferRequest:
        return self._require_transfer(transfer_id)

    def create_transfer_request(
        self,
        order_id: int,
        product_id: int,
        from_warehouse: Warehouse,
        to_warehouse: Warehouse,
        quantity: int,
        requested_by: int,
    ) -> TransferRequest:
        require(self.db, Order, order_id)
        self.catalog.get_product(product_id, active_only=False)
        require_user(self.db, requested_by)

        now = datetime.now()
        transfer = TransferRequest(
            order_id=order_id,
            product_id=product_id,
            from_warehouse=from_warehouse,
            to_warehouse=to_warehouse,
            quantity_requested=quantity,
            quantity_prepared=0,
            status=TransferStatus.PENDING,
            requested_by=requested_by,
            requested_at=now,
        )
        self.db.add(transfer)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(transfer)
        logger.info(
            "Transfer %s requested: product=%s qty=%s %s -> %s",
            transfer.id, product_id, quantity, from_warehouse.value, to_warehouse.value,
        )
        return transfer

    def update_transfer_status(
        self,
        transfer_id: int,
        status: TransferStatus,
        updated_by: int,
        quantity_prepared: Optional[int] = None,
    ) -> TransferRequest:
        try:
            transfer = self._require_transfer(transfer_id, lock=True)
            require_user(self.db, updated_by)

            if status == TransferStatus.RECEIVED:
                raise PreconditionFailedError("Use reception confirmation to mark a transfer as received")
            if transfer.status in TERMINAL_STATUSES:
                raise PreconditionFailedError(
                    f"Transfer request {transfer.id} is already {transfer.status.value} and cannot change status"
                )

            old_status = transfer.status
            transfer.status = status
            if status in PREPARATION_STATUSES:
                transfer.prepared_by = updated_by
                transfer.prepared_at = datetime.now()
                if quantity_prepared is not None:
                    transfer.quantity_prepared = quantity_prepared
            elif status == TransferStatus.SHIPPED:
                # Shipment confirms a quantity without re-attributing the preparer
                if quantity_prepared is not None:
                    transfer.quantity_prepared = quantity_prepared

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(transfer)
        logger.info("Transfer %s status %s -> %s by user %s", transfer.id, old_status.value, status.value, updated_by)
        return transfer

    def confirm_transfer_reception(self, transfer_id: int, received_by: int, quantity_received: int) -> TransferRequest:
        try:
            # Row lock: a concurrent confirmation waits here, then fails the status check
            transfer = self._require_transfer(transfer_id, lock=True)
            if transfer.status != TransferStatus.SHIPPED:
                raise PreconditionFailedError(
                    f"Transfer request must be in 'shipped' status to be received. "
                    f"Current status: {transfer.status.value}"
                )
            require_user(self.db, received_by)

            transfer.status = TransferStatus.RECEIVED
            transfer.received_by = received_by
            transfer.received_at = datetime.now()

            self.catalog.receive_stock(transfer.product_id, transfer.to_warehouse, quantity_received)
            self.catalog.release_stock(transfer.product_id, transfer.from_warehouse, quantity_received)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(transfer)
        logger.info(
            "Transfer %s received: product=%s qty=%s %s -> %s",
            transfer.id, transfer.product_id, quantity_received,
            transfer.from_warehouse.value, transfer.to_warehouse.value,
        )
        return transfer

    def get_transfer_requests_for_warehouse(self, warehouse: Warehouse) -> List[TransferRequest]:
        """Transfers leaving ``warehouse``."""
        return (
            self.db.query(TransferRequest)
            .filter(TransferRequest.from_warehouse == warehouse)
            .order_by(TransferRequest.requested_at.desc(), TransferRequest.id.desc())
            .all()
        )

    def get_pending_receptions(self, warehouse: Warehouse) -> List[TransferRequest]:
        """Transfers heading to ``warehouse`` that are shipped or ready to ship."""
        return (
            self.db.query(TransferRequest)
            .filter(
                TransferRequest.to_warehouse == warehouse,
                TransferRequest.status.in_(AWAITING_RECEPTION),
            )
            .order_by(TransferRequest.requested_at.asc(), TransferRequest.id.asc())
            .all()
        )

    def get_transfer_requests_by_order(self, order_id: int) -> List[TransferRequest]:
        return (
            self.db.query(TransferRequest)
            .filter(TransferRequest.order_id == order_id)
            .order_by(TransferRequest.id.asc())
            .all()
        )
