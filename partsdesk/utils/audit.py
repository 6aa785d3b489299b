import logging

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from partsdesk.models.log import Log

logger = logging.getLogger(__name__)


def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None) -> Log:
    """
    Record an audit entry for an operation the caller has already committed.

    ``meta`` may carry Decimals, enums or datetimes; they are stored in their
    JSON form.
    """
    entry = Log(
        user_id=user_id,
        action=action,
        resource=resource,
        status=status,
        ip=ip,
        meta=jsonable_encoder(meta or {}),
    )
    db.add(entry)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Audit entry %s on %s could not be written", action, resource)
        raise
    return entry
