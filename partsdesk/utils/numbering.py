# partsdesk/utils/numbering.py
import secrets
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

MAX_ATTEMPTS = 20


def generate_document_number(db: Session, column, prefix: str, now: Optional[datetime] = None) -> str:
    """
    Return an unused document number such as ``ORD-20260314-3FA2``.

    The 4-character suffix is random uppercase hex; collisions with ``column``
    are retried.
    """
    day = (now or datetime.now()).strftime("%Y%m%d")
    for _ in range(MAX_ATTEMPTS):
        candidate = f"{prefix}-{day}-{secrets.token_hex(2).upper()}"
        taken = db.query(column).filter(column == candidate).first()
        if not taken:
            return candidate
    raise RuntimeError(f"Could not allocate a unique {prefix} number for {day}")
