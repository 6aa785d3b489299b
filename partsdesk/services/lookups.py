# partsdesk/services/lookups.py
from typing import Optional

from sqlalchemy.orm import Session

from partsdesk.models.client import Client
from partsdesk.models.users import User
from partsdesk.utils.errors import NotFoundError


def require(db: Session, model, entity_id: int, label: str = None):
    """Load ``model`` by primary key or raise NotFoundError."""
    obj = db.get(model, entity_id)
    if obj is None:
        raise NotFoundError(label or model.__name__, entity_id)
    return obj


def require_client(db: Session, client_id: int) -> Client:
    return require(db, Client, client_id)


def require_user(db: Session, user_id: int) -> User:
    return require(db, User, user_id)


def require_actor(db: Session, user_id: Optional[int]) -> Optional[User]:
    """Check an optional acting user before anything is written on their behalf."""
    if user_id is None:
        return None
    return require(db, User, user_id, "User")
