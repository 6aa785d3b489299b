# partsdesk/database.py
import enum
from typing import Callable, Dict, Iterable, Optional, Type

from sqlalchemy import create_engine, Enum
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from partsdesk.config import settings

# 1. Address from settings (env / .env), defaults to a local SQLite file
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# 2. Hosted Postgres URLs still use the legacy postgres:// scheme
if SQLALCHEMY_DATABASE_URL and SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

# 3. Driver-specific connection options
if "sqlite" in SQLALCHEMY_DATABASE_URL:
    connect_args = {"check_same_thread": False} # SQLite only
else:
    connect_args = {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args, echo=settings.DB_ECHO
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def enum_column(enum_cls: Type[enum.Enum], name: str) -> Enum:
    """Enum column type storing member values (lowercase) instead of member names."""
    return Enum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e])


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def load_models():
    # Every mapped table has to be registered before create_all / first flush
    import partsdesk.models.users  # noqa: F401
    import partsdesk.models.client  # noqa: F401
    import partsdesk.models.product  # noqa: F401
    import partsdesk.models.stock  # noqa: F401
    import partsdesk.models.pricing  # noqa: F401
    import partsdesk.models.order  # noqa: F401
    import partsdesk.models.quote  # noqa: F401
    import partsdesk.models.transfer  # noqa: F401
    import partsdesk.models.log  # noqa: F401


def init_db(bind=None):
    load_models()
    Base.metadata.create_all(bind=bind or engine)


def upsert(
    db: Session,
    model,
    values: Dict,
    conflict_cols: Iterable[str],
    set_: Optional[Callable] = None,
):
    """
    Build a single INSERT ... ON CONFLICT DO UPDATE statement for ``model``.

    ``set_`` receives the statement's ``excluded`` namespace and returns the
    columns to overwrite on conflict. By default every non-key value is
    replaced with the incoming one.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Upsert is not supported for dialect {dialect!r}")

    conflict_cols = list(conflict_cols)
    stmt = insert(model).values(**values)
    if set_ is None:
        update = {k: getattr(stmt.excluded, k) for k in values if k not in conflict_cols}
    else:
        update = set_(stmt.excluded)
    return stmt.on_conflict_do_update(index_elements=conflict_cols, set_=update)
