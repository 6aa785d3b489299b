import logging
import re
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from partsdesk.logging_setup import LOG_FILE_NAME, setup_logging
from partsdesk.models.log import Log
from partsdesk.models.order import Order
from partsdesk.models.stock import Warehouse
from partsdesk.utils.audit import write_log
from partsdesk.utils.errors import NotFoundError, StockLimitExceeded
from partsdesk.schemas.pricing import LimitViolation
from partsdesk.utils.numbering import generate_document_number


def test_document_number_format(db):
    number = generate_document_number(db, Order.order_number, "ORD", now=datetime(2026, 3, 14))
    assert re.fullmatch(r"ORD-20260314-[0-9A-F]{4}", number)


def test_error_messages():
    assert str(NotFoundError("Client", 7)) == "Client with ID 7 not found"
    exc = StockLimitExceeded([
        LimitViolation(product_id=3, requested_quantity=5, remaining_limit=1, monthly_limit=4),
    ])
    assert "3" in str(exc)
    assert exc.violations[0].monthly_limit == 4


def test_write_log_encodes_meta(db):
    entry = write_log(
        db, user_id=None, action="STOCK_SET", resource="stock", ip="10.0.0.1",
        meta={"warehouse": Warehouse.DRB_OMAR, "total": Decimal("12.50")},
    )

    stored = db.get(Log, entry.id)
    assert stored.status == "SUCCESS"
    assert stored.meta == {"warehouse": "drb_omar", "total": 12.5}


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers.clear()


def test_setup_logging_console_only(clean_root_logger):
    assert setup_logging(SimpleNamespace(LOG_LEVEL="debug", LOG_DIR=None)) is None
    assert clean_root_logger.level == logging.DEBUG


def test_setup_logging_writes_file(clean_root_logger, tmp_path):
    settings = SimpleNamespace(LOG_LEVEL="INFO", LOG_DIR=tmp_path / "logs")

    path = setup_logging(settings)
    setup_logging(settings)  # idempotent
    logging.getLogger("partsdesk.test").info("hello ledger")
    for handler in clean_root_logger.handlers:
        handler.flush()

    assert path == tmp_path / "logs" / LOG_FILE_NAME
    assert "hello ledger" in path.read_text(encoding="utf-8")
    file_handlers = [h for h in clean_root_logger.handlers if getattr(h, "baseFilename", None)]
    assert len(file_handlers) == 1
