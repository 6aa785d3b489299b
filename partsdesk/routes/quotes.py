# partsdesk/routes/quotes.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from partsdesk.database import get_db
from partsdesk.services.lookups import require_actor
from partsdesk.services.quotes import QuoteService
from partsdesk.utils.audit import write_log
from partsdesk.schemas.quote import QuoteCreate, QuoteOut, QuoteItemOut, QuoteConvert, QuoteConversionOut

router = APIRouter(prefix="/quotes", tags=["Quotes"])


# Representative issues a quote with its share link and QR payload
@router.post("", response_model=QuoteOut, status_code=status.HTTP_201_CREATED)
def create_quote(payload: QuoteCreate, request: Request, db: Session = Depends(get_db)):
    quote = QuoteService(db).create_quote(
        payload.client_id, payload.representative_id, payload.items, expires_in_days=payload.expires_in_days
    )
    write_log(
        db, user_id=payload.representative_id, action="QUOTE_CREATE", resource="quotes", status="SUCCESS",
        ip=request.client.host,
        meta={"quote_id": quote.id, "client_id": quote.client_id, "total": quote.total_amount},
    )
    return quote


# Public access through the share link token
@router.get("/share/{token}", response_model=QuoteOut)
def get_quote_by_share_token(token: str, db: Session = Depends(get_db)):
    return QuoteService(db).get_quote_by_share_token(token)


@router.get("/client/{client_id}", response_model=List[QuoteOut])
def get_quotes_by_client(client_id: int, db: Session = Depends(get_db)):
    return QuoteService(db).get_quotes_by_client(client_id)


@router.get("/representative/{representative_id}", response_model=List[QuoteOut])
def get_quotes_by_representative(representative_id: int, db: Session = Depends(get_db)):
    return QuoteService(db).get_quotes_by_representative(representative_id)


@router.get("/{quote_id}", response_model=QuoteOut)
def get_quote(quote_id: int, db: Session = Depends(get_db)):
    return QuoteService(db).get_quote(quote_id)


@router.get("/{quote_id}/items", response_model=List[QuoteItemOut])
def get_quote_items(quote_id: int, db: Session = Depends(get_db)):
    return QuoteService(db).get_quote_items(quote_id)


# Convert an accepted quote into an order, keeping the quoted prices
@router.post("/{quote_id}/convert", response_model=QuoteConversionOut)
def convert_quote_to_order(quote_id: int, payload: QuoteConvert, request: Request, db: Session = Depends(get_db)):
    require_actor(db, payload.converted_by)
    quote, order = QuoteService(db).convert_quote_to_order(quote_id, payload.carrier)
    write_log(
        db, user_id=payload.converted_by, action="QUOTE_CONVERT", resource="quotes", status="SUCCESS",
        ip=request.client.host,
        meta={"quote_id": quote.id, "order_id": order.id},
    )
    return {"quote": quote, "order": order}
