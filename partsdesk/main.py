# partsdesk/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Process environment also feeds uvicorn and alembic, not only Settings
load_dotenv()

from partsdesk.config import settings
from partsdesk.database import init_db, load_models
from partsdesk.logging_setup import setup_logging
from partsdesk.utils.errors import NotFoundError, PreconditionFailedError, StockLimitExceeded

# Router imports
from partsdesk.routes.pricing import router as pricing_router
from partsdesk.routes.products import router as products_router
from partsdesk.routes.orders import router as orders_router
from partsdesk.routes.quotes import router as quotes_router
from partsdesk.routes.transfers import router as transfers_router

logger = logging.getLogger(__name__)

load_models()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    init_db()
    logger.info("Partsdesk API started")
    yield


app = FastAPI(title="Partsdesk API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain errors -> HTTP status codes
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(StockLimitExceeded)
async def stock_limit_handler(request: Request, exc: StockLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "violations": [v.model_dump() for v in exc.violations]},
    )


@app.exception_handler(PreconditionFailedError)
async def precondition_handler(request: Request, exc: PreconditionFailedError):
    logger.info("Precondition failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


# Router registration
app.include_router(pricing_router)
app.include_router(products_router)
app.include_router(orders_router)
app.include_router(quotes_router)
app.include_router(transfers_router)


@app.get("/")
def read_root():
    return {"message": "Partsdesk API is running"}
