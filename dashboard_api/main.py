# dashboard_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import requests
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import analytics, schemas, seeding, validation
from .config import settings
from .database import engine as main_engine, init_db
from .repository import SqlTransactionStore, TransactionStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(main_engine)
    yield

app = FastAPI(
    title="Transaction Dashboard API",
    description="API for listing, summarising and charting product sale transactions.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Every error body is {"message": ...}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

# Dependency function for engine
def get_engine():
    yield main_engine

# Dependency function for the record store
def get_store(engine: Engine = Depends(get_engine)) -> TransactionStore:
    return SqlTransactionStore(engine)

def bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(e))

router = APIRouter(prefix=settings.API_PREFIX)

@app.get("/")
def read_root():
    return {"message": "Welcome to the Transaction Dashboard API"}

# Run only once per deployment: every call inserts the whole source again
@router.get("/seed-data", response_model=schemas.Message)
def seed_data(store: TransactionStore = Depends(get_store)):
    """
    Fetches the third-party product list and bulk-inserts it as transactions.
    """
    try:
        payload = seeding.fetch_source_payload(
            settings.SEED_SOURCE_URL, timeout=settings.SEED_REQUEST_TIMEOUT_SECONDS
        )
    except (requests.RequestException, OSError, ValueError):
        logger.exception("Failed to fetch seed data from %s", settings.SEED_SOURCE_URL)
        raise HTTPException(status_code=500, detail="Failed to seed data")

    try:
        records = seeding.build_seed_records(payload)
    except ValueError as e:
        raise bad_request(e)
    except Exception:
        logger.exception("Failed to prepare seed data")
        raise HTTPException(status_code=500, detail="Failed to seed data")

    try:
        store.insert_many(records)
    except Exception:
        logger.exception("Failed to insert seed data")
        raise HTTPException(status_code=500, detail="Failed to seed data")

    logger.info("Seeded %d transactions", len(records))
    return {"message": "Data seeded successfully"}

@router.get("/all-transactions", response_model=schemas.TransactionPage)
def list_transactions(
    month: Optional[str] = None,
    search_text: str = Query("", alias="searchText"),
    page: Optional[str] = None,
    per_page: Optional[str] = Query(None, alias="perPage"),
    store: TransactionStore = Depends(get_store),
):
    """
    Lists the transactions of a month, paginated.
    - **month**: Month of the year (1-12), required
    - **searchText**: Matches title, description or price
    - **page** / **perPage**: Positive integers, default 1 and 10
    """
    try:
        month_number = validation.parse_month(month)
        page_number = validation.parse_positive_int(page, default=1)
        page_size = validation.parse_positive_int(per_page, default=10)
    except ValueError as e:
        raise bad_request(e)

    try:
        return analytics.list_transactions(store, month_number, search_text, page_number, page_size)
    except Exception:
        logger.exception("Failed to list transactions")
        raise HTTPException(status_code=500, detail="Failed to list transactions")

@router.get("/statistics", response_model=schemas.Statistics)
def get_statistics(month: Optional[str] = None, store: TransactionStore = Depends(get_store)):
    try:
        month_number = validation.parse_month(month)
    except ValueError as e:
        raise bad_request(e)

    try:
        return analytics.get_statistics(store, month_number)
    except Exception:
        logger.exception("Failed to fetch statistics")
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")

@router.get("/bar-chart-data", response_model=Dict[str, int])
def get_bar_chart_data(month: Optional[str] = None, store: TransactionStore = Depends(get_store)):
    try:
        month_number = validation.parse_month(month, required=False)
    except ValueError as e:
        raise bad_request(e)

    try:
        return analytics.get_bar_chart_data(store, month_number)
    except Exception:
        logger.exception("Failed to fetch bar chart data")
        raise HTTPException(status_code=500, detail="Failed to fetch bar chart data")

@router.get("/pie-chart-data", response_model=List[schemas.PieChartSlice])
def get_pie_chart_data(month: Optional[str] = None, store: TransactionStore = Depends(get_store)):
    try:
        month_number = validation.parse_month(month, required=False)
    except ValueError as e:
        raise bad_request(e)

    try:
        return analytics.get_pie_chart_data(store, month_number)
    except Exception:
        logger.exception("Failed to fetch pie chart data")
        raise HTTPException(status_code=500, detail="Failed to fetch pie chart data")

@router.get("/combined-data", response_model=schemas.CombinedData)
async def get_combined_data(month: Optional[str] = None, store: TransactionStore = Depends(get_store)):
    """
    Statistics, bar chart and pie chart for a month in one response.
    Fails as a whole if any of the three fails.
    """
    try:
        month_number = validation.parse_month(month)
    except ValueError as e:
        raise bad_request(e)

    try:
        return await analytics.get_combined_data(
            store, month_number, timeout=settings.COMBINED_DATA_TIMEOUT_SECONDS
        )
    except Exception:
        logger.exception("Failed to fetch combined data")
        raise HTTPException(status_code=500, detail="Failed to fetch combined data")

# e.g. DELETE /api/v1/delete?id=12&month=2
@router.delete("/delete", response_model=schemas.Message)
def delete_transaction(
    id: Optional[str] = None,
    month: Optional[str] = None,
    store: TransactionStore = Depends(get_store),
):
    """
    Deletes one transaction by id. When `month` is given, the transaction is
    only deleted if it was sold in that month.
    """
    try:
        record_id = validation.parse_record_id(id)
        month_number = validation.parse_month(month, required=False)
    except ValueError as e:
        raise bad_request(e)

    try:
        deleted = store.delete_one(record_id, month=month_number)
    except Exception:
        logger.exception("Failed to delete transaction %s", record_id)
        raise HTTPException(status_code=500, detail="Failed to delete transaction")

    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"message": "Transaction deleted successfully"}

app.include_router(router)
