# dashboard_api/analytics.py
import asyncio
import logging
import math
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from . import schemas
from .filters import And, Eq, build_transaction_filter, month_filter
from .repository import PriceBucket, TransactionStore

logger = logging.getLogger(__name__)

OVERFLOW_BUCKET = "901-above"

# Ten contiguous ranges; prices above 900 (and anything unmatched) go to OVERFLOW_BUCKET
PRICE_BUCKETS = [PriceBucket("0-100", lower=0, upper=100)] + [
    PriceBucket(f"{lower + 1}-{lower + 100}", lower=lower, upper=lower + 100)
    for lower in range(100, 900, 100)
]
BAR_CHART_LABELS = [bucket.label for bucket in PRICE_BUCKETS] + [OVERFLOW_BUCKET]

def list_transactions(
    store: TransactionStore,
    month: int,
    search_text: str = "",
    page: int = 1,
    per_page: int = 10,
) -> schemas.TransactionPage:
    """
    Returns one page of transactions sold in `month`, optionally narrowed by a search text.
    """
    expression = build_transaction_filter(month, search_text)
    skip = (page - 1) * per_page

    records = store.find(expression, skip=skip, limit=per_page)
    total_records = store.count(expression)

    return schemas.TransactionPage(
        total_records=total_records,
        total_pages=math.ceil(total_records / per_page),
        current_page=page,
        per_page=per_page,
        data=[schemas.TransactionOut.model_validate(record) for record in records],
    )

def get_statistics(store: TransactionStore, month: int) -> schemas.Statistics:
    """
    Sold/unsold counts and the total sale amount for a month.

    Each figure is a separate query over the same month filter.
    """
    in_month = month_filter(month)
    sold = And((in_month, Eq("sold", True)))
    not_sold = And((in_month, Eq("sold", False)))

    total_sold_items = store.count(sold)
    total_not_sold_items = store.count(not_sold)
    total_sale_amount = store.sum(sold, "price")

    return schemas.Statistics(
        total_sale_amount=total_sale_amount,
        total_sold_items=total_sold_items,
        total_not_sold_items=total_not_sold_items,
    )

def get_bar_chart_data(store: TransactionStore, month: Optional[int] = None) -> Dict[str, int]:
    counts = store.count_by_price_bucket(month_filter(month), PRICE_BUCKETS, OVERFLOW_BUCKET)
    return {label: counts.get(label, 0) for label in BAR_CHART_LABELS}

def get_pie_chart_data(store: TransactionStore, month: Optional[int] = None) -> List[schemas.PieChartSlice]:
    counts = store.count_by(month_filter(month), "category")
    return [schemas.PieChartSlice(category=category, count=count) for category, count in counts.items()]

async def get_combined_data(
    store: TransactionStore, month: int, timeout: Optional[float] = None
) -> schemas.CombinedData:
    """
    Runs the statistics, bar chart and pie chart queries concurrently.

    All three must succeed: the first failure (or the timeout) propagates and
    the other results are dropped.
    """
    statistics, bar_chart, pie_chart = await asyncio.wait_for(
        asyncio.gather(
            run_in_threadpool(get_statistics, store, month),
            run_in_threadpool(get_bar_chart_data, store, month),
            run_in_threadpool(get_pie_chart_data, store, month),
        ),
        timeout=timeout,
    )
    return schemas.CombinedData(
        statistics_data=statistics,
        bar_chart_data=bar_chart,
        pie_chart_data=pie_chart,
    )
