# dashboard_api/schemas.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Dict, List, Optional

# The dashboard frontend expects camelCase keys
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class TransactionOut(CamelModel):
    id: int
    title: str
    description: str
    category: str
    price: float
    sold: bool
    date_of_sale: datetime
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class TransactionPage(CamelModel):
    total_records: int
    total_pages: int
    current_page: int
    per_page: int
    data: List[TransactionOut]

class Statistics(CamelModel):
    total_sale_amount: float
    total_sold_items: int
    total_not_sold_items: int

class PieChartSlice(CamelModel):
    category: str
    count: int

class CombinedData(CamelModel):
    statistics_data: Statistics
    bar_chart_data: Dict[str, int]
    pie_chart_data: List[PieChartSlice]

class Message(BaseModel):
    message: str
