# dashboard_api/filters.py
"""
Filter expressions over transaction records.

Expressions are plain frozen dataclasses. The SQL adapter in repository.py
translates them into SQLAlchemy clauses; `evaluate` runs them against
in-memory records.
"""
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

DATE_FIELD = "date_of_sale"
SEARCH_TEXT_FIELDS = ("title", "description")
PRICE_FIELD = "price"

@dataclass(frozen=True)
class MatchAll:
    pass

@dataclass(frozen=True)
class Eq:
    field: str
    value: Any

@dataclass(frozen=True)
class MonthEquals:
    """Month-of-year match on a timestamp field, whatever the year."""
    field: str
    month: int

@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match. Non-text values are matched on their text form."""
    field: str
    text: str

@dataclass(frozen=True)
class And:
    operands: Tuple["Expression", ...]

@dataclass(frozen=True)
class Or:
    operands: Tuple["Expression", ...]

Expression = Union[MatchAll, Eq, MonthEquals, Contains, And, Or]

def month_filter(month: Optional[int]) -> Expression:
    if month is None:
        return MatchAll()
    return MonthEquals(DATE_FIELD, month)

def _parse_number(text: str) -> Optional[float]:
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None

def build_transaction_filter(month: int, search_text: Optional[str] = None) -> Expression:
    """
    Builds the filter used by the transaction listing.

    Args:
        month: Month of the year (1-12) the sale date must fall in
        search_text: Optional free text matched against title, description and price

    Returns:
        Expression: month filter, ANDed with the search clause when the text is not blank
    """
    base = month_filter(month)
    needle = (search_text or "").strip()
    if not needle:
        return base

    terms = [Contains(field, needle) for field in SEARCH_TEXT_FIELDS]
    terms.append(Contains(PRICE_FIELD, needle))
    number = _parse_number(needle)
    if number is not None:
        terms.append(Eq(PRICE_FIELD, number))

    return And((base, Or(tuple(terms))))

def as_text(value: Any) -> str:
    """Text form of a value; whole floats render without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def evaluate(expression: Expression, record: Mapping[str, Any]) -> bool:
    if isinstance(expression, MatchAll):
        return True
    if isinstance(expression, And):
        return all(evaluate(operand, record) for operand in expression.operands)
    if isinstance(expression, Or):
        return any(evaluate(operand, record) for operand in expression.operands)
    if isinstance(expression, Eq):
        return record.get(expression.field) == expression.value
    if isinstance(expression, MonthEquals):
        value = record.get(expression.field)
        return value is not None and value.month == expression.month
    if isinstance(expression, Contains):
        value = record.get(expression.field)
        return value is not None and expression.text.lower() in as_text(value).lower()
    raise TypeError(f"Unsupported filter expression: {expression!r}")
