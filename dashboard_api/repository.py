# dashboard_api/repository.py
"""
Record store for transactions.

Handlers only talk to the `TransactionStore` protocol. `SqlTransactionStore`
is the SQLAlchemy adapter used by the API; `InMemoryTransactionStore` keeps
records in a list and is what the handler tests run against.
"""
from collections import Counter
from datetime import datetime, timezone
from itertools import count as id_sequence
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import pandas as pd
from sqlalchemy import Float, Integer, String, and_, case, cast, delete, extract, func, or_, select, true
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .filters import And, Contains, Eq, Expression, MatchAll, MonthEquals, Or, evaluate, month_filter
from .models import Transaction

INSERT_COLUMNS = ["title", "description", "category", "price", "sold", "date_of_sale", "image"]

class PriceBucket:
    """A price range; membership is `lower < price <= upper`. A missing bound is open."""

    def __init__(self, label: str, lower: Optional[float] = None, upper: Optional[float] = None):
        self.label = label
        self.lower = lower
        self.upper = upper

    def contains(self, price: float) -> bool:
        if self.lower is not None and price <= self.lower:
            return False
        if self.upper is not None and price > self.upper:
            return False
        return True

    def to_clause(self, column):
        conditions = []
        if self.lower is not None:
            conditions.append(column > self.lower)
        if self.upper is not None:
            conditions.append(column <= self.upper)
        return and_(*conditions) if conditions else true()

    def __repr__(self):
        return f"PriceBucket({self.label!r})"

class TransactionStore(Protocol):
    def find(self, expression: Expression, skip: int = 0, limit: Optional[int] = None) -> List[Dict[str, Any]]: ...

    def count(self, expression: Expression) -> int: ...

    def sum(self, expression: Expression, field: str) -> float: ...

    def count_by(self, expression: Expression, field: str) -> Dict[Any, int]: ...

    def count_by_price_bucket(
        self, expression: Expression, buckets: Sequence[PriceBucket], default_label: str
    ) -> Dict[str, int]: ...

    def insert_many(self, records: Iterable[Dict[str, Any]]) -> int: ...

    def delete_one(self, record_id: int, month: Optional[int] = None) -> bool: ...

def _column(field: str):
    return getattr(Transaction, field)

def _as_text(column):
    # Whole floats render without a trailing '.0', like filters.as_text
    if isinstance(column.type, Float):
        as_integer = cast(column, Integer)
        return case((column == as_integer, cast(as_integer, String)), else_=cast(column, String))
    if not isinstance(column.type, String):
        return cast(column, String)
    return column

def to_clause(expression: Expression):
    """Translates a filter expression into a SQLAlchemy boolean clause."""
    if isinstance(expression, MatchAll):
        return true()
    if isinstance(expression, And):
        return and_(*(to_clause(operand) for operand in expression.operands))
    if isinstance(expression, Or):
        return or_(*(to_clause(operand) for operand in expression.operands))
    if isinstance(expression, Eq):
        return _column(expression.field) == expression.value
    if isinstance(expression, MonthEquals):
        return extract("month", _column(expression.field)) == expression.month
    if isinstance(expression, Contains):
        column = _as_text(_column(expression.field))
        return column.icontains(expression.text, autoescape=True)
    raise TypeError(f"Unsupported filter expression: {expression!r}")

class SqlTransactionStore:
    """
    SQLAlchemy-backed store. Every call opens its own session, so one store
    can be used from several threadpool workers at once.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def find(self, expression, skip=0, limit=None):
        query = select(Transaction).where(to_clause(expression)).order_by(Transaction.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        with Session(self.engine) as session:
            return [row.to_dict() for row in session.scalars(query)]

    def count(self, expression):
        query = select(func.count()).select_from(Transaction).where(to_clause(expression))
        with Session(self.engine) as session:
            return session.execute(query).scalar_one()

    def sum(self, expression, field):
        query = select(func.sum(_column(field))).where(to_clause(expression))
        with Session(self.engine) as session:
            total = session.execute(query).scalar()
        return total or 0

    def count_by(self, expression, field):
        column = _column(field)
        query = select(column, func.count()).where(to_clause(expression)).group_by(column)
        with Session(self.engine) as session:
            return {key: total for key, total in session.execute(query)}

    def count_by_price_bucket(self, expression, buckets, default_label):
        branches = [(bucket.to_clause(Transaction.price), bucket.label) for bucket in buckets]
        bucketed = (
            select(case(*branches, else_=default_label).label("bucket"))
            .where(to_clause(expression))
            .subquery()
        )
        query = select(bucketed.c.bucket, func.count()).group_by(bucketed.c.bucket)
        with Session(self.engine) as session:
            return {key: total for key, total in session.execute(query)}

    def insert_many(self, records):
        frame = pd.DataFrame.from_records(list(records), columns=INSERT_COLUMNS)
        if frame.empty:
            return 0
        # Bulk append, letting the database fill in id and timestamps
        frame.to_sql(
            Transaction.__tablename__,
            con=self.engine,
            if_exists="append",
            index=False,
        )
        return len(frame)

    def delete_one(self, record_id, month=None):
        query = delete(Transaction).where(
            and_(Transaction.id == record_id, to_clause(month_filter(month)))
        )
        with Session(self.engine) as session:
            result = session.execute(query)
            session.commit()
            return result.rowcount > 0

class InMemoryTransactionStore:
    """List-backed store with the same behaviour as the SQL adapter."""

    def __init__(self, records: Optional[Iterable[Dict[str, Any]]] = None):
        self._records: List[Dict[str, Any]] = []
        self._ids = id_sequence(1)
        if records:
            self.insert_many(records)

    def _matching(self, expression):
        return [record for record in self._records if evaluate(expression, record)]

    def find(self, expression, skip=0, limit=None):
        rows = self._matching(expression)[skip:]
        if limit is not None:
            rows = rows[:limit]
        return [dict(row) for row in rows]

    def count(self, expression):
        return len(self._matching(expression))

    def sum(self, expression, field):
        return sum(record[field] for record in self._matching(expression))

    def count_by(self, expression, field):
        return dict(Counter(record[field] for record in self._matching(expression)))

    def count_by_price_bucket(self, expression, buckets, default_label):
        counts = Counter()
        for record in self._matching(expression):
            label = next(
                (bucket.label for bucket in buckets if bucket.contains(record["price"])),
                default_label,
            )
            counts[label] += 1
        return dict(counts)

    def insert_many(self, records):
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        inserted = 0
        for record in records:
            row = {column: record.get(column) for column in INSERT_COLUMNS}
            row["sold"] = bool(row["sold"])
            row.update(id=next(self._ids), created_at=now, updated_at=now)
            self._records.append(row)
            inserted += 1
        return inserted

    def delete_one(self, record_id, month=None):
        expression = And((Eq("id", record_id), month_filter(month)))
        for index, record in enumerate(self._records):
            if evaluate(expression, record):
                del self._records[index]
                return True
        return False
