# dashboard_api/seeding.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import requests

logger = logging.getLogger(__name__)

SOURCE_FIELDS = ["title", "description", "category", "price", "sold", "dateOfSale", "image"]
REQUIRED_FIELDS = ["title", "description", "category", "price", "dateOfSale"]
TEXT_FIELDS = ["title", "description", "category", "image"]
COLUMN_NAMES = {"dateOfSale": "date_of_sale"}

INVALID_FORMAT = "Invalid API data format"

_SOLD_STRINGS = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}

def fetch_source_payload(source: str, timeout: float) -> Any:
    """
    Downloads the product list the database is seeded from.

    Args:
        source: http(s) URL of the third-party API, or a path to a local JSON file
        timeout: Seconds to wait for the remote API

    Returns:
        The decoded JSON document, whatever its shape
    """
    if not source.startswith(("http://", "https://")):
        return json.loads(Path(source).read_text(encoding="utf-8"))

    response = requests.get(source, timeout=timeout)
    response.raise_for_status()
    return response.json()

def parse_sold(value: Any) -> bool:
    """Reads a `sold` flag the way the source spells it; missing means not sold."""
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return False
    if pd.api.types.is_bool(value):
        return bool(value)
    if pd.api.types.is_number(value) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in _SOLD_STRINGS:
        return _SOLD_STRINGS[value.strip().lower()]
    raise ValueError(f"invalid sold flag {value!r}")

def validate_source_payload(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, list) or len(payload) == 0:
        raise ValueError(INVALID_FORMAT)
    if not all(isinstance(item, dict) for item in payload):
        raise ValueError(INVALID_FORMAT)
    return payload

def build_seed_records(payload: Any) -> List[Dict[str, Any]]:
    """
    Projects the source items down to the stored transaction fields.

    Extra fields are dropped, text is trimmed, sale dates are normalised to
    naive UTC and a missing `sold` flag means not sold.

    Raises:
        ValueError: If the payload is not a non-empty list of objects, or an item
            is missing a required field or has a bad price or date
    """
    items = validate_source_payload(payload)
    frame = pd.DataFrame.from_records(items).reindex(columns=SOURCE_FIELDS)

    missing_cols = [col for col in REQUIRED_FIELDS if frame[col].isna().any()]
    if missing_cols:
        raise ValueError(f"Source data is missing required fields: {', '.join(missing_cols)}")

    try:
        frame["price"] = pd.to_numeric(frame["price"])
        frame["dateOfSale"] = pd.to_datetime(frame["dateOfSale"], utc=True, format="mixed").dt.tz_localize(None)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Source data contains corrupt or malformed data: {e}")

    if (frame["price"] < 0).any():
        raise ValueError("Source data contains negative prices")

    try:
        frame["sold"] = frame["sold"].map(parse_sold).astype(bool)
    except ValueError as e:
        raise ValueError(f"Source data contains corrupt or malformed data: {e}")

    # Optional columns can be all-NaN floats, so strip value by value
    for col in TEXT_FIELDS:
        frame[col] = frame[col].map(lambda value: str(value).strip(), na_action="ignore")

    frame = frame.rename(columns=COLUMN_NAMES)
    frame = frame.astype(object).where(frame.notna(), None)
    records = frame.to_dict(orient="records")
    logger.debug("Prepared %d seed records", len(records))
    return records
