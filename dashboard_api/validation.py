# dashboard_api/validation.py
from typing import Optional

INVALID_MONTH = "Invalid month number"
INVALID_PAGINATION = "Invalid pagination parameters"
INVALID_ID = "Invalid transaction id"

def _parse_int(value: str) -> Optional[int]:
    # Plain ASCII digits only; int() alone would also take "1_2" or non-latin digits
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)

def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()

def parse_month(value: Optional[str], required: bool = True) -> Optional[int]:
    """
    Parses the `month` query parameter.

    Args:
        value: Raw query string value
        required: When False, a missing or blank value means "all months"

    Returns:
        int | None: Month number 1-12, or None when optional and absent

    Raises:
        ValueError: If the value is missing (when required), not an integer, or out of range
    """
    if _is_blank(value):
        if required:
            raise ValueError(INVALID_MONTH)
        return None

    month = _parse_int(value)
    if month is None or not 1 <= month <= 12:
        raise ValueError(INVALID_MONTH)
    return month

def parse_positive_int(value: Optional[str], default: int, message: str = INVALID_PAGINATION) -> int:
    if value is None:
        return default
    number = _parse_int(value)
    if number is None or number <= 0:
        raise ValueError(message)
    return number

def parse_record_id(value: Optional[str]) -> int:
    if _is_blank(value):
        raise ValueError(INVALID_ID)
    return parse_positive_int(value, default=0, message=INVALID_ID)
