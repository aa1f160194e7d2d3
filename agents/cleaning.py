"""
Value cleaning and numeric parsing shared by the comparison agents.

Models pad their answers with placeholders ("Not specified", "N/A", ...);
those count as absent everywhere a data point is read.
"""

import math
import re
from typing import Any, List, Mapping, Optional

PLACEHOLDER_VALUES = frozenset({
    "not specified",
    "n/a",
    "not available",
    "not provided",
    "na",
    "unknown",
    "not mentioned",
    "",
    "-",
})

_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*[-–]\s*(\d+(?:\.\d+)?)")
_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
_LAKH_RANGE = re.compile(r"(\d+(?:\.\d+)?)\s*[-–]\s*(\d+(?:\.\d+)?)\s*(?:lpa|lakh)")
_LAKH = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lpa|lakh)")
_RAW_AMOUNT = re.compile(r"(\d[\d,]*(?:\.\d+)?)")
_INT_RANGE = re.compile(r"(\d+)\s*[-–]\s*(\d+)")
_INT = re.compile(r"(\d+)")
_GRADE_TOKEN = re.compile(r"(?<![A-Za-z])([A-D]\+{0,2})(?![A-Za-z+])")

# Raw currency figures above this are rupees; below, already lakhs
RUPEES_PER_LAKH = 100000
RAW_RUPEE_THRESHOLD = 1000


def clean_data_value(value: Any) -> Any:
    """Return `value` with placeholders mapped to None (lists filtered element-wise)."""
    if value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, str):
        if value.strip().lower() in PLACEHOLDER_VALUES:
            return None
        return value
    if isinstance(value, list):
        cleaned = [v for v in value if clean_data_value(v) is not None]
        return cleaned if cleaned else None
    return value


def is_present(value: Any) -> bool:
    return clean_data_value(value) is not None


def has_signal(value: Any) -> bool:
    """Present and truthy: False, 0 and placeholders carry no signal."""
    return bool(clean_data_value(value))


def populated_keys(points: Mapping[str, Any]) -> List[str]:
    """Keys whose values survive cleaning, in map order."""
    return [k for k, v in points.items() if is_present(v)]


def _as_text(value: Any) -> Optional[str]:
    cleaned = clean_data_value(value)
    if cleaned is None or isinstance(cleaned, bool):
        return None
    if isinstance(cleaned, list):
        return " ".join(str(v) for v in cleaned)
    return str(cleaned)


def _finite(number: Optional[float]) -> Optional[float]:
    """NaN and infinities are not figures."""
    if number is None or not math.isfinite(number):
        return None
    return number


def _lakhs(amount: float) -> float:
    return amount / RUPEES_PER_LAKH if amount > RAW_RUPEE_THRESHOLD else amount


def parse_rate(value: Any) -> Optional[float]:
    """'92%' → 92.0, '90-95%' → 92.5; None when nothing numeric is found."""
    text = _as_text(value)
    if text is None:
        return None
    match = _RANGE.search(text)
    if match:
        return _finite((float(match.group(1)) + float(match.group(2))) / 2)
    match = _NUMBER.search(text)
    return _finite(float(match.group(1))) if match else None


def parse_amount(value: Any) -> Optional[float]:
    """
    Normalize a money figure to lakhs:
      '5.8-6.5 LPA' → 6.15, '12 lakh' → 12.0, '₹1,50,000' → 1.5, '8' → 8.0
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        amount = _finite(float(value))
        return _lakhs(amount) if amount is not None else None

    text = _as_text(value)
    if text is None:
        return None
    lower = text.lower()

    match = _LAKH_RANGE.search(lower)
    if match:
        return _finite((float(match.group(1)) + float(match.group(2))) / 2)

    match = _LAKH.search(lower)
    if match:
        return _finite(float(match.group(1)))

    match = _RAW_AMOUNT.search(lower)
    if match:
        amount = _finite(float(match.group(1).replace(",", "")))
        return _lakhs(amount) if amount is not None else None

    return None


def parse_rank(value: Any) -> Optional[float]:
    """'#45' → 45.0, '201-300' → 250.5; None when no integer is present."""
    text = _as_text(value)
    if text is None:
        return None
    match = _INT_RANGE.search(text)
    if match:
        return _finite((float(match.group(1)) + float(match.group(2))) / 2)
    match = _INT.search(text)
    return _finite(float(match.group(1))) if match else None


def extract_grade_token(text: str) -> Optional[str]:
    """'Accredited with NAAC A++ grade' → 'A++'."""
    match = _GRADE_TOKEN.search(text)
    return match.group(1) if match else None
