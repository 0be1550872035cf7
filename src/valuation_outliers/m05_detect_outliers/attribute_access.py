"""
🔎 Module: attribute_access.py

Reads valuation attributes off property records.

Property snapshots arrive from several upstream sources, so the same attribute
can show up as a plain number, a pandas NaN, or (for assessed value) a
currency-formatted string such as "$1,250,000". Everything here turns those into
a float or None and never raises for bad data.
"""

import math
import numbers
import re

RECOGNIZED_ATTRIBUTES = ("value", "squareFeet", "yearBuilt", "bedrooms", "bathrooms", "lotSize")

ATTRIBUTE_LABELS = {
    "value": "Property Value",
    "squareFeet": "Square Footage",
    "yearBuilt": "Year Built",
    "bedrooms": "Bedrooms",
    "bathrooms": "Bathrooms",
    "lotSize": "Lot Size",
}

_NON_NUMERIC_CHARS = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def _is_missing(raw) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    return False


def _as_float(raw):
    if isinstance(raw, bool) or not isinstance(raw, numbers.Real):
        return None
    value = float(raw)
    return None if math.isnan(value) else value


def parse_currency(text: str):
    """
    Parse a currency-formatted string into a float.

    Every character other than digits, '-' and '.' is stripped, then the leading
    numeric prefix is read ("$1,250,000.50" -> 1250000.5). Returns None when
    nothing numeric remains.
    """
    cleaned = _NON_NUMERIC_CHARS.sub("", text)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    return float(match.group(0))


def get_attribute_value(record, attribute: str):
    """
    Return the numeric value of ``attribute`` for a property record, or None.

    Args:
        record (Mapping): A property record.
        attribute (str): One of RECOGNIZED_ATTRIBUTES. Anything else yields None
            so a typo in a configuration drops that attribute instead of failing.

    Returns:
        float | None: The value, or None when it is missing or unparseable.
    """
    if attribute not in RECOGNIZED_ATTRIBUTES:
        return None

    raw = record.get(attribute)
    if _is_missing(raw):
        return None

    if attribute == "value":
        # An empty or zero assessed value means "not assessed" upstream.
        if not raw:
            return None
        if isinstance(raw, str):
            return parse_currency(raw)

    return _as_float(raw)


def get_neighborhood(record):
    """Neighborhood name of a record, or None when blank or missing."""
    raw = record.get("neighborhood")
    if _is_missing(raw) or raw == "":
        return None
    return raw if isinstance(raw, str) else str(raw)


def get_property_id(record):
    raw = record.get("id")
    # numpy scalars from DataFrame rows
    if hasattr(raw, "item"):
        return raw.item()
    return raw
