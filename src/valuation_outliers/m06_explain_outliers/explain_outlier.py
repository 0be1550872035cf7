"""
🧾 Module: explain_outlier.py

Core producer for the M06 Outlier Explanation module.

Turns a detected outlier back into plain language for reviewers: which attribute
drove the flag and how far it sits from its neighborhood, which other attributes
are also unusual, and a rough "percent above/below average" comparison.

The comparison percentage is |z| * 25. It is a linear display heuristic carried
over from the original review screens, not a percentile estimate.
"""

from decimal import ROUND_HALF_UP, Decimal

from valuation_outliers.m00_utils.exceptions import (
    AttributeValueUnavailableError,
    PropertyNotFoundError,
)
from valuation_outliers.m00_utils.load_data import to_property_records
from valuation_outliers.m05_detect_outliers.attribute_access import (
    get_attribute_value,
    get_neighborhood,
    get_property_id,
)
from valuation_outliers.m05_detect_outliers.outlier_models import (
    OutlierExplanation,
    PropertyOutlier,
)

COMPARISON_PERCENT_PER_SIGMA = 25
SECONDARY_FACTOR_MIN_SCORE = 1.0


def _round_half_up(value: float, places: int) -> Decimal:
    """Round the exact binary value to `places` decimals, ties away from zero."""
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def _format_number(value: float) -> str:
    """Thousands separators, at most three decimals, no trailing zeros."""
    if float(value).is_integer():
        return f"{int(value):,}"
    text = f"{_round_half_up(value, 3):,}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def format_attribute_value(attribute: str, value: float) -> str:
    """Display form of an attribute value ($ for value, sq ft for squareFeet)."""
    if attribute == "value":
        return f"${_format_number(value)}"
    if attribute == "squareFeet":
        return f"{_format_number(value)} sq ft"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _find_property(records, property_id):
    for record in records:
        if get_property_id(record) == property_id:
            return record
    raise PropertyNotFoundError(property_id)


def explain_outlier(outlier: PropertyOutlier, properties) -> OutlierExplanation:
    """
    Build a narrative explanation for one outlier.

    Args:
        outlier (PropertyOutlier): A record produced by detect_outliers.
        properties: The snapshot the outlier was detected in (DataFrame or records).

    Returns:
        OutlierExplanation: Summary sentence, ordered factors and comparison phrase.

    Raises:
        PropertyNotFoundError: The outlier's property id is not in `properties`.
        AttributeValueUnavailableError: The primary attribute has no usable value.
    """
    record = _find_property(to_property_records(properties), outlier.property_id)

    primary = outlier.primary_attribute
    primary_score = outlier.deviation_scores.get(primary)
    primary_value = get_attribute_value(record, primary)
    if primary_score is None or primary_value is None:
        raise AttributeValueUnavailableError(primary, outlier.property_id)

    direction = "above" if primary_score > 0 else "below"
    neighborhood = get_neighborhood(record)
    area = neighborhood or "area"

    magnitude = _round_half_up(abs(primary_score), 1)
    factors = [
        f"{primary} ({format_attribute_value(primary, primary_value)}) is "
        f"{magnitude} standard deviations {direction} the {area} average"
    ]
    secondary_factors = []

    others = sorted(
        ((attr, score) for attr, score in outlier.deviation_scores.items() if attr != primary),
        key=lambda item: abs(item[1]),
        reverse=True,
    )
    for attr, score in others:
        if abs(score) <= SECONDARY_FACTOR_MIN_SCORE:
            continue
        value = get_attribute_value(record, attr)
        if value is None:
            continue
        level = "high" if score > 0 else "low"
        factors.append(
            f"{attr} ({format_attribute_value(attr, value)}) is unusually {level} for the {area}"
        )
        secondary_factors.append(attr)

    property_type = record.get("propertyType")
    if isinstance(property_type, str) and property_type:
        factors.append(f"Property type is {property_type}")

    if neighborhood:
        percent = abs(primary_score * COMPARISON_PERCENT_PER_SIGMA)
        comparison = f"{_round_half_up(percent, 0)}% {direction} the average for {neighborhood}"
    else:
        comparison = "significantly different from similar properties"

    comparative = "higher" if direction == "above" else "lower"
    summary = (
        f"This property has a significantly {comparative} {primary} "
        f"than similar properties in the {area}"
    )

    return OutlierExplanation(
        summary=summary,
        factors=factors,
        primary_factor=primary,
        secondary_factors=secondary_factors,
        z_score=primary_score,
        neighborhood_comparison=comparison,
        anomaly_direction=direction,
    )
