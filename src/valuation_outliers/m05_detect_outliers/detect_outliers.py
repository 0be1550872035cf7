"""
🔬 Module: detect_outliers.py

Core producer for the M05 Outlier Detection module.

Flags properties whose valuation attributes sit abnormally far from their peers.
For each configured attribute a population mean and standard deviation are
computed, either per neighborhood or over the whole valid population, and any
property whose |z-score| exceeds the threshold is recorded. Multiple attribute
violations for the same property merge into one outlier record whose primary
attribute is the largest deviation.

Groups or attributes with fewer samples than `min_properties_for_stats` are
skipped, as is any attribute whose spread is effectively zero.

Used by the M05 pipeline runner and callable directly on an in-memory snapshot.
"""

import logging

from valuation_outliers.m00_utils.load_data import to_property_records
from valuation_outliers.m05_detect_outliers.attribute_access import (
    get_attribute_value,
    get_neighborhood,
    get_property_id,
)
from valuation_outliers.m05_detect_outliers.config_models import load_detection_config
from valuation_outliers.m05_detect_outliers.grouping import group_by_neighborhood, grouping_for
from valuation_outliers.m05_detect_outliers.outlier_models import (
    DetectionMetadata,
    DetectionResult,
    NeighborhoodStatistics,
    PropertyOutlier,
)
from valuation_outliers.m05_detect_outliers.statistics import (
    MIN_STANDARD_DEVIATION,
    calculate_statistics,
    zscore,
)


def _has_all_attributes(record, attributes) -> bool:
    return all(get_attribute_value(record, attr) is not None for attr in attributes)


def _attribute_values(records, attribute) -> list[float]:
    values = (get_attribute_value(r, attribute) for r in records)
    return [v for v in values if v is not None]


def _record_deviation(accumulators: dict, record, attribute: str, score: float) -> bool:
    """
    Upsert the outlier accumulator for a record. Returns True if it was created.

    The primary attribute only moves when the new |z| is strictly larger than the
    magnitude stored for the current primary.
    """
    property_id = get_property_id(record)
    entry = accumulators.get(property_id)
    created = entry is None
    if created:
        entry = {
            "property_id": property_id,
            "deviation_scores": {},
            "primary_attribute": attribute,
            "neighborhood": get_neighborhood(record),
        }
        accumulators[property_id] = entry

    entry["deviation_scores"][attribute] = score
    current = entry["deviation_scores"].get(entry["primary_attribute"], 0.0)
    if abs(score) > abs(current):
        entry["primary_attribute"] = attribute
    return created


def _test_attribute(members, attribute, config, accumulators, group_stats=None) -> bool:
    """
    Run the z-score test for one attribute over one group.

    Returns False when the attribute was skipped for sparsity or lack of spread.
    """
    values = _attribute_values(members, attribute)
    if len(values) < config.min_properties_for_stats:
        logging.debug(f"Skipping '{attribute}': {len(values)} values below minimum.")
        return False

    mean, std = calculate_statistics(values)
    if group_stats is not None and attribute == config.primary_attribute:
        group_stats.mean = mean
        group_stats.standard_deviation = std

    if std < MIN_STANDARD_DEVIATION:
        logging.debug(f"Skipping '{attribute}': standard deviation {std:.2e} is degenerate.")
        return False

    for record in members:
        value = get_attribute_value(record, attribute)
        if value is None:
            continue
        score = zscore(value, mean, std)
        if abs(score) > config.threshold:
            created = _record_deviation(accumulators, record, attribute, score)
            if created and group_stats is not None:
                group_stats.outlier_count += 1
    return True


def _summarize_neighborhoods(valid_records, config, accumulators) -> dict:
    """
    Informational per-neighborhood statistics for global mode.

    outlier_count is the number of outliers found so far (globally) whose
    neighborhood matches; these numbers are never used for detection.
    """
    summary = {}
    attribute = config.primary_attribute
    for neighborhood, members in group_by_neighborhood(valid_records).items():
        values = _attribute_values(members, attribute)
        if len(values) < config.min_properties_for_stats:
            summary[neighborhood] = NeighborhoodStatistics(
                count=len(members), skipped_due_to_insufficient_data=True
            )
            continue
        mean, std = calculate_statistics(values)
        summary[neighborhood] = NeighborhoodStatistics(
            count=len(members),
            mean=mean,
            standard_deviation=std,
            outlier_count=sum(1 for o in accumulators.values() if o["neighborhood"] == neighborhood),
        )
    return summary


def detect_outliers(properties, config) -> DetectionResult:
    """
    Detect valuation outliers in a property snapshot.

    Args:
        properties: pandas DataFrame or iterable of property mappings. Not mutated.
        config (DetectionConfig | dict): Detection settings.

    Returns:
        DetectionResult: Outliers in detection order, run metadata and
        per-neighborhood statistics.

    Raises:
        ConfigurationError: If no attributes are configured or the threshold is not positive.
    """
    config = load_detection_config(config)

    records = to_property_records(properties)
    valid_records = [r for r in records if _has_all_attributes(r, config.attributes)]

    strategy = grouping_for(config.neighborhood_context)
    accumulators: dict = {}
    neighborhood_statistics: dict[str, NeighborhoodStatistics] = {}

    for key, members in strategy.partition(valid_records):
        group_stats = None
        if strategy.segmented:
            group_stats = NeighborhoodStatistics(count=len(members))
            neighborhood_statistics[key] = group_stats
            if len(members) < config.min_properties_for_stats:
                group_stats.skipped_due_to_insufficient_data = True
                logging.info(
                    f"Neighborhood '{key}' skipped: {len(members)} properties, "
                    f"{config.min_properties_for_stats} required."
                )
                continue

        for attribute in config.attributes:
            tested = _test_attribute(members, attribute, config, accumulators, group_stats)
            if tested and not strategy.segmented and attribute == config.primary_attribute:
                neighborhood_statistics.update(
                    _summarize_neighborhoods(valid_records, config, accumulators)
                )

    outliers = [PropertyOutlier(**entry) for entry in accumulators.values()]
    total = len(valid_records)
    metadata = DetectionMetadata(
        total_properties=total,
        outlier_percentage=(len(outliers) / total) * 100 if total > 0 else 0.0,
        excluded_properties=len(records) - total,
    )
    logging.info(
        f"Outlier detection complete: {len(outliers)} outliers in {total} properties "
        f"({metadata.excluded_properties} excluded)."
    )
    return DetectionResult(
        outliers=outliers,
        metadata=metadata,
        neighborhood_statistics=neighborhood_statistics,
    )


def filter_outliers_by_neighborhood(result: DetectionResult, neighborhood=None) -> list[PropertyOutlier]:
    """Outliers belonging to one neighborhood, or all of them when neighborhood is None."""
    if neighborhood is None:
        return list(result.outliers)
    return [o for o in result.outliers if o.neighborhood == neighborhood]


def list_neighborhoods(result: DetectionResult) -> list[str]:
    """Sorted neighborhood names that have statistics in the result."""
    return sorted(result.neighborhood_statistics)
