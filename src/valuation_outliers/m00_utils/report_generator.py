"""
📦 Module: report_generator.py

Tabular report generation for the outlier detection and explanation modules.

Flattens a DetectionResult (and optional explanations) into a dictionary of
pandas DataFrames so downstream viewers or exporters can consume one shape.
Writing those tables to disk is left to the caller.
"""

import pandas as pd

from valuation_outliers.m05_detect_outliers.attribute_access import ATTRIBUTE_LABELS

_SUMMARY_COLUMNS = [
    "property_id",
    "neighborhood",
    "primary_attribute",
    "primary_label",
    "primary_z_score",
    "anomaly_direction",
    "attributes_flagged",
]


def generate_outlier_report(result, explanations: dict = None) -> dict:
    """
    Standardizes a detection result (plus explanations, if any) for review.

    Args:
        result (DetectionResult): Output of detect_outliers.
        explanations (dict, optional): property_id -> OutlierExplanation.

    Returns:
        dict[str, pd.DataFrame]: outlier_summary, deviation_details,
        neighborhood_statistics and run_metadata tables.
    """
    explanations = explanations or {}
    report = {}

    summary_rows = []
    detail_rows = []
    for outlier in result.outliers:
        score = outlier.primary_score
        row = {
            "property_id": outlier.property_id,
            "neighborhood": outlier.neighborhood,
            "primary_attribute": outlier.primary_attribute,
            "primary_label": ATTRIBUTE_LABELS.get(outlier.primary_attribute, outlier.primary_attribute),
            "primary_z_score": score,
            "anomaly_direction": "above" if score is not None and score > 0 else "below",
            "attributes_flagged": len(outlier.deviation_scores),
        }
        explanation = explanations.get(outlier.property_id)
        if explanation is not None:
            row["summary"] = explanation.summary
            row["neighborhood_comparison"] = explanation.neighborhood_comparison
        summary_rows.append(row)

        ranked = sorted(outlier.deviation_scores.items(), key=lambda item: abs(item[1]), reverse=True)
        for attribute, z in ranked:
            detail_rows.append({
                "property_id": outlier.property_id,
                "attribute": attribute,
                "label": ATTRIBUTE_LABELS.get(attribute, attribute),
                "z_score": z,
                "abs_z_score": abs(z),
                "is_primary": attribute == outlier.primary_attribute,
            })

    report["outlier_summary"] = (
        pd.DataFrame(summary_rows) if summary_rows else pd.DataFrame(columns=_SUMMARY_COLUMNS)
    )
    report["deviation_details"] = pd.DataFrame(
        detail_rows,
        columns=["property_id", "attribute", "label", "z_score", "abs_z_score", "is_primary"],
    )

    stats_rows = [
        {"neighborhood": name, **stats.model_dump()}
        for name, stats in result.neighborhood_statistics.items()
    ]
    report["neighborhood_statistics"] = pd.DataFrame(
        stats_rows,
        columns=[
            "neighborhood",
            "count",
            "mean",
            "standard_deviation",
            "outlier_count",
            "skipped_due_to_insufficient_data",
        ],
    )

    metadata = result.metadata
    report["run_metadata"] = pd.DataFrame([{
        "total_properties": metadata.total_properties,
        "excluded_properties": metadata.excluded_properties,
        "outlier_count": len(result.outliers),
        "outlier_percentage": round(metadata.outlier_percentage, 2),
    }])

    return report
