"""
🚀 Module: run_detection_pipeline.py

Runner script for the M05 Outlier Detection module.

Loads the property snapshot (unless one is passed in), runs z-score outlier
detection with the configured attributes and neighborhood policy, optionally
explains every flagged property, and assembles the tabular report.

Example:
    >>> from valuation_outliers.m00_utils.config_loader import load_config
    >>> from valuation_outliers.m05_detect_outliers.run_detection_pipeline import (
    ...     run_outlier_detection_pipeline,
    ... )
    >>> config = load_config("config/outlier_detection_config.yaml")
    >>> outputs = run_outlier_detection_pipeline(config=config, properties=df, run_id="q3_review")
    >>> outputs["result"].metadata.outlier_percentage

Usage (CLI):
    python -m valuation_outliers.m05_detect_outliers.run_detection_pipeline \\
        --config config/outlier_detection_config.yaml --run-id q3_review
"""

import argparse
import logging

from pydantic import ValidationError

from valuation_outliers.m00_utils.config_loader import load_config, resolve_module_config
from valuation_outliers.m00_utils.exceptions import (
    AttributeValueUnavailableError,
    ConfigurationError,
    PropertyNotFoundError,
)
from valuation_outliers.m00_utils.load_data import load_csv, to_property_records
from valuation_outliers.m00_utils.report_generator import generate_outlier_report
from valuation_outliers.m05_detect_outliers.config_models import (
    OutlierDetectionModuleConfig,
    unrecognized_attributes,
)
from valuation_outliers.m05_detect_outliers.detect_outliers import detect_outliers
from valuation_outliers.m06_explain_outliers.explain_outlier import explain_outlier


def configure_logging(logging_mode: str = "auto"):
    if logging_mode == "off":
        logging.disable(logging.CRITICAL)
    else:
        logging.disable(logging.NOTSET)
        level = logging.INFO if logging_mode == "on" else logging.WARNING
        logging.basicConfig(
            level=level, format="%(asctime)s - %(levelname)s - %(message)s", force=True
        )


def run_outlier_detection_pipeline(config: dict, properties=None, run_id: str = None) -> dict:
    """
    Executes the outlier detection pipeline.

    Args:
        config (dict): Full config (with an `outlier_detection` block) or the block itself.
        properties: Optional DataFrame or records; loaded from `input_path` when omitted.
        run_id (str, optional): Substituted into `input_path`.

    Returns:
        dict: {"result": DetectionResult, "explanations": dict, "report": dict}
    """
    raw_cfg = resolve_module_config(config, "outlier_detection")
    try:
        module_cfg = OutlierDetectionModuleConfig.model_validate(raw_cfg)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid outlier_detection configuration: {exc}") from exc

    configure_logging(logging_mode=module_cfg.logging)
    detection_cfg = module_cfg.detection_config()

    unknown = unrecognized_attributes(detection_cfg)
    if unknown:
        logging.warning(
            f"⚠️ Unrecognized attributes {unknown}: no property can supply them, "
            "so every property will be excluded."
        )

    if properties is None:
        if not module_cfg.input_path:
            raise KeyError("Missing 'input_path' and no properties provided.")
        if "{run_id}" in module_cfg.input_path and not run_id:
            raise ValueError("A 'run_id' must be provided.")
        input_path = module_cfg.input_path.format(run_id=run_id)
        logging.info(f"🚚 Loading properties from {input_path}")
        properties = load_csv(input_path)

    records = to_property_records(properties)
    result = detect_outliers(records, detection_cfg)
    logging.info(
        f"✅ {len(result.outliers)} outliers flagged "
        f"({result.metadata.outlier_percentage:.2f}% of {result.metadata.total_properties})"
    )

    explanations = {}
    if module_cfg.explain:
        for outlier in result.outliers:
            try:
                explanations[outlier.property_id] = explain_outlier(outlier, records)
            except (PropertyNotFoundError, AttributeValueUnavailableError) as exc:
                logging.error(f"Could not explain outlier {outlier.property_id}: {exc}")

    report = generate_outlier_report(result, explanations) if module_cfg.report else {}

    return {"result": result, "explanations": explanations, "report": report}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Flag and explain property valuation outliers."
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/outlier_detection_config.yaml",
        help="Path to the outlier detection YAML config.",
    )
    parser.add_argument("--run-id", type=str, default=None, help="Run identifier for input paths.")
    args = parser.parse_args()

    outputs = run_outlier_detection_pipeline(config=load_config(args.config), run_id=args.run_id)
    for property_id, explanation in outputs["explanations"].items():
        print(f"{property_id}: {explanation.summary}")
