"""
config_models.py — Pydantic models for outlier detection configuration.

DetectionConfig is the immutable value handed to the detector on every call.
OutlierDetectionModuleConfig is the YAML block read by the pipeline runner; it
carries the same knobs plus the runner's own I/O and logging switches.
"""

from collections.abc import Mapping
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from valuation_outliers.m00_utils.exceptions import ConfigurationError
from valuation_outliers.m05_detect_outliers.attribute_access import RECOGNIZED_ATTRIBUTES


class DetectionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    attributes: Tuple[str, ...] = Field(
        ("value",),
        description="Attributes to analyze, in order. The first one is the primary attribute.",
    )
    threshold: float = Field(2.0, description="Absolute z-score above which a value is an outlier.")
    neighborhood_context: bool = Field(
        True, description="Compute statistics per neighborhood instead of globally."
    )
    min_properties_for_stats: int = Field(
        5, description="Minimum sample size for a group or attribute to be analyzed."
    )

    @property
    def primary_attribute(self) -> str:
        return self.attributes[0]


class OutlierDetectionModuleConfig(BaseModel):
    """
    Runtime shape of the `outlier_detection` YAML block.
    Detection knobs sit at the top level next to the runner controls.
    """

    input_path: Optional[str] = Field(
        None, description="CSV of properties; may contain a {run_id} placeholder."
    )
    attributes: Tuple[str, ...] = Field(("value",))
    threshold: float = Field(2.0)
    neighborhood_context: bool = Field(True)
    min_properties_for_stats: int = Field(5)
    explain: bool = Field(True, description="Generate an explanation for every outlier.")
    report: bool = Field(True, description="Build the tabular report for the run.")
    logging: str = Field("auto", description="'auto', 'on' or 'off'.")

    def detection_config(self) -> DetectionConfig:
        return load_detection_config(
            self.model_dump(
                include={"attributes", "threshold", "neighborhood_context", "min_properties_for_stats"}
            )
        )


def validate_detection_config(config: DetectionConfig) -> DetectionConfig:
    """Reject configurations the detector cannot run with."""
    if not config.attributes:
        raise ConfigurationError("At least one attribute must be configured for outlier detection.")
    if not config.threshold > 0:
        raise ConfigurationError(f"Threshold must be a positive number, got {config.threshold!r}.")
    if config.min_properties_for_stats < 0:
        raise ConfigurationError(
            f"min_properties_for_stats cannot be negative, got {config.min_properties_for_stats}."
        )
    return config


def load_detection_config(raw) -> DetectionConfig:
    """
    Build a validated DetectionConfig from a mapping (or pass one through).

    Raises:
        ConfigurationError: If the mapping has the wrong shape or invalid values.
    """
    if isinstance(raw, DetectionConfig):
        return validate_detection_config(raw)
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Detection configuration must be a mapping or DetectionConfig.")
    try:
        config = DetectionConfig.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid detection configuration: {exc}") from exc
    return validate_detection_config(config)


def unrecognized_attributes(config: DetectionConfig) -> list[str]:
    """Configured attribute names the accessor does not know; they never yield values."""
    return [attr for attr in config.attributes if attr not in RECOGNIZED_ATTRIBUTES]
