"""
test_detection_pipeline.py — Runner, configuration and report tests for M05 Outlier Detection.
"""

import pandas as pd
import pytest
import yaml
from pydantic import ValidationError

from valuation_outliers.m00_utils.config_loader import load_config
from valuation_outliers.m00_utils.exceptions import ConfigurationError
from valuation_outliers.m00_utils.report_generator import generate_outlier_report
from valuation_outliers.m05_detect_outliers.config_models import (
    DetectionConfig,
    load_detection_config,
    unrecognized_attributes,
)
from valuation_outliers.m05_detect_outliers.detect_outliers import detect_outliers
from valuation_outliers.m05_detect_outliers.run_detection_pipeline import (
    run_outlier_detection_pipeline,
)


@pytest.fixture
def snapshot_csv(tmp_path, mixed_snapshot):
    path = tmp_path / "run_a_properties.csv"
    pd.DataFrame(mixed_snapshot).to_csv(path, index=False)
    return path


def test_pipeline_from_yaml_config(tmp_path, snapshot_csv):
    """YAML block + CSV input -> result, explanations and report tables."""
    config_path = tmp_path / "outlier_detection_config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "outlier_detection": {
                    "input_path": str(tmp_path / "{run_id}_properties.csv"),
                    "attributes": ["value"],
                    "threshold": 2.0,
                    "neighborhood_context": True,
                    "min_properties_for_stats": 5,
                    "logging": "off",
                }
            }
        )
    )

    outputs = run_outlier_detection_pipeline(config=load_config(config_path), run_id="run_a")

    result = outputs["result"]
    assert [o.property_id for o in result.outliers] == [7]
    assert result.metadata.excluded_properties == 2

    explanation = outputs["explanations"][7]
    assert explanation.anomaly_direction == "above"
    assert "Hillside" in explanation.summary

    report = outputs["report"]
    assert set(report) == {
        "outlier_summary",
        "deviation_details",
        "neighborhood_statistics",
        "run_metadata",
    }
    assert report["outlier_summary"].iloc[0]["primary_label"] == "Property Value"
    assert report["outlier_summary"].iloc[0]["summary"] == explanation.summary
    assert report["run_metadata"].iloc[0]["outlier_percentage"] == 10.0


def test_pipeline_accepts_in_memory_properties(mixed_snapshot):
    """Module block passed directly, explanations and report switched off."""
    config = {"attributes": ["value"], "explain": False, "report": False, "logging": "off"}

    outputs = run_outlier_detection_pipeline(config=config, properties=mixed_snapshot)

    assert len(outputs["result"].outliers) == 1
    assert outputs["explanations"] == {}
    assert outputs["report"] == {}


def test_pipeline_requires_input():
    with pytest.raises(KeyError):
        run_outlier_detection_pipeline(config={"outlier_detection": {"logging": "off"}})


def test_pipeline_requires_run_id_for_templated_path(tmp_path, snapshot_csv):
    """An input_path with a {run_id} placeholder needs a run_id."""
    config = {"input_path": str(tmp_path / "{run_id}_properties.csv"), "logging": "off"}

    with pytest.raises(ValueError, match="run_id"):
        run_outlier_detection_pipeline(config=config)


def test_pipeline_rejects_bad_block():
    with pytest.raises(ConfigurationError):
        run_outlier_detection_pipeline(
            config={"outlier_detection": {"threshold": [1, 2], "logging": "off"}}, properties=[]
        )


def test_load_detection_config_and_unknown_attributes():
    """Raw mappings validate into a frozen config; unknown names are reported."""
    config = load_detection_config({"attributes": ["value", "garage"], "threshold": 2.5})

    assert isinstance(config, DetectionConfig)
    assert config.attributes == ("value", "garage")
    assert config.primary_attribute == "value"
    assert config.min_properties_for_stats == 5
    assert unrecognized_attributes(config) == ["garage"]
    with pytest.raises(ValidationError):
        config.threshold = 3.0


def test_report_tables_for_empty_result():
    """An empty run still yields every table with its columns."""
    result = detect_outliers([], DetectionConfig())

    report = generate_outlier_report(result)

    assert report["outlier_summary"].empty
    assert "primary_z_score" in report["outlier_summary"].columns
    assert report["deviation_details"].empty
    assert report["neighborhood_statistics"].empty
    assert report["run_metadata"].iloc[0]["total_properties"] == 0


def test_deviation_details_rank_attributes(mixed_snapshot):
    result = detect_outliers(mixed_snapshot, DetectionConfig(attributes=["value", "squareFeet"]))

    details = generate_outlier_report(result)["deviation_details"]

    assert list(details.columns) == [
        "property_id", "attribute", "label", "z_score", "abs_z_score", "is_primary"
    ]
    primary_rows = details[details["is_primary"]]
    assert len(primary_rows) == len(result.outliers)
