"""
outlier_models.py — Result structures returned by outlier detection and explanation.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

PropertyId = Union[int, str]


class NeighborhoodStatistics(BaseModel):
    count: int = Field(0, description="Valid properties in the neighborhood.")
    mean: float = Field(0.0, description="Mean of the primary attribute.")
    standard_deviation: float = Field(
        0.0, description="Population standard deviation of the primary attribute."
    )
    outlier_count: int = Field(0, description="Outliers attributed to the neighborhood.")
    skipped_due_to_insufficient_data: bool = False


class PropertyOutlier(BaseModel):
    property_id: PropertyId
    deviation_scores: Dict[str, float] = Field(
        default_factory=dict,
        description="Signed z-score per attribute that individually exceeded the threshold.",
    )
    primary_attribute: str = Field(..., description="Attribute with the largest |z-score|.")
    neighborhood: Optional[str] = None

    @property
    def primary_score(self) -> Optional[float]:
        return self.deviation_scores.get(self.primary_attribute)


class DetectionMetadata(BaseModel):
    total_properties: int = Field(0, description="Properties with every attribute available.")
    outlier_percentage: float = 0.0
    excluded_properties: int = 0


class DetectionResult(BaseModel):
    outliers: List[PropertyOutlier] = Field(default_factory=list)
    metadata: DetectionMetadata = Field(default_factory=DetectionMetadata)
    neighborhood_statistics: Dict[str, NeighborhoodStatistics] = Field(
        default_factory=dict,
        description=(
            "Per-neighborhood statistics. In global mode these are an informational "
            "summary computed after detection, not the statistics outliers were tested against."
        ),
    )


class OutlierExplanation(BaseModel):
    summary: str
    factors: List[str] = Field(default_factory=list)
    primary_factor: str
    secondary_factors: List[str] = Field(default_factory=list)
    z_score: float
    neighborhood_comparison: str
    anomaly_direction: Literal["above", "below"]
