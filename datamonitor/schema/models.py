"""
Schema and finding models for the data monitor.

Defines the structure of the schema learned from reference data
and of the findings reported when runtime data deviates from it.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class FeatureKind(str, Enum):
    """How a feature is summarized and validated."""
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class NumericBounds(BaseModel):
    """Observed range of a numeric feature."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(allow_inf_nan=False)
    max: float = Field(allow_inf_nan=False)


class SchemaMetadata(BaseModel):
    """Metadata about the reference table a schema was learned from."""
    model_config = ConfigDict(frozen=True)

    created_at: datetime
    num_rows: int
    feature_count: int


class MonitorSchema(BaseModel):
    """
    Learned schema.

    Contains everything validation needs:
    - Min/max bounds for each numeric feature
    - Observed value set for each categorical feature
    - The kind each feature was assigned at fit time

    Feature order in ``numeric`` and ``categoricals`` follows the column
    order of the reference table and drives finding order.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "numeric": {"feature4": {"min": 0.88, "max": 99.94}},
                "categoricals": {"feature1": ["0", "1", "2", "3", "4"]},
                "feature_kinds": {"feature1": "categorical", "feature4": "numeric"},
                "metadata": {
                    "created_at": "2024-01-15T10:30:00Z",
                    "num_rows": 5,
                    "feature_count": 2,
                },
            }
        },
    )

    numeric: Dict[str, NumericBounds] = Field(
        default_factory=dict,
        description="Bounds for each numeric feature",
    )
    categoricals: Dict[str, FrozenSet[str]] = Field(
        default_factory=dict,
        description="Observed canonical values for each categorical feature",
    )
    feature_kinds: Dict[str, FeatureKind] = Field(
        default_factory=dict,
        description="Kind of every fitted feature, in column order",
    )
    metadata: Optional[SchemaMetadata] = None

    @field_serializer("categoricals")
    def _serialize_categoricals(self, categoricals: Dict[str, FrozenSet[str]]) -> Dict[str, List[str]]:
        return {name: sorted(values) for name, values in categoricals.items()}

    @property
    def feature_names(self) -> List[str]:
        """Ordered list of fitted feature names."""
        return list(self.feature_kinds)


class FindingKind(str, Enum):
    """Kinds of deviation a validation can report."""
    ABOVE_MAX = "AboveMax"
    BELOW_MIN = "BelowMin"
    UNKNOWN_CATEGORY = "UnknownCategory"
    UNSEEN_FEATURE = "UnseenFeature"


class Finding(BaseModel):
    """A single feature's deviation from the schema."""
    model_config = ConfigDict(frozen=True)

    kind: FindingKind
    feature: str
    count: int
    distinct_unknown_values: List[str] = Field(default_factory=list)
    threshold: Optional[float] = None  # violated bound, numeric findings only

    @property
    def message(self) -> str:
        """Human-readable summary of the finding."""
        if self.kind == FindingKind.ABOVE_MAX:
            return f"{self.count} value(s) of '{self.feature}' above fitted max {self.threshold}"
        if self.kind == FindingKind.BELOW_MIN:
            return f"{self.count} value(s) of '{self.feature}' below fitted min {self.threshold}"
        if self.kind == FindingKind.UNKNOWN_CATEGORY:
            return (
                f"{self.count} value(s) of '{self.feature}' not seen at fit time: "
                f"{self.distinct_unknown_values}"
            )
        return f"feature '{self.feature}' was not present at fit time ({self.count} value(s))"
