"""
Schema module for the data monitor.

Provides the schema and finding models and the functions that learn
a schema from reference data.
"""

from .models import (
    FeatureKind,
    NumericBounds,
    SchemaMetadata,
    MonitorSchema,
    FindingKind,
    Finding,
)
from .builder import (
    build_schema,
    canonicalize,
    infer_feature_kind,
    infer_feature_kinds,
    resolve_feature_kinds,
    to_frame,
    save_schema,
    load_schema,
    load_table,
)

__all__ = [
    # Models
    "FeatureKind",
    "NumericBounds",
    "SchemaMetadata",
    "MonitorSchema",
    "FindingKind",
    "Finding",
    # Builder
    "build_schema",
    "canonicalize",
    "infer_feature_kind",
    "infer_feature_kinds",
    "resolve_feature_kinds",
    "to_frame",
    "save_schema",
    "load_schema",
    "load_table",
]
