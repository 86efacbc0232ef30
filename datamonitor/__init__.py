"""
Data Monitor

Runtime covariate-drift monitoring for model inputs:
- schema: learn numeric bounds and categorical value sets from training data
- validator: check runtime batches against the schema and report findings

Findings are returned to the caller and logged at WARNING; drift never
raises. See datamonitor.integrations for pipeline adapters.
"""

__version__ = "1.0.0"

from .exceptions import MonitorError, NotFittedError, SchemaError, ShapeError
from .schema import (
    FeatureKind,
    Finding,
    FindingKind,
    MonitorSchema,
    NumericBounds,
    infer_feature_kinds,
    load_schema,
    save_schema,
)
from .validator import DataMonitor, FindingNotifier, MonitorConfig, UnseenFeaturePolicy

__all__ = [
    "DataMonitor",
    "FindingNotifier",
    "MonitorConfig",
    "UnseenFeaturePolicy",
    "FeatureKind",
    "Finding",
    "FindingKind",
    "MonitorSchema",
    "NumericBounds",
    "infer_feature_kinds",
    "load_schema",
    "save_schema",
    "MonitorError",
    "NotFittedError",
    "SchemaError",
    "ShapeError",
]
