"""
Validator Module

Runtime validation of feature tables against a learned schema.
"""

from .config import MonitorConfig, UnseenFeaturePolicy
from .checks import (
    count_above_max,
    count_below_min,
    find_unknown_categories,
    check_numeric_feature,
    check_categorical_feature,
    check_unseen_feature,
)
from .notifier import FindingNotifier
from .monitor import DataMonitor

__all__ = [
    # Config
    "MonitorConfig",
    "UnseenFeaturePolicy",
    # Checks
    "count_above_max",
    "count_below_min",
    "find_unknown_categories",
    "check_numeric_feature",
    "check_categorical_feature",
    "check_unseen_feature",
    # Emission
    "FindingNotifier",
    # Monitor
    "DataMonitor",
]
