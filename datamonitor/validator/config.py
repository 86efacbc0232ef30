"""
Data Monitor Configuration

Centralized configuration for validation policy and finding emission.
"""

import os
from dataclasses import dataclass, field
from enum import Enum


class UnseenFeaturePolicy(str, Enum):
    """What to do with runtime columns that were not present at fit time."""
    IGNORE = "ignore"
    REPORT = "report"


@dataclass
class MonitorConfig:
    """Configuration for a DataMonitor."""

    # ==========================================================================
    # Validation
    # ==========================================================================

    # ignore: unseen runtime features are skipped silently
    # report: each unseen feature yields an UnseenFeature finding
    unseen_feature_policy: UnseenFeaturePolicy = field(
        default_factory=lambda: UnseenFeaturePolicy(
            os.environ.get("DATA_MONITOR_UNSEEN_FEATURES", "ignore").lower()
        )
    )

    # ==========================================================================
    # Emission
    # ==========================================================================
    log_findings: bool = field(
        default_factory=lambda: os.environ.get("DATA_MONITOR_LOG_FINDINGS", "true").lower() == "true"
    )

    def __post_init__(self):
        self.unseen_feature_policy = UnseenFeaturePolicy(self.unseen_feature_policy)
