"""scikit-learn adapter: run a DataMonitor as a pass-through pipeline step."""

import logging
from typing import Any, List, Mapping, Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from datamonitor.schema.models import Finding
from datamonitor.validator.monitor import DataMonitor

logger = logging.getLogger(__name__)


def _as_table(X: Any) -> Any:
    # Bare arrays get positional column names "0", "1", ...
    if isinstance(X, np.ndarray):
        if X.ndim != 2:
            raise ValueError(f"Expected 2D array, got shape {X.shape}")
        return pd.DataFrame(X, columns=[str(i) for i in range(X.shape[1])])
    return X


class MonitorTransformer(BaseEstimator, TransformerMixin):
    """
    Pipeline step that learns a schema on fit and validates on transform.

    transform() returns its input unchanged; findings from the latest call
    are kept on ``last_findings_`` and emitted through the monitor's
    notifier.

    Parameters
    ----------
    feature_kinds:
        Optional column -> FeatureKind map forwarded to DataMonitor.fit.
    unseen_feature_policy:
        "ignore" or "report", see UnseenFeaturePolicy.
    """

    def __init__(
        self,
        feature_kinds: Optional[Mapping] = None,
        unseen_feature_policy: str = "ignore",
    ):
        self.feature_kinds = feature_kinds
        self.unseen_feature_policy = unseen_feature_policy

    def fit(self, X, y=None):
        self.monitor_ = DataMonitor(unseen_feature_policy=self.unseen_feature_policy)
        self.monitor_.fit(_as_table(X), self.feature_kinds)
        self.last_findings_: List[Finding] = []
        return self

    def transform(self, X):
        check_is_fitted(self, "monitor_")
        self.last_findings_ = self.monitor_.validate(_as_table(X))
        if self.last_findings_:
            logger.debug(f"{len(self.last_findings_)} finding(s) in pipeline batch")
        return X
