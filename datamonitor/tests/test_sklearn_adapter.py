"""
Tests for the scikit-learn adapter

Runs a DataMonitor as a pass-through pipeline step.
"""

import numpy as np
import pandas as pd
import pytest

pytest.importorskip("sklearn")

from sklearn.base import clone
from sklearn.exceptions import NotFittedError as SklearnNotFittedError
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from datamonitor.integrations.sklearn import MonitorTransformer
from datamonitor.schema.models import FindingKind


@pytest.fixture
def training_df():
    np.random.seed(42)
    return pd.DataFrame({
        "amount": np.random.normal(100, 15, 200),
        "items": np.random.poisson(3, 200).astype(float),
    })


class TestMonitorTransformer:
    """Tests for MonitorTransformer."""

    def test_transform_passes_input_through(self, training_df):
        """transform() returns its input and records findings."""
        step = MonitorTransformer().fit(training_df)
        runtime = pd.DataFrame({"amount": [1000.0], "items": [1.0]})

        result = step.transform(runtime)

        assert result is runtime
        assert [f.kind for f in step.last_findings_] == [FindingKind.ABOVE_MAX]

    def test_transform_before_fit(self):
        """Unfitted steps raise scikit-learn's NotFittedError."""
        with pytest.raises(SklearnNotFittedError):
            MonitorTransformer().transform(pd.DataFrame({"a": [1.0]}))

    def test_numpy_input(self):
        """Bare arrays use positional column names."""
        step = MonitorTransformer().fit(np.array([[0.0, 1.0], [2.0, 3.0]]))

        step.transform(np.array([[5.0, 1.0]]))

        assert [(f.kind, f.feature) for f in step.last_findings_] == [
            (FindingKind.ABOVE_MAX, "0"),
        ]

    def test_feature_kinds_forwarded(self):
        """Explicit kinds reach the monitor."""
        step = MonitorTransformer(feature_kinds={"code": "categorical"})
        step.fit(pd.DataFrame({"code": [1, 2, 3]}))

        step.transform(pd.DataFrame({"code": [4]}))

        assert step.last_findings_[0].kind == FindingKind.UNKNOWN_CATEGORY
        assert step.last_findings_[0].distinct_unknown_values == ["4"]

    def test_clone_keeps_params(self):
        """Parameters survive sklearn.base.clone."""
        step = clone(MonitorTransformer(unseen_feature_policy="report"))

        assert step.get_params()["unseen_feature_policy"] == "report"

    def test_in_pipeline(self, training_df):
        """The monitor observes batches without altering the pipeline output."""
        pipe = Pipeline([
            ("monitor", MonitorTransformer()),
            ("scale", StandardScaler()),
        ])
        pipe.fit(training_df)
        assert pipe.named_steps["monitor"].last_findings_ == []

        drifted = training_df.head(10).assign(amount=lambda df: df["amount"] + 500)
        scaled = pipe.transform(drifted)

        assert scaled.shape == (10, 2)
        findings = pipe.named_steps["monitor"].last_findings_
        assert [(f.kind, f.feature, f.count) for f in findings] == [
            (FindingKind.ABOVE_MAX, "amount", 10),
        ]
