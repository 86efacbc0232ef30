"""
Per-feature Checks

Compares a runtime column against the fitted schema entry for that
feature and turns deviations into findings.
"""

from typing import AbstractSet, List, Optional, Tuple

import numpy as np
import pandas as pd

from datamonitor.schema.builder import canonicalize, is_missing, to_numeric_array
from datamonitor.schema.models import Finding, FindingKind, NumericBounds


def count_above_max(values: np.ndarray, max_value: float) -> int:
    """
    Count values strictly greater than the fitted max.

    NaN never compares greater, so missing and non-numeric values
    are excluded.
    """
    return int(np.count_nonzero(values > max_value))


def count_below_min(values: np.ndarray, min_value: float) -> int:
    """Count values strictly less than the fitted min."""
    return int(np.count_nonzero(values < min_value))


def find_unknown_categories(
    series: pd.Series,
    known_values: AbstractSet[str],
) -> Tuple[int, List[str]]:
    """
    Find runtime values absent from the fitted value set.

    Args:
        series: Runtime column
        known_values: Canonical values observed at fit time

    Returns:
        Tuple of (number of unknown rows, sorted distinct unknown values)
    """
    unknown_count = 0
    unknown_values = set()

    for value in series:
        canonical = canonicalize(value)
        if canonical is None or canonical in known_values:
            continue
        unknown_count += 1
        unknown_values.add(canonical)

    return unknown_count, sorted(unknown_values)


def check_numeric_feature(
    series: pd.Series,
    feature_name: str,
    bounds: NumericBounds,
) -> List[Finding]:
    """Bounds check for a numeric feature. AboveMax precedes BelowMin."""
    with np.errstate(invalid="ignore"):
        values = to_numeric_array(series)
        above = count_above_max(values, bounds.max)
        below = count_below_min(values, bounds.min)

    findings = []
    if above > 0:
        findings.append(Finding(
            kind=FindingKind.ABOVE_MAX,
            feature=feature_name,
            count=above,
            threshold=bounds.max,
        ))
    if below > 0:
        findings.append(Finding(
            kind=FindingKind.BELOW_MIN,
            feature=feature_name,
            count=below,
            threshold=bounds.min,
        ))
    return findings


def check_categorical_feature(
    series: pd.Series,
    feature_name: str,
    known_values: AbstractSet[str],
) -> Optional[Finding]:
    """Membership check for a categorical feature."""
    unknown_count, unknown_values = find_unknown_categories(series, known_values)

    if unknown_count == 0:
        return None

    return Finding(
        kind=FindingKind.UNKNOWN_CATEGORY,
        feature=feature_name,
        count=unknown_count,
        distinct_unknown_values=unknown_values,
    )


def check_unseen_feature(series: pd.Series, feature_name: str) -> Finding:
    """Report a runtime column that was not present at fit time."""
    present = sum(1 for value in series if not is_missing(value))
    return Finding(
        kind=FindingKind.UNSEEN_FEATURE,
        feature=feature_name,
        count=present,
    )
