"""
Schema Builder

Learns a monitor schema from a reference (training) table: min/max
bounds for numeric features and observed value sets for categorical
features. Run this after model training to create the reference schema.

Usage:
    python -m datamonitor.schema.builder \
        --data "datasets/train.parquet" \
        --output "schemas/schema.json" \
        --categorical feature1
"""

import argparse
import logging
import numbers
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd

from datamonitor.exceptions import SchemaError, ShapeError
from datamonitor.log_config import setup_logging
from .models import FeatureKind, MonitorSchema, NumericBounds, SchemaMetadata

logger = logging.getLogger(__name__)


# =============================================================================
# Table Normalization
# =============================================================================

def is_missing(value: Any) -> bool:
    """True for None, NaN, NA and NaT; False for everything else."""
    return pd.api.types.is_scalar(value) and bool(pd.isna(value))


def canonicalize(value: Any) -> Optional[str]:
    """
    Canonical string form of a categorical value.

    Integral floats render as integers so that a column upcast to float
    by pandas (e.g. because of a missing value) still matches the ints it
    was fitted on. Returns None for missing values.
    """
    if is_missing(value):
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (bool, np.bool_)):
        return str(bool(value))
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    if isinstance(value, np.generic):
        value = value.item()
    return str(value)


def _column_values(name: str, values: Any) -> List[Any]:
    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise ShapeError(f"Column '{name}' must be one-dimensional, got shape {values.shape}")
        return values.tolist()
    if isinstance(values, pd.Series):
        return values.tolist()
    if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
        raise ShapeError(f"Column '{name}' is not a sequence of values: {type(values).__name__}")
    return list(values)


def to_frame(table: Any, allow_ragged: bool = False) -> pd.DataFrame:
    """
    Normalize a feature table to a DataFrame with string column names.

    Args:
        table: DataFrame, or mapping of column name -> sequence of values
        allow_ragged: Pad shorter mapping columns with missing values
            instead of rejecting them

    Raises:
        ShapeError: If the table is not a well-formed feature table
    """
    if isinstance(table, pd.DataFrame):
        frame = table.rename(columns=str)
        if not frame.columns.is_unique:
            duplicated = frame.columns[frame.columns.duplicated()].tolist()
            raise ShapeError(f"Duplicate column names: {duplicated}")
        return frame

    if not isinstance(table, Mapping):
        raise ShapeError(
            f"Expected a DataFrame or a mapping of columns, got {type(table).__name__}"
        )

    columns: Dict[str, List[Any]] = {}
    for name, values in table.items():
        key = str(name)
        if key in columns:
            raise ShapeError(f"Duplicate column names: ['{key}']")
        columns[key] = _column_values(key, values)

    lengths = {name: len(values) for name, values in columns.items()}
    if not allow_ragged and len(set(lengths.values())) > 1:
        raise ShapeError(f"Columns have different lengths: {lengths}")

    # Series construction keeps per-column dtype inference; the DataFrame
    # aligns on the default index, padding short columns with NaN.
    return pd.DataFrame(
        {name: pd.Series(values, dtype=object if not values else None) for name, values in columns.items()},
        columns=list(columns),
    )


def to_numeric_array(series: pd.Series) -> np.ndarray:
    """Convert a column to floats; missing and non-numeric values become NaN."""
    if pd.api.types.is_bool_dtype(series):
        return series.to_numpy(dtype=float)
    try:
        return pd.to_numeric(series, errors="coerce").to_numpy(dtype=float, na_value=np.nan)
    except (TypeError, ValueError):
        return np.array([_to_float(v) for v in series], dtype=float)


def _to_float(value: Any) -> float:
    if is_missing(value):
        return np.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


# =============================================================================
# Feature Kinds
# =============================================================================

def infer_feature_kind(series: pd.Series) -> FeatureKind:
    """
    Infer a column's kind: real-valued columns are numeric, everything
    else (strings, booleans, pandas categoricals, mixed objects) is
    categorical. Numeric-looking strings stay categorical.
    """
    if isinstance(series.dtype, pd.CategoricalDtype) or pd.api.types.is_bool_dtype(series):
        return FeatureKind.CATEGORICAL
    if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_complex_dtype(series):
        return FeatureKind.NUMERIC

    present = [v for v in series if not is_missing(v)]
    if present and all(
        isinstance(v, numbers.Real) and not isinstance(v, (bool, np.bool_)) for v in present
    ):
        return FeatureKind.NUMERIC
    return FeatureKind.CATEGORICAL


def infer_feature_kinds(table: Any) -> Dict[str, FeatureKind]:
    """Infer the kind of every column of a table, in column order."""
    frame = to_frame(table, allow_ragged=True)
    return {name: infer_feature_kind(frame[name]) for name in frame.columns}


def resolve_feature_kinds(
    frame: pd.DataFrame,
    feature_kinds: Optional[Mapping] = None,
) -> Dict[str, FeatureKind]:
    """
    Combine explicit kinds with inference for the remaining columns.

    Raises:
        SchemaError: If feature_kinds is not a mapping, or an explicit kind
            names a missing column or is not a valid FeatureKind
    """
    if feature_kinds is None:
        feature_kinds = {}
    if not isinstance(feature_kinds, Mapping):
        raise SchemaError(
            f"feature_kinds must map column names to kinds, got {type(feature_kinds).__name__}"
        )

    explicit: Dict[str, FeatureKind] = {}
    for name, kind in feature_kinds.items():
        name = str(name)
        if name not in frame.columns:
            raise SchemaError(f"Feature kind given for unknown column '{name}'")
        try:
            explicit[name] = FeatureKind(kind)
        except ValueError:
            raise SchemaError(f"Invalid feature kind for '{name}': {kind!r}") from None

    return {
        name: explicit[name] if name in explicit else infer_feature_kind(frame[name])
        for name in frame.columns
    }


# =============================================================================
# Statistics Calculation
# =============================================================================

def compute_numeric_bounds(series: pd.Series, feature_name: str) -> NumericBounds:
    """
    Compute min/max over the present values of a numeric feature.

    Raises:
        SchemaError: If the column has non-numeric or infinite values, or no values at all
    """
    values = to_numeric_array(series)
    present = ~np.array([is_missing(v) for v in series], dtype=bool)

    non_numeric = int((present & np.isnan(values)).sum())
    if non_numeric:
        raise SchemaError(
            f"Numeric feature '{feature_name}' has {non_numeric} non-numeric value(s)"
        )

    clean_values = values[~np.isnan(values)]
    if len(clean_values) == 0:
        raise SchemaError(f"Numeric feature '{feature_name}' has no values")

    # Bounds must be finite to survive a JSON round trip
    infinite = int(np.isinf(clean_values).sum())
    if infinite:
        raise SchemaError(
            f"Numeric feature '{feature_name}' has {infinite} infinite value(s)"
        )

    return NumericBounds(min=float(np.min(clean_values)), max=float(np.max(clean_values)))


def compute_category_values(series: pd.Series) -> frozenset:
    """Distinct canonical values of a categorical feature."""
    return frozenset(c for c in (canonicalize(v) for v in series) if c is not None)


def build_schema(
    table: Any,
    feature_kinds: Optional[Mapping] = None,
) -> MonitorSchema:
    """
    Learn a schema from a reference table.

    Args:
        table: Reference feature table (DataFrame or mapping of columns)
        feature_kinds: Optional column -> FeatureKind; other columns are inferred

    Returns:
        MonitorSchema covering every column of the table

    Raises:
        SchemaError: If the table is empty or a feature cannot be summarized
        ShapeError: If the table is not tabular
    """
    frame = to_frame(table, allow_ragged=True)

    if frame.shape[1] == 0:
        raise SchemaError("Reference table has no columns")
    if frame.shape[0] == 0:
        raise SchemaError("Reference table has no rows")

    kinds = resolve_feature_kinds(frame, feature_kinds)
    logger.info(f"Building schema from table of shape {frame.shape}")

    numeric: Dict[str, NumericBounds] = {}
    categoricals: Dict[str, frozenset] = {}

    for name, kind in kinds.items():
        if kind == FeatureKind.NUMERIC:
            numeric[name] = compute_numeric_bounds(frame[name], name)
        else:
            categoricals[name] = compute_category_values(frame[name])

    schema = MonitorSchema(
        numeric=numeric,
        categoricals=categoricals,
        feature_kinds=kinds,
        metadata=SchemaMetadata(
            created_at=datetime.now(timezone.utc),
            num_rows=int(frame.shape[0]),
            feature_count=len(kinds),
        ),
    )

    logger.info(
        f"Schema built: {len(numeric)} numeric, {len(categoricals)} categorical features"
    )
    return schema


# =============================================================================
# Persistence
# =============================================================================

def save_schema(schema: MonitorSchema, path: Union[str, Path]) -> Path:
    """Write a schema as JSON. Category sets are stored as sorted lists."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(schema.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"Saved schema to {path}")
    return path


def load_schema(path: Union[str, Path]) -> MonitorSchema:
    """Read a schema written by save_schema."""
    path = Path(path)
    logger.info(f"Loading schema from {path}")
    return MonitorSchema.model_validate_json(path.read_text(encoding="utf-8"))


def load_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a CSV, parquet or JSON feature table based on its suffix."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix == ".parquet":
        return pd.read_parquet(path)
    if suffix == ".json":
        return pd.read_json(path)

    raise ValueError(f"Unsupported table format: {path.suffix or path.name}")


# =============================================================================
# CLI
# =============================================================================

def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Learn a data monitor schema from reference data"
    )

    parser.add_argument(
        "--data",
        required=True,
        help="Path to reference table (.csv, .parquet or .json)"
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Path to write the schema JSON"
    )
    parser.add_argument(
        "--numeric",
        nargs="*",
        default=[],
        help="Columns to treat as numeric"
    )
    parser.add_argument(
        "--categorical",
        nargs="*",
        default=[],
        help="Columns to treat as categorical"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to LOG_LEVEL env var)"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for schema fitting."""
    args = parse_args(argv)
    setup_logging(level=args.log_level)

    logger.info(f"Fitting schema from {args.data}")

    try:
        feature_kinds: Dict[str, FeatureKind] = {}
        feature_kinds.update({name: FeatureKind.NUMERIC for name in args.numeric})
        feature_kinds.update({name: FeatureKind.CATEGORICAL for name in args.categorical})

        table = load_table(args.data)
        schema = build_schema(table, feature_kinds)
        output = save_schema(schema, args.output)

        print("\n" + "=" * 60)
        print("SCHEMA SUMMARY")
        print("=" * 60)
        print(f"Rows: {schema.metadata.num_rows:,}")
        print(f"Numeric features: {len(schema.numeric)}")
        for name, bounds in schema.numeric.items():
            print(f"  {name}: [{bounds.min}, {bounds.max}]")
        print(f"Categorical features: {len(schema.categoricals)}")
        for name, values in schema.categoricals.items():
            print(f"  {name}: {len(values)} distinct value(s)")
        print(f"\nSaved to: {output}")
        print("=" * 60)

        return 0

    except Exception as e:
        logger.error(f"Schema fitting failed: {e}", exc_info=True)
        return 2


if __name__ == "__main__":
    sys.exit(main())
