"""
Data Monitor

Learns a schema from reference data at train time and validates runtime
batches against it at predict time, reporting deviations as findings.

Usage:
    python -m datamonitor.validator.monitor \
        --schema "schemas/schema.json" \
        --data "batches/latest.csv" \
        --unseen-features report
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from datamonitor.exceptions import NotFittedError
from datamonitor.log_config import setup_logging
from datamonitor.schema.builder import build_schema, load_schema, load_table, save_schema, to_frame
from datamonitor.schema.models import Finding, MonitorSchema
from .checks import check_categorical_feature, check_numeric_feature, check_unseen_feature
from .config import MonitorConfig, UnseenFeaturePolicy
from .notifier import FindingNotifier

logger = logging.getLogger(__name__)


class DataMonitor:
    """
    Runtime data-drift monitor.

    Two states: unfit (validate raises NotFittedError) and fit. fit()
    builds a complete new schema before replacing the current one, so a
    failed fit leaves the previous schema in place. validate() only reads
    the schema and may run concurrently; callers must serialize fit()
    against other calls on the same instance.

    Usage:
        monitor = DataMonitor()
        monitor.fit(training_df)
        findings = monitor.validate(request_df)
    """

    def __init__(
        self,
        config: Optional[MonitorConfig] = None,
        notifier: Optional[FindingNotifier] = None,
        unseen_feature_policy: Optional[Union[UnseenFeaturePolicy, str]] = None,
    ):
        self.config = config or MonitorConfig()
        if unseen_feature_policy is not None:
            self.config = dataclasses.replace(
                self.config,
                unseen_feature_policy=UnseenFeaturePolicy(unseen_feature_policy),
            )
        self.notifier = notifier or FindingNotifier(log_findings=self.config.log_findings)
        self._schema: Optional[MonitorSchema] = None

    @classmethod
    def from_schema(cls, schema: MonitorSchema, **kwargs) -> "DataMonitor":
        """Create a fitted monitor from an existing schema."""
        monitor = cls(**kwargs)
        monitor._schema = schema.model_copy(deep=True)
        return monitor

    @classmethod
    def load(cls, path: Union[str, Path], **kwargs) -> "DataMonitor":
        """Create a fitted monitor from a schema JSON file."""
        return cls.from_schema(load_schema(path), **kwargs)

    def save(self, path: Union[str, Path]) -> Path:
        """Write the current schema as JSON."""
        return save_schema(self.schema, path)

    @property
    def is_fitted(self) -> bool:
        return self._schema is not None

    @property
    def schema(self) -> MonitorSchema:
        """A copy of the current schema."""
        if self._schema is None:
            raise NotFittedError("DataMonitor has not been fit")
        return self._schema.model_copy(deep=True)

    def fit(
        self,
        reference_table: Any,
        feature_kinds: Optional[Mapping] = None,
    ) -> "DataMonitor":
        """
        Learn the schema from a reference table, replacing any existing one.

        Args:
            reference_table: DataFrame or mapping of column -> values
            feature_kinds: Optional column -> FeatureKind ("numeric" or
                "categorical"); unlisted columns are inferred

        Returns:
            self

        Raises:
            SchemaError: If the table has no rows or columns, or a feature
                cannot be summarized
        """
        schema = build_schema(reference_table, feature_kinds)
        replaced = self._schema is not None
        self._schema = schema

        logger.info(
            f"DataMonitor {'re-fit' if replaced else 'fit'}: "
            f"{len(schema.numeric)} numeric, {len(schema.categoricals)} categorical features"
        )
        return self

    def validate(self, runtime_table: Any) -> List[Finding]:
        """
        Validate a runtime table against the schema.

        Numeric findings come first, then categorical, then unseen
        features (when reported); within each group features follow
        schema order, and AboveMax precedes BelowMin.

        Args:
            runtime_table: DataFrame or mapping of column -> values

        Returns:
            List of findings, empty when the table matches the schema

        Raises:
            NotFittedError: If called before fit
            ShapeError: If the table is malformed
        """
        schema = self._schema
        if schema is None:
            raise NotFittedError("DataMonitor must be fit before validate")

        frame = to_frame(runtime_table)
        columns = set(frame.columns)
        findings: List[Finding] = []

        for feature, bounds in schema.numeric.items():
            if feature in columns:
                findings.extend(check_numeric_feature(frame[feature], feature, bounds))

        for feature, known_values in schema.categoricals.items():
            if feature in columns:
                finding = check_categorical_feature(frame[feature], feature, known_values)
                if finding is not None:
                    findings.append(finding)

        unseen = [name for name in frame.columns if name not in schema.feature_kinds]
        if unseen:
            if self.config.unseen_feature_policy == UnseenFeaturePolicy.REPORT:
                findings.extend(check_unseen_feature(frame[name], name) for name in unseen)
            else:
                logger.debug(f"Ignoring features not present at fit time: {unseen}")

        logger.debug(f"Validated {len(frame)} rows: {len(findings)} finding(s)")
        self.notifier.notify(findings)
        return findings


# =============================================================================
# CLI
# =============================================================================

def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate a batch of runtime data against a data monitor schema"
    )

    parser.add_argument(
        "--schema",
        required=True,
        help="Path to schema JSON written by datamonitor.schema.builder"
    )
    parser.add_argument(
        "--data",
        required=True,
        help="Path to runtime table (.csv, .parquet or .json)"
    )
    parser.add_argument(
        "--unseen-features",
        choices=[policy.value for policy in UnseenFeaturePolicy],
        default=None,
        help="Policy for columns absent at fit time (defaults to DATA_MONITOR_UNSEEN_FEATURES)"
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Optional path to write findings as JSON"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to LOG_LEVEL env var)"
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for batch validation."""
    args = parse_args(argv)
    setup_logging(level=args.log_level)

    logger.info(f"Validating {args.data} against {args.schema}")

    try:
        monitor = DataMonitor.load(args.schema, unseen_feature_policy=args.unseen_features)
        table = load_table(args.data)
        findings = monitor.validate(table)

        if args.output:
            output = Path(args.output)
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(
                json.dumps([f.model_dump(mode="json") for f in findings], indent=2),
                encoding="utf-8",
            )
            logger.info(f"Saved findings to {output}")

        print("\n" + "=" * 60)
        print("VALIDATION SUMMARY")
        print("=" * 60)
        print(f"Rows validated: {len(table):,}")
        print(f"Findings: {len(findings)}")
        for finding in findings:
            print(f"  [{finding.kind.value}] {finding.message}")
        print("=" * 60)

        return 1 if findings else 0

    except Exception as e:
        logger.error(f"Validation failed: {e}", exc_info=True)
        return 2


if __name__ == "__main__":
    sys.exit(main())
