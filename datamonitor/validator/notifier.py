"""
Finding Emission

Surfaces validation findings on a WARNING log channel and hands them
to any configured sinks (collectors, exporters, test doubles).
"""

import logging
from typing import Callable, Iterable, List, Optional

import structlog

from datamonitor.schema.models import Finding

logger = logging.getLogger(__name__)

# Findings are logged here so consumers can route them separately.
# Key-value fields become LogRecord attributes; setup_logging renders them.
findings_logger = structlog.wrap_logger(
    logging.getLogger("datamonitor.findings"),
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.stdlib.render_to_log_kwargs,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
)

FindingSink = Callable[[List[Finding]], None]


class FindingNotifier:
    """
    Sends findings through configured channels.

    Logging is synchronous and never raises into the validation path;
    a failing sink is logged and skipped.
    """

    def __init__(
        self,
        log_findings: bool = True,
        sinks: Optional[Iterable[FindingSink]] = None,
    ):
        self.log_findings = log_findings
        self.sinks: List[FindingSink] = list(sinks or [])

    def add_sink(self, sink: FindingSink):
        """Register a callable that receives every non-empty finding list."""
        self.sinks.append(sink)

    def notify(self, findings: List[Finding]):
        """
        Emit findings.

        Args:
            findings: Findings from a single validate call
        """
        if not findings:
            return

        if self.log_findings:
            self._log_findings(findings)

        for sink in self.sinks:
            try:
                sink(list(findings))
            except Exception as e:
                logger.error(f"Finding sink {sink!r} failed: {e}")

    def _log_findings(self, findings: List[Finding]):
        """Log one WARNING per finding, fields as key-value pairs."""
        for finding in findings:
            findings_logger.warning(
                f"DATA_DRIFT: {finding.message}",
                kind=finding.kind.value,
                feature=finding.feature,
                count=finding.count,
                values=finding.distinct_unknown_values,
                threshold=finding.threshold,
            )
