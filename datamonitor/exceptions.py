"""
Error taxonomy for the data monitor.

Data drift itself is never an error; it is reported as Findings.
These exceptions cover misuse and malformed input only.
"""


class MonitorError(Exception):
    """Base class for all data monitor errors."""


class NotFittedError(MonitorError, RuntimeError):
    """validate() was called before a successful fit()."""


class SchemaError(MonitorError, ValueError):
    """fit() was called with input a schema cannot be learned from."""


class ShapeError(MonitorError, ValueError):
    """A table is not a well-formed feature table."""
