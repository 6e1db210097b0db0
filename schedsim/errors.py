from __future__ import annotations


class WorkloadError(ValueError):
    """Base class for failures while loading a workload."""


class InputAccessError(WorkloadError):
    """The workload file could not be opened or read."""


class InputFormatError(WorkloadError):
    """
    A workload record is structurally malformed (wrong column count,
    non-integer field, out-of-range value).
    """
