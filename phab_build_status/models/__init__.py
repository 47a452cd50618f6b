"""Data models for phab-build-status."""

from .branch import BranchRecord, LogEntry
from .review import ReviewRecord, BuildableStatusRecord
from .report import ReportRow

__all__ = [
    "BranchRecord",
    "LogEntry",
    "ReviewRecord",
    "BuildableStatusRecord",
    "ReportRow",
]
