"""Report generation module for Readiness Verdict."""

from .base_reporter import BaseReporter, ReportData
from .json_reporter import JSONReporter

__all__ = [
    "BaseReporter",
    "ReportData",
    "JSONReporter",
]
