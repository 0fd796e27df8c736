"""
Cost Estimation
===============

Per-instance cost arithmetic and report assembly.
"""

from runcost.cost.estimator import CostEstimator, ReportRow, format_running_time
from runcost.cost.report import Report, ReportAssembler

__all__ = [
    "CostEstimator",
    "Report",
    "ReportAssembler",
    "ReportRow",
    "format_running_time",
]
