"""
Reporters
=========

Terminal output for runcost.
"""

from runcost.reporters.cli_reporter import ALL_REGIONS, CLIReporter, format_money

__all__ = [
    "ALL_REGIONS",
    "CLIReporter",
    "format_money",
]
