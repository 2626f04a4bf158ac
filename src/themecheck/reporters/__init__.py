"""Reporters module - 输出报告器"""

from themecheck.reporters.base import Reporter
from themecheck.reporters.console import ConsoleReporter

__all__ = [
    "ConsoleReporter",
    "Reporter",
]
