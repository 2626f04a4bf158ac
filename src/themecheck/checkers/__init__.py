"""Checkers module - 检查器实现"""

from themecheck.checkers.pattern import PatternChecker

__all__ = [
    "PatternChecker",
]
