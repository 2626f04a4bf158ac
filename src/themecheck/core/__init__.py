"""Core module - 核心组件"""

from themecheck.core.checker import Checker, run_checkers
from themecheck.core.exceptions import (
    CatalogError,
    CatalogNotFoundError,
    CatalogValidationError,
    ConfigError,
    ConfigLoadError,
    ConfigNotFoundError,
    ConfigValidationError,
    FileError,
    FileReadError,
    RuleError,
    RuleEvaluationError,
    ThemeCheckError,
)
from themecheck.core.finding import ContextLines, Finding, Location, Severity
from themecheck.core.rules import HeaderRule, PatternRule, RuleCatalog, SentinelRule
from themecheck.core.store import DiagnosticStore
from themecheck.core.workspace import Workspace

__all__ = [
    # Exceptions
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogValidationError",
    # Base classes
    "Checker",
    "ConfigError",
    "ConfigLoadError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ContextLines",
    "DiagnosticStore",
    "FileError",
    "FileReadError",
    # Finding
    "Finding",
    # Rules
    "HeaderRule",
    "Location",
    "PatternRule",
    "RuleCatalog",
    "RuleError",
    "RuleEvaluationError",
    "SentinelRule",
    "Severity",
    "ThemeCheckError",
    "Workspace",
    "run_checkers",
]
