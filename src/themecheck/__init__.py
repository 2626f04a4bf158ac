"""
themecheck - WordPress 主题规则检查工具

逐行模式规则 + 整个主题的语料库检查（文本域、必需特性、伴随文件、style.css 头部），
支持增量扫描（打开、保存、编辑 debounce）和 Python 配置。
"""

__version__ = "0.1.0"

from themecheck.catalogs import available_catalogs, get_catalog
from themecheck.checkers import PatternChecker
from themecheck.config import Config, OutputConfig, WatchConfig
from themecheck.core.checker import Checker
from themecheck.core.exceptions import (
    CatalogError,
    ConfigError,
    FileError,
    RuleError,
    ThemeCheckError,
)
from themecheck.core.finding import ContextLines, Finding, Location, Severity
from themecheck.core.rules import PatternRule, RuleCatalog
from themecheck.core.store import DiagnosticStore
from themecheck.core.workspace import Workspace
from themecheck.corpus import CorpusResult, CorpusScanner
from themecheck.runner import CheckRunner, run_checks
from themecheck.triggers import FileState, TriggerPolicy
from themecheck.workspaces import FileSystemWorkspace, MemoryWorkspace

__all__ = [
    "CatalogError",
    # Runner
    "CheckRunner",
    "Checker",
    # Config
    "Config",
    "ConfigError",
    "ContextLines",
    # Corpus
    "CorpusResult",
    "CorpusScanner",
    "DiagnosticStore",
    "FileError",
    "FileState",
    # Workspaces
    "FileSystemWorkspace",
    # Core
    "Finding",
    "Location",
    "MemoryWorkspace",
    "OutputConfig",
    # Checkers
    "PatternChecker",
    "PatternRule",
    "RuleCatalog",
    "RuleError",
    "Severity",
    # Exceptions
    "ThemeCheckError",
    # Triggers
    "TriggerPolicy",
    "WatchConfig",
    "Workspace",
    "available_catalogs",
    "get_catalog",
    "run_checks",
]
