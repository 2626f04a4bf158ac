"""Exceptions - 自定义异常类"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class ThemeCheckError(Exception):
    """themecheck 基础异常类"""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ConfigError(ThemeCheckError):
    """配置相关错误"""


class ConfigNotFoundError(ConfigError):
    """配置文件未找到"""

    def __init__(self, path: Path) -> None:
        message = f"Config file not found: {path}"
        super().__init__(message, path=path)
        self.path = path


class ConfigLoadError(ConfigError):
    """配置文件加载失败"""

    def __init__(self, path: Path, reason: str) -> None:
        message = f"Failed to load config file: {reason}"
        super().__init__(message, path=path, reason=reason)
        self.path = path
        self.reason = reason


class ConfigValidationError(ConfigError):
    """配置验证失败"""

    def __init__(self, field: str, value: Any, expected: str) -> None:
        message = f"Invalid config value for '{field}': expected {expected}, got {value!r}"
        super().__init__(message)
        self.field = field
        self.value = value
        self.expected = expected


class CatalogError(ThemeCheckError):
    """规则目录相关错误"""


class CatalogNotFoundError(CatalogError):
    """规则目录未找到"""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        message = f"Rule catalog not found: {name}"
        super().__init__(message, name=name, available=available)
        self.name = name
        self.available = available


class CatalogValidationError(CatalogError):
    """规则目录定义有误（例如规则标识重复）"""

    def __init__(self, catalog: str, group: str, duplicates: list[str]) -> None:
        message = f"Duplicate rule codes in {catalog}.{group}: {', '.join(duplicates)}"
        super().__init__(message, catalog=catalog, group=group, duplicates=duplicates)
        self.catalog = catalog
        self.group = group
        self.duplicates = duplicates


class RuleError(ThemeCheckError):
    """规则相关错误"""


class RuleEvaluationError(RuleError):
    """单条规则无法求值（通常是正则编译失败）"""

    def __init__(self, code: str, reason: str) -> None:
        message = f"Rule {code} could not be evaluated: {reason}"
        super().__init__(message, code=code)
        self.code = code
        self.reason = reason


class FileError(ThemeCheckError):
    """文件操作相关错误"""


class FileReadError(FileError):
    """文件读取失败"""

    def __init__(self, path: Path, reason: str) -> None:
        message = f"Failed to read file: {reason}"
        super().__init__(message, path=path, reason=reason)
        self.path = path
        self.reason = reason
