"""Config - 配置系统"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from themecheck.catalogs import DEFAULT_CATALOG, get_catalog
from themecheck.core.exceptions import ConfigLoadError, ConfigNotFoundError, ConfigValidationError
from themecheck.workspaces.filesystem import DEFAULT_EXCLUDE, DEFAULT_INCLUDE

if TYPE_CHECKING:
    from collections.abc import Callable

    from themecheck.core.checker import Checker
    from themecheck.core.rules import RuleCatalog
    from themecheck.reporters.base import Reporter

CONFIG_FILENAME = "themecheck_config.py"


@dataclass
class OutputConfig:
    """输出配置"""

    context_lines: int = 2
    show_suggestions: bool = True
    color: str = "auto"  # auto | always | never


@dataclass
class WatchConfig:
    """增量扫描配置"""

    debounce_ms: int = 500
    poll_interval: float = 1.0  # watch 命令轮询间隔（秒）


@dataclass
class Config:
    """主配置类

    Attributes:
        root: 主题根目录（相对于配置文件位置）
        include: 要检查的文件 glob 模式
        exclude: 要排除的文件 glob 模式（默认排除依赖目录）
        catalog: 规则目录名称或实例
        checkers: 局部检查器列表
        reporter: 报告器
        output: 输出配置
        watch: 增量扫描配置
    """

    root: str | Path = "."
    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    catalog: str | RuleCatalog = DEFAULT_CATALOG

    # 组件（延迟初始化）
    checkers: list[Checker] = field(default_factory=list)
    reporter: Reporter | None = None

    # 子配置
    output: OutputConfig = field(default_factory=OutputConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    # 钩子函数
    before_check: Callable[..., Any] | None = None
    after_check: Callable[..., Any] | None = None

    def __post_init__(self):
        """校验配置并初始化默认组件"""
        self.root = Path(self.root)
        self._validate()

        # 默认检查器
        if not self.checkers:
            from themecheck.checkers.pattern import PatternChecker

            self.checkers = [PatternChecker(catalog=self.catalog)]

        # 默认报告器
        if self.reporter is None:
            from themecheck.reporters.console import ColorMode, ConsoleReporter

            self.reporter = ConsoleReporter(
                context_lines=self.output.context_lines,
                show_suggestions=self.output.show_suggestions,
                color=ColorMode(self.output.color),
            )

    def _validate(self) -> None:
        if self.output.color not in ("auto", "always", "never"):
            raise ConfigValidationError("output.color", self.output.color, "auto|always|never")
        if self.output.context_lines < 0:
            raise ConfigValidationError(
                "output.context_lines", self.output.context_lines, "a non-negative integer"
            )
        if self.watch.debounce_ms < 0:
            raise ConfigValidationError(
                "watch.debounce_ms", self.watch.debounce_ms, "a non-negative integer"
            )
        if self.watch.poll_interval <= 0:
            raise ConfigValidationError(
                "watch.poll_interval", self.watch.poll_interval, "a positive number"
            )

    @property
    def rule_catalog(self) -> RuleCatalog:
        """解析后的规则目录"""
        return get_catalog(self.catalog)

    def resolve_root(self, config_dir: Path) -> Path:
        """解析主题根目录的绝对路径

        Args:
            config_dir: 配置文件所在目录

        Returns:
            主题根目录的绝对路径
        """
        root = self.root if isinstance(self.root, Path) else Path(self.root)
        if root.is_absolute():
            return root
        return (config_dir / root).resolve()


def load_config(config_path: Path | str | None = None) -> tuple[Config, Path]:
    """加载配置文件

    查找顺序：
    1. 指定的配置文件路径
    2. 当前目录的 themecheck_config.py
    3. 向上递归查找 themecheck_config.py

    都找不到时返回默认配置和当前目录。

    Returns:
        (配置对象, 配置文件所在目录)

    Raises:
        ConfigNotFoundError: 指定的配置文件不存在
        ConfigLoadError: 配置文件加载失败
    """
    import importlib.util
    import sys

    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigNotFoundError(config_file)
    else:
        config_file = _find_config_file()
        if not config_file:
            return Config(), Path.cwd()

    config_file = config_file.resolve()
    config_dir = config_file.parent

    # 动态导入配置模块
    spec = importlib.util.spec_from_file_location("themecheck_config", config_file)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(config_file, "not a Python module")

    module = importlib.util.module_from_spec(spec)
    sys.modules["themecheck_config"] = module

    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigLoadError(config_file, str(e)) from e

    if not hasattr(module, "config"):
        raise ConfigLoadError(config_file, "config file must define a 'config' variable")

    config = module.config
    if not isinstance(config, Config):
        raise ConfigLoadError(config_file, "'config' must be an instance of Config")

    return config, config_dir


def _find_config_file() -> Path | None:
    """向上递归查找配置文件"""
    current = Path.cwd()

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:
            return None
        current = parent
