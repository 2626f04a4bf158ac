"""CheckRunner - 检查运行器"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from themecheck.core.checker import run_checkers
from themecheck.core.exceptions import FileReadError
from themecheck.core.store import DiagnosticStore
from themecheck.corpus import CorpusScanner
from themecheck.triggers import TriggerPolicy
from themecheck.workspaces.filesystem import FileSystemWorkspace

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from themecheck.config import Config
    from themecheck.core.finding import Finding
    from themecheck.corpus import CancelCallback, CorpusResult, ProgressCallback

logger = logging.getLogger(__name__)


@dataclass
class CheckRunner:
    """检查运行器

    协调工作区、检查器、语料库扫描器和报告器完成检查流程。

    Attributes:
        config: 配置对象
        root: 主题根目录
    """

    config: Config
    root: Path

    workspace: FileSystemWorkspace = field(init=False, repr=False)
    store: DiagnosticStore = field(init=False, repr=False)
    scanner: CorpusScanner = field(init=False, repr=False)

    def __post_init__(self):
        """初始化工作区、结果存储和扫描器"""
        self.root = Path(self.root).resolve()
        self.workspace = FileSystemWorkspace(
            self.root, include=self.config.include, exclude=self.config.exclude
        )
        self.store = DiagnosticStore()
        self.scanner = CorpusScanner(self.config.rule_catalog, self.config.checkers, self.store)

    def run(
        self,
        report: bool = True,
        progress: ProgressCallback | None = None,
        cancelled: CancelCallback | None = None,
    ) -> CorpusResult:
        """运行整体扫描

        Args:
            report: 是否输出报告
            progress: 进度回调
            cancelled: 取消检查

        Returns:
            语料库扫描结果
        """
        # 前置钩子
        if self.config.before_check:
            self.config.before_check(self)

        result = self.scanner.scan(self.workspace, progress=progress, cancelled=cancelled)

        # 后置钩子
        if self.config.after_check:
            self.config.after_check(self, self.store.all_findings())

        # 输出报告
        if report and self.config.reporter:
            self.config.reporter.report(self.store, self.workspace)

        return result

    def scan_files(self, files: Sequence[Path | str]) -> list[Finding]:
        """只对指定文件做局部扫描（不生成全局结果）

        不可读的文件记录错误后跳过。
        """
        findings: list[Finding] = []
        for file in files:
            path = Path(file)
            if not path.is_absolute():
                path = (Path.cwd() / path).resolve()
            try:
                content = self.workspace.read_text(path)
            except FileReadError as e:
                logger.error("Error scanning file %s: %s", file, e.reason)
                continue

            file_findings = run_checkers(self.config.checkers, path, content)
            self.store.set_for_file(path, file_findings)
            findings.extend(file_findings)

        return findings

    def create_trigger_policy(
        self, on_commit: Callable[[Path, tuple[Finding, ...]], None] | None = None
    ) -> TriggerPolicy:
        """创建共享本运行器扫描器的增量触发策略"""
        return TriggerPolicy(
            self.scanner,
            debounce_ms=self.config.watch.debounce_ms,
            on_commit=on_commit,
        )


def run_checks(
    config: Config | None = None, root: Path | str | None = None, report: bool = True
) -> CorpusResult:
    """便捷函数：运行整体扫描

    Args:
        config: 配置对象（None 则加载默认配置）
        root: 主题根目录（None 则从配置确定）
        report: 是否输出报告

    Returns:
        语料库扫描结果
    """
    from themecheck.config import load_config

    if config is None:
        config, config_dir = load_config()
        if root is None:
            root = config.resolve_root(config_dir)

    root = Path.cwd() if root is None else Path(root)

    runner = CheckRunner(config=config, root=root)
    return runner.run(report=report)
