"""Reporter - 报告器抽象基类"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from themecheck.core.finding import Finding
    from themecheck.core.store import DiagnosticStore
    from themecheck.core.workspace import Workspace


class Reporter(ABC):
    """报告器抽象基类

    负责将 DiagnosticStore 中的结果以特定格式输出。
    """

    name: str = "base"
    description: str = "Base reporter"

    @abstractmethod
    def report(self, store: DiagnosticStore, workspace: Workspace) -> None:
        """输出所有文件的结果

        Args:
            store: 结果存储
            workspace: 工作区（用于相对路径和上下文行）
        """
        ...

    @abstractmethod
    def report_file(
        self, file_findings: tuple[Finding, ...], workspace: Workspace
    ) -> None:
        """输出单个文件的结果

        Args:
            file_findings: 同一文件的结果
            workspace: 工作区
        """
        ...

    def report_summary(self, findings: list[Finding]) -> None:  # noqa: B027
        """输出摘要信息"""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
