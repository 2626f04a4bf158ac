"""Checker - 检查器抽象基类"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from themecheck.core.finding import Finding

logger = logging.getLogger(__name__)


class Checker(ABC):
    """检查器抽象基类

    所有检查器都需要继承此类并实现 check 方法。
    检查器只处理内存中的文本，不做任何 I/O。

    Attributes:
        name: 检查器名称，用于标识和配置
        description: 检查器描述
        enabled: 是否启用
    """

    name: str = "base"
    description: str = "Base checker"
    enabled: bool = True

    @abstractmethod
    def check(self, file: Path, content: str) -> list[Finding]:
        """检查文件内容，返回问题列表

        Args:
            file: 被检查的文件路径
            content: 文件内容

        Returns:
            发现的问题列表（顺序确定）
        """
        ...

    def supports_file(self, file: Path) -> bool:  # noqa: ARG002
        """判断检查器是否支持此文件类型

        子类可以覆盖此方法以限制检查的文件类型。
        """
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, enabled={self.enabled})"


def run_checkers(checkers: Iterable[Checker], file: Path, content: str) -> list[Finding]:
    """对单个文件运行所有检查器

    语料库扫描与增量扫描共用此函数，保证局部结果只有一条计算路径。
    单个检查器出错时记录日志并跳过。
    """
    findings: list[Finding] = []
    for checker in checkers:
        if not checker.enabled:
            continue
        if not checker.supports_file(file):
            continue

        try:
            findings.extend(checker.check(file, content))
        except Exception:
            logger.exception("Checker %s failed on %s", checker.name, file)

    return findings
