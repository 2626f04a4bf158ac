"""Finding - 检查结果模型定义"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class Severity(Enum):
    """问题严重程度"""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


@dataclass
class ContextLines:
    """上下文行信息（行号为 1-based，仅用于展示）"""

    before: list[tuple[int, str]]  # [(行号, 内容), ...]
    current: tuple[int, str]  # (行号, 内容)
    after: list[tuple[int, str]]  # [(行号, 内容), ...]

    @property
    def all_lines(self) -> list[tuple[int, str]]:
        """获取所有行（包括上下文）"""
        return [*self.before, self.current, *self.after]


@dataclass(frozen=True)
class Location:
    """问题位置

    Attributes:
        file: 问题所在文件
        line: 行索引（0-based）
        column_start: 起始列（包含）
        column_end: 结束列（不包含）
    """

    file: Path
    line: int
    column_start: int = 0
    column_end: int = 0

    def __post_init__(self):
        """确保 file 是 Path 对象"""
        if isinstance(self.file, str):
            object.__setattr__(self, "file", Path(self.file))

    @property
    def display(self) -> str:
        """格式化的位置字符串（1-based 行列号）"""
        return f"{self.file}:{self.line + 1}:{self.column_start + 1}"


@dataclass(frozen=True)
class Finding:
    """检查发现的一个问题

    创建后不可修改；重新扫描时整体替换。
    """

    location: Location
    message: str
    severity: Severity
    category: str

    # 可选字段
    suggestion: str | None = None  # 建议替换文本
    code: str = ""  # 规则标识
    original: str = ""  # 匹配到的原始文本
    checker: str = ""  # 来源检查器名称

    @property
    def file(self) -> Path:
        return self.location.file

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def has_suggestion(self) -> bool:
        """是否有替换建议"""
        return self.suggestion is not None

    def to_dict(self, root: Path | None = None) -> dict:
        """转换为可 JSON 序列化的字典"""
        file = self.location.file
        if root is not None:
            try:
                file = file.relative_to(root)
            except ValueError:
                pass
        return {
            "file": file.as_posix(),
            "line": self.location.line + 1,
            "column_start": self.location.column_start,
            "column_end": self.location.column_end,
            "code": self.code,
            "category": self.category,
            "severity": str(self.severity),
            "message": self.message,
            "suggestion": self.suggestion,
            "checker": self.checker,
        }

    def __str__(self) -> str:
        return f"[{self.severity}] {self.location.display}: {self.message}"


def count_by_severity(findings: Iterable[Finding]) -> dict[Severity, int]:
    """按严重程度统计结果数量（没有结果的级别计为 0）"""
    counts = dict.fromkeys(Severity, 0)
    for finding in findings:
        counts[finding.severity] += 1
    return counts
