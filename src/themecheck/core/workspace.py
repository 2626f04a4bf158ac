"""Workspace - 工作区抽象基类"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from themecheck.core.exceptions import FileReadError
from themecheck.core.finding import ContextLines
from themecheck.core.text import split_lines


class Workspace(ABC):
    """工作区抽象基类

    为检查核心提供三种外部能力：
    - 列出源文件
    - 读取文件文本（失败时抛出 FileReadError）
    - 探测文件是否存在

    不同的宿主（本地磁盘、编辑器缓冲区、测试）可以实现自己的工作区。

    Attributes:
        root: 工作区根目录
    """

    name: str = "base"
    description: str = "Base workspace"

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self._line_cache: dict[Path, list[str]] = {}

    @abstractmethod
    def list_source_files(self) -> list[Path]:
        """列出要检查的源文件（顺序确定）"""
        ...

    @abstractmethod
    def read_text(self, file: Path) -> str:
        """读取文件文本

        Raises:
            FileReadError: 文件不可读
        """
        ...

    @abstractmethod
    def exists(self, relative: str) -> bool:
        """相对于根目录的路径是否存在"""
        ...

    def resolve(self, relative: str) -> Path:
        """相对路径转换为工作区内路径"""
        return self.root / relative

    def relative_path(self, path: Path) -> Path:
        """获取相对于根目录的路径

        不在工作区内时返回原路径。
        """
        try:
            return Path(path).relative_to(self.root)
        except ValueError:
            return Path(path)

    def get_file_lines(self, file: Path) -> list[str]:
        """获取文件所有行（带缓存，用于展示上下文）"""
        file = Path(file)
        if file not in self._line_cache:
            self._line_cache[file] = split_lines(self.read_text(file))
        return self._line_cache[file]

    def get_context_lines(
        self, file: Path, line: int, before: int = 3, after: int = 3
    ) -> ContextLines | None:
        """获取指定行的上下文

        Args:
            file: 文件路径
            line: 目标行索引（0-based）
            before: 前面的行数
            after: 后面的行数

        Returns:
            ContextLines 对象（行号为 1-based），文件不可读时返回 None
        """
        try:
            lines = self.get_file_lines(file)
        except FileReadError:
            return None

        start = max(0, line - before)
        end = min(len(lines), line + after + 1)

        before_lines = [(i + 1, lines[i]) for i in range(start, min(line, len(lines)))]
        current_line = (line + 1, lines[line] if line < len(lines) else "")
        after_lines = [(i + 1, lines[i]) for i in range(line + 1, end)]

        return ContextLines(before=before_lines, current=current_line, after=after_lines)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(root={self.root!r})"
