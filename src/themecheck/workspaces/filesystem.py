"""FileSystemWorkspace - 本地磁盘工作区"""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path

from themecheck.core.exceptions import FileReadError
from themecheck.core.workspace import Workspace

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE = ["**/*.php", "style.css"]
DEFAULT_EXCLUDE = [
    "node_modules/**",
    "**/node_modules/**",
    "vendor/**",
    "**/vendor/**",
    ".git/**",
    "**/.git/**",
]


class FileSystemWorkspace(Workspace):
    """本地磁盘工作区

    - 使用 glob 模式收集源文件，并排除依赖目录
    - 以指定编码读取文件
    - 存在性探测相对于根目录
    """

    name = "filesystem"
    description = "Local directory workspace"

    def __init__(
        self,
        root: Path | str,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(Path(root).resolve())
        self.include = list(DEFAULT_INCLUDE if include is None else include)
        self.exclude = list(DEFAULT_EXCLUDE if exclude is None else exclude)
        self.encoding = encoding

    def list_source_files(self) -> list[Path]:
        """收集要检查的文件"""
        files: set[Path] = set()

        for pattern in self.include:
            for file in self.root.glob(pattern):
                if file.is_file() and not self._is_excluded(file):
                    files.add(file)

        return sorted(files)

    def _is_excluded(self, file: Path) -> bool:
        """检查文件是否被排除"""
        try:
            rel_path = file.relative_to(self.root)
        except ValueError:
            return True

        rel_str = rel_path.as_posix()

        return any(fnmatch(rel_str, pattern) for pattern in self.exclude)

    def read_text(self, file: Path) -> str:
        file = Path(file)
        try:
            content = file.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(file, str(e)) from e

        # 读取到新内容后刷新展示用的行缓存
        self._line_cache.pop(file, None)
        return content

    def exists(self, relative: str) -> bool:
        return self.resolve(relative).is_file()
