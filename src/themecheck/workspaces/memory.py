"""MemoryWorkspace - 内存工作区"""

from __future__ import annotations

from pathlib import Path

from themecheck.core.exceptions import FileReadError
from themecheck.core.workspace import Workspace


class MemoryWorkspace(Workspace):
    """内存工作区

    文件内容由宿主直接提供（例如编辑器中未保存的缓冲区）。
    源文件按传入顺序列出。

    Attributes:
        files: 源文件，相对路径 -> 文件内容
        assets: 存在但不参与扫描的文件（截图、许可证等），相对路径 -> 文件内容
        unreadable: 读取时会失败的相对路径
    """

    name = "memory"
    description = "In-memory workspace"

    def __init__(
        self,
        files: dict[str, str] | None = None,
        assets: dict[str, str] | None = None,
        root: Path | str = "/theme",
        unreadable: set[str] | None = None,
    ) -> None:
        super().__init__(root)
        self.files: dict[str, str] = dict(files or {})
        self.assets: dict[str, str] = dict(assets or {})
        self.unreadable: set[str] = set(unreadable or ())

    def list_source_files(self) -> list[Path]:
        return [self.resolve(relative) for relative in self.files]

    def read_text(self, file: Path) -> str:
        relative = self.relative_path(Path(file)).as_posix()
        if relative in self.unreadable:
            raise FileReadError(Path(file), "Permission denied")
        if relative in self.files:
            return self.files[relative]
        if relative in self.assets:
            return self.assets[relative]
        raise FileReadError(Path(file), "No such file")

    def exists(self, relative: str) -> bool:
        return relative in self.files or relative in self.assets

    def write(self, relative: str, content: str) -> Path:
        """写入（或覆盖）源文件，返回其路径"""
        self.files[relative] = content
        path = self.resolve(relative)
        self._line_cache.pop(path, None)
        return path
