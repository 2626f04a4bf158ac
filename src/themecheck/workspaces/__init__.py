"""Workspaces module - 工作区实现"""

from themecheck.workspaces.filesystem import FileSystemWorkspace
from themecheck.workspaces.memory import MemoryWorkspace

__all__ = [
    "FileSystemWorkspace",
    "MemoryWorkspace",
]
