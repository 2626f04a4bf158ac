"""DiagnosticStore - 按文件保存的检查结果"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from themecheck.core.finding import Finding


class DiagnosticStore:
    """文件到检查结果的映射

    唯一的共享可变状态，所有修改都经过加锁的方法完成。
    每个文件的条目反映该文件最近一次扫描的结果，
    主文件可能额外附加最近一次语料库扫描的全局结果。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[Path, list[Finding]] = {}

    def set_for_file(self, file: Path, findings: Iterable[Finding]) -> None:
        """替换文件的结果"""
        with self._lock:
            self._entries[Path(file)] = list(findings)

    def append_for_file(self, file: Path, findings: Iterable[Finding]) -> None:
        """在文件已有结果之后追加"""
        with self._lock:
            self._entries.setdefault(Path(file), []).extend(findings)

    def replace_for_checker(self, file: Path, checker: str, findings: Iterable[Finding]) -> None:
        """只替换文件中由指定检查器产生的结果

        其他检查器的结果保持原有顺序，新结果追加在其后。
        文件没有条目且没有新结果时不创建条目。
        """
        findings = list(findings)
        with self._lock:
            file = Path(file)
            if file not in self._entries and not findings:
                return
            kept = [f for f in self._entries.get(file, ()) if f.checker != checker]
            self._entries[file] = kept + findings

    def clear_file(self, file: Path) -> None:
        """删除文件的结果"""
        with self._lock:
            self._entries.pop(Path(file), None)

    def clear_all(self) -> None:
        """清空所有结果"""
        with self._lock:
            self._entries.clear()

    def get_for_file(self, file: Path) -> tuple[Finding, ...]:
        """获取文件的结果（副本）"""
        with self._lock:
            return tuple(self._entries.get(Path(file), ()))

    def for_each(self, callback: Callable[[Path, tuple[Finding, ...]], None]) -> None:
        """遍历所有条目

        遍历的是调用时的快照，回调中可以安全地修改 store。
        """
        for file, findings in self._snapshot():
            callback(file, findings)

    def files(self) -> list[Path]:
        with self._lock:
            return list(self._entries)

    def all_findings(self) -> list[Finding]:
        """所有文件的结果（按文件插入顺序）"""
        return [finding for _, findings in self._snapshot() for finding in findings]

    def _snapshot(self) -> list[tuple[Path, tuple[Finding, ...]]]:
        with self._lock:
            return [(file, tuple(findings)) for file, findings in self._entries.items()]

    def __contains__(self, file: object) -> bool:
        if not isinstance(file, (str, Path)):
            return False
        with self._lock:
            return Path(file) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(files={len(self)})"
