"""TriggerPolicy - 增量扫描触发策略"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from themecheck.core.checker import run_checkers

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from themecheck.core.finding import Finding
    from themecheck.core.workspace import Workspace
    from themecheck.corpus import CancelCallback, CorpusResult, CorpusScanner, ProgressCallback

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 500


class FileState(Enum):
    """单个文件的扫描状态"""

    IDLE = "idle"
    DEBOUNCE_PENDING = "debounce_pending"
    SCANNING = "scanning"

    def __str__(self) -> str:
        return self.value


class TriggerPolicy:
    """决定何时重新扫描

    - 打开、保存：立即对该文件做局部扫描
    - 编辑：等待 debounce 窗口内没有新的编辑后再扫描，新编辑会重新计时
    - 整体扫描：只能显式请求，与各文件的 debounce 状态无关

    同一文件的多个扫描请求以最新的为准：每个请求分配递增序号，
    提交时序号已过期的结果直接丢弃。
    对主文件做局部扫描时，会重新附加最近一次整体扫描的全局结果。

    Attributes:
        scanner: 语料库扫描器（提供检查器与结果存储）
        debounce_ms: 编辑后的等待时间（毫秒）
        timer_factory: 计时器工厂，签名与 threading.Timer 相同
        on_commit: 每次写入结果后的回调 (文件, 结果)
    """

    def __init__(
        self,
        scanner: CorpusScanner,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        timer_factory: Callable[..., Any] = threading.Timer,
        on_commit: Callable[[Path, tuple[Finding, ...]], None] | None = None,
    ) -> None:
        self.scanner = scanner
        self.debounce_ms = debounce_ms
        self.timer_factory = timer_factory
        self.on_commit = on_commit
        self.enabled = True

        self._lock = threading.Lock()
        self._sequence: dict[Path, int] = {}
        self._timers: dict[Path, tuple[int, Any]] = {}
        self._in_flight: dict[Path, int] = {}

    @property
    def store(self):
        return self.scanner.store

    # =========================================================================
    # 事件入口
    # =========================================================================

    def on_file_opened(self, file: Path, text: str) -> bool:
        """文件打开：立即扫描"""
        return self._scan_now(Path(file), text)

    def on_file_saved(self, file: Path, text: str) -> bool:
        """文件保存：立即扫描，并取消尚未触发的编辑扫描"""
        return self._scan_now(Path(file), text)

    def on_file_changed(self, file: Path, text: str) -> None:
        """文件编辑：取消旧计时器并重新计时"""
        file = Path(file)
        with self._lock:
            if not self.enabled:
                return
            seq = self._next_sequence(file)
            self._cancel_timer(file)

            timer = self.timer_factory(
                self.debounce_ms / 1000, self._on_debounce_elapsed, args=(file, text, seq)
            )
            timer.daemon = True
            self._timers[file] = (seq, timer)
            timer.start()

        logger.debug("Scan of %s scheduled in %d ms (#%d)", file, self.debounce_ms, seq)

    def request_full_scan(
        self,
        workspace: Workspace,
        files: Sequence[Path] | None = None,
        progress: ProgressCallback | None = None,
        cancelled: CancelCallback | None = None,
    ) -> CorpusResult:
        """显式请求整体扫描"""
        return self.scanner.scan(workspace, files=files, progress=progress, cancelled=cancelled)

    # =========================================================================
    # 状态
    # =========================================================================

    def state(self, file: Path) -> FileState:
        file = Path(file)
        with self._lock:
            if self._in_flight.get(file):
                return FileState.SCANNING
            if file in self._timers:
                return FileState.DEBOUNCE_PENDING
            return FileState.IDLE

    def set_enabled(self, enabled: bool) -> None:
        """启用/禁用；禁用时取消所有计时器并清空结果"""
        with self._lock:
            self.enabled = enabled
            if not enabled:
                for file in list(self._timers):
                    self._cancel_timer(file)
        if not enabled:
            self.store.clear_all()

    def close(self) -> None:
        """取消所有尚未触发的计时器"""
        with self._lock:
            for file in list(self._timers):
                self._cancel_timer(file)

    # =========================================================================
    # 内部实现
    # =========================================================================

    def _next_sequence(self, file: Path) -> int:
        seq = self._sequence.get(file, 0) + 1
        self._sequence[file] = seq
        return seq

    def _cancel_timer(self, file: Path) -> None:
        entry = self._timers.pop(file, None)
        if entry is not None:
            entry[1].cancel()

    def _scan_now(self, file: Path, text: str) -> bool:
        with self._lock:
            if not self.enabled:
                return False
            seq = self._next_sequence(file)
            self._cancel_timer(file)
        return self._run_scan(file, text, seq)

    def _on_debounce_elapsed(self, file: Path, text: str, seq: int) -> None:
        with self._lock:
            entry = self._timers.get(file)
            if entry is not None and entry[0] == seq:
                del self._timers[file]
        self._run_scan(file, text, seq)

    def _run_scan(self, file: Path, text: str, seq: int) -> bool:
        """运行局部扫描，序号仍为最新时提交结果"""
        with self._lock:
            self._in_flight[file] = self._in_flight.get(file, 0) + 1
        try:
            findings = run_checkers(self.scanner.checkers, file, text)
        finally:
            with self._lock:
                self._in_flight[file] -= 1
                if not self._in_flight[file]:
                    del self._in_flight[file]

        with self._lock:
            if not self.enabled or self._sequence.get(file) != seq:
                logger.debug("Discarding stale scan of %s (#%d)", file, seq)
                return False
            findings = self.scanner.commit_local(file, findings)

        logger.debug("Committed %d finding(s) for %s (#%d)", len(findings), file, seq)
        if self.on_commit:
            self.on_commit(file, tuple(findings))
        return True
