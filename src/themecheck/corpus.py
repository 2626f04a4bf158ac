"""CorpusScanner - 语料库（整个主题）扫描"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from themecheck.core.checker import run_checkers
from themecheck.core.exceptions import FileReadError, RuleEvaluationError
from themecheck.core.finding import Finding, Location, Severity

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from themecheck.core.checker import Checker
    from themecheck.core.rules import RuleCatalog
    from themecheck.core.store import DiagnosticStore
    from themecheck.core.workspace import Workspace

    ProgressCallback = Callable[[int, int, str], None]
    CancelCallback = Callable[[], bool]

logger = logging.getLogger(__name__)

GLOBAL_CHECKER = "corpus"


@dataclass
class CorpusFacts:
    """一次语料库扫描中累积的事实

    Attributes:
        domains: 出现过的文本域（保持首次出现顺序）
        features: 出现过的必需/推荐特性规则标识
    """

    domains: dict[str, None] = field(default_factory=dict)
    features: set[str] = field(default_factory=set)

    def observe(self, content: str, catalog: RuleCatalog) -> None:
        """从文件全文中提取文本域和特性"""
        for domain in catalog.extract_domains(content):
            self.domains.setdefault(domain, None)

        for rule in catalog.all_required_rules():
            if rule.code in self.features:
                continue
            try:
                if rule.search(content):
                    self.features.add(rule.code)
            except RuleEvaluationError as e:
                logger.warning("Skipping feature rule %s: %s", rule.code, e.reason)


@dataclass
class CorpusResult:
    """一次语料库扫描的结果

    Attributes:
        total: 待扫描文件数
        processed: 已扫描文件数（含读取失败而跳过的文件）
        cancelled: 是否被取消
        home_file: 全局结果挂载的主文件
        domains: 出现过的文本域
        features: 特性规则标识 -> 是否在主题中出现
        global_findings: 全局结果（取消时为空）
        skipped: 读取失败的文件
    """

    total: int
    processed: int = 0
    cancelled: bool = False
    home_file: Path | None = None
    domains: list[str] = field(default_factory=list)
    features: dict[str, bool] = field(default_factory=dict)
    global_findings: list[Finding] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def missing_features(self) -> list[str]:
        return [code for code, found in self.features.items() if not found]

    @property
    def passed(self) -> bool:
        """没有被取消且没有 Error 级别的全局结果"""
        return not self.cancelled and not any(
            f.severity == Severity.ERROR for f in self.global_findings
        )


class CorpusScanner:
    """语料库扫描器

    逐个文件运行局部检查并写入 DiagnosticStore，同时累积语料库事实；
    全部文件处理完后生成全局结果，替换主文件上旧的全局结果。

    Attributes:
        catalog: 规则目录
        checkers: 局部检查器
        store: 结果存储
    """

    def __init__(
        self,
        catalog: RuleCatalog,
        checkers: Sequence[Checker],
        store: DiagnosticStore,
    ) -> None:
        self.catalog = catalog
        self.checkers = list(checkers)
        self.store = store

        self._lock = threading.Lock()
        self._home_file: Path | None = None
        self._global_findings: tuple[Finding, ...] = ()

    def find_home_file(self, files: Sequence[Path]) -> Path | None:
        """确定全局结果挂载的主文件

        优先第一个入口文件（functions.php），其次第一个元数据文件（style.css）。
        """
        for file in files:
            if file.name in self.catalog.entry_points:
                return file
        for file in files:
            if file.name == self.catalog.metadata_file:
                return file
        return None

    def scan(
        self,
        workspace: Workspace,
        files: Sequence[Path] | None = None,
        progress: ProgressCallback | None = None,
        cancelled: CancelCallback | None = None,
    ) -> CorpusResult:
        """扫描整个语料库

        Args:
            workspace: 工作区
            files: 要扫描的文件（None 则由工作区列出）
            progress: 进度回调 (已处理数, 总数, 当前文件)
            cancelled: 取消检查，每个文件之前调用一次

        Returns:
            扫描结果
        """
        files = list(workspace.list_source_files() if files is None else files)
        result = CorpusResult(total=len(files))
        facts = CorpusFacts()

        home = self.find_home_file(files)
        result.home_file = home
        if home is None:
            logger.warning(
                "No %s or %s found; global findings will not be attached",
                "/".join(self.catalog.entry_points),
                self.catalog.metadata_file,
            )

        logger.info("Corpus scan started: %d file(s) under %s", len(files), workspace.root)

        for file in files:
            if cancelled and cancelled():
                result.cancelled = True
                break

            label = workspace.relative_path(file).as_posix()
            try:
                content = workspace.read_text(file)
            except FileReadError as e:
                logger.error("Error scanning file %s: %s", label, e.reason)
                result.skipped.append(file)
            else:
                self.commit_local(file, run_checkers(self.checkers, file, content))
                facts.observe(content, self.catalog)

            result.processed += 1
            if progress:
                progress(result.processed, result.total, label)

        result.domains = list(facts.domains)
        result.features = {
            rule.code: rule.code in facts.features for rule in self.catalog.all_required_rules()
        }

        if result.cancelled:
            logger.info("Corpus scan cancelled after %d/%d file(s)", result.processed, result.total)
            return result

        anchor = home or workspace.resolve(self.catalog.metadata_file)
        global_findings = self._synthesize(workspace, facts, anchor, cancelled)
        if global_findings is None:
            result.cancelled = True
            logger.info("Corpus scan cancelled before global findings were attached")
            return result

        result.global_findings = global_findings
        with self._lock:
            # 旧的全局结果（包括挂在旧主文件上的）整体替换
            previous = self._home_file
            if previous is not None and previous != home:
                self.store.replace_for_checker(previous, GLOBAL_CHECKER, ())
            if home is not None:
                self.store.replace_for_checker(home, GLOBAL_CHECKER, global_findings)

            self._home_file = home
            self._global_findings = tuple(global_findings) if home is not None else ()

        logger.info(
            "Corpus scan complete: %d domain(s), %d/%d feature(s), %d global finding(s)",
            len(result.domains),
            len(facts.features),
            len(result.features),
            len(global_findings),
        )
        return result

    def _synthesize(
        self,
        workspace: Workspace,
        facts: CorpusFacts,
        anchor: Path,
        cancelled: CancelCallback | None,
    ) -> list[Finding] | None:
        """根据语料库事实生成全局结果，被取消时返回 None"""
        findings: list[Finding] = []

        # 多个文本域
        if len(facts.domains) > 1:
            domains = ", ".join(facts.domains)
            findings.append(
                self._global(
                    anchor,
                    "WARNING: More than one text-domain is being used in this theme. "
                    f"The domains found are: {domains}.",
                    Severity.WARNING,
                    "i18n",
                    "multiple-text-domains",
                )
            )

        # 从未出现的必需/推荐特性
        for rule in self.catalog.all_required_rules():
            if rule.code not in facts.features:
                findings.append(
                    self._global(anchor, rule.message, rule.severity, rule.category, rule.code)
                )

        # 伴随文件
        for sentinel in self.catalog.sentinels:
            if cancelled and cancelled():
                return None
            if not any(workspace.exists(candidate) for candidate in sentinel.candidates):
                findings.append(
                    self._global(
                        anchor, sentinel.message, sentinel.severity, "files", sentinel.code
                    )
                )

        # 元数据文件头部
        if cancelled and cancelled():
            return None
        findings.extend(self._check_metadata(workspace, anchor))

        return findings

    def _check_metadata(self, workspace: Workspace, anchor: Path) -> list[Finding]:
        """检查元数据文件（style.css）的必需头部"""
        metadata = workspace.resolve(self.catalog.metadata_file)
        try:
            text = workspace.read_text(metadata)
        except FileReadError as e:
            logger.info("Metadata file %s unavailable: %s", self.catalog.metadata_file, e.reason)
            return [
                self._global(
                    anchor,
                    self.catalog.metadata_missing_message,
                    Severity.ERROR,
                    "metadata",
                    "metadata-file",
                )
            ]

        return [
            self._global(anchor, header.message, header.severity, "metadata", header.label)
            for header in self.catalog.headers
            if header.label not in text
        ]

    @staticmethod
    def _global(
        anchor: Path, message: str, severity: Severity, category: str, code: str
    ) -> Finding:
        return Finding(
            location=Location(file=anchor, line=0),
            message=message,
            severity=severity,
            category=category,
            code=code,
            checker=GLOBAL_CHECKER,
        )

    @property
    def home_file(self) -> Path | None:
        """最近一次完成的扫描中的主文件"""
        with self._lock:
            return self._home_file

    def global_findings_for(self, file: Path) -> tuple[Finding, ...]:
        """最近一次完成的扫描中挂载到该文件的全局结果"""
        with self._lock:
            return self._globals_for(Path(file))

    def commit_local(self, file: Path, findings: Sequence[Finding]) -> list[Finding]:
        """写入文件的局部结果，并重新附加该文件当前的全局结果

        与整体扫描提交全局结果互斥，主文件上始终只有一组全局结果。

        Returns:
            实际写入的结果
        """
        file = Path(file)
        with self._lock:
            merged = [f for f in findings if f.checker != GLOBAL_CHECKER]
            merged.extend(self._globals_for(file))
            self.store.set_for_file(file, merged)
        return merged

    def _globals_for(self, file: Path) -> tuple[Finding, ...]:
        if self._home_file is not None and file == self._home_file:
            return self._global_findings
        return ()
