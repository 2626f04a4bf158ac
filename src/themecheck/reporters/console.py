"""ConsoleReporter - 终端彩色输出报告器"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from themecheck.core.finding import Finding, Severity, count_by_severity
from themecheck.reporters.base import Reporter

if TYPE_CHECKING:
    from pathlib import Path

    from themecheck.core.store import DiagnosticStore
    from themecheck.core.workspace import Workspace


class ColorMode(Enum):
    """颜色模式"""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


@dataclass
class Theme:
    """颜色主题"""

    # 文件和位置
    file: str = "96"  # 青色
    line_num: str = "93"  # 黄色

    # 严重程度
    error: str = "91"  # 红色
    warning: str = "93"  # 黄色
    info: str = "94"  # 蓝色

    # 内容
    suggestion: str = "92"  # 绿色
    context: str = "90"  # 灰色
    category: str = "95"  # 品红

    @classmethod
    def default(cls) -> Theme:
        return cls()

    @classmethod
    def light(cls) -> Theme:
        """浅色终端主题"""
        return cls(
            file="36",
            line_num="33",
            error="31",
            warning="33",
            info="34",
            suggestion="32",
            context="37",
            category="35",
        )


@dataclass
class ConsoleReporter(Reporter):
    """终端彩色输出报告器

    按文件分组输出，每条结果包含：
    - 上下文行与问题行
    - 标记匹配范围的下划线
    - 严重程度图标、消息和分类
    - 建议替换文本

    Attributes:
        context_lines: 显示的上下文行数
        show_suggestions: 是否显示替换建议
        color: 颜色模式
        theme: 颜色主题
        box_drawing: 是否使用 Unicode 框线字符
    """

    name: str = "console"
    description: str = "Console reporter with color output"

    context_lines: int = 2
    show_suggestions: bool = True
    color: ColorMode = ColorMode.AUTO
    theme: Theme = field(default_factory=Theme.default)
    box_drawing: bool = True

    _box_chars: dict = field(
        default_factory=lambda: {
            "top_left": "╭",
            "bottom_left": "╰",
            "vertical": "│",
            "horizontal": "─",
        },
        repr=False,
    )

    _simple_chars: dict = field(
        default_factory=lambda: {
            "top_left": "+",
            "bottom_left": "+",
            "vertical": "|",
            "horizontal": "-",
        },
        repr=False,
    )

    def __post_init__(self):
        """初始化颜色支持检测"""
        self._use_color = self._should_use_color()
        self._chars = self._box_chars if self.box_drawing else self._simple_chars

    def _should_use_color(self) -> bool:
        """判断是否应该使用颜色"""
        if self.color == ColorMode.ALWAYS:
            return True
        if self.color == ColorMode.NEVER:
            return False
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

    def _style(self, text: str, code: str) -> str:
        """应用 ANSI 样式"""
        if not self._use_color:
            return text
        return f"\033[{code}m{text}\033[0m"

    def _severity_color(self, severity: Severity) -> str:
        match severity:
            case Severity.ERROR:
                return self.theme.error
            case Severity.WARNING:
                return self.theme.warning
            case Severity.INFO:
                return self.theme.info

    def _get_severity_icon(self, severity: Severity) -> str:
        match severity:
            case Severity.ERROR:
                return "✗"
            case Severity.WARNING:
                return "⚠"
            case Severity.INFO:
                return "ℹ"

    def report(self, store: DiagnosticStore, workspace: Workspace) -> None:
        """输出所有文件的结果"""
        all_findings: list[Finding] = []

        def _collect(file: Path, findings: tuple[Finding, ...]) -> None:
            if findings:
                self.report_file(findings, workspace)
                all_findings.extend(findings)

        store.for_each(_collect)

        if not all_findings:
            print(self._style("✓ No issues found", "92"))
            return

        self.report_summary(all_findings)

    def report_file(self, file_findings: tuple[Finding, ...], workspace: Workspace) -> None:
        """输出单个文件的所有结果"""
        if not file_findings:
            return

        file = file_findings[0].file
        rel_path = workspace.relative_path(file)

        print()
        print(
            f"{self._chars['top_left']}{self._chars['horizontal']} "
            + self._style(rel_path.as_posix(), self.theme.file)
        )
        print(self._chars["vertical"])

        for finding in sorted(file_findings, key=lambda f: f.line):
            self._print_finding_block(finding, workspace)

        print(self._chars["bottom_left"] + self._chars["horizontal"] * 2)

    def _print_finding_block(self, finding: Finding, workspace: Workspace) -> None:
        """打印结果块（含上下文）"""
        v = self._chars["vertical"]

        # 全局结果没有匹配文本，不显示上下文
        context = None
        if finding.original:
            context = workspace.get_context_lines(
                finding.file,
                finding.line,
                before=self.context_lines,
                after=self.context_lines,
            )

        if context:
            for line_num, content in context.before:
                self._print_context_line(line_num, content)

            line_num, content = context.current
            self._print_source_line(line_num, content)
            self._print_underline(finding)
            self._print_message(finding)

            for line_num, content in context.after:
                self._print_context_line(line_num, content)
        else:
            self._print_message(finding)

        print(v)

    def _print_context_line(self, line_num: int, content: str) -> None:
        v = self._chars["vertical"]
        num_str = self._style(f"{line_num:>4}", self.theme.context)
        content_str = self._style(content, self.theme.context)
        print(f"{v}  {num_str} {v} {content_str}")

    def _print_source_line(self, line_num: int, content: str) -> None:
        v = self._chars["vertical"]
        num_str = self._style(f"{line_num:>4}", self.theme.line_num)
        print(f"{v}  {num_str} {v} {content}")

    def _print_underline(self, finding: Finding) -> None:
        """在匹配范围下方打印 ^ 标记"""
        v = self._chars["vertical"]
        location = finding.location
        width = max(1, location.column_end - location.column_start)
        padding = " " * location.column_start
        underline = self._style("^" * width, self._severity_color(finding.severity))
        print(f"{v}       {v} {padding}{underline}")

    def _print_message(self, finding: Finding) -> None:
        """打印消息、分类和建议"""
        v = self._chars["vertical"]

        icon = self._get_severity_icon(finding.severity)
        msg = self._style(f"{icon} {finding.message}", self._severity_color(finding.severity))
        category = self._style(f"[{finding.category}]", self.theme.category)
        print(f"{v}       {v} {msg} {category}")

        if self.show_suggestions and finding.suggestion:
            suggestion_msg = f"→ Suggested replacement: `{finding.suggestion}`"
            print(f"{v}       {v} {self._style(suggestion_msg, self.theme.suggestion)}")

    def report_summary(self, findings: list[Finding]) -> None:
        """输出摘要"""
        if not findings:
            return

        counts = count_by_severity(findings)
        errors = counts[Severity.ERROR]
        warnings = counts[Severity.WARNING]
        infos = counts[Severity.INFO]
        suggestions = sum(1 for f in findings if f.has_suggestion)

        print()
        parts = []
        if errors:
            parts.append(self._style(f"{errors} error(s)", self.theme.error))
        if warnings:
            parts.append(self._style(f"{warnings} warning(s)", self.theme.warning))
        if infos:
            parts.append(self._style(f"{infos} info(s)", self.theme.info))

        print(f"Found {', '.join(parts)}")

        if suggestions:
            print(
                self._style(
                    f"  {suggestions} finding(s) have a suggested replacement",
                    self.theme.suggestion,
                )
            )
