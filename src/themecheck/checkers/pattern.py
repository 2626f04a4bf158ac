"""PatternChecker - 基于规则目录的逐行模式检查器"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from themecheck.catalogs import get_catalog
from themecheck.core.checker import Checker
from themecheck.core.exceptions import RuleEvaluationError
from themecheck.core.finding import Finding, Location
from themecheck.core.text import split_lines

if TYPE_CHECKING:
    from pathlib import Path

    from themecheck.core.rules import PatternRule, RuleCatalog

logger = logging.getLogger(__name__)


@dataclass
class PatternChecker(Checker):
    """逐行模式检查器

    对每条局部规则、每一行，报告所有不重叠的匹配：
    - 规则按目录顺序求值，同一规则内按行、再按匹配位置排序
    - 不同规则之间允许重叠，不做去重
    - 单条规则无法求值时记录日志并跳过，其余规则继续

    Attributes:
        catalog: 规则目录（名称或实例）
        extensions: 参与局部检查的文件扩展名
    """

    name: str = "pattern"
    description: str = "Line-by-line pattern rules from the rule catalog"

    catalog: str | RuleCatalog = "envato"
    extensions: tuple[str, ...] = (".php",)
    enabled: bool = True

    _catalog: RuleCatalog = field(init=False, repr=False)

    def __post_init__(self):
        """解析规则目录"""
        self._catalog = get_catalog(self.catalog)

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._catalog.all_local_rules()

    def check(self, file: Path, content: str) -> list[Finding]:
        """检查文件内容"""
        findings: list[Finding] = []
        if not content:
            return findings

        lines = split_lines(content)
        for rule in self.rules:
            try:
                findings.extend(self._check_rule(rule, file, lines))
            except RuleEvaluationError as e:
                logger.warning("Skipping rule %s on %s: %s", rule.code, file, e.reason)

        return findings

    def _check_rule(self, rule: PatternRule, file: Path, lines: list[str]) -> list[Finding]:
        """对所有行检查单条规则"""
        findings: list[Finding] = []

        for line_idx, line in enumerate(lines):
            for match in rule.finditer(line):
                findings.append(
                    Finding(
                        location=Location(
                            file=file,
                            line=line_idx,
                            column_start=match.start(),
                            column_end=match.end(),
                        ),
                        message=rule.message,
                        severity=rule.severity,
                        category=rule.category,
                        suggestion=rule.replacement,
                        code=rule.code,
                        original=match.group(0),
                        checker=self.name,
                    )
                )

        return findings

    def supports_file(self, file: Path) -> bool:
        """只检查指定扩展名的文件"""
        return file.suffix.lower() in self.extensions
