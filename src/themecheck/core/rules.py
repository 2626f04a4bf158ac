"""Rules - 规则与规则目录定义"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

from themecheck.core.exceptions import CatalogValidationError, RuleEvaluationError
from themecheck.core.finding import Severity

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class PatternRule:
    """模式规则

    pattern 使用 Python 正则语法，可直接写定宽负向后顾断言，
    例如 ``(?<![a-z0-9_])exec\\(`` 表示 exec( 前面不能是标识符字符。

    Attributes:
        code: 规则标识（目录内唯一）
        pattern: 正则表达式
        message: 提示信息
        severity: 严重程度
        category: 分类，调用方可据此过滤或分组
        replacement: 建议替换文本
        ignore_case: 是否忽略大小写
    """

    code: str
    pattern: str
    message: str
    severity: Severity
    category: str
    replacement: str | None = None
    ignore_case: bool = False

    @cached_property
    def regex(self) -> re.Pattern[str]:
        """编译后的正则（首次访问时编译）

        Raises:
            RuleEvaluationError: 正则无法编译
        """
        flags = re.IGNORECASE if self.ignore_case else 0
        try:
            return re.compile(self.pattern, flags)
        except re.error as e:
            raise RuleEvaluationError(self.code, str(e)) from e

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        """查找所有不重叠的匹配，跳过空匹配"""
        for match in self.regex.finditer(text):
            if match.end() > match.start():
                yield match

    def search(self, text: str) -> bool:
        """文本中是否存在匹配"""
        return self.regex.search(text) is not None


@dataclass(frozen=True)
class HeaderRule:
    """元数据文件（style.css）中必须出现的头部字段"""

    label: str
    message: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True)
class SentinelRule:
    """工作区中必须存在的伴随文件

    candidates 中任意一个存在即视为满足。
    """

    code: str
    candidates: tuple[str, ...]
    message: str
    severity: Severity = Severity.ERROR


@dataclass(frozen=True)
class RuleCatalog:
    """规则目录

    规则在加载时分为两组：
    - local: 逐文件、逐行检查，可多次触发
    - required: 整个语料库检查一次，从未出现时在主文件上报告一次

    Attributes:
        name: 目录名称
        description: 目录描述
        local: 局部规则（按顺序求值）
        required: 必需/推荐特性规则
        domain_pattern: 提取文本域的正则（第 1 个分组为文本域）
        entry_points: 入口文件名（主文件首选）
        metadata_file: 主元数据文件名（主文件备选，并检查头部字段）
        headers: 元数据文件头部字段规则
        sentinels: 伴随文件规则
        metadata_missing_message: 元数据文件不可读时的提示
    """

    name: str
    description: str
    local: tuple[PatternRule, ...]
    required: tuple[PatternRule, ...]
    domain_pattern: str
    entry_points: tuple[str, ...]
    metadata_file: str
    headers: tuple[HeaderRule, ...] = ()
    sentinels: tuple[SentinelRule, ...] = ()
    metadata_missing_message: str = "REQUIRED: metadata file is missing!"

    def __post_init__(self):
        """校验规则标识唯一"""
        for group_name, group in (("local", self.local), ("required", self.required)):
            codes = [rule.code for rule in group]
            duplicates = sorted({code for code in codes if codes.count(code) > 1})
            if duplicates:
                raise CatalogValidationError(self.name, group_name, duplicates)

    @cached_property
    def domain_regex(self) -> re.Pattern[str]:
        return re.compile(self.domain_pattern)

    def all_local_rules(self) -> tuple[PatternRule, ...]:
        return self.local

    def all_required_rules(self) -> tuple[PatternRule, ...]:
        return self.required

    def categories(self) -> list[str]:
        """所有规则分类（按首次出现顺序）"""
        seen: dict[str, None] = {}
        for rule in (*self.local, *self.required):
            seen.setdefault(rule.category, None)
        return list(seen)

    def extract_domains(self, text: str) -> list[str]:
        """提取文本中出现的文本域"""
        return [match.group(1) for match in self.domain_regex.finditer(text)]

    def __repr__(self) -> str:
        return (
            f"RuleCatalog(name={self.name!r}, local={len(self.local)}, "
            f"required={len(self.required)})"
        )
