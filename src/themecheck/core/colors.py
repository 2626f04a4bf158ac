"""ANSI 颜色辅助函数

供 CLI 输出状态信息使用，报告器有自己的主题配置。
"""

from __future__ import annotations

from enum import Enum

from themecheck.core.finding import Severity


class Color(Enum):
    """ANSI 颜色代码"""

    RED = "91"
    GREEN = "92"
    YELLOW = "93"
    BLUE = "94"
    MAGENTA = "95"
    CYAN = "96"
    GRAY = "90"


def colorize(text: str, color: Color | str) -> str:
    """为文本添加颜色"""
    code = color.value if isinstance(color, Color) else color
    return f"\033[{code}m{text}\033[0m"


def success(text: str) -> str:
    """成功样式（绿色）"""
    return colorize(text, Color.GREEN)


def error(text: str) -> str:
    """错误样式（红色）"""
    return colorize(text, Color.RED)


def warning(text: str) -> str:
    """警告样式（黄色）"""
    return colorize(text, Color.YELLOW)


def info(text: str) -> str:
    """信息样式（青色）"""
    return colorize(text, Color.CYAN)


def muted(text: str) -> str:
    """淡化样式（灰色）"""
    return colorize(text, Color.GRAY)


def severity_style(severity: Severity, text: str) -> str:
    """按严重程度着色"""
    match severity:
        case Severity.ERROR:
            return error(text)
        case Severity.WARNING:
            return warning(text)
        case _:
            return colorize(text, Color.BLUE)
