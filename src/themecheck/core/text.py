"""文本行切分"""

from __future__ import annotations


def split_lines(content: str) -> list[str]:
    """按换行符切分文本

    与编辑器的行号保持一致：只按 \\n 切分，并去掉行尾的 \\r。
    检查器给出的行号和展示上下文时的行号都以此为准。
    """
    return [line.removesuffix("\r") for line in content.split("\n")]
