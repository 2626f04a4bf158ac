"""
WordPress 主题检查配置文件

放置于主题根目录（或其任意上级目录）中，themecheck 会自动向上查找。
"""

from pathlib import Path

from themecheck import Config, OutputConfig, WatchConfig
from themecheck.checkers import PatternChecker
from themecheck.reporters import ConsoleReporter
from themecheck.reporters.console import ColorMode

# =============================================================================
# 检查器配置
# =============================================================================

# 逐行模式检查器
pattern_checker = PatternChecker(
    # 规则目录：名称或 RuleCatalog 实例
    catalog="envato",
    # 参与局部检查的文件类型
    extensions=(".php",),
)

# =============================================================================
# 输出配置
# =============================================================================

# 终端报告器
console_reporter = ConsoleReporter(
    # 显示的上下文行数
    context_lines=2,
    # 显示替换建议
    show_suggestions=True,
    # 颜色模式: auto, always, never
    color=ColorMode.AUTO,
    # 使用 Unicode 框线字符
    box_drawing=True,
)

# =============================================================================
# 主配置
# =============================================================================

config = Config(
    # 主题根目录（相对于配置文件）
    root=Path(__file__).parent,
    # 要检查的文件模式
    include=[
        "**/*.php",
        "style.css",
    ],
    # 排除的文件模式
    exclude=[
        "node_modules/**",
        "**/node_modules/**",
        "vendor/**",
        "**/vendor/**",
        ".git/**",
        "**/.git/**",
    ],
    # 规则目录
    catalog="envato",
    # 检查器列表
    checkers=[
        pattern_checker,
    ],
    # 报告器
    reporter=console_reporter,
    # 输出配置
    output=OutputConfig(
        context_lines=2,
        show_suggestions=True,
        color="auto",
    ),
    # 增量扫描配置（watch 命令）
    watch=WatchConfig(
        debounce_ms=500,
        poll_interval=1.0,
    ),
)


# =============================================================================
# 钩子函数（可选）
# =============================================================================


def before_check(runner):
    """检查开始前的钩子"""
    pass


def after_check(runner, findings):
    """检查完成后的钩子"""
    pass


# 注册钩子
config.before_check = before_check
config.after_check = after_check
