"""Pytest 配置和共享 fixtures"""

from pathlib import Path

import pytest

from themecheck import CorpusScanner, DiagnosticStore, PatternChecker, get_catalog
from themecheck.core.rules import RuleCatalog

# ============================================================================
# 测试数据
# ============================================================================

STYLE_CSS = """/*
Theme Name: Sample
Description: A sample theme.
Author: Someone
Version: 1.0.0
Tested up to: 6.4
License: GPLv2 or later
License URI: https://www.gnu.org/licenses/gpl-2.0.html
Text Domain: sample
*/
body { margin: 0; }
"""

FUNCTIONS_PHP = """<?php
$content_width = 800;

function sample_setup() {
    add_theme_support( 'post-thumbnails' );
    add_theme_support( 'automatic-feed-links' );
    add_theme_support( 'title-tag' );
    add_theme_support( 'wp-block-styles' );
    add_theme_support( 'responsive-embeds' );
    add_theme_support( 'html5', array( 'search-form' ) );
    add_theme_support( 'custom-background' );
    add_theme_support( 'align-wide' );
    add_theme_support( 'custom-header' );
    add_theme_support( 'custom-logo' );
    add_theme_support( 'customize-selective-refresh-widgets' );
    add_editor_style();
    register_nav_menus( array( 'primary' => __( 'Primary', 'sample' ) ) );
    register_block_style( 'core/quote', array( 'name' => 'fancy' ) );
    register_block_pattern( 'sample/hero', array() );
}

function sample_widgets() {
    register_sidebar( array( 'name' => __( 'Sidebar', 'sample' ) ) );
}

function sample_scripts() {
    wp_enqueue_style( 'sample-style', get_stylesheet_uri() );
    wp_enqueue_script( 'sample-nav', get_template_directory_uri() . '/nav.js' );
}
add_action( 'wp_enqueue_scripts', 'sample_scripts' );
"""

INDEX_PHP = """<!DOCTYPE html>
<html>
<head><?php wp_head(); ?></head>
<body <?php body_class(); ?>>
<?php the_custom_logo(); ?>
<?php while ( have_posts() ) : the_post(); ?>
    <article <?php post_class(); ?>>
        <?php the_content(); ?>
        <?php wp_link_pages(); ?>
    </article>
<?php endwhile; ?>
<?php posts_nav_link(); ?>
<?php echo paginate_links(); ?>
<?php the_posts_pagination(); ?>
<?php comments_template(); ?>
<?php wp_footer(); ?>
</body>
</html>
"""

COMMENTS_PHP = """<?php
wp_list_comments();
comment_form();
"""

COMPLIANT_THEME = {
    "style.css": STYLE_CSS,
    "functions.php": FUNCTIONS_PHP,
    "index.php": INDEX_PHP,
    "comments.php": COMMENTS_PHP,
}

COMPLIANT_ASSETS = {
    "LICENSE": "GPL",
    "screenshot.png": "png",
    "readme.txt": "=== Sample ===",
}


# ============================================================================
# 基础 fixtures
# ============================================================================


@pytest.fixture
def catalog() -> RuleCatalog:
    """默认规则目录"""
    return get_catalog("envato")


@pytest.fixture
def checker() -> PatternChecker:
    """逐行模式检查器"""
    return PatternChecker()


@pytest.fixture
def store() -> DiagnosticStore:
    """空结果存储"""
    return DiagnosticStore()


@pytest.fixture
def scanner(catalog: RuleCatalog, checker: PatternChecker, store: DiagnosticStore) -> CorpusScanner:
    """语料库扫描器"""
    return CorpusScanner(catalog, [checker], store)


@pytest.fixture
def compliant_files() -> dict[str, str]:
    """满足所有必需/推荐特性的主题源文件（副本）"""
    return dict(COMPLIANT_THEME)


@pytest.fixture
def compliant_assets() -> dict[str, str]:
    """截图、许可证、readme"""
    return dict(COMPLIANT_ASSETS)


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """在磁盘上创建合规的主题目录"""
    for name, content in {**COMPLIANT_THEME, **COMPLIANT_ASSETS}.items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path


# ============================================================================
# 计时器
# ============================================================================


class FakeTimer:
    """可手动触发的计时器，签名与 threading.Timer 相同"""

    def __init__(self, interval, function, args=None, kwargs=None) -> None:
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """模拟计时结束（已取消的计时器不会执行）"""
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """记录创建的所有计时器"""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None) -> FakeTimer:
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def timer_factory() -> FakeTimerFactory:
    """假计时器工厂"""
    return FakeTimerFactory()
