"""Envato 主题审核规则目录

规则取自 Envato / WordPress.org 主题审核要求。
局部规则逐行检查；必需与推荐特性只要在主题任意文件中出现即视为满足。
"""

from __future__ import annotations

from themecheck.core.finding import Severity
from themecheck.core.rules import HeaderRule, PatternRule, RuleCatalog, SentinelRule

# =============================================================================
# 局部规则
# =============================================================================

# 恶意代码与禁止使用的函数
BAD_THINGS_RULES = (
    PatternRule(
        code="eval",
        pattern=r"(?<![_a-z0-9.])eval\s?\(",
        message="eval() is not allowed",
        severity=Severity.ERROR,
        category="security",
        ignore_case=True,
    ),
    PatternRule(
        code="system-call",
        pattern=r"(?<![a-z0-9_])(?:popen|proc_open|exec|shell_exec|system|passthru)\(",
        message="PHP system calls are often disabled by server admins and should not be in themes",
        severity=Severity.ERROR,
        category="security",
    ),
    PatternRule(
        code="base64-decode",
        pattern=r"base64_decode",
        message="base64_decode() is not allowed",
        severity=Severity.ERROR,
        category="security",
    ),
    PatternRule(
        code="adsense",
        pattern=r"pub-[0-9]{16}",
        message="Google advertising code detected",
        severity=Severity.ERROR,
        category="security",
        ignore_case=True,
    ),
    PatternRule(
        code="sharesale",
        pattern=r"sharesale\.com",
        message="ShareSale affiliate link detected",
        severity=Severity.ERROR,
        category="security",
        ignore_case=True,
    ),
    PatternRule(
        code="ini-set",
        pattern=r"ini_set\(",
        message="Changing server settings is not allowed. Use wp_raise_memory_limit() instead",
        severity=Severity.WARNING,
        category="security",
    ),
    PatternRule(
        code="uname",
        pattern=r"uname\s?\(",
        message="uname() is not allowed",
        severity=Severity.ERROR,
        category="security",
    ),
    PatternRule(
        code="getmyuid",
        pattern=r"getmyuid\s?\(",
        message="getmyuid() is not allowed",
        severity=Severity.ERROR,
        category="security",
    ),
    PatternRule(
        code="getmypid",
        pattern=r"getmypid\s?\(",
        message="getmypid() is not allowed",
        severity=Severity.ERROR,
        category="security",
    ),
    PatternRule(
        code="error-suppression",
        pattern=r"<\?php\s+@",
        message="Error suppression with @ is not recommended",
        severity=Severity.WARNING,
        category="security",
    ),
    PatternRule(
        code="superglobal",
        pattern=r"\$_(?:GET|POST|REQUEST|COOKIE|SERVER)\[",
        message=(
            "Direct access to superglobals is not recommended. "
            "Sanitize and validate all input data"
        ),
        severity=Severity.WARNING,
        category="security",
    ),
)

# 输出转义
ESCAPING_RULES = (
    PatternRule(
        code="echo-variable",
        pattern=r"echo\s+\$[a-zA-Z_][a-zA-Z0-9_]*(?!\s*\))",
        message=(
            "Found echo $. Possible data validation issues found. All dynamic data "
            "must be correctly escaped for the context where it is rendered"
        ),
        severity=Severity.WARNING,
        category="escaping",
    ),
    PatternRule(
        code="short-echo",
        pattern=r"<\?=\s*\$[a-zA-Z_][a-zA-Z0-9_]*",
        message="Short echo tag with unescaped variable. Use esc_html() or esc_attr()",
        severity=Severity.WARNING,
        category="escaping",
    ),
    PatternRule(
        code="esc-attr-between-tags",
        pattern=r">\s*<\?php\s+echo\s+esc_attr\(",
        message=(
            "Found ><?php echo esc_attr(. Only use esc_attr() inside HTML attributes. "
            "Use esc_html() between HTML tags. A manual review is needed"
        ),
        severity=Severity.WARNING,
        category="escaping",
    ),
)

# 已弃用的函数
DEPRECATED_RULES = (
    PatternRule(
        code="get-bloginfo-url",
        pattern=r"\bget_bloginfo\s*\(\s*['\"]url['\"]\s*\)",
        message="get_bloginfo('url') is deprecated. Use home_url() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="home_url()",
    ),
    PatternRule(
        code="get-bloginfo-wpurl",
        pattern=r"\bget_bloginfo\s*\(\s*['\"]wpurl['\"]\s*\)",
        message="get_bloginfo('wpurl') is deprecated. Use site_url() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="site_url()",
    ),
    PatternRule(
        code="bloginfo-url",
        pattern=r"\bbloginfo\s*\(\s*['\"]url['\"]\s*\)",
        message="bloginfo('url') is deprecated. Use echo home_url() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="echo home_url()",
    ),
    PatternRule(
        code="bloginfo-wpurl",
        pattern=r"\bbloginfo\s*\(\s*['\"]wpurl['\"]\s*\)",
        message="bloginfo('wpurl') is deprecated. Use echo site_url() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="echo site_url()",
    ),
    PatternRule(
        code="wp-get-post-tags",
        pattern=r"\bwp_get_post_tags\s*\(",
        message="wp_get_post_tags() is deprecated. Use get_the_tags() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="get_the_tags()",
    ),
    PatternRule(
        code="wp-get-post-categories",
        pattern=r"\bwp_get_post_categories\s*\(",
        message="wp_get_post_categories() is deprecated. Use get_the_category() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="get_the_category()",
    ),
    PatternRule(
        code="screen-icon",
        pattern=r"\bscreen_icon\s*\(",
        message="screen_icon() is deprecated since WordPress 3.8",
        severity=Severity.WARNING,
        category="deprecated",
    ),
    PatternRule(
        code="get-currentuserinfo",
        pattern=r"\bget_currentuserinfo\s*\(",
        message="get_currentuserinfo() is deprecated. Use wp_get_current_user() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="wp_get_current_user()",
    ),
    PatternRule(
        code="get-current-theme",
        pattern=r"\bget_current_theme\s*\(",
        message="get_current_theme() is deprecated. Use wp_get_theme() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="wp_get_theme()",
    ),
    PatternRule(
        code="get-theme-data",
        pattern=r"\bget_theme_data\s*\(",
        message="get_theme_data() is deprecated. Use wp_get_theme() instead",
        severity=Severity.WARNING,
        category="deprecated",
        replacement="wp_get_theme()",
    ),
)

# 翻译函数缺少文本域
I18N_RULES = (
    PatternRule(
        code="i18n-missing-domain-__",
        pattern=r"__\s*\(\s*['\"][^'\"]+['\"]\s*\)",
        message="Translation function __() is missing text domain parameter",
        severity=Severity.WARNING,
        category="i18n",
    ),
    PatternRule(
        code="i18n-missing-domain-_e",
        pattern=r"_e\s*\(\s*['\"][^'\"]+['\"]\s*\)",
        message="Translation function _e() is missing text domain parameter",
        severity=Severity.WARNING,
        category="i18n",
    ),
    PatternRule(
        code="i18n-missing-domain-_x",
        pattern=r"_x\s*\(\s*['\"][^'\"]+['\"]\s*,\s*['\"][^'\"]+['\"]\s*\)",
        message="Translation function _x() is missing text domain parameter",
        severity=Severity.WARNING,
        category="i18n",
    ),
    PatternRule(
        code="i18n-missing-domain-_n",
        pattern=r"_n\s*\(\s*['\"][^'\"]+['\"]\s*,\s*['\"][^'\"]+['\"]\s*,\s*[^,()'\"]+\)",
        message="Translation function _n() is missing text domain parameter",
        severity=Severity.WARNING,
        category="i18n",
    ),
    PatternRule(
        code="i18n-missing-domain-_nx",
        pattern=(
            r"_nx\s*\(\s*['\"][^'\"]+['\"]\s*,\s*['\"][^'\"]+['\"]\s*,"
            r"\s*[^,()'\"]+,\s*['\"][^'\"]+['\"]\s*\)"
        ),
        message="Translation function _nx() is missing text domain parameter",
        severity=Severity.WARNING,
        category="i18n",
    ),
)

# 属于插件的功能
PLUGIN_TERRITORY_RULES = (
    PatternRule(
        code="register-post-type",
        pattern=r"register_post_type\s*\(",
        message=(
            "WARNING: The theme appears to use register_post_type(). "
            "This is plugin territory functionality"
        ),
        severity=Severity.WARNING,
        category="plugin-territory",
    ),
    PatternRule(
        code="register-taxonomy",
        pattern=r"register_taxonomy\s*\(",
        message=(
            "WARNING: The theme appears to use register_taxonomy(). "
            "This is plugin territory functionality"
        ),
        severity=Severity.WARNING,
        category="plugin-territory",
    ),
    PatternRule(
        code="add-shortcode",
        pattern=r"add_shortcode\s*\(",
        message=(
            "WARNING: The theme appears to use add_shortcode(). "
            "Custom post-content shortcodes are plugin territory"
        ),
        severity=Severity.WARNING,
        category="plugin-territory",
    ),
    PatternRule(
        code="wp-mail",
        pattern=r"wp_mail\s*\(",
        message="WARNING: The theme appears to use wp_mail(). Sending emails is plugin territory",
        severity=Severity.WARNING,
        category="plugin-territory",
    ),
    PatternRule(
        code="add-role",
        pattern=r"add_role\s*\(",
        message=(
            "WARNING: The theme appears to use add_role(). "
            "User roles and capabilities are plugin territory"
        ),
        severity=Severity.WARNING,
        category="plugin-territory",
    ),
)

# 外部 CDN
CDN_RULES = (
    PatternRule(
        code="cdn-google-fonts",
        pattern=r"fonts\.googleapis\.com",
        message="WARNING: Google Fonts should be enqueued using wp_enqueue_style()",
        severity=Severity.WARNING,
        category="cdn",
        ignore_case=True,
    ),
    PatternRule(
        code="cdn-jquery",
        pattern=r"code\.jquery\.com",
        message="WARNING: jQuery from CDN detected. Use WordPress bundled jQuery instead",
        severity=Severity.WARNING,
        category="cdn",
        ignore_case=True,
    ),
    PatternRule(
        code="cdn-google-ajax",
        pattern=r"ajax\.googleapis\.com",
        message="WARNING: Google CDN detected. Use WordPress bundled libraries instead",
        severity=Severity.WARNING,
        category="cdn",
        ignore_case=True,
    ),
    PatternRule(
        code="cdn-jsdelivr",
        pattern=r"cdn\.jsdelivr\.net",
        message="WARNING: jsDelivr CDN detected. Host files locally instead",
        severity=Severity.WARNING,
        category="cdn",
        ignore_case=True,
    ),
    PatternRule(
        code="cdn-cloudflare",
        pattern=r"cdnjs\.cloudflare\.com",
        message="WARNING: Cloudflare CDN detected. Host files locally instead",
        severity=Severity.WARNING,
        category="cdn",
        ignore_case=True,
    ),
)

# 硬编码的 script / style 标签
SCRIPT_STYLE_RULES = (
    PatternRule(
        code="script-tag",
        pattern=r"<script[^>]*src=",
        message="WARNING: <script> tag found. Use wp_enqueue_script() instead",
        severity=Severity.WARNING,
        category="enqueue",
        ignore_case=True,
    ),
    PatternRule(
        code="stylesheet-link",
        pattern=r"<link[^>]*rel=['\"]stylesheet['\"]",
        message="WARNING: <link rel='stylesheet'> tag found. Use wp_enqueue_style() instead",
        severity=Severity.WARNING,
        category="enqueue",
        ignore_case=True,
    ),
    PatternRule(
        code="search-form",
        pattern=r"role=['\"]search['\"]",
        message=(
            'WARNING: role="search" was found. Use get_search_form() instead of hard '
            "coding forms. Otherwise, the form can not be filtered"
        ),
        severity=Severity.WARNING,
        category="best-practices",
        ignore_case=True,
    ),
)

# 其余零散规则
MISC_RULES = (
    PatternRule(
        code="widget-php4-constructor",
        pattern=r"class\s+\w+\s+extends\s+WP_Widget\s*\{[^}]*function\s+\w+\s*\(",
        message=(
            "WARNING: Deprecated widget constructor found. "
            "Use __construct() instead of PHP4 style constructor"
        ),
        severity=Severity.WARNING,
        category="deprecated",
    ),
    PatternRule(
        code="deregister-jquery",
        pattern=r"wp_deregister_script\s*\(\s*['\"]jquery['\"]\s*\)",
        message="WARNING: Deregistering jQuery is not allowed. Use WordPress bundled jQuery",
        severity=Severity.WARNING,
        category="best-practices",
    ),
    PatternRule(
        code="nav-menu-location",
        pattern=r"wp_nav_menu\s*\((?![^)]*theme_location)[^)]*\)",
        message=(
            "WARNING: A menu without a theme_location was found. "
            "You must manually check if the theme_location is included"
        ),
        severity=Severity.WARNING,
        category="best-practices",
    ),
    PatternRule(
        code="flaticon",
        pattern=r"flaticon",
        message=(
            "REQUIRED: Found a reference to flaticon. Assets from this website "
            "does not use a license that is compatible with GPL"
        ),
        severity=Severity.ERROR,
        category="licensing",
        ignore_case=True,
    ),
)

LOCAL_RULES = (
    *BAD_THINGS_RULES,
    *ESCAPING_RULES,
    *DEPRECATED_RULES,
    *I18N_RULES,
    *PLUGIN_TERRITORY_RULES,
    *CDN_RULES,
    *SCRIPT_STYLE_RULES,
    *MISC_RULES,
)

# =============================================================================
# 必需与推荐特性（整个主题检查一次）
# =============================================================================


def _required(code: str, pattern: str, message: str) -> PatternRule:
    return PatternRule(
        code=code,
        pattern=pattern,
        message=message,
        severity=Severity.ERROR,
        category="required",
    )


def _recommended(code: str, pattern: str, message: str) -> PatternRule:
    return PatternRule(
        code=code,
        pattern=pattern,
        message=message,
        severity=Severity.INFO,
        category="recommended",
    )


TEMPLATE_TAG_FEATURES = (
    _required("wp-head", r"wp_head\s*\(\s*\)", "REQUIRED: wp_head()"),
    _required("wp-footer", r"wp_footer\s*\(\s*\)", "REQUIRED: wp_footer()"),
    _required("body-class", r"\bbody_class\s*\(", "REQUIRED: body_class()"),
    _required("wp-link-pages", r"wp_link_pages\s*\(", "REQUIRED: wp_link_pages()"),
    _required("post-class", r"post_class\s*\(", "REQUIRED: post_class()"),
    _required("comment-form", r"comment_form\s*\(", "REQUIRED: comment_form()"),
    _required("wp-list-comments", r"wp_list_comments\s*\(", "REQUIRED: wp_list_comments()"),
    _required("comments-template", r"comments_template\s*\(", "REQUIRED: comments_template()"),
    _required(
        "posts-nav-link",
        r"posts_nav_link\s*\(",
        "REQUIRED: posts_nav_link() or paginate_links()",
    ),
    _required("paginate-links", r"paginate_links\s*\(", "REQUIRED: paginate_links()"),
    _required(
        "the-posts-pagination",
        r"the_posts_pagination\s*\(",
        "REQUIRED: the_posts_pagination()",
    ),
    _required(
        "content-width",
        r"\$content_width\s*=",
        "REQUIRED: $content_width must be defined",
    ),
)

THEME_SETUP_FEATURES = (
    _required(
        "register-nav-menus",
        r"register_nav_menus?\s*\(",
        "REQUIRED: register_nav_menu() or register_nav_menus()",
    ),
    _required(
        "post-thumbnails",
        r"add_theme_support\s*\(\s*['\"]post-thumbnails['\"]",
        "REQUIRED: add_theme_support('post-thumbnails')",
    ),
    _required(
        "automatic-feed-links",
        r"add_theme_support\s*\(\s*['\"]automatic-feed-links['\"]",
        "REQUIRED: add_theme_support('automatic-feed-links')",
    ),
    _required(
        "title-tag",
        r"add_theme_support\s*\(\s*['\"]title-tag['\"]",
        "REQUIRED: add_theme_support('title-tag')",
    ),
    _required("register-sidebar", r"register_sidebar\s*\(", "REQUIRED: register_sidebar()"),
    _required(
        "wp-enqueue-style",
        r"wp_enqueue_style\s*\(",
        "REQUIRED: wp_enqueue_style() for CSS files",
    ),
    _required(
        "wp-enqueue-script",
        r"wp_enqueue_script\s*\(",
        "REQUIRED: wp_enqueue_script() for JavaScript files",
    ),
    _required(
        "wp-enqueue-scripts-hook",
        r"add_action\s*\(\s*['\"]wp_enqueue_scripts['\"]",
        "REQUIRED: add_action('wp_enqueue_scripts', ...)",
    ),
)

RECOMMENDED_FEATURES = (
    _recommended(
        "register-block-style",
        r"register_block_style\s*\(",
        "RECOMMENDED: No reference to register_block_style was found in the theme. "
        "Theme authors are encouraged to implement new block styles as a transition "
        "to block themes",
    ),
    _recommended(
        "register-block-pattern",
        r"register_block_pattern\s*\(",
        "RECOMMENDED: No reference to register_block_pattern was found in the theme. "
        "Theme authors are encouraged to implement custom block patterns as a "
        "transition to block themes",
    ),
    _recommended(
        "wp-block-styles",
        r"add_theme_support\s*\(\s*['\"]wp-block-styles['\"]",
        'RECOMMENDED: No reference to add_theme_support( "wp-block-styles" ) was found '
        "in the theme. It is recommended that the theme implement this functionality",
    ),
    _recommended(
        "responsive-embeds",
        r"add_theme_support\s*\(\s*['\"]responsive-embeds['\"]",
        'RECOMMENDED: No reference to add_theme_support( "responsive-embeds" ) was found '
        "in the theme. It is recommended that the theme implement this functionality",
    ),
    _recommended(
        "html5",
        r"add_theme_support\s*\(\s*['\"]html5['\"]",
        'RECOMMENDED: No reference to add_theme_support( "html5", $args ) was found in '
        "the theme. It is strongly recommended that the theme implement this "
        "functionality",
    ),
    _recommended(
        "custom-background",
        r"add_theme_support\s*\(\s*['\"]custom-background['\"]",
        'RECOMMENDED: No reference to add_theme_support( "custom-background", $args ) '
        "was found in the theme. If the theme uses background images or solid colors "
        "for the background, then it is recommended that the theme implement this "
        "functionality",
    ),
    _recommended(
        "align-wide",
        r"add_theme_support\s*\(\s*['\"]align-wide['\"]",
        'RECOMMENDED: No reference to add_theme_support( "align-wide" ) was found in '
        "the theme. It is recommended that the theme implement this functionality",
    ),
    _recommended(
        "add-editor-style",
        r"add_editor_style\s*\(",
        "RECOMMENDED: No reference to add_editor_style() was found in the theme. It is "
        "recommended that the theme implement editor styling, so as to make the editor "
        "content match the resulting post output in the theme, for a better user "
        "experience",
    ),
    _recommended(
        "custom-header",
        r"add_theme_support\s*\(\s*['\"]custom-header['\"]",
        'RECOMMENDED: No reference to add_theme_support( "custom-header", $args ) was '
        "found in the theme",
    ),
    _recommended(
        "custom-logo",
        r"add_theme_support\s*\(\s*['\"]custom-logo['\"]",
        'RECOMMENDED: No reference to add_theme_support( "custom-logo" ) was found in '
        "the theme",
    ),
    _recommended(
        "the-custom-logo",
        r"the_custom_logo\s*\(",
        "RECOMMENDED: No reference to the_custom_logo() was found",
    ),
    _recommended(
        "selective-refresh-widgets",
        r"add_theme_support\s*\(\s*['\"]customize-selective-refresh-widgets['\"]",
        'RECOMMENDED: No reference to add_theme_support( '
        '"customize-selective-refresh-widgets" ) was found',
    ),
)

REQUIRED_RULES = (
    *TEMPLATE_TAG_FEATURES,
    *THEME_SETUP_FEATURES,
    *RECOMMENDED_FEATURES,
)

# =============================================================================
# 语料库事实
# =============================================================================

TEXT_DOMAIN_PATTERN = (
    r"(?:_e|__|esc_html__|esc_attr__|esc_html_e|esc_attr_e)\s*\("
    r"\s*['\"][^'\"]+['\"]\s*,\s*['\"]([^'\"]+)['\"]\s*\)"
)

REQUIRED_HEADERS = (
    "Theme Name:",
    "Description:",
    "Author:",
    "Version:",
    "License:",
    "License URI:",
    "Text Domain:",
)

HEADERS = (
    *(
        HeaderRule(
            label=label,
            message=f"REQUIRED: style.css is missing required header: {label}",
        )
        for label in REQUIRED_HEADERS
    ),
    HeaderRule(
        label="Tested up to:",
        message="RECOMMENDED: style.css should include 'Tested up to:' header.",
        severity=Severity.INFO,
    ),
)

SENTINELS = (
    SentinelRule(
        code="screenshot",
        candidates=("screenshot.png", "screenshot.jpg"),
        message="REQUIRED: Screenshot is missing! Add a screenshot.png or screenshot.jpg.",
    ),
    SentinelRule(
        code="license-file",
        candidates=("LICENSE", "LICENSE.txt"),
        message="REQUIRED: License file is missing! Add a LICENSE or LICENSE.txt file.",
    ),
    SentinelRule(
        code="readme",
        candidates=("readme.txt",),
        message="RECOMMENDED: readme.txt is missing.",
        severity=Severity.INFO,
    ),
)

ENVATO = RuleCatalog(
    name="envato",
    description="Envato / WordPress theme review requirements",
    local=LOCAL_RULES,
    required=REQUIRED_RULES,
    domain_pattern=TEXT_DOMAIN_PATTERN,
    entry_points=("functions.php",),
    metadata_file="style.css",
    headers=HEADERS,
    sentinels=SENTINELS,
    metadata_missing_message="REQUIRED: style.css is missing!",
)
