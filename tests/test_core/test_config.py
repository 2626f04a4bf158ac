"""Tests for Config"""

from pathlib import Path

import pytest

from themecheck.checkers import PatternChecker
from themecheck.config import Config, OutputConfig, WatchConfig, load_config
from themecheck.core.exceptions import (
    CatalogNotFoundError,
    ConfigLoadError,
    ConfigNotFoundError,
    ConfigValidationError,
)
from themecheck.reporters.console import ColorMode, ConsoleReporter


class TestConfig:
    """Config 测试"""

    def test_default_config(self) -> None:
        """测试默认配置"""
        config = Config()

        assert config.root == Path()
        assert config.catalog == "envato"
        assert "**/*.php" in config.include
        assert "style.css" in config.include
        assert any("node_modules" in pattern for pattern in config.exclude)
        assert any("vendor" in pattern for pattern in config.exclude)
        assert config.output.context_lines == 2
        assert config.watch.debounce_ms == 500

    def test_default_components(self) -> None:
        """测试默认检查器和报告器"""
        config = Config()

        assert len(config.checkers) == 1
        assert isinstance(config.checkers[0], PatternChecker)
        assert isinstance(config.reporter, ConsoleReporter)

    def test_reporter_follows_output_config(self) -> None:
        """测试默认报告器使用输出配置"""
        config = Config(output=OutputConfig(context_lines=5, show_suggestions=False, color="never"))

        assert isinstance(config.reporter, ConsoleReporter)
        assert config.reporter.context_lines == 5
        assert config.reporter.show_suggestions is False
        assert config.reporter.color == ColorMode.NEVER

    def test_config_root_as_path(self) -> None:
        """测试 Path 类型的 root"""
        config = Config(root=Path("/some/path"))

        assert isinstance(config.root, Path)
        assert config.root == Path("/some/path")

    def test_default_lists_not_shared(self) -> None:
        """测试默认列表不在实例间共享"""
        first = Config()
        first.include.append("*.inc")

        assert "*.inc" not in Config().include

    def test_rule_catalog(self) -> None:
        """测试解析规则目录"""
        assert Config().rule_catalog.name == "envato"

    def test_unknown_catalog(self) -> None:
        """测试未注册的规则目录"""
        with pytest.raises(CatalogNotFoundError):
            Config(catalog="missing")

    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"output": OutputConfig(color="rainbow")}, "output.color"),
            ({"output": OutputConfig(context_lines=-1)}, "output.context_lines"),
            ({"watch": WatchConfig(debounce_ms=-5)}, "watch.debounce_ms"),
            ({"watch": WatchConfig(poll_interval=0)}, "watch.poll_interval"),
        ],
    )
    def test_validation(self, kwargs: dict, field: str) -> None:
        """测试非法配置值"""
        with pytest.raises(ConfigValidationError) as exc_info:
            Config(**kwargs)

        assert exc_info.value.field == field

    def test_resolve_root(self, tmp_path: Path) -> None:
        """测试解析根目录"""
        assert Config(root="theme").resolve_root(tmp_path) == (tmp_path / "theme").resolve()
        assert Config(root=tmp_path).resolve_root(Path("/other")) == tmp_path


class TestLoadConfig:
    """load_config 测试"""

    def test_load_valid_config(self, tmp_path: Path) -> None:
        """测试加载有效配置文件"""
        config_file = tmp_path / "themecheck_config.py"
        config_file.write_text(
            """
from pathlib import Path
from themecheck.config import Config

config = Config(
    root=Path("."),
    include=["**/*.php"],
)
""",
            encoding="utf-8",
        )

        config, config_dir = load_config(config_file)

        assert isinstance(config, Config)
        assert config.include == ["**/*.php"]
        assert config_dir == tmp_path.resolve()

    def test_load_nonexistent_file(self, tmp_path: Path) -> None:
        """测试加载不存在的文件"""
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "nonexistent.py")

    def test_load_invalid_python(self, tmp_path: Path) -> None:
        """测试加载语法错误的 Python 文件"""
        config_file = tmp_path / "themecheck_config.py"
        config_file.write_text("def invalid syntax", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            load_config(config_file)

    def test_load_missing_config_variable(self, tmp_path: Path) -> None:
        """测试加载缺少 config 变量的文件"""
        config_file = tmp_path / "themecheck_config.py"
        config_file.write_text("x = 1", encoding="utf-8")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_config(config_file)

        assert "config" in str(exc_info.value).lower()

    def test_load_wrong_type_config(self, tmp_path: Path) -> None:
        """测试 config 变量类型错误"""
        config_file = tmp_path / "themecheck_config.py"
        config_file.write_text("config = 'not a config'", encoding="utf-8")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_config(config_file)

        assert "Config" in str(exc_info.value)

    def test_search_parent_directories(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """测试向上查找配置文件"""
        (tmp_path / "themecheck_config.py").write_text(
            "from themecheck.config import Config\nconfig = Config(root='theme')\n",
            encoding="utf-8",
        )
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        config, config_dir = load_config()

        assert config.root == Path("theme")
        assert config_dir == tmp_path.resolve()

    def test_no_config_returns_default(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """测试找不到配置时返回默认配置"""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("themecheck.config._find_config_file", lambda: None)

        config, config_dir = load_config()

        assert isinstance(config, Config)
        assert config_dir == Path.cwd()
