"""Tests for CorpusScanner - 整个主题的扫描"""

import logging
from pathlib import Path

import pytest

from themecheck.corpus import GLOBAL_CHECKER, CorpusScanner
from themecheck.core.finding import Finding, Location, Severity
from themecheck.core.rules import RuleCatalog
from themecheck.core.store import DiagnosticStore
from themecheck.workspaces import FileSystemWorkspace, MemoryWorkspace


def _globals(findings) -> list[Finding]:
    return [f for f in findings if f.checker == GLOBAL_CHECKER]


def _stale(file: Path) -> Finding:
    return Finding(
        location=Location(file, 0, 0, 5),
        message="stale",
        severity=Severity.WARNING,
        category="test",
        checker="pattern",
    )


class TestCompliantTheme:
    """合规主题"""

    def test_no_global_findings(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试合规主题没有全局结果"""
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        assert result.global_findings == []
        assert result.missing_features == []
        assert result.domains == ["sample"]
        assert result.passed

    def test_every_file_has_entry(
        self,
        scanner: CorpusScanner,
        store: DiagnosticStore,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试每个文件都有结果条目（即使为空）"""
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        assert result.total == result.processed == len(compliant_files)
        for file in workspace.list_source_files():
            assert file in store
        assert store.all_findings() == []

    def test_on_disk(self, scanner: CorpusScanner, theme_dir: Path) -> None:
        """测试磁盘上的合规主题"""
        result = scanner.scan(FileSystemWorkspace(theme_dir))

        assert result.global_findings == []
        assert result.home_file == theme_dir.resolve() / "functions.php"


class TestTextDomains:
    """文本域一致性"""

    def test_multiple_domains_single_warning(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试多个文本域时只报告一次警告"""
        compliant_files["header.php"] = "<?php _e( 'Hello', 'alpha' ); ?>"
        compliant_files["footer.php"] = "<?php _e( 'Bye', 'beta' ); _e( 'Hi', 'alpha' ); ?>"
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        warnings = [f for f in result.global_findings if f.code == "multiple-text-domains"]
        assert len(warnings) == 1
        assert warnings[0].severity == Severity.WARNING
        assert "sample, alpha, beta" in warnings[0].message
        assert result.domains == ["sample", "alpha", "beta"]

    def test_single_domain_no_warning(self, scanner: CorpusScanner) -> None:
        """测试只有一个文本域时不报告"""
        workspace = MemoryWorkspace(
            files={
                "functions.php": "<?php __( 'A', 'alpha' );",
                "index.php": "<?php _e( 'B', 'alpha' );",
            }
        )

        result = scanner.scan(workspace)

        assert not [f for f in result.global_findings if f.code == "multiple-text-domains"]


class TestRequiredFeatures:
    """必需与推荐特性"""

    def test_missing_count(self, scanner: CorpusScanner, catalog: RuleCatalog) -> None:
        """测试缺失特性数 = 必需规则总数 - 已出现的规则数"""
        workspace = MemoryWorkspace(
            files={"functions.php": "<?php wp_head(); wp_footer(); body_class();"}
        )

        result = scanner.scan(workspace)

        features = [f for f in result.global_findings if f.category in ("required", "recommended")]
        assert len(features) == len(catalog.all_required_rules()) - 3
        codes = {f.code for f in features}
        assert not {"wp-head", "wp-footer", "body-class"} & codes
        assert "post-class" in codes

    def test_feature_in_any_file(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试特性出现在任意文件中即满足"""
        compliant_files["index.php"] = compliant_files["index.php"].replace("wp_footer();", "")
        compliant_files["footer.php"] = "<?php wp_footer(); ?>"
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        assert result.global_findings == []

    def test_missing_feature_severity(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试缺失的必需特性为 Error，推荐特性为 Info"""
        compliant_files["index.php"] = compliant_files["index.php"].replace("wp_footer();", "")
        compliant_files["index.php"] = compliant_files["index.php"].replace(
            "the_custom_logo();", ""
        )
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        by_code = {f.code: f for f in result.global_findings}
        assert set(by_code) == {"wp-footer", "the-custom-logo"}
        assert by_code["wp-footer"].severity == Severity.ERROR
        assert by_code["wp-footer"].message == "REQUIRED: wp_footer()"
        assert by_code["the-custom-logo"].severity == Severity.INFO
        assert not result.passed
        assert result.features["wp-footer"] is False
        assert result.features["wp-head"] is True


class TestHomeFile:
    """主文件选择与全局结果挂载"""

    def test_globals_attached_to_functions_php(
        self, scanner: CorpusScanner, store: DiagnosticStore
    ) -> None:
        """测试全局结果追加在主文件局部结果之后"""
        workspace = MemoryWorkspace(
            files={
                "index.php": "<?php wp_head(); ?>",
                "functions.php": "<?php eval($x);",
            }
        )

        result = scanner.scan(workspace)
        home = workspace.resolve("functions.php")

        assert result.home_file == home
        findings = store.get_for_file(home)
        assert findings[0].code == "eval"
        assert all(f.checker == GLOBAL_CHECKER for f in findings[1:])
        assert all(f.line == 0 and f.file == home for f in findings[1:])
        assert _globals(store.get_for_file(workspace.resolve("index.php"))) == []

    def test_fallback_to_style_css(self, scanner: CorpusScanner, store: DiagnosticStore) -> None:
        """测试没有 functions.php 时挂载到 style.css"""
        workspace = MemoryWorkspace(
            files={"index.php": "<?php wp_head(); ?>", "style.css": "/* Theme Name: x */"}
        )

        result = scanner.scan(workspace)
        style = workspace.resolve("style.css")

        assert result.home_file == style
        assert _globals(store.get_for_file(style))

    def test_first_entry_point_wins(self, scanner: CorpusScanner) -> None:
        """测试多个 functions.php 时选择第一个"""
        workspace = MemoryWorkspace(
            files={
                "style.css": "",
                "inc/functions.php": "<?php",
                "functions.php": "<?php",
            }
        )

        result = scanner.scan(workspace)

        assert result.home_file == workspace.resolve("inc/functions.php")

    def test_home_change_moves_globals(
        self, scanner: CorpusScanner, store: DiagnosticStore
    ) -> None:
        """测试主文件变化后旧主文件上的全局结果被移除"""
        workspace = MemoryWorkspace(
            files={"style.css": "", "functions.php": "<?php", "index.php": "<?php"}
        )
        functions = workspace.resolve("functions.php")
        style = workspace.resolve("style.css")
        scanner.scan(workspace)
        assert _globals(store.get_for_file(functions))

        result = scanner.scan(workspace, files=[style, workspace.resolve("index.php")])

        assert result.home_file == style
        assert _globals(store.get_for_file(functions)) == []
        assert _globals(store.get_for_file(style)) == result.global_findings
        assert scanner.global_findings_for(functions) == ()

    def test_no_home_file(
        self,
        scanner: CorpusScanner,
        store: DiagnosticStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """测试没有主文件时全局结果不挂载"""
        workspace = MemoryWorkspace(files={"index.php": "<?php eval($x);"})

        with caplog.at_level(logging.WARNING, logger="themecheck.corpus"):
            result = scanner.scan(workspace)

        assert result.home_file is None
        assert result.global_findings
        assert _globals(store.all_findings()) == []
        assert "global findings will not be attached" in caplog.text
        assert scanner.global_findings_for(workspace.resolve("index.php")) == ()


class TestSentinelsAndMetadata:
    """伴随文件与 style.css 头部"""

    def test_missing_license_and_screenshot(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
    ) -> None:
        """测试缺少许可证和截图时恰好两个 Error"""
        workspace = MemoryWorkspace(files=compliant_files, assets={"readme.txt": "x"})

        result = scanner.scan(workspace)

        files = [f for f in result.global_findings if f.category == "files"]
        assert len(files) == 2
        assert {f.code for f in files} == {"screenshot", "license-file"}
        assert all(f.severity == Severity.ERROR for f in files)

    def test_alternative_candidates(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
    ) -> None:
        """测试任一候选文件存在即满足"""
        workspace = MemoryWorkspace(
            files=compliant_files,
            assets={"LICENSE.txt": "GPL", "screenshot.jpg": "jpg", "readme.txt": "x"},
        )

        result = scanner.scan(workspace)

        assert [f for f in result.global_findings if f.category == "files"] == []

    def test_missing_readme_is_info(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
    ) -> None:
        """测试缺少 readme.txt 为 Info"""
        workspace = MemoryWorkspace(
            files=compliant_files, assets={"LICENSE": "GPL", "screenshot.png": "png"}
        )

        result = scanner.scan(workspace)

        assert [(f.code, f.severity) for f in result.global_findings] == [
            ("readme", Severity.INFO)
        ]

    def test_missing_headers(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试缺少 style.css 头部字段"""
        compliant_files["style.css"] = "/*\nTheme Name: Sample\nVersion: 1.0\n*/"
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        metadata = [f for f in result.global_findings if f.category == "metadata"]
        assert [f.code for f in metadata] == [
            "Description:",
            "Author:",
            "License:",
            "License URI:",
            "Text Domain:",
            "Tested up to:",
        ]
        assert metadata[0].message == (
            "REQUIRED: style.css is missing required header: Description:"
        )
        assert metadata[-1].severity == Severity.INFO

    def test_missing_style_css(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试 style.css 不存在时只报告一次"""
        del compliant_files["style.css"]
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)

        result = scanner.scan(workspace)

        metadata = [f for f in result.global_findings if f.category == "metadata"]
        assert len(metadata) == 1
        assert metadata[0].message == "REQUIRED: style.css is missing!"
        assert metadata[0].severity == Severity.ERROR


class TestCancellationAndFailures:
    """取消与读取失败"""

    def test_cancel_after_k_files(
        self,
        scanner: CorpusScanner,
        store: DiagnosticStore,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试处理 k 个文件后取消：未处理的文件保留旧结果，没有全局结果"""
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)
        unscanned = [workspace.resolve("index.php"), workspace.resolve("comments.php")]
        previous = {file: (_stale(file),) for file in unscanned}
        for file, findings in previous.items():
            store.set_for_file(file, findings)
        calls = {"n": 0}

        def cancelled() -> bool:
            calls["n"] += 1
            return calls["n"] > 2

        result = scanner.scan(workspace, cancelled=cancelled)

        assert result.cancelled
        assert result.processed == 2
        assert workspace.resolve("style.css") in store
        assert workspace.resolve("functions.php") in store
        assert len(store) == 4
        for file, findings in previous.items():
            assert store.get_for_file(file) == findings
        assert result.global_findings == []
        assert _globals(store.all_findings()) == []
        assert not result.passed

    @pytest.mark.parametrize("stage", ["sentinels", "headers"])
    def test_cancel_after_last_file(
        self,
        scanner: CorpusScanner,
        store: DiagnosticStore,
        catalog: RuleCatalog,
        compliant_files: dict[str, str],
        stage: str,
    ) -> None:
        """测试所有文件处理完后、全局结果生成前取消"""
        # 没有伴随文件，不取消的话一定会有全局结果
        workspace = MemoryWorkspace(files=compliant_files)
        allowed = len(compliant_files)
        if stage == "headers":
            allowed += len(catalog.sentinels)
        calls = {"n": 0}

        def cancelled() -> bool:
            calls["n"] += 1
            return calls["n"] > allowed

        result = scanner.scan(workspace, cancelled=cancelled)

        assert calls["n"] == allowed + 1
        assert result.cancelled
        assert result.processed == len(compliant_files)
        assert result.global_findings == []
        assert _globals(store.all_findings()) == []
        assert scanner.global_findings_for(workspace.resolve("functions.php")) == ()
        assert not result.passed

    def test_cancel_keeps_previous_globals(
        self,
        scanner: CorpusScanner,
        compliant_assets: dict[str, str],
    ) -> None:
        """测试取消的扫描不改变上次完成扫描的全局结果"""
        workspace = MemoryWorkspace(files={"functions.php": "<?php"}, assets=compliant_assets)
        scanner.scan(workspace)
        home = workspace.resolve("functions.php")
        previous = scanner.global_findings_for(home)
        assert previous

        scanner.scan(workspace, cancelled=lambda: True)

        assert scanner.global_findings_for(home) == previous

    def test_progress_callback(
        self,
        scanner: CorpusScanner,
        compliant_files: dict[str, str],
        compliant_assets: dict[str, str],
    ) -> None:
        """测试进度回调"""
        workspace = MemoryWorkspace(files=compliant_files, assets=compliant_assets)
        events: list[tuple[int, int, str]] = []

        scanner.scan(
            workspace, progress=lambda done, total, label: events.append((done, total, label))
        )

        assert [e[0] for e in events] == [1, 2, 3, 4]
        assert all(e[1] == 4 for e in events)
        assert events[0][2] == "style.css"

    def test_read_failure_keeps_prior_entry(
        self,
        scanner: CorpusScanner,
        store: DiagnosticStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """测试读取失败时保留旧结果并继续扫描"""
        workspace = MemoryWorkspace(
            files={"functions.php": "<?php", "index.php": "<?php eval($x);", "page.php": "<?php"}
        )
        index = workspace.resolve("index.php")
        previous = (
            Finding(
                location=Location(index, 0, 6, 11),
                message="old",
                severity=Severity.ERROR,
                category="security",
            ),
        )
        store.set_for_file(index, previous)
        workspace.unreadable.add("index.php")

        with caplog.at_level(logging.ERROR, logger="themecheck.corpus"):
            result = scanner.scan(workspace)

        assert store.get_for_file(index) == previous
        assert result.skipped == [index]
        assert result.processed == 3
        assert workspace.resolve("page.php") in store
        assert "Error scanning file index.php" in caplog.text

    def test_unreadable_home_keeps_single_globals(
        self, scanner: CorpusScanner, store: DiagnosticStore
    ) -> None:
        """测试主文件读取失败时旧的全局结果被替换而不是重复"""
        workspace = MemoryWorkspace(files={"functions.php": "<?php", "index.php": "<?php"})
        home = workspace.resolve("functions.php")
        first = scanner.scan(workspace)
        assert first.global_findings

        workspace.unreadable.add("functions.php")
        second = scanner.scan(workspace)

        assert second.skipped == [home]
        assert list(store.get_for_file(home)) == second.global_findings
        assert len(second.global_findings) == len(first.global_findings)

    def test_explicit_file_list(self, scanner: CorpusScanner, store: DiagnosticStore) -> None:
        """测试只扫描指定文件"""
        workspace = MemoryWorkspace(files={"functions.php": "<?php", "index.php": "<?php"})

        result = scanner.scan(workspace, files=[workspace.resolve("index.php")])

        assert result.total == 1
        assert store.files() == [workspace.resolve("index.php")]
