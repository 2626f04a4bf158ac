"""CLI - 命令行接口"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from themecheck import __version__

if TYPE_CHECKING:
    from themecheck.config import Config
    from themecheck.core.finding import Finding
    from themecheck.core.store import DiagnosticStore
    from themecheck.core.workspace import Workspace
    from themecheck.triggers import TriggerPolicy

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_CONFIG = 2


def main(argv: list[str] | None = None) -> int:
    """主入口函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # 根据子命令执行
    if hasattr(args, "func"):
        return args.func(args)
    else:
        parser.print_help()
        return EXIT_OK


def _configure_logging(verbosity: int) -> None:
    """日志输出到 stderr：默认 WARNING，-v 为 INFO，-vv 为 DEBUG"""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config_or_exit(config_path: Path | None) -> tuple[Config, Path]:
    """加载配置文件，失败时打印错误并退出

    Raises:
        SystemExit: 加载失败时（退出码 2）
    """
    from themecheck.config import load_config
    from themecheck.core.colors import error
    from themecheck.core.exceptions import ConfigError

    try:
        return load_config(config_path)
    except ConfigError as e:
        print(error(f"Error loading config: {e}"), file=sys.stderr)
        sys.exit(EXIT_CONFIG)


def create_parser() -> argparse.ArgumentParser:
    """创建命令行解析器"""
    parser = argparse.ArgumentParser(
        prog="themecheck",
        description="Rule-based conformance checker for WordPress themes",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", "-c", type=Path, help="Path to config file (themecheck_config.py)"
    )
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase log verbosity (-v, -vv)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check 命令
    check_parser = subparsers.add_parser("check", help="Scan the whole theme")
    check_parser.add_argument(
        "--include", "-I", action="append", default=[], help="Additional glob patterns to include"
    )
    check_parser.add_argument(
        "--exclude", "-E", action="append", default=[], help="Additional glob patterns to exclude"
    )
    check_parser.add_argument("--catalog", help="Rule catalog to use")
    check_parser.add_argument(
        "--category", action="append", default=[], help="Only report the given category"
    )
    check_parser.add_argument("--json", action="store_true", help="Output in JSON format")
    check_parser.add_argument("--quiet", "-q", action="store_true", help="Only show summary")
    check_parser.add_argument(
        "--no-progress", action="store_true", help="Do not show scan progress"
    )
    check_parser.set_defaults(func=cmd_check)

    # scan 命令
    scan_parser = subparsers.add_parser("scan", help="Scan individual files (local rules only)")
    scan_parser.add_argument("files", nargs="+", type=Path, help="Files to scan")
    scan_parser.add_argument("--catalog", help="Rule catalog to use")
    scan_parser.add_argument("--json", action="store_true", help="Output in JSON format")
    scan_parser.set_defaults(func=cmd_scan)

    # watch 命令
    watch_parser = subparsers.add_parser("watch", help="Rescan files as they change")
    watch_parser.add_argument("--catalog", help="Rule catalog to use")
    watch_parser.add_argument(
        "--interval", type=float, help="Polling interval in seconds (overrides config)"
    )
    watch_parser.set_defaults(func=cmd_watch)

    # list 命令
    list_parser = subparsers.add_parser("list", help="List catalogs, categories and rules")
    list_parser.add_argument("--catalog", help="Catalog to describe")
    list_parser.add_argument("--catalogs", action="store_true", help="List available catalogs")
    list_parser.add_argument(
        "--categories", action="store_true", help="List rule categories of the catalog"
    )
    list_parser.add_argument("--rules", action="store_true", help="List rules of the catalog")
    list_parser.set_defaults(func=cmd_list)

    return parser


def _apply_catalog(config: Config, catalog: str | None) -> None:
    """用命令行指定的目录替换配置中的目录

    Raises:
        CatalogNotFoundError: 目录名未注册
    """
    from themecheck.catalogs import get_catalog
    from themecheck.checkers.pattern import PatternChecker

    if not catalog:
        return

    get_catalog(catalog)
    config.catalog = catalog
    config.checkers = [
        PatternChecker(catalog=catalog, extensions=c.extensions, enabled=c.enabled)
        if isinstance(c, PatternChecker)
        else c
        for c in config.checkers
    ]


def _print_progress(processed: int, total: int, label: str) -> None:
    print(f"\r\033[K[{processed}/{total}] {label}", end="", file=sys.stderr, flush=True)
    if processed == total:
        print(file=sys.stderr)


def cmd_check(args: argparse.Namespace) -> int:
    """执行 check 命令"""
    from themecheck.core.colors import error
    from themecheck.core.exceptions import CatalogError
    from themecheck.core.finding import Severity
    from themecheck.runner import CheckRunner

    # 加载配置
    config, config_dir = _load_config_or_exit(args.config)

    # 合并命令行参数
    if args.include:
        config.include.extend(args.include)
    if args.exclude:
        config.exclude.extend(args.exclude)

    try:
        _apply_catalog(config, args.catalog)
        root = config.resolve_root(config_dir)
        runner = CheckRunner(config=config, root=root)
    except CatalogError as e:
        print(error(f"Error: {e}"), file=sys.stderr)
        return EXIT_CONFIG

    show_progress = not (args.no_progress or args.json or args.quiet) and sys.stderr.isatty()
    result = runner.run(report=False, progress=_print_progress if show_progress else None)

    store = runner.store
    if args.category:
        store = _filter_store(store, set(args.category))

    if args.json:
        _output_json(store.all_findings(), root)
    elif args.quiet:
        _output_summary(store.all_findings())
    elif config.reporter:
        config.reporter.report(store, runner.workspace)

    if result.skipped:
        logger.warning("%d file(s) could not be read", len(result.skipped))

    # 返回码：有错误返回 1
    has_errors = any(f.severity == Severity.ERROR for f in store.all_findings())
    return EXIT_FINDINGS if has_errors else EXIT_OK


def cmd_scan(args: argparse.Namespace) -> int:
    """执行 scan 命令"""
    from themecheck.core.colors import error
    from themecheck.core.exceptions import CatalogError
    from themecheck.core.finding import Severity
    from themecheck.runner import CheckRunner

    config, config_dir = _load_config_or_exit(args.config)

    try:
        _apply_catalog(config, args.catalog)
        runner = CheckRunner(config=config, root=config.resolve_root(config_dir))
    except CatalogError as e:
        print(error(f"Error: {e}"), file=sys.stderr)
        return EXIT_CONFIG

    findings = runner.scan_files(args.files)

    if args.json:
        _output_json(findings, runner.root)
    elif config.reporter:
        config.reporter.report(runner.store, runner.workspace)

    has_errors = any(f.severity == Severity.ERROR for f in findings)
    return EXIT_FINDINGS if has_errors else EXIT_OK


def cmd_watch(args: argparse.Namespace) -> int:
    """执行 watch 命令

    启动时做一次整体扫描，之后轮询工作区：
    新出现的文件按打开处理，修改过的文件按编辑处理（debounce）。
    """
    from themecheck.core.colors import error, info, muted
    from themecheck.core.exceptions import CatalogError
    from themecheck.runner import CheckRunner

    config, config_dir = _load_config_or_exit(args.config)

    try:
        _apply_catalog(config, args.catalog)
        runner = CheckRunner(config=config, root=config.resolve_root(config_dir))
    except CatalogError as e:
        print(error(f"Error: {e}"), file=sys.stderr)
        return EXIT_CONFIG

    interval = args.interval or config.watch.poll_interval

    def on_commit(file: Path, findings: tuple[Finding, ...]) -> None:
        rel = runner.workspace.relative_path(file).as_posix()
        print(f"{info(rel)}: {_format_counts(findings)}")

    policy = runner.create_trigger_policy(on_commit=on_commit)
    result = policy.request_full_scan(runner.workspace)
    _output_summary(runner.store.all_findings())
    print(muted(f"Watching {runner.root} ({result.total} file(s)), press Ctrl-C to stop"))

    mtimes = _snapshot_mtimes(runner.workspace)
    try:
        while True:
            time.sleep(interval)
            mtimes = poll_workspace(runner.workspace, policy, mtimes)
    except KeyboardInterrupt:
        print()
    finally:
        policy.close()

    return EXIT_OK


def _snapshot_mtimes(workspace: Workspace) -> dict[Path, float]:
    mtimes: dict[Path, float] = {}
    for file in workspace.list_source_files():
        try:
            mtimes[file] = file.stat().st_mtime
        except OSError:
            continue
    return mtimes


def poll_workspace(
    workspace: Workspace, policy: TriggerPolicy, previous: dict[Path, float]
) -> dict[Path, float]:
    """对比两次轮询的修改时间，把变化转换为触发事件

    Returns:
        本次轮询的修改时间快照
    """
    from themecheck.core.exceptions import FileReadError

    current = _snapshot_mtimes(workspace)

    for file, mtime in current.items():
        if file in previous and previous[file] == mtime:
            continue
        try:
            text = workspace.read_text(file)
        except FileReadError as e:
            logger.error("Error reading file %s: %s", file, e.reason)
            continue

        if file not in previous:
            policy.on_file_opened(file, text)
        else:
            policy.on_file_changed(file, text)

    for file in previous.keys() - current.keys():
        logger.info("File removed: %s", file)
        policy.store.clear_file(file)

    return current


def cmd_list(args: argparse.Namespace) -> int:
    """执行 list 命令"""
    from themecheck.catalogs import DEFAULT_CATALOG, available_catalogs, get_catalog
    from themecheck.core.colors import error, info, muted, severity_style
    from themecheck.core.exceptions import CatalogError

    show_all = not (args.catalogs or args.categories or args.rules)

    try:
        catalog = get_catalog(args.catalog or DEFAULT_CATALOG)
    except CatalogError as e:
        print(error(f"Error: {e}"), file=sys.stderr)
        return EXIT_CONFIG

    if args.catalogs or show_all:
        print("Available catalogs:")
        for name in available_catalogs():
            print(f"  {info(name)} - {get_catalog(name).description}")

    if args.categories or show_all:
        print(f"\nCategories ({catalog.name}):")
        for category in catalog.categories():
            print(f"  {info(category)}")

    if args.rules:
        print(f"\nLocal rules ({catalog.name}):")
        for rule in catalog.all_local_rules():
            sev = severity_style(rule.severity, f"{rule.severity!s:<7}")
            print(f"  {sev} {info(rule.code)} {muted(f'[{rule.category}]')}")

        print(f"\nRequired rules ({catalog.name}):")
        for rule in catalog.all_required_rules():
            sev = severity_style(rule.severity, f"{rule.severity!s:<7}")
            print(f"  {sev} {info(rule.code)} {muted(f'[{rule.category}]')}")

    return EXIT_OK


def _filter_store(store: DiagnosticStore, categories: set[str]) -> DiagnosticStore:
    """只保留指定分类的结果"""
    from themecheck.core.store import DiagnosticStore

    filtered = DiagnosticStore()
    store.for_each(
        lambda file, findings: filtered.set_for_file(
            file, [f for f in findings if f.category in categories]
        )
    )
    return filtered


def _output_json(findings: list[Finding], root: Path) -> None:
    """输出 JSON 格式"""
    import json

    output = [finding.to_dict(root) for finding in findings]
    print(json.dumps(output, indent=2, ensure_ascii=False))


def _format_counts(findings) -> str:
    from themecheck.core.finding import Severity, count_by_severity

    if not findings:
        return "no issues"

    counts = count_by_severity(findings)
    return (
        f"{counts[Severity.ERROR]} error(s), {counts[Severity.WARNING]} warning(s), "
        f"{counts[Severity.INFO]} info(s)"
    )


def _output_summary(findings: list[Finding]) -> None:
    """输出摘要"""
    from themecheck.core.colors import error, success, warning
    from themecheck.core.finding import Severity, count_by_severity

    if not findings:
        print(success("✓ No issues found"))
        return

    counts = count_by_severity(findings)
    errors = counts[Severity.ERROR]
    warnings = counts[Severity.WARNING]
    infos = counts[Severity.INFO]

    parts = []
    if errors:
        parts.append(error(f"{errors} error(s)"))
    if warnings:
        parts.append(warning(f"{warnings} warning(s)"))
    if infos:
        parts.append(f"{infos} info(s)")

    print(f"Found {', '.join(parts)}")


if __name__ == "__main__":
    sys.exit(main())
