"""Catalogs module - 规则目录注册表"""

from __future__ import annotations

from themecheck.catalogs.envato import ENVATO
from themecheck.core.exceptions import CatalogNotFoundError
from themecheck.core.rules import RuleCatalog

DEFAULT_CATALOG = "envato"

CATALOGS: dict[str, RuleCatalog] = {
    ENVATO.name: ENVATO,
}


def available_catalogs() -> list[str]:
    """已注册的目录名称"""
    return sorted(CATALOGS)


def get_catalog(name: str | RuleCatalog = DEFAULT_CATALOG) -> RuleCatalog:
    """按名称获取规则目录

    传入 RuleCatalog 实例时原样返回，便于配置中直接使用自定义目录。

    Raises:
        CatalogNotFoundError: 名称未注册
    """
    if isinstance(name, RuleCatalog):
        return name
    try:
        return CATALOGS[name]
    except KeyError:
        raise CatalogNotFoundError(name, available=available_catalogs()) from None


__all__ = [
    "CATALOGS",
    "DEFAULT_CATALOG",
    "ENVATO",
    "available_catalogs",
    "get_catalog",
]
