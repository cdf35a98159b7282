"""
Read and invalidate entry points of the navigation subsystem.

Readers call :func:`get_navigation_tree`; writers call
:func:`invalidate_navigation_tree` after their transaction commits.
"""

from __future__ import annotations

import logging

from . import conf as nav_conf
from .assembly import build_grouped_tree
from .cache import get_navigation_cache
from .coverage import ensure_locale_coverage
from .exceptions import RowStoreError
from .filters import filter_tree
from .legacy import build_legacy_tree
from .paths import resolve_paths
from .rows import NavigationResult
from .store import DjangoRowStore, RowStore

logger = logging.getLogger("navigation.cache")


def _normalize_role(role: str | None) -> str | None:
    value = (role or "").strip()
    return value or None


def build_navigation(locale: str, role: str | None = None, *, store: RowStore | None = None) -> NavigationResult:
    """Build the tree for ``locale`` straight from the row store, bypassing the cache."""

    store = store or DjangoRowStore()
    rows = store.find_all_rows()
    if not rows:
        legacy_items = store.find_legacy_items()
        if not legacy_items:
            return NavigationResult(items=(), legacy=False)
        logger.info("nav_legacy_fallback locale=%s items=%s", locale, len(legacy_items))
        return NavigationResult(items=tuple(build_legacy_tree(legacy_items, locale)), legacy=True)

    rows = ensure_locale_coverage(
        store,
        rows,
        locales=nav_conf.locales(),
        default_locale=nav_conf.default_locale(),
    )
    tree = build_grouped_tree(rows, locale, default_locale=nav_conf.default_locale())
    tree = filter_tree(tree, role)
    return NavigationResult(items=tuple(resolve_paths(tree)), legacy=False)


def get_navigation_tree(
    locale: str | None,
    *,
    force_refresh: bool = False,
    role: str | None = None,
    stale_on_error: bool = False,
    store: RowStore | None = None,
) -> NavigationResult:
    locale = nav_conf.normalize_locale(locale)
    role = _normalize_role(role)
    cache = get_navigation_cache()
    # Captured before the build so an invalidation during the build wins.
    version = cache.current_version()

    if not force_refresh:
        cached = cache.get(locale, role, version=version)
        if cached is not None:
            return cached

    try:
        result = build_navigation(locale, role, store=store)
    except RowStoreError:
        if stale_on_error and not force_refresh:
            stale = cache.get_last_good(locale, role)
            if stale is not None:
                logger.warning("nav_serving_stale locale=%s role=%s", locale, role)
                return stale
        raise

    cache.set(locale, role, result, version=version)
    logger.debug("nav_cache_populated locale=%s role=%s version=%s", locale, role, version)
    return result


def invalidate_navigation_tree(locale: str | None = None) -> str:
    """Drop every cached tree (all locales and roles); returns the new version token."""

    target = nav_conf.normalize_locale(locale) if locale else None
    version = get_navigation_cache().invalidate(target)
    logger.info("nav_cache_invalidated locale=%s version=%s", target or "*", version)
    return version
