"""Celery tasks for the navigation cache."""

from __future__ import annotations

import logging
from typing import Iterable

from celery import shared_task

from apps.navigation import conf as nav_conf
from apps.navigation.exceptions import RowStoreError
from apps.navigation.services import get_navigation_tree

logger = logging.getLogger("navigation.tasks")


@shared_task(
    queue="navigation",
    autoretry_for=(RowStoreError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def warm_navigation_cache(locales: Iterable[str] | None = None) -> dict[str, int]:
    """Rebuild the public tree of each locale so the first reader after a write hits the cache."""

    targets = [nav_conf.normalize_locale(code) for code in (locales or nav_conf.locales())]
    warmed: dict[str, int] = {}
    for locale in dict.fromkeys(targets):
        result = get_navigation_tree(locale, force_refresh=True)
        warmed[locale] = len(result.items)
        logger.info("nav_cache_warmed locale=%s roots=%s legacy=%s", locale, len(result.items), result.legacy)
    return warmed
