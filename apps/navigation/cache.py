"""
Two-tier navigation cache keyed by a shared version token.

- The shared tier is a Django cache alias (Redis in production) visible to
  every process; it holds the version token and the serialized trees.
- The local tier is a per-process ``LocMemCache`` with a short TTL.
- Every key embeds the current version token. Invalidation writes a new token
  and clears the local tier, so entries built under an older token are never
  looked up again by any process; they simply expire.
- Everything here is derived data: dropping the whole cache is always safe.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from django.core.cache import BaseCache, caches
from django.core.cache.backends.locmem import LocMemCache

from . import conf as nav_conf
from .rows import NavigationResult

logger = logging.getLogger("navigation.cache")


def new_version_token() -> str:
    return f"v{time.time_ns()}"


def role_segment(locale: str, role: str | None) -> str:
    return f"{locale}::{role}" if role else locale


class VersionedCache:
    def __init__(
        self,
        *,
        shared: BaseCache,
        local: BaseCache | None = None,
        prefix: str = "nav-tree",
        local_ttl: int = 60,
        shared_ttl: int = 300,
    ) -> None:
        self.shared = shared
        self.local = local if local is not None else LocMemCache(f"{prefix}-{uuid.uuid4().hex}", {})
        self.prefix = prefix
        self.local_ttl = max(1, int(local_ttl))
        self.shared_ttl = max(1, int(shared_ttl))
        self._version_hint = new_version_token()

    # ------------------------------------------------------------------
    # keys
    # ------------------------------------------------------------------
    @property
    def version_key(self) -> str:
        return f"{self.prefix}:version"

    def entry_key(self, version: str, locale: str, role: str | None = None) -> str:
        return f"{self.prefix}:{version}:{role_segment(locale, role)}"

    def last_good_key(self, locale: str, role: str | None = None) -> str:
        return f"{self.prefix}:last-good:{role_segment(locale, role)}"

    # ------------------------------------------------------------------
    # version token
    # ------------------------------------------------------------------
    def current_version(self) -> str:
        remote = self.shared.get(self.version_key)
        if remote:
            self._version_hint = str(remote)
            return self._version_hint
        # First reader publishes its hint; add() keeps a concurrent bump intact.
        self.shared.add(self.version_key, self._version_hint, timeout=None)
        remote = self.shared.get(self.version_key)
        if remote:
            self._version_hint = str(remote)
        return self._version_hint

    def bump_version(self) -> str:
        self._version_hint = new_version_token()
        self.local.clear()
        self.shared.set(self.version_key, self._version_hint, timeout=None)
        logger.info("nav_cache_version_bumped version=%s", self._version_hint)
        return self._version_hint

    # ------------------------------------------------------------------
    # entries
    # ------------------------------------------------------------------
    def get(self, locale: str, role: str | None = None, *, version: str | None = None) -> NavigationResult | None:
        key = self.entry_key(version or self.current_version(), locale, role)
        cached = self.local.get(key)
        if cached is not None:
            logger.debug("nav_cache_hit tier=local key=%s", key)
            return NavigationResult.from_dict(cached)
        shared_hit = self.shared.get(key)
        if shared_hit is not None:
            logger.debug("nav_cache_hit tier=shared key=%s", key)
            self.local.set(key, shared_hit, timeout=self.local_ttl)
            return NavigationResult.from_dict(shared_hit)
        logger.debug("nav_cache_miss key=%s", key)
        return None

    def set(self, locale: str, role: str | None, result: NavigationResult, *, version: str | None = None) -> str:
        """Store ``result`` in both tiers under ``version`` (current token by default)."""

        version = version or self.current_version()
        key = self.entry_key(version, locale, role)
        payload: dict[str, Any] = result.as_dict()
        self.local.set(key, payload, timeout=self.local_ttl)
        self.shared.set(key, payload, timeout=self.shared_ttl)
        self.shared.set(self.last_good_key(locale, role), payload, timeout=None)
        return key

    def get_last_good(self, locale: str, role: str | None = None) -> NavigationResult | None:
        payload = self.shared.get(self.last_good_key(locale, role))
        if payload is None:
            return None
        return NavigationResult.from_dict(payload)

    def invalidate(self, locale: str | None = None) -> str:
        """Make every entry built so far unreachable; ``locale`` also drops its public key eagerly."""

        if locale:
            key = self.entry_key(self.current_version(), locale)
            self.local.delete(key)
            self.shared.delete(key)
        return self.bump_version()

    def reset(self) -> None:
        """Forget process-local state, as a fresh process would."""

        self.local.clear()
        self._version_hint = new_version_token()


_navigation_cache: VersionedCache | None = None


def get_navigation_cache() -> VersionedCache:
    """Process-wide cache instance, created lazily from settings."""

    global _navigation_cache
    if _navigation_cache is None:
        settings_ = nav_conf.describe()
        _navigation_cache = VersionedCache(
            shared=caches[settings_.cache_alias],
            prefix=settings_.cache_prefix,
            local_ttl=settings_.local_ttl,
            shared_ttl=settings_.shared_ttl,
        )
    return _navigation_cache


def reset_navigation_cache() -> None:
    """Drop the process-wide instance (tests, settings changes)."""

    global _navigation_cache
    if _navigation_cache is not None:
        _navigation_cache.reset()
    _navigation_cache = None
