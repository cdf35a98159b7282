"""Runtime accessors for the ``NAVIGATION`` settings block."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings

_DEFAULT_LOCAL_TTL = 60
_DEFAULT_SHARED_TTL = 300


def _raw() -> dict[str, Any]:
    raw = getattr(settings, "NAVIGATION", None)
    return raw if isinstance(raw, dict) else {}


def _coerce_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def default_locale() -> str:
    value = _raw().get("DEFAULT_LOCALE") or getattr(settings, "LANGUAGE_CODE", "bg")
    return str(value).strip().lower()


def locales() -> list[str]:
    """Configured locales, default locale first, without duplicates."""

    raw = _raw().get("LOCALES")
    if not raw:
        raw = [code for code, _ in getattr(settings, "LANGUAGES", ())]
    ordered = [default_locale()]
    for item in raw:
        code = str(item).strip().lower()
        if code and code not in ordered:
            ordered.append(code)
    return ordered


def normalize_locale(value: str | None) -> str:
    code = (value or "").strip().lower()
    if code in locales():
        return code
    return default_locale()


def cache_alias() -> str:
    return str(_raw().get("CACHE_ALIAS") or "default")


def cache_prefix() -> str:
    return str(_raw().get("CACHE_PREFIX") or "nav-tree")


def local_ttl_seconds() -> int:
    return max(1, _coerce_int(_raw().get("LOCAL_TTL_SECONDS"), _DEFAULT_LOCAL_TTL))


def shared_ttl_seconds() -> int:
    return max(1, _coerce_int(_raw().get("SHARED_TTL_SECONDS"), _DEFAULT_SHARED_TTL))


def admin_role() -> str:
    return str(_raw().get("ADMIN_ROLE") or "ADMIN")


def warm_after_invalidate() -> bool:
    return bool(_raw().get("WARM_AFTER_INVALIDATE", False))


@dataclass(frozen=True)
class NavigationSettings:
    locales: tuple[str, ...]
    default_locale: str
    cache_alias: str
    cache_prefix: str
    local_ttl: int
    shared_ttl: int


def describe() -> NavigationSettings:
    return NavigationSettings(
        locales=tuple(locales()),
        default_locale=default_locale(),
        cache_alias=cache_alias(),
        cache_prefix=cache_prefix(),
        local_ttl=local_ttl_seconds(),
        shared_ttl=shared_ttl_seconds(),
    )
