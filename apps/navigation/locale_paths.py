"""Translating public paths between locales and resolving ROUTE aliases."""

from __future__ import annotations

import re
from typing import Sequence

from .models import PageKind
from .paths import sanitize_segment
from .rows import PageRow

MAX_PARENT_TRAVERSAL = 32

_CATCH_ALL_PLACEHOLDER = re.compile(r"\[\.\.\.[^\]]+\]")
_PLACEHOLDER = re.compile(r"\[[^\]]+\]")
_ROUTE_SOURCE_PREFIX = re.compile(r"^(app|pages)/")


def _split(path: str | None) -> list[str]:
    return [segment for segment in sanitize_segment(path).split("/") if segment]


def _find_alias(rows: Sequence[PageRow], locale: str, segment: str) -> PageRow | None:
    if not segment:
        return None
    for row in rows:
        if row.locale != locale or row.kind != PageKind.ROUTE:
            continue
        if sanitize_segment(row.route_override) == segment:
            return row
    return None


def _find_in_group(rows: Sequence[PageRow], locale: str, group_id: str) -> PageRow | None:
    for row in rows:
        if row.locale == locale and row.effective_group_id == group_id:
            return row
    return None


def _find_hierarchical(rows: Sequence[PageRow], locale: str, segments: Sequence[str]) -> PageRow | None:
    parent_id: int | None = None
    match: PageRow | None = None
    for segment in segments:
        match = next(
            (row for row in rows if row.locale == locale and row.parent_id == parent_id and row.slug == segment),
            None,
        )
        if match is None:
            return None
        parent_id = match.id
    return match


def _slug_path(rows: Sequence[PageRow], node: PageRow) -> str | None:
    by_id = {row.id: row for row in rows}
    segments: list[str] = []
    cursor: PageRow | None = node
    steps = 0
    while cursor is not None and steps < MAX_PARENT_TRAVERSAL:
        steps += 1
        if cursor.slug:
            segments.append(cursor.slug)
        if cursor.parent_id is None:
            break
        cursor = by_id.get(cursor.parent_id)
    if not segments:
        return None
    return "/".join(reversed(segments))


def translate_locale_path(
    rows: Sequence[PageRow],
    from_locale: str,
    to_locale: str,
    path: str | None,
) -> str | None:
    """
    Map a public path in ``from_locale`` to the equivalent path in ``to_locale``.

    Returns ``""`` for an empty path and ``None`` when no equivalent page exists.
    A leading ROUTE alias is matched first; otherwise the slug hierarchy is
    walked from the root and the target group's own ancestor slugs are used.
    """

    segments = _split(path)
    if not segments:
        return ""

    head, remainder = segments[0], "/".join(segments[1:])
    alias = _find_alias(rows, from_locale, head)
    if alias is not None:
        target = _find_in_group(rows, to_locale, alias.effective_group_id)
        if target is not None:
            base = sanitize_segment(target.route_override or target.slug)
            if base:
                return "/".join(part for part in (base, remainder) if part)

    match = _find_hierarchical(rows, from_locale, segments)
    if match is not None:
        target = _find_in_group(rows, to_locale, match.effective_group_id)
        if target is not None:
            return _slug_path(rows, target)
    return None


def resolve_route_alias(rows: Sequence[PageRow], locale: str, path: str | None) -> str | None:
    """Internal route path served under a ROUTE alias such as ``novini/foo``."""

    locale = sanitize_segment(locale)
    parts = _split(path)
    if not locale or not parts:
        return None

    alias = _find_alias(rows, locale, parts[0])
    if alias is None or not sanitize_segment(alias.route_path):
        return None

    own = sanitize_segment(alias.slug)
    rest = parts[1:]
    remainder = "/".join(rest)
    base = _ROUTE_SOURCE_PREFIX.sub("", sanitize_segment(alias.route_path))

    if _CATCH_ALL_PLACEHOLDER.search(base):
        fill = remainder or own
        base = _CATCH_ALL_PLACEHOLDER.sub(lambda _m: fill, base)
    elif _PLACEHOLDER.search(base):
        first = sanitize_segment(rest[0] if rest else own)
        base = _PLACEHOLDER.sub(lambda _m: first, base)
        if len(rest) > 1:
            base = "/".join(part for part in (base, "/".join(rest[1:])) if part)
    elif remainder:
        base = f"{base}/{remainder}"
    elif own:
        base = f"{base}/{own}"
    return sanitize_segment(base)
