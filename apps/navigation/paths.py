"""Public URL resolution for assembled navigation nodes."""

from __future__ import annotations

import logging
import re
from typing import Sequence, assert_never

from .models import PageKind
from .rows import ResolvedNode, TreeNode

logger = logging.getLogger("navigation.paths")

_CATCH_ALL_PLACEHOLDER = re.compile(r"\[\.\.\.[^\]]+\]")
_PLACEHOLDER = re.compile(r"\[[^\]]+\]")


def sanitize_segment(value: str | None) -> str:
    return (value or "").strip().strip("/")


def slug_segments(slug: str | None) -> list[str]:
    """Slug split on ``/``; older rows store a full path in the slug."""

    return [part.strip() for part in sanitize_segment(slug).split("/") if part.strip()]


def join_segments(*parts: str | None) -> str:
    segments: list[str] = []
    for part in parts:
        segments.extend(seg for seg in sanitize_segment(part).split("/") if seg)
    return "/".join(segments)


def has_placeholder(value: str) -> bool:
    return bool(_PLACEHOLDER.search(value))


def fill_placeholders(template: str, value: str) -> str:
    """Replace ``[...x]`` and ``[x]`` tokens with ``value`` (empty when unknown)."""

    filled = _CATCH_ALL_PLACEHOLDER.sub(lambda _m: value, template)
    return _PLACEHOLDER.sub(lambda _m: value, filled)


def route_base(raw: str | None, own_segments: Sequence[str]) -> str:
    """
    Route base for a node backed by ``routeOverride`` or ``routePath``.

    Placeholders receive the node's own slug path; without placeholders the
    slug path is appended under the base.
    """

    base = sanitize_segment(raw)
    own = "/".join(own_segments)
    if has_placeholder(base):
        if not own:
            logger.debug("nav_placeholder_without_slug base=%s", base)
        return join_segments(fill_placeholders(base, own))
    return join_segments(base, own)


def _label(node: TreeNode, own_segment: str) -> str:
    row = node.row
    return (row.nav_label or own_segment or row.external_url or "").strip()


def resolve_node(node: TreeNode, parent_segments: Sequence[str] = (), base: str | None = None) -> ResolvedNode:
    row = node.row
    segments = slug_segments(row.slug)
    own_segment = segments[-1] if segments else ""
    label = _label(node, own_segment)

    if sanitize_segment(row.route_override):
        new_base = route_base(row.route_override, segments)
        return ResolvedNode(
            label=label,
            href=f"/{new_base}",
            external=False,
            kind=row.kind,
            children=tuple(resolve_node(child, (), new_base) for child in node.children),
        )

    kind = PageKind(row.kind)
    if kind is PageKind.ROUTE:
        new_base = route_base(row.route_path, segments)
        return ResolvedNode(
            label=label,
            href=f"/{new_base}",
            external=False,
            kind=kind,
            children=tuple(resolve_node(child, (), new_base) for child in node.children),
        )
    if kind is PageKind.LINK:
        return ResolvedNode(
            label=label,
            href=row.external_url or None,
            external=bool(row.external_url),
            kind=kind,
            children=tuple(resolve_node(child, parent_segments, base) for child in node.children),
        )

    path = [*parent_segments, own_segment] if own_segment else list(parent_segments)
    children = tuple(resolve_node(child, path, base) for child in node.children)
    if kind is PageKind.FOLDER:
        return ResolvedNode(label=label, href=None, external=False, kind=kind, children=children)
    if kind is PageKind.PAGE:
        return ResolvedNode(
            label=label,
            href=f"/{join_segments(base, *path)}",
            external=False,
            kind=kind,
            children=children,
        )
    assert_never(kind)


def resolve_paths(nodes: Sequence[TreeNode]) -> list[ResolvedNode]:
    return [resolve_node(node) for node in nodes]
