"""Degraded two-level navigation built from ``LegacyNavigationItem`` rows."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .models import PageKind
from .rows import ResolvedNode


def _legacy_node(item: Mapping[str, Any], locale: str, children: tuple[ResolvedNode, ...] = ()) -> ResolvedNode:
    labels = item.get("labels") or {}
    slug = (item.get("slug") or "").strip()
    external_url = item.get("external_url") or None
    return ResolvedNode(
        label=str(labels.get(locale) or slug or external_url or ""),
        href=external_url or (f"/{slug}" if slug else None),
        external=bool(external_url),
        kind=PageKind.LINK if external_url else PageKind.PAGE,
        children=children,
    )


def build_legacy_tree(items: Sequence[Mapping[str, Any]], locale: str) -> list[ResolvedNode]:
    """Roots and their direct children only; deeper items are not rendered."""

    by_id = {item["id"]: item for item in items}
    children_of: dict[Any, list[Mapping[str, Any]]] = {}
    roots: list[Mapping[str, Any]] = []
    for item in items:
        parent_id = item.get("parent_id")
        if parent_id is not None and parent_id in by_id:
            children_of.setdefault(parent_id, []).append(item)
        else:
            roots.append(item)

    def sort_key(item: Mapping[str, Any]) -> tuple[int, Any]:
        return (item.get("order") or 0, item["id"])

    tree: list[ResolvedNode] = []
    for root in sorted(roots, key=sort_key):
        children = tuple(
            _legacy_node(child, locale) for child in sorted(children_of.get(root["id"], []), key=sort_key)
        )
        tree.append(_legacy_node(root, locale, children))
    return tree
