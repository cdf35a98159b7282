"""Assemble locale-complete rows into one tree node per group."""

from __future__ import annotations

import logging
from typing import Sequence

from .rows import PageRow, TreeNode

logger = logging.getLogger("navigation.assembly")


def _group_rows(rows: Sequence[PageRow]) -> dict[str, list[PageRow]]:
    groups: dict[str, list[PageRow]] = {}
    for row in rows:
        groups.setdefault(row.effective_group_id, []).append(row)
    return groups


def _pick_representative(members: Sequence[PageRow], locale: str, default_locale: str) -> PageRow:
    for wanted in (locale, default_locale):
        for row in members:
            if row.locale == wanted:
                return row
    return members[0]


def _canonical_order(members: Sequence[PageRow], default_locale: str, fallback: int) -> int:
    for row in members:
        if row.locale == default_locale:
            return row.order
    return members[0].order if members else fallback


def _make_node(gid: str, members: Sequence[PageRow], locale: str, default_locale: str) -> TreeNode:
    representative = _pick_representative(members, locale, default_locale)
    node = TreeNode(
        group_id=gid,
        row=representative,
        order=_canonical_order(members, default_locale, representative.order),
    )
    for row in members:
        if row.locale in node.ids_by_locale:
            continue
        node.ids_by_locale[row.locale] = row.id
        node.slug_by_locale[row.locale] = row.slug
        node.label_by_locale[row.locale] = row.nav_label
        node.route_override_by_locale[row.locale] = row.route_override
        node.route_path_by_locale[row.locale] = row.route_path
        node.external_url_by_locale[row.locale] = row.external_url
    return node


def break_cycles(parent_of: dict[str, str | None], order: Sequence[str]) -> list[str]:
    """
    Drop parent links that close a cycle, in place.

    Each group's ancestor chain is walked while tracking the groups on the
    current path; the group whose parent is already on the path is promoted to
    root. Returns the promoted group ids.
    """

    promoted: list[str] = []
    settled: set[str] = set()
    for start in order:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start
        while current is not None and current not in settled:
            if current in on_path:
                breaker = path[-1]
                parent_of[breaker] = None
                promoted.append(breaker)
                break
            path.append(current)
            on_path.add(current)
            current = parent_of.get(current)
        settled.update(path)
    return promoted


def _sort_siblings(nodes: list[TreeNode]) -> None:
    nodes.sort(key=lambda node: (node.order, node.group_id))
    for node in nodes:
        _sort_siblings(node.children)


def build_grouped_tree(
    rows: Sequence[PageRow],
    locale: str,
    *,
    default_locale: str,
) -> list[TreeNode]:
    """Return the root nodes of the tree for ``locale``, one node per group."""

    if not rows:
        return []
    by_id = {row.id: row for row in rows}
    groups = _group_rows(rows)

    # First pass: one node per group, no links yet.
    nodes = {gid: _make_node(gid, members, locale, default_locale) for gid, members in groups.items()}

    parent_of: dict[str, str | None] = {}
    for gid, node in nodes.items():
        parent_row = by_id.get(node.row.parent_id) if node.row.parent_id is not None else None
        parent_gid = parent_row.effective_group_id if parent_row is not None else None
        parent_of[gid] = parent_gid if parent_gid in nodes else None

    walk_order = sorted(nodes, key=lambda gid: (nodes[gid].order, gid))
    for gid in break_cycles(parent_of, walk_order):
        logger.warning("nav_parent_cycle_promoted group=%s locale=%s", gid, locale)

    # Second pass: attach children to their resolved parent.
    roots: list[TreeNode] = []
    for gid, node in nodes.items():
        parent_gid = parent_of[gid]
        if parent_gid is None:
            roots.append(node)
        else:
            nodes[parent_gid].children.append(node)

    _sort_siblings(roots)
    return roots
