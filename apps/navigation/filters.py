"""Visibility and access pruning of an assembled navigation tree."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .rows import TreeNode


def _normalize_role(role: str | None) -> str | None:
    value = (role or "").strip()
    return value or None


def is_visible(node: TreeNode) -> bool:
    return node.row.visible and node.row.published


def is_accessible(node: TreeNode, role: str | None) -> bool:
    required = _normalize_role(node.row.access_role)
    if required is None:
        return True
    return required == _normalize_role(role)


def filter_tree(nodes: Sequence[TreeNode], role: str | None = None) -> list[TreeNode]:
    """Drop hidden or role-restricted nodes; a dropped node takes its subtree with it."""

    kept: list[TreeNode] = []
    for node in nodes:
        if not is_visible(node) or not is_accessible(node, role):
            continue
        kept.append(replace(node, children=filter_tree(node.children, role)))
    return kept
