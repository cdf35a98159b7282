from __future__ import annotations

from django.test import SimpleTestCase

from apps.navigation.filters import filter_tree
from apps.navigation.rows import TreeNode

from .utils import make_row


def node(row_id, children=(), **values) -> TreeNode:
    row = make_row(row_id, **values)
    return TreeNode(group_id=row.effective_group_id, row=row, order=row.order, children=list(children))


def ids(nodes):
    return [(n.row.id, ids(n.children)) for n in nodes]


class FilterTreeTests(SimpleTestCase):
    def test_hidden_node_takes_its_subtree(self) -> None:
        tree = [node(1, children=[node(2, visible=False, children=[node(3)])]), node(4)]

        self.assertEqual(ids(filter_tree(tree)), [(1, []), (4, [])])

    def test_unpublished_node_is_dropped(self) -> None:
        self.assertEqual(filter_tree([node(1, published=False)]), [])

    def test_role_restricted_nodes(self) -> None:
        tree = [node(1, access_role="ADMIN", children=[node(2)]), node(3)]

        self.assertEqual(ids(filter_tree(tree)), [(3, [])])
        self.assertEqual(ids(filter_tree(tree, "EDITOR")), [(3, [])])
        self.assertEqual(ids(filter_tree(tree, "ADMIN")), [(1, [(2, [])]), (3, [])])

    def test_blank_access_role_is_public(self) -> None:
        self.assertEqual(ids(filter_tree([node(1, access_role="  ")])), [(1, [])])

    def test_input_tree_is_not_mutated(self) -> None:
        tree = [node(1, children=[node(2, visible=False)])]

        filter_tree(tree)

        self.assertEqual(len(tree[0].children), 1)
