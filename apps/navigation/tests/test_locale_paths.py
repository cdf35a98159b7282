from __future__ import annotations

from django.test import SimpleTestCase

from apps.navigation.locale_paths import resolve_route_alias, translate_locale_path
from apps.navigation.models import PageKind

from .utils import make_row


def rows():
    return [
        make_row(1, "bg", group_id="school", slug="uchilishteto"),
        make_row(2, "en", group_id="school", slug="school"),
        make_row(3, "bg", group_id="team", slug="ekip", parent_id=1),
        make_row(4, "en", group_id="team", slug="team", parent_id=2),
        make_row(5, "bg", group_id="news", slug="novini", kind=PageKind.ROUTE, route_path="news/[...slug]", route_override="novini"),
        make_row(6, "en", group_id="news", slug="news-en", kind=PageKind.ROUTE, route_path="news/[...slug]", route_override="/news/"),
        make_row(7, "bg", group_id="only-bg", slug="samo"),
    ]


class TranslateLocalePathTests(SimpleTestCase):
    def test_hierarchical_match(self) -> None:
        self.assertEqual(translate_locale_path(rows(), "bg", "en", "/uchilishteto/ekip/"), "school/team")
        self.assertEqual(translate_locale_path(rows(), "en", "bg", "school/team"), "uchilishteto/ekip")

    def test_alias_match_keeps_remainder(self) -> None:
        self.assertEqual(translate_locale_path(rows(), "bg", "en", "novini/2024/hello"), "news/2024/hello")

    def test_empty_path(self) -> None:
        self.assertEqual(translate_locale_path(rows(), "bg", "en", "/"), "")

    def test_no_equivalent(self) -> None:
        self.assertIsNone(translate_locale_path(rows(), "bg", "en", "samo"))
        self.assertIsNone(translate_locale_path(rows(), "bg", "en", "uchilishteto/missing"))

    def test_parent_cycle_is_bounded(self) -> None:
        looped = [
            make_row(1, "bg", group_id="a", slug="a"),
            make_row(2, "en", group_id="a", slug="x", parent_id=3),
            make_row(3, "en", group_id="b", slug="y", parent_id=2),
        ]

        target = translate_locale_path(looped, "bg", "en", "a")

        self.assertEqual(len(target.split("/")), 32)


class RouteAliasTests(SimpleTestCase):
    def test_catch_all_takes_remainder(self) -> None:
        self.assertEqual(resolve_route_alias(rows(), "bg", "novini/2024/hello"), "news/2024/hello")

    def test_catch_all_falls_back_to_own_slug(self) -> None:
        self.assertEqual(resolve_route_alias(rows(), "bg", "novini"), "news/novini")

    def test_single_placeholder_and_tail(self) -> None:
        data = [make_row(1, "bg", slug="blog", kind=PageKind.ROUTE, route_path="pages/blog/[slug]", route_override="blog")]

        self.assertEqual(resolve_route_alias(data, "bg", "blog/first/comments"), "blog/first/comments")
        self.assertEqual(resolve_route_alias(data, "bg", "blog"), "blog/blog")

    def test_static_base_appends(self) -> None:
        data = [make_row(1, "bg", slug="events", kind=PageKind.ROUTE, route_path="app/calendar", route_override="sabitiya")]

        self.assertEqual(resolve_route_alias(data, "bg", "sabitiya/may"), "calendar/may")
        self.assertEqual(resolve_route_alias(data, "bg", "sabitiya"), "calendar/events")

    def test_unknown_alias(self) -> None:
        self.assertIsNone(resolve_route_alias(rows(), "bg", "nothing"))
        self.assertIsNone(resolve_route_alias(rows(), "", "novini"))
        self.assertIsNone(resolve_route_alias(rows(), "en", "novini"))
