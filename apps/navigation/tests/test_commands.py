from __future__ import annotations

import tempfile
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from apps.navigation.cache import get_navigation_cache, reset_navigation_cache
from apps.navigation.models import Page, PageKind
from apps.navigation.tasks import warm_navigation_cache

SEED_YAML = """
items:
  - slug: uchilishteto
    nav_label: Училището
    children:
      - slug: istoriya
      - slug: ekip
  - kind: LINK
    external_url: https://example.org
    nav_label: Partner
"""


class CommandTestCase(TestCase):
    def setUp(self) -> None:
        cache.clear()
        reset_navigation_cache()
        self.addCleanup(reset_navigation_cache)
        self.on_commit_patch = patch("apps.navigation.authoring.transaction.on_commit", lambda fn: fn())
        self.on_commit_patch.start()
        self.addCleanup(self.on_commit_patch.stop)

    def call(self, *args) -> str:
        out = StringIO()
        call_command(*args, stdout=out)
        return out.getvalue()


class BackfillGroupsCommandTests(CommandTestCase):
    def test_missing_group_ids_are_backfilled_in_batches(self) -> None:
        pages = [Page.objects.create(locale="bg", slug=f"p{index}") for index in range(5)]
        Page.objects.create(locale="bg", slug="grouped", group_id="kept")

        output = self.call("navigation_backfill_groups", "--batch-size", "2")

        self.assertIn("missing group_id: 5", output)
        self.assertIn("updated 5/5", output)
        for page in pages:
            page.refresh_from_db()
            self.assertEqual(page.group_id, str(page.pk))
        self.assertTrue(Page.objects.filter(group_id="kept").exists())

    def test_dry_run_writes_nothing(self) -> None:
        Page.objects.create(locale="bg", slug="p")

        self.call("navigation_backfill_groups", "--dry-run")

        self.assertTrue(Page.objects.missing_group().exists())


class SeedCommandTests(CommandTestCase):
    def _yaml(self, content: str) -> str:
        handle = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False, encoding="utf-8")
        with handle:
            handle.write(content)
        self.addCleanup(Path(handle.name).unlink)
        return handle.name

    def test_seed_creates_groups_in_every_locale(self) -> None:
        output = self.call("navigation_seed", self._yaml(SEED_YAML))

        self.assertIn("Seeded 4 navigation group(s).", output)
        self.assertEqual(Page.objects.count(), 8)
        school_en = Page.objects.get(slug="uchilishteto", locale="en")
        self.assertEqual(
            list(Page.objects.filter(parent=school_en).order_by("order").values_list("slug", flat=True)),
            ["istoriya", "ekip"],
        )
        link = Page.objects.get(kind=PageKind.LINK, locale="bg")
        self.assertEqual(link.order, 1)

    def test_replace_drops_existing_rows(self) -> None:
        Page.objects.create(locale="bg", slug="old", group_id="old")

        self.call("navigation_seed", self._yaml(SEED_YAML), "--replace")

        self.assertFalse(Page.objects.filter(slug="old").exists())

    def test_invalid_items(self) -> None:
        with self.assertRaises(CommandError):
            self.call("navigation_seed", self._yaml("items:\n  - kind: ROUTE\n    slug: x\n"))
        with self.assertRaises(CommandError):
            self.call("navigation_seed", self._yaml("items: nope\n"))
        with self.assertRaises(CommandError):
            self.call("navigation_seed", "/does/not/exist.yaml")
        self.assertFalse(Page.objects.exists())


class CacheCommandTests(CommandTestCase):
    def test_requires_an_action(self) -> None:
        with self.assertRaises(CommandError):
            self.call("navigation_cache")

    def test_show_and_invalidate(self) -> None:
        before = get_navigation_cache().current_version()

        output = self.call("navigation_cache", "--show", "--invalidate")

        self.assertIn("locales: bg, en (default bg)", output)
        self.assertIn(f"version: {before}", output)
        self.assertNotEqual(get_navigation_cache().current_version(), before)

    def test_warm(self) -> None:
        Page.objects.create(locale="bg", slug="home", group_id="home")

        output = self.call("navigation_cache", "--warm")

        self.assertIn("- bg: 1 root item(s)", output)
        self.assertIsNotNone(get_navigation_cache().get("en"))


class WarmTaskTests(CommandTestCase):
    def test_warm_task_populates_every_locale(self) -> None:
        Page.objects.create(locale="bg", slug="home", group_id="home")

        warmed = warm_navigation_cache.delay().get()

        self.assertEqual(warmed, {"bg": 1, "en": 1})
        self.assertEqual(get_navigation_cache().get("bg").items[0].href, "/home")

    def test_unknown_locales_collapse_to_default(self) -> None:
        warmed = warm_navigation_cache(["xx", "bg"])

        self.assertEqual(warmed, {"bg": 0})
