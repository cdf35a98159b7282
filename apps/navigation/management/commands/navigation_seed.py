"""Create navigation groups from a YAML tree.

Expected layout::

    items:
      - slug: uchilishteto
        nav_label: Училището
        children:
          - slug: istoriya
      - kind: LINK
        external_url: https://example.org
        nav_label: Partner
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.navigation.authoring import create_page_group
from apps.navigation.exceptions import AuthoringError
from apps.navigation.models import Page

_ITEM_FIELDS = ("slug", "external_url", "route_path", "route_override", "nav_label", "kind", "visible", "access_role")


class Command(BaseCommand):
    help = "Seed navigation pages in every configured locale from a YAML file."

    def add_arguments(self, parser):
        parser.add_argument("path", help="YAML file with a top-level 'items' list.")
        parser.add_argument("--replace", action="store_true", help="Delete existing pages before seeding.")

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"File not found: {path}")
        with path.open("r", encoding="utf-8") as handle:
            data: dict[str, Any] = yaml.safe_load(handle) or {}
        items = data.get("items") or []
        if not isinstance(items, list):
            raise CommandError("'items' must be a list")

        try:
            with transaction.atomic():
                if options["replace"]:
                    deleted, _ = Page.objects.all().delete()
                    self.stdout.write(f"deleted {deleted} existing row(s)")
                created = self._seed(items, parent_id=None)
        except AuthoringError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS(f"Seeded {created} navigation group(s)."))

    def _seed(self, items: list[dict[str, Any]], parent_id: int | None) -> int:
        created = 0
        for item in items:
            payload = {key: item[key] for key in _ITEM_FIELDS if key in item}
            payload["parent_id"] = parent_id
            group_id = create_page_group(payload)
            created += 1
            children = item.get("children") or []
            if children:
                anchor = Page.objects.filter(group_id=group_id).order_by("id").first()
                created += self._seed(children, parent_id=anchor.pk)
        return created
