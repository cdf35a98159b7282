"""Give every page without a group id a group of its own."""

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.navigation.authoring import schedule_invalidation
from apps.navigation.models import Page

BATCH_SIZE = 200


class Command(BaseCommand):
    help = "Backfill missing navigation group ids (each page becomes its own group)."

    def add_arguments(self, parser):
        parser.add_argument("--batch-size", type=int, default=BATCH_SIZE, help="Rows updated per transaction.")
        parser.add_argument("--dry-run", action="store_true", help="Only report how many rows are missing a group.")

    def handle(self, *args, **options):
        batch_size = max(1, options["batch_size"])
        total = Page.objects.count()
        missing = list(Page.objects.missing_group().order_by("id").values_list("id", flat=True))
        self.stdout.write(f"pages: {total}, missing group_id: {len(missing)}")
        if options["dry_run"] or not missing:
            return

        for start in range(0, len(missing), batch_size):
            chunk = missing[start : start + batch_size]
            with transaction.atomic():
                for pk in chunk:
                    Page.objects.filter(pk=pk).update(group_id=str(pk))
                schedule_invalidation()
            self.stdout.write(f"updated {min(start + batch_size, len(missing))}/{len(missing)}")
        self.stdout.write(self.style.SUCCESS("Group id backfill complete."))
