"""Inspect, invalidate or warm the navigation cache."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from apps.navigation import conf as nav_conf
from apps.navigation.cache import get_navigation_cache
from apps.navigation.services import invalidate_navigation_tree
from apps.navigation.tasks import warm_navigation_cache


class Command(BaseCommand):
    help = "Navigation cache operations: --show, --invalidate [--locale X], --warm."

    def add_arguments(self, parser):
        parser.add_argument("--show", action="store_true", help="Print the cache configuration and current version.")
        parser.add_argument("--invalidate", action="store_true", help="Bump the version token (all locales).")
        parser.add_argument("--locale", help="Locale whose public entry is also dropped eagerly.")
        parser.add_argument("--warm", action="store_true", help="Rebuild the public tree of every locale.")

    def handle(self, *args, **options):
        if not (options["show"] or options["invalidate"] or options["warm"]):
            raise CommandError("Pass at least one of --show, --invalidate, --warm.")

        if options["show"]:
            described = nav_conf.describe()
            self.stdout.write(f"locales: {', '.join(described.locales)} (default {described.default_locale})")
            self.stdout.write(f"shared cache alias: {described.cache_alias}")
            self.stdout.write(f"key prefix: {described.cache_prefix}")
            self.stdout.write(f"ttl: local={described.local_ttl}s shared={described.shared_ttl}s")
            self.stdout.write(f"version: {get_navigation_cache().current_version()}")

        if options["invalidate"]:
            version = invalidate_navigation_tree(options.get("locale"))
            self.stdout.write(self.style.SUCCESS(f"Navigation cache invalidated, version {version}."))

        if options["warm"]:
            locales = [options["locale"]] if options.get("locale") else None
            warmed = warm_navigation_cache(locales)
            for locale, roots in warmed.items():
                self.stdout.write(f"- {locale}: {roots} root item(s)")
