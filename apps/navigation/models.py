"""Database models for the site navigation tree."""

from __future__ import annotations

from django.db import models


class PageKind(models.TextChoices):
    PAGE = "PAGE", "Page"
    LINK = "LINK", "External link"
    FOLDER = "FOLDER", "Folder"
    ROUTE = "ROUTE", "Route-backed page"


class PageQuerySet(models.QuerySet):
    def for_locale(self, locale: str) -> "PageQuerySet":
        return self.filter(locale=locale)

    def in_group(self, group_id: str) -> "PageQuerySet":
        return self.filter(group_id=group_id)

    def missing_group(self) -> "PageQuerySet":
        return self.filter(models.Q(group_id__isnull=True) | models.Q(group_id=""))


class Page(models.Model):
    """
    One locale variant of a navigational entry.

    Rows sharing ``group_id`` are the same logical entry translated into each
    locale. ``parent`` always points at a row of the same locale.
    """

    group_id = models.CharField(max_length=64, blank=True, null=True, db_index=True)
    parent = models.ForeignKey(
        "self",
        related_name="children",
        on_delete=models.CASCADE,
        blank=True,
        null=True,
    )
    order = models.IntegerField(default=0)
    locale = models.CharField(max_length=10)
    slug = models.CharField(max_length=255, blank=True, null=True)
    external_url = models.URLField(max_length=500, blank=True, null=True)
    route_path = models.CharField(max_length=255, blank=True, null=True)
    route_override = models.CharField(max_length=255, blank=True, null=True)
    nav_label = models.CharField(max_length=255, blank=True, null=True)
    kind = models.CharField(max_length=16, choices=PageKind.choices, default=PageKind.PAGE)
    visible = models.BooleanField(default=True)
    access_role = models.CharField(max_length=64, blank=True, null=True)

    title = models.CharField(max_length=255, blank=True, default="")
    published = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PageQuerySet.as_manager()

    class Meta:
        ordering = ("locale", "order", "id")
        constraints = [
            models.UniqueConstraint(fields=("slug", "locale"), name="navigation_page_slug_locale_uniq"),
            models.UniqueConstraint(fields=("group_id", "locale"), name="navigation_page_group_locale_uniq"),
        ]
        indexes = [
            models.Index(fields=["locale", "parent"], name="navigation_locale_parent_idx"),
        ]
        verbose_name = "Navigation page"
        verbose_name_plural = "Navigation pages"

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"{self.nav_label or self.slug or self.external_url or self.pk} [{self.locale}]"


class LegacyNavigationItem(models.Model):
    """Flat navigation item kept for sites that never migrated to ``Page`` rows."""

    parent = models.ForeignKey(
        "self",
        related_name="children",
        on_delete=models.CASCADE,
        blank=True,
        null=True,
    )
    slug = models.CharField(max_length=255, blank=True, default="")
    labels = models.JSONField(default=dict, blank=True)  # {locale: label}
    external_url = models.URLField(max_length=500, blank=True, null=True)
    order = models.IntegerField(default=0)

    class Meta:
        ordering = ("order", "id")
        verbose_name = "Legacy navigation item"
        verbose_name_plural = "Legacy navigation items"

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return self.slug or str(self.pk)
